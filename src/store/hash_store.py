# src/store/hash_store.py — v1
"""Indexed store keyed by a SHA-256 digest of the key-part values."""

from __future__ import annotations

from typing import Any

from scaffoldkit.store.base_indexed_store import BaseIndexedStore, T
from scaffoldkit.store.keys import hash_key_parts


class HashIndexedStore(BaseIndexedStore[T]):
    """Store with fixed-length opaque keys.

    Useful when key parts are long (paths, URLs) or may contain ``::``.
    """

    def make_key(self, *parts: Any) -> str:
        return hash_key_parts(*parts)
