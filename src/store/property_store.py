# src/store/property_store.py — v1
"""Indexed store keyed by the readable ``::``-joined key-part values."""

from __future__ import annotations

from typing import Any

from scaffoldkit.store.base_indexed_store import BaseIndexedStore, T
from scaffoldkit.store.keys import join_key_parts


class PropertyIndexedStore(BaseIndexedStore[T]):
    """Store whose keys look like ``generator::action``."""

    def make_key(self, *parts: Any) -> str:
        return join_key_parts(*parts)
