# src/store/keys.py — v1
"""Key functions for indexed stores.

A key is always a ``str`` so it can never be confused with a stored item.
"""

from __future__ import annotations

import hashlib
from typing import Any, Iterable

KEY_SEPARATOR = "::"


def join_key_parts(*parts: Any) -> str:
    """Join ordered key-part values with ``::`` (e.g. ``init::new``)."""
    return KEY_SEPARATOR.join(str(p) for p in parts)


def hash_key_parts(*parts: Any) -> str:
    """SHA-256 hex digest of the ``::``-joined key-part values."""
    return hashlib.sha256(join_key_parts(*parts).encode("utf-8")).hexdigest()


def item_key_parts(item: Any, attributes: Iterable[str]) -> tuple[Any, ...]:
    """Read the key-part attribute values of an item, in order."""
    return tuple(getattr(item, attr) for attr in attributes)
