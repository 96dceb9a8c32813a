"""Generic keyed containers with declared secondary indices."""

from scaffoldkit.store.base_indexed_store import (
    BaseIndexedStore,
    DuplicateKeyError,
    IndexedStoreError,
    UndeclaredIndexError,
)
from scaffoldkit.store.hash_store import HashIndexedStore
from scaffoldkit.store.property_store import PropertyIndexedStore

__all__ = [
    "BaseIndexedStore",
    "DuplicateKeyError",
    "HashIndexedStore",
    "IndexedStoreError",
    "PropertyIndexedStore",
    "UndeclaredIndexError",
]
