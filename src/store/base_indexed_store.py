# src/store/base_indexed_store.py — v1
"""Abstract keyed container with declared secondary indices.

Items are stored under a string key derived from their key-part attributes.
Secondary lookups go through indices declared at construction time; querying
any other attribute is a programming error and raises.
"""

from __future__ import annotations

import dataclasses
import json
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterator, Sequence, TypeVar

from pydantic import BaseModel

from scaffoldkit.store.keys import item_key_parts

T = TypeVar("T")


class IndexedStoreError(Exception):
    """Base class for indexed store errors."""


class DuplicateKeyError(IndexedStoreError):
    """Raised when an item's key is already held by a different item."""

    def __init__(self, key: str, existing: Any, new: Any) -> None:
        self.key = key
        self.existing = existing
        self.new = new
        super().__init__(
            "The item you are trying to add has the same key as an existing item\n"
            f"\n    key: {key!r}\n"
            "\n    Existing item -----------------------------------\n"
            f"{_indent(_serialize(existing))}\n"
            "\n    New item ----------------------------------------\n"
            f"{_indent(_serialize(new))}\n"
        )


class UndeclaredIndexError(IndexedStoreError):
    """Raised when find_by() targets an attribute that is not indexed."""

    def __init__(self, attribute: str, declared: Sequence[str]) -> None:
        self.attribute = attribute
        self.declared = list(declared)
        super().__init__(
            f'The attribute "{attribute}" is not indexed in this store. '
            "Declare it in `extra_indices` when building the store. "
            f"Current indices: [{', '.join(self.declared)}]"
        )


class BaseIndexedStore(ABC, Generic[T]):
    """Keyed item container with O(1) primary and secondary lookups.

    Lookups come in three explicit flavours (``*_by_item``, ``*_by_key``,
    ``*_by_key_parts``). ``find``/``exists``/``remove`` are thin wrappers
    dispatching on argument shape: several arguments are key parts, a single
    ``str`` is a key, anything else is an item.
    """

    def __init__(
        self,
        key_parts: Sequence[str],
        extra_indices: Sequence[str] = (),
    ) -> None:
        if not key_parts:
            raise ValueError("An indexed store needs at least one key part")
        self._key_parts: tuple[str, ...] = tuple(key_parts)
        self._items: dict[str, T] = {}
        self._indices: dict[str, dict[Any, list[T]]] = {}
        # Values each item was indexed under, by key; removal scrubs these buckets.
        self._indexed_values: dict[str, dict[str, Any]] = {}
        for attribute in extra_indices:
            self._create_index(attribute)

    @abstractmethod
    def make_key(self, *parts: Any) -> str:
        """Build a key from ordered key-part values."""

    @property
    def key_parts(self) -> tuple[str, ...]:
        return self._key_parts

    @property
    def indexed_attributes(self) -> list[str]:
        return list(self._indices)

    def key_for(self, item: T) -> str:
        """Compute the key of an item from its key-part attributes."""
        return self.make_key(*item_key_parts(item, self._key_parts))

    # --- Mutation ---

    def add(self, item: T) -> None:
        """Insert an item and index it.

        Re-adding the very same object is a no-op.

        Raises:
            DuplicateKeyError: If a different item already holds the key.
            TypeError: If the item is a ``str`` (indistinguishable from a key).
        """
        if isinstance(item, str):
            raise TypeError("Indexed store items cannot be plain strings")
        key = self.key_for(item)
        existing = self._items.get(key)
        if existing is not None:
            if existing is item:
                return
            raise DuplicateKeyError(key, existing, item)

        self._items[key] = item
        indexed: dict[str, Any] = {}
        for attribute, index in self._indices.items():
            value = self._index_item(item, attribute, index)
            if value is not None:
                indexed[attribute] = value
        self._indexed_values[key] = indexed

    def remove_by_key(self, key: str) -> T | None:
        """Remove and return the item stored under ``key``, if any."""
        item = self._items.pop(key, None)
        if item is None:
            return None

        for attribute, value in self._indexed_values.pop(key, {}).items():
            index = self._indices[attribute]
            bucket = index.get(value)
            if not bucket:
                continue
            remaining = [i for i in bucket if i is not item]
            if remaining:
                index[value] = remaining
            else:
                del index[value]
        return item

    def remove_by_item(self, item: T) -> T | None:
        return self.remove_by_key(self.key_for(item))

    def remove_by_key_parts(self, *parts: Any) -> T | None:
        return self.remove_by_key(self.make_key(*parts))

    # --- Lookup ---

    def find_by_key(self, key: str) -> T | None:
        return self._items.get(key)

    def find_by_item(self, item: T) -> T | None:
        return self._items.get(self.key_for(item))

    def find_by_key_parts(self, *parts: Any) -> T | None:
        return self._items.get(self.make_key(*parts))

    def exists_by_key(self, key: str) -> bool:
        return key in self._items

    def exists_by_item(self, item: T) -> bool:
        return self.key_for(item) in self._items

    def exists_by_key_parts(self, *parts: Any) -> bool:
        return self.make_key(*parts) in self._items

    def find_by(self, attribute: str, value: Any) -> list[T]:
        """Return the items whose ``attribute`` equals ``value``.

        Raises:
            UndeclaredIndexError: If ``attribute`` was never declared.
        """
        index = self._indices.get(attribute)
        if index is None:
            raise UndeclaredIndexError(attribute, list(self._indices))
        return list(index.get(value, []))

    def list_all(self) -> list[T]:
        """All items in insertion order."""
        return list(self._items.values())

    # --- Convenience wrappers ---

    def find(self, *args: Any) -> T | None:
        return self._dispatch("find", args)

    def exists(self, *args: Any) -> bool:
        return self._dispatch("exists", args)

    def remove(self, *args: Any) -> T | None:
        return self._dispatch("remove", args)

    def _dispatch(self, operation: str, args: tuple[Any, ...]) -> Any:
        if not args:
            raise TypeError(f"{type(self).__name__}.{operation}() needs an item, a key or key parts")
        if len(args) > 1:
            return getattr(self, f"{operation}_by_key_parts")(*args)
        (arg,) = args
        if isinstance(arg, str):
            return getattr(self, f"{operation}_by_key")(arg)
        return getattr(self, f"{operation}_by_item")(arg)

    # --- Dunder helpers ---

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self.list_all())

    # --- Internals ---

    def _create_index(self, attribute: str) -> None:
        if attribute in self._indices:
            return
        index: dict[Any, list[T]] = {}
        for key, item in self._items.items():
            value = self._index_item(item, attribute, index)
            if value is not None:
                self._indexed_values.setdefault(key, {})[attribute] = value
        self._indices[attribute] = index

    @staticmethod
    def _index_item(item: T, attribute: str, index: dict[Any, list[T]]) -> Any:
        value = getattr(item, attribute, None)
        if value is not None:
            index.setdefault(value, []).append(item)
        return value


def _serialize(item: Any) -> str:
    if isinstance(item, BaseModel):
        return item.model_dump_json(indent=4)
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return json.dumps(dataclasses.asdict(item), indent=4, default=str)
    return repr(item)


def _indent(text: str, prefix: str = "    ") -> str:
    return "\n".join(prefix + line for line in text.splitlines())
