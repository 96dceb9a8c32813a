# tests/unit/store/test_indexed_store.py — v1
"""Tests for store/ — base indexed store, property and hash key variants."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from scaffoldkit.store import (
    BaseIndexedStore,
    DuplicateKeyError,
    HashIndexedStore,
    PropertyIndexedStore,
    UndeclaredIndexError,
)
from scaffoldkit.store.keys import hash_key_parts, join_key_parts


@dataclass
class Person:
    first: str
    last: str
    city: str
    team: str | None = None


def _store() -> PropertyIndexedStore[Person]:
    return PropertyIndexedStore(("first", "last"), extra_indices=("city", "team"))


class TestKeys:
    def test_join(self):
        assert join_key_parts("init", "new") == "init::new"

    def test_hash_is_sha256_of_joined(self):
        key = hash_key_parts("init", "new")
        assert len(key) == 64
        assert key == hash_key_parts("init", "new")
        assert key != hash_key_parts("new", "init")


class TestBaseIndexedStore:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseIndexedStore(("a",))  # type: ignore[abstract]

    def test_requires_key_parts(self):
        with pytest.raises(ValueError):
            PropertyIndexedStore(())


class TestAdd:
    def test_add_and_find_by_key(self):
        store = _store()
        ada = Person("Ada", "Lovelace", "London")
        store.add(ada)
        assert store.find_by_key("Ada::Lovelace") is ada
        assert len(store) == 1

    def test_duplicate_key_distinct_item_fails(self):
        store = _store()
        store.add(Person("Ada", "Lovelace", "London"))
        with pytest.raises(DuplicateKeyError) as exc_info:
            store.add(Person("Ada", "Lovelace", "Paris"))
        message = str(exc_info.value)
        assert "London" in message
        assert "Paris" in message
        assert exc_info.value.key == "Ada::Lovelace"

    def test_readd_same_item_is_noop(self):
        store = _store()
        ada = Person("Ada", "Lovelace", "London")
        store.add(ada)
        store.add(ada)
        assert len(store) == 1
        assert store.find_by("city", "London") == [ada]

    def test_string_item_rejected(self):
        with pytest.raises(TypeError):
            _store().add("Ada::Lovelace")  # type: ignore[arg-type]


class TestLookup:
    def setup_method(self):
        self.store = _store()
        self.ada = Person("Ada", "Lovelace", "London", team="math")
        self.alan = Person("Alan", "Turing", "London", team="math")
        self.grace = Person("Grace", "Hopper", "New York")
        for p in (self.ada, self.alan, self.grace):
            self.store.add(p)

    def test_explicit_variants(self):
        assert self.store.find_by_item(Person("Ada", "Lovelace", "x")) is self.ada
        assert self.store.find_by_key_parts("Alan", "Turing") is self.alan
        assert self.store.exists_by_key("Grace::Hopper")
        assert not self.store.exists_by_key_parts("Grace", "Kelly")

    def test_wrapper_dispatch(self):
        assert self.store.find("Ada", "Lovelace") is self.ada
        assert self.store.find("Ada::Lovelace") is self.ada
        assert self.store.find(self.grace) is self.grace
        assert self.store.exists(self.alan)
        assert not self.store.exists("nobody")

    def test_wrapper_without_arguments(self):
        with pytest.raises(TypeError):
            self.store.find()

    def test_find_by_declared_index(self):
        londoners = self.store.find_by("city", "London")
        assert {p.first for p in londoners} == {"Ada", "Alan"}
        assert self.store.find_by("city", "Tokyo") == []

    def test_none_attribute_not_indexed(self):
        assert self.store.find_by("team", None) == []

    def test_find_by_undeclared_index_fails(self):
        with pytest.raises(UndeclaredIndexError, match="last"):
            self.store.find_by("last", "Hopper")

    def test_find_by_undeclared_index_fails_even_when_empty(self):
        with pytest.raises(UndeclaredIndexError):
            _store().find_by("first", "Ada")

    def test_find_by_returns_copy(self):
        self.store.find_by("city", "London").clear()
        assert len(self.store.find_by("city", "London")) == 2

    def test_list_all_insertion_order(self):
        assert self.store.list_all() == [self.ada, self.alan, self.grace]


class TestRemove:
    def test_remove_scrubs_every_index(self):
        store = _store()
        ada = Person("Ada", "Lovelace", "London", team="math")
        alan = Person("Alan", "Turing", "London", team="math")
        store.add(ada)
        store.add(alan)

        removed = store.remove("Ada", "Lovelace")

        assert removed is ada
        assert not store.exists("Ada::Lovelace")
        assert store.find_by("city", "London") == [alan]
        assert store.find_by("team", "math") == [alan]

    def test_remove_last_item_drops_bucket(self):
        store = _store()
        grace = Person("Grace", "Hopper", "New York", team="navy")
        store.add(grace)
        store.remove(grace)
        assert store.find_by("city", "New York") == []
        assert store.find_by("team", "navy") == []
        assert all(not index for index in store._indices.values())

    def test_remove_after_indexed_attribute_changed(self):
        store = _store()
        ada = Person("Ada", "Lovelace", "London", team="math")
        store.add(ada)
        ada.city = "Paris"
        ada.team = None

        store.remove("Ada", "Lovelace")

        assert store.find_by("city", "London") == []
        assert store.find_by("team", "math") == []
        assert all(not index for index in store._indices.values())

    def test_index_declared_after_add_is_scrubbed(self):
        store = PropertyIndexedStore(("first", "last"))
        ada = Person("Ada", "Lovelace", "London")
        store.add(ada)
        store._create_index("city")
        ada.city = "Paris"
        store.remove(ada)
        assert store.find_by("city", "London") == []

    def test_remove_missing_returns_none(self):
        assert _store().remove_by_key("nobody") is None

    def test_readd_after_remove(self):
        store = _store()
        store.add(Person("Ada", "Lovelace", "London"))
        store.remove_by_key_parts("Ada", "Lovelace")
        replacement = Person("Ada", "Lovelace", "Paris")
        store.add(replacement)
        assert store.find_by("city", "Paris") == [replacement]
        assert store.find_by("city", "London") == []


class TestHashIndexedStore:
    def test_keys_are_digests(self):
        store: HashIndexedStore[Person] = HashIndexedStore(("first", "last"), ("city",))
        ada = Person("Ada", "Lovelace", "London")
        store.add(ada)
        assert store.key_for(ada) == hash_key_parts("Ada", "Lovelace")
        assert store.find("Ada", "Lovelace") is ada
        assert store.find(hash_key_parts("Ada", "Lovelace")) is ada
        assert store.find("Ada::Lovelace") is None

    def test_duplicate_detection(self):
        store: HashIndexedStore[Person] = HashIndexedStore(("first", "last"))
        store.add(Person("Ada", "Lovelace", "London"))
        with pytest.raises(DuplicateKeyError):
            store.add(Person("Ada", "Lovelace", "London"))
