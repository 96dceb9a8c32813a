# src/namespace/template_store.py — v1
"""Typed stores for generators and actions.

Both are indexed by ``name`` and ``path`` so that listing and reverse lookup
(which action lives at this path?) stay O(1).
"""

from __future__ import annotations

from typing import Sequence

from scaffoldkit.namespace.models import Action, Generator
from scaffoldkit.store.base_indexed_store import T
from scaffoldkit.store.property_store import PropertyIndexedStore

_FOLDER_INDICES = ("name", "path")


class IndexedFolderStore(PropertyIndexedStore[T]):
    """Store of folder-backed records carrying ``name`` and ``path``."""

    def __init__(self, key_parts: Sequence[str]) -> None:
        super().__init__(key_parts, extra_indices=_FOLDER_INDICES)

    def find_by_name(self, name: str) -> list[T]:
        return self.find_by("name", name)

    def find_by_path(self, path: str) -> list[T]:
        return self.find_by("path", path)


class GeneratorStore(IndexedFolderStore[Generator]):
    """Generators keyed by name."""

    def __init__(self) -> None:
        super().__init__(("name",))


class ActionStore(IndexedFolderStore[Action]):
    """Actions keyed by ``generator_name::name``."""

    def __init__(self) -> None:
        super().__init__(("generator_name", "name"))
        self._create_index("generator_name")

    def find_action(self, generator_name: str, action_name: str) -> Action | None:
        return self.find_by_key_parts(generator_name, action_name)

    def for_generator(self, generator_name: str) -> list[Action]:
        return self.find_by("generator_name", generator_name)


class TemplateStore:
    """Generators and actions discovered by one loader run.

    Owned by whoever called the loader and passed to consumers explicitly;
    two stores never share state.
    """

    def __init__(self) -> None:
        self.generators = GeneratorStore()
        self.actions = ActionStore()

    def find_action(self, generator_name: str, action_name: str) -> Action | None:
        return self.actions.find_action(generator_name, action_name)
