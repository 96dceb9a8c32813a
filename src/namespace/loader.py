# src/namespace/loader.py — v1
"""Build the generator/action namespace from an ordered list of template roots.

Layout of a template root::

    <root>/<generator>/<action>[.ext]

A generator directory may carry a ``generator.yml`` manifest listing its
actions explicitly; otherwise every entry is an action, with recognized
source extensions stripped from the name.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import yaml

from scaffoldkit.namespace.models import (
    Action,
    ConflictStrategy,
    Generator,
    TemplateRoot,
)
from scaffoldkit.namespace.template_store import TemplateStore

logger = logging.getLogger(__name__)

MANIFEST_NAMES = ("generator.yml", "generator.yaml")

_SOURCE_EXTENSION = re.compile(r"\.([cm]?[jt]sx?|py)$")
_IGNORED_ENTRIES = {"__pycache__"}


class ActionConflictError(Exception):
    """Raised under ConflictStrategy.FAIL when two roots define one action."""

    def __init__(self, key: str, existing_path: str, new_path: str) -> None:
        self.key = key
        self.existing_path = existing_path
        self.new_path = new_path
        super().__init__(
            f'Action conflict: "{key}" defined by {new_path} was already '
            f"defined by {existing_path}.\n\n"
            "You are seeing this error because the conflict strategy is set to "
            "'fail'. Set it to:\n"
            "  - 'override' to keep the action defined last\n"
            "  - 'skip' to keep the action that appears first"
        )


class GeneratorManifestError(Exception):
    """Raised when a generator manifest cannot be used."""


def strip_source_extension(filename: str) -> str:
    """``new.ts`` -> ``new``; names without a source extension are unchanged."""
    return _SOURCE_EXTENSION.sub("", filename)


def load_generators(
    roots: Iterable[TemplateRoot | str | Path],
    conflict_strategy: ConflictStrategy = ConflictStrategy.FAIL,
) -> TemplateStore:
    """Discover generators under each root, in order, into a fresh store.

    Args:
        roots: Template roots, processed in the order given.
        conflict_strategy: Policy for actions defined by more than one root.

    Returns:
        A new TemplateStore owned by the caller.

    Raises:
        ActionConflictError: Under FAIL, on the first conflicting action.
        GeneratorManifestError: If a generator manifest is malformed.
    """
    strategy = ConflictStrategy(conflict_strategy)
    store = TemplateStore()

    for root in roots:
        root_path = Path(root.path if isinstance(root, TemplateRoot) else root)
        if not root_path.is_dir():
            logger.warning("Skipping template root %s: not a directory", root_path)
            continue
        _load_root(root_path, strategy, store)

    for generator in store.generators.list_all():
        generator.actions = store.actions.for_generator(generator.name)

    logger.debug(
        "Loaded %d generators / %d actions", len(store.generators), len(store.actions)
    )
    return store


def available_actions(store: TemplateStore) -> dict[str, list[str]]:
    """Map generator name -> sorted action names."""
    result: dict[str, list[str]] = {}
    for action in store.actions.list_all():
        result.setdefault(action.generator_name, []).append(action.name)
    return {name: sorted(actions) for name, actions in sorted(result.items())}


def _load_root(root_path: Path, strategy: ConflictStrategy, store: TemplateStore) -> None:
    for generator_dir in sorted(p for p in root_path.iterdir() if p.is_dir()):
        if _is_ignored(generator_dir.name):
            continue
        generator = _read_generator(generator_dir)
        _register_actions(generator, strategy, store)
        _register_generator(generator, strategy, store)


def _read_generator(generator_dir: Path) -> Generator:
    generator_name = generator_dir.name
    generator_path = str(generator_dir)

    action_names = _manifest_actions(generator_dir)
    if action_names is None:
        action_names = [
            strip_source_extension(entry.name)
            for entry in sorted(generator_dir.iterdir())
            if not _is_ignored(entry.name) and entry.name not in MANIFEST_NAMES
        ]

    # "new" and "new.ts" name the same action
    action_names = list(dict.fromkeys(action_names))
    actions = [
        Action(
            name=name,
            path=str(generator_dir / name),
            generator_name=generator_name,
            generator_path=generator_path,
        )
        for name in action_names
    ]
    return Generator(name=generator_name, path=generator_path, actions=actions)


def _manifest_actions(generator_dir: Path) -> list[str] | None:
    for manifest_name in MANIFEST_NAMES:
        manifest = generator_dir / manifest_name
        if manifest.is_file():
            break
    else:
        return None

    try:
        data = yaml.safe_load(manifest.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise GeneratorManifestError(f"Invalid YAML in {manifest}: {exc}") from exc

    actions = data.get("actions") if isinstance(data, dict) else None
    if actions is None:
        return None
    if not isinstance(actions, list) or not all(isinstance(a, str) and a for a in actions):
        raise GeneratorManifestError(
            f"{manifest}: 'actions' must be a list of action names"
        )
    return actions


def _register_actions(
    generator: Generator, strategy: ConflictStrategy, store: TemplateStore
) -> None:
    for action in generator.actions:
        existing = store.actions.find_by_item(action)
        if existing is None:
            store.actions.add(action)
            continue

        if existing.generator_path == generator.path:
            # Same generator seen twice: idempotent reload.
            continue

        key = store.actions.key_for(action)
        if strategy is ConflictStrategy.FAIL:
            raise ActionConflictError(key, existing.path, action.path)
        if strategy is ConflictStrategy.SKIP:
            logger.debug("Skipping %s from %s (kept %s)", key, action.path, existing.path)
            continue

        logger.debug("Overriding %s: %s -> %s", key, existing.path, action.path)
        store.actions.remove_by_key(key)
        store.actions.add(action)


def _register_generator(
    generator: Generator, strategy: ConflictStrategy, store: TemplateStore
) -> None:
    existing = store.generators.find_by_item(generator)
    if existing is None:
        store.generators.add(generator)
    elif strategy is ConflictStrategy.OVERRIDE and existing.path != generator.path:
        store.generators.remove_by_item(existing)
        store.generators.add(generator)


def _is_ignored(name: str) -> bool:
    return name.startswith(".") or name in _IGNORED_ENTRIES
