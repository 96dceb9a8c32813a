# tests/unit/namespace/test_loader.py — v1
"""Tests for namespace/loader.py — discovery and action conflict resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from scaffoldkit.namespace.loader import (
    ActionConflictError,
    GeneratorManifestError,
    available_actions,
    load_generators,
    strip_source_extension,
)
from scaffoldkit.namespace.models import ConflictStrategy, TemplateRoot


class TestStripSourceExtension:
    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("new.ts", "new"),
            ("new.mjs", "new"),
            ("component.tsx", "component"),
            ("new.py", "new"),
            ("new", "new"),
            ("README.md", "README.md"),
        ],
    )
    def test_strip(self, filename: str, expected: str):
        assert strip_source_extension(filename) == expected


class TestDiscovery:
    def test_generators_and_actions(self, make_root):
        root = make_root("A", {"init": ["new.ts", "repo"], "component": ["add.js"]})
        store = load_generators([TemplateRoot(path=str(root))])

        assert {g.name for g in store.generators.list_all()} == {"init", "component"}
        action = store.find_action("init", "new")
        assert action is not None
        assert action.path == str(root / "init" / "new")
        assert action.generator_path == str(root / "init")
        assert store.find_action("init", "repo") is not None

    def test_accepts_plain_paths(self, make_root):
        root = make_root("A", {"init": ["new"]})
        store = load_generators([root])
        assert store.actions.exists("init", "new")

    def test_hidden_entries_ignored(self, make_root):
        root = make_root("A", {"init": ["new", ".DS_Store"]})
        (root / ".git").mkdir()
        store = load_generators([root])
        assert available_actions(store) == {"init": ["new"]}

    def test_file_and_directory_with_same_name_are_one_action(self, make_root):
        root = make_root("A", {"init": ["new", "new.ts"]})
        store = load_generators([root])
        assert len(store.actions) == 1
        assert len(store.generators.find_by_name("init")[0].actions) == 1

    def test_missing_root_skipped(self, tmp_path: Path, make_root):
        root = make_root("A", {"init": ["new"]})
        store = load_generators([tmp_path / "missing", root])
        assert store.actions.exists("init", "new")

    def test_stores_are_independent(self, make_root):
        root = make_root("A", {"init": ["new"]})
        first = load_generators([root])
        second = load_generators([root])
        first.actions.remove("init", "new")
        assert second.actions.exists("init", "new")

    def test_reverse_lookup_by_path(self, make_root):
        root = make_root("A", {"init": ["new"]})
        store = load_generators([root])
        matches = store.actions.find_by_path(str(root / "init" / "new"))
        assert [a.name for a in matches] == ["new"]

    def test_available_actions_sorted(self, make_root):
        root = make_root("A", {"init": ["zeta", "alpha"], "api": ["route"]})
        assert available_actions(load_generators([root])) == {
            "api": ["route"],
            "init": ["alpha", "zeta"],
        }


class TestManifest:
    def test_manifest_lists_actions(self, make_root):
        root = make_root("A", {"init": ["helpers.ts", "shared"]})
        (root / "init" / "generator.yml").write_text(
            "actions:\n  - new\n  - repo\n", encoding="utf-8"
        )
        store = load_generators([root])
        assert available_actions(store) == {"init": ["new", "repo"]}

    def test_manifest_without_actions_falls_back(self, make_root):
        root = make_root("A", {"init": ["new"]})
        (root / "init" / "generator.yml").write_text("description: x\n", encoding="utf-8")
        store = load_generators([root])
        assert available_actions(store) == {"init": ["new"]}

    def test_invalid_manifest(self, make_root):
        root = make_root("A", {"init": []})
        (root / "init" / "generator.yaml").write_text("actions: new\n", encoding="utf-8")
        with pytest.raises(GeneratorManifestError):
            load_generators([root])


class TestConflictResolution:
    @pytest.fixture
    def roots(self, make_root) -> tuple[Path, Path]:
        a = make_root("A", {"init": ["new"]})
        b = make_root("B", {"init": ["new", "extra"]})
        return a, b

    def test_skip_keeps_first(self, roots):
        a, b = roots
        store = load_generators([a, b], ConflictStrategy.SKIP)
        assert store.actions.find("init", "new").path == str(a / "init" / "new")
        assert store.actions.find("init", "extra").path == str(b / "init" / "extra")

    def test_override_keeps_last(self, roots):
        a, b = roots
        store = load_generators([a, b], ConflictStrategy.OVERRIDE)
        action = store.actions.find("init", "new")
        assert action.path == str(b / "init" / "new")
        assert store.actions.find_by_path(str(a / "init" / "new")) == []
        assert store.generators.find("init").path == str(b / "init")

    def test_fail_mentions_both_paths(self, roots):
        a, b = roots
        with pytest.raises(ActionConflictError) as exc_info:
            load_generators([a, b], ConflictStrategy.FAIL)
        message = str(exc_info.value)
        assert str(a / "init" / "new") in message
        assert str(b / "init" / "new") in message
        assert "init::new" in message

    def test_fail_is_default(self, roots):
        with pytest.raises(ActionConflictError):
            load_generators(list(roots))

    def test_strategy_accepts_string(self, roots):
        a, b = roots
        store = load_generators([a, b], "override")  # type: ignore[arg-type]
        assert store.actions.find("init", "new").path == str(b / "init" / "new")

    def test_same_root_twice_is_not_a_conflict(self, make_root):
        a = make_root("A", {"init": ["new"]})
        store = load_generators([a, a], ConflictStrategy.FAIL)
        assert len(store.actions) == 1
        assert len(store.generators) == 1

    def test_skip_keeps_first_generator_record(self, roots):
        a, b = roots
        store = load_generators([a, b], ConflictStrategy.SKIP)
        assert store.generators.find("init").path == str(a / "init")

    def test_skip_generator_record_lists_every_action(self, roots):
        a, b = roots
        store = load_generators([a, b], ConflictStrategy.SKIP)
        generator = store.generators.find("init")
        assert generator.actions == store.actions.for_generator("init")
        assert {x.name for x in generator.actions} == {"new", "extra"}

    def test_override_generator_record_keeps_earlier_actions(self, make_root):
        a = make_root("A", {"init": ["new", "only_a"]})
        b = make_root("B", {"init": ["new"]})
        store = load_generators([a, b], ConflictStrategy.OVERRIDE)
        generator = store.generators.find("init")
        assert generator.path == str(b / "init")
        assert {x.path for x in generator.actions} == {
            str(b / "init" / "new"),
            str(a / "init" / "only_a"),
        }

    def test_deterministic(self, roots):
        a, b = roots
        first = load_generators([a, b], ConflictStrategy.SKIP)
        second = load_generators([a, b], ConflictStrategy.SKIP)
        assert [x.path for x in first.actions.list_all()] == [
            x.path for x in second.actions.list_all()
        ]
