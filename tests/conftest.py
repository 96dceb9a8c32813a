# tests/conftest.py — v1
"""Shared test fixtures for all unit tests.

Provides template-root builders, a controllable clock and sample resolved
templates. No network access — HTTP is mocked with httpx.MockTransport.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

from scaffoldkit.resolution.checksum import compute_checksum
from scaffoldkit.resolution.models import ResolvedTemplate, TemplateMetadata

SAMPLE_TEMPLATE = """name: react-component
version: 1.2.0
description: A React component
variables:
  name:
    type: string
    required: true
"""


# === FIXTURES: Filesystem layouts ===


@pytest.fixture
def make_root(tmp_path: Path) -> Callable[..., Path]:
    """Build a template root: make_root("A", {"init": ["new.ts", "edit"]})."""

    def _make(name: str, generators: dict[str, list[str]]) -> Path:
        root = tmp_path / name
        for generator, entries in generators.items():
            generator_dir = root / generator
            generator_dir.mkdir(parents=True, exist_ok=True)
            for entry in entries:
                target = generator_dir / entry
                if "." in entry:
                    target.write_text("// action\n", encoding="utf-8")
                else:
                    target.mkdir(exist_ok=True)
        return root

    return _make


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory holding a template.yml."""
    directory = tmp_path / "templates" / "react-component"
    directory.mkdir(parents=True)
    (directory / "template.yml").write_text(SAMPLE_TEMPLATE, encoding="utf-8")
    return directory


# === FIXTURES: Time ===


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, milliseconds: int) -> None:
        self.now += timedelta(milliseconds=milliseconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# === FIXTURES: Sample data ===


def make_resolved(
    content: str = SAMPLE_TEMPLATE,
    url: str = "github:acme/widgets@v2/forms",
    base_path: str = "/tmp/staging",
) -> ResolvedTemplate:
    return ResolvedTemplate(
        content=content,
        base_path=base_path,
        metadata=TemplateMetadata(
            url=url,
            type="github",
            version="v2",
            last_fetched=datetime(2026, 1, 1, tzinfo=timezone.utc),
            checksum=compute_checksum(content),
        ),
    )


@pytest.fixture
def sample_resolved() -> ResolvedTemplate:
    return make_resolved()


@pytest.fixture
def sample_template() -> str:
    return SAMPLE_TEMPLATE


@pytest.fixture
def resolved_factory() -> Callable[..., ResolvedTemplate]:
    return make_resolved


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by setup_logging() so they never outlive a test."""
    yield
    root = logging.getLogger("scaffoldkit")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
