# src/namespace/models.py — v1
"""Generator/action domain models and the conflict strategy enum."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ConflictStrategy(str, Enum):
    """What to do when two template roots define the same action."""

    FAIL = "fail"
    SKIP = "skip"
    OVERRIDE = "override"


class TemplateRoot(BaseModel):
    """A directory whose subdirectories are generators."""

    path: str


class Action(BaseModel):
    """A named, file-backed unit of template content within a generator."""

    name: str
    path: str
    generator_name: str
    generator_path: str


class Generator(BaseModel):
    """A named collection of actions.

    ``path`` is the directory of the root that owns the record. After loading,
    ``actions`` lists every action registered under the generator name, which
    may include actions that other roots contributed.
    """

    name: str
    path: str
    actions: list[Action] = Field(default_factory=list)
