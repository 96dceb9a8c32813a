# src/logging/context.py — v1
"""Contextual logging support — attach generator, action and URL to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per command or per resolution.
_generator: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "generator", default=None
)
_action: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "action", default=None
)
_url: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "url", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    generator: str | None = None
    action: str | None = None
    url: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        generator=_generator.get(),
        action=_action.get(),
        url=_url.get(),
    )


def set_action_context(generator: str, action: str | None = None) -> None:
    """Set generator/action context (called when a command targets an action)."""
    _generator.set(generator)
    _action.set(action)


def set_url_context(url: str) -> None:
    """Set the template URL being resolved."""
    _url.set(url)


def clear_context() -> None:
    """Reset all context variables."""
    _generator.set(None)
    _action.set(None)
    _url.set(None)
