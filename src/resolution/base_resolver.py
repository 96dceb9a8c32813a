# src/resolution/base_resolver.py — v1
"""Abstract template URL resolver interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from scaffoldkit.resolution.models import ResolvedTemplate


class BaseTemplateResolver(ABC):
    """Turns a template URL into a ResolvedTemplate.

    New URL schemes are supported by registering another implementation with
    the manager; callers never change.
    """

    @abstractmethod
    def supports(self, url: str) -> bool:
        """Cheap, I/O-free check that this resolver understands ``url``."""

    @abstractmethod
    async def resolve(self, url: str, base_path: str | None = None) -> ResolvedTemplate:
        """Resolve ``url``.

        Raises:
            URLResolutionError: On any failure; partial results are never returned.
        """
