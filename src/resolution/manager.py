# src/resolution/manager.py — v1
"""Template URL manager — classify, resolve and cache template URLs.

Lookup order for a URL: cache, then the resolver registered for the URL's
type, then any registered resolver whose ``supports()`` accepts the URL.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from scaffoldkit.resolution.base_resolver import BaseTemplateResolver
from scaffoldkit.resolution.github_resolver import GitHubResolver
from scaffoldkit.resolution.local_resolver import (
    LocalResolver,
    is_local_url,
    template_path_for,
)
from scaffoldkit.resolution.models import (
    CacheInfo,
    CacheValidationResult,
    ResolvedTemplate,
    URLInfo,
    URLManagerConfig,
    URLResolutionError,
    URLType,
)
from scaffoldkit.resolution.url_cache import Clock, URLCache

logger = logging.getLogger(__name__)


class TemplateURLManager:
    """Cache-first resolution of template URLs through pluggable resolvers."""

    def __init__(
        self,
        config: URLManagerConfig | None = None,
        resolvers: dict[URLType, BaseTemplateResolver] | None = None,
        http_client: httpx.AsyncClient | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            config: Cache, security and timeout settings.
            resolvers: Custom resolvers, registered on top of the defaults.
            http_client: HTTP client handed to the default GitHub resolver.
            clock: Time source for the cache (tests).
        """
        self._config = config or URLManagerConfig()
        self._http_client = http_client
        self._clock = clock
        self._custom_resolvers: dict[URLType, BaseTemplateResolver] = dict(resolvers or {})
        self._resolvers: dict[URLType, BaseTemplateResolver] = {}
        self._cache = URLCache(self._config.cache, clock=clock)
        self._setup_resolvers()
        logger.debug("URL manager initialized with %d resolvers", len(self._resolvers))

    @property
    def config(self) -> URLManagerConfig:
        return self._config

    @property
    def cache(self) -> URLCache:
        return self._cache

    @property
    def resolvers(self) -> dict[URLType, BaseTemplateResolver]:
        return dict(self._resolvers)

    async def resolve_url(self, url: str, base_path: str | None = None) -> ResolvedTemplate:
        """Resolve one URL, serving from cache when possible.

        Local URLs are cached under their absolute path, so one relative URL
        resolved against two base paths yields two entries.

        Raises:
            URLResolutionError: If no resolver supports the URL or resolution fails.
        """
        info = classify_url(url)
        cache_url = _cache_url(url, info.type, base_path)
        cached = await self._cache.get(cache_url)
        if cached is not None:
            logger.debug("Using cached template for %s", url)
            return cached

        resolver = self._find_resolver(url, info.type)
        if resolver is None:
            raise URLResolutionError(
                f"No resolver found for URL type: {info.type}", url, info.type
            )

        resolved = await resolver.resolve(url, base_path)
        await self._cache.set(cache_url, resolved)
        logger.debug("Resolved and cached %s", url)
        return resolved

    async def resolve_multiple(
        self,
        urls: Sequence[str],
        base_path: str | None = None,
        return_exceptions: bool = False,
    ) -> list[Any]:
        """Resolve URLs concurrently; results follow input order.

        By default the first failure fails the whole batch. With
        ``return_exceptions=True`` each slot holds either a ResolvedTemplate
        or the URLResolutionError raised for that URL.
        """
        logger.debug("Resolving %d URLs concurrently", len(urls))
        results = await asyncio.gather(
            *(self.resolve_url(url, base_path) for url in urls),
            return_exceptions=return_exceptions,
        )
        if return_exceptions:
            for result in results:
                if isinstance(result, BaseException) and not isinstance(
                    result, URLResolutionError
                ):
                    raise result
        return list(results)

    async def clear_cache(self) -> None:
        await self._cache.clear()

    async def get_cache_info(self) -> CacheInfo:
        return await self._cache.get_info()

    async def validate_cache(self) -> CacheValidationResult:
        return await self._cache.validate()

    def add_resolver(self, url_type: URLType, resolver: BaseTemplateResolver) -> None:
        """Register (or replace) the resolver for a URL type."""
        self._custom_resolvers[url_type] = resolver
        self._resolvers[url_type] = resolver
        logger.debug("Added resolver for type: %s", url_type)

    def set_config(self, **updates: Any) -> None:
        """Merge top-level config fields and rebuild the cache and default resolvers.

        Custom resolvers added through ``add_resolver`` are kept.
        """
        self._config = URLManagerConfig.model_validate({**self._config.model_dump(), **updates})
        self._cache = URLCache(self._config.cache, clock=self._clock)
        self._setup_resolvers()
        logger.debug("Configuration updated: %s", sorted(updates))

    # --- Internals ---

    def _setup_resolvers(self) -> None:
        self._resolvers = {
            "local": LocalResolver(),
            "github": GitHubResolver(
                security=self._config.security,
                timeout=self._config.timeout,
                scratch_dir=self._config.scratch_dir,
                token=self._config.github_token,
                client=self._http_client,
            ),
        }
        self._resolvers.update(self._custom_resolvers)

    def _find_resolver(self, url: str, url_type: URLType) -> BaseTemplateResolver | None:
        resolver = self._resolvers.get(url_type)
        if resolver is not None and resolver.supports(url):
            return resolver
        for candidate in self._resolvers.values():
            if candidate.supports(url):
                return candidate
        return None


def _cache_url(url: str, url_type: URLType, base_path: str | None) -> str:
    if url_type != "local" or not is_local_url(url):
        return url
    return str(template_path_for(url, base_path))


def classify_url(url: str) -> URLInfo:
    """Guess a URL's type from its prefix or host."""
    url_type: URLType
    if url.startswith("gist:") or "gist.github.com" in url:
        url_type = "gist"
    elif url.startswith("github:") or "github.com" in url or "raw.githubusercontent.com" in url:
        url_type = "github"
    elif url.startswith("npm:"):
        url_type = "npm"
    elif url.startswith(("http://", "https://")):
        url_type = "http"
    else:
        url_type = "local"
    return URLInfo(type=url_type, url=url)
