"""Template URL resolution: resolvers, on-disk cache and the manager."""

from scaffoldkit.resolution.base_resolver import BaseTemplateResolver
from scaffoldkit.resolution.github_resolver import GitHubResolver, parse_github_url
from scaffoldkit.resolution.local_resolver import LocalResolver
from scaffoldkit.resolution.manager import TemplateURLManager, classify_url
from scaffoldkit.resolution.models import (
    CacheInfo,
    CacheValidationResult,
    ResolvedTemplate,
    SecurityConfig,
    TemplateMetadata,
    URLCacheConfig,
    URLManagerConfig,
    URLResolutionError,
)
from scaffoldkit.resolution.url_cache import URLCache

__all__ = [
    "BaseTemplateResolver",
    "CacheInfo",
    "CacheValidationResult",
    "GitHubResolver",
    "LocalResolver",
    "ResolvedTemplate",
    "SecurityConfig",
    "TemplateMetadata",
    "TemplateURLManager",
    "URLCache",
    "URLCacheConfig",
    "URLManagerConfig",
    "URLResolutionError",
    "classify_url",
    "parse_github_url",
]
