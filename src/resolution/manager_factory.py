# src/resolution/manager_factory.py — v1
"""Factory for TemplateURLManager instantiation from Settings."""

from __future__ import annotations

from scaffoldkit.config.settings import Settings
from scaffoldkit.resolution.manager import TemplateURLManager
from scaffoldkit.resolution.models import SecurityConfig, URLCacheConfig, URLManagerConfig


def build_manager_config(settings: Settings) -> URLManagerConfig:
    """Translate flat settings into the nested manager config.

    An empty allowed-domains setting means "no allow-list".
    """
    return URLManagerConfig(
        cache=URLCacheConfig(
            cache_dir=settings.cache_dir,
            ttl=settings.cache_ttl_ms,
            max_size=settings.cache_max_size,
            integrity_check=settings.cache_integrity_check,
        ),
        security=SecurityConfig(
            allowed_domains=settings.allowed_domains_list or None,
            blocked_domains=settings.blocked_domains_list or None,
            allow_private_repos=settings.allow_private_repos,
            require_https=settings.require_https,
            max_file_size=settings.max_file_size,
        ),
        timeout=settings.request_timeout_ms,
        scratch_dir=settings.scratch_dir,
        github_token=settings.github_token or None,
    )


def create_url_manager(settings: Settings | None = None) -> TemplateURLManager:
    """Instantiate a manager configured from settings (defaults when None)."""
    if settings is None:
        return TemplateURLManager()
    return TemplateURLManager(build_manager_config(settings))
