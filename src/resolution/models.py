# src/resolution/models.py — v1
"""Template URL resolution models: resolved templates, cache records, config.

On-disk JSON uses camelCase field names (``lastFetched``, ``cachedAt``);
Python code uses the snake_case attribute names.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

URLType = Literal["github", "gist", "npm", "http", "local"]

DEFAULT_ALLOWED_DOMAINS = ["github.com", "gist.github.com", "raw.githubusercontent.com"]


class URLResolutionError(Exception):
    """Raised when a template URL cannot be resolved.

    Covers not-found, unsupported URLs, missing resolvers, transport failures
    and oversized payloads.
    """

    def __init__(
        self,
        message: str,
        url: str,
        url_type: URLType,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.type = url_type
        self.cause = cause


class TemplateMetadata(BaseModel):
    """Provenance of a resolved template."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    type: URLType
    version: str | None = None
    last_fetched: datetime = Field(alias="lastFetched")
    etag: str | None = None
    checksum: str


class ResolvedTemplate(BaseModel):
    """A template.yml body plus the local directory it belongs to."""

    content: str
    base_path: str
    metadata: TemplateMetadata


class CacheRecord(BaseModel):
    """Contents of an entry's ``metadata.json``."""

    model_config = ConfigDict(populate_by_name=True)

    metadata: TemplateMetadata
    cached_at: datetime = Field(alias="cachedAt")
    size: int = 0


class CacheInfo(BaseModel):
    """Aggregate cache statistics."""

    total_size: int = 0
    entry_count: int = 0
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None
    hit_rate: float = 0.0


class CacheValidationResult(BaseModel):
    """Findings of a read-only cache scan."""

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class URLInfo(BaseModel):
    """Classification of a template URL."""

    type: URLType
    url: str
    version: str | None = None


class GitHubURLInfo(URLInfo):
    """Parsed GitHub template location."""

    type: Literal["github"] = "github"
    owner: str
    repo: str
    ref: str = "main"
    path: str | None = None


class SecurityConfig(BaseModel):
    """Restrictions applied before any remote fetch."""

    allowed_domains: list[str] | None = None
    blocked_domains: list[str] | None = None
    allow_private_repos: bool = False
    require_https: bool = True
    max_file_size: int | None = 1024 * 1024


class URLCacheConfig(BaseModel):
    """On-disk cache settings. ``ttl`` is in milliseconds."""

    cache_dir: Path = Path("~/.scaffoldkit/cache")
    ttl: int = 24 * 60 * 60 * 1000
    max_size: int = 100 * 1024 * 1024
    integrity_check: bool = True


class URLManagerConfig(BaseModel):
    """Full configuration of a TemplateURLManager. ``timeout`` is in milliseconds."""

    cache: URLCacheConfig = Field(default_factory=URLCacheConfig)
    security: SecurityConfig = Field(
        default_factory=lambda: SecurityConfig(allowed_domains=list(DEFAULT_ALLOWED_DOMAINS))
    )
    timeout: int = 30_000
    scratch_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "scaffoldkit-templates"
    )
    github_token: str | None = None
