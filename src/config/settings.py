# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for template roots, conflict policy, URL cache,
remote-fetch security and logging.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Namespace ===
    template_roots: str = "_templates"
    conflict_strategy: Literal["fail", "skip", "override"] = "fail"

    # === URL cache ===
    cache_dir: Path = Path("~/.scaffoldkit/cache")
    cache_ttl_ms: int = 24 * 60 * 60 * 1000
    cache_max_size: int = 100 * 1024 * 1024
    cache_integrity_check: bool = True

    # === Remote fetch ===
    request_timeout_ms: int = 30_000
    allowed_domains: str = "github.com,gist.github.com,raw.githubusercontent.com"
    blocked_domains: str = ""
    allow_private_repos: bool = False
    require_https: bool = True
    max_file_size: int = 1024 * 1024
    github_token: str = ""
    scratch_dir: Path = Path(tempfile.gettempdir()) / "scaffoldkit-templates"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("cache_ttl_ms", "request_timeout_ms")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("cache_max_size", "max_file_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Reject domains that are both allowed and blocked."""
        overlap = sorted(set(self.allowed_domains_list) & set(self.blocked_domains_list))
        if overlap:
            raise ConfigurationError(
                f"Domains both allowed and blocked: {', '.join(overlap)}"
            )
        return self

    # --- Helpers ---

    @property
    def template_roots_list(self) -> list[str]:
        """Parse comma-separated template roots, order preserved."""
        return [r.strip() for r in self.template_roots.split(",") if r.strip()]

    @property
    def allowed_domains_list(self) -> list[str]:
        """Parse comma-separated allowed domains."""
        return [d.strip() for d in self.allowed_domains.split(",") if d.strip()]

    @property
    def blocked_domains_list(self) -> list[str]:
        """Parse comma-separated blocked domains."""
        return [d.strip() for d in self.blocked_domains.split(",") if d.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-command config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
