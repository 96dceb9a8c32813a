# src/resolution/local_resolver.py — v1
"""Resolver for templates on the local filesystem.

Accepts absolute paths, relative paths and ``file://`` URIs. A path may name
the ``template.yml`` itself or the directory that contains it.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import yaml

from scaffoldkit.resolution.base_resolver import BaseTemplateResolver
from scaffoldkit.resolution.checksum import compute_checksum
from scaffoldkit.resolution.models import (
    ResolvedTemplate,
    TemplateMetadata,
    URLResolutionError,
)

logger = logging.getLogger(__name__)

TEMPLATE_CONFIG_NAMES = ("template.yml", "template.yaml")

# Two or more characters so that "C:\templates" still reads as a path.
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")
_FILE_PREFIX = "file://"


class LocalResolver(BaseTemplateResolver):
    """Reads template.yml from a local directory."""

    def supports(self, url: str) -> bool:
        return is_local_url(url)

    async def resolve(self, url: str, base_path: str | None = None) -> ResolvedTemplate:
        logger.debug("Resolving local template %s from %s", url, base_path)
        try:
            config_path = find_template_config(template_path_for(url, base_path))
            if not config_path.is_file():
                raise URLResolutionError(
                    f"Template configuration not found: {config_path}", url, "local"
                )
            content = config_path.read_text(encoding="utf-8")
        except URLResolutionError:
            raise
        except (OSError, ValueError) as exc:
            raise URLResolutionError(
                f"Failed to resolve local template: {exc}", url, "local", exc
            ) from exc

        logger.debug("Resolved local template at %s", config_path)
        return ResolvedTemplate(
            content=content,
            base_path=str(config_path.parent),
            metadata=TemplateMetadata(
                url=url,
                type="local",
                version=_read_version(content, config_path),
                last_fetched=datetime.now(timezone.utc),
                checksum=compute_checksum(content),
            ),
        )


def is_local_url(url: str) -> bool:
    """True for plain paths and ``file://`` URIs."""
    return url.startswith(_FILE_PREFIX) or not _SCHEME.match(url)


def template_path_for(url: str, base_path: str | None = None) -> Path:
    """Filesystem path named by a local URL; relative paths join ``base_path`` or the cwd."""
    raw = url[len(_FILE_PREFIX):] if url.startswith(_FILE_PREFIX) else url
    path = Path(raw).expanduser()
    if path.is_absolute():
        return path
    return (Path(base_path) if base_path else Path.cwd()).joinpath(path).resolve()


def find_template_config(template_path: Path) -> Path:
    """Locate the template config for a path naming a file or a directory.

    Returns the first existing candidate, or ``<path>/template.yml`` when the
    directory holds none (the caller reports it as missing).
    """
    if template_path.name in TEMPLATE_CONFIG_NAMES:
        return template_path
    if template_path.is_dir():
        for name in TEMPLATE_CONFIG_NAMES:
            candidate = template_path / name
            if candidate.is_file():
                return candidate
    return template_path / TEMPLATE_CONFIG_NAMES[0]


def _read_version(content: str, config_path: Path) -> str | None:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        logger.debug("Cannot read version from %s: %s", config_path, exc)
        return None
    if isinstance(data, dict) and data.get("version") is not None:
        return str(data["version"])
    return None
