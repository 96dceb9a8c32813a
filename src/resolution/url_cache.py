# src/resolution/url_cache.py — v1
"""Content-addressed on-disk cache of resolved templates.

Layout::

    <cache_dir>/<sha256(url)>/template.yml     raw content
    <cache_dir>/<sha256(url)>/metadata.json    {metadata, cachedAt, size}

Expired or corrupted entries are deleted on read and reported as misses.
After every write, entries with unreadable metadata are dropped and the
cache is trimmed oldest-first to 80% of ``max_size`` once it exceeds
``max_size``.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from scaffoldkit.resolution.checksum import cache_key, compute_checksum
from scaffoldkit.resolution.models import (
    CacheInfo,
    CacheRecord,
    CacheValidationResult,
    ResolvedTemplate,
    URLCacheConfig,
)

logger = logging.getLogger(__name__)

CONTENT_FILE = "template.yml"
METADATA_FILE = "metadata.json"
EVICTION_TARGET_RATIO = 0.8

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Entry:
    key: str
    record: CacheRecord


class URLCache:
    """TTL-bound, integrity-checked, size-bounded template cache."""

    def __init__(self, config: URLCacheConfig, clock: Clock | None = None) -> None:
        self._config = config
        self._root = Path(config.cache_dir).expanduser().resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._clock = clock or _utcnow
        self._hits = 0
        self._misses = 0

    @property
    def cache_dir(self) -> Path:
        return self._root

    @property
    def config(self) -> URLCacheConfig:
        return self._config

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    async def get(self, url: str) -> ResolvedTemplate | None:
        """Return the cached template for ``url``, or None on a miss."""
        entry_dir = self._entry_dir(url)
        loaded = self._read_entry(entry_dir)
        if loaded is None:
            return self._miss(url)

        record, content = loaded
        if self._is_expired(record):
            logger.debug("Cache entry expired for %s", url)
            await self.delete(url)
            return self._miss(url)

        if self._config.integrity_check and compute_checksum(content) != record.metadata.checksum:
            logger.warning("Cache integrity check failed for %s, dropping entry", url)
            await self.delete(url)
            return self._miss(url)

        self._hits += 1
        logger.debug("Cache hit for %s", url)
        return ResolvedTemplate(
            content=content,
            base_path=str(entry_dir),
            metadata=record.metadata,
        )

    async def set(self, url: str, resolved: ResolvedTemplate) -> None:
        """Store ``resolved`` under ``url`` and enforce the size bound."""
        entry_dir = self._entry_dir(url)
        entry_dir.mkdir(parents=True, exist_ok=True)

        data = resolved.content.encode("utf-8")
        (entry_dir / CONTENT_FILE).write_bytes(data)

        record = CacheRecord(
            metadata=resolved.metadata,
            cached_at=self._clock(),
            size=len(data),
        )
        (entry_dir / METADATA_FILE).write_text(
            record.model_dump_json(by_alias=True, exclude_none=True, indent=2),
            encoding="utf-8",
        )
        logger.debug("Cached template for %s at %s", url, entry_dir)

        await self._cleanup_if_needed()

    async def delete(self, url: str) -> None:
        """Remove the entry for ``url`` if present."""
        self._remove_dir(self._entry_dir(url))

    async def clear(self) -> None:
        """Empty the cache directory and reset hit/miss counters."""
        for child in self._root.iterdir():
            if child.is_dir():
                shutil.rmtree(child)
            else:
                child.unlink()
        self._hits = 0
        self._misses = 0
        logger.info("Cache cleared at %s", self._root)

    async def get_info(self) -> CacheInfo:
        """Aggregate size, entry count, age bounds and hit rate."""
        entries, _ = self._scan_entries()
        requests = self._hits + self._misses
        timestamps = [e.record.cached_at for e in entries]
        return CacheInfo(
            total_size=sum(e.record.size for e in entries),
            entry_count=len(entries),
            oldest_entry=min(timestamps) if timestamps else None,
            newest_entry=max(timestamps) if timestamps else None,
            hit_rate=self._hits / requests if requests else 0.0,
        )

    async def validate(self) -> CacheValidationResult:
        """Scan every entry for missing content, corruption and expiry.

        Read-only: nothing is deleted.
        """
        errors: list[str] = []
        warnings: list[str] = []
        entries, unreadable = self._scan_entries()

        for key in unreadable:
            errors.append(f"Unreadable metadata for cache entry {key}")

        for entry in entries:
            url = entry.record.metadata.url
            content_path = self._root / entry.key / CONTENT_FILE
            if not content_path.is_file():
                errors.append(f"Missing content file for {url}")
                continue

            checksum = entry.record.metadata.checksum
            if self._config.integrity_check and checksum:
                try:
                    content = content_path.read_bytes().decode("utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    errors.append(f"Unreadable content for {url}: {exc}")
                    continue
                if compute_checksum(content) != checksum:
                    errors.append(f"Integrity check failed for {url}")

            if self._is_expired(entry.record):
                warnings.append(f"Expired entry: {url}")

        return CacheValidationResult(valid=not errors, errors=errors, warnings=warnings)

    # --- Internals ---

    def _entry_dir(self, url: str) -> Path:
        return self._root / cache_key(url)

    def _miss(self, url: str) -> None:
        self._misses += 1
        logger.debug("Cache miss for %s", url)
        return None

    def _read_entry(self, entry_dir: Path) -> tuple[CacheRecord, str] | None:
        metadata_path = entry_dir / METADATA_FILE
        content_path = entry_dir / CONTENT_FILE
        if not (metadata_path.is_file() and content_path.is_file()):
            return None
        try:
            record = CacheRecord.model_validate_json(metadata_path.read_text(encoding="utf-8"))
            content = content_path.read_bytes().decode("utf-8")
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read cache entry %s: %s", entry_dir.name, exc)
            return None
        return record, content

    def _scan_entries(self) -> tuple[list[_Entry], list[str]]:
        entries: list[_Entry] = []
        unreadable: list[str] = []
        if not self._root.is_dir():
            return entries, unreadable

        for entry_dir in sorted(self._root.iterdir()):
            metadata_path = entry_dir / METADATA_FILE
            if not metadata_path.is_file():
                continue
            try:
                record = CacheRecord.model_validate_json(metadata_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.debug("Error reading metadata for %s: %s", entry_dir.name, exc)
                unreadable.append(entry_dir.name)
                continue
            entries.append(_Entry(key=entry_dir.name, record=record))
        return entries, unreadable

    def _is_expired(self, record: CacheRecord) -> bool:
        cached_at = record.cached_at
        if cached_at.tzinfo is None:
            cached_at = cached_at.replace(tzinfo=timezone.utc)
        age_ms = (self._clock() - cached_at).total_seconds() * 1000
        return age_ms > self._config.ttl

    async def _cleanup_if_needed(self) -> None:
        entries, unreadable = self._scan_entries()
        for key in unreadable:
            logger.warning("Dropping cache entry %s with unreadable metadata", key)
            self._remove_dir(self._root / key)

        total_size = sum(e.record.size for e in entries)
        if total_size <= self._config.max_size:
            return

        logger.info(
            "Cache size (%d) exceeds limit (%d), evicting oldest entries",
            total_size,
            self._config.max_size,
        )
        target = self._config.max_size * EVICTION_TARGET_RATIO
        for entry in sorted(entries, key=lambda e: e.record.cached_at):
            if total_size <= target:
                break
            self._remove_dir(self._root / entry.key)
            total_size -= entry.record.size
            logger.debug(
                "Evicted cache entry for %s (size: %d)", entry.record.metadata.url, entry.record.size
            )

    @staticmethod
    def _remove_dir(entry_dir: Path) -> None:
        if entry_dir.exists():
            shutil.rmtree(entry_dir)
