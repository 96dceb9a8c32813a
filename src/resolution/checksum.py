# src/resolution/checksum.py — v1
"""Content hashing shared by resolvers and the URL cache."""

from __future__ import annotations

import hashlib


def compute_checksum(content: str) -> str:
    """SHA-256 hex digest of UTF-8 encoded template content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def cache_key(url: str) -> str:
    """Directory name of a URL's cache entry."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()
