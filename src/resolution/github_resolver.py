# src/resolution/github_resolver.py — v1
"""Resolver for templates hosted in GitHub repositories.

Supported forms:
    github:owner/repo[@ref][/path/to/template]
    https://github.com/owner/repo/tree/<ref>/<path>
    https://raw.githubusercontent.com/owner/repo/<ref>/<path>

The template.yml is fetched from raw.githubusercontent.com with a streamed
GET, bounded by ``max_file_size`` and the request timeout, then staged in a
per-repository scratch directory that serves as the template's base path.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

import httpx

from scaffoldkit.resolution.base_resolver import BaseTemplateResolver
from scaffoldkit.resolution.checksum import compute_checksum
from scaffoldkit.resolution.local_resolver import TEMPLATE_CONFIG_NAMES
from scaffoldkit.resolution.models import (
    GitHubURLInfo,
    ResolvedTemplate,
    SecurityConfig,
    TemplateMetadata,
    URLResolutionError,
)

logger = logging.getLogger(__name__)

RAW_HOST = "raw.githubusercontent.com"
GITHUB_HOST = "github.com"
SHORTHAND_PREFIX = "github:"
DEFAULT_REF = "main"
DEFAULT_TIMEOUT_MS = 30_000
USER_AGENT = "scaffoldkit-template-resolver"


class GitHubResolver(BaseTemplateResolver):
    """Fetches template.yml files from GitHub over HTTPS."""

    def __init__(
        self,
        security: SecurityConfig | None = None,
        timeout: int = DEFAULT_TIMEOUT_MS,
        scratch_dir: Path | str | None = None,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            security: Domain and size restrictions.
            timeout: Request timeout in milliseconds.
            scratch_dir: Root of the per-repository staging directories.
            token: GitHub token, sent only when private repos are allowed.
            client: Shared HTTP client. When omitted one is created per fetch.
        """
        self._security = security or SecurityConfig()
        self._timeout = timeout
        self._scratch_dir = Path(
            scratch_dir or Path(tempfile.gettempdir()) / "scaffoldkit-templates"
        ).expanduser()
        self._token = token
        self._client = client

    def supports(self, url: str) -> bool:
        if url.startswith(SHORTHAND_PREFIX):
            return True
        return urlparse(url).hostname in (GITHUB_HOST, RAW_HOST)

    async def resolve(self, url: str, base_path: str | None = None) -> ResolvedTemplate:
        logger.debug("Resolving GitHub template %s", url)
        try:
            parsed = parse_github_url(url)
            self._validate_security(parsed)
            staging_dir = self.staging_dir_for(parsed)
            content, etag = await self._fetch_template_content(parsed)
            self._stage(staging_dir, content)
        except URLResolutionError:
            raise
        except (ValueError, OSError) as exc:
            raise URLResolutionError(
                f"Failed to resolve GitHub template: {exc}", url, "github", exc
            ) from exc

        logger.debug("Resolved GitHub template %s/%s@%s", parsed.owner, parsed.repo, parsed.ref)
        return ResolvedTemplate(
            content=content,
            base_path=str(staging_dir),
            metadata=TemplateMetadata(
                url=url,
                type="github",
                version=parsed.version,
                last_fetched=datetime.now(timezone.utc),
                etag=etag,
                checksum=compute_checksum(content),
            ),
        )

    def raw_url_for(self, parsed: GitHubURLInfo) -> str:
        """raw.githubusercontent.com URL of the template.yml for ``parsed``."""
        template_path = f"{parsed.path}/template.yml" if parsed.path else "template.yml"
        return f"https://{RAW_HOST}/{parsed.owner}/{parsed.repo}/{parsed.ref}/{template_path}"

    def staging_dir_for(self, parsed: GitHubURLInfo) -> Path:
        """Per-repository directory, mirroring the template's path inside the repo.

        Raises:
            ValueError: If the template path climbs out of the repository.
        """
        ref = parsed.ref.replace("/", "-")
        repo_dir = self._scratch_dir / f"github-{parsed.owner}-{parsed.repo}-{ref}"
        if not parsed.path:
            return repo_dir
        parts = parsed.path.split("/")
        if any(part in (".", "..") for part in parts):
            raise ValueError(f"Invalid template path: {parsed.path}")
        return repo_dir.joinpath(*parts)

    # --- Internals ---

    def _validate_security(self, parsed: GitHubURLInfo) -> None:
        allowed = self._security.allowed_domains
        if allowed is not None and GITHUB_HOST not in allowed:
            raise URLResolutionError(
                "GitHub domain not in allowed domains list", parsed.url, "github"
            )
        if GITHUB_HOST in (self._security.blocked_domains or []):
            raise URLResolutionError("GitHub domain is blocked", parsed.url, "github")
        if self._security.require_https and parsed.url.startswith("http://"):
            raise URLResolutionError("HTTPS is required for remote templates", parsed.url, "github")

    async def _fetch_template_content(self, parsed: GitHubURLInfo) -> tuple[str, str | None]:
        raw_url = self.raw_url_for(parsed)
        logger.debug("Fetching %s", raw_url)

        headers = {"User-Agent": USER_AGENT}
        if self._token and self._security.allow_private_repos:
            headers["Authorization"] = f"token {self._token}"

        try:
            if self._client is not None:
                return await self._stream(self._client, raw_url, headers, parsed)
            async with httpx.AsyncClient() as client:
                return await self._stream(client, raw_url, headers, parsed)
        except httpx.TimeoutException as exc:
            raise URLResolutionError(
                f"Request timeout after {self._timeout}ms", parsed.url, "github", exc
            ) from exc
        except httpx.HTTPError as exc:
            raise URLResolutionError(
                f"Failed to fetch GitHub template: {exc}", parsed.url, "github", exc
            ) from exc

    async def _stream(
        self,
        client: httpx.AsyncClient,
        raw_url: str,
        headers: dict[str, str],
        parsed: GitHubURLInfo,
    ) -> tuple[str, str | None]:
        max_size = self._security.max_file_size
        timeout = httpx.Timeout(self._timeout / 1000)

        async with client.stream("GET", raw_url, headers=headers, timeout=timeout) as response:
            if response.status_code == 404:
                raise URLResolutionError(
                    f"Template not found: {parsed.path or '.'}/template.yml",
                    parsed.url,
                    "github",
                )
            if response.status_code != 200:
                raise URLResolutionError(
                    f"HTTP {response.status_code}: {response.reason_phrase}",
                    parsed.url,
                    "github",
                )

            content_length = int(response.headers.get("content-length") or 0)
            if max_size and content_length > max_size:
                raise URLResolutionError(
                    f"Template file too large: {content_length} bytes", parsed.url, "github"
                )

            chunks: list[bytes] = []
            received = 0
            async for chunk in response.aiter_bytes():
                received += len(chunk)
                if max_size and received > max_size:
                    # Leaving the stream context closes the connection.
                    chunks.clear()
                    raise URLResolutionError(
                        f"Template file too large: {received} bytes", parsed.url, "github"
                    )
                chunks.append(chunk)

            logger.debug("Fetched %d bytes from GitHub", received)
            return b"".join(chunks).decode("utf-8"), response.headers.get("etag")

    @staticmethod
    def _stage(staging_dir: Path, content: str) -> None:
        staging_dir.mkdir(parents=True, exist_ok=True)
        (staging_dir / TEMPLATE_CONFIG_NAMES[0]).write_text(content, encoding="utf-8")


def parse_github_url(url: str) -> GitHubURLInfo:
    """Parse any supported GitHub URL form.

    Raises:
        URLResolutionError: If the URL is not a usable GitHub location.
    """
    if url.startswith(SHORTHAND_PREFIX):
        return _parse_shorthand(url)
    return _parse_full_url(url)


def _parse_shorthand(url: str) -> GitHubURLInfo:
    parts = [p for p in url[len(SHORTHAND_PREFIX):].split("/") if p]
    if len(parts) < 2:
        raise URLResolutionError(
            "Invalid GitHub URL format. Expected: github:owner/repo[@ref][/path]",
            url,
            "github",
        )

    owner, repo_with_ref, *path_parts = parts
    repo, sep, ref = repo_with_ref.partition("@")
    if not repo or (sep and not ref):
        raise URLResolutionError(
            "Invalid GitHub URL format. Missing repository name or ref", url, "github"
        )

    return GitHubURLInfo(
        url=url,
        owner=owner,
        repo=repo,
        ref=ref or DEFAULT_REF,
        version=ref or None,
        path="/".join(path_parts) or None,
    )


def _parse_full_url(url: str) -> GitHubURLInfo:
    parsed = urlparse(url)
    host = parsed.hostname
    if host not in (GITHUB_HOST, RAW_HOST):
        raise URLResolutionError(f"Unsupported GitHub domain: {host}", url, "github")

    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        raise URLResolutionError("Invalid GitHub URL format", url, "github")

    owner, repo = parts[0], parts[1]
    ref = DEFAULT_REF
    path_parts: list[str] = []

    if host == RAW_HOST:
        if len(parts) >= 3:
            ref = parts[2]
            path_parts = parts[3:]
        if path_parts and path_parts[-1] in TEMPLATE_CONFIG_NAMES:
            path_parts = path_parts[:-1]
    elif len(parts) >= 4 and parts[2] == "tree":
        ref = parts[3]
        path_parts = parts[4:]

    return GitHubURLInfo(
        url=url,
        owner=owner,
        repo=repo.removesuffix(".git"),
        ref=ref,
        path="/".join(path_parts) or None,
    )
