"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from evalhub.domain.entities import CommitSummary, RepoMetadata, TreeEntry
from evalhub.domain.exceptions import (
    ContentExtractionError,
    GitHubRateLimitError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
)
from evalhub.domain.value_objects import GitHubUrl

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_RAW_BASE = "https://raw.githubusercontent.com"
_USER_AGENT = "evalhub/1.0"
_README_BRANCHES: tuple[str, ...] = ("main", "master", "develop")
_README_TIMEOUT = 10.0
_COMMITS_PER_PAGE = 100


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(self, client: httpx.AsyncClient, token: str | None = None) -> None:
        self._client = client
        self._token = token
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": _USER_AGENT,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, url: GitHubUrl) -> RepoMetadata:
        """GET /repos/{owner}/{repo} → RepoMetadata (languages left empty)."""
        resp = await self._api_get(f"/repos/{url.owner}/{url.repo}")
        return RepoMetadata.from_api(resp.json(), owner=url.owner, repo=url.repo)

    async def fetch_tree(
        self, url: GitHubUrl, branch: str, *, timeout: float | None = None
    ) -> list[TreeEntry]:
        """GET /repos/{owner}/{repo}/git/trees/{branch}?recursive=1 → [TreeEntry]."""
        resp = await self._api_get(
            f"/repos/{url.owner}/{url.repo}/git/trees/{branch}",
            params={"recursive": "1"},
            timeout=timeout,
        )
        data = resp.json()
        if data.get("truncated"):
            logger.warning("Tree for %s@%s was truncated by GitHub", url.full_name, branch)

        return [
            TreeEntry(
                path=item["path"],
                type=item.get("type", "blob"),
                size=item.get("size", 0) or 0,
            )
            for item in data.get("tree", [])
            if item.get("path")
        ]

    async def fetch_readme(self, url: GitHubUrl) -> str | None:
        """Raw README.md from the first branch that has one; ``None`` otherwise."""
        headers = {"User-Agent": _USER_AGENT}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        for branch in _README_BRANCHES:
            raw_url = f"{_RAW_BASE}/{url.owner}/{url.repo}/{branch}/README.md"
            try:
                resp = await self._client.get(raw_url, headers=headers, timeout=_README_TIMEOUT)
            except httpx.HTTPError:
                logger.debug("README fetch failed for %s@%s", url.full_name, branch, exc_info=True)
                continue
            if resp.status_code == 200:
                return resp.text
        return None

    async def fetch_languages(self, url: GitHubUrl) -> dict[str, int]:
        """GET /repos/{owner}/{repo}/languages → {lang: bytes}."""
        try:
            resp = await self._api_get(f"/repos/{url.owner}/{url.repo}/languages")
            data: dict[str, int] = resp.json()
            return data
        except Exception:
            logger.debug("Failed to fetch languages for %s — returning empty", url.full_name)
            return {}

    async def fetch_commits(self, url: GitHubUrl, limit: int = 100) -> list[CommitSummary]:
        """GET /repos/{owner}/{repo}/commits → most recent *limit* commits."""
        try:
            resp = await self._api_get(
                f"/repos/{url.owner}/{url.repo}/commits",
                params={"per_page": str(min(max(limit, 1), _COMMITS_PER_PAGE))},
            )
            items = resp.json()
        except Exception:
            logger.debug("Failed to fetch commits for %s — returning empty", url.full_name)
            return []
        if not isinstance(items, list):
            return []
        return [CommitSummary.from_api(item) for item in items[:limit] if isinstance(item, dict)]

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{_GITHUB_API}{endpoint}"
        kwargs: dict[str, object] = {"headers": self._api_headers, "params": params}
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            resp = await self._client.get(url, **kwargs)  # type: ignore[arg-type]
        except httpx.HTTPError as exc:
            raise ContentExtractionError(
                f"Network error fetching {url}: {exc}"
            ) from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 404:
            raise RepositoryNotFoundError(
                "Repository not found. Make sure the name points to a public repository."
            )

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                    "Set the GITHUB_TOKEN environment variable to increase the limit."
                )
            raise RepositoryAccessDeniedError(
                "Access denied. The repository may be private."
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError("GitHub API rate limit exceeded (HTTP 429).")

        raise ContentExtractionError(
            f"GitHub API returned HTTP {resp.status_code} for {url}"
        )
