"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from evalhub.domain.entities import CommitSummary, RepoMetadata, TreeEntry
from evalhub.domain.value_objects import GitHubUrl


class RepoFetcher(Protocol):
    """Abstract contract for fetching GitHub repository data."""

    async def fetch_metadata(self, url: GitHubUrl) -> RepoMetadata:
        """Return repository counters and descriptors (languages left empty)."""
        ...

    async def fetch_tree(
        self, url: GitHubUrl, branch: str, *, timeout: float | None = None
    ) -> list[TreeEntry]:
        """Return the recursive file tree for the given branch."""
        ...

    async def fetch_readme(self, url: GitHubUrl) -> str | None:
        """Return the root README text, or ``None`` when there is none."""
        ...

    async def fetch_languages(self, url: GitHubUrl) -> dict[str, int]:
        """Return language → byte-count mapping from the GitHub Languages API."""
        ...

    async def fetch_commits(self, url: GitHubUrl, limit: int = 100) -> list[CommitSummary]:
        """Return the most recent commits on the default branch."""
        ...
