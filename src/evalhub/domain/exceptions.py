"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
The quality scorer never lets any of them escape.
"""

from __future__ import annotations


class EvalHubError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidGitHubUrlError(EvalHubError):
    """The supplied reference is neither ``owner/name`` nor a GitHub repo URL."""


class ConfigurationError(EvalHubError):
    """Settings are present but inconsistent (e.g. weights not summing to 1)."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class RepositoryNotFoundError(EvalHubError):
    """The repository (or the requested ref) does not exist (404)."""


class ReadmeNotFoundError(EvalHubError):
    """The repository has no README on any of the branches tried."""


class RepositoryAccessDeniedError(EvalHubError):
    """Access to the repository was denied (403)."""


class GitHubRateLimitError(EvalHubError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


# ── LLM errors ──────────────────────────────────────────────────────────────


class LlmError(EvalHubError):
    """Any error originating from the LLM provider."""


# ── Processing errors ───────────────────────────────────────────────────────


class ContentExtractionError(EvalHubError):
    """Network failure or unexpected status while fetching repository data."""
