"""Tests for the GitHub REST adapter — parsing and error translation."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from evalhub.domain.exceptions import (
    ContentExtractionError,
    GitHubRateLimitError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
)
from evalhub.domain.value_objects import GitHubUrl
from evalhub.infrastructure.github_rest_adapter import GitHubRestAdapter

URL = GitHubUrl.from_string("octocat/hello-world")


def _mock_response(data=None, status_code=200, headers=None, text=""):
    """Create a mock httpx response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = data
    resp.headers = headers or {}
    resp.text = text
    return resp


def _adapter(*responses, token=None):
    client = AsyncMock()
    client.get.side_effect = list(responses)
    return GitHubRestAdapter(client=client, token=token), client


@pytest.mark.asyncio
async def test_fetch_metadata_parses_counters():
    adapter, client = _adapter(_mock_response({
        "name": "hello-world",
        "default_branch": "trunk",
        "description": "My first repo",
        "stargazers_count": 12,
        "forks_count": 3,
        "watchers_count": None,
        "open_issues_count": 4,
        "updated_at": "2026-01-10T08:00:00Z",
    }))

    meta = await adapter.fetch_metadata(URL)

    assert meta.full_name == "octocat/hello-world"
    assert meta.default_branch == "trunk"
    assert meta.stargazers_count == 12
    assert meta.watchers_count == 0
    assert meta.updated_at is not None and meta.updated_at.day == 10
    assert client.get.call_args.args[0].endswith("/repos/octocat/hello-world")


@pytest.mark.asyncio
async def test_fetch_tree_passes_timeout_and_recursive_flag():
    adapter, client = _adapter(_mock_response({
        "tree": [
            {"path": "src", "type": "tree"},
            {"path": "src/app.py", "type": "blob", "size": 120},
        ],
        "truncated": False,
    }))

    tree = await adapter.fetch_tree(URL, "main", timeout=10.0)

    assert [e.path for e in tree] == ["src", "src/app.py"]
    assert tree[1].is_blob and tree[1].size == 120
    kwargs = client.get.call_args.kwargs
    assert kwargs["timeout"] == 10.0
    assert kwargs["params"] == {"recursive": "1"}
    assert client.get.call_args.args[0].endswith("/git/trees/main")


@pytest.mark.asyncio
async def test_fetch_tree_without_timeout_uses_client_default():
    adapter, client = _adapter(_mock_response({"tree": []}))

    assert await adapter.fetch_tree(URL, "main") == []
    assert "timeout" not in client.get.call_args.kwargs


@pytest.mark.asyncio
async def test_token_is_sent_as_bearer():
    adapter, client = _adapter(_mock_response({"tree": []}), token="ghp_abc")

    await adapter.fetch_tree(URL, "main")

    assert client.get.call_args.kwargs["headers"]["Authorization"] == "Bearer ghp_abc"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "headers", "error"),
    [
        (404, {}, RepositoryNotFoundError),
        (403, {"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1768464000"}, GitHubRateLimitError),
        (403, {"x-ratelimit-remaining": "12"}, RepositoryAccessDeniedError),
        (429, {}, GitHubRateLimitError),
        (500, {}, ContentExtractionError),
    ],
)
async def test_api_errors_are_translated(status, headers, error):
    adapter, _ = _adapter(_mock_response(status_code=status, headers=headers))

    with pytest.raises(error):
        await adapter.fetch_metadata(URL)


@pytest.mark.asyncio
async def test_network_error_becomes_content_extraction_error():
    client = AsyncMock()
    client.get.side_effect = httpx.ConnectError("connection refused")
    adapter = GitHubRestAdapter(client=client)

    with pytest.raises(ContentExtractionError):
        await adapter.fetch_tree(URL, "main", timeout=1.0)


@pytest.mark.asyncio
async def test_fetch_readme_falls_through_branches():
    adapter, client = _adapter(
        _mock_response(status_code=404),
        _mock_response(status_code=200, text="# Hello"),
    )

    assert await adapter.fetch_readme(URL) == "# Hello"
    urls = [call.args[0] for call in client.get.call_args_list]
    assert urls[0].endswith("/octocat/hello-world/main/README.md")
    assert urls[1].endswith("/octocat/hello-world/master/README.md")


@pytest.mark.asyncio
async def test_fetch_readme_returns_none_when_missing():
    adapter, client = _adapter(
        _mock_response(status_code=404),
        httpx.ReadTimeout("slow"),
        _mock_response(status_code=404),
    )

    assert await adapter.fetch_readme(URL) is None
    assert client.get.await_count == 3


@pytest.mark.asyncio
async def test_fetch_languages_swallows_errors():
    adapter, _ = _adapter(_mock_response(status_code=404))

    assert await adapter.fetch_languages(URL) == {}


@pytest.mark.asyncio
async def test_fetch_commits_parses_and_caps_page_size():
    adapter, client = _adapter(_mock_response([
        {
            "sha": "abc123",
            "commit": {
                "message": "Initial commit",
                "author": {"name": "Alice", "date": "2026-01-01T00:00:00Z"},
            },
        },
        {"sha": "def456", "commit": {"message": "No date", "author": {}}},
    ]))

    commits = await adapter.fetch_commits(URL, limit=500)

    assert [c.sha for c in commits] == ["abc123", "def456"]
    assert commits[0].date is not None and commits[0].date.year == 2026
    assert commits[1].date is None
    assert client.get.call_args.kwargs["params"] == {"per_page": "100"}


@pytest.mark.asyncio
async def test_fetch_commits_returns_empty_on_failure():
    adapter, _ = _adapter(_mock_response(status_code=409))

    assert await adapter.fetch_commits(URL) == []
