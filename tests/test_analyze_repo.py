"""Tests for the analyze-repository use case."""

from __future__ import annotations

import dataclasses
import json
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from evalhub.domain.entities import ComplexityTier, QualityDetails, RepoMetadata
from evalhub.domain.exceptions import (
    ContentExtractionError,
    InvalidGitHubUrlError,
    LlmError,
    ReadmeNotFoundError,
)
from evalhub.infrastructure.report_cache import InMemoryReportCache
from evalhub.services.analyze_repo import AnalyzeRepoUseCase, estimate_implementation_time
from evalhub.services.quality_scorer import QualityScorer, fallback_report
from tests.conftest import NOW, blobs, commits_every

README = "# Demo\n\n## Usage\n\n```\nmake\n```\n"


def _fetcher(readme: str | None = README) -> AsyncMock:
    fetcher = AsyncMock()
    fetcher.fetch_metadata.return_value = RepoMetadata(
        owner="octo",
        repo="demo",
        description="A demo service",
        stargazers_count=25,
        updated_at=NOW - timedelta(days=2),
    )
    fetcher.fetch_readme.return_value = readme
    fetcher.fetch_languages.return_value = {"Python": 900, "Shell": 100}
    fetcher.fetch_commits.return_value = commits_every(4, timedelta(days=1))
    fetcher.fetch_tree.return_value = blobs(
        "README.md", "src/app.py", "tests/test_app.py", ".github/workflows/ci.yml"
    )
    return fetcher


def _llm(content: str | None = None, error: Exception | None = None) -> AsyncMock:
    llm = AsyncMock()
    if error is not None:
        llm.complete.side_effect = error
    else:
        llm.complete.return_value = content or json.dumps({
            "complexity": "intermediate",
            "techStack": ["Python"],
            "strengths": ["CI in place"],
            "concerns": [],
            "architectureNotes": "Small service.",
            "difficulty": "Medium",
            "questions": [
                {"question": f"Q{i}", "expectedDepth": "d", "category": "c"} for i in range(5)
            ],
        })
    return llm


def _use_case(fetcher, llm=None, cache=None) -> AnalyzeRepoUseCase:
    return AnalyzeRepoUseCase(
        repo_fetcher=fetcher,
        llm_gateway=llm or _llm(),
        scorer=QualityScorer(fetcher, clock=lambda: NOW),
        cache=cache or InMemoryReportCache(),
        max_commits=50,
    )


@pytest.mark.asyncio
async def test_execute_scores_and_comments():
    fetcher = _fetcher()

    result = await _use_case(fetcher).execute("https://github.com/octo/demo")

    assert result.full_name == "octo/demo"
    assert result.description == "A demo service"
    assert result.languages == {"Python": 900, "Shell": 100}
    assert result.report.details.languages == {"Python": 900, "Shell": 100}
    assert result.report.details.file_count == 4
    assert result.report.complexity_tier is ComplexityTier.SIMPLE
    assert result.commentary.generated_by == "llm"
    assert result.implementation_estimate == "1-3 DAYS"
    fetcher.fetch_commits.assert_awaited_once()
    assert fetcher.fetch_commits.await_args.args[1] == 50


@pytest.mark.asyncio
async def test_execute_reuses_cached_report():
    fetcher = _fetcher()
    use_case = _use_case(fetcher)

    first = await use_case.execute("octo/demo")
    second = await use_case.execute("Octo/Demo")

    assert first.report == second.report
    assert fetcher.fetch_tree.await_count == 1
    assert fetcher.fetch_commits.await_count == 1


@pytest.mark.asyncio
async def test_execute_without_readme_raises():
    fetcher = _fetcher(readme=None)

    with pytest.raises(ReadmeNotFoundError):
        await _use_case(fetcher).execute("octo/demo")
    fetcher.fetch_tree.assert_not_awaited()


@pytest.mark.asyncio
async def test_execute_rejects_invalid_reference():
    with pytest.raises(InvalidGitHubUrlError):
        await _use_case(_fetcher()).execute("not a repo")


@pytest.mark.asyncio
async def test_execute_falls_back_to_rule_commentary():
    result = await _use_case(_fetcher(), llm=_llm(error=LlmError("quota"))).execute("octo/demo")

    assert result.commentary.generated_by == "rules"
    assert result.commentary.tech_stack == ["Python", "Shell"]
    assert len(result.commentary.questions) == 5


@pytest.mark.asyncio
async def test_execute_with_failed_tree_fetch_returns_fallback_report():
    fetcher = _fetcher()
    fetcher.fetch_tree.side_effect = ContentExtractionError("timed out")

    result = await _use_case(fetcher).execute("octo/demo")

    assert result.report == fallback_report()
    assert result.implementation_estimate == "1-3 DAYS"


@pytest.mark.asyncio
async def test_fallback_report_is_not_cached():
    fetcher = _fetcher()
    tree = fetcher.fetch_tree.return_value
    timeout = ContentExtractionError("timed out")
    fetcher.fetch_tree.side_effect = [timeout, timeout, tree]
    cache = InMemoryReportCache()
    use_case = _use_case(fetcher, cache=cache)

    degraded = await use_case.quality_report("octo/demo")
    assert degraded == fallback_report()
    assert cache.get("octo/demo") is None

    recovered = await use_case.quality_report("octo/demo")
    assert recovered != fallback_report()
    assert recovered.details.file_count == 4
    assert fetcher.fetch_tree.await_count == 3
    assert cache.get("octo/demo") == recovered


@pytest.mark.asyncio
async def test_quality_report_and_invalidate():
    fetcher = _fetcher()
    use_case = _use_case(fetcher)

    report = await use_case.quality_report("octo/demo")
    cached = await use_case.quality_report("octo/demo")

    assert report == cached
    assert fetcher.fetch_tree.await_count == 1
    assert use_case.invalidate("https://github.com/octo/demo") is True
    assert use_case.invalidate("octo/demo") is False

    await use_case.quality_report("octo/demo")
    assert fetcher.fetch_tree.await_count == 2


@pytest.mark.parametrize(
    ("tier", "files", "expected"),
    [
        (ComplexityTier.COMPLEX, 10, "2-4 WEEKS"),
        (ComplexityTier.UNKNOWN, 150, "2-4 WEEKS"),
        (ComplexityTier.MODERATE, 10, "1-2 WEEKS"),
        (ComplexityTier.STANDARD, 60, "1-2 WEEKS"),
        (ComplexityTier.STANDARD, 30, "3-7 DAYS"),
        (ComplexityTier.SIMPLE, 20, "1-3 DAYS"),
    ],
)
def test_estimate_implementation_time(tier, files, expected):
    report = dataclasses.replace(
        fallback_report(), complexity_tier=tier, details=QualityDetails(file_count=files)
    )
    assert estimate_implementation_time(report) == expected
