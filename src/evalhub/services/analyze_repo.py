"""Analyze-repository use case — the main orchestration pipeline.

Depends only on the ports (:class:`RepoFetcher`, :class:`LlmGateway`,
:class:`ReportCache`) plus the scorer and commentary services.  The
interface layer injects concrete adapters at runtime.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging

from evalhub.domain.entities import (
    ComplexityTier,
    ProjectInfo,
    QualityReport,
    RepoAnalysis,
    RepoMetadata,
)
from evalhub.domain.exceptions import ReadmeNotFoundError
from evalhub.domain.ports.llm_gateway import LlmGateway
from evalhub.domain.ports.report_cache import ReportCache
from evalhub.domain.ports.repo_fetcher import RepoFetcher
from evalhub.domain.value_objects import GitHubUrl
from evalhub.services.commentary import CommentaryWriter
from evalhub.services.quality_scorer import QualityScorer, ScoreFailure, collapse

logger = logging.getLogger(__name__)


def estimate_implementation_time(report: QualityReport) -> str:
    """Rough build-time estimate from the complexity tier and file count."""
    tier = report.complexity_tier
    files = report.details.file_count
    if tier is ComplexityTier.COMPLEX or files > 100:
        return "2-4 WEEKS"
    if tier is ComplexityTier.MODERATE or files > 50:
        return "1-2 WEEKS"
    if files > 20:
        return "3-7 DAYS"
    return "1-3 DAYS"


def _ranked_languages(languages: dict[str, int]) -> list[str]:
    return [name for name, _ in sorted(languages.items(), key=lambda item: -item[1])]


class AnalyzeRepoUseCase:
    """Orchestrates repo → quality report → commentary.

    Parameters
    ----------
    repo_fetcher:
        Adapter for GitHub metadata, README, languages and commits.
    llm_gateway:
        Adapter that can send prompts to an LLM.
    scorer:
        Quality scorer; performs its own tree fetch.
    cache:
        Report cache keyed by ``owner/name``.
    max_commits:
        How many recent commits to feed into the activity score.
    """

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        llm_gateway: LlmGateway,
        scorer: QualityScorer,
        cache: ReportCache,
        max_commits: int = 100,
    ) -> None:
        self._fetcher = repo_fetcher
        self._commentary = CommentaryWriter(llm_gateway)
        self._scorer = scorer
        self._cache = cache
        self._max_commits = max_commits

    # ── Public entry points ─────────────────────────────────────────────

    async def execute(self, repo_ref: str) -> RepoAnalysis:
        """Score the repository and attach commentary plus an estimate."""
        url = GitHubUrl.from_string(repo_ref)
        logger.info("Analyzing %s", url.full_name)

        metadata, readme, languages = await self._gather(url)
        if readme is None:
            raise ReadmeNotFoundError(f"No README found for {url.full_name}.")

        report = await self._report(url, metadata, readme)

        project = ProjectInfo(
            title=url.full_name,
            description=metadata.description or "",
            tech_stack=_ranked_languages(languages),
        )
        commentary = await self._commentary.write(project, report, languages, readme)

        return RepoAnalysis(
            full_name=url.full_name,
            report=report,
            commentary=commentary,
            languages=languages,
            implementation_estimate=estimate_implementation_time(report),
            description=metadata.description,
        )

    async def quality_report(self, repo_ref: str) -> QualityReport:
        """Only the quality report, served from cache when possible."""
        url = GitHubUrl.from_string(repo_ref)
        cached = self._cache.get(url.full_name)
        if cached is not None:
            logger.info("Quality report cache hit for %s", url.full_name)
            return cached
        metadata, readme, _ = await self._gather(url)
        return await self._report(url, metadata, readme)

    def invalidate(self, repo_ref: str) -> bool:
        url = GitHubUrl.from_string(repo_ref)
        removed = self._cache.invalidate(url.full_name)
        logger.info("Invalidated cached report for %s: %s", url.full_name, removed)
        return removed

    # ── Helpers ─────────────────────────────────────────────────────────

    async def _gather(
        self, url: GitHubUrl
    ) -> tuple[RepoMetadata, str | None, dict[str, int]]:
        metadata, readme, languages = await asyncio.gather(
            self._fetcher.fetch_metadata(url),
            self._fetcher.fetch_readme(url),
            self._fetcher.fetch_languages(url),
        )
        languages = dict(languages or metadata.languages)
        return dataclasses.replace(metadata, languages=languages), readme, languages

    async def _report(
        self, url: GitHubUrl, metadata: RepoMetadata, readme: str | None
    ) -> QualityReport:
        cached = self._cache.get(url.full_name)
        if cached is not None:
            logger.info("Quality report cache hit for %s", url.full_name)
            return cached

        commits = await self._fetcher.fetch_commits(url, self._max_commits)
        outcome = await self._scorer.assess(url.owner, url.repo, readme, metadata, commits)
        if isinstance(outcome, ScoreFailure):
            # Fallback reports are never cached.
            logger.warning(
                "Quality scoring for %s fell back to defaults: %s", url.full_name, outcome.reason
            )
            return collapse(outcome)
        self._cache.put(url.full_name, outcome.report)
        return outcome.report
