"""Repository quality scorer — weighted rubric over tree, README and history.

Seven independent sub-scores (each clamped to 0-100) are combined into a
single composite with fixed linear weights.  Every sub-score function is
pure; the only I/O is the recursive tree fetch done by :class:`QualityScorer`.

Failures never reach the caller: tree retrieval and scoring produce a
:data:`ScoreOutcome`, and :func:`collapse` turns a :class:`ScoreFailure`
into the fixed :func:`fallback_report`.
"""

from __future__ import annotations

import logging
import re
import statistics
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence, Union

from evalhub.domain import rubric as R
from evalhub.domain.entities import (
    CommitSummary,
    ComplexityTier,
    QualityDetails,
    QualityReport,
    RepoMetadata,
    TreeEntry,
)
from evalhub.domain.ports.repo_fetcher import RepoFetcher
from evalhub.domain.value_objects import GitHubUrl

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_MARKDOWN_LINK_RE = re.compile(r"\[.*?\]\(.*?\)")
_SECONDS_PER_DAY = 86_400
_FALLBACK_BRANCHES: tuple[str, ...] = ("main", "master")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    return moment.replace(tzinfo=timezone.utc) if moment.tzinfo is None else moment


def _tiered(value: float, tiers: Sequence[tuple[int, int]]) -> int:
    """Sum the points of every ``(threshold, points)`` tier that *value* exceeds."""
    return sum(points for threshold, points in tiers if value > threshold)


def _age_days(moment: datetime, now: datetime) -> float:
    return (now - moment).total_seconds() / _SECONDS_PER_DAY


def _paths(tree: Sequence[TreeEntry], *, lower: bool = False) -> list[str]:
    return [e.path.lower() if lower else e.path for e in tree]


def _blob_count(tree: Sequence[TreeEntry]) -> int:
    return sum(1 for e in tree if e.is_blob)


# ── Sub-scores ──────────────────────────────────────────────────────────────


def score_readme(readme: str | None) -> int:
    """Additive rubric over README length, structure, links and keywords."""
    text = readme or ""
    lower = text.lower()
    score = _tiered(len(text), R.README_LENGTH_TIERS)

    if "# " in text or "## " in text:
        score += R.README_HEADER_POINTS
    if "```" in text:
        score += R.README_CODE_BLOCK_POINTS
    if "![" in text or "<img" in text:
        score += R.README_IMAGE_POINTS
    score += R.README_SECTION_POINTS * sum(1 for kw in R.README_SECTION_KEYWORDS if kw in lower)

    if len(_MARKDOWN_LINK_RE.findall(text)) > R.README_MIN_LINKS:
        score += R.README_LINK_POINTS
    if "badge" in text or "shields.io" in text:
        score += R.README_BADGE_POINTS
    if "api" in lower or "documentation" in lower:
        score += R.README_API_POINTS
    if "example" in lower or "demo" in lower:
        score += R.README_EXAMPLE_POINTS

    return R.clamp_score(score)


def score_code_organization(tree: Sequence[TreeEntry]) -> int:
    """Layout conventions, root config files, size and nesting depth."""
    paths = _paths(tree)
    path_set = set(paths)
    score = 0

    if any(p.startswith(R.ORG_SOURCE_ROOTS) for p in paths):
        score += R.ORG_SOURCE_ROOT_POINTS
    for keyword, points in R.ORG_PATH_KEYWORDS:
        if any(keyword in p for p in paths):
            score += points
    for names, points in R.ORG_ROOT_FILES:
        if path_set.intersection(names):
            score += points

    score += _tiered(_blob_count(tree), R.ORG_FILE_COUNT_TIERS)

    max_depth = max((p.count("/") + 1 for p in paths), default=0)
    if max_depth >= R.ORG_MIN_DEPTH:
        score += R.ORG_DEPTH_POINTS

    return R.clamp_score(score)


def _has_test_dir(paths: Sequence[str]) -> bool:
    return any(marker in p for p in paths for marker in R.TEST_DIR_MARKERS)


def _test_files(paths: Sequence[str]) -> list[str]:
    return [p for p in paths if any(marker in p for marker in R.TEST_FILE_MARKERS)]


def score_test_coverage(tree: Sequence[TreeEntry]) -> int:
    """Presence of test directories, test files and runner/coverage config.

    Heuristic only: nothing here measures executed lines.
    """
    paths = _paths(tree, lower=True)
    path_set = set(paths)
    score = 0

    if _has_test_dir(paths):
        score += R.TEST_DIR_POINTS
    score += _tiered(len(_test_files(paths)), R.TEST_FILE_TIERS)

    for names in R.TEST_RUNNER_CONFIGS:
        if path_set.intersection(names):
            score += R.TEST_RUNNER_POINTS
    if path_set.intersection(R.COVERAGE_CONFIGS) or any(
        p.startswith(R.COVERAGE_OUTPUT_DIR) for p in paths
    ):
        score += R.COVERAGE_POINTS

    return R.clamp_score(score)


def score_documentation(tree: Sequence[TreeEntry]) -> int:
    """Docs directory plus the conventional root-level documents."""
    paths = _paths(tree, lower=True)
    path_set = set(paths)
    score = 0

    if any(p.startswith(R.DOCS_DIR) for p in paths):
        score += R.DOCS_DIR_POINTS
    for names, points in R.DOCS_ROOT_FILES:
        if path_set.intersection(names):
            score += points
    if R.DOCS_API_FILE in path_set or any(R.DOCS_API_MARKER in p for p in paths):
        score += R.DOCS_API_POINTS
    if any(".md" in p and R.DOCS_GUIDE_MARKER in p for p in paths):
        score += R.DOCS_GUIDE_POINTS

    return R.clamp_score(score)


def _cadence_bonus(commits: Sequence[CommitSummary]) -> int:
    """Reward evenly spaced commits among the most recent sample."""
    if len(commits) < R.COMMIT_CONSISTENCY_MIN_COMMITS:
        return 0
    stamps = [
        c.date.timestamp()
        for c in commits[: R.COMMIT_CONSISTENCY_SAMPLE]
        if c.date is not None
    ]
    if len(stamps) < R.COMMIT_CONSISTENCY_MIN_COMMITS:
        return 0

    intervals = [stamps[i - 1] - stamps[i] for i in range(1, len(stamps))]
    mean = statistics.fmean(intervals)
    stddev = statistics.pstdev(intervals)

    if stddev < mean * R.COMMIT_STEADY_RATIO:
        return R.COMMIT_STEADY_POINTS
    if stddev < mean:
        return R.COMMIT_REGULAR_POINTS
    return 0


def score_commit_activity(commits: Sequence[CommitSummary], now: datetime) -> int:
    """Volume, recency and cadence of the recent commit list."""
    if not commits:
        return 0

    score = _tiered(len(commits), R.COMMIT_COUNT_TIERS)
    recent = sum(
        1
        for c in commits
        if c.date is not None and _age_days(c.date, now) <= R.COMMIT_RECENT_WINDOW_DAYS
    )
    score += _tiered(recent, R.COMMIT_RECENT_TIERS)
    score += _cadence_bonus(commits)

    return R.clamp_score(score)


def score_community(metadata: RepoMetadata) -> int:
    """Tiered bonuses on stars, forks, watchers and a healthy issue count."""
    points = R.COMMUNITY_TIER_POINTS
    score = (
        points * sum(1 for t in R.STAR_THRESHOLDS if metadata.stargazers_count > t)
        + points * sum(1 for t in R.FORK_THRESHOLDS if metadata.forks_count > t)
        + points * sum(1 for t in R.WATCHER_THRESHOLDS if metadata.watchers_count > t)
    )
    low, high = R.OPEN_ISSUES_RANGE
    if low < metadata.open_issues_count < high:
        score += R.OPEN_ISSUES_POINTS

    return R.clamp_score(score)


def _has_ci(paths: Sequence[str]) -> bool:
    return any(marker in p for p in paths for marker in R.CI_MARKERS)


def score_maintenance(metadata: RepoMetadata, tree: Sequence[TreeEntry], now: datetime) -> int:
    """Update recency plus CI and lint/format/editor configuration."""
    paths = _paths(tree, lower=True)
    root_files = [p for p in paths if "/" not in p]
    score = 0

    if metadata.updated_at is not None:
        age = _age_days(metadata.updated_at, now)
        for max_age, points in R.UPDATE_RECENCY_BANDS:
            if age < max_age:
                score += points
                break

    if _has_ci(paths):
        score += R.CI_POINTS
    if any(p.startswith(R.ESLINT_PREFIX) for p in root_files):
        score += R.ESLINT_POINTS
    if any(p.startswith(R.PRETTIER_PREFIX) or p in R.PRETTIER_FILES for p in root_files):
        score += R.PRETTIER_POINTS
    if R.EDITORCONFIG_FILE in root_files:
        score += R.EDITORCONFIG_POINTS

    return R.clamp_score(score)


# ── Aggregation ─────────────────────────────────────────────────────────────


def classify_complexity(blob_count: int) -> ComplexityTier:
    for threshold, tier in R.COMPLEXITY_BANDS:
        if blob_count > threshold:
            return ComplexityTier(tier)
    return ComplexityTier.SIMPLE


def top_level_directories(tree: Sequence[TreeEntry]) -> list[str]:
    """First-level directory names in first-seen order, capped."""
    seen: dict[str, None] = {}
    for entry in tree:
        head, sep, _ = entry.path.partition("/")
        if sep or entry.type == "tree":
            seen.setdefault(head, None)
    return list(seen)[: R.DIRECTORY_STRUCTURE_LIMIT]


def _details(tree: Sequence[TreeEntry], metadata: RepoMetadata) -> QualityDetails:
    paths = _paths(tree, lower=True)
    return QualityDetails(
        has_tests=_has_test_dir(paths) or bool(_test_files(paths)),
        has_ci=_has_ci(paths),
        has_linting=any(marker in p for p in paths for marker in R.LINT_MARKERS),
        has_docs=any(p.startswith(R.DOCS_DIR) for p in paths),
        file_count=_blob_count(tree),
        directory_structure=top_level_directories(tree),
        languages=dict(metadata.languages),
    )


def build_report(
    tree: Sequence[TreeEntry],
    readme: str | None,
    metadata: RepoMetadata,
    commits: Sequence[CommitSummary],
    *,
    now: datetime,
    weights: R.QualityWeights = R.DEFAULT_WEIGHTS,
) -> QualityReport:
    """Compute the full report from already-fetched inputs."""
    readme_quality = score_readme(readme)
    organization = score_code_organization(tree)
    tests = score_test_coverage(tree)
    docs = score_documentation(tree)
    activity = score_commit_activity(commits, now)
    community = score_community(metadata)
    upkeep = score_maintenance(metadata, tree, now)

    composite = (
        weights.readme_quality * readme_quality
        + weights.code_organization * organization
        + weights.test_coverage * tests
        + weights.documentation * docs
        + weights.commit_activity * activity
        + weights.community_engagement * community
        + weights.maintenance * upkeep
    )

    return QualityReport(
        quality_score=R.clamp_score(R.round_half_up(composite)),
        complexity_tier=classify_complexity(_blob_count(tree)),
        readme_quality=readme_quality,
        code_organization=organization,
        test_coverage=tests,
        documentation=docs,
        commit_activity=activity,
        community_engagement=community,
        maintenance=upkeep,
        details=_details(tree, metadata),
    )


def fallback_report() -> QualityReport:
    """The fixed report returned whenever scoring cannot complete."""
    return QualityReport(
        quality_score=R.FALLBACK_QUALITY_SCORE,
        complexity_tier=ComplexityTier.UNKNOWN,
        readme_quality=R.FALLBACK_SUB_SCORE,
        code_organization=R.FALLBACK_SUB_SCORE,
        test_coverage=R.FALLBACK_TEST_COVERAGE,
        documentation=R.FALLBACK_SUB_SCORE,
        commit_activity=R.FALLBACK_SUB_SCORE,
        community_engagement=R.FALLBACK_SUB_SCORE,
        maintenance=R.FALLBACK_SUB_SCORE,
        details=QualityDetails(),
    )


# ── Tagged outcome ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ScoreSuccess:
    report: QualityReport


@dataclass(frozen=True, slots=True)
class ScoreFailure:
    reason: str


ScoreOutcome = Union[ScoreSuccess, ScoreFailure]


def collapse(outcome: ScoreOutcome) -> QualityReport:
    """Return the computed report, or the fallback report for a failure."""
    if isinstance(outcome, ScoreSuccess):
        return outcome.report
    return fallback_report()


def score_tree(
    tree: Sequence[TreeEntry],
    readme: str | None,
    metadata: RepoMetadata,
    commits: Sequence[CommitSummary],
    *,
    now: datetime,
    weights: R.QualityWeights = R.DEFAULT_WEIGHTS,
) -> ScoreOutcome:
    """:func:`build_report` with any computation error captured as a failure."""
    try:
        return ScoreSuccess(build_report(tree, readme, metadata, commits, now=now, weights=weights))
    except Exception as exc:  # noqa: BLE001
        return ScoreFailure(f"scoring error: {type(exc).__name__}: {exc}")


# ── Scorer (with tree fetch) ────────────────────────────────────────────────


class QualityScorer:
    """Fetch the recursive tree and score a repository; never raises.

    Parameters
    ----------
    fetcher:
        Adapter used for the single tree request; holds the auth token.
    weights:
        Aggregation weights (defaults to the product rubric).
    clock:
        Source of "now" for the recency terms; inject a fixed clock in tests.
    tree_timeout:
        Per-request timeout in seconds for each branch attempt.
    """

    def __init__(
        self,
        fetcher: RepoFetcher,
        *,
        weights: R.QualityWeights = R.DEFAULT_WEIGHTS,
        clock: Clock = utc_now,
        tree_timeout: float = 10.0,
    ) -> None:
        self._fetcher = fetcher
        self._weights = weights
        self._clock = clock
        self._tree_timeout = tree_timeout

    async def evaluate(
        self,
        owner: str,
        repo: str,
        readme: str | None,
        metadata: RepoMetadata | None,
        commits: Sequence[CommitSummary] | None,
    ) -> QualityReport:
        """Score ``owner/repo``; returns the fallback report on any failure."""
        outcome = await self.assess(owner, repo, readme, metadata, commits)
        if isinstance(outcome, ScoreFailure):
            logger.warning(
                "Quality scoring for %s/%s fell back to defaults: %s",
                owner, repo, outcome.reason,
            )
        return collapse(outcome)

    async def assess(
        self,
        owner: str,
        repo: str,
        readme: str | None,
        metadata: RepoMetadata | None,
        commits: Sequence[CommitSummary] | None,
    ) -> ScoreOutcome:
        """Like :meth:`evaluate` but returns the tagged outcome."""
        metadata = metadata or RepoMetadata(owner=owner, repo=repo)
        tree = await self._fetch_tree(GitHubUrl(owner, repo, f"{owner}/{repo}"), metadata)
        if isinstance(tree, ScoreFailure):
            return tree
        return score_tree(
            tree, readme, metadata, list(commits or []),
            now=_as_utc(self._clock()), weights=self._weights,
        )

    async def _fetch_tree(
        self, url: GitHubUrl, metadata: RepoMetadata
    ) -> list[TreeEntry] | ScoreFailure:
        """Try the default branch, then ``main``, then ``master``."""
        branches = list(dict.fromkeys([metadata.default_branch or "main", *_FALLBACK_BRANCHES]))
        errors: list[str] = []
        for branch in branches:
            try:
                return await self._fetcher.fetch_tree(url, branch, timeout=self._tree_timeout)
            except Exception as exc:  # noqa: BLE001
                logger.debug("Tree fetch for %s@%s failed", url.full_name, branch, exc_info=True)
                errors.append(f"{branch}: {exc}")
        return ScoreFailure("tree fetch failed (" + "; ".join(errors) + ")")
