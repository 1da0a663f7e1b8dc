"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


class ComplexityTier(str, Enum):
    """Coarse size bucket derived from the number of blobs in the tree."""

    SIMPLE = "SIMPLE"
    STANDARD = "STANDARD"
    MODERATE = "MODERATE"
    COMPLEX = "COMPLEX"
    UNKNOWN = "UNKNOWN"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp; ``None`` for anything unparsable."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _count(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """A single node from the GitHub tree API (blob or sub-tree)."""

    path: str
    type: str  # "blob" or "tree"
    size: int = 0

    @property
    def is_blob(self) -> bool:
        return self.type == "blob"


@dataclass(frozen=True, slots=True)
class CommitSummary:
    """One entry of the recent-commit list."""

    sha: str
    date: datetime | None = None
    message: str = ""

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> CommitSummary:
        """Accept both the REST shape (``commit.author.date``) and a flat one."""
        commit = item.get("commit") or {}
        author = commit.get("author") or item.get("author") or {}
        message = commit.get("message", item.get("message", "")) or ""
        return cls(
            sha=str(item.get("sha", "")),
            date=parse_timestamp(author.get("date") if isinstance(author, Mapping) else None),
            message=message,
        )


@dataclass(frozen=True, slots=True)
class RepoMetadata:
    """Repository-level counters and descriptors from the host API."""

    owner: str = ""
    repo: str = ""
    default_branch: str = "main"
    description: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    updated_at: datetime | None = None
    languages: dict[str, int] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_api(
        cls,
        data: Mapping[str, Any],
        *,
        owner: str = "",
        repo: str = "",
        languages: Mapping[str, int] | None = None,
    ) -> RepoMetadata:
        """Build from a ``GET /repos/{owner}/{repo}`` payload, defaulting gaps."""
        owner_block = data.get("owner")
        if not owner and isinstance(owner_block, Mapping):
            owner = str(owner_block.get("login", ""))
        langs = languages if languages is not None else data.get("languages")
        return cls(
            owner=owner,
            repo=repo or str(data.get("name", "")),
            default_branch=data.get("default_branch") or "main",
            description=data.get("description"),
            stargazers_count=_count(data.get("stargazers_count")),
            forks_count=_count(data.get("forks_count")),
            watchers_count=_count(data.get("watchers_count")),
            open_issues_count=_count(data.get("open_issues_count")),
            updated_at=parse_timestamp(data.get("updated_at")),
            languages=dict(langs) if isinstance(langs, Mapping) else {},
        )


# ── Quality report ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class QualityDetails:
    """Boolean signals and counts surfaced alongside the scores."""

    has_tests: bool = False
    has_ci: bool = False
    has_linting: bool = False
    has_docs: bool = False
    file_count: int = 0
    directory_structure: list[str] = field(default_factory=list)
    languages: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasTests": self.has_tests,
            "hasCI": self.has_ci,
            "hasLinting": self.has_linting,
            "hasDocs": self.has_docs,
            "fileCount": self.file_count,
            "directoryStructure": list(self.directory_structure),
            "languages": dict(self.languages),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QualityDetails:
        return cls(
            has_tests=bool(data.get("hasTests", False)),
            has_ci=bool(data.get("hasCI", False)),
            has_linting=bool(data.get("hasLinting", False)),
            has_docs=bool(data.get("hasDocs", False)),
            file_count=int(data.get("fileCount", 0)),
            directory_structure=list(data.get("directoryStructure", [])),
            languages=dict(data.get("languages", {})),
        )


@dataclass(frozen=True, slots=True)
class QualityReport:
    """Composite score, seven sub-scores and categorical metadata."""

    quality_score: int
    complexity_tier: ComplexityTier
    readme_quality: int
    code_organization: int
    test_coverage: int
    documentation: int
    commit_activity: int
    community_engagement: int
    maintenance: int
    details: QualityDetails = field(default_factory=QualityDetails)

    def breakdown(self) -> dict[str, int]:
        """The seven sub-scores keyed by their wire names."""
        return {
            "readmeQuality": self.readme_quality,
            "codeOrganization": self.code_organization,
            "testCoverage": self.test_coverage,
            "documentation": self.documentation,
            "commitActivity": self.commit_activity,
            "communityEngagement": self.community_engagement,
            "maintenance": self.maintenance,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "qualityScore": self.quality_score,
            "complexityTier": self.complexity_tier.value,
            **self.breakdown(),
            "details": self.details.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QualityReport:
        return cls(
            quality_score=int(data["qualityScore"]),
            complexity_tier=ComplexityTier(data.get("complexityTier", "UNKNOWN")),
            readme_quality=int(data["readmeQuality"]),
            code_organization=int(data["codeOrganization"]),
            test_coverage=int(data["testCoverage"]),
            documentation=int(data["documentation"]),
            commit_activity=int(data["commitActivity"]),
            community_engagement=int(data["communityEngagement"]),
            maintenance=int(data["maintenance"]),
            details=QualityDetails.from_dict(data.get("details", {})),
        )


# ── AI commentary ───────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class InterviewQuestion:
    id: int
    question: str
    expected_depth: str
    category: str


@dataclass(frozen=True, slots=True)
class ProjectCommentary:
    """AI (or rule-derived) narrative about a repository."""

    complexity: str  # "beginner" | "intermediate" | "advanced"
    tech_stack: list[str]
    strengths: list[str]
    concerns: list[str]
    architecture_notes: str
    difficulty: str  # "Easy" | "Medium" | "Hard"
    questions: list[InterviewQuestion]
    generated_by: str = "llm"  # "llm" or "rules"


@dataclass(frozen=True, slots=True)
class RepoAnalysis:
    """The final structured output of the analyze-repository use case."""

    full_name: str
    report: QualityReport
    commentary: ProjectCommentary
    languages: dict[str, int]
    implementation_estimate: str
    description: str | None = None


# ── Scorecard ───────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ProjectInfo:
    title: str
    description: str = ""
    tech_stack: list[str] = field(default_factory=list)
    challenge: str = ""
    solution: str = ""


@dataclass(frozen=True, slots=True)
class QuestionAnswer:
    question: str
    expected_depth: str
    category: str
    answer: str = ""
    is_skipped: bool = False
    time_spent: int = 0


@dataclass(frozen=True, slots=True)
class SkillRating:
    score: int
    level: str
    evidence: str


@dataclass(frozen=True, slots=True)
class TechnologyProficiency:
    name: str
    proficiency: str
    percentage: int
    evidence: str


@dataclass(frozen=True, slots=True)
class SkillGap:
    skill: str
    reason: str
    priority: str
    beginner_path: str = ""
    intermediate_path: str = ""
    project_idea: str = ""


@dataclass(frozen=True, slots=True)
class Scorecard:
    overall_score: int
    skill_breakdown: dict[str, SkillRating]
    technologies: list[TechnologyProficiency]
    skill_gaps: list[SkillGap]
    recommended_next_steps: list[str]
    strengths: list[str]
    areas_for_improvement: list[str]
    share_token: str


# ── Stack recommendation ────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RecommendedStack:
    frontend: str
    backend: str
    database: str
    tools: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LearningResource:
    title: str
    url: str
    type: str = "Documentation"


@dataclass(frozen=True, slots=True)
class StackRecommendation:
    """A stack suggested for a build goal, with kick-start commands."""

    stack: RecommendedStack
    explanation: str
    install_commands: list[str]
    resources: list[LearningResource]


# ── Compatibility ───────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CompatibilityMatch:
    score: int
    matched_skills: list[str]
    missing_skills: list[str]
