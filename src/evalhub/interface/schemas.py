"""Pydantic request / response DTOs for the API boundary.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from evalhub.domain.entities import (
    CompatibilityMatch,
    InterviewQuestion,
    ProjectCommentary,
    ProjectInfo,
    QualityReport,
    QuestionAnswer,
    RepoAnalysis,
    Scorecard,
    StackRecommendation,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Requests ────────────────────────────────────────────────────────────────


class RepoRequest(CamelModel):
    """Request body for ``POST /analyze`` and ``POST /quality``."""

    repo: str

    @field_validator("repo")
    @classmethod
    def _must_not_be_empty(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "repo must not be empty."
            raise ValueError(msg)
        return stripped


class ProjectBody(CamelModel):
    title: str
    description: str = ""
    tech_stack: list[str] = Field(default_factory=list)
    challenge: str = ""
    solution: str = ""

    def to_entity(self) -> ProjectInfo:
        return ProjectInfo(
            title=self.title,
            description=self.description,
            tech_stack=list(self.tech_stack),
            challenge=self.challenge,
            solution=self.solution,
        )


class QuestionBody(CamelModel):
    id: int = 0
    question: str
    expected_depth: str = ""
    category: str = "General"


class CommentaryBody(CamelModel):
    complexity: str = "intermediate"
    tech_stack: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    architecture_notes: str = ""
    difficulty: str = "Medium"
    questions: list[QuestionBody] = Field(default_factory=list)
    generated_by: str = "llm"

    def to_entity(self) -> ProjectCommentary:
        return ProjectCommentary(
            complexity=self.complexity,
            tech_stack=list(self.tech_stack),
            strengths=list(self.strengths),
            concerns=list(self.concerns),
            architecture_notes=self.architecture_notes,
            difficulty=self.difficulty,
            questions=[
                InterviewQuestion(q.id, q.question, q.expected_depth, q.category)
                for q in self.questions
            ],
            generated_by=self.generated_by,
        )

    @classmethod
    def from_entity(cls, commentary: ProjectCommentary) -> CommentaryBody:
        return cls(
            complexity=commentary.complexity,
            tech_stack=commentary.tech_stack,
            strengths=commentary.strengths,
            concerns=commentary.concerns,
            architecture_notes=commentary.architecture_notes,
            difficulty=commentary.difficulty,
            questions=[
                QuestionBody(
                    id=q.id,
                    question=q.question,
                    expected_depth=q.expected_depth,
                    category=q.category,
                )
                for q in commentary.questions
            ],
            generated_by=commentary.generated_by,
        )


class AnswerBody(CamelModel):
    question: str
    expected_depth: str = ""
    category: str = "General"
    answer: str = ""
    is_skipped: bool = False
    time_spent: int = Field(default=0, ge=0)

    def to_entity(self) -> QuestionAnswer:
        return QuestionAnswer(
            question=self.question,
            expected_depth=self.expected_depth,
            category=self.category,
            answer=self.answer,
            is_skipped=self.is_skipped,
            time_spent=self.time_spent,
        )


class ScorecardRequest(CamelModel):
    """Request body for ``POST /scorecard``."""

    project: ProjectBody
    commentary: CommentaryBody
    answers: list[AnswerBody]


class CompatibilityRequest(CamelModel):
    """Request body for ``POST /compatibility``."""

    user_stack: list[str]
    target_stack: list[str]


class RecommendRequest(CamelModel):
    """Request body for ``POST /recommend``."""

    goal: str
    preferences: str = ""

    @field_validator("goal")
    @classmethod
    def _goal_must_not_be_empty(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "goal must not be empty."
            raise ValueError(msg)
        return stripped


# ── Responses ───────────────────────────────────────────────────────────────


class QualityDetailsResponse(CamelModel):
    has_tests: bool
    has_ci: bool = Field(alias="hasCI")
    has_linting: bool
    has_docs: bool
    file_count: int
    directory_structure: list[str]
    languages: dict[str, int]


class QualityReportResponse(CamelModel):
    """Successful response from ``POST /quality``."""

    quality_score: int
    complexity_tier: str
    readme_quality: int
    code_organization: int
    test_coverage: int
    documentation: int
    commit_activity: int
    community_engagement: int
    maintenance: int
    details: QualityDetailsResponse

    @classmethod
    def from_entity(cls, report: QualityReport) -> QualityReportResponse:
        return cls.model_validate(report.to_dict())


class AnalysisResponse(CamelModel):
    """Successful response from ``POST /analyze``."""

    full_name: str
    description: str | None = None
    languages: dict[str, int]
    implementation_estimate: str
    quality: QualityReportResponse
    commentary: CommentaryBody

    @classmethod
    def from_entity(cls, analysis: RepoAnalysis) -> AnalysisResponse:
        return cls(
            full_name=analysis.full_name,
            description=analysis.description,
            languages=analysis.languages,
            implementation_estimate=analysis.implementation_estimate,
            quality=QualityReportResponse.from_entity(analysis.report),
            commentary=CommentaryBody.from_entity(analysis.commentary),
        )


class InvalidationResponse(CamelModel):
    invalidated: bool


class SkillRatingResponse(CamelModel):
    score: int
    level: str
    evidence: str


class TechnologyResponse(CamelModel):
    name: str
    proficiency: str
    percentage: int
    evidence: str


class SkillGapResponse(CamelModel):
    skill: str
    reason: str
    priority: str
    beginner_path: str
    intermediate_path: str
    project_idea: str


class ScorecardResponse(CamelModel):
    """Successful response from ``POST /scorecard``."""

    overall_score: int
    skill_breakdown: dict[str, SkillRatingResponse]
    technologies: list[TechnologyResponse]
    skill_gaps: list[SkillGapResponse]
    recommended_next_steps: list[str]
    strengths: list[str]
    areas_for_improvement: list[str]
    share_token: str

    @classmethod
    def from_entity(cls, card: Scorecard) -> ScorecardResponse:
        return cls(
            overall_score=card.overall_score,
            skill_breakdown={
                name: SkillRatingResponse(score=r.score, level=r.level, evidence=r.evidence)
                for name, r in card.skill_breakdown.items()
            },
            technologies=[
                TechnologyResponse(
                    name=t.name, proficiency=t.proficiency,
                    percentage=t.percentage, evidence=t.evidence,
                )
                for t in card.technologies
            ],
            skill_gaps=[
                SkillGapResponse(
                    skill=g.skill, reason=g.reason, priority=g.priority,
                    beginner_path=g.beginner_path,
                    intermediate_path=g.intermediate_path,
                    project_idea=g.project_idea,
                )
                for g in card.skill_gaps
            ],
            recommended_next_steps=card.recommended_next_steps,
            strengths=card.strengths,
            areas_for_improvement=card.areas_for_improvement,
            share_token=card.share_token,
        )


class CompatibilityResponse(CamelModel):
    """Successful response from ``POST /compatibility``."""

    score: int
    matched_skills: list[str]
    missing_skills: list[str]

    @classmethod
    def from_entity(cls, match: CompatibilityMatch) -> CompatibilityResponse:
        return cls(
            score=match.score,
            matched_skills=match.matched_skills,
            missing_skills=match.missing_skills,
        )


class RecommendedStackResponse(CamelModel):
    frontend: str
    backend: str
    database: str
    tools: list[str]


class ResourceResponse(CamelModel):
    title: str
    url: str
    type: str


class RecommendationResponse(CamelModel):
    """Successful response from ``POST /recommend``."""

    recommended_stack: RecommendedStackResponse
    explanation: str
    install_commands: list[str]
    resources: list[ResourceResponse]

    @classmethod
    def from_entity(cls, rec: StackRecommendation) -> RecommendationResponse:
        stack = rec.stack
        return cls(
            recommended_stack=RecommendedStackResponse(
                frontend=stack.frontend, backend=stack.backend,
                database=stack.database, tools=stack.tools,
            ),
            explanation=rec.explanation,
            install_commands=rec.install_commands,
            resources=[
                ResourceResponse(title=r.title, url=r.url, type=r.type) for r in rec.resources
            ],
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
