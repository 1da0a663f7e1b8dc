"""Project commentary — LLM narrative with a rule-derived fallback.

The LLM sees the measured quality breakdown alongside the README so its
commentary stays anchored to the numbers.  When the LLM is unavailable or
answers with something unusable, :func:`rule_based_commentary` produces an
equivalent structure straight from the :class:`QualityReport`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from evalhub.domain.entities import (
    InterviewQuestion,
    ProjectCommentary,
    ProjectInfo,
    QualityReport,
)
from evalhub.domain.exceptions import LlmError
from evalhub.domain.ports.llm_gateway import LlmGateway
from evalhub.services.content_assembler import (
    README_EXCERPT_CHARS,
    assemble,
    format_bullets,
    format_languages,
    format_quality,
)
from evalhub.services.llm_json import parse_json_object, str_list
from evalhub.services.security_sentinel import sanitize

logger = logging.getLogger(__name__)

QUESTION_COUNT = 5
_COMPLEXITY_LEVELS = ("beginner", "intermediate", "advanced")
_DIFFICULTIES = ("Easy", "Medium", "Hard")

SYSTEM_PROMPT = """\
You are an expert technical interviewer reviewing a developer's GitHub \
project.  You receive the project details, its language breakdown, a \
measured quality breakdown (0-100 per dimension) and a README excerpt.

Return **only** valid JSON with exactly these keys:

{
  "complexity": "beginner" | "intermediate" | "advanced",
  "techStack": ["<language or framework>", ...],
  "strengths": ["<strength>", ...],
  "concerns": ["<specific technical risk or missing piece>", ...],
  "architectureNotes": "<short analysis of the visible technical decisions>",
  "difficulty": "Easy" | "Medium" | "Hard",
  "questions": [
    {"question": "...", "expectedDepth": "...", "category": "..."}
  ]
}

Guidelines:
- Generate EXACTLY 5 questions specific to THIS project, testing design \
decisions, trade-offs, testing, performance and security.  They must not \
be answerable by someone who only read the README.
- Ground strengths and concerns in the measured breakdown; a low score is \
a concern, a high score a strength.
- Only mention technologies you see evidence of.
"""


# ── Prompt construction ─────────────────────────────────────────────────────


def build_user_prompt(
    project: ProjectInfo,
    report: QualityReport,
    languages: Mapping[str, int],
    readme: str,
) -> str:
    project_lines = [f"- Title: {project.title}"]
    if project.description:
        project_lines.append(f"- Description: {project.description}")
    if project.tech_stack:
        project_lines.append(f"- Declared stack: {', '.join(project.tech_stack)}")
    if project.challenge:
        project_lines.append(f"- Challenge solved: {project.challenge}")
    if project.solution:
        project_lines.append(f"- Solution approach: {project.solution}")

    cleaned = sanitize(readme[:README_EXCERPT_CHARS])
    if cleaned.redactions:
        logger.warning("Redacted %d potential secret(s) from README", cleaned.redactions)

    return assemble(
        {
            "project": "\n".join(project_lines),
            "languages": format_languages(languages),
            "quality": format_quality(report),
            "structure": format_bullets(report.details.directory_structure),
            "readme": cleaned.text,
        }
    )


# ── LLM response parsing ────────────────────────────────────────────────────


def _complexity_from_score(score: int) -> str:
    if score > 70:
        return "advanced"
    if score > 40:
        return "intermediate"
    return "beginner"


def _difficulty_from_score(score: int) -> str:
    if score > 70:
        return "Hard"
    if score > 40:
        return "Medium"
    return "Easy"


def _questions(raw: Any) -> list[InterviewQuestion]:
    if not isinstance(raw, list):
        return []
    questions: list[InterviewQuestion] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("question"):
            continue
        questions.append(
            InterviewQuestion(
                id=len(questions) + 1,
                question=str(item["question"]),
                expected_depth=str(item.get("expectedDepth", "")),
                category=str(item.get("category", "General")),
            )
        )
    return questions[:QUESTION_COUNT]


def parse_commentary(raw: str, report: QualityReport, tech_stack: list[str]) -> ProjectCommentary:
    """Turn the LLM's JSON into a :class:`ProjectCommentary`.

    Raises :class:`LlmError` when the payload has no usable questions.
    """
    data = parse_json_object(raw)
    questions = _questions(data.get("questions"))
    if not questions:
        raise LlmError("LLM response contained no interview questions.")

    complexity = str(data.get("complexity", "")).lower()
    if complexity not in _COMPLEXITY_LEVELS:
        complexity = _complexity_from_score(report.quality_score)
    difficulty = str(data.get("difficulty", "")).capitalize()
    if difficulty not in _DIFFICULTIES:
        difficulty = _difficulty_from_score(report.quality_score)

    notes = data.get("architectureNotes")
    return ProjectCommentary(
        complexity=complexity,
        tech_stack=str_list(data.get("techStack")) or tech_stack,
        strengths=str_list(data.get("strengths")),
        concerns=str_list(data.get("concerns")),
        architecture_notes=notes if isinstance(notes, str) else "",
        difficulty=difficulty,
        questions=questions,
        generated_by="llm",
    )


# ── Rule-based fallback ─────────────────────────────────────────────────────


def default_questions(tech_stack: list[str]) -> list[InterviewQuestion]:
    """Generic questions used when nothing project-specific is available."""
    primary = tech_stack[0] if tech_stack else "this technology"
    return [
        InterviewQuestion(
            1,
            f"Why did you choose {primary} for this project? What alternatives did you consider?",
            "Should explain use case fit, team familiarity, ecosystem, and at least one alternative",
            "Technology Decisions",
        ),
        InterviewQuestion(
            2,
            "Describe the biggest technical challenge you faced and how you solved it.",
            "Should explain problem context, attempted solutions, final approach, and trade-offs",
            "Problem Solving",
        ),
        InterviewQuestion(
            3,
            "How did you approach testing for this project? What testing strategies did you use?",
            "Should cover unit tests, integration tests, E2E tests, and testing philosophy",
            "Testing & Quality",
        ),
        InterviewQuestion(
            4,
            "What performance optimizations did you implement or would you implement at scale?",
            "Should discuss caching, database optimization, lazy loading, or other relevant techniques",
            "Performance",
        ),
        InterviewQuestion(
            5,
            "How did you handle security concerns in this project?",
            "Should mention authentication, authorization, input validation, XSS/CSRF prevention",
            "Security",
        ),
    ]


def _stack_question(tech_stack: list[str]) -> InterviewQuestion:
    stack = " ".join(tech_stack).lower()
    if "react" in stack or "next" in stack:
        return InterviewQuestion(
            4,
            "In this React/Next.js application, how are you managing global state and "
            "preventing unnecessary re-renders?",
            "Should discuss Context, Redux/Zustand, or memoization (useMemo, useCallback).",
            "Frontend Performance",
        )
    if any(name in stack for name in ("python", "django", "fastapi", "flask")):
        return InterviewQuestion(
            4,
            "For this Python backend, how are you handling asynchronous work and "
            "database migrations?",
            "Should mention a task queue (Celery, RQ, asyncio workers) and a migration "
            "tool (Alembic, Django migrations).",
            "Backend Operations",
        )
    return InterviewQuestion(
        4,
        "What was the most technically challenging part of implementing this specific tech stack?",
        "Should detail specific language/framework hurdles and how they were solved.",
        "Technical Depth",
    )


def rule_based_commentary(report: QualityReport, tech_stack: list[str]) -> ProjectCommentary:
    """Deterministic commentary derived only from the measured scores."""
    strengths: list[str] = []
    concerns: list[str] = []
    notes: list[str] = []
    questions: list[InterviewQuestion] = []

    if report.maintenance < 30:
        concerns.append("Little evidence of ongoing upkeep (CI, linting, recent updates)")
        notes.append("Maintenance signals are weak; add CI and lint tooling before scaling.")
        questions.append(InterviewQuestion(
            1,
            "This project shows few maintenance signals. How would you keep it deployable "
            "and scale the architecture to 10,000 concurrent users?",
            "Should cover CI/CD, connection pooling, caching and a structured framework.",
            "Scalability",
        ))
    else:
        strengths.append("Actively maintained with supporting tooling")
        notes.append("Maintenance practices are in place; separation of concerns looks deliberate.")
        questions.append(InterviewQuestion(
            1,
            "Walk me through your architecture decisions. Why this structure over a "
            "microservices approach?",
            "Should weigh monolith versus microservices, citing complexity versus scalability.",
            "Architecture",
        ))

    if report.test_coverage < 20:
        concerns.append("Critical lack of testing")
        notes.append("Test coverage is insufficient; unit tests are the first priority.")
        questions.append(InterviewQuestion(
            2,
            "There are few automated tests. How do you make sure new features don't break "
            "existing functionality in production?",
            "Should acknowledge the risk and propose unit, integration and E2E layers.",
            "Reliability",
        ))
    else:
        strengths.append("Comprehensive testing")
        notes.append("Testing strategy is visible in the tree.")
        questions.append(InterviewQuestion(
            2,
            "Describe a complex bug your test suite caught before deployment.",
            "Should give a concrete example demonstrating the value of the tests.",
            "Quality Assurance",
        ))

    if report.documentation < 40:
        concerns.append("Sparse documentation")
        questions.append(InterviewQuestion(
            3,
            "If a new developer joined today, what would be their biggest hurdle in "
            "understanding this codebase?",
            "Should identify complex logic or setup steps that need better documentation.",
            "Maintainability",
        ))
    else:
        strengths.append("Excellent documentation")
        questions.append(InterviewQuestion(
            3,
            "How do you keep the documentation up to date as the codebase evolves?",
            "Should discuss docs-as-code or generated documentation.",
            "Process",
        ))

    questions.append(_stack_question(tech_stack))
    questions.append(InterviewQuestion(
        5,
        "If this application were attacked (DDoS or injection), which component would "
        "fail first and how would you secure it?",
        "Should identify the weakest link and propose rate limiting, WAF or input validation.",
        "Security & Resilience",
    ))

    organization = (
        "Modular and clean." if report.code_organization > 60
        else "Needs better folder structure separation."
    )
    if report.test_coverage < 30:
        focus = "testing strategies"
    elif report.maintenance < 40:
        focus = "maintenance tooling"
    else:
        focus = "documentation"
    notes.append(f"Code organization: {organization}")
    notes.append(f"Recommendation: focus on {focus} to improve quality.")

    return ProjectCommentary(
        complexity=_complexity_from_score(report.quality_score),
        tech_stack=list(tech_stack),
        strengths=strengths or ["Potential for growth", "Clear basic structure"],
        concerns=concerns or ["Minor refactoring needed"],
        architecture_notes="\n".join(f"- {line}" for line in notes),
        difficulty=_difficulty_from_score(report.quality_score),
        questions=questions,
        generated_by="rules",
    )


# ── Writer ──────────────────────────────────────────────────────────────────


class CommentaryWriter:
    """Ask the LLM for commentary; fall back to the rule-based version."""

    def __init__(self, llm_gateway: LlmGateway) -> None:
        self._llm = llm_gateway

    async def write(
        self,
        project: ProjectInfo,
        report: QualityReport,
        languages: Mapping[str, int],
        readme: str,
    ) -> ProjectCommentary:
        tech_stack = list(project.tech_stack) or list(languages)
        prompt = build_user_prompt(project, report, languages, readme)
        try:
            raw = await self._llm.complete(SYSTEM_PROMPT, prompt)
            return parse_commentary(raw, report, tech_stack)
        except LlmError as exc:
            logger.warning("LLM commentary unavailable for %s, using rules: %s", project.title, exc)
            return rule_based_commentary(report, tech_stack)
