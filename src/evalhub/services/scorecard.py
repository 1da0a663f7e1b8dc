"""Scorecard use case — grades interview answers against the project.

Unlike commentary there is no rule-based fallback: a scorecard without a
real evaluation is meaningless, so :class:`LlmError` propagates.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Sequence

from evalhub.domain.entities import (
    ProjectCommentary,
    ProjectInfo,
    QuestionAnswer,
    Scorecard,
    SkillGap,
    SkillRating,
    TechnologyProficiency,
)
from evalhub.domain.ports.llm_gateway import LlmGateway
from evalhub.services.content_assembler import assemble, format_json
from evalhub.services.llm_json import int_score, parse_json_object, str_list
from evalhub.services.security_sentinel import sanitize, sanitize_many

logger = logging.getLogger(__name__)

SKILL_DIMENSIONS = (
    "technicalDepth",
    "architecturalThinking",
    "problemSolving",
    "codeQuality",
    "communicationClarity",
)

SYSTEM_PROMPT = """\
You are an expert technical evaluator assessing a developer's project and \
their answers to interview questions about it.

Scoring guidance for the overall score (0-100):
- Skipped questions: -20 points each
- Shallow answers (below the expected depth): -10 to -15 points
- Good answers: +15 to +20 points
- Exceptional answers (beyond the expected depth): +25 points

Return **only** valid JSON with exactly these keys:

{
  "overallScore": 0-100,
  "skillBreakdown": {
    "technicalDepth": {"score": 0-100, "level": "...", "evidence": "..."},
    "architecturalThinking": {...},
    "problemSolving": {...},
    "codeQuality": {...},
    "communicationClarity": {...}
  },
  "technologiesYouKnow": [
    {"name": "...", "proficiency": "Beginner|Intermediate|Advanced|Expert",
     "percentage": 0-100, "evidence": "..."}
  ],
  "skillGaps": [
    {"skill": "...", "reason": "...", "priority": "High|Medium|Low",
     "learningPath": {"beginner": "...", "intermediate": "...", "projectIdea": "..."}}
  ],
  "recommendedNextSteps": ["..."],
  "strengths": ["..."],
  "areasForImprovement": ["..."]
}

Rate every technology in the stack.  List 3-5 skill gaps, 3-4 strengths \
and improvements, and 3-5 concrete next steps.  Evidence must quote or \
describe what the developer actually said.
"""


# ── Prompt construction ─────────────────────────────────────────────────────


def _commentary_json(commentary: ProjectCommentary) -> str:
    return format_json(
        {
            "complexity": commentary.complexity,
            "techStack": commentary.tech_stack,
            "strengths": commentary.strengths,
            "concerns": commentary.concerns,
            "architectureNotes": commentary.architecture_notes,
            "difficulty": commentary.difficulty,
        }
    )


def _format_answer(index: int, qa: QuestionAnswer, answer: str) -> str:
    skipped = " (SKIPPED)" if qa.is_skipped else ""
    return (
        f"Question {index} [{qa.category}]:\n{qa.question}\n\n"
        f"Expected Depth:\n{qa.expected_depth}\n\n"
        f"Developer's Answer{skipped}:\n{answer or 'No answer provided'}\n\n"
        f"Time Spent: {qa.time_spent}s"
    )


def build_user_prompt(
    project: ProjectInfo,
    commentary: ProjectCommentary,
    answers: Sequence[QuestionAnswer],
) -> str:
    cleaned, redactions = sanitize_many({str(i): qa.answer for i, qa in enumerate(answers)})
    if redactions:
        logger.warning("Redacted %d potential secret(s) from interview answers", redactions)

    project_lines = [
        f"- Title: {project.title}",
        f"- Tech Stack: {', '.join(project.tech_stack)}",
        f"- Challenge: {project.challenge}",
        f"- Solution: {project.solution}",
    ]
    interview = "\n\n---\n\n".join(
        _format_answer(i + 1, qa, cleaned[str(i)]) for i, qa in enumerate(answers)
    )
    return assemble(
        {
            "project": sanitize("\n".join(project_lines)).text,
            "analysis": _commentary_json(commentary),
            "interview": interview,
        }
    )


# ── Response parsing ────────────────────────────────────────────────────────


def _skill_breakdown(raw: Any) -> dict[str, SkillRating]:
    block = raw if isinstance(raw, dict) else {}
    breakdown: dict[str, SkillRating] = {}
    for name in SKILL_DIMENSIONS:
        entry = block.get(name)
        entry = entry if isinstance(entry, dict) else {}
        breakdown[name] = SkillRating(
            score=int_score(entry.get("score")),
            level=str(entry.get("level", "")),
            evidence=str(entry.get("evidence", "")),
        )
    return breakdown


def _technologies(raw: Any) -> list[TechnologyProficiency]:
    if not isinstance(raw, list):
        return []
    return [
        TechnologyProficiency(
            name=str(item["name"]),
            proficiency=str(item.get("proficiency", "")),
            percentage=int_score(item.get("percentage")),
            evidence=str(item.get("evidence", "")),
        )
        for item in raw
        if isinstance(item, dict) and item.get("name")
    ]


def _skill_gaps(raw: Any) -> list[SkillGap]:
    if not isinstance(raw, list):
        return []
    gaps: list[SkillGap] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("skill"):
            continue
        path = item.get("learningPath")
        path = path if isinstance(path, dict) else {}
        gaps.append(
            SkillGap(
                skill=str(item["skill"]),
                reason=str(item.get("reason", "")),
                priority=str(item.get("priority", "Medium")),
                beginner_path=str(path.get("beginner", "")),
                intermediate_path=str(path.get("intermediate", "")),
                project_idea=str(path.get("projectIdea", "")),
            )
        )
    return gaps


def parse_scorecard(raw: str, share_token: str) -> Scorecard:
    data = parse_json_object(raw)
    return Scorecard(
        overall_score=int_score(data.get("overallScore")),
        skill_breakdown=_skill_breakdown(data.get("skillBreakdown")),
        technologies=_technologies(data.get("technologiesYouKnow")),
        skill_gaps=_skill_gaps(data.get("skillGaps")),
        recommended_next_steps=str_list(data.get("recommendedNextSteps")),
        strengths=str_list(data.get("strengths")),
        areas_for_improvement=str_list(data.get("areasForImprovement")),
        share_token=share_token,
    )


def new_share_token() -> str:
    """32 hex characters, unguessable."""
    return secrets.token_hex(16)


# ── Use case ────────────────────────────────────────────────────────────────


class GenerateScorecardUseCase:
    def __init__(self, llm_gateway: LlmGateway) -> None:
        self._llm = llm_gateway

    async def execute(
        self,
        project: ProjectInfo,
        commentary: ProjectCommentary,
        answers: Sequence[QuestionAnswer],
    ) -> Scorecard:
        skipped = sum(1 for qa in answers if qa.is_skipped)
        logger.info(
            "Generating scorecard for %s (%d answers, %d skipped)",
            project.title, len(answers), skipped,
        )
        raw = await self._llm.complete(SYSTEM_PROMPT, build_user_prompt(project, commentary, answers))
        return parse_scorecard(raw, new_share_token())
