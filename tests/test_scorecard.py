"""Tests for the scorecard use case."""

from __future__ import annotations

import json
import re
from unittest.mock import AsyncMock

import pytest

from evalhub.domain.entities import ProjectInfo, QuestionAnswer
from evalhub.domain.exceptions import LlmError
from evalhub.services.commentary import rule_based_commentary
from evalhub.services.quality_scorer import fallback_report
from evalhub.services.scorecard import (
    SKILL_DIMENSIONS,
    GenerateScorecardUseCase,
    new_share_token,
    parse_scorecard,
)

PROJECT = ProjectInfo(
    title="Task Board",
    description="Kanban app",
    tech_stack=["React", "Node.js"],
    challenge="Realtime sync",
    solution="WebSockets with optimistic updates",
)

ANSWERS = [
    QuestionAnswer(
        question="Why WebSockets?",
        expected_depth="Compare with polling and SSE",
        category="Architecture",
        answer="Lower latency than polling. password = hunter2secret",
        time_spent=95,
    ),
    QuestionAnswer(
        question="How do you test sync?",
        expected_depth="Integration tests",
        category="Testing",
        is_skipped=True,
    ),
]

LLM_SCORECARD = {
    "overallScore": 150,
    "skillBreakdown": {
        "technicalDepth": {"score": 80, "level": "Advanced", "evidence": "WebSockets"},
        "problemSolving": {"score": "-5", "level": "Beginner", "evidence": ""},
    },
    "technologiesYouKnow": [
        {"name": "React", "proficiency": "Advanced", "percentage": 85, "evidence": "hooks"},
        {"proficiency": "Expert"},
    ],
    "skillGaps": [
        {
            "skill": "Testing",
            "reason": "Skipped the testing question",
            "priority": "High",
            "learningPath": {
                "beginner": "Jest basics",
                "intermediate": "Playwright E2E",
                "projectIdea": "Cover the sync engine",
            },
        }
    ],
    "recommendedNextSteps": ["Add integration tests", ""],
    "strengths": ["Clear reasoning"],
    "areasForImprovement": ["Testing"],
}


def _llm(payload=None, error=None) -> AsyncMock:
    llm = AsyncMock()
    if error is not None:
        llm.complete.side_effect = error
    else:
        llm.complete.return_value = json.dumps(payload or LLM_SCORECARD)
    return llm


def test_parse_scorecard_clamps_and_fills_dimensions():
    card = parse_scorecard(json.dumps(LLM_SCORECARD), "token")

    assert card.overall_score == 100
    assert list(card.skill_breakdown) == list(SKILL_DIMENSIONS)
    assert card.skill_breakdown["technicalDepth"].score == 80
    assert card.skill_breakdown["problemSolving"].score == 0
    assert card.skill_breakdown["codeQuality"].score == 0
    assert [t.name for t in card.technologies] == ["React"]
    assert card.skill_gaps[0].project_idea == "Cover the sync engine"
    assert card.recommended_next_steps == ["Add integration tests"]
    assert card.share_token == "token"


def test_share_tokens_are_32_hex_and_unique():
    first, second = new_share_token(), new_share_token()

    assert re.fullmatch(r"[0-9a-f]{32}", first)
    assert first != second


@pytest.mark.asyncio
async def test_execute_builds_prompt_and_returns_scorecard():
    llm = _llm()
    commentary = rule_based_commentary(fallback_report(), PROJECT.tech_stack)

    card = await GenerateScorecardUseCase(llm).execute(PROJECT, commentary, ANSWERS)

    assert card.overall_score == 100
    assert re.fullmatch(r"[0-9a-f]{32}", card.share_token)
    prompt = llm.complete.await_args.args[1]
    assert "- Title: Task Board" in prompt
    assert "Developer's Answer (SKIPPED):\nNo answer provided" in prompt
    assert "Time Spent: 95s" in prompt
    assert "hunter2secret" not in prompt
    assert "[REDACTED]" in prompt
    assert '"difficulty": "Medium"' in prompt


@pytest.mark.asyncio
async def test_execute_propagates_llm_errors():
    commentary = rule_based_commentary(fallback_report(), [])

    with pytest.raises(LlmError):
        await GenerateScorecardUseCase(_llm(error=LlmError("down"))).execute(
            PROJECT, commentary, ANSWERS
        )


@pytest.mark.asyncio
async def test_execute_rejects_invalid_json():
    llm = AsyncMock()
    llm.complete.return_value = "definitely not json"

    with pytest.raises(LlmError):
        await GenerateScorecardUseCase(llm).execute(
            PROJECT, rule_based_commentary(fallback_report(), []), ANSWERS
        )
