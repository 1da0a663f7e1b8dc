"""Tests for the stack recommendation use case."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from evalhub.domain.exceptions import LlmError
from evalhub.services.recommendation import (
    MAX_RESOURCES,
    RecommendStackUseCase,
    build_user_prompt,
    parse_recommendation,
)

LLM_RECOMMENDATION = {
    "recommendedStack": {
        "frontend": "Next.js",
        "backend": "FastAPI",
        "database": "PostgreSQL",
        "tools": ["Docker", "", "Vercel"],
    },
    "explanation": "Typed end to end and cheap to host.",
    "installCommands": ["npx create-next-app@latest web", "pip install fastapi"],
    "resources": [
        {"title": "FastAPI docs", "url": "https://fastapi.tiangolo.com", "type": "Documentation"},
        {"title": "Next.js Learn", "url": "https://nextjs.org/learn", "type": "Course"},
        {"title": "No link"},
        {"title": "Postgres tutorial", "url": "https://example.com/pg", "type": "Blog"},
        {"title": "Extra", "url": "https://example.com/extra", "type": "Tutorial"},
    ],
}


def _llm(payload: object | None = None, error: Exception | None = None) -> AsyncMock:
    llm = AsyncMock()
    if error is not None:
        llm.complete.side_effect = error
    else:
        llm.complete.return_value = json.dumps(payload or LLM_RECOMMENDATION)
    return llm


def test_parse_recommendation_normalises_fields():
    rec = parse_recommendation(json.dumps(LLM_RECOMMENDATION))

    assert rec.stack.frontend == "Next.js"
    assert rec.stack.backend == "FastAPI"
    assert rec.stack.database == "PostgreSQL"
    assert rec.stack.tools == ["Docker", "Vercel"]
    assert rec.install_commands == ["npx create-next-app@latest web", "pip install fastapi"]
    assert len(rec.resources) == MAX_RESOURCES
    assert [r.title for r in rec.resources] == [
        "FastAPI docs", "Next.js Learn", "Postgres tutorial",
    ]
    assert rec.resources[2].type == "Documentation"


def test_parse_recommendation_accepts_code_fences():
    raw = "```json\n" + json.dumps(LLM_RECOMMENDATION) + "\n```"

    assert parse_recommendation(raw).explanation == "Typed end to end and cheap to host."


def test_parse_recommendation_without_stack_is_llm_error():
    with pytest.raises(LlmError, match="recommendedStack"):
        parse_recommendation(json.dumps({"explanation": "?"}))


def test_parse_recommendation_invalid_json_is_llm_error():
    with pytest.raises(LlmError):
        parse_recommendation("not json")


def test_prompt_includes_goal_and_redacts_preferences():
    prompt = build_user_prompt("  A habit tracker  ", "Python please, API_KEY=abcd1234efgh")

    assert "## Build Goal\n\nA habit tracker" in prompt
    assert "## Preferences" in prompt
    assert "abcd1234efgh" not in prompt


def test_prompt_omits_empty_preferences():
    assert "## Preferences" not in build_user_prompt("A blog")


@pytest.mark.asyncio
async def test_execute_sends_goal_to_llm():
    llm = _llm()

    rec = await RecommendStackUseCase(llm).execute("A habit tracker", "Python")

    assert rec.stack.backend == "FastAPI"
    llm.complete.assert_awaited_once()
    system_prompt, user_prompt = llm.complete.await_args.args
    assert "recommendedStack" in system_prompt
    assert "A habit tracker" in user_prompt


@pytest.mark.asyncio
async def test_execute_propagates_llm_error():
    with pytest.raises(LlmError, match="quota"):
        await RecommendStackUseCase(_llm(error=LlmError("quota"))).execute("A blog")
