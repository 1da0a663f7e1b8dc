"""Stack recommendation use case — suggests a stack for a build goal."""

from __future__ import annotations

import logging
from typing import Any

from evalhub.domain.entities import LearningResource, RecommendedStack, StackRecommendation
from evalhub.domain.exceptions import LlmError
from evalhub.domain.ports.llm_gateway import LlmGateway
from evalhub.services.content_assembler import assemble
from evalhub.services.llm_json import parse_json_object, str_list
from evalhub.services.security_sentinel import sanitize

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ("Course", "Documentation", "Tutorial")
MAX_RESOURCES = 3

SYSTEM_PROMPT = """\
You are a developer-relations expert.  Recommend the best modern tech \
stack for the goal the user wants to build, honouring their preferences.

Provide the shell commands needed to kick-start the project and exactly \
3 high-quality learning resources (a mix of documentation and tutorials).

Return **only** valid JSON with exactly these keys:

{
  "recommendedStack": {
    "frontend": "...", "backend": "...", "database": "...", "tools": ["..."]
  },
  "explanation": "...",
  "installCommands": ["..."],
  "resources": [
    {"title": "...", "url": "...", "type": "Course|Documentation|Tutorial"}
  ]
}
"""


def build_user_prompt(goal: str, preferences: str = "") -> str:
    return assemble(
        {
            "goal": sanitize(goal.strip()).text,
            "preferences": sanitize(preferences.strip()).text,
        }
    )


def _stack(raw: Any) -> RecommendedStack:
    if not isinstance(raw, dict):
        raise LlmError("LLM response is missing 'recommendedStack'.")
    return RecommendedStack(
        frontend=str(raw.get("frontend") or ""),
        backend=str(raw.get("backend") or ""),
        database=str(raw.get("database") or ""),
        tools=str_list(raw.get("tools")),
    )


def _resources(raw: Any) -> list[LearningResource]:
    if not isinstance(raw, list):
        return []
    resources: list[LearningResource] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("title") or not item.get("url"):
            continue
        kind = str(item.get("type", ""))
        resources.append(
            LearningResource(
                title=str(item["title"]),
                url=str(item["url"]),
                type=kind if kind in RESOURCE_TYPES else "Documentation",
            )
        )
    return resources[:MAX_RESOURCES]


def parse_recommendation(raw: str) -> StackRecommendation:
    data = parse_json_object(raw)
    return StackRecommendation(
        stack=_stack(data.get("recommendedStack")),
        explanation=str(data.get("explanation") or ""),
        install_commands=str_list(data.get("installCommands")),
        resources=_resources(data.get("resources")),
    )


class RecommendStackUseCase:
    """Asks the LLM for a stack; :class:`LlmError` propagates."""

    def __init__(self, llm_gateway: LlmGateway) -> None:
        self._llm = llm_gateway

    async def execute(self, goal: str, preferences: str = "") -> StackRecommendation:
        logger.info("Recommending a stack for goal (%d chars)", len(goal))
        raw = await self._llm.complete(SYSTEM_PROMPT, build_user_prompt(goal, preferences))
        return parse_recommendation(raw)
