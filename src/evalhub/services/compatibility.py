"""Compatibility match between a developer's stack and a target stack."""

from __future__ import annotations

from typing import Iterable, Sequence

from evalhub.domain.entities import CompatibilityMatch
from evalhub.domain.rubric import round_half_up


def calculate_compatibility(
    user_stack: Iterable[str], target_stack: Sequence[str]
) -> CompatibilityMatch:
    """Share of *target_stack* covered by *user_stack* (case-insensitive).

    An empty target is trivially satisfied and scores 100.
    """
    if not target_stack:
        return CompatibilityMatch(score=100, matched_skills=[], missing_skills=[])

    known = {skill.strip().lower() for skill in user_stack if skill}
    matched = [skill for skill in target_stack if skill.strip().lower() in known]
    missing = [skill for skill in target_stack if skill.strip().lower() not in known]

    return CompatibilityMatch(
        score=round_half_up(100 * len(matched) / len(target_stack)),
        matched_skills=matched,
        missing_skills=missing,
    )
