"""Content assembler — renders prompt context blocks for the LLM.

This is the final transformation before text enters a prompt template.
"""

from __future__ import annotations

import json
from typing import Mapping, Sequence

from evalhub.domain.entities import QualityReport

README_EXCERPT_CHARS = 10_000

_HEADERS = {
    "project": "## Project",
    "languages": "## Repository Languages (from GitHub)",
    "quality": "## Measured Quality Breakdown (0-100)",
    "structure": "## Top-level Directories",
    "readme": f"## README (first {README_EXCERPT_CHARS} chars)",
    "analysis": "## Initial Analysis",
    "interview": "## Interview Q&A",
    "goal": "## Build Goal",
    "preferences": "## Preferences",
}


def format_languages(languages: Mapping[str, int]) -> str:
    """``- Lang: 62.5%`` lines ordered by byte share."""
    total = sum(languages.values()) or 1
    return "\n".join(
        f"- {lang}: {count / total * 100:.1f}%"
        for lang, count in sorted(languages.items(), key=lambda item: -item[1])
    )


def format_quality(report: QualityReport) -> str:
    lines = [
        f"- Overall: {report.quality_score}",
        f"- Complexity tier: {report.complexity_tier.value} ({report.details.file_count} files)",
    ]
    lines.extend(f"- {name}: {value}" for name, value in report.breakdown().items())
    flags = report.details
    lines.append(
        f"- Tests: {flags.has_tests}, CI: {flags.has_ci}, "
        f"Linting: {flags.has_linting}, Docs folder: {flags.has_docs}"
    )
    return "\n".join(lines)


def format_bullets(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def format_json(data: object) -> str:
    return json.dumps(data, indent=2, sort_keys=True)


def assemble(sections: Mapping[str, str]) -> str:
    """Combine all non-empty sections into a single structured context block."""
    parts: list[str] = []
    for name, content in sections.items():
        if not content:
            continue
        header = _HEADERS.get(name, f"## {name.title()}")
        parts.append(f"{header}\n\n{content}")
    return "\n\n---\n\n".join(parts)
