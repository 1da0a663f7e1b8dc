"""Security sentinel — strips credentials from text bound for the LLM.

README files and interview answers are user-authored and occasionally
contain pasted keys or connection strings.  Matches are replaced with
``[REDACTED]`` before any prompt is built.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

_REDACTION = "[REDACTED]"

_SECRET_PATTERNS: dict[str, re.Pattern[str]] = {
    "aws_access_key": re.compile(r"AKIA[0-9A-Z]{16}"),
    "github_token": re.compile(r"(?:gh[pousr]_[A-Za-z0-9_]{36,}|github_pat_[A-Za-z0-9_]{22,})"),
    "openai_key": re.compile(r"sk-(?:proj-)?[A-Za-z0-9_\-]{20,}"),
    "google_api_key": re.compile(r"AIza[0-9A-Za-z_\-]{35}"),
    "assigned_secret": re.compile(
        r"(?:api[_\-]?key|secret[_\-]?key|access[_\-]?token|auth[_\-]?token|password|passwd)"
        r"""\s*[:=]\s*['"]?[^\s'"]{8,}['"]?""",
        re.IGNORECASE,
    ),
    "private_key": re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"),
    "jwt": re.compile(r"eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}"),
    "connection_string": re.compile(
        r"(?:postgres(?:ql)?|mysql|mongodb(?:\+srv)?|redis)://[^\s:@/]+:[^\s@/]+@[^\s]+",
        re.IGNORECASE,
    ),
}


@dataclass(frozen=True, slots=True)
class SanitizedText:
    text: str
    redactions: int


def sanitize(text: str) -> SanitizedText:
    """Replace every secret-looking span in *text* with ``[REDACTED]``."""
    total = 0
    for pattern in _SECRET_PATTERNS.values():
        text, hits = pattern.subn(_REDACTION, text)
        total += hits
    return SanitizedText(text=text, redactions=total)


def sanitize_many(texts: Mapping[str, str]) -> tuple[dict[str, str], int]:
    """Sanitize each value of *texts*; return the cleaned mapping and hit count."""
    cleaned: dict[str, str] = {}
    total = 0
    for key, value in texts.items():
        result = sanitize(value)
        cleaned[key] = result.text
        total += result.redactions
    return cleaned, total
