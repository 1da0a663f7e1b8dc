"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from evalhub.domain.exceptions import InvalidGitHubUrlError

_GITHUB_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/"
    r"(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)(?:\.git)?/?$"
)
_FULL_NAME_RE = re.compile(r"^(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+)$")


@dataclass(frozen=True, slots=True)
class GitHubUrl:
    """Validated GitHub repository reference.

    Accepts a full URL like ``https://github.com/psf/requests`` or the short
    ``psf/requests`` form.  Rejects anything else.
    """

    owner: str
    repo: str
    raw: str

    @classmethod
    def from_string(cls, ref: str) -> GitHubUrl:
        """Parse and validate a raw URL or ``owner/name`` string."""
        ref = ref.strip()
        match = _GITHUB_URL_RE.match(ref) or _FULL_NAME_RE.match(ref)
        if not match:
            raise InvalidGitHubUrlError(
                f"Invalid GitHub repository: '{ref}'. "
                "Expected https://github.com/<owner>/<repo> or <owner>/<repo>"
            )
        return cls(owner=match["owner"], repo=match["repo"], raw=ref)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.full_name}"
