"""Quality rubric — every weight, threshold and path pattern used by the scorer.

Values are tuning choices carried over unchanged from the EvalHub product;
recalibrate here (or via ``QUALITY_WEIGHTS`` for the weights), not inside
the scoring functions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Mapping

from evalhub.domain.exceptions import ConfigurationError

MAX_SCORE = 100


def clamp_score(value: float) -> int:
    """Clamp to the closed range [0, 100] and coerce to ``int``."""
    return int(min(max(value, 0), MAX_SCORE))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching JavaScript ``Math.round``."""
    return math.floor(value + 0.5)


# ── Aggregation weights ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class QualityWeights:
    """Linear weights of the composite score; must sum to 1.0."""

    readme_quality: float = 0.20
    code_organization: float = 0.20
    test_coverage: float = 0.15
    documentation: float = 0.15
    commit_activity: float = 0.10
    community_engagement: float = 0.10
    maintenance: float = 0.10

    def __post_init__(self) -> None:
        total = sum(getattr(self, f.name) for f in fields(self))
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ConfigurationError(f"Quality weights must sum to 1.0 (got {total:.4f}).")
        if any(getattr(self, f.name) < 0 for f in fields(self)):
            raise ConfigurationError("Quality weights must be non-negative.")

    @classmethod
    def with_overrides(cls, overrides: Mapping[str, float] | None) -> QualityWeights:
        """Return the default weights with *overrides* applied by field name."""
        if not overrides:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown quality weight(s): {', '.join(sorted(unknown))}")
        return cls(**{k: float(v) for k, v in overrides.items()})


DEFAULT_WEIGHTS = QualityWeights()

# ── README ──────────────────────────────────────────────────────────────────

README_LENGTH_TIERS: tuple[tuple[int, int], ...] = ((500, 10), (1500, 10))
README_HEADER_POINTS = 10
README_CODE_BLOCK_POINTS = 10
README_IMAGE_POINTS = 5
README_SECTION_KEYWORDS: tuple[str, ...] = ("installation", "usage", "license")
README_SECTION_POINTS = 5
README_MIN_LINKS = 3
README_LINK_POINTS = 10
README_BADGE_POINTS = 10
README_API_POINTS = 10
README_EXAMPLE_POINTS = 10

# ── Code organization ───────────────────────────────────────────────────────

ORG_SOURCE_ROOTS: tuple[str, ...] = ("src/", "lib/")
ORG_SOURCE_ROOT_POINTS = 15
ORG_PATH_KEYWORDS: tuple[tuple[str, int], ...] = (
    ("component", 10),
    ("util", 10),
    ("config", 5),
)
ORG_ROOT_FILES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("package.json",), 10),
    (("tsconfig.json", "jsconfig.json"), 10),
    ((".gitignore",), 5),
    ((".env.example", ".env.template"), 5),
)
ORG_FILE_COUNT_TIERS: tuple[tuple[int, int], ...] = ((10, 10), (50, 10))
ORG_MIN_DEPTH = 3
ORG_DEPTH_POINTS = 10

# ── Test coverage ───────────────────────────────────────────────────────────

TEST_DIR_MARKERS: tuple[str, ...] = ("test/", "tests/", "__tests__/")
TEST_DIR_POINTS = 40
TEST_FILE_MARKERS: tuple[str, ...] = (".test.", ".spec.", "_test.")
TEST_FILE_TIERS: tuple[tuple[int, int], ...] = ((0, 20), (5, 20))
TEST_RUNNER_CONFIGS: tuple[tuple[str, ...], ...] = (
    ("jest.config.js", "jest.config.ts"),
    ("vitest.config.ts", "vitest.config.js"),
)
TEST_RUNNER_POINTS = 10
COVERAGE_CONFIGS: tuple[str, ...] = (".coveragerc",)
COVERAGE_OUTPUT_DIR = "coverage/"
COVERAGE_POINTS = 10

# ── Documentation ───────────────────────────────────────────────────────────

DOCS_DIR = "docs/"
DOCS_DIR_POINTS = 30
DOCS_ROOT_FILES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("readme.md",), 15),
    (("contributing.md",), 10),
    (("license", "license.md", "license.txt"), 10),
    (("changelog.md",), 5),
    (("faq.md",), 5),
    (("architecture.md", "design.md"), 5),
)
DOCS_API_FILE = "api.md"
DOCS_API_MARKER = "api-doc"
DOCS_API_POINTS = 10
DOCS_GUIDE_MARKER = "guide"
DOCS_GUIDE_POINTS = 10

# ── Commit activity ─────────────────────────────────────────────────────────

COMMIT_COUNT_TIERS: tuple[tuple[int, int], ...] = ((10, 15), (50, 15))
COMMIT_RECENT_WINDOW_DAYS = 30
COMMIT_RECENT_TIERS: tuple[tuple[int, int], ...] = ((0, 20), (5, 20))
COMMIT_CONSISTENCY_SAMPLE = 10
COMMIT_CONSISTENCY_MIN_COMMITS = 3
COMMIT_STEADY_RATIO = 0.5
COMMIT_STEADY_POINTS = 30
COMMIT_REGULAR_POINTS = 15

# ── Community engagement ────────────────────────────────────────────────────

STAR_THRESHOLDS: tuple[int, ...] = (5, 20, 50, 100)
FORK_THRESHOLDS: tuple[int, ...] = (2, 10, 25)
WATCHER_THRESHOLDS: tuple[int, ...] = (3, 10)
COMMUNITY_TIER_POINTS = 10
OPEN_ISSUES_RANGE: tuple[int, int] = (0, 50)  # exclusive bounds
OPEN_ISSUES_POINTS = 10

# ── Maintenance ─────────────────────────────────────────────────────────────

# (max age in days, exclusive) → points; first match wins.
UPDATE_RECENCY_BANDS: tuple[tuple[int, int], ...] = ((7, 50), (30, 40), (90, 25), (180, 10))
CI_MARKERS: tuple[str, ...] = (".github/workflows/", ".gitlab-ci.yml", ".travis.yml", "circle.yml")
CI_POINTS = 30
ESLINT_PREFIX = ".eslintrc"
ESLINT_POINTS = 10
PRETTIER_PREFIX = ".prettierrc"
PRETTIER_FILES: tuple[str, ...] = ("prettier.config.js",)
PRETTIER_POINTS = 5
EDITORCONFIG_FILE = ".editorconfig"
EDITORCONFIG_POINTS = 5
LINT_MARKERS: tuple[str, ...] = ("eslint", "prettier")

# ── Complexity ──────────────────────────────────────────────────────────────

# (blob count strictly greater than, tier name); first match wins.
COMPLEXITY_BANDS: tuple[tuple[int, str], ...] = ((100, "COMPLEX"), (50, "MODERATE"), (20, "STANDARD"))
DIRECTORY_STRUCTURE_LIMIT = 10

# ── Fallback report ─────────────────────────────────────────────────────────

FALLBACK_SUB_SCORE = 50
FALLBACK_TEST_COVERAGE = 0
FALLBACK_QUALITY_SCORE = 50
