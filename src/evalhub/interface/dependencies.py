"""FastAPI dependency injection wiring."""

from __future__ import annotations

import logging

import httpx

from evalhub.infrastructure.config import get_settings
from evalhub.infrastructure.github_rest_adapter import GitHubRestAdapter
from evalhub.infrastructure.llm_failover import FailoverLlmGateway
from evalhub.infrastructure.openai_adapter import OpenAIAdapter
from evalhub.infrastructure.report_cache import InMemoryReportCache
from evalhub.services.analyze_repo import AnalyzeRepoUseCase
from evalhub.services.quality_scorer import QualityScorer
from evalhub.services.recommendation import RecommendStackUseCase
from evalhub.services.scorecard import GenerateScorecardUseCase

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None
_llm_gateway: FailoverLlmGateway | None = None
_report_cache: InMemoryReportCache | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _llm_gateway, _report_cache  # noqa: PLW0603

    settings = get_settings()
    # Fail fast on bad QUALITY_WEIGHTS rather than on the first request.
    settings.weights()

    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout_seconds))
    _llm_gateway = FailoverLlmGateway(
        [
            OpenAIAdapter.from_api_key(key, settings.openai_model, label=label)
            for label, key in settings.api_keys()
        ]
    )
    _report_cache = InMemoryReportCache(
        ttl_seconds=settings.report_cache_ttl_seconds,
        max_size=settings.report_cache_max_size,
    )
    logger.info(
        "EvalHub started (model=%s, credentials=%d)",
        settings.openai_model, len(settings.api_keys()),
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _llm_gateway, _report_cache  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    if _llm_gateway:
        await _llm_gateway.close()
        _llm_gateway = None
    _report_cache = None


def _github_adapter() -> GitHubRestAdapter:
    settings = get_settings()
    assert _http_client is not None, "startup() was not called"
    token = settings.github_token.get_secret_value() if settings.github_token else None
    return GitHubRestAdapter(client=_http_client, token=token)


def get_analyze_use_case() -> AnalyzeRepoUseCase:
    """Build the analyze use-case with injected adapters."""
    settings = get_settings()

    assert _llm_gateway is not None, "startup() was not called"
    assert _report_cache is not None, "startup() was not called"

    fetcher = _github_adapter()
    scorer = QualityScorer(
        fetcher,
        weights=settings.weights(),
        tree_timeout=settings.tree_fetch_timeout_seconds,
    )
    return AnalyzeRepoUseCase(
        repo_fetcher=fetcher,
        llm_gateway=_llm_gateway,
        scorer=scorer,
        cache=_report_cache,
        max_commits=settings.max_commits,
    )


def get_scorecard_use_case() -> GenerateScorecardUseCase:
    assert _llm_gateway is not None, "startup() was not called"
    return GenerateScorecardUseCase(_llm_gateway)


def get_recommend_use_case() -> RecommendStackUseCase:
    assert _llm_gateway is not None, "startup() was not called"
    return RecommendStackUseCase(_llm_gateway)
