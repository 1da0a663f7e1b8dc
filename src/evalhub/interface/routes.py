"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from evalhub.interface.dependencies import (
    get_analyze_use_case,
    get_recommend_use_case,
    get_scorecard_use_case,
)
from evalhub.interface.schemas import (
    AnalysisResponse,
    CompatibilityRequest,
    CompatibilityResponse,
    ErrorResponse,
    InvalidationResponse,
    QualityReportResponse,
    RecommendationResponse,
    RecommendRequest,
    RepoRequest,
    ScorecardRequest,
    ScorecardResponse,
)
from evalhub.services.analyze_repo import AnalyzeRepoUseCase
from evalhub.services.compatibility import calculate_compatibility
from evalhub.services.recommendation import RecommendStackUseCase
from evalhub.services.scorecard import GenerateScorecardUseCase

router = APIRouter()

def _error(description: str) -> dict[str, object]:
    return {"model": ErrorResponse, "description": description}


_LLM_ERROR = {502: _error("LLM provider error")}
_GITHUB_ERRORS = {
    422: _error("Invalid repository reference"),
    403: _error("Repository is private"),
    404: _error("Repository or README not found"),
    429: _error("GitHub API rate limit exceeded"),
}


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={**_GITHUB_ERRORS, **_LLM_ERROR},
)
async def analyze(
    body: RepoRequest,
    use_case: AnalyzeRepoUseCase = Depends(get_analyze_use_case),
) -> AnalysisResponse:
    """Score a public repository and generate interview commentary."""
    result = await use_case.execute(body.repo)
    return AnalysisResponse.from_entity(result)


@router.post("/quality", response_model=QualityReportResponse, responses=_GITHUB_ERRORS)
async def quality(
    body: RepoRequest,
    use_case: AnalyzeRepoUseCase = Depends(get_analyze_use_case),
) -> QualityReportResponse:
    """Quality report only (cached)."""
    report = await use_case.quality_report(body.repo)
    return QualityReportResponse.from_entity(report)


@router.delete("/quality/{owner}/{name}", response_model=InvalidationResponse)
async def invalidate_quality(
    owner: str,
    name: str,
    use_case: AnalyzeRepoUseCase = Depends(get_analyze_use_case),
) -> InvalidationResponse:
    return InvalidationResponse(invalidated=use_case.invalidate(f"{owner}/{name}"))


@router.post(
    "/scorecard",
    response_model=ScorecardResponse,
    responses=_LLM_ERROR,
)
async def scorecard(
    body: ScorecardRequest,
    use_case: GenerateScorecardUseCase = Depends(get_scorecard_use_case),
) -> ScorecardResponse:
    """Grade interview answers and produce a shareable skill scorecard."""
    card = await use_case.execute(
        body.project.to_entity(),
        body.commentary.to_entity(),
        [answer.to_entity() for answer in body.answers],
    )
    return ScorecardResponse.from_entity(card)


@router.post("/compatibility", response_model=CompatibilityResponse)
async def compatibility(body: CompatibilityRequest) -> CompatibilityResponse:
    match = calculate_compatibility(body.user_stack, body.target_stack)
    return CompatibilityResponse.from_entity(match)


@router.post("/recommend", response_model=RecommendationResponse, responses=_LLM_ERROR)
async def recommend(
    body: RecommendRequest,
    use_case: RecommendStackUseCase = Depends(get_recommend_use_case),
) -> RecommendationResponse:
    """Suggest a tech stack, install commands and resources for a build goal."""
    recommendation = await use_case.execute(body.goal, body.preferences)
    return RecommendationResponse.from_entity(recommendation)
