"""API routes for the ConsizeN AI proxy."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from consizen.schemas import (
    CarbonFootprint,
    CarbonFootprintRequest,
    ChallengesResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
    MerchantData,
    ReadyResponse,
    RecommendationsRequest,
    RecommendationsResponse,
    SpendingPattern,
    SpendingPatternsRequest,
    StatsResponse,
    SustainabilityScore,
)
from consizen.services.analysis import SustainabilityAnalyst
from consizen.services.llm import LLMNotConfiguredError
from consizen.services.proxy import (
    AllModelsFailedError,
    GenerationProxy,
    MissingPromptError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_proxy(request: Request) -> GenerationProxy:
    return request.app.state.proxy


def get_analyst(request: Request) -> SustainabilityAnalyst:
    return request.app.state.analyst


def error_response(status: int, error: str, details: str | None = None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body.update(details=details, status=status)
    return JSONResponse(status_code=status, content=body)


def not_configured_response(e: LLMNotConfiguredError) -> JSONResponse:
    logger.error(f"Upstream not configured: {e}")
    return error_response(503, "AI service is not configured", str(e))


@router.post(
    "/api/gemini",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Prompt is missing"},
        500: {"model": ErrorResponse, "description": "All models failed"},
        503: {"model": ErrorResponse, "description": "Upstream credential not configured"},
    },
)
async def generate(
    request: GenerateRequest,
    proxy: GenerationProxy = Depends(get_proxy),
):
    """
    Generate text for a prompt.

    Returns a cached result for a repeated (task, prompt) pair, otherwise
    calls the policy model and falls back to one alternate model on failure.
    """
    try:
        result = await proxy.handle_generate(
            prompt=request.prompt,
            task=request.task,
            model_complexity=request.modelComplexity,
        )
        return GenerateResponse(result=result)
    except MissingPromptError as e:
        return error_response(400, str(e))
    except AllModelsFailedError as e:
        status = e.status_code or 500
        return error_response(status, "Failed to process request", str(e))
    except LLMNotConfiguredError as e:
        return not_configured_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error processing prompt: {e}")
        return error_response(500, "Internal server error", "Unexpected error")


@router.get("/api/gemini", response_model=ReadyResponse)
async def ready() -> ReadyResponse:
    """Liveness probe for the generation endpoint."""
    return ReadyResponse(status="ready")


@router.post(
    "/api/analysis/merchant",
    response_model=SustainabilityScore,
    responses={503: {"model": ErrorResponse}},
)
async def analyze_merchant(
    merchant: MerchantData,
    analyst: SustainabilityAnalyst = Depends(get_analyst),
):
    """Score a merchant's sustainability."""
    try:
        return await analyst.analyze_merchant(merchant)
    except LLMNotConfiguredError as e:
        return not_configured_response(e)


@router.post(
    "/api/analysis/carbon-footprint",
    response_model=CarbonFootprint,
    responses={503: {"model": ErrorResponse}},
)
async def carbon_footprint(
    request: CarbonFootprintRequest,
    analyst: SustainabilityAnalyst = Depends(get_analyst),
):
    """Estimate the carbon footprint of a transaction."""
    try:
        return await analyst.calculate_carbon_footprint(
            request.amount, request.merchant, request.category
        )
    except LLMNotConfiguredError as e:
        return not_configured_response(e)


@router.post(
    "/api/analysis/recommendations",
    response_model=RecommendationsResponse,
    responses={503: {"model": ErrorResponse}},
)
async def recommendations(
    request: RecommendationsRequest,
    analyst: SustainabilityAnalyst = Depends(get_analyst),
):
    """Suggest sustainable habits from preferences and recent spending."""
    try:
        items = await analyst.get_recommendations(request.preferences, request.spendingHistory)
        return RecommendationsResponse(recommendations=items)
    except LLMNotConfiguredError as e:
        return not_configured_response(e)


@router.get(
    "/api/analysis/challenges",
    response_model=ChallengesResponse,
    responses={503: {"model": ErrorResponse}},
)
async def challenges(analyst: SustainabilityAnalyst = Depends(get_analyst)):
    """Generate community sustainability challenges."""
    try:
        return ChallengesResponse(challenges=await analyst.generate_challenges())
    except LLMNotConfiguredError as e:
        return not_configured_response(e)


@router.post(
    "/api/analysis/spending-patterns",
    response_model=SpendingPattern,
    responses={503: {"model": ErrorResponse}},
)
async def spending_patterns(
    request: SpendingPatternsRequest,
    analyst: SustainabilityAnalyst = Depends(get_analyst),
):
    """Summarize sustainability trends across recent transactions."""
    try:
        return await analyst.analyze_spending_patterns(request.transactions)
    except LLMNotConfiguredError as e:
        return not_configured_response(e)


@router.get("/api/stats", response_model=StatsResponse)
async def stats(proxy: GenerationProxy = Depends(get_proxy)) -> StatsResponse:
    """Proxy and cache statistics."""
    return StatsResponse(**proxy.metrics.get_stats(), cache_size=proxy.cache.size())


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok")
