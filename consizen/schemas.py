"""Pydantic models for API request/response validation."""

from typing import Literal

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """Request body for the generation endpoint."""

    # Optional so a missing prompt is reported as a 400, not a 422.
    prompt: str | None = Field(default=None, description="Free-text prompt")
    task: str | None = Field(
        default=None,
        description='Task label used for model selection, defaults to "general"',
    )
    modelComplexity: str | None = Field(
        default=None,
        description='Complexity hint: "low", "medium" or "high"',
    )


class GenerateResponse(BaseModel):
    """Response body for the generation endpoint."""

    result: str = Field(..., description="Generated or cached text")


class ErrorResponse(BaseModel):
    """Error response body."""

    error: str = Field(..., description="Error message")
    details: str | None = Field(default=None, description="Underlying failure")
    status: int | None = Field(default=None, description="HTTP status code")


class ReadyResponse(BaseModel):
    """Liveness probe for the generation endpoint."""

    status: str = Field(default="ready")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="ok")


class LatencyStats(BaseModel):
    """Latency statistics."""

    avg_total_ms: float = Field(..., description="Average total latency in ms")
    avg_cache_ms: float = Field(..., description="Average cache hit latency in ms")
    avg_upstream_ms: float = Field(..., description="Average upstream latency in ms")


class StatsResponse(BaseModel):
    """Proxy statistics response."""

    total_requests: int = Field(..., description="Total generation requests served")
    cache_hits: int = Field(..., description="Number of cache hits")
    cache_misses: int = Field(..., description="Number of cache misses")
    hit_rate_percent: float = Field(..., description="Cache hit rate percentage")
    upstream_calls: int = Field(..., description="Number of upstream model calls")
    upstream_failures: int = Field(..., description="Number of failed model calls")
    fallbacks: int = Field(..., description="Number of fallback attempts")
    exhausted: int = Field(..., description="Requests where every model failed")
    unavailable: int = Field(..., description="Requests refused while the upstream is unconfigured")
    validation_errors: int = Field(..., description="Requests rejected as invalid")
    latency: LatencyStats
    models: dict[str, int] = Field(..., description="Upstream calls per model")
    cache_size: int = Field(..., description="Live entries in the response cache")


class MerchantData(BaseModel):
    """Merchant description submitted for analysis."""

    name: str = Field(..., min_length=1)
    category: str
    description: str | None = None
    location: str | None = None
    certifications: list[str] | None = None


class Transaction(BaseModel):
    """A single spending record."""

    id: str
    amount: float
    merchant: str
    category: str
    date: str
    sustainabilityScore: float | None = None


class SustainabilityScore(BaseModel):
    """Merchant sustainability assessment."""

    score: float = Field(..., ge=0, le=100)
    reasoning: str
    category: Literal["eco-friendly", "neutral", "harmful"]
    recommendations: list[str]
    carbonIntensity: Literal["low", "medium", "high"]


class CarbonFootprint(BaseModel):
    """Estimated emissions for a transaction."""

    co2Kg: float
    category: str
    offsetCost: float
    impact: Literal["low", "medium", "high"]


class SpendingPattern(BaseModel):
    """Sustainability insights over recent spending."""

    sustainabilityTrend: Literal["improving", "declining", "stable"]
    topCategories: list[str]
    ecoScore: float = Field(..., ge=0, le=100)
    suggestions: list[str]
    impact: str


class CarbonFootprintRequest(BaseModel):
    """Request body for the carbon footprint endpoint."""

    amount: float = Field(..., ge=0)
    merchant: MerchantData
    category: str


class RecommendationsRequest(BaseModel):
    """Request body for the recommendations endpoint."""

    preferences: list[str] = Field(default_factory=list)
    spendingHistory: list[Transaction] = Field(default_factory=list)


class RecommendationsResponse(BaseModel):
    recommendations: list[str]


class ChallengesResponse(BaseModel):
    challenges: list[str]


class SpendingPatternsRequest(BaseModel):
    """Request body for the spending patterns endpoint."""

    transactions: list[Transaction] = Field(default_factory=list)
