"""Pytest fixtures for ConsizeN AI proxy tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from consizen.services.analysis import SustainabilityAnalyst
from consizen.services.cache import ResponseCache
from consizen.services.llm import LLMService
from consizen.services.metrics import Metrics
from consizen.services.proxy import GenerationProxy


class FakeClock:
    """Manually advanced monotonic clock for expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def response_cache(clock):
    """In-memory cache with the production limits and a controllable clock."""
    return ResponseCache(max_entries=100, ttl_seconds=3600, clock=clock)


@pytest.fixture
def mock_gemini_response():
    """Mock Gemini text response."""
    return "Starbucks scores 62/100 for sustainability."


@pytest.fixture
def mock_llm_service(mock_gemini_response):
    """Mock LLM service to avoid real API calls."""
    mock = MagicMock(spec=LLMService)
    mock.client = MagicMock()
    mock.generate = AsyncMock(return_value=mock_gemini_response)
    return mock


@pytest.fixture
def metrics():
    return Metrics()


@pytest.fixture
def proxy(response_cache, mock_llm_service, metrics):
    return GenerationProxy(cache=response_cache, llm=mock_llm_service, metrics=metrics)


@pytest.fixture
def analyst(proxy):
    return SustainabilityAnalyst(proxy)


@pytest.fixture
async def client(proxy, analyst):
    """Async HTTP client for testing FastAPI endpoints."""
    from consizen.main import app

    # ASGITransport does not run the lifespan, so wire state directly.
    app.state.proxy = proxy
    app.state.analyst = analyst
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def merchant_payload():
    """Sample merchant for analysis tests."""
    return {
        "name": "Starbucks Coffee",
        "category": "Food & Drink",
        "location": "Seattle, WA",
        "certifications": ["Fair Trade"],
    }


@pytest.fixture
def transactions_payload():
    """Sample spending history."""
    return [
        {
            "id": f"tx-{i}",
            "amount": 4.5 + i,
            "merchant": "Starbucks Coffee",
            "category": "Food & Drink",
            "date": f"2024-03-{i + 1:02d}",
        }
        for i in range(12)
    ]
