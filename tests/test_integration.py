"""Integration tests that hit real services (Gemini, Redis).

Run with: pytest tests/test_integration.py -v

Prerequisites:
- Redis running for the Redis cache tests
- GEMINI_API_KEY set in environment or .env file
"""

import pytest

from consizen.config import settings
from consizen.services.cache import RedisResponseCache, ResponseCache
from consizen.services.llm import LLMService, UpstreamModelError
from consizen.services.metrics import Metrics
from consizen.services.proxy import GenerationProxy

pytestmark = pytest.mark.integration


def has_gemini_key() -> bool:
    return bool(settings.gemini_api_key)


def get_redis_url() -> str:
    """Get Redis URL, preferring localhost for local testing."""
    return "redis://localhost:6379"


def has_redis() -> bool:
    """Check if Redis is reachable."""
    try:
        import redis
        r = redis.from_url(get_redis_url(), socket_connect_timeout=1)
        r.ping()
        r.close()
        return True
    except Exception:
        return False


skip_no_gemini = pytest.mark.skipif(
    not has_gemini_key(),
    reason="GEMINI_API_KEY not set"
)

skip_no_redis = pytest.mark.skipif(
    not has_redis(),
    reason="Redis not reachable"
)


@skip_no_redis
class TestRedisCacheIntegration:
    """Test the Redis cache backend against a real server."""

    @pytest.fixture
    def redis_cache(self):
        cache = RedisResponseCache(redis_url=get_redis_url(), max_entries=3, ttl_seconds=60)
        cache.connect()
        cache.redis_client.delete(cache.RECENCY_KEY)
        yield cache
        cache.redis_client.delete(cache.RECENCY_KEY)
        cache.close()

    def test_store_and_retrieve(self, redis_cache):
        redis_cache.set("general:Integration test prompt", "Integration test response")

        assert redis_cache.get("general:Integration test prompt") == "Integration test response"

    def test_capacity_trims_least_recently_used(self, redis_cache):
        for i in range(5):
            redis_cache.set(f"general:prompt {i}", f"response {i}")

        assert redis_cache.size() == 3
        assert redis_cache.get("general:prompt 0") is None
        assert redis_cache.get("general:prompt 4") == "response 4"


@skip_no_gemini
class TestGeminiIntegration:
    """Test the proxy against the real Gemini API."""

    @pytest.fixture
    def llm_service(self):
        service = LLMService(api_key=settings.gemini_api_key)
        service.initialize()
        return service

    async def test_real_generation(self, llm_service):
        response = await llm_service.generate("What is 2 + 2? Answer with a number.", "gemini-1.5-flash")

        assert "4" in response

    async def test_unknown_model_is_upstream_error(self, llm_service):
        with pytest.raises(UpstreamModelError):
            await llm_service.generate("Hello", "not-a-real-model")

    async def test_proxy_caches_real_result(self, llm_service):
        proxy = GenerationProxy(cache=ResponseCache(), llm=llm_service, metrics=Metrics())

        first = await proxy.handle_generate("Starbucks Coffee, $4.50", task="sustainability_analysis")
        second = await proxy.handle_generate("Starbucks Coffee, $4.50", task="sustainability_analysis")

        assert first == second
        assert proxy.metrics.get_stats()["cache_hits"] == 1
