"""Metrics service for tracking proxy and cache performance."""

from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class Metrics:
    """Thread-safe metrics collector for the generation proxy."""

    _lock: Lock = field(default_factory=Lock, repr=False)
    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    upstream_calls: int = 0
    upstream_failures: int = 0
    fallbacks: int = 0
    exhausted: int = 0
    unavailable: int = 0
    validation_errors: int = 0
    total_latency_ms: float = 0.0
    cache_latency_ms: float = 0.0
    upstream_latency_ms: float = 0.0
    _model_calls: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_cache_hit(self, latency_ms: float) -> None:
        """Record a cache hit with latency."""
        with self._lock:
            self.total_requests += 1
            self.cache_hits += 1
            self.total_latency_ms += latency_ms
            self.cache_latency_ms += latency_ms

    def record_cache_miss(self, latency_ms: float) -> None:
        """Record a request served by an upstream model."""
        with self._lock:
            self.total_requests += 1
            self.cache_misses += 1
            self.total_latency_ms += latency_ms
            self.upstream_latency_ms += latency_ms

    def record_model_call(self, model: str, success: bool) -> None:
        """Record one upstream attempt against a model."""
        with self._lock:
            self.upstream_calls += 1
            self._model_calls[model] += 1
            if not success:
                self.upstream_failures += 1

    def record_fallback(self) -> None:
        with self._lock:
            self.fallbacks += 1

    def record_exhausted(self) -> None:
        """Record a request where every candidate model failed."""
        with self._lock:
            self.total_requests += 1
            self.cache_misses += 1
            self.exhausted += 1

    def record_unavailable(self) -> None:
        """Record a request refused because the upstream is not configured."""
        with self._lock:
            self.total_requests += 1
            self.cache_misses += 1
            self.unavailable += 1

    def record_validation_error(self) -> None:
        with self._lock:
            self.validation_errors += 1

    def get_stats(self) -> dict:
        """Get current statistics."""
        with self._lock:
            hit_rate = (
                (self.cache_hits / self.total_requests * 100)
                if self.total_requests > 0
                else 0.0
            )
            avg_latency = (
                (self.total_latency_ms / self.total_requests)
                if self.total_requests > 0
                else 0.0
            )
            avg_cache_latency = (
                (self.cache_latency_ms / self.cache_hits)
                if self.cache_hits > 0
                else 0.0
            )
            served_upstream = self.cache_misses - self.exhausted - self.unavailable
            avg_upstream_latency = (
                (self.upstream_latency_ms / served_upstream)
                if served_upstream > 0
                else 0.0
            )

            return {
                "total_requests": self.total_requests,
                "cache_hits": self.cache_hits,
                "cache_misses": self.cache_misses,
                "hit_rate_percent": round(hit_rate, 2),
                "upstream_calls": self.upstream_calls,
                "upstream_failures": self.upstream_failures,
                "fallbacks": self.fallbacks,
                "exhausted": self.exhausted,
                "unavailable": self.unavailable,
                "validation_errors": self.validation_errors,
                "latency": {
                    "avg_total_ms": round(avg_latency, 2),
                    "avg_cache_ms": round(avg_cache_latency, 2),
                    "avg_upstream_ms": round(avg_upstream_latency, 2),
                },
                "models": dict(self._model_calls),
            }

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self.total_requests = 0
            self.cache_hits = 0
            self.cache_misses = 0
            self.upstream_calls = 0
            self.upstream_failures = 0
            self.fallbacks = 0
            self.exhausted = 0
            self.unavailable = 0
            self.validation_errors = 0
            self.total_latency_ms = 0.0
            self.cache_latency_ms = 0.0
            self.upstream_latency_ms = 0.0
            self._model_calls.clear()
