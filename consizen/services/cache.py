"""Bounded, expiring response caches: in-process LRU and Redis-backed."""

import hashlib
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock
from typing import Protocol

import redis

from consizen.config import settings

logger = logging.getLogger(__name__)

PROMPT_KEY_CHARS = 100


def make_cache_key(task: str, prompt: str) -> str:
    """Cache key from the task and the first 100 characters of the prompt."""
    return f"{task}:{prompt[:PROMPT_KEY_CHARS]}"


class ResponseStore(Protocol):
    """Interface shared by the cache backends."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def size(self) -> int: ...


class ResponseCache:
    """Thread-safe LRU cache with a per-entry time-to-live."""

    def __init__(
        self,
        max_entries: int | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries or settings.cache_max_entries
        self.ttl_seconds = ttl_seconds or settings.cache_ttl_seconds
        self._clock = clock
        self._lock = Lock()
        self._entries: OrderedDict[str, tuple[str, float]] = OrderedDict()

    def get(self, key: str) -> str | None:
        """Return a live entry and mark it recently used, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key[:50]}...")
                return None

            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: str) -> None:
        """Insert or replace an entry, refreshing its expiry and recency."""
        with self._lock:
            self._entries[key] = (value, self._clock() + self.ttl_seconds)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted least recently used entry: {evicted[:50]}...")

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisResponseCache:
    """Redis-backed cache shared across worker processes.

    Values live under ``KEY_PREFIX`` with a native TTL. A sorted set scores
    each key by last use so the store can be trimmed to ``max_entries``.
    """

    KEY_PREFIX = "consizen:response:"
    RECENCY_KEY = "consizen:recency"

    def __init__(
        self,
        redis_url: str | None = None,
        max_entries: int | None = None,
        ttl_seconds: int | None = None,
    ):
        self.redis_url = redis_url or settings.redis_url
        self.max_entries = max_entries or settings.cache_max_entries
        self.ttl_seconds = ttl_seconds or settings.cache_ttl_seconds
        self.redis_client: redis.Redis | None = None

    def connect(self) -> None:
        """Connect to Redis."""
        self.redis_client = redis.from_url(self.redis_url, decode_responses=True)
        self.redis_client.ping()

    def _storage_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{hashlib.md5(key.encode()).hexdigest()}"

    def get(self, key: str) -> str | None:
        """Look up a cached response, treating Redis errors as a miss."""
        if self.redis_client is None:
            logger.warning("Redis client not connected")
            return None

        storage_key = self._storage_key(key)
        try:
            value = self.redis_client.get(storage_key)
            if value is None:
                self.redis_client.zrem(self.RECENCY_KEY, storage_key)
                return None
            self.redis_client.zadd(self.RECENCY_KEY, {storage_key: time.time()})
            return value
        except redis.RedisError as e:
            logger.error(f"Redis lookup error: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        """Store a response and trim the least recently used overflow."""
        if self.redis_client is None:
            logger.warning("Redis client not connected")
            return

        storage_key = self._storage_key(key)
        now = time.time()
        try:
            pipe = self.redis_client.pipeline()
            pipe.setex(storage_key, self.ttl_seconds, value)
            pipe.zadd(self.RECENCY_KEY, {storage_key: now})
            # Members untouched for a full TTL have already expired.
            pipe.zremrangebyscore(self.RECENCY_KEY, "-inf", now - self.ttl_seconds)
            pipe.execute()
            self._trim()
        except redis.RedisError as e:
            logger.error(f"Redis store error: {e}")

    def delete(self, key: str) -> None:
        if self.redis_client is None:
            return

        storage_key = self._storage_key(key)
        try:
            pipe = self.redis_client.pipeline()
            pipe.delete(storage_key)
            pipe.zrem(self.RECENCY_KEY, storage_key)
            pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Redis delete error: {e}")

    def _trim(self) -> None:
        if self.redis_client.zcard(self.RECENCY_KEY) <= self.max_entries:  # type: ignore[union-attr]
            return

        # Oldest first. Reads refresh a member's score but not its value's
        # TTL, so members whose value has expired are dropped before counting.
        members = self.redis_client.zrange(self.RECENCY_KEY, 0, -1)  # type: ignore[union-attr]
        pipe = self.redis_client.pipeline()  # type: ignore[union-attr]
        for member in members:
            pipe.exists(member)
        alive = pipe.execute()

        live = [m for m, exists in zip(members, alive) if exists]
        dead = [m for m, exists in zip(members, alive) if not exists]
        evicted = live[: max(0, len(live) - self.max_entries)]
        if not (dead or evicted):
            return

        pipe = self.redis_client.pipeline()  # type: ignore[union-attr]
        if evicted:
            pipe.delete(*evicted)
        pipe.zrem(self.RECENCY_KEY, *(dead + evicted))
        pipe.execute()
        logger.debug(
            f"Evicted {len(evicted)} least recently used entries, dropped {len(dead)} expired"
        )

    def size(self) -> int:
        if self.redis_client is None:
            return 0
        try:
            return int(self.redis_client.zcard(self.RECENCY_KEY))
        except redis.RedisError as e:
            logger.error(f"Redis size error: {e}")
            return 0

    def close(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            self.redis_client.close()
            self.redis_client = None


def create_cache() -> ResponseStore:
    """Build the cache backend selected by settings."""
    if settings.cache_backend == "redis":
        cache = RedisResponseCache()
        cache.connect()
        return cache
    return ResponseCache()
