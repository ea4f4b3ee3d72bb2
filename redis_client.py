import json
import logging
from typing import Any, Optional

import redis

from config import settings

logger = logging.getLogger(__name__)

CACHE_PREFIX = "library:books"

_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    global _redis_client
    if _redis_client is not None:
        return _redis_client

    if settings.REDIS_URL:
        _redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        return _redis_client

    return None


class BookSearchCache:
    """Caches encoded search pages; redis failures count as misses."""

    def __init__(self, client: redis.Redis, ttl: int = settings.CACHE_TTL_SECONDS):
        self.client = client
        self.ttl = ttl

    @staticmethod
    def key(title: str | None, author: str | None, page: int, size: int) -> str:
        filters = json.dumps([(title or "").lower(), (author or "").lower(), page, size])
        return f"{CACHE_PREFIX}:{filters}"

    def get(self, key: str) -> Optional[Any]:
        try:
            cached = self.client.get(key)
        except redis.RedisError as exc:
            logger.warning(f"Cache read failed for {key}: {exc}")
            return None
        return json.loads(cached) if cached else None

    def set(self, key: str, payload: Any) -> None:
        try:
            self.client.setex(key, self.ttl, json.dumps(payload))
        except redis.RedisError as exc:
            logger.warning(f"Cache write failed for {key}: {exc}")

    def invalidate(self) -> None:
        try:
            keys = list(self.client.scan_iter(match=f"{CACHE_PREFIX}:*", count=200))
            if keys:
                self.client.delete(*keys)
        except redis.RedisError as exc:
            logger.warning(f"Cache invalidation failed: {exc}")


def get_search_cache() -> Optional[BookSearchCache]:
    client = get_redis_client()
    if client is None:
        return None
    return BookSearchCache(client)
