"""
Redis-backed cache shared by all backend replicas.

All keys live in a single database and are namespaced by prefix:

    learnpath:identity:{user_id}

Usage:
    from learnpath.db.redis_cache import get_redis_cache, RedisKeyPrefix

    cache = get_redis_cache()
    key = RedisKeyPrefix.identity_key("user_abc123")
    cache.set(key, {"id": "user_abc123", "role": "user"}, expire_seconds=900)
    data = cache.get(key)
    cache.delete(key)

Cache failures are never fatal: reads degrade to a miss and writes are
dropped, so callers always fall back to the database.
"""

import json
from enum import Enum
from typing import Any

import redis

from learnpath.settings import settings
from learnpath.utils import get_logger

logger = get_logger(__name__)


class RedisKeyPrefix(str, Enum):
    """Key prefixes, all under ``learnpath:``."""

    IDENTITY = "learnpath:identity"

    @classmethod
    def identity_key(cls, user_id: str) -> str:
        return f"{cls.IDENTITY.value}:{user_id}"


def create_redis_client(db: int = 0) -> redis.Redis:
    """Create a Redis client for the configured mode.

    ``in_memory`` uses FakeRedis so local development and tests need no
    Redis server; ``redis`` connects to a real instance.
    """
    if settings.redis_type == "in_memory":
        import fakeredis

        logger.info(f"Using FakeRedis (in-memory): db={db}")
        return fakeredis.FakeRedis(db=db, decode_responses=True)

    redis_config: dict[str, Any] = {
        "host": settings.redis_host,
        "port": settings.redis_port,
        "db": db,
        "socket_connect_timeout": settings.redis_socket_connect_timeout,
        "socket_timeout": settings.redis_socket_timeout,
        "decode_responses": True,
    }
    if settings.redis_password:
        redis_config["password"] = settings.redis_password

    logger.info(f"Using real Redis: {settings.redis_host}:{settings.redis_port}, db={db}")
    return redis.Redis(**redis_config)


class RedisCache:
    """JSON key/value cache with TTL on top of a Redis client."""

    def __init__(self, client: redis.Redis | None = None, db: int = 0):
        """
        Args:
            client: Pre-configured client (tests pass a FakeRedis)
            db: Database index used when the client is created lazily
        """
        self.db = db
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = create_redis_client(self.db)
        return self._client

    def get(self, key: str) -> Any | None:
        """Cached value, or None on miss, expiry or Redis failure."""
        try:
            data = self.client.get(key)
            if data:
                return json.loads(data)
            logger.debug(f"Cache miss: {key}")
            return None
        except redis.RedisError as e:
            logger.warning(f"Redis get failed for {key}: {e}")
            return None

    def set(self, key: str, value: Any, expire_seconds: int | None = None) -> bool:
        """Store ``value`` as JSON; returns False when Redis is unavailable."""
        try:
            payload = json.dumps(value)
            if expire_seconds:
                self.client.setex(key, expire_seconds, payload)
            else:
                self.client.set(key, payload)
            return True
        except redis.RedisError as e:
            logger.warning(f"Redis set failed for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            return bool(self.client.delete(key))
        except redis.RedisError as e:
            logger.warning(f"Redis delete failed for {key}: {e}")
            return False

    def clear(self) -> None:
        """Drop every key of this database (tests only)."""
        self.client.flushdb()


_redis_cache: RedisCache | None = None


def get_redis_cache() -> RedisCache:
    """Process-wide cache instance."""
    global _redis_cache
    if _redis_cache is None:
        _redis_cache = RedisCache(db=settings.redis_index)
    return _redis_cache
