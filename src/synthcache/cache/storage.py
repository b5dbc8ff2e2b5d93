"""Key-value cache service used for synthesized audio and credentials."""

import logging
from typing import Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import CacheServiceError

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Asynchronous key-value store with per-key expiry.

    Every method raises CacheServiceError on failure.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def expire(self, key: str, ttl_seconds: int) -> bool: ...

    async def delete(self, *keys: str) -> int: ...

    async def keys(self, pattern: str) -> list[str]: ...


class RedisCacheStore:
    """Redis-backed CacheStore.

    The wrapped client is safe to share between concurrent requests; this
    class adds no state of its own.
    """

    def __init__(self, client: "redis.Redis") -> None:
        """Initialize with an existing redis.asyncio client.

        Args:
            client: Client created with ``decode_responses=True``
        """
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        """Create a store connected to the Redis server at url."""
        return cls(redis.Redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as e:
            raise CacheServiceError(f"Failed to read {key}: {e}", e) from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheServiceError(f"Failed to write {key}: {e}", e) from e

    async def expire(self, key: str, ttl_seconds: int) -> bool:
        try:
            return bool(await self._client.expire(key, ttl_seconds))
        except RedisError as e:
            raise CacheServiceError(f"Failed to set expiry on {key}: {e}", e) from e

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self._client.delete(*keys))
        except RedisError as e:
            raise CacheServiceError(f"Failed to delete {len(keys)} keys: {e}", e) from e

    async def keys(self, pattern: str) -> list[str]:
        try:
            return list(await self._client.keys(pattern))
        except RedisError as e:
            raise CacheServiceError(f"Failed to list keys {pattern}: {e}", e) from e

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
        logger.debug("Closed Redis connection pool")
