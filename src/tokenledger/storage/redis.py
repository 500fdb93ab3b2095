"""
Redis Storage Backend.

Storage backend using Redis for persistence, shared by every process that
points at the same URL. Batch commits run as a MULTI/EXEC transaction.
"""

from __future__ import annotations

import json
import os
import uuid
from typing import Any

import redis.asyncio as redis

from tokenledger.storage.base import StorageBackend, StorageWrite, register_storage_backend


class RedisStorage(StorageBackend):
    """
    Redis storage backend.

    Each record is a JSON string under "<prefix>:<collection>:<key>"; a set at
    "<prefix>:<collection>:_index" lists the keys of a collection.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        prefix: str = "tokenledger",
    ) -> None:
        """
        Initialize Redis storage.

        Args:
            redis_url: Redis connection URL (or from TOKENLEDGER_REDIS_URL env)
            prefix: Key prefix for all storage keys
        """
        self._redis_url = redis_url or os.environ.get(
            "TOKENLEDGER_REDIS_URL",
            "redis://localhost:6379/0",
        )
        self._prefix = prefix
        self._client: redis.Redis | None = None

    def _get_client(self) -> redis.Redis:
        """Lazy-create the Redis client."""
        if self._client is None:
            self._client = redis.from_url(self._redis_url, decode_responses=True)
        return self._client

    def _make_key(self, collection: str, key: str) -> str:
        """Create Redis key from collection and key."""
        return f"{self._prefix}:{collection}:{key}"

    def _index_key(self, collection: str) -> str:
        return f"{self._prefix}:{collection}:_index"

    def _lock_key(self, key: str) -> str:
        return f"{self._prefix}:locks:{key}"

    async def save(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
    ) -> None:
        """Save data to Redis."""
        await self.commit([StorageWrite(collection, key, data)])

    async def get(
        self,
        collection: str,
        key: str,
    ) -> dict[str, Any] | None:
        """Get data from Redis."""
        client = self._get_client()
        data = await client.get(self._make_key(collection, key))

        if data is None:
            return None
        return json.loads(data)

    async def delete(
        self,
        collection: str,
        key: str,
    ) -> bool:
        """Delete data from Redis."""
        client = self._get_client()
        result = await client.delete(self._make_key(collection, key))
        await client.srem(self._index_key(collection), key)
        return result > 0

    async def commit(self, writes: list[StorageWrite]) -> None:
        """Apply all writes in a single MULTI/EXEC transaction."""
        # Serialize up front so an unserializable payload aborts before anything is sent
        payloads = [(w.collection, w.key, json.dumps(w.data)) for w in writes]

        client = self._get_client()
        async with client.pipeline(transaction=True) as pipe:
            for collection, key, payload in payloads:
                pipe.set(self._make_key(collection, key), payload)
                pipe.sadd(self._index_key(collection), key)
            await pipe.execute()

    # Lua script for safe lock release: only delete if token matches
    _RELEASE_LOCK_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    async def acquire_lock(
        self,
        key: str,
        ttl: int = 30,
    ) -> str | None:
        """
        Acquire a distributed lock with ownership token (Redis SET NX).

        Args:
            key: Lock key (e.g. "lock:ledger:abc")
            ttl: TTL in seconds

        Returns:
            Unique ownership token if acquired, None if already held
        """
        client = self._get_client()
        token = str(uuid.uuid4())

        result = await client.set(self._lock_key(key), token, nx=True, ex=ttl)
        if result:
            return token
        return None

    async def release_lock(
        self,
        key: str,
        token: str | None = None,
    ) -> bool:
        """
        Release a lock safely using Lua script.

        Only deletes the key if the stored value matches our token,
        preventing accidental release of another caller's lock.
        """
        client = self._get_client()
        redis_key = self._lock_key(key)

        if token:
            result = await client.eval(self._RELEASE_LOCK_SCRIPT, 1, redis_key, token)
            return int(result) > 0

        result = await client.delete(redis_key)
        return result > 0

    # Index and records are read in one server-side step so a concurrent
    # MULTI/EXEC commit is seen either entirely or not at all
    _SNAPSHOT_SCRIPT = """
    local keys = redis.call("smembers", KEYS[1])
    local out = {}
    for _, key in ipairs(keys) do
        out[#out + 1] = key
        out[#out + 1] = redis.call("get", ARGV[1] .. key)
    end
    return out
    """

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query data with optional filters."""
        client = self._get_client()
        flat = await client.eval(
            self._SNAPSHOT_SCRIPT,
            1,
            self._index_key(collection),
            f"{self._prefix}:{collection}:",
        )
        snapshot = dict(zip(flat[::2], flat[1::2]))

        results = []
        for key in sorted(snapshot):
            raw = snapshot[key]
            if not raw:
                continue
            data = json.loads(raw)

            if filters and any(data.get(k) != v for k, v in filters.items()):
                continue

            data["_key"] = key
            results.append(data)

        results = results[offset:]
        if limit is not None:
            results = results[:limit]

        return results

    async def update(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
    ) -> bool:
        """Update existing data."""
        existing = await self.get(collection, key)
        if existing is None:
            return False

        existing.update(data)
        await self.save(collection, key, existing)
        return True

    async def count(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> int:
        """Count records in collection."""
        if filters:
            results = await self.query(collection, filters)
            return len(results)

        client = self._get_client()
        return await client.scard(self._index_key(collection))

    async def clear(self, collection: str) -> int:
        """Clear all records from a collection."""
        client = self._get_client()
        keys = await client.smembers(self._index_key(collection))

        for key in keys:
            await self.delete(collection, key)

        return len(keys)

    async def health_check(self) -> bool:
        """Check Redis connection."""
        try:
            await self._get_client().ping()
        except redis.RedisError:
            return False
        return True

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


# Register backend
register_storage_backend("redis", RedisStorage)
