from __future__ import annotations

import json
from typing import Any

from redis import Redis


class RedisManager:
    """
    High-level Redis utilities for JSON and text records kept on behalf of the agent.

    This class is designed for dependency injection: callers provide a configured
    Redis client (e.g., via Redis.from_url) and optional configuration such as the key
    namespace and default TTL.

    Args:
        redis_client (Redis): A configured Redis client instance.
        namespace (str): Key namespace/prefix for generated keys.
        default_ttl (int | None): TTL in seconds applied when a setter gets none;
            None keeps records forever.
    """

    def __init__(
        self,
        redis_client: Redis,
        *,
        namespace: str = "chat:agent",
        default_ttl: int | None = None,
    ) -> None:
        self._redis: Redis = redis_client
        self._namespace: str = namespace.rstrip(":")
        self._default_ttl: int | None = default_ttl

    # -----------------------------
    # JSON helpers
    # -----------------------------
    def set_json(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        """
        Set a JSON value at `key` with optional TTL.

        Args:
            key (str): The Redis key to set.
            value (dict[str, Any]): The JSON-serializable mapping to store.
            ttl (int | None): Optional TTL in seconds; falls back to the manager default.
        """
        self._set(key, json.dumps(value), ttl)

    def get_json(self, key: str) -> dict[str, Any] | None:
        """
        Get a JSON value from `key` and parse it into a dict.

        Returns:
            dict[str, Any] | None: Parsed dict if present and valid; otherwise None.
        """
        raw = self._redis.get(key)
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return None
        return parsed if isinstance(parsed, dict) else None

    # -----------------------------
    # Text helpers
    # -----------------------------
    def set_text(self, key: str, value: str, ttl: int | None = None) -> None:
        self._set(key, value, ttl)

    def get_text(self, key: str) -> str | None:
        raw = self._redis.get(key)
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, bytes) else str(raw)

    def delete(self, key: str) -> None:
        self._redis.delete(key)

    # -----------------------------
    # Profile keys
    # -----------------------------
    def get_profile_key(self, user_key: str) -> str:
        """Namespaced key of the free-text profile of `user_key`."""
        return f"{self._namespace}:profile:{user_key}"

    def get_profile_entries_key(self, user_key: str) -> str:
        """Namespaced key of the structured profile entries of `user_key`."""
        return f"{self._namespace}:profile-entries:{user_key}"

    def _set(self, key: str, data: str, ttl: int | None) -> None:
        ttl_to_use = ttl if ttl is not None else self._default_ttl
        if ttl_to_use is not None:
            self._redis.setex(key, ttl_to_use, data)
        else:
            self._redis.set(key, data)


def build_redis_manager(
    redis_url: str | None = None,
    *,
    redis_client: Redis | None = None,
    namespace: str = "chat:agent",
    default_ttl: int | None = None,
) -> RedisManager:
    """
    Factory to create a RedisManager.

    Provide either `redis_url` and this function will initialize the client, or pass an
    existing `redis_client` (for tests/advanced use).

    Args:
        redis_url (str | None): Redis connection URL (e.g., "redis://:pwd@host:6379/0").
        redis_client (Redis | None): Pre-configured Redis client instance.
        namespace (str): Key namespace/prefix for generated keys.
        default_ttl (int | None): Default TTL for stored records.

    Returns:
        RedisManager: Configured manager instance.

    Raises:
        ValueError: If neither `redis_url` nor `redis_client` is given.
    """
    if redis_client is None:
        if not redis_url:
            raise ValueError("Provide either redis_url or redis_client")
        redis_client = Redis.from_url(redis_url, decode_responses=True)

    return RedisManager(redis_client, namespace=namespace, default_ttl=default_ttl)
