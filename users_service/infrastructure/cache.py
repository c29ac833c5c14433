# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta
from threading import Lock

import redis

from users_service.domain.users.exceptions import CacheUnavailableError
from users_service.domain.users.repositories import SessionCache
from users_service.shared.config import CacheConfig
from users_service.shared.logging import logger


@dataclass(slots=True)
class CacheEntry:
    value: str
    expires_at: float

    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class InMemorySessionCache(SessionCache):
    """Process-local TTL cache for development and tests."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._store: dict[str, CacheEntry] = {}

    def put(self, key: str, value: str, ttl: timedelta) -> None:
        expires_at = time.monotonic() + ttl.total_seconds()
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired():
                logger.debug("cache: expired entry evicted")
                self._store.pop(key, None)
                return None
            return entry.value

    def ping(self) -> None:
        return None


class RedisSessionCache(SessionCache):
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: CacheConfig) -> RedisSessionCache:
        client = redis.Redis.from_url(
            config.url,
            socket_timeout=config.timeout,
            socket_connect_timeout=config.timeout,
            decode_responses=True,
        )
        return cls(client)

    def put(self, key: str, value: str, ttl: timedelta) -> None:
        try:
            self._client.setex(key, ttl, value)
        except redis.RedisError as exc:
            logger.error(f"cache: write failed ({type(exc).__name__})")
            raise CacheUnavailableError("put") from exc

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except redis.RedisError as exc:
            logger.error(f"cache: read failed ({type(exc).__name__})")
            raise CacheUnavailableError("get") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def ping(self) -> None:
        try:
            self._client.ping()
        except redis.RedisError as exc:
            raise CacheUnavailableError("ping") from exc


def build_session_cache(config: CacheConfig) -> SessionCache:
    if config.is_redis():
        logger.info("cache: using redis session cache")
        return RedisSessionCache.from_config(config)
    logger.info("cache: using in-memory session cache")
    return InMemorySessionCache()


__all__ = ["InMemorySessionCache", "RedisSessionCache", "build_session_cache"]
