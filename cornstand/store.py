"""Shared key-value store with expiry, backed by Redis or process memory."""
from __future__ import annotations

import asyncio
import math
import time
from typing import Awaitable, Callable, Protocol, TypeVar

from redis.asyncio import Redis
from redis.exceptions import RedisError

from .config import Settings
from .errors import ConfigurationError, StoreUnavailable
from .logging_config import logger

# Sentinels returned by time_to_live, same values as Redis TTL.
TTL_NO_EXPIRY = -1
TTL_MISSING = -2

T = TypeVar("T")


class KeyValueStore(Protocol):
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool: ...

    async def time_to_live(self, key: str) -> int: ...

    async def increment(self, key: str) -> int: ...

    async def set_expiry(self, key: str, ttl_seconds: int) -> bool: ...

    async def get(self, key: str) -> str | None: ...

    async def ping(self) -> str: ...

    async def close(self) -> None: ...


class RedisStore:
    def __init__(self, client: Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float | None = None) -> "RedisStore":
        client = Redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    async def _run(self, operation: str, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except (RedisError, OSError, asyncio.TimeoutError) as exc:
            raise StoreUnavailable(operation) from exc

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        # SET key value EX ttl NX: one round trip, atomic on the server.
        result = await self._run("set_if_absent", self._redis.set(key, value, ex=ttl_seconds, nx=True))
        return bool(result)

    async def time_to_live(self, key: str) -> int:
        # TTL rounds to the nearest second; round PTTL up so a live key never reads as 0.
        millis = int(await self._run("time_to_live", self._redis.pttl(key)))
        if millis < 0:
            return millis
        return math.ceil(millis / 1000)

    async def increment(self, key: str) -> int:
        return int(await self._run("increment", self._redis.incr(key)))

    async def set_expiry(self, key: str, ttl_seconds: int) -> bool:
        return bool(await self._run("set_expiry", self._redis.expire(key, ttl_seconds)))

    async def get(self, key: str) -> str | None:
        value = await self._run("get", self._redis.get(key))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def ping(self) -> str:
        result = await self._run("ping", self._redis.ping())
        if not result:
            raise StoreUnavailable("ping", "store did not answer ping")
        return "PONG"

    async def close(self) -> None:
        await self._redis.aclose()


class MemoryStore:
    """Single-process store for development and tests.

    Holds state in this process only, so it gives no guarantees across
    workers. The clock is injectable to simulate elapsed time.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._store: dict[str, tuple[str, float | None]] = {}
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> tuple[str, float | None] | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            self._store.pop(key, None)
            return None
        return entry

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        async with self._lock:
            if self._live(key) is not None:
                return False
            self._store[key] = (str(value), self._clock() + ttl_seconds)
            return True

    async def time_to_live(self, key: str) -> int:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return TTL_MISSING
            expires_at = entry[1]
            if expires_at is None:
                return TTL_NO_EXPIRY
            return math.ceil(expires_at - self._clock())

    async def increment(self, key: str) -> int:
        async with self._lock:
            entry = self._live(key)
            value, expires_at = entry if entry is not None else ("0", None)
            try:
                current = int(value)
            except ValueError as exc:
                raise StoreUnavailable("increment", f"value at {key!r} is not an integer") from exc
            self._store[key] = (str(current + 1), expires_at)
            return current + 1

    async def set_expiry(self, key: str, ttl_seconds: int) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return False
            self._store[key] = (entry[0], self._clock() + ttl_seconds)
            return True

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._live(key)
            return entry[0] if entry is not None else None

    async def ping(self) -> str:
        return "PONG"

    async def close(self) -> None:
        return None


def create_store(settings: Settings) -> KeyValueStore:
    if settings.redis_url:
        return RedisStore.from_url(str(settings.redis_url), socket_timeout=settings.redis_socket_timeout_seconds)
    if settings.is_production:
        raise ConfigurationError("REDIS_URL is required in production")
    logger.warning("store.memory_fallback", reason="REDIS_URL not set", note="do not use in production")
    return MemoryStore()
