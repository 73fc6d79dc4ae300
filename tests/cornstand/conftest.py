from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cornstand.app import create_app
from cornstand.config import Settings
from cornstand.errors import StoreUnavailable
from cornstand.store import MemoryStore


class ManualClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingStore:
    """Every call fails the way an unreachable Redis would."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.closed = False

    async def _fail(self, operation: str):
        self.calls.append(operation)
        raise StoreUnavailable(operation)

    async def set_if_absent(self, key, value, ttl_seconds):
        return await self._fail("set_if_absent")

    async def time_to_live(self, key):
        return await self._fail("time_to_live")

    async def increment(self, key):
        return await self._fail("increment")

    async def set_expiry(self, key, ttl_seconds):
        return await self._fail("set_expiry")

    async def get(self, key):
        return await self._fail("get")

    async def ping(self):
        return await self._fail("ping")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def store(clock: ManualClock) -> MemoryStore:
    return MemoryStore(clock=clock)


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, purchase_window_seconds=60, redis_url=None, app_env="test")


@pytest.fixture()
def client(settings: Settings, store: MemoryStore):
    with TestClient(create_app(settings=settings, store=store)) as test_client:
        yield test_client


@pytest.fixture()
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture()
def failing_client(settings: Settings, failing_store: FailingStore):
    with TestClient(create_app(settings=settings, store=failing_store)) as test_client:
        yield test_client
