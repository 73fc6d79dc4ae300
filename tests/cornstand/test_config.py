from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from cornstand.app import create_app
from cornstand.config import PURCHASE_RETENTION_SECONDS, Settings
from cornstand.logging_config import setup_logging
from cornstand.store import MemoryStore, create_store


def test_defaults(monkeypatch):
    for key in ("PURCHASE_WINDOW_SECONDS", "PURCHASE_RETENTION_SECONDS", "REDIS_URL", "APP_ENV", "KEY_PREFIX"):
        monkeypatch.delenv(key, raising=False)
    settings = Settings(_env_file=None)
    assert settings.purchase_window_seconds == 60
    assert settings.purchase_retention_seconds == PURCHASE_RETENTION_SECONDS == 2_592_000
    assert settings.redis_url is None
    assert settings.key_prefix == "corn"
    assert settings.is_production is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PURCHASE_WINDOW_SECONDS", "5")
    monkeypatch.setenv("APP_ENV", "Production")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    settings = Settings(_env_file=None)
    assert settings.purchase_window_seconds == 5
    assert settings.is_production is True
    assert settings.allowed_origins == ["https://a.example", "https://b.example"]


def test_window_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, purchase_window_seconds=0)


def test_custom_window_flows_into_responses(store, clock):
    settings = Settings(_env_file=None, purchase_window_seconds=5, redis_url=None)
    with TestClient(create_app(settings=settings, store=store)) as client:
        first = client.post("/buy-corn", json={"clientId": "c1"})
        assert first.json()["retryAfterSeconds"] == 5
        clock.advance(2)
        assert client.post("/buy-corn", json={"clientId": "c1"}).json()["retryAfterSeconds"] == 3
        clock.advance(3)
        assert client.post("/buy-corn", json={"clientId": "c1"}).json()["totalPurchases"] == 2


def test_blank_redis_url_means_memory_store(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "")
    monkeypatch.setenv("APP_ENV", "development")
    settings = Settings(_env_file=None)
    assert settings.redis_url is None
    assert isinstance(create_store(settings), MemoryStore)


def test_log_level_follows_latest_setup():
    root = logging.getLogger()
    previous = root.level
    try:
        setup_logging("DEBUG")
        assert root.level == logging.DEBUG
        setup_logging("warning")
        assert root.level == logging.WARNING
        setup_logging("not-a-level")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)
