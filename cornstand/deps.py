from __future__ import annotations

from fastapi import Request

from .services.purchases import PurchaseService
from .store import KeyValueStore


def get_purchase_service(request: Request) -> PurchaseService:
    return request.app.state.purchases


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store
