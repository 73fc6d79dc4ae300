"""Lifetime purchase counter and the read-only status view."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from ..config import PURCHASE_RETENTION_SECONDS
from ..store import KeyValueStore
from .common import KeySpace, StoreBacked, StoreErrorHook, require_client_id


@dataclass(frozen=True)
class ClientStatus:
    can_purchase_now: bool
    retry_after_seconds: int
    total_purchases: int


class PurchaseLedger(StoreBacked):
    def __init__(
        self,
        store: KeyValueStore,
        retention_seconds: int = PURCHASE_RETENTION_SECONDS,
        *,
        keys: Optional[KeySpace] = None,
        on_store_error: Optional[StoreErrorHook] = None,
    ) -> None:
        if retention_seconds <= 0:
            raise ValueError("retention_seconds must be positive")
        super().__init__(store, keys=keys, on_store_error=on_store_error)
        self.retention_seconds = int(retention_seconds)

    async def record_purchase(self, client_id: str) -> int:
        """Count one purchase and return the new total.

        Call only right after a successful ``AdmissionGate.try_claim`` for the
        same client; every call increments.
        """
        key = self.keys.counter(require_client_id(client_id))
        total = await self._call("increment", self.store.increment(key))
        await self._call("set_expiry", self.store.set_expiry(key, self.retention_seconds))
        return int(total)

    async def read_status(self, client_id: str) -> ClientStatus:
        client_id = require_client_id(client_id)
        ttl, raw_total = await asyncio.gather(
            self._call("time_to_live", self.store.time_to_live(self.keys.claim(client_id))),
            self._call("get", self.store.get(self.keys.counter(client_id))),
        )
        return ClientStatus(
            can_purchase_now=ttl <= 0,
            retry_after_seconds=ttl if ttl > 0 else 0,
            total_purchases=int(raw_total) if raw_total else 0,
        )
