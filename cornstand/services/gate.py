"""Admission gate: at most one successful claim per client per window."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..config import DEFAULT_WINDOW_SECONDS
from ..store import KeyValueStore
from .common import KeySpace, StoreBacked, StoreErrorHook, require_client_id

CLAIM_MARKER = "1"


@dataclass(frozen=True)
class Claimed:
    window_seconds: int


@dataclass(frozen=True)
class Rejected:
    retry_after_seconds: int


ClaimResult = Union[Claimed, Rejected]


class AdmissionGate(StoreBacked):
    def __init__(
        self,
        store: KeyValueStore,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        *,
        keys: Optional[KeySpace] = None,
        on_store_error: Optional[StoreErrorHook] = None,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        super().__init__(store, keys=keys, on_store_error=on_store_error)
        self.window_seconds = int(window_seconds)

    async def try_claim(self, client_id: str) -> ClaimResult:
        """Claim the current window for ``client_id`` or report how long to wait.

        The claim is a single conditional create with expiry, so concurrent
        callers for the same client cannot both succeed. Store failures
        propagate as ``StoreUnavailable``.
        """
        client_id = require_client_id(client_id)
        key = self.keys.claim(client_id)
        created = await self._call(
            "set_if_absent", self.store.set_if_absent(key, CLAIM_MARKER, self.window_seconds)
        )
        if created:
            return Claimed(window_seconds=self.window_seconds)
        ttl = await self._call("time_to_live", self.store.time_to_live(key))
        return Rejected(retry_after_seconds=self.retry_after(ttl))

    def retry_after(self, ttl: Optional[int]) -> int:
        # No expiry recorded, or the claim expired between the two calls.
        if ttl is None or ttl < 0:
            return self.window_seconds
        return int(ttl)
