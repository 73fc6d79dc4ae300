from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..logging_config import logger
from .common import require_client_id
from .gate import AdmissionGate, Rejected
from .ledger import ClientStatus, PurchaseLedger

MISSING_CLIENT_MESSAGE = "clientId is required to buy corn"


@dataclass(frozen=True)
class PurchaseOutcome:
    accepted: bool
    retry_after_seconds: int
    total_purchases: Optional[int] = None


class PurchaseService:
    def __init__(self, gate: AdmissionGate, ledger: PurchaseLedger) -> None:
        self.gate = gate
        self.ledger = ledger

    async def purchase(self, client_id: Optional[str]) -> PurchaseOutcome:
        client_id = require_client_id(client_id, MISSING_CLIENT_MESSAGE)
        result = await self.gate.try_claim(client_id)
        if isinstance(result, Rejected):
            logger.info("purchase.rejected", client_id=client_id, retry_after_seconds=result.retry_after_seconds)
            return PurchaseOutcome(accepted=False, retry_after_seconds=result.retry_after_seconds)
        # A failure here leaves the window claimed without a count; it surfaces as StoreUnavailable.
        total = await self.ledger.record_purchase(client_id)
        logger.info("purchase.accepted", client_id=client_id, total_purchases=total)
        return PurchaseOutcome(accepted=True, retry_after_seconds=result.window_seconds, total_purchases=total)

    async def status(self, client_id: Optional[str]) -> ClientStatus:
        return await self.ledger.read_status(require_client_id(client_id))
