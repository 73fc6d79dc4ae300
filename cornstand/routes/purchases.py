from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ..deps import get_purchase_service
from ..models.schemas import (
    ClientStatusResponse,
    MessageResponse,
    PurchaseRequest,
    PurchaseResponse,
    RejectionResponse,
)
from ..services.purchases import PurchaseService

router = APIRouter(tags=["purchases"])

PURCHASED_MESSAGE = "Corn purchased successfully 🌽"
REJECTED_MESSAGE = "Too Many Requests 🌽"


@router.post(
    "/buy-corn",
    response_model=PurchaseResponse,
    responses={400: {"model": MessageResponse}, 429: {"model": RejectionResponse}},
)
async def buy_corn(
    payload: Optional[PurchaseRequest] = Body(default=None),
    service: PurchaseService = Depends(get_purchase_service),
):
    # InvalidClientId and StoreUnavailable are mapped by the app's exception handlers.
    outcome = await service.purchase(payload.client_id if payload is not None else None)
    if not outcome.accepted:
        body = RejectionResponse(message=REJECTED_MESSAGE, retry_after_seconds=outcome.retry_after_seconds)
        return JSONResponse(
            status_code=429,
            content=body.model_dump(by_alias=True),
            headers={"Retry-After": str(outcome.retry_after_seconds)},
        )
    return PurchaseResponse(
        message=PURCHASED_MESSAGE,
        total_purchases=outcome.total_purchases or 0,
        retry_after_seconds=outcome.retry_after_seconds,
    )


@router.get("/status/{client_id}", response_model=ClientStatusResponse, responses={400: {"model": MessageResponse}})
async def client_status(client_id: str, service: PurchaseService = Depends(get_purchase_service)):
    status = await service.status(client_id)
    return ClientStatusResponse(
        client_id=client_id,
        can_purchase=status.can_purchase_now,
        retry_after_seconds=status.retry_after_seconds,
        total_purchases=status.total_purchases,
    )
