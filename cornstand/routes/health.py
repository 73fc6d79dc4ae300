from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_store
from ..errors import StoreUnavailable
from ..logging_config import logger
from ..models.schemas import HealthResponse
from ..store import KeyValueStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health(store: KeyValueStore = Depends(get_store)):
    try:
        result = await store.ping()
    except StoreUnavailable as exc:
        logger.error("health.failed", operation=exc.operation, error=str(exc))
        body = HealthResponse(status="error", message="Redis unavailable")
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True, exclude_none=True))
    return HealthResponse(status="ok", redis=result)
