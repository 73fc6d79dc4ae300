from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import InvalidClientId, StoreUnavailable
from .logging_config import log_store_error, logger, setup_logging
from .routes import health, purchases
from .services.common import KeySpace
from .services.gate import AdmissionGate
from .services.ledger import PurchaseLedger
from .services.purchases import PurchaseService
from .store import KeyValueStore, create_store

ROOT_MESSAGE = "Bob's Corn rate limiter is steady as she goes"


def create_app(settings: Optional[Settings] = None, store: Optional[KeyValueStore] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    if store is None:
        store = create_store(settings)

    keys = KeySpace(settings.key_prefix)
    gate = AdmissionGate(store, settings.purchase_window_seconds, keys=keys, on_store_error=log_store_error)
    ledger = PurchaseLedger(store, settings.purchase_retention_seconds, keys=keys, on_store_error=log_store_error)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "app.start",
            store=type(store).__name__,
            window_seconds=gate.window_seconds,
            retention_seconds=ledger.retention_seconds,
        )
        try:
            yield
        finally:
            await store.close()

    app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.purchases = PurchaseService(gate, ledger)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidClientId)
    async def invalid_client_handler(request: Request, exc: InvalidClientId) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("request.invalid", path=str(request.url.path), errors=len(exc.errors()))
        return JSONResponse(status_code=400, content={"message": "Invalid request body"})

    @app.exception_handler(StoreUnavailable)
    async def store_error_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
        logger.error("request.store_unavailable", path=str(request.url.path), operation=exc.operation)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    app.include_router(health.router)
    app.include_router(purchases.router)

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        return JSONResponse({"message": ROOT_MESSAGE})

    return app
