from __future__ import annotations

import logging

import structlog

SHARED_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.EventRenamer("message"),
    structlog.processors.dict_tracebacks,
)


def resolve_level(level: str) -> int:
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str = "INFO") -> None:
    """Route structlog events as JSON lines through stdlib logging.

    Safe to call more than once; the latest level wins.
    """
    structlog.configure(
        processors=[*SHARED_PROCESSORS, structlog.processors.JSONRenderer(ensure_ascii=False)],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    # basicConfig only installs the handler once; the level is applied every time.
    logging.basicConfig(format="%(message)s")
    logging.getLogger().setLevel(resolve_level(level))


def log_store_error(operation: str, exc: Exception) -> None:
    """Default failure hook handed to the gate and ledger."""
    logger.error("store.error", operation=operation, error=str(exc), cause=repr(exc.__cause__))


logger = structlog.get_logger("cornstand")
