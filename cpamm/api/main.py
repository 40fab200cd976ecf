"""FastAPI application for the pool engine.

Note: The server holds a single in-memory engine per process. Operation
handlers are sync endpoints that FastAPI runs on its threadpool; PoolEngine
holds a per-pool lock from the reserve read through the ledger batch, so
concurrent requests on one pool queue behind each other. State is not shared
between worker processes, so run a single worker.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.errors import (
    AlreadyInitialized,
    AmmError,
    IdenticalAssets,
    InsufficientLiquidity,
    InvalidAmount,
    InvalidFee,
    InvariantViolation,
    NoAuthority,
    PoolLocked,
    PoolNotFound,
    SlippageExceeded,
    Unauthorized,
)
from cpamm.ledger import LedgerError
from cpamm.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("CPAMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("CPAMM_PORT", "8000"))
DEBUG = os.environ.get("CPAMM_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("CPAMM_LOG_LEVEL", "INFO")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# HTTP status per engine error kind
ERROR_STATUS: dict[type[AmmError], int] = {
    InvalidAmount: 400,
    InvalidFee: 400,
    IdenticalAssets: 400,
    Unauthorized: 403,
    NoAuthority: 403,
    PoolNotFound: 404,
    SlippageExceeded: 409,
    PoolLocked: 409,
    AlreadyInitialized: 409,
    InsufficientLiquidity: 409,
    InvariantViolation: 500,
}


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure structlog for console output at the given level name."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


app = FastAPI(
    title="cpamm",
    description="Constant-product AMM invariant engine",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AmmError)
async def amm_error_handler(request: Request, exc: AmmError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.info("operation_rejected", error=exc.code, detail=exc.message, status=status_code)
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": exc.message})


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    logger.info("ledger_rejected", error=type(exc).__name__, detail=str(exc))
    return JSONResponse(
        status_code=409, content={"error": type(exc).__name__, "detail": str(exc)}
    )


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    logger.error("arithmetic_error", error=type(exc).__name__, detail=str(exc))
    return JSONResponse(
        status_code=500, content={"error": type(exc).__name__, "detail": str(exc)}
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool engine API server.

    Configuration via environment variables:
    - CPAMM_HOST: Host to bind to (default: 0.0.0.0)
    - CPAMM_PORT: Port to bind to (default: 8000)
    - CPAMM_DEBUG: Enable debug/reload mode (default: false)
    - CPAMM_LOG_LEVEL: Log level name (default: INFO)
    """
    configure_logging(LOG_LEVEL)
    uvicorn.run(
        "cpamm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
