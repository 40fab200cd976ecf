"""API endpoints for the pool engine."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from cpamm.engine import PoolEngine, get_default_engine
from cpamm.models.operations import PoolView, parse_operation

logger = structlog.get_logger()

router = APIRouter()


def get_engine() -> PoolEngine:
    """Dependency provider for the engine instance.

    Override this in tests to inject an engine with a prepared ledger:
        app.dependency_overrides[get_engine] = lambda: engine

    Returns:
        The engine instance operations are applied to.
    """
    return get_default_engine()


@router.get("/pools")
def list_pools(engine: PoolEngine = Depends(get_engine)) -> list[PoolView]:
    """List every registered pool."""
    return engine.list_pools()


@router.get("/pools/{pool_id}")
def get_pool(pool_id: str, engine: PoolEngine = Depends(get_engine)) -> PoolView:
    """Read one pool. Locked pools can still be read."""
    return engine.get_pool(pool_id)


@router.post("/operations")
def submit_operation(
    payload: dict[str, Any] = Body(...),
    engine: PoolEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Apply one pool operation.

    The body is a tagged operation (``kind`` is one of create_pool, deposit,
    withdraw, swap or set_locked) and the response is the matching receipt.

    Error Handling:
        - Malformed operation: 422 Validation Error (Pydantic)
        - Engine errors: mapped to JSON errors by the handlers in cpamm.api.main
    """
    try:
        operation = parse_operation(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False)) from e

    logger.info("received_operation", kind=operation.kind)
    receipt = engine.dispatch(operation)
    return receipt.model_dump(by_alias=True)
