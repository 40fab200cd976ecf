"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from cpamm.api.endpoints import get_engine
from cpamm.api.main import app
from cpamm.engine import PoolEngine
from cpamm.ledger import InMemoryLedger
from tests.helpers import seed_pool


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def engine(ledger: InMemoryLedger) -> PoolEngine:
    """Engine over the ledger fixture with default configuration."""
    return PoolEngine(ledger=ledger)


@pytest.fixture
def pool_id(engine: PoolEngine, ledger: InMemoryLedger) -> str:
    """Pool holding 100M of each asset, fee 100 bps, owned by AUTHORITY.

    ALICE provided the liquidity and holds all 100M LP shares.
    """
    return seed_pool(engine, ledger)


@pytest.fixture
def client(engine: PoolEngine) -> Iterator[TestClient]:
    """Test client whose requests go to the engine fixture."""
    app.dependency_overrides[get_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()
