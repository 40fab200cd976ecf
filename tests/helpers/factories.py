"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_pool_state, seed_pool

    state = make_pool_state(reserve_x=1_000_000, reserve_y=2_000_000)
    pool_id = seed_pool(engine, ledger)
"""

import threading
from collections.abc import Sequence

from cpamm.engine import PoolEngine
from cpamm.ledger import InMemoryLedger, InsufficientBalance, LedgerInstruction, Mint
from cpamm.pools import PoolConfig, PoolReserves, PoolState, derive_lp_share_id, derive_pool_id
from tests.helpers.constants import (
    ALICE,
    ASSET_X,
    ASSET_Y,
    AUTHORITY,
    FEE_BPS,
    FUNDING,
    RESERVE,
    SEED,
)


def make_pool_config(
    seed: int = SEED,
    asset_x: str = ASSET_X,
    asset_y: str = ASSET_Y,
    fee_bps: int = FEE_BPS,
    authority: str | None = AUTHORITY,
    locked: bool = False,
) -> PoolConfig:
    """Create a pool config with derived identities."""
    pool_id = derive_pool_id(seed, asset_x, asset_y)
    return PoolConfig(
        pool_id=pool_id,
        seed=seed,
        asset_x=asset_x,
        asset_y=asset_y,
        fee_bps=fee_bps,
        lp_share_id=derive_lp_share_id(pool_id),
        authority=authority,
        locked=locked,
    )


def make_pool_state(
    reserve_x: int = 0,
    reserve_y: int = 0,
    lp_supply: int | None = None,
    **config_kwargs: object,
) -> PoolState:
    """Create a pool state with the given reserves.

    Args:
        reserve_x: Reserve of asset X
        reserve_y: Reserve of asset Y
        lp_supply: LP supply (default: reserve_x when reserves are set, else 0)
        **config_kwargs: Forwarded to make_pool_config

    Returns:
        PoolState ready for testing
    """
    if lp_supply is None:
        lp_supply = reserve_x
    config = make_pool_config(**config_kwargs)  # type: ignore[arg-type]
    return PoolState(config, PoolReserves(reserve_x, reserve_y, lp_supply))


def fund(ledger: InMemoryLedger, owner: str, amount: int = FUNDING) -> None:
    """Credit owner with amount of both pool assets."""
    ledger.credit(owner, ASSET_X, amount)
    ledger.credit(owner, ASSET_Y, amount)


def seed_pool(
    engine: PoolEngine,
    ledger: InMemoryLedger,
    reserve_x: int = RESERVE,
    reserve_y: int = RESERVE,
    provider: str = ALICE,
    seed: int = SEED,
    fee_bps: int = FEE_BPS,
    authority: str | None = AUTHORITY,
) -> str:
    """Create a pool and make its first deposit.

    The provider is funded with FUNDING of each asset before depositing.

    Returns:
        The pool id
    """
    fund(ledger, provider)
    pool_id = engine.create_pool(seed, ASSET_X, ASSET_Y, fee_bps, authority=authority).pool_id
    engine.deposit(pool_id, provider, 1, reserve_x, reserve_y)
    return pool_id


def vault_balances(engine: PoolEngine, pool_id: str) -> tuple[int, int]:
    """Ledger balances of the pool's two vaults."""
    state = engine.pool_state(pool_id)
    return (
        engine.ledger.balance_of(pool_id, state.config.asset_x),
        engine.ledger.balance_of(pool_id, state.config.asset_y),
    )


class StallingLedger(InMemoryLedger):
    """In-memory ledger that can hold mint batches open and then reject them.

    While ``stall_mints`` is set, a batch containing a Mint signals
    ``entered``, waits for ``release`` and fails with InsufficientBalance,
    leaving the ledger unchanged. Other batches execute normally.
    """

    def __init__(self) -> None:
        super().__init__()
        self.stall_mints = False
        self.entered = threading.Event()
        self.release = threading.Event()

    def execute(self, instructions: Sequence[LedgerInstruction]) -> None:
        if self.stall_mints and any(isinstance(i, Mint) for i in instructions):
            self.entered.set()
            self.release.wait(timeout=5)
            raise InsufficientBalance("Mint batch rejected")
        super().execute(instructions)
