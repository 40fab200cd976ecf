"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Asset ids, identities and common amounts
- factories: Pool config/state factories and engine seeding helpers
"""

from tests.helpers.constants import (
    ALICE,
    ASSET_X,
    ASSET_Y,
    AUTHORITY,
    BOB,
    FEE_BPS,
    FUNDING,
    RESERVE,
    SEED,
)
from tests.helpers.factories import (
    StallingLedger,
    fund,
    make_pool_config,
    make_pool_state,
    seed_pool,
    vault_balances,
)

__all__ = [
    # Constants
    "ASSET_X",
    "ASSET_Y",
    "ALICE",
    "BOB",
    "AUTHORITY",
    "SEED",
    "FEE_BPS",
    "FUNDING",
    "RESERVE",
    # Factories
    "make_pool_config",
    "make_pool_state",
    "fund",
    "seed_pool",
    "vault_balances",
    "StallingLedger",
]
