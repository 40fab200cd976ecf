"""Randomized checks of the pool invariants.

Each test draws from a seeded random.Random so failures are reproducible.
"""

import random

import pytest

from cpamm.amm import quote_swap
from cpamm.engine import PoolEngine
from cpamm.errors import InvalidAmount, SlippageExceeded
from cpamm.ledger import InMemoryLedger
from cpamm.pools import SwapDirection
from tests.helpers import ALICE, ASSET_X, ASSET_Y, BOB, vault_balances

ROUNDS = 200
BANKROLL = 10**15


def make_pool(rng: random.Random, min_reserve: int = 10**3) -> tuple[PoolEngine, str]:
    """Pool with random reserves and fee; ALICE and BOB hold BANKROLL of both assets."""
    ledger = InMemoryLedger()
    for owner in (ALICE, BOB):
        ledger.credit(owner, ASSET_X, BANKROLL)
        ledger.credit(owner, ASSET_Y, BANKROLL)
    engine = PoolEngine(ledger=ledger)
    pool_id = engine.create_pool(
        rng.randrange(2**64), ASSET_X, ASSET_Y, rng.choice([0, 1, 5, 30, 100, 1_000])
    ).pool_id
    reserve_x = rng.randint(min_reserve, 10**12)
    reserve_y = rng.randint(min_reserve, 10**12)
    engine.deposit(pool_id, ALICE, 1, reserve_x, reserve_y)
    return engine, pool_id


def assert_vaults_match(engine: PoolEngine, pool_id: str) -> None:
    reserves = engine.pool_state(pool_id).reserves
    assert vault_balances(engine, pool_id) == (reserves.reserve_x, reserves.reserve_y)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_swaps_never_decrease_k(seed):
    rng = random.Random(seed)
    engine, pool_id = make_pool(rng)

    for _ in range(ROUNDS):
        before = engine.pool_state(pool_id).reserves
        direction = rng.choice([SwapDirection.X_TO_Y, SwapDirection.Y_TO_X])
        reserve_in, _ = before.oriented(direction)
        amount_in = rng.randint(1, min(reserve_in, 10**10))
        try:
            engine.swap(pool_id, BOB, direction, amount_in, 0)
        except InvalidAmount:
            # Dust input bought nothing
            assert engine.pool_state(pool_id).reserves == before
            continue
        after = engine.pool_state(pool_id).reserves
        assert after.k >= before.k
        assert after.lp_supply == before.lp_supply
        assert_vaults_match(engine, pool_id)


@pytest.mark.parametrize("seed", [4, 5, 6])
def test_deposit_withdraw_round_trip(seed):
    """Withdrawing freshly minted LP returns what was paid, minus at most 1 unit."""
    rng = random.Random(seed)
    engine, pool_id = make_pool(rng)

    for _ in range(ROUNDS):
        supply = engine.pool_state(pool_id).reserves.lp_supply
        lp_amount = rng.randint(1, supply)
        paid = engine.deposit(pool_id, BOB, lp_amount, BANKROLL, BANKROLL)
        got = engine.withdraw(pool_id, BOB, lp_amount, 0, 0)

        assert paid.amount_x - 1 <= got.amount_x <= paid.amount_x
        assert paid.amount_y - 1 <= got.amount_y <= paid.amount_y
        assert_vaults_match(engine, pool_id)


@pytest.mark.parametrize("seed", [7, 8])
def test_failed_swaps_leave_no_trace(seed):
    rng = random.Random(seed)
    engine, pool_id = make_pool(rng, min_reserve=10**8)
    fee_bps = engine.pool_state(pool_id).config.fee_bps

    for _ in range(ROUNDS // 4):
        before = engine.pool_state(pool_id).reserves
        amount_in = rng.randint(10**6, 10**9)
        quoted = quote_swap(before.reserve_x, before.reserve_y, amount_in, fee_bps)
        with pytest.raises(SlippageExceeded):
            engine.swap(pool_id, BOB, SwapDirection.X_TO_Y, amount_in, quoted + 1)
        assert engine.pool_state(pool_id).reserves == before
        assert_vaults_match(engine, pool_id)

        receipt = engine.swap(pool_id, BOB, SwapDirection.X_TO_Y, amount_in, quoted)
        assert receipt.amount_out == quoted
