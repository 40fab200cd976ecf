"""Scenario runner for the pool engine.

Replays a full pool lifecycle against an in-memory ledger and prints the
pool after every step:

    cpamm-sim --seed 1 --fee-bps 100

Steps: create pool, initial deposit, ratio deposit, swap X for Y, swap Y for
X, withdraw, a swap that must fail on slippage and a deposit that must fail
on a zero amount.
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from cpamm.api.main import configure_logging
from cpamm.engine import PoolEngine
from cpamm.errors import AmmError, InvalidAmount, SlippageExceeded
from cpamm.ledger import InMemoryLedger, LedgerError
from cpamm.models.operations import PoolView
from cpamm.pools import SwapDirection

logger = structlog.get_logger()

ASSET_X = "mint-x"
ASSET_Y = "mint-y"
USER = "user"
AUTHORITY = "authority"

# 1000 tokens with 6 decimals
DEFAULT_FUNDING = 1_000_000_000


@dataclass
class ScenarioStep:
    """Outcome of one scenario step."""

    name: str
    ok: bool
    detail: str
    pool: PoolView


def run_scenario(
    engine: PoolEngine,
    ledger: InMemoryLedger,
    seed: int = 1,
    fee_bps: int = 100,
    funding: int = DEFAULT_FUNDING,
) -> list[ScenarioStep]:
    """Run the lifecycle scenario and collect the pool view after each step.

    The two failing steps are expected failures: they are recorded with
    ``ok=False`` only when the engine rejects them with the expected error.

    Raises:
        AmmError: If a step that must succeed is rejected
        RuntimeError: If a step that must fail succeeds
    """
    ledger.credit(USER, ASSET_X, funding)
    ledger.credit(USER, ASSET_Y, funding)

    created = engine.create_pool(seed, ASSET_X, ASSET_Y, fee_bps, authority=AUTHORITY)
    pool_id = created.pool_id
    steps = [ScenarioStep("create_pool", True, f"pool {pool_id}", engine.get_pool(pool_id))]

    def record(name: str, detail: str) -> None:
        steps.append(ScenarioStep(name, True, detail, engine.get_pool(pool_id)))

    deposit = engine.deposit(pool_id, USER, 100_000_000, 100_000_000, 100_000_000)
    record("initial_deposit", f"minted {deposit.lp_minted} LP")

    deposit = engine.deposit(pool_id, USER, 50_000_000, 100_000_000, 100_000_000)
    record("ratio_deposit", f"paid ({deposit.amount_x}, {deposit.amount_y})")

    swap = engine.swap(pool_id, USER, SwapDirection.X_TO_Y, 10_000_000, 1)
    record("swap_x_for_y", f"received {swap.amount_out} Y")

    swap = engine.swap(pool_id, USER, SwapDirection.Y_TO_X, 10_000_000, 1)
    record("swap_y_for_x", f"received {swap.amount_out} X")

    withdraw = engine.withdraw(pool_id, USER, 50_000_000, 1, 1)
    record("withdraw", f"received ({withdraw.amount_x}, {withdraw.amount_y})")

    expected_failures: list[tuple[str, type[AmmError], Callable[[], object]]] = [
        (
            "swap_slippage",
            SlippageExceeded,
            lambda: engine.swap(pool_id, USER, SwapDirection.X_TO_Y, 10_000_000, 100_000_000_000),
        ),
        (
            "deposit_zero",
            InvalidAmount,
            lambda: engine.deposit(pool_id, USER, 0, 100_000_000, 100_000_000),
        ),
    ]
    for name, error_type, operation in expected_failures:
        try:
            operation()
        except error_type as e:
            steps.append(ScenarioStep(name, False, e.code, engine.get_pool(pool_id)))
        else:
            raise RuntimeError(f"Step {name} should have failed with {error_type.code}")

    return steps


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the scenario runner."""
    parser = argparse.ArgumentParser(
        description="Replay a constant-product pool lifecycle against an in-memory ledger",
    )
    parser.add_argument("--seed", type=int, default=1, help="Pool seed (default: 1)")
    parser.add_argument(
        "--fee-bps",
        type=int,
        default=100,
        help="Swap fee in basis points (default: 100)",
    )
    parser.add_argument(
        "--funding",
        type=int,
        default=DEFAULT_FUNDING,
        help=f"Initial balance of each asset for the user (default: {DEFAULT_FUNDING})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print steps as JSON lines instead of a table",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else "WARNING")

    ledger = InMemoryLedger()
    engine = PoolEngine(ledger=ledger)
    try:
        steps = run_scenario(engine, ledger, args.seed, args.fee_bps, args.funding)
    except (AmmError, LedgerError, RuntimeError) as e:
        logger.error("scenario_failed", error=str(e))
        print(f"Error: {e}")
        return 1

    for step in steps:
        if args.json:
            record = {"step": step.name, "ok": step.ok, "detail": step.detail}
            record["pool"] = step.pool.model_dump(mode="json", by_alias=True)
            print(json.dumps(record))
        else:
            pool = step.pool
            status = "ok" if step.ok else "rejected"
            print(
                f"{step.name:<16} {status:<9} x={pool.reserve_x:<11} y={pool.reserve_y:<11} "
                f"lp={pool.lp_supply:<11} {step.detail}"
            )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
