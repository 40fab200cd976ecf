"""Tests for the scenario runner."""

import json

from cpamm.cli import main, run_scenario
from cpamm.engine import PoolEngine
from cpamm.ledger import InMemoryLedger

STEP_NAMES = [
    "create_pool",
    "initial_deposit",
    "ratio_deposit",
    "swap_x_for_y",
    "swap_y_for_x",
    "withdraw",
    "swap_slippage",
    "deposit_zero",
]


class TestRunScenario:
    def test_steps(self):
        ledger = InMemoryLedger()
        steps = run_scenario(PoolEngine(ledger=ledger), ledger)

        assert [step.name for step in steps] == STEP_NAMES
        assert [step.ok for step in steps] == [True] * 6 + [False, False]
        assert steps[-2].detail == "SlippageExceeded"
        assert steps[-1].detail == "InvalidAmount"

    def test_reserves_follow_lifecycle(self):
        ledger = InMemoryLedger()
        pools = [step.pool for step in run_scenario(PoolEngine(ledger=ledger), ledger)]

        assert pools[1].lp_supply == 100_000_000
        assert (pools[2].reserve_x, pools[2].reserve_y, pools[2].lp_supply) == (
            150_000_000,
            150_000_000,
            150_000_000,
        )
        # Swaps grow the constant product
        k = [pool.reserve_x * pool.reserve_y for pool in pools[2:5]]
        assert k[0] <= k[1] <= k[2]
        assert pools[5].lp_supply == 100_000_000
        # Rejected steps leave the pool untouched
        assert pools[6] == pools[5]
        assert pools[7] == pools[5]

    def test_vaults_match_reserves(self):
        ledger = InMemoryLedger()
        steps = run_scenario(PoolEngine(ledger=ledger), ledger)
        final = steps[-1].pool
        assert ledger.balance_of(final.pool_id, final.asset_x) == final.reserve_x
        assert ledger.balance_of(final.pool_id, final.asset_y) == final.reserve_y


class TestMain:
    def test_table_output(self, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "initial_deposit" in out
        assert "rejected" in out

    def test_json_output(self, capsys):
        assert main(["--json", "--seed", "7"]) == 0
        records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [record["step"] for record in records] == STEP_NAMES
        assert records[0]["pool"]["seed"] == 7

    def test_insufficient_funding_fails(self, capsys):
        assert main(["--funding", "1000"]) == 1
        assert "Error" in capsys.readouterr().out
