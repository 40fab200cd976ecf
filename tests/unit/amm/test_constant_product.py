"""Tests for the constant product quote functions."""

from decimal import Decimal

import pytest

from cpamm.amm import (
    quote_deposit_initial,
    quote_deposit_proportional,
    quote_swap,
    quote_withdraw,
    spot_price,
)
from cpamm.errors import InsufficientLiquidity, InvalidAmount
from cpamm.safe_int import Overflow


class TestQuoteSwap:
    """Tests for exact-input swap quotes."""

    def test_reference_quote(self):
        """100M/100M reserves, 1% fee, 10M in.

        effective_in = 9_900_000
        amount_out = 100_000_000 * 9_900_000 / 109_900_000 = 9_008_189.26 -> 9_008_189
        """
        assert quote_swap(100_000_000, 100_000_000, 10_000_000, 100) == 9_008_189

    def test_zero_fee(self):
        """100M * 10M / 110M = 9_090_909.09 -> 9_090_909."""
        assert quote_swap(100_000_000, 100_000_000, 10_000_000, 0) == 9_090_909

    def test_fee_reduces_output(self):
        no_fee = quote_swap(1_000_000, 2_000_000, 10_000, 0)
        with_fee = quote_swap(1_000_000, 2_000_000, 10_000, 30)
        assert with_fee < no_fee

    def test_output_below_reserve(self):
        """Even a huge input cannot drain the output reserve."""
        out = quote_swap(1_000, 1_000, 10**15, 0)
        assert out < 1_000

    def test_invariant_does_not_decrease(self):
        reserve_in, reserve_out, amount_in = 5_000_000, 7_000_000, 123_457
        out = quote_swap(reserve_in, reserve_out, amount_in, 25)
        assert (reserve_in + amount_in) * (reserve_out - out) >= reserve_in * reserve_out

    def test_zero_amount_rejected(self):
        with pytest.raises(InvalidAmount):
            quote_swap(100_000_000, 100_000_000, 0, 100)

    def test_dust_rounding_to_zero_rejected(self):
        """1 unit in with a 1% fee has no effective input."""
        with pytest.raises(InvalidAmount):
            quote_swap(100_000_000, 100_000_000, 1, 100)

    def test_small_output_reserve_rounding_to_zero_rejected(self):
        with pytest.raises(InvalidAmount):
            quote_swap(1_000_000, 1, 1, 0)

    @pytest.mark.parametrize("reserve_in,reserve_out", [(0, 1_000), (1_000, 0), (0, 0)])
    def test_empty_reserve_rejected(self, reserve_in, reserve_out):
        with pytest.raises(InsufficientLiquidity):
            quote_swap(reserve_in, reserve_out, 100, 0)


class TestQuoteDepositInitial:
    def test_geometric_mean(self):
        assert quote_deposit_initial(100_000_000, 100_000_000) == 100_000_000

    def test_rounds_down(self):
        """sqrt(2_000 * 3_000) = 2449.48 -> 2449."""
        assert quote_deposit_initial(2_000, 3_000) == 2_449

    def test_at_minimum_liquidity(self):
        assert quote_deposit_initial(1_000, 1_000) == 1_000

    def test_below_minimum_liquidity_rejected(self):
        """sqrt(999 * 1_000) = 999.5 -> 999 < 1_000."""
        with pytest.raises(InvalidAmount):
            quote_deposit_initial(999, 1_000)

    def test_custom_minimum(self):
        assert quote_deposit_initial(1, 1, minimum_liquidity=1) == 1

    @pytest.mark.parametrize("amount_x,amount_y", [(0, 1_000_000), (1_000_000, 0)])
    def test_one_sided_rejected(self, amount_x, amount_y):
        with pytest.raises(InvalidAmount):
            quote_deposit_initial(amount_x, amount_y)


class TestQuoteDepositProportional:
    def test_exact_ratio(self):
        assert quote_deposit_proportional(
            100_000_000, 100_000_000, 100_000_000, 50_000_000
        ) == (50_000_000, 50_000_000)

    def test_rounds_up(self):
        """1 LP of a 100-supply pool over (150, 100) costs ceil(1.5), ceil(1.0)."""
        assert quote_deposit_proportional(150, 100, 100, 1) == (2, 1)

    def test_zero_lp_rejected(self):
        with pytest.raises(InvalidAmount):
            quote_deposit_proportional(100, 100, 100, 0)

    def test_empty_pool_rejected(self):
        with pytest.raises(InsufficientLiquidity):
            quote_deposit_proportional(0, 0, 0, 10)

    def test_overflow_rejected(self):
        with pytest.raises(Overflow):
            quote_deposit_proportional(2**63, 2**63, 1, 4)


class TestQuoteWithdraw:
    def test_half(self):
        assert quote_withdraw(100_000_000, 100_000_000, 100_000_000, 50_000_000) == (
            50_000_000,
            50_000_000,
        )

    def test_rounds_down(self):
        assert quote_withdraw(150, 100, 100, 1) == (1, 1)

    def test_full_burn_returns_everything(self):
        assert quote_withdraw(123, 456, 789, 789) == (123, 456)

    def test_zero_lp_rejected(self):
        with pytest.raises(InvalidAmount):
            quote_withdraw(100, 100, 100, 0)

    def test_over_burn_rejected(self):
        with pytest.raises(InvalidAmount):
            quote_withdraw(100, 100, 100, 101)


class TestDepositWithdrawRoundTrip:
    def test_round_trip_never_profits(self):
        """Depositing for n LP then burning n LP returns at most what was paid."""
        reserve_x, reserve_y, supply = 1_000_003, 2_999_989, 1_732_051
        lp = 777
        paid_x, paid_y = quote_deposit_proportional(reserve_x, reserve_y, supply, lp)
        got_x, got_y = quote_withdraw(reserve_x + paid_x, reserve_y + paid_y, supply + lp, lp)
        assert got_x <= paid_x
        assert got_y <= paid_y


class TestSpotPrice:
    def test_price_y_per_x(self):
        assert spot_price(100, 250) == Decimal("2.5")

    def test_empty_pool(self):
        assert spot_price(0, 0) is None
