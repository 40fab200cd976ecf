"""Constant product pool math.

Pure functions computing swap output, proportional deposit amounts and
proportional withdrawal amounts from a pool's current reserves and LP supply.
Nothing here mutates pool state.

Formula: amount_out = reserve_out * effective_in / (reserve_in + effective_in)

where effective_in = amount_in * (10_000 - fee_bps) / 10_000, so the fee is
charged on the input and stays in the pool, growing reserve_x * reserve_y.

Rounding always favors the pool: amounts paid out (swap output, withdrawal)
round down, amounts collected for minted shares (deposit) round up.
"""

from __future__ import annotations

from decimal import Decimal

from cpamm.constants import MINIMUM_LIQUIDITY
from cpamm.errors import InsufficientLiquidity, InvalidAmount
from cpamm.math import (
    apply_fee_bps,
    checked_add,
    checked_mul_div,
    checked_mul_div_ceil,
    integer_sqrt,
)
from cpamm.safe_int import S


def quote_swap(reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> int:
    """Calculate the output of an exact-input swap.

    Args:
        reserve_in: Reserve of the asset being sold
        reserve_out: Reserve of the asset being bought
        amount_in: Amount sold by the caller (fee included)
        fee_bps: Pool fee in basis points

    Returns:
        Output amount, rounded down

    Raises:
        InvalidAmount: If amount_in is zero or too small to buy anything
        InsufficientLiquidity: If either reserve is empty
    """
    if amount_in == 0:
        raise InvalidAmount("Swap amount must be positive")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity(
            f"Pool has no liquidity (reserve_in={reserve_in}, reserve_out={reserve_out})"
        )

    effective_in = apply_fee_bps(amount_in, fee_bps)
    amount_out = checked_mul_div(reserve_out, effective_in, checked_add(reserve_in, effective_in))

    if amount_out == 0:
        raise InvalidAmount(f"Swap of {amount_in} rounds to zero output")
    return amount_out


def quote_deposit_initial(
    amount_x: int,
    amount_y: int,
    minimum_liquidity: int = MINIMUM_LIQUIDITY,
) -> int:
    """Calculate LP shares minted by the first deposit into an empty pool.

    lp_minted = floor(sqrt(amount_x * amount_y))

    Args:
        amount_x: Amount of asset X deposited
        amount_y: Amount of asset Y deposited
        minimum_liquidity: Smallest acceptable mint

    Returns:
        LP shares to mint

    Raises:
        InvalidAmount: If either amount is zero or the mint is below
            minimum_liquidity
    """
    if amount_x == 0 or amount_y == 0:
        raise InvalidAmount(f"Initial deposit needs both assets: ({amount_x}, {amount_y})")

    lp_minted = integer_sqrt((S(amount_x) * S(amount_y)).to_u128())
    if lp_minted < minimum_liquidity:
        raise InvalidAmount(
            f"Initial deposit mints {lp_minted} LP, below minimum {minimum_liquidity}"
        )
    return lp_minted


def quote_deposit_proportional(
    reserve_x: int,
    reserve_y: int,
    lp_supply: int,
    desired_lp: int,
) -> tuple[int, int]:
    """Calculate the asset amounts required to mint desired_lp shares.

    Amounts preserve the current reserve ratio and round up, so the pool
    never collects less than the minted shares are worth.

    Returns:
        Tuple of (amount_x, amount_y)

    Raises:
        InvalidAmount: If desired_lp is zero
        InsufficientLiquidity: If the pool is empty (use quote_deposit_initial)
    """
    if desired_lp == 0:
        raise InvalidAmount("Deposit LP amount must be positive")
    if lp_supply == 0:
        raise InsufficientLiquidity("Pool is empty; proportional deposit is undefined")

    amount_x = checked_mul_div_ceil(desired_lp, reserve_x, lp_supply)
    amount_y = checked_mul_div_ceil(desired_lp, reserve_y, lp_supply)
    return amount_x, amount_y


def quote_withdraw(
    reserve_x: int,
    reserve_y: int,
    lp_supply: int,
    lp_burned: int,
) -> tuple[int, int]:
    """Calculate the asset amounts paid out for burning lp_burned shares.

    Amounts round down, so the pool never pays more than the burned share.

    Returns:
        Tuple of (amount_x, amount_y)

    Raises:
        InvalidAmount: If lp_burned is zero or exceeds lp_supply
    """
    if lp_burned == 0:
        raise InvalidAmount("Withdraw LP amount must be positive")
    if lp_burned > lp_supply:
        raise InvalidAmount(f"Cannot burn {lp_burned} LP out of a supply of {lp_supply}")

    amount_x = checked_mul_div(lp_burned, reserve_x, lp_supply)
    amount_y = checked_mul_div(lp_burned, reserve_y, lp_supply)
    return amount_x, amount_y


def spot_price(reserve_x: int, reserve_y: int) -> Decimal | None:
    """Marginal price of X in units of Y, or None for an empty pool."""
    if reserve_x == 0 or reserve_y == 0:
        return None
    return Decimal(reserve_y) / Decimal(reserve_x)


__all__ = [
    "quote_swap",
    "quote_deposit_initial",
    "quote_deposit_proportional",
    "quote_withdraw",
    "spot_price",
]
