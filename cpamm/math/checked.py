"""Checked integer primitives for pool math.

Every function takes and returns plain ints. Inputs are wrapped in SafeInt,
so negative values, division by zero and results wider than u64 raise a
SafeIntError (an ArithmeticError) instead of wrapping or truncating.

Products of two u64 values are formed at u128 width, which is wide enough
for the reserve * reserve terms of the swap formula.
"""

from __future__ import annotations

import math

from cpamm.constants import BPS_DENOMINATOR, MAX_FEE_BPS
from cpamm.safe_int import Overflow, S, Underflow

__all__ = [
    "checked_add",
    "checked_sub",
    "checked_mul",
    "checked_div",
    "checked_mul_div",
    "checked_mul_div_ceil",
    "integer_sqrt",
    "apply_fee_bps",
]


def checked_add(a: int, b: int) -> int:
    """Return a + b, failing if the sum does not fit u64."""
    return (S(a) + S(b)).to_u64()


def checked_sub(a: int, b: int) -> int:
    """Return a - b, failing on underflow."""
    return (S(a) - S(b)).to_u64()


def checked_mul(a: int, b: int) -> int:
    """Return a * b, failing if the product does not fit u64."""
    return (S(a) * S(b)).to_u64()


def checked_div(a: int, b: int) -> int:
    """Return floor(a / b), failing on b == 0."""
    return (S(a) // S(b)).to_u64()


def checked_mul_div(a: int, b: int, c: int) -> int:
    """Compute floor(a * b / c) with a u128 intermediate.

    Args:
        a: First factor
        b: Second factor
        c: Divisor

    Returns:
        The floored quotient

    Raises:
        DivisionByZero: If c == 0
        Overflow: If a * b exceeds u128 or the quotient exceeds u64
    """
    product = (S(a) * S(b)).checked_u128()
    return (product // S(c)).to_u64()


def checked_mul_div_ceil(a: int, b: int, c: int) -> int:
    """Compute ceil(a * b / c) with a u128 intermediate.

    Same failure modes as checked_mul_div.
    """
    product = (S(a) * S(b)).checked_u128()
    return product.ceiling_div(S(c)).to_u64()


def integer_sqrt(n: int) -> int:
    """Floor of the exact square root of a non-negative integer.

    Raises:
        Underflow: If n is negative
        Overflow: If n exceeds u128 (the root would not fit u64)
    """
    value = S(n).to_u128()
    return math.isqrt(value)


def apply_fee_bps(amount: int, fee_bps: int) -> int:
    """Return the part of amount left after a fee in basis points.

    Computes floor(amount * (10_000 - fee_bps) / 10_000).

    Raises:
        Overflow: If fee_bps is outside [0, 10_000)
    """
    if fee_bps < 0:
        raise Underflow(f"Negative fee: {fee_bps}")
    if fee_bps > MAX_FEE_BPS:
        raise Overflow(f"Fee {fee_bps} bps is not below {BPS_DENOMINATOR}")
    return checked_mul_div(amount, BPS_DENOMINATOR - fee_bps, BPS_DENOMINATOR)
