"""Mathematical utilities for the pool engine.

This package provides the checked integer primitives used by the
invariant and state layers:
- checked add/sub/mul/div on u64 amounts
- mul-div with a u128 intermediate (floor and ceiling)
- integer square root for first-deposit share minting
"""

from cpamm.math.checked import (
    apply_fee_bps,
    checked_add,
    checked_div,
    checked_mul,
    checked_mul_div,
    checked_mul_div_ceil,
    checked_sub,
    integer_sqrt,
)

__all__ = [
    "apply_fee_bps",
    "checked_add",
    "checked_div",
    "checked_mul",
    "checked_mul_div",
    "checked_mul_div_ceil",
    "checked_sub",
    "integer_sqrt",
]
