"""Constant product (x * y = k) pool math."""

from cpamm.amm.constant_product import (
    quote_deposit_initial,
    quote_deposit_proportional,
    quote_swap,
    quote_withdraw,
    spot_price,
)

__all__ = [
    "quote_swap",
    "quote_deposit_initial",
    "quote_deposit_proportional",
    "quote_withdraw",
    "spot_price",
]
