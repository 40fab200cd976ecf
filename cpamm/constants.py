"""Protocol constants for the constant-product pool engine.

Centralizes integer widths and fee parameters shared by the math,
invariant and state layers.
"""

# Integer widths of the on-ledger amount fields
U16_MAX = 2**16 - 1
U64_MAX = 2**64 - 1
# Width of intermediate products (reserve * reserve fits here)
U128_MAX = 2**128 - 1

# Fees are expressed in basis points of the swap input (100 = 1%)
BPS_DENOMINATOR = 10_000
# Largest accepted fee; 10_000 (100%) is exclusive
MAX_FEE_BPS = BPS_DENOMINATOR - 1

# Smallest LP amount a first deposit may mint. Guards against near-zero
# first deposits whose rounding would distort the price ratio for every
# later depositor.
MINIMUM_LIQUIDITY = 1_000

# Domain tags for deterministic identity derivation
POOL_ID_TAG = b"config"
LP_SHARE_ID_TAG = b"lp"
