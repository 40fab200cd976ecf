"""Shared test constants: asset ids, identities and amounts."""

# Asset ids
ASSET_X = "mint-x"
ASSET_Y = "mint-y"

# Caller identities
ALICE = "alice"
BOB = "bob"
AUTHORITY = "authority"

# Pool parameters used by the reference scenario
SEED = 1
FEE_BPS = 100

# 1000 tokens with 6 decimals
FUNDING = 1_000_000_000

# Reserves of the standard seeded pool (100 tokens each side)
RESERVE = 100_000_000
