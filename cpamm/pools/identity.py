"""Deterministic identities for pools and their LP-share assets."""

import hashlib

from cpamm.constants import LP_SHARE_ID_TAG, POOL_ID_TAG, U64_MAX


def _length_prefixed(value: str) -> bytes:
    raw = value.encode("utf-8")
    return len(raw).to_bytes(4, "little") + raw


def derive_pool_id(seed: int, asset_x: str, asset_y: str) -> str:
    """Compute the pool identity for an ordered (seed, asset_x, asset_y) triple.

    pool_id = H("config" || seed_le8 || len(asset_x) || asset_x || len(asset_y) || asset_y)

    The seed lets several pools exist over the same asset pair. The pair is
    ordered: (seed, X, Y) and (seed, Y, X) are different pools.

    Raises:
        ValueError: If seed does not fit u64
    """
    if not 0 <= seed <= U64_MAX:
        raise ValueError(f"seed must fit u64: {seed}")
    data = (
        POOL_ID_TAG
        + seed.to_bytes(8, "little")
        + _length_prefixed(asset_x)
        + _length_prefixed(asset_y)
    )
    return "0x" + hashlib.sha256(data).hexdigest()


def derive_lp_share_id(pool_id: str) -> str:
    """Compute the identity of the LP-share asset minted by pool_id."""
    return "0x" + hashlib.sha256(LP_SHARE_ID_TAG + pool_id.encode("utf-8")).hexdigest()
