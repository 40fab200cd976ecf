"""Pool management package.

Provides the pool state machine and the PoolRegistry arena that stores
pools by deterministic identity.
"""

from .identity import derive_lp_share_id, derive_pool_id
from .registry import PoolRegistry
from .state import PoolConfig, PoolReserves, PoolState, PoolStatus, SwapDirection

__all__ = [
    "PoolRegistry",
    "PoolConfig",
    "PoolReserves",
    "PoolState",
    "PoolStatus",
    "SwapDirection",
    "derive_pool_id",
    "derive_lp_share_id",
]
