"""Pool registry: the keyed arena of pool records.

Pools are stored by their deterministic identity (see cpamm.pools.identity)
and looked up by key; callers never hold references across operations they
do not own. Distinct pools share no mutable state.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from cpamm.constants import U64_MAX
from cpamm.errors import AlreadyInitialized, PoolNotFound
from cpamm.pools.state import PoolConfig, PoolState, PoolStatus

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of pool states keyed by pool identity."""

    def __init__(self, amount_limit: int = U64_MAX) -> None:
        self._pools: dict[str, PoolState] = {}
        self._amount_limit = amount_limit

    def create(self, config: PoolConfig) -> PoolState:
        """Register a new pool in the ACTIVE state.

        Args:
            config: Configuration of the pool to create

        Returns:
            The new PoolState

        Raises:
            AlreadyInitialized: If a pool with this identity already exists
        """
        if config.pool_id in self._pools:
            raise AlreadyInitialized(f"Pool {config.pool_id} already exists")

        state = PoolState.create(config, amount_limit=self._amount_limit)
        self._pools[config.pool_id] = state
        logger.info(
            "pool_registered",
            pool_id=config.pool_id,
            seed=config.seed,
            asset_x=config.asset_x,
            asset_y=config.asset_y,
        )
        return state

    def remove(self, pool_id: str) -> None:
        """Drop a pool record. Used to undo a creation whose ledger setup failed."""
        if self._pools.pop(pool_id, None) is None:
            return
        logger.info("pool_unregistered", pool_id=pool_id)

    def get(self, pool_id: str) -> PoolState:
        """Get the pool registered under pool_id.

        Raises:
            PoolNotFound: If no such pool exists
        """
        state = self._pools.get(pool_id)
        if state is None:
            raise PoolNotFound(f"Unknown pool {pool_id}")
        return state

    def status(self, pool_id: str) -> PoolStatus:
        """Lifecycle state of an identity; unknown identities are UNINITIALIZED."""
        state = self._pools.get(pool_id)
        if state is None:
            return PoolStatus.UNINITIALIZED
        return state.status

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def __iter__(self) -> Iterator[PoolState]:
        return iter(list(self._pools.values()))

    @property
    def pool_count(self) -> int:
        """Return the number of registered pools."""
        return len(self._pools)


__all__ = ["PoolRegistry"]
