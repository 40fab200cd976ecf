"""Pool state machine.

A PoolState owns one pool's configuration and reserve record and applies
transitions computed by cpamm.amm. Records are immutable dataclasses: every
transition builds a complete new PoolReserves and installs it with a single
assignment, so reserves and LP supply are never observed half-updated.

States: UNINITIALIZED -> ACTIVE <-> LOCKED. Both ACTIVE and LOCKED pools
answer reads; only ACTIVE pools accept deposits, withdrawals and swaps.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum

import structlog

from cpamm.constants import U64_MAX
from cpamm.errors import (
    InsufficientLiquidity,
    InvalidAmount,
    InvariantViolation,
    NoAuthority,
    PoolLocked,
    Unauthorized,
)
from cpamm.math import checked_add, checked_sub
from cpamm.safe_int import Overflow, S

logger = structlog.get_logger()


class PoolStatus(str, Enum):
    """Lifecycle state of a pool identity."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    LOCKED = "locked"


class SwapDirection(str, Enum):
    """Which asset the caller sells."""

    X_TO_Y = "x_to_y"
    Y_TO_X = "y_to_x"

    @classmethod
    def from_is_x(cls, is_x: bool) -> SwapDirection:
        """Map the wire flag (True = caller sells X) to a direction."""
        return cls.X_TO_Y if is_x else cls.Y_TO_X

    @property
    def is_x(self) -> bool:
        return self is SwapDirection.X_TO_Y


@dataclass(frozen=True)
class PoolConfig:
    """Pool configuration. Immutable after creation except ``locked``."""

    pool_id: str
    seed: int
    asset_x: str
    asset_y: str
    # Fee in basis points charged on swap input (100 = 1%)
    fee_bps: int
    lp_share_id: str
    # Identity allowed to toggle ``locked``; None means the pool can never be paused
    authority: str | None = None
    locked: bool = False


@dataclass(frozen=True)
class PoolReserves:
    """Reserve balances and outstanding LP supply of a pool."""

    reserve_x: int = 0
    reserve_y: int = 0
    lp_supply: int = 0

    @property
    def is_empty(self) -> bool:
        return self.lp_supply == 0

    @property
    def k(self) -> int:
        """The constant product reserve_x * reserve_y."""
        return self.reserve_x * self.reserve_y

    def oriented(self, direction: SwapDirection) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if direction is SwapDirection.X_TO_Y:
            return self.reserve_x, self.reserve_y
        return self.reserve_y, self.reserve_x


class PoolState:
    """Mutable holder of one pool's config and reserves.

    Use ``PoolState.create`` to bring a pool from UNINITIALIZED to ACTIVE.
    The host is expected to serialize operations on the same pool; this
    class does no locking of its own.
    """

    def __init__(
        self,
        config: PoolConfig,
        reserves: PoolReserves | None = None,
        amount_limit: int = U64_MAX,
    ) -> None:
        self._config = config
        self._reserves = reserves if reserves is not None else PoolReserves()
        self._amount_limit = amount_limit

    @classmethod
    def create(cls, config: PoolConfig, amount_limit: int = U64_MAX) -> PoolState:
        """Initialize a pool with empty reserves and zero LP supply."""
        logger.debug(
            "pool_state_created",
            pool_id=config.pool_id,
            fee_bps=config.fee_bps,
            has_authority=config.authority is not None,
        )
        return cls(config, PoolReserves(), amount_limit)

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def reserves(self) -> PoolReserves:
        return self._reserves

    @property
    def pool_id(self) -> str:
        return self._config.pool_id

    @property
    def locked(self) -> bool:
        return self._config.locked

    @property
    def status(self) -> PoolStatus:
        return PoolStatus.LOCKED if self._config.locked else PoolStatus.ACTIVE

    def require_active(self) -> None:
        """Raise PoolLocked unless the pool accepts mutating operations."""
        if self._config.locked:
            raise PoolLocked(f"Pool {self.pool_id} is locked")

    # --- Transitions ---

    def apply_deposit(self, amount_x: int, amount_y: int, lp_minted: int) -> PoolReserves:
        """Add a deposit to the reserves and mint LP supply.

        Raises:
            PoolLocked: If the pool is locked
            InvalidAmount: If lp_minted is zero
            InvariantViolation: If the result breaks the empty-pool invariant
        """
        self.require_active()
        if lp_minted == 0:
            raise InvalidAmount("Deposit must mint LP shares")

        current = self._reserves
        updated = PoolReserves(
            reserve_x=checked_add(current.reserve_x, amount_x),
            reserve_y=checked_add(current.reserve_y, amount_y),
            lp_supply=checked_add(current.lp_supply, lp_minted),
        )
        self._install(updated)
        logger.debug(
            "pool_deposit_applied",
            pool_id=self.pool_id,
            amount_x=amount_x,
            amount_y=amount_y,
            lp_minted=lp_minted,
        )
        return updated

    def apply_withdraw(self, amount_x: int, amount_y: int, lp_burned: int) -> PoolReserves:
        """Remove a withdrawal from the reserves and burn LP supply.

        Raises:
            PoolLocked: If the pool is locked
            InsufficientLiquidity: If more LP is burned or more assets are
                paid than the pool holds
        """
        self.require_active()
        current = self._reserves
        if lp_burned > current.lp_supply:
            raise InsufficientLiquidity(
                f"Cannot burn {lp_burned} LP from supply {current.lp_supply}"
            )
        if amount_x > current.reserve_x or amount_y > current.reserve_y:
            raise InsufficientLiquidity(
                f"Cannot pay ({amount_x}, {amount_y}) from reserves "
                f"({current.reserve_x}, {current.reserve_y})"
            )

        updated = PoolReserves(
            reserve_x=checked_sub(current.reserve_x, amount_x),
            reserve_y=checked_sub(current.reserve_y, amount_y),
            lp_supply=checked_sub(current.lp_supply, lp_burned),
        )
        self._install(updated)
        logger.debug(
            "pool_withdraw_applied",
            pool_id=self.pool_id,
            amount_x=amount_x,
            amount_y=amount_y,
            lp_burned=lp_burned,
        )
        return updated

    def apply_swap(self, amount_in: int, amount_out: int, direction: SwapDirection) -> PoolReserves:
        """Move amount_in into and amount_out out of the pool.

        The product reserve_x * reserve_y must not decrease.

        Raises:
            PoolLocked: If the pool is locked
            InsufficientLiquidity: If amount_out would empty the output reserve
            InvariantViolation: If the constant product would decrease
        """
        self.require_active()
        current = self._reserves
        reserve_in, reserve_out = current.oriented(direction)
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Swap output {amount_out} exhausts reserve {reserve_out}"
            )

        new_in = checked_add(reserve_in, amount_in)
        new_out = checked_sub(reserve_out, amount_out)
        if direction is SwapDirection.X_TO_Y:
            updated = PoolReserves(new_in, new_out, current.lp_supply)
        else:
            updated = PoolReserves(new_out, new_in, current.lp_supply)

        if updated.k < current.k:
            logger.error(
                "pool_invariant_decreased",
                pool_id=self.pool_id,
                k_before=current.k,
                k_after=updated.k,
                direction=direction.value,
                amount_in=amount_in,
                amount_out=amount_out,
            )
            raise InvariantViolation(
                f"Constant product decreased from {current.k} to {updated.k}"
            )

        self._install(updated)
        logger.debug(
            "pool_swap_applied",
            pool_id=self.pool_id,
            direction=direction.value,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return updated

    def set_locked(self, value: bool, caller: str) -> None:
        """Pause or resume the pool.

        Raises:
            NoAuthority: If the pool was created without an authority
            Unauthorized: If caller is not the pool authority
        """
        authority = self._config.authority
        if authority is None:
            raise NoAuthority(f"Pool {self.pool_id} has no authority")
        if caller != authority:
            raise Unauthorized(f"{caller} is not the authority of pool {self.pool_id}")

        self._config = replace(self._config, locked=value)
        logger.info("pool_lock_changed", pool_id=self.pool_id, locked=value)

    @contextmanager
    def transaction(self) -> Iterator[PoolState]:
        """Run a block of transitions that is undone if the block raises.

        Used to pair a state transition with its ledger instructions: the
        transition is applied first and kept only if the ledger batch
        succeeds.
        """
        config, reserves = self._config, self._reserves
        try:
            yield self
        except BaseException:
            self._config, self._reserves = config, reserves
            logger.debug("pool_transaction_rolled_back", pool_id=self.pool_id)
            raise

    # --- Internal ---

    def _install(self, updated: PoolReserves) -> None:
        """Check invariants on a new reserve record and make it current."""
        for name in ("reserve_x", "reserve_y", "lp_supply"):
            value = getattr(updated, name)
            if not S(value).is_u64() or value > self._amount_limit:
                raise Overflow(f"{name} {value} exceeds limit {self._amount_limit}")

        reserves_empty = updated.reserve_x == 0 and updated.reserve_y == 0
        if updated.is_empty != reserves_empty:
            raise InvariantViolation(
                f"LP supply {updated.lp_supply} inconsistent with reserves "
                f"({updated.reserve_x}, {updated.reserve_y})"
            )
        if not updated.is_empty and (updated.reserve_x == 0 or updated.reserve_y == 0):
            raise InvariantViolation(
                f"One-sided reserves ({updated.reserve_x}, {updated.reserve_y})"
            )
        self._reserves = updated


__all__ = [
    "PoolStatus",
    "SwapDirection",
    "PoolConfig",
    "PoolReserves",
    "PoolState",
]
