"""Pool engine error classes.

Each error carries a ``code`` naming its failure kind in the operation
contract (``InvalidAmount``, ``SlippageExceeded``, ...). Arithmetic faults
are not listed here: they are SafeIntError subclasses of ArithmeticError
(see cpamm.safe_int).
"""

from __future__ import annotations

from typing import ClassVar


class AmmError(Exception):
    """Base error for pool engine operations."""

    code: ClassVar[str] = "AmmError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)

    @property
    def message(self) -> str:
        return str(self)


class InvalidAmount(AmmError):
    """Zero or degenerate amount supplied."""

    code = "InvalidAmount"


class InvalidFee(AmmError):
    """Fee must be in range [0, 10_000) basis points."""

    code = "InvalidFee"


class IdenticalAssets(AmmError):
    """Both sides of a pool must be distinct assets."""

    code = "IdenticalAssets"


class SlippageExceeded(AmmError):
    """Computed amount violates the caller's bound."""

    code = "SlippageExceeded"


class InsufficientLiquidity(AmmError):
    """Pool reserves cannot satisfy the request."""

    code = "InsufficientLiquidity"


class PoolLocked(AmmError):
    """Pool is paused; mutating operations are rejected."""

    code = "PoolLocked"


class Unauthorized(AmmError):
    """Caller is not the pool authority."""

    code = "Unauthorized"


class NoAuthority(AmmError):
    """Pool has no authority and can never be locked or unlocked."""

    code = "NoAuthority"


class AlreadyInitialized(AmmError):
    """A pool with this (seed, asset_x, asset_y) identity already exists."""

    code = "AlreadyInitialized"


class PoolNotFound(AmmError):
    """No pool is registered under the given identity."""

    code = "PoolNotFound"


class InvariantViolation(AmmError):
    """Post-transition check failed. Indicates a correctness bug, not a user error."""

    code = "InvariantViolation"


__all__ = [
    "AmmError",
    "InvalidAmount",
    "InvalidFee",
    "IdenticalAssets",
    "SlippageExceeded",
    "InsufficientLiquidity",
    "PoolLocked",
    "Unauthorized",
    "NoAuthority",
    "AlreadyInitialized",
    "PoolNotFound",
    "InvariantViolation",
]
