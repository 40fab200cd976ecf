"""Ledger instructions emitted by the engine.

The engine never moves value itself. Each operation produces a batch of
these instructions, and the AssetLedger executes the batch atomically:
either every instruction applies or none does.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TypeAlias, runtime_checkable


@dataclass(frozen=True)
class OpenAccount:
    """Open a zero-balance account of ``asset`` owned by ``owner``."""

    owner: str
    asset: str


@dataclass(frozen=True)
class CreateAsset:
    """Create a new fungible asset whose supply only ``authority`` may change."""

    asset: str
    authority: str


@dataclass(frozen=True)
class Transfer:
    """Move ``amount`` of ``asset`` between two owners."""

    asset: str
    source: str
    destination: str
    amount: int


@dataclass(frozen=True)
class Mint:
    """Create ``amount`` new units of ``asset`` for ``destination``."""

    asset: str
    destination: str
    amount: int
    authority: str


@dataclass(frozen=True)
class Burn:
    """Destroy ``amount`` units of ``asset`` held by ``source``."""

    asset: str
    source: str
    amount: int
    authority: str


# Union type for all instruction kinds
LedgerInstruction: TypeAlias = OpenAccount | CreateAsset | Transfer | Mint | Burn


@runtime_checkable
class AssetLedger(Protocol):
    """Protocol for the external asset ledger.

    Implementations must apply a batch atomically and raise a LedgerError
    (leaving every balance untouched) if any instruction cannot apply.
    """

    def execute(self, instructions: Sequence[LedgerInstruction]) -> None:
        """Apply a batch of instructions atomically."""
        ...

    def balance_of(self, owner: str, asset: str) -> int:
        """Return the balance of ``asset`` held by ``owner`` (0 if none)."""
        ...


__all__ = [
    "OpenAccount",
    "CreateAsset",
    "Transfer",
    "Mint",
    "Burn",
    "LedgerInstruction",
    "AssetLedger",
]
