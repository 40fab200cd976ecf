"""In-memory asset ledger.

Reference AssetLedger used by the tests, the HTTP demo server and the
scenario CLI. Accounts are keyed by (owner, asset). Pool vaults are opened
explicitly; caller accounts are opened on first credit, the way a wallet's
associated token account is created on demand.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

import structlog

from cpamm.constants import U64_MAX
from cpamm.ledger.errors import (
    AccountExists,
    InsufficientBalance,
    MintAuthorityMismatch,
    UnknownAsset,
)
from cpamm.ledger.instructions import (
    Burn,
    CreateAsset,
    LedgerInstruction,
    Mint,
    OpenAccount,
    Transfer,
)
from cpamm.safe_int import Overflow

logger = structlog.get_logger()

AccountKey = tuple[str, str]


class InMemoryLedger:
    """Dictionary-backed ledger with all-or-nothing batch execution."""

    def __init__(self) -> None:
        self._balances: dict[AccountKey, int] = {}
        # asset -> mint authority; None for assets issued outside the ledger
        self._assets: dict[str, str | None] = {}
        self._supply: dict[str, int] = {}
        # Guards the table swap in execute and direct credits
        self._lock = threading.Lock()

    # --- Setup helpers ---

    def register_asset(self, asset: str) -> None:
        """Make an externally issued asset known to the ledger (idempotent)."""
        self._assets.setdefault(asset, None)
        self._supply.setdefault(asset, 0)

    def credit(self, owner: str, asset: str, amount: int) -> None:
        """Fund an account with an externally issued asset."""
        with self._lock:
            self.register_asset(asset)
            key = (owner, asset)
            self._balances[key] = _add(self._balances.get(key, 0), amount)
            self._supply[asset] = _add(self._supply[asset], amount)

    # --- Queries ---

    def balance_of(self, owner: str, asset: str) -> int:
        return self._balances.get((owner, asset), 0)

    def has_account(self, owner: str, asset: str) -> bool:
        return (owner, asset) in self._balances

    def has_asset(self, asset: str) -> bool:
        return asset in self._assets

    def total_supply(self, asset: str) -> int:
        if asset not in self._assets:
            raise UnknownAsset(f"Unknown asset {asset}")
        return self._supply[asset]

    # --- Execution ---

    def execute(self, instructions: Sequence[LedgerInstruction]) -> None:
        """Apply a batch atomically.

        The batch runs against copies of the ledger tables, which replace the
        live tables only after every instruction succeeded.

        Raises:
            LedgerError: If any instruction cannot apply (nothing is changed)
        """
        with self._lock:
            balances = dict(self._balances)
            assets = dict(self._assets)
            supply = dict(self._supply)

            for instruction in instructions:
                if isinstance(instruction, OpenAccount):
                    key = (instruction.owner, instruction.asset)
                    # Vaults may be opened for assets issued outside the ledger
                    assets.setdefault(instruction.asset, None)
                    supply.setdefault(instruction.asset, 0)
                    if key in balances:
                        raise AccountExists(f"Account {key} already open")
                    balances[key] = 0
                elif isinstance(instruction, CreateAsset):
                    if instruction.asset in assets:
                        raise AccountExists(f"Asset {instruction.asset} already exists")
                    assets[instruction.asset] = instruction.authority
                    supply[instruction.asset] = 0
                elif isinstance(instruction, Transfer):
                    if instruction.asset not in assets:
                        raise UnknownAsset(f"Cannot transfer unknown asset {instruction.asset}")
                    source = (instruction.source, instruction.asset)
                    destination = (instruction.destination, instruction.asset)
                    _debit(balances, source, instruction.amount)
                    balances[destination] = _add(balances.get(destination, 0), instruction.amount)
                elif isinstance(instruction, Mint):
                    _check_authority(assets, instruction.asset, instruction.authority)
                    destination = (instruction.destination, instruction.asset)
                    balances[destination] = _add(balances.get(destination, 0), instruction.amount)
                    supply[instruction.asset] = _add(supply[instruction.asset], instruction.amount)
                elif isinstance(instruction, Burn):
                    _check_authority(assets, instruction.asset, instruction.authority)
                    source = (instruction.source, instruction.asset)
                    _debit(balances, source, instruction.amount)
                    supply[instruction.asset] -= instruction.amount
                else:
                    raise TypeError(f"Unknown instruction type: {type(instruction)}")

            self._balances, self._assets, self._supply = balances, assets, supply
        logger.debug("ledger_batch_executed", instruction_count=len(instructions))


def _add(balance: int, amount: int) -> int:
    result = balance + amount
    if result > U64_MAX:
        raise Overflow(f"Balance {balance} + {amount} exceeds u64 max")
    return result


def _debit(balances: dict[AccountKey, int], key: AccountKey, amount: int) -> None:
    balance = balances.get(key, 0)
    if balance < amount:
        raise InsufficientBalance(f"Account {key} holds {balance}, needs {amount}")
    balances[key] = balance - amount


def _check_authority(assets: dict[str, str | None], asset: str, authority: str) -> None:
    if asset not in assets:
        raise UnknownAsset(f"Unknown asset {asset}")
    if assets[asset] != authority:
        raise MintAuthorityMismatch(f"{authority} cannot mint or burn {asset}")


__all__ = ["InMemoryLedger"]
