"""Asset ledger collaborator: instructions, protocol and in-memory implementation."""

from cpamm.ledger.errors import (
    AccountExists,
    InsufficientBalance,
    LedgerError,
    MintAuthorityMismatch,
    UnknownAsset,
)
from cpamm.ledger.instructions import (
    AssetLedger,
    Burn,
    CreateAsset,
    LedgerInstruction,
    Mint,
    OpenAccount,
    Transfer,
)
from cpamm.ledger.memory import InMemoryLedger

__all__ = [
    # Protocol and implementation
    "AssetLedger",
    "InMemoryLedger",
    # Instructions
    "LedgerInstruction",
    "OpenAccount",
    "CreateAsset",
    "Transfer",
    "Mint",
    "Burn",
    # Errors
    "LedgerError",
    "InsufficientBalance",
    "UnknownAsset",
    "AccountExists",
    "MintAuthorityMismatch",
]
