"""Pydantic models for the pool operation contract."""

from cpamm.models.operations import (
    CreatePoolReceipt,
    CreatePoolRequest,
    DepositReceipt,
    DepositRequest,
    OperationReceipt,
    OperationRequest,
    PoolView,
    SetLockedReceipt,
    SetLockedRequest,
    SwapReceipt,
    SwapRequest,
    WithdrawReceipt,
    WithdrawRequest,
    parse_operation,
)
from cpamm.models.types import U16, U64, AssetId, Identity, PoolId

__all__ = [
    # Types
    "U16",
    "U64",
    "AssetId",
    "Identity",
    "PoolId",
    # Requests
    "CreatePoolRequest",
    "DepositRequest",
    "WithdrawRequest",
    "SwapRequest",
    "SetLockedRequest",
    "OperationRequest",
    "parse_operation",
    # Receipts
    "CreatePoolReceipt",
    "DepositReceipt",
    "WithdrawReceipt",
    "SwapReceipt",
    "SetLockedReceipt",
    "OperationReceipt",
    # Read model
    "PoolView",
]
