"""Pydantic models for pool operation requests and receipts.

Requests form a closed tagged union on ``kind``; a single dispatcher
(PoolEngine.dispatch) handles each variant. Field names are snake_case in
Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from cpamm.amm import spot_price
from cpamm.models.types import U16, U64, AssetId, Identity, PoolId
from cpamm.pools.state import PoolState, PoolStatus

# =============================================================================
# Requests
# =============================================================================


class CreatePoolRequest(BaseModel):
    """Create a pool over an ordered asset pair."""

    kind: Literal["create_pool"] = "create_pool"
    seed: U64 = Field(description="Caller-chosen value making the pool identity unique.")
    asset_x: AssetId = Field(alias="assetX")
    asset_y: AssetId = Field(alias="assetY")
    fee_bps: U16 = Field(alias="feeBps", description="Swap fee in basis points, below 10000.")
    authority: Identity | None = Field(
        default=None,
        description="Identity allowed to lock the pool. Omit for a pool that can never be paused.",
    )

    model_config = {"populate_by_name": True}


class DepositRequest(BaseModel):
    """Deposit liquidity in exchange for LP shares.

    On an empty pool ``max_x``/``max_y`` are the exact amounts deposited and
    ``lp_amount`` is the least LP the caller accepts. Otherwise ``lp_amount``
    is the exact LP minted and ``max_x``/``max_y`` cap the amounts pulled.
    """

    kind: Literal["deposit"] = "deposit"
    pool_id: PoolId = Field(alias="poolId")
    caller: Identity
    lp_amount: U64 = Field(alias="lpAmount")
    max_x: U64 = Field(alias="maxX")
    max_y: U64 = Field(alias="maxY")

    model_config = {"populate_by_name": True}


class WithdrawRequest(BaseModel):
    """Burn LP shares for a proportional slice of the reserves."""

    kind: Literal["withdraw"] = "withdraw"
    pool_id: PoolId = Field(alias="poolId")
    caller: Identity
    lp_amount: U64 = Field(alias="lpAmount")
    min_x: U64 = Field(alias="minX")
    min_y: U64 = Field(alias="minY")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Sell an exact amount of one asset for at least ``min_out`` of the other."""

    kind: Literal["swap"] = "swap"
    pool_id: PoolId = Field(alias="poolId")
    caller: Identity
    is_x: bool = Field(alias="isX", description="True to sell X for Y, false to sell Y for X.")
    amount_in: U64 = Field(alias="amountIn")
    min_out: U64 = Field(alias="minOut")

    model_config = {"populate_by_name": True}


class SetLockedRequest(BaseModel):
    """Pause or resume a pool (authority only)."""

    kind: Literal["set_locked"] = "set_locked"
    pool_id: PoolId = Field(alias="poolId")
    caller: Identity
    locked: bool

    model_config = {"populate_by_name": True}


OperationRequest = Annotated[
    CreatePoolRequest | DepositRequest | WithdrawRequest | SwapRequest | SetLockedRequest,
    Field(discriminator="kind"),
]

_operation_adapter: TypeAdapter[OperationRequest] = TypeAdapter(OperationRequest)


def parse_operation(data: object) -> OperationRequest:
    """Validate raw request data (e.g. decoded JSON) into an operation request."""
    return _operation_adapter.validate_python(data)


# =============================================================================
# Receipts
# =============================================================================


class CreatePoolReceipt(BaseModel):
    kind: Literal["create_pool"] = "create_pool"
    pool_id: str = Field(alias="poolId")
    lp_share_id: str = Field(alias="lpShareId")

    model_config = {"populate_by_name": True}


class DepositReceipt(BaseModel):
    kind: Literal["deposit"] = "deposit"
    pool_id: str = Field(alias="poolId")
    amount_x: int = Field(alias="amountX", description="Asset X pulled from the caller.")
    amount_y: int = Field(alias="amountY", description="Asset Y pulled from the caller.")
    lp_minted: int = Field(alias="lpMinted")

    model_config = {"populate_by_name": True}


class WithdrawReceipt(BaseModel):
    kind: Literal["withdraw"] = "withdraw"
    pool_id: str = Field(alias="poolId")
    amount_x: int = Field(alias="amountX", description="Asset X paid to the caller.")
    amount_y: int = Field(alias="amountY", description="Asset Y paid to the caller.")
    lp_burned: int = Field(alias="lpBurned")

    model_config = {"populate_by_name": True}


class SwapReceipt(BaseModel):
    kind: Literal["swap"] = "swap"
    pool_id: str = Field(alias="poolId")
    is_x: bool = Field(alias="isX")
    amount_in: int = Field(alias="amountIn")
    amount_out: int = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class SetLockedReceipt(BaseModel):
    kind: Literal["set_locked"] = "set_locked"
    pool_id: str = Field(alias="poolId")
    locked: bool

    model_config = {"populate_by_name": True}


OperationReceipt = Annotated[
    CreatePoolReceipt | DepositReceipt | WithdrawReceipt | SwapReceipt | SetLockedReceipt,
    Field(discriminator="kind"),
]


# =============================================================================
# Read model
# =============================================================================


class PoolView(BaseModel):
    """Read-only snapshot of a pool's configuration and reserves.

    This is the record external tooling reads to display pool status.
    """

    pool_id: str = Field(alias="poolId")
    seed: int
    asset_x: str = Field(alias="assetX")
    asset_y: str = Field(alias="assetY")
    fee_bps: int = Field(alias="feeBps")
    lp_share_id: str = Field(alias="lpShareId")
    authority: str | None = None
    locked: bool
    status: PoolStatus
    reserve_x: int = Field(alias="reserveX")
    reserve_y: int = Field(alias="reserveY")
    lp_supply: int = Field(alias="lpSupply")
    # Y per X as a decimal string, None while the pool is empty
    price: str | None = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_state(cls, state: PoolState) -> PoolView:
        config, reserves = state.config, state.reserves
        price = spot_price(reserves.reserve_x, reserves.reserve_y)
        return cls(
            pool_id=config.pool_id,
            seed=config.seed,
            asset_x=config.asset_x,
            asset_y=config.asset_y,
            fee_bps=config.fee_bps,
            lp_share_id=config.lp_share_id,
            authority=config.authority,
            locked=config.locked,
            status=state.status,
            reserve_x=reserves.reserve_x,
            reserve_y=reserves.reserve_y,
            lp_supply=reserves.lp_supply,
            price=str(price) if price is not None else None,
        )


__all__ = [
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
