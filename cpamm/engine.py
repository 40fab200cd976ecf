"""Pool engine: operation handlers and dispatcher.

PoolEngine is the entry point for pool operations. Each handler validates
its input, quotes the transition with cpamm.amm, enforces the caller's
slippage bound, applies the transition to the pool state and executes the
paired ledger instructions. State change and ledger batch form one unit:
the state change is applied inside ``PoolState.transaction()`` and is rolled
back if the ledger rejects the batch.

Operations on one pool are serialized by a per-pool lock held from the
reserve read through the ledger batch, so concurrent callers (the HTTP
server runs handlers on a threadpool) queue instead of interleaving.
Operations on distinct pools do not contend.
"""

from __future__ import annotations

import threading

import structlog

from cpamm.amm import (
    quote_deposit_initial,
    quote_deposit_proportional,
    quote_swap,
    quote_withdraw,
)
from cpamm.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from cpamm.constants import MAX_FEE_BPS
from cpamm.errors import IdenticalAssets, InvalidAmount, InvalidFee, SlippageExceeded
from cpamm.ledger import (
    AssetLedger,
    Burn,
    CreateAsset,
    InMemoryLedger,
    LedgerInstruction,
    Mint,
    OpenAccount,
    Transfer,
)
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
)
from cpamm.pools import (
    PoolConfig,
    PoolRegistry,
    PoolState,
    SwapDirection,
    derive_lp_share_id,
    derive_pool_id,
)

logger = structlog.get_logger()


class PoolEngine:
    """Applies pool operations against a registry and an asset ledger.

    Args:
        ledger: Asset ledger that executes the transfers. Defaults to a
            fresh InMemoryLedger.
        registry: Pool arena. Defaults to an empty PoolRegistry.
        config: Engine limits. Defaults to DEFAULT_ENGINE_CONFIG.
    """

    def __init__(
        self,
        ledger: AssetLedger | None = None,
        registry: PoolRegistry | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self.config = config
        self.ledger: AssetLedger = ledger if ledger is not None else InMemoryLedger()
        self.registry = (
            registry if registry is not None else PoolRegistry(amount_limit=config.amount_limit)
        )
        self._pool_locks: dict[str, threading.Lock] = {}
        self._pool_locks_guard = threading.Lock()

    def _pool_lock(self, pool_id: str) -> threading.Lock:
        """Get the lock serializing operations on pool_id."""
        with self._pool_locks_guard:
            return self._pool_locks.setdefault(pool_id, threading.Lock())

    # --- Handlers ---

    def create_pool(
        self,
        seed: int,
        asset_x: str,
        asset_y: str,
        fee_bps: int,
        authority: str | None = None,
    ) -> CreatePoolReceipt:
        """Create a pool and open its vaults and LP-share asset.

        Raises:
            InvalidFee: If fee_bps is outside [0, 10_000)
            IdenticalAssets: If asset_x == asset_y
            AlreadyInitialized: If (seed, asset_x, asset_y) is already taken
            LedgerError: If the ledger cannot open the accounts
        """
        if not 0 <= fee_bps <= MAX_FEE_BPS:
            raise InvalidFee(f"fee_bps must be in [0, {MAX_FEE_BPS}]: {fee_bps}")
        if asset_x == asset_y:
            raise IdenticalAssets(f"Pool assets must differ: {asset_x}")

        pool_id = derive_pool_id(seed, asset_x, asset_y)
        lp_share_id = derive_lp_share_id(pool_id)
        config = PoolConfig(
            pool_id=pool_id,
            seed=seed,
            asset_x=asset_x,
            asset_y=asset_y,
            fee_bps=fee_bps,
            lp_share_id=lp_share_id,
            authority=authority,
        )
        with self._pool_lock(pool_id):
            self.registry.create(config)
            try:
                self.ledger.execute(
                    [
                        OpenAccount(owner=pool_id, asset=asset_x),
                        OpenAccount(owner=pool_id, asset=asset_y),
                        CreateAsset(asset=lp_share_id, authority=pool_id),
                    ]
                )
            except Exception:
                self.registry.remove(pool_id)
                raise

        logger.info(
            "pool_created",
            pool_id=pool_id,
            seed=seed,
            asset_x=asset_x,
            asset_y=asset_y,
            fee_bps=fee_bps,
        )
        return CreatePoolReceipt(pool_id=pool_id, lp_share_id=lp_share_id)

    def deposit(
        self,
        pool_id: str,
        caller: str,
        lp_amount: int,
        max_x: int,
        max_y: int,
    ) -> DepositReceipt:
        """Deposit liquidity.

        Empty pool: deposits exactly (max_x, max_y) and mints
        floor(sqrt(max_x * max_y)) LP, which must be at least lp_amount.
        Non-empty pool: mints exactly lp_amount LP for the ratio-preserving
        amounts, which must not exceed (max_x, max_y).

        Raises:
            PoolLocked: If the pool is locked
            InvalidAmount: If lp_amount is zero or the first deposit is too small
            SlippageExceeded: If the slippage bound is violated
        """
        with self._pool_lock(pool_id):
            pool = self.registry.get(pool_id)
            pool.require_active()
            if lp_amount == 0:
                raise InvalidAmount("Deposit LP amount must be positive")

            reserves = pool.reserves
            if reserves.is_empty:
                amount_x, amount_y = max_x, max_y
                lp_minted = quote_deposit_initial(
                    amount_x, amount_y, minimum_liquidity=self.config.minimum_liquidity
                )
                if lp_minted < lp_amount:
                    raise SlippageExceeded(
                        f"Initial deposit mints {lp_minted} LP, below requested {lp_amount}"
                    )
            else:
                amount_x, amount_y = quote_deposit_proportional(
                    reserves.reserve_x, reserves.reserve_y, reserves.lp_supply, lp_amount
                )
                lp_minted = lp_amount
                if amount_x > max_x or amount_y > max_y:
                    raise SlippageExceeded(
                        f"Deposit needs ({amount_x}, {amount_y}), caller allows ({max_x}, {max_y})"
                    )

            config = pool.config
            instructions: list[LedgerInstruction] = [
                Transfer(asset=config.asset_x, source=caller, destination=pool_id, amount=amount_x),
                Transfer(asset=config.asset_y, source=caller, destination=pool_id, amount=amount_y),
                Mint(
                    asset=config.lp_share_id,
                    destination=caller,
                    amount=lp_minted,
                    authority=pool_id,
                ),
            ]
            with pool.transaction():
                pool.apply_deposit(amount_x, amount_y, lp_minted)
                self.ledger.execute(instructions)

        logger.info(
            "liquidity_deposited",
            pool_id=pool_id,
            caller=caller,
            amount_x=amount_x,
            amount_y=amount_y,
            lp_minted=lp_minted,
        )
        return DepositReceipt(
            pool_id=pool_id, amount_x=amount_x, amount_y=amount_y, lp_minted=lp_minted
        )

    def withdraw(
        self,
        pool_id: str,
        caller: str,
        lp_amount: int,
        min_x: int,
        min_y: int,
    ) -> WithdrawReceipt:
        """Burn LP shares for a proportional share of both reserves.

        Raises:
            PoolLocked: If the pool is locked
            InvalidAmount: If lp_amount is zero or exceeds the LP supply
            SlippageExceeded: If either payout is below its minimum
            InsufficientLiquidity: If the reserves cannot cover the payout
        """
        with self._pool_lock(pool_id):
            pool = self.registry.get(pool_id)
            pool.require_active()

            reserves = pool.reserves
            amount_x, amount_y = quote_withdraw(
                reserves.reserve_x, reserves.reserve_y, reserves.lp_supply, lp_amount
            )
            if amount_x < min_x or amount_y < min_y:
                raise SlippageExceeded(
                    f"Withdraw pays ({amount_x}, {amount_y}), caller requires ({min_x}, {min_y})"
                )

            config = pool.config
            instructions: list[LedgerInstruction] = [
                Burn(asset=config.lp_share_id, source=caller, amount=lp_amount, authority=pool_id),
                Transfer(asset=config.asset_x, source=pool_id, destination=caller, amount=amount_x),
                Transfer(asset=config.asset_y, source=pool_id, destination=caller, amount=amount_y),
            ]
            with pool.transaction():
                pool.apply_withdraw(amount_x, amount_y, lp_amount)
                self.ledger.execute(instructions)

        logger.info(
            "liquidity_withdrawn",
            pool_id=pool_id,
            caller=caller,
            amount_x=amount_x,
            amount_y=amount_y,
            lp_burned=lp_amount,
        )
        return WithdrawReceipt(
            pool_id=pool_id, amount_x=amount_x, amount_y=amount_y, lp_burned=lp_amount
        )

    def swap(
        self,
        pool_id: str,
        caller: str,
        direction: SwapDirection,
        amount_in: int,
        min_out: int,
    ) -> SwapReceipt:
        """Sell exactly amount_in of one asset for the other.

        Raises:
            PoolLocked: If the pool is locked
            InvalidAmount: If amount_in is zero or buys nothing
            InsufficientLiquidity: If the pool is empty
            SlippageExceeded: If the output is below min_out
            InvariantViolation: If the transition would decrease reserve_x * reserve_y
        """
        with self._pool_lock(pool_id):
            pool = self.registry.get(pool_id)
            pool.require_active()

            reserve_in, reserve_out = pool.reserves.oriented(direction)
            amount_out = quote_swap(reserve_in, reserve_out, amount_in, pool.config.fee_bps)
            if amount_out < min_out:
                raise SlippageExceeded(f"Swap pays {amount_out}, caller requires {min_out}")

            config = pool.config
            if direction is SwapDirection.X_TO_Y:
                asset_in, asset_out = config.asset_x, config.asset_y
            else:
                asset_in, asset_out = config.asset_y, config.asset_x
            instructions: list[LedgerInstruction] = [
                Transfer(asset=asset_in, source=caller, destination=pool_id, amount=amount_in),
                Transfer(asset=asset_out, source=pool_id, destination=caller, amount=amount_out),
            ]
            with pool.transaction():
                pool.apply_swap(amount_in, amount_out, direction)
                self.ledger.execute(instructions)

        logger.info(
            "swap_executed",
            pool_id=pool_id,
            caller=caller,
            direction=direction.value,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return SwapReceipt(
            pool_id=pool_id, is_x=direction.is_x, amount_in=amount_in, amount_out=amount_out
        )

    def set_locked(self, pool_id: str, caller: str, locked: bool) -> SetLockedReceipt:
        """Pause or resume a pool.

        Raises:
            NoAuthority: If the pool has no authority
            Unauthorized: If caller is not the authority
        """
        with self._pool_lock(pool_id):
            pool = self.registry.get(pool_id)
            pool.set_locked(locked, caller)
        return SetLockedReceipt(pool_id=pool_id, locked=locked)

    # --- Queries ---

    def get_pool(self, pool_id: str) -> PoolView:
        """Read a pool's configuration and reserves. Allowed while locked."""
        return PoolView.from_state(self.registry.get(pool_id))

    def list_pools(self) -> list[PoolView]:
        return [PoolView.from_state(state) for state in self.registry]

    def pool_state(self, pool_id: str) -> PoolState:
        return self.registry.get(pool_id)

    # --- Dispatch ---

    def dispatch(self, request: OperationRequest) -> OperationReceipt:
        """Route a tagged operation request to its handler.

        Raises:
            TypeError: If request is not one of the OperationRequest variants
        """
        if isinstance(request, CreatePoolRequest):
            return self.create_pool(
                seed=request.seed,
                asset_x=request.asset_x,
                asset_y=request.asset_y,
                fee_bps=request.fee_bps,
                authority=request.authority,
            )
        elif isinstance(request, DepositRequest):
            return self.deposit(
                request.pool_id, request.caller, request.lp_amount, request.max_x, request.max_y
            )
        elif isinstance(request, WithdrawRequest):
            return self.withdraw(
                request.pool_id, request.caller, request.lp_amount, request.min_x, request.min_y
            )
        elif isinstance(request, SwapRequest):
            return self.swap(
                request.pool_id,
                request.caller,
                SwapDirection.from_is_x(request.is_x),
                request.amount_in,
                request.min_out,
            )
        elif isinstance(request, SetLockedRequest):
            return self.set_locked(request.pool_id, request.caller, request.locked)
        else:
            raise TypeError(f"Unknown operation type: {type(request)}")


# Default engine shared by the API server
_default_engine: PoolEngine | None = None


def get_default_engine() -> PoolEngine:
    """Get the process-wide engine, creating it on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = PoolEngine()
    return _default_engine


__all__ = ["PoolEngine", "get_default_engine"]
