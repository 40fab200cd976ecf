"""Engine configuration."""

from dataclasses import dataclass

from cpamm.constants import MINIMUM_LIQUIDITY, U64_MAX


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for the pool engine.

    Attributes:
        minimum_liquidity: Smallest LP amount a first deposit may mint
            (default: 1,000). First deposits below it are rejected.
        amount_limit: Largest value any reserve, supply or transfer amount
            may take (default: u64 max).
    """

    minimum_liquidity: int = MINIMUM_LIQUIDITY
    amount_limit: int = U64_MAX


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
