"""Shared type definitions for the operation contract."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from cpamm.constants import U16_MAX, U64_MAX


def _validate_unsigned(value: Any, limit: int, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got bool")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"{name} must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"{name} must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative: {value}")
    if value > limit:
        raise ValueError(f"{name} overflow: {value} > {limit}")
    return value


def validate_u64(value: Any) -> int:
    """Validate that a value is an unsigned 64-bit integer.

    Accepts ints and decimal strings (large amounts are commonly sent as
    strings to survive JSON number precision limits).

    Raises:
        ValueError: If value is not a non-negative integer within u64 range
    """
    return _validate_unsigned(value, U64_MAX, "U64")


def validate_u16(value: Any) -> int:
    """Validate that a value is an unsigned 16-bit integer."""
    return _validate_unsigned(value, U16_MAX, "U16")


# 64-bit unsigned amount (int or decimal string on the wire)
U64 = Annotated[
    int,
    BeforeValidator(validate_u64),
    Field(description="64-bit unsigned integer"),
]

# 16-bit unsigned integer (fee in basis points)
U16 = Annotated[
    int,
    BeforeValidator(validate_u16),
    Field(description="16-bit unsigned integer"),
]

# Opaque identifier of an asset type or a caller
AssetId = Annotated[str, Field(min_length=1, max_length=128)]
Identity = Annotated[str, Field(min_length=1, max_length=128)]

# Pool identity (sha256 digest, 0x-prefixed)
PoolId = Annotated[str, Field(pattern=r"^0x[a-f0-9]{64}$")]
