"""Safe integer wrapper for arithmetic on reserves, fees and shares.

This module provides SafeInt, a lightweight wrapper that makes arithmetic
on pool amounts fail loudly instead of wrapping or truncating:
- Division by zero raises DivisionByZero
- Subtraction underflow raises Underflow
- Values wider than u64 (or u128 for intermediates) raise Overflow on
  conversion

Usage pattern:
    from cpamm.safe_int import S

    def quote(reserve: int, amount: int, supply: int) -> int:
        # Wrap at entry
        sr, sa, ss = S(reserve), S(amount), S(supply)

        # Intermediate product checked against the u128 width
        product = (sr * sa).checked_u128()

        # Unwrap at exit, validating the u64 output width
        return (product // ss).to_u64()
"""

from __future__ import annotations

from cpamm.constants import U64_MAX, U128_MAX


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class Overflow(SafeIntError):
    """Value does not fit the target integer width."""

    pass


class SafeInt:
    """Non-negative integer with checked arithmetic.

    Wraps an integer and provides arithmetic operators that raise
    descriptive errors instead of producing invalid results:
    - Negative values are rejected at construction
    - Division by zero raises DivisionByZero
    - Negative results from subtraction raise Underflow
    - Values exceeding the ledger widths raise Overflow on to_u64()/to_u128()

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Args:
            value: Non-negative integer value to wrap, or SafeInt to copy

        Raises:
            TypeError: If value is not an int or SafeInt (bool is rejected)
            Underflow: If value is negative
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            if value < 0:
                raise Underflow(f"Negative amount: {value}")
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division (rounds down).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __truediv__(self, other: object) -> SafeInt:
        raise TypeError("SafeInt does not support true division; use // or ceiling_div")

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    # --- Named operations ---

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Ceiling division (rounds up).

        Equivalent to: (self + other - 1) // other

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt((self._value + other_val - 1) // other_val)

    def checked_u128(self) -> SafeInt:
        """Return self, validating that it fits an unsigned 128-bit width.

        Raises:
            Overflow: If value exceeds 2^128-1
        """
        if self._value > U128_MAX:
            raise Overflow(f"Value exceeds u128 max: {self._value}")
        return self

    def to_u64(self) -> int:
        """Convert to int, validating u64 bounds.

        Raises:
            Overflow: If value exceeds 2^64-1
        """
        if self._value > U64_MAX:
            raise Overflow(f"Value exceeds u64 max: {self._value}")
        return self._value

    def to_u128(self) -> int:
        """Convert to int, validating u128 bounds."""
        return self.checked_u128()._value

    def is_u64(self) -> bool:
        """Check if value fits in u64 without raising."""
        return self._value <= U64_MAX

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
