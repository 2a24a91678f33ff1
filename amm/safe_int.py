"""Checked integer arithmetic for reserves, shares and trade amounts.

Every quantity the engine stores is an unsigned 256-bit integer. Python ints
never overflow, so intermediate products such as amount * reserve are kept
exact; only values that leave a computation are bounded:

- `//` by zero raises DivisionByZero instead of ZeroDivisionError
- a subtraction below zero raises Underflow
- `to_uint256()` raises Uint256Overflow outside [0, 2**256 - 1]

Example:
    from amm.safe_int import S

    shares = (S(amount0) * S(total) // S(reserve0)).to_uint256()
"""

from __future__ import annotations

import math

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Arithmetic on pool quantities failed."""


class DivisionByZero(SafeIntError):
    """Divisor was zero."""


class Underflow(SafeIntError):
    """Result would be negative."""


class Uint256Overflow(SafeIntError):
    """Result does not fit in an unsigned 256-bit integer."""


def _extract_value(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


class SafeInt:
    """Immutable integer whose failure modes raise SafeIntError subclasses.

    Attributes:
        value: Wrapped int
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._value
        # bool is an int subclass; a True amount is always a caller bug
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Expected an int amount, got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"S({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    # arithmetic

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    __radd__ = __add__

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    __rmul__ = __mul__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Difference, never negative.

        Raises:
            Underflow: If other is larger than self
        """
        subtrahend = _extract_value(other)
        if subtrahend > self._value:
            raise Underflow(f"{self._value} - {subtrahend} is negative")
        return SafeInt(self._value - subtrahend)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Division truncated toward negative infinity (toward zero for amounts).

        Raises:
            DivisionByZero: If other is zero
        """
        divisor = _extract_value(other)
        if divisor == 0:
            raise DivisionByZero(f"{self._value} // 0")
        return SafeInt(self._value // divisor)

    # comparisons accept plain ints on either side

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _extract_value(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _extract_value(other)))

    def sqrt(self) -> SafeInt:
        """Floor of the square root.

        Raises:
            Underflow: If the value is negative
        """
        if self._value < 0:
            raise Underflow(f"sqrt of negative value {self._value}")
        return SafeInt(math.isqrt(self._value))

    def to_uint256(self) -> int:
        """Unwrap, checking the value is storable as a uint256.

        Raises:
            Uint256Overflow: If the value is negative or above UINT256_MAX
        """
        if not 0 <= self._value <= UINT256_MAX:
            raise Uint256Overflow(f"{self._value} is outside the uint256 range")
        return self._value


S = SafeInt
