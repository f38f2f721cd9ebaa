"""Checked unsigned integer arithmetic for token amounts.

This module provides SafeInt, a lightweight uint256 wrapper whose operators
behave like checked EVM arithmetic:
- Subtraction underflow raises Underflow
- Addition or multiplication past 2**256 - 1 raises Uint256Overflow
- Division by zero raises DivisionByZero

Wrapping arithmetic (needed by the price accumulators, which are allowed to
overflow) is available through the explicit ``wrapping_*`` methods.

Usage pattern:
    from exchange.safe_int import S

    def proportional(amount: int, supply: int, reserve: int) -> int:
        return (S(amount) * supply // reserve).value
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1
_UINT256_MODULUS = 2**256


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Result would be negative."""

    pass


class Uint256Overflow(SafeIntError):
    """Result exceeds the uint256 maximum."""

    pass


class UintOverflow(SafeIntError):
    """Value does not fit in the requested unsigned width."""

    pass


class SafeInt:
    """Unsigned 256-bit integer with checked arithmetic.

    Construction validates the range, so every SafeInt in existence holds a
    value in ``[0, 2**256 - 1]``. Operators accept SafeInt or plain int
    operands and always return a new SafeInt.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
            Underflow: If value is negative
            Uint256Overflow: If value exceeds 2**256 - 1
        """
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"Negative value cannot be uint256: {value}")
        if value > UINT256_MAX:
            raise Uint256Overflow(f"Value exceeds uint256 max: {value}")
        self._value = value

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

    # --- Checked arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        result = self._value + _extract_value(other)
        if result > UINT256_MAX:
            raise Uint256Overflow(f"Overflow: {self._value} + {_extract_value(other)}")
        return SafeInt(result)

    def __radd__(self, other: int) -> SafeInt:
        return self.__add__(other)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
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
        result = self._value * _extract_value(other)
        if result > UINT256_MAX:
            raise Uint256Overflow(f"Overflow: {self._value} * {_extract_value(other)}")
        return SafeInt(result)

    def __rmul__(self, other: int) -> SafeInt:
        return self.__mul__(other)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeInt(other // self._value)

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Modulo by zero: {self._value} % 0")
        return SafeInt(self._value % other_val)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

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
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))

    def max(self, other: SafeInt | int) -> SafeInt:
        """Return maximum of self and other."""
        return SafeInt(max(self._value, _extract_value(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, clamping the result at zero instead of raising."""
        return SafeInt(max(0, self._value - _extract_value(other)))

    def wrapping_add(self, other: SafeInt | int) -> SafeInt:
        """Add modulo 2**256."""
        return SafeInt((self._value + _extract_value(other)) % _UINT256_MODULUS)

    def wrapping_mul(self, other: SafeInt | int) -> SafeInt:
        """Multiply modulo 2**256."""
        return SafeInt((self._value * _extract_value(other)) % _UINT256_MODULUS)

    def fits(self, bits: int) -> bool:
        """Check if the value fits in an unsigned integer of the given width."""
        return self._value < (1 << bits)

    def to_uint(self, bits: int) -> int:
        """Convert to int, validating it fits in ``bits`` unsigned bits.

        Raises:
            UintOverflow: If the value needs more than ``bits`` bits
        """
        if not self.fits(bits):
            raise UintOverflow(f"Value exceeds uint{bits} max: {self._value}")
        return self._value

    @classmethod
    def zero(cls) -> SafeInt:
        """Create a SafeInt with value 0."""
        return cls(0)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
