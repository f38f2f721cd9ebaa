"""Tests for SafeInt checked uint256 arithmetic."""

import pytest

from exchange.safe_int import (
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    UintOverflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_negative_rejected(self):
        """Unsigned values cannot be negative."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_above_max_rejected(self):
        with pytest.raises(Uint256Overflow):
            SafeInt(UINT256_MAX + 1)

    def test_max_accepted(self):
        assert SafeInt(UINT256_MAX).value == UINT256_MAX

    def test_invalid_types_rejected(self):
        """Strings, floats and bools are not integers here."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_and_zero(self):
        assert S is SafeInt
        assert SafeInt.zero() == 0


class TestCheckedArithmetic:
    """Operators raise instead of wrapping."""

    def test_add(self):
        assert (S(2) + 3).value == 5
        assert (3 + S(2)).value == 5

    def test_add_overflow(self):
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX) + 1

    def test_sub_underflow(self):
        with pytest.raises(Underflow):
            S(1) - 2
        with pytest.raises(Underflow):
            1 - S(2)

    def test_mul_overflow(self):
        with pytest.raises(Uint256Overflow):
            S(2**128) * 2**128

    def test_floordiv(self):
        assert (S(7) // 2).value == 3
        assert (7 // S(2)).value == 3

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(1) // 0
        with pytest.raises(DivisionByZero):
            1 // S(0)
        with pytest.raises(DivisionByZero):
            S(1) % 0

    def test_errors_are_arithmetic_errors(self):
        """Callers can catch every SafeInt failure as ArithmeticError."""
        assert issubclass(SafeIntError, ArithmeticError)
        for err in (DivisionByZero, Underflow, Uint256Overflow, UintOverflow):
            assert issubclass(err, SafeIntError)


class TestNamedOperations:
    """Tests for saturating, wrapping and width helpers."""

    def test_saturating_sub_clamps(self):
        assert S(5).saturating_sub(7) == 0
        assert S(7).saturating_sub(5) == 2

    def test_wrapping_add(self):
        assert S(UINT256_MAX).wrapping_add(2) == 1

    def test_wrapping_mul(self):
        assert S(2**255).wrapping_mul(2) == 0
        assert S(2**255 + 1).wrapping_mul(2) == 2

    def test_min_max(self):
        assert S(3).min(5) == 3
        assert S(3).max(5) == 5

    def test_to_uint(self):
        assert S(2**112 - 1).to_uint(112) == 2**112 - 1
        with pytest.raises(UintOverflow):
            S(2**112).to_uint(112)

    def test_comparisons_mix_int_and_safeint(self):
        assert S(1) < 2
        assert S(2) >= S(2)
        assert S(3) != 4
        assert S(3) == S(3)
