"""Tests for UQ112x112 fixed-point helpers."""

from decimal import Decimal

import pytest

from exchange.math import Q112, encode, to_decimal, uqdiv
from exchange.safe_int import DivisionByZero, UintOverflow


class TestEncode:
    def test_encode_shifts_by_112_bits(self):
        assert encode(1) == Q112
        assert encode(5) == 5 * 2**112

    def test_encode_rejects_values_wider_than_uint112(self):
        with pytest.raises(UintOverflow):
            encode(2**112)


class TestUqdiv:
    def test_ratio(self):
        """encode(reserve1) / reserve0 is the price of token0 in token1."""
        assert uqdiv(encode(200), 100) == 2 * Q112
        assert uqdiv(encode(100), 200) == Q112 // 2

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            uqdiv(encode(1), 0)

    def test_largest_ratio_fits_in_224_bits(self):
        assert uqdiv(encode(2**112 - 1), 1) < 2**224


class TestToDecimal:
    def test_whole_and_fractional_values(self):
        assert to_decimal(2 * Q112) == Decimal("2.000000000000000000")
        assert to_decimal(Q112 // 4, places=2) == Decimal("0.25")
