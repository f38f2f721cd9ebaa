"""UQ112x112 binary fixed-point numbers.

A UQ112x112 value is an unsigned integer whose low 112 bits are the
fraction. Reserves are capped at uint112, so ``encode(reserve) // reserve``
never loses the integer part and a reserve ratio always fits in 224 bits.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from exchange.safe_int import S

Q112 = 2**112

# Enough digits for a 224-bit integer part plus the requested fraction
_DECIMAL_PRECISION = 100


def encode(y: int) -> int:
    """Encode a uint112 as a UQ112x112.

    Raises:
        UintOverflow: If y does not fit in 112 bits
    """
    return (S(S(y).to_uint(112)) * Q112).value


def uqdiv(x: int, y: int) -> int:
    """Divide a UQ112x112 by a uint112, returning a UQ112x112.

    Raises:
        DivisionByZero: If y is zero
    """
    return (S(x) // S(S(y).to_uint(112))).value


def to_decimal(x: int, places: int = 18) -> Decimal:
    """Render a UQ112x112 as a Decimal, quantized to ``places`` digits."""
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return (Decimal(x) / Decimal(Q112)).quantize(Decimal(1).scaleb(-places))
