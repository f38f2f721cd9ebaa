"""Integer math primitives for the exchange.

- isqrt: integer square root (Babylonian / Newton iteration)
- UQ112x112: binary fixed-point ratios used by the price accumulators
"""

from exchange.math.sqrt import isqrt
from exchange.math.uq112x112 import Q112, encode, to_decimal, uqdiv

__all__ = ["Q112", "encode", "isqrt", "to_decimal", "uqdiv"]
