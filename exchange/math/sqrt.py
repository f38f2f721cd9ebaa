"""Integer square root.

Newton's method over plain ints, matching the Babylonian method used on-chain
for the first-deposit liquidity and the protocol-fee computation. The result
is always ``floor(sqrt(y))``.
"""

from __future__ import annotations

from exchange.safe_int import S, SafeInt


def isqrt(y: int | SafeInt) -> int:
    """Return floor(sqrt(y)) for a uint256 ``y``.

    Raises:
        Underflow: If y is negative
        Uint256Overflow: If y exceeds 2**256 - 1
    """
    y = S(y).value
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0
