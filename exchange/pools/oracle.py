"""Time-weighted average prices from pool accumulators.

A pool's price accumulators are running time integrals of its reserve
ratios. Sampling them twice and dividing the difference by the elapsed time
gives the time-weighted average price over that window. Timestamps wrap at
2**32 and accumulators at 2**256; both differences are taken modulo those
widths, so a single wrap inside the window is harmless.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from exchange.constants import UINT32_MODULUS, UINT256_MODULUS
from exchange.math import Q112, encode, to_decimal, uqdiv
from exchange.pools.pair import ExchangePair
from exchange.safe_int import S


@dataclass(frozen=True)
class PriceObservation:
    """Accumulator sample at a uint32 timestamp."""

    timestamp: int
    price0_cumulative: int
    price1_cumulative: int


@dataclass(frozen=True)
class AveragePrice:
    """Average prices over a window, as UQ112x112 values.

    Attributes:
        price0: token1 per token0
        price1: token0 per token1
        elapsed: Window length in seconds
    """

    price0: int
    price1: int
    elapsed: int

    def price0_decimal(self, places: int = 18) -> Decimal:
        return to_decimal(self.price0, places)

    def price1_decimal(self, places: int = 18) -> Decimal:
        return to_decimal(self.price1, places)

    def consult(self, amount_in: int, *, zero_for_one: bool) -> int:
        """Convert an amount at the average price.

        Args:
            amount_in: Amount of the input asset
            zero_for_one: True to price token0 in token1, False for the reverse
        """
        price = self.price0 if zero_for_one else self.price1
        return (S(price) * amount_in // Q112).value


def current_cumulative_prices(pair: ExchangePair) -> PriceObservation:
    """Accumulators as they would read if the pool updated right now.

    Adds the counterfactual accumulation since the last update without
    mutating the pool.
    """
    block_timestamp = pair.chain.timestamp % UINT32_MODULUS
    price0_cumulative, price1_cumulative = pair.price_accumulators()
    reserve0, reserve1, block_timestamp_last = pair.get_reserves()

    if block_timestamp_last != block_timestamp and reserve0 != 0 and reserve1 != 0:
        time_elapsed = (block_timestamp - block_timestamp_last) % UINT32_MODULUS
        price0_cumulative = (
            S(price0_cumulative)
            .wrapping_add(S(uqdiv(encode(reserve1), reserve0)).wrapping_mul(time_elapsed))
            .value
        )
        price1_cumulative = (
            S(price1_cumulative)
            .wrapping_add(S(uqdiv(encode(reserve0), reserve1)).wrapping_mul(time_elapsed))
            .value
        )

    return PriceObservation(block_timestamp, price0_cumulative, price1_cumulative)


def average_price(start: PriceObservation, end: PriceObservation) -> AveragePrice:
    """Time-weighted average between two observations.

    Raises:
        ValueError: If both observations share a timestamp
    """
    elapsed = (end.timestamp - start.timestamp) % UINT32_MODULUS
    if elapsed == 0:
        raise ValueError("Observations must be taken at different timestamps")
    price0 = ((end.price0_cumulative - start.price0_cumulative) % UINT256_MODULUS) // elapsed
    price1 = ((end.price1_cumulative - start.price1_cumulative) % UINT256_MODULUS) // elapsed
    return AveragePrice(price0=price0, price1=price1, elapsed=elapsed)
