"""Constant-product pools and the registry that creates them."""

from exchange.pools.library import (
    get_amount_in,
    get_amount_out,
    pool_address_for,
    quote,
    sort_tokens,
)
from exchange.pools.oracle import (
    AveragePrice,
    PriceObservation,
    average_price,
    current_cumulative_prices,
)
from exchange.pools.pair import ExchangePair, SwapCallee
from exchange.pools.registry import FeeConfig, PoolRegistry

__all__ = [
    # Engine
    "ExchangePair",
    "SwapCallee",
    # Registry
    "PoolRegistry",
    "FeeConfig",
    # Library
    "sort_tokens",
    "pool_address_for",
    "quote",
    "get_amount_out",
    "get_amount_in",
    # Oracle
    "PriceObservation",
    "AveragePrice",
    "current_cumulative_prices",
    "average_price",
]
