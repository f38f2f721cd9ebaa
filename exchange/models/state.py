"""Pydantic models for the exchange read surface.

Field names are snake_case in Python and camelCase on the wire. Amounts and
accumulators are uint256 decimal strings so they survive JSON clients that
parse numbers as doubles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from exchange.models.types import Address, Uint256

if TYPE_CHECKING:
    from exchange.pools.pair import ExchangePair


class PoolSummary(BaseModel):
    """A registered pool and its assets."""

    address: Address
    token0: Address
    token1: Address
    index: int | None = Field(default=None, description="Position in creation order.")

    model_config = {"populate_by_name": True}


class PoolListResponse(BaseModel):
    """All pools of a registry in creation order."""

    count: int
    pools: list[Address]


class PoolState(BaseModel):
    """Reserves, accumulators and supply of one pool."""

    address: Address
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    block_timestamp_last: int = Field(alias="blockTimestampLast")
    price0_cumulative_last: Uint256 = Field(alias="price0CumulativeLast")
    price1_cumulative_last: Uint256 = Field(alias="price1CumulativeLast")
    k_last: Uint256 = Field(alias="kLast")
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pair(cls, pair: ExchangePair) -> PoolState:
        reserve0, reserve1, block_timestamp_last = pair.get_reserves()
        price0_cumulative, price1_cumulative = pair.price_accumulators()
        return cls(
            address=pair.address,
            token0=pair.token0,
            token1=pair.token1,
            reserve0=reserve0,
            reserve1=reserve1,
            block_timestamp_last=block_timestamp_last,
            price0_cumulative_last=price0_cumulative,
            price1_cumulative_last=price1_cumulative,
            k_last=pair.k_last,
            total_supply=pair.total_supply,
        )


class BalanceResponse(BaseModel):
    """Claim-token balance of one holder."""

    pool: Address
    holder: Address
    balance: Uint256


class NonceResponse(BaseModel):
    """Next permit nonce of one owner."""

    pool: Address
    owner: Address
    nonce: int
