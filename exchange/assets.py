"""Assets a pool can hold.

A pool only needs two capabilities from each of its assets: reading the
balance of a holder and moving tokens the pool itself holds. It never pulls
funds from other holders; deposits are measured as balance deltas.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from exchange.chain import Chain
from exchange.ledger.erc20 import ERC20
from exchange.models.types import normalize_address


@runtime_checkable
class Asset(Protocol):
    """Transfer interface the pool engine depends on."""

    address: str

    def balance_of(self, holder: str) -> int: ...

    def transfer(self, sender: str, to: str, value: int) -> bool: ...


class ERC20Asset(ERC20):
    """Plain fungible token with a fixed supply minted at deployment.

    Args:
        chain: Chain to deploy on
        name: Token name; also seeds the deterministic address
        symbol: Token symbol
        initial_supply: Amount minted to ``holder``
        holder: Recipient of the initial supply
        decimals: Display decimals
        address: Explicit address (default: derived from ``name``)
    """

    def __init__(
        self,
        chain: Chain,
        name: str,
        symbol: str,
        initial_supply: int,
        holder: str,
        decimals: int = 18,
        address: str | None = None,
    ) -> None:
        super().__init__(
            chain,
            address or chain.address_for(f"asset:{name}"),
            name=name,
            symbol=symbol,
            decimals=decimals,
        )
        if initial_supply:
            self._mint(normalize_address(holder, validate=True), initial_supply)
