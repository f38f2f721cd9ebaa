"""Pool registry: one constant-product pool per unordered asset pair.

The registry canonicalizes each pair (lower address first), derives the pool
address deterministically from the registry address and the pair, deploys
the pool, and keeps an append-only list for enumeration. It also owns the
protocol fee configuration read by every pool it created.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog

from exchange.chain import Chain, Contract, atomic
from exchange.errors import Forbidden, PoolExists, UnknownPool
from exchange.events import PoolCreated
from exchange.models.types import ZERO_ADDRESS, normalize_address, sort_addresses
from exchange.pools.library import pool_address_for, sort_tokens
from exchange.pools.pair import ExchangePair

logger = structlog.get_logger()


@dataclass
class FeeConfig:
    """Protocol fee configuration owned by a registry.

    Attributes:
        administrator: Only identity allowed to change this configuration
        fee_recipient: Receiver of protocol-fee claims; ZERO_ADDRESS disables
            protocol fee collection
    """

    administrator: str
    fee_recipient: str = ZERO_ADDRESS

    @property
    def fee_on(self) -> bool:
        return self.fee_recipient != ZERO_ADDRESS


class PoolRegistry(Contract):
    """Creates and indexes pools.

    Args:
        chain: Chain to deploy on
        administrator: Initial fee administrator
        address: Registry address (default: derived from the label "PoolRegistry")
    """

    STATE_FIELDS: ClassVar[tuple[str, ...]] = ("_pools", "_all_pools", "fee_config")

    def __init__(self, chain: Chain, administrator: str, address: str | None = None) -> None:
        super().__init__(chain, address or chain.address_for("PoolRegistry"))
        self.fee_config = FeeConfig(administrator=normalize_address(administrator, validate=True))
        # Canonical (token0, token1) -> pool address
        self._pools: dict[tuple[str, str], str] = {}
        self._all_pools: list[str] = []

    # --- Fee configuration ---

    @property
    def fee_to(self) -> str:
        return self.fee_config.fee_recipient

    @property
    def administrator(self) -> str:
        return self.fee_config.administrator

    @atomic
    def set_fee_recipient(self, caller: str, recipient: str) -> None:
        """Change the protocol fee recipient (ZERO_ADDRESS turns the fee off).

        Raises:
            Forbidden: If ``caller`` is not the administrator
        """
        self._require_administrator(caller)
        self.fee_config.fee_recipient = normalize_address(recipient, validate=True)
        logger.info(
            "fee_recipient_set",
            registry=self.address,
            fee_to=self.fee_config.fee_recipient,
        )

    @atomic
    def set_administrator(self, caller: str, administrator: str) -> None:
        """Hand the fee configuration over to a new administrator.

        Raises:
            Forbidden: If ``caller`` is not the administrator
        """
        self._require_administrator(caller)
        self.fee_config.administrator = normalize_address(administrator, validate=True)
        logger.info(
            "administrator_set",
            registry=self.address,
            administrator=self.fee_config.administrator,
        )

    def _require_administrator(self, caller: str) -> None:
        if normalize_address(caller) != self.fee_config.administrator:
            raise Forbidden(f"{caller} is not the registry administrator")

    # --- Pools ---

    @atomic
    def create_pool(self, asset_a: str, asset_b: str) -> str:
        """Deploy the pool for an unordered asset pair.

        Raises:
            IdenticalAssets: If both assets are the same
            ZeroAsset: If either asset is the null identity
            PoolExists: If the pair already has a pool

        Returns:
            The new pool's address.
        """
        token0, token1 = sort_tokens(asset_a, asset_b)
        if (token0, token1) in self._pools:
            existing = self._pools[token0, token1]
            raise PoolExists(f"Pool for ({token0}, {token1}) exists at {existing}")

        address = pool_address_for(self.address, token0, token1)
        ExchangePair(self.chain, address, registry=self, token0=token0, token1=token1)
        self._pools[(token0, token1)] = address
        self._all_pools.append(address)

        index = len(self._all_pools)
        self.emit(
            PoolCreated(
                emitter=self.address, token0=token0, token1=token1, pool=address, index=index
            )
        )
        logger.info("pool_created", token0=token0, token1=token1, pool=address, index=index)
        return address

    def get_pool(self, asset_a: str, asset_b: str) -> str | None:
        """Pool address for an asset pair (order independent), or None."""
        return self._pools.get(sort_addresses(asset_a, asset_b))

    def pool_count(self) -> int:
        return len(self._all_pools)

    def pool_at(self, index: int) -> str:
        """Pool address by creation order.

        Raises:
            UnknownPool: If index is out of range
        """
        if not 0 <= index < len(self._all_pools):
            raise UnknownPool(f"No pool at index {index} (count {len(self._all_pools)})")
        return self._all_pools[index]

    def all_pools(self) -> list[str]:
        return list(self._all_pools)

    def pair(self, address: str) -> ExchangePair:
        """The pool contract at ``address``.

        Raises:
            UnknownPool: If no pool created by this registry lives there
        """
        address = normalize_address(address)
        contract = self.chain.contract_at(address)
        if not isinstance(contract, ExchangePair) or contract.registry is not self:
            raise UnknownPool(f"No pool at {address}")
        return contract

    def pair_for(self, asset_a: str, asset_b: str) -> ExchangePair:
        """The pool contract for an asset pair.

        Raises:
            UnknownPool: If the pair has no pool
        """
        address = self.get_pool(asset_a, asset_b)
        if address is None:
            raise UnknownPool(f"No pool for ({asset_a}, {asset_b})")
        return self.pair(address)
