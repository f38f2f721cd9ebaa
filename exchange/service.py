"""Process-wide registry used by the HTTP read surface."""

from __future__ import annotations

import functools
import os

import structlog

from exchange.chain import Chain
from exchange.constants import DEFAULT_CHAIN_ID
from exchange.pools.registry import PoolRegistry

logger = structlog.get_logger()


def _create_default_registry() -> PoolRegistry:
    """Create the registry served by the API.

    Configuration via environment variables:
    - EXCHANGE_CHAIN_ID: Chain id bound into permit domains (default: 31337)
    - EXCHANGE_ADMIN: Fee administrator address (default: derived from "admin")
    - EXCHANGE_FEE_TO: Initial protocol fee recipient (default: fee off)
    """
    chain = Chain(chain_id=int(os.environ.get("EXCHANGE_CHAIN_ID", str(DEFAULT_CHAIN_ID))))
    administrator = os.environ.get("EXCHANGE_ADMIN") or chain.address_for("admin")
    registry = PoolRegistry(chain, administrator=administrator)

    fee_to = os.environ.get("EXCHANGE_FEE_TO")
    if fee_to:
        registry.set_fee_recipient(administrator, fee_to)

    logger.info(
        "registry_created",
        chain_id=chain.chain_id,
        registry=registry.address,
        administrator=registry.administrator,
        fee_on=registry.fee_config.fee_on,
    )
    return registry


@functools.cache
def get_default_registry() -> PoolRegistry:
    return _create_default_registry()
