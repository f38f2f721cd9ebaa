"""Pytest configuration and fixtures."""

import pytest

from exchange.assets import ERC20Asset
from exchange.chain import Chain
from exchange.pools import ExchangePair, PoolRegistry
from tests.helpers import START_TIMESTAMP, WALLET, make_asset


@pytest.fixture
def chain() -> Chain:
    """Fresh chain with a fixed clock."""
    return Chain(timestamp=START_TIMESTAMP)


@pytest.fixture
def registry(chain: Chain) -> PoolRegistry:
    """Registry administered by WALLET."""
    return PoolRegistry(chain, administrator=WALLET)


@pytest.fixture
def token_a(chain: Chain) -> ERC20Asset:
    return make_asset(chain, "Token A")


@pytest.fixture
def token_b(chain: Chain) -> ERC20Asset:
    return make_asset(chain, "Token B")


@pytest.fixture
def pair(registry: PoolRegistry, token_a: ERC20Asset, token_b: ERC20Asset) -> ExchangePair:
    """Empty pool for (token_a, token_b)."""
    return registry.pair(registry.create_pool(token_a.address, token_b.address))


@pytest.fixture
def token0(chain: Chain, pair: ExchangePair) -> ERC20Asset:
    """The pool's lower-ordered asset."""
    return chain.contract_at(pair.token0)


@pytest.fixture
def token1(chain: Chain, pair: ExchangePair) -> ERC20Asset:
    """The pool's higher-ordered asset."""
    return chain.contract_at(pair.token1)
