"""API endpoints for the exchange read surface."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from exchange.models.state import (
    BalanceResponse,
    NonceResponse,
    PoolListResponse,
    PoolState,
    PoolSummary,
)
from exchange.models.types import normalize_address
from exchange.pools.registry import PoolRegistry
from exchange.service import get_default_registry

logger = structlog.get_logger()

router = APIRouter()


def get_registry() -> PoolRegistry:
    """Dependency provider for the registry instance.

    Override this in tests to inject a populated registry:
        app.dependency_overrides[get_registry] = lambda: registry
    """
    return get_default_registry()


def _address(value: str) -> str:
    """Normalize a path address, rejecting malformed input with 422."""
    try:
        return normalize_address(value, validate=True)
    except ValueError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err


@router.get("/pools")
async def list_pools(registry: PoolRegistry = Depends(get_registry)) -> PoolListResponse:
    """All pools in creation order."""
    return PoolListResponse(count=registry.pool_count(), pools=registry.all_pools())


@router.get("/pools/{index}")
async def pool_at(index: int, registry: PoolRegistry = Depends(get_registry)) -> PoolSummary:
    """Pool by creation index. Unknown indexes return 404."""
    pair = registry.pair(registry.pool_at(index))
    return PoolSummary(address=pair.address, token0=pair.token0, token1=pair.token1, index=index)


@router.get("/pairs/{asset_a}/{asset_b}")
async def get_pair(
    asset_a: str,
    asset_b: str,
    registry: PoolRegistry = Depends(get_registry),
) -> PoolSummary:
    """Pool for an unordered asset pair."""
    address = registry.get_pool(_address(asset_a), _address(asset_b))
    if address is None:
        logger.debug("pair_not_found", asset_a=asset_a, asset_b=asset_b)
        raise HTTPException(status_code=404, detail="Pair not found")
    pair = registry.pair(address)
    return PoolSummary(address=pair.address, token0=pair.token0, token1=pair.token1)


@router.get("/pools/{address}/state", response_model_by_alias=True)
async def pool_state(address: str, registry: PoolRegistry = Depends(get_registry)) -> PoolState:
    """Reserves, price accumulators, k_last and claim supply."""
    return PoolState.from_pair(registry.pair(_address(address)))


@router.get("/pools/{address}/balances/{holder}")
async def claim_balance(
    address: str,
    holder: str,
    registry: PoolRegistry = Depends(get_registry),
) -> BalanceResponse:
    pair = registry.pair(_address(address))
    holder = _address(holder)
    return BalanceResponse(pool=pair.address, holder=holder, balance=pair.balance_of(holder))


@router.get("/pools/{address}/nonces/{owner}")
async def permit_nonce(
    address: str,
    owner: str,
    registry: PoolRegistry = Depends(get_registry),
) -> NonceResponse:
    pair = registry.pair(_address(address))
    owner = _address(owner)
    return NonceResponse(pool=pair.address, owner=owner, nonce=pair.nonces(owner))
