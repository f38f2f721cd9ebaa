"""Pydantic models and shared types for the exchange read surface."""

from exchange.models.state import (
    BalanceResponse,
    NonceResponse,
    PoolListResponse,
    PoolState,
    PoolSummary,
)
from exchange.models.types import Address, Uint256, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    # Responses
    "PoolSummary",
    "PoolListResponse",
    "PoolState",
    "BalanceResponse",
    "NonceResponse",
]
