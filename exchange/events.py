"""Events emitted by exchange contracts.

Events are appended to the chain's ordered log. Events emitted inside a
transaction that reverts are removed together with the state changes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Event:
    """Base class; ``emitter`` is the address of the emitting contract."""

    emitter: str


@dataclass(frozen=True)
class Transfer(Event):
    sender: str
    to: str
    value: int


@dataclass(frozen=True)
class Approval(Event):
    owner: str
    spender: str
    value: int


@dataclass(frozen=True)
class Mint(Event):
    """Claims issued against a deposit of ``amount0`` and ``amount1``."""

    sender: str
    amount0: int
    amount1: int


@dataclass(frozen=True)
class Burn(Event):
    """Claims redeemed for ``amount0`` and ``amount1`` sent to ``to``."""

    sender: str
    amount0: int
    amount1: int
    to: str


@dataclass(frozen=True)
class Swap(Event):
    sender: str
    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int
    to: str


@dataclass(frozen=True)
class Sync(Event):
    """Reserves after a reserve-changing operation."""

    reserve0: int
    reserve1: int


@dataclass(frozen=True)
class PoolCreated(Event):
    token0: str
    token1: str
    pool: str
    index: int
