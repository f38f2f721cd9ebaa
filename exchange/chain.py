"""Serial execution context for exchange contracts.

The exchange is a single, globally ordered state machine: one call runs to
completion before the next begins. ``Chain`` makes that machine explicit. It
holds the block timestamp and chain id that contracts read, the set of
deployed contracts keyed by address, and the ordered event log.

Atomicity comes from ``Chain.transaction()``. Entering a transaction
snapshots the state of every deployed contract; if the body raises, every
contract is restored, contracts deployed inside the frame are removed, and
events emitted inside the frame are dropped. Transactions nest, so a caller
that catches an inner failure keeps its own changes.
"""

from __future__ import annotations

import copy
import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, ParamSpec, TypeVar

import structlog
from web3 import Web3

from exchange.constants import DEFAULT_CHAIN_ID
from exchange.events import Event
from exchange.models.types import normalize_address

logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")
E = TypeVar("E", bound=Event)


class Contract:
    """Base class for state that lives at an address on a Chain.

    Subclasses list the attributes that make up their persistent state in
    ``STATE_FIELDS``. Only those attributes are snapshotted and restored.
    """

    STATE_FIELDS: ClassVar[tuple[str, ...]] = ()

    def __init__(self, chain: Chain, address: str) -> None:
        self.chain = chain
        self.address = normalize_address(address, validate=True)
        chain.deploy(self)

    def snapshot(self) -> dict[str, Any]:
        return {name: copy.deepcopy(getattr(self, name)) for name in self.STATE_FIELDS}

    def restore(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)

    def emit(self, event: Event) -> None:
        self.chain.emit(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"


class Chain:
    """Execution context shared by all exchange contracts.

    Args:
        chain_id: Execution-context identifier bound into signature domains
        timestamp: Initial block timestamp in seconds (default: wall clock)
    """

    def __init__(self, chain_id: int = DEFAULT_CHAIN_ID, timestamp: int | None = None) -> None:
        self.chain_id = chain_id
        self.timestamp = int(time.time()) if timestamp is None else timestamp
        self._contracts: dict[str, Contract] = {}
        self._events: list[Event] = []
        self._depth = 0

    # --- Clock ---

    def advance(self, seconds: int) -> int:
        """Move the block timestamp forward and return the new value."""
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards: {seconds}")
        self.timestamp += seconds
        return self.timestamp

    def set_timestamp(self, timestamp: int) -> None:
        if timestamp < self.timestamp:
            raise ValueError(f"Timestamp {timestamp} is before current {self.timestamp}")
        self.timestamp = timestamp

    # --- Contracts ---

    @staticmethod
    def address_for(label: str) -> str:
        """Deterministic address for a human-readable label."""
        return "0x" + bytes(Web3.keccak(text=label))[-20:].hex()

    def deploy(self, contract: Contract) -> None:
        """Register a contract at its address.

        Raises:
            ValueError: If a contract is already deployed at that address
        """
        if contract.address in self._contracts:
            raise ValueError(f"Address already in use: {contract.address}")
        self._contracts[contract.address] = contract
        logger.debug(
            "contract_deployed",
            contract=type(contract).__name__,
            address=contract.address,
        )

    def contract_at(self, address: str) -> Contract | None:
        return self._contracts.get(normalize_address(address))

    # --- Events ---

    def emit(self, event: Event) -> None:
        self._events.append(event)

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    def events_of(self, event_type: type[E]) -> list[E]:
        """All logged events of the given type, oldest first."""
        return [e for e in self._events if isinstance(e, event_type)]

    # --- Transactions ---

    @property
    def depth(self) -> int:
        """Number of transaction frames currently open."""
        return self._depth

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the body atomically, restoring all contract state if it raises."""
        states = {address: c.snapshot() for address, c in self._contracts.items()}
        event_count = len(self._events)
        self._depth += 1
        try:
            yield
        except Exception as err:
            for address in [a for a in self._contracts if a not in states]:
                del self._contracts[address]
            for address, state in states.items():
                self._contracts[address].restore(state)
            del self._events[event_count:]
            logger.warning(
                "transaction_reverted",
                depth=self._depth,
                error=type(err).__name__,
                reason=str(err),
            )
            raise
        finally:
            self._depth -= 1


def atomic(method: Callable[P, R]) -> Callable[P, R]:
    """Run a Contract method inside a transaction on the contract's chain."""

    @functools.wraps(method)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        contract = args[0]
        if not isinstance(contract, Contract):
            raise TypeError(f"@atomic requires a Contract method, got {type(contract).__name__}")
        with contract.chain.transaction():
            return method(*args, **kwargs)

    return wrapper
