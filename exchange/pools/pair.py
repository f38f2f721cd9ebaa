"""Constant-product pool engine.

ExchangePair holds reserves of two assets and issues claim tokens against
them. It uses the constant product formula ``x * y = k`` with a 0.3% fee on
input amounts.

The pool never pulls funds. Callers transfer assets (or claim tokens) to the
pool first and then call ``mint`` / ``burn`` / ``swap``, which measure what
arrived by comparing actual balances against the stored reserves.

Every mutating call holds the pool lock and runs in a chain transaction:
re-entering a locked pool raises Reentrant, and any failure (including one
raised after the optimistic swap transfer) restores all state.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar, runtime_checkable

import structlog

from exchange.assets import Asset
from exchange.chain import Chain
from exchange.constants import (
    BURN_ADDRESS,
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    MINIMUM_LIQUIDITY,
    PROTOCOL_FEE_DIVISOR,
    UINT32_MODULUS,
    UINT112_MAX,
)
from exchange.errors import (
    InsufficientInitialLiquidity,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidRecipient,
    InvariantViolated,
    MissingCallback,
    Overflow,
    Reentrant,
    UnknownAsset,
)
from exchange.events import Burn, Mint, Swap, Sync
from exchange.ledger.claim_token import ClaimToken
from exchange.math import encode, isqrt, uqdiv
from exchange.models.types import ZERO_ADDRESS, normalize_address
from exchange.safe_int import S

if TYPE_CHECKING:
    from exchange.pools.registry import PoolRegistry

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


@runtime_checkable
class SwapCallee(Protocol):
    """Recipient that settles a flash swap.

    Called once, after the optimistic output transfer and before the
    invariant check. The callee must leave enough input in the pool for the
    swap to pass the check; it is untrusted and may re-enter or raise.
    """

    def exchange_call(self, sender: str, amount0: int, amount1: int, data: bytes) -> None: ...


def lock(method: F) -> F:
    """Hold the pool lock and a chain transaction for the duration of a call.

    Raises:
        Reentrant: If the pool is already executing a locked call
    """

    @functools.wraps(method)
    def wrapper(self: ExchangePair, *args: Any, **kwargs: Any) -> Any:
        if self._locked:
            raise Reentrant(f"{method.__name__} re-entered pool {self.address}")
        self._locked = True
        try:
            with self.chain.transaction():
                return method(self, *args, **kwargs)
        finally:
            self._locked = False

    return wrapper  # type: ignore[return-value]


class ExchangePair(ClaimToken):
    """Two-asset constant-product pool with an embedded claim ledger.

    Attributes:
        registry: Registry that created the pool (source of the fee recipient)
        token0: Lower-ordered asset address
        token1: Higher-ordered asset address
        reserve0: Recorded balance of token0 (uint112)
        reserve1: Recorded balance of token1 (uint112)
        block_timestamp_last: Timestamp of the last reserve update, mod 2**32
        price0_cumulative_last: Time integral of reserve1/reserve0 (UQ112x112, wraps)
        price1_cumulative_last: Time integral of reserve0/reserve1 (UQ112x112, wraps)
        k_last: reserve0 * reserve1 after the last supply change, while the
            protocol fee is on
    """

    STATE_FIELDS: ClassVar[tuple[str, ...]] = ClaimToken.STATE_FIELDS + (
        "reserve0",
        "reserve1",
        "block_timestamp_last",
        "price0_cumulative_last",
        "price1_cumulative_last",
        "k_last",
    )

    # Claims are returned to the pool itself for redemption
    ACCEPTS_OWN_ADDRESS: ClassVar[bool] = True

    MINIMUM_LIQUIDITY: ClassVar[int] = MINIMUM_LIQUIDITY

    def __init__(
        self,
        chain: Chain,
        address: str,
        registry: PoolRegistry,
        token0: str,
        token1: str,
    ) -> None:
        super().__init__(chain, address)
        self.registry = registry
        self.token0 = normalize_address(token0, validate=True)
        self.token1 = normalize_address(token1, validate=True)
        self.reserve0 = 0
        self.reserve1 = 0
        self.block_timestamp_last = 0
        self.price0_cumulative_last = 0
        self.price1_cumulative_last = 0
        self.k_last = 0
        self._locked = False

    # --- Read surface ---

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve0, reserve1, block_timestamp_last)."""
        return self.reserve0, self.reserve1, self.block_timestamp_last

    def price_accumulators(self) -> tuple[int, int]:
        """Return (price0_cumulative_last, price1_cumulative_last)."""
        return self.price0_cumulative_last, self.price1_cumulative_last

    @property
    def locked(self) -> bool:
        return self._locked

    # --- Internal helpers ---

    def _asset(self, token: str) -> Asset:
        contract = self.chain.contract_at(token)
        if not isinstance(contract, Asset):
            raise UnknownAsset(f"No asset deployed at {token}")
        return contract

    def _asset_balances(self) -> tuple[int, int]:
        return (
            self._asset(self.token0).balance_of(self.address),
            self._asset(self.token1).balance_of(self.address),
        )

    def _safe_transfer(self, token: str, to: str, value: int) -> None:
        self._asset(token).transfer(self.address, to, value)

    def _update(self, balance0: int, balance1: int, reserve0: int, reserve1: int) -> None:
        """Accumulate prices over the elapsed time, then store new reserves.

        Raises:
            Overflow: If a balance does not fit in uint112
        """
        if balance0 > UINT112_MAX or balance1 > UINT112_MAX:
            raise Overflow(f"Balances ({balance0}, {balance1}) exceed uint112")

        block_timestamp = self.chain.timestamp % UINT32_MODULUS
        # Wraps like uint32 subtraction
        time_elapsed = (block_timestamp - self.block_timestamp_last) % UINT32_MODULUS
        if time_elapsed > 0 and reserve0 != 0 and reserve1 != 0:
            self.price0_cumulative_last = (
                S(self.price0_cumulative_last)
                .wrapping_add(S(uqdiv(encode(reserve1), reserve0)).wrapping_mul(time_elapsed))
                .value
            )
            self.price1_cumulative_last = (
                S(self.price1_cumulative_last)
                .wrapping_add(S(uqdiv(encode(reserve0), reserve1)).wrapping_mul(time_elapsed))
                .value
            )

        self.reserve0 = balance0
        self.reserve1 = balance1
        self.block_timestamp_last = block_timestamp
        self.emit(Sync(emitter=self.address, reserve0=balance0, reserve1=balance1))

    def _mint_fee(self, reserve0: int, reserve1: int) -> bool:
        """Mint the protocol's share of fees accrued since k_last.

        The share is 1/6th of the growth in sqrt(k), paid as new claims so
        existing holders are diluted rather than debited.

        Returns:
            Whether protocol fee collection is on.
        """
        fee_to = self.registry.fee_to
        fee_on = fee_to != ZERO_ADDRESS
        k_last = self.k_last
        if fee_on:
            if k_last != 0:
                root_k = isqrt(S(reserve0) * reserve1)
                root_k_last = isqrt(k_last)
                if root_k > root_k_last:
                    numerator = S(self.total_supply) * (S(root_k) - root_k_last)
                    denominator = S(root_k) * PROTOCOL_FEE_DIVISOR + root_k_last
                    liquidity = (numerator // denominator).value
                    if liquidity > 0:
                        self._mint(fee_to, liquidity)
                        logger.info(
                            "protocol_fee_minted",
                            pool=self.address,
                            fee_to=fee_to,
                            liquidity=liquidity,
                        )
        elif k_last != 0:
            self.k_last = 0
        return fee_on

    # --- Mutating operations ---

    @lock
    def mint(self, to: str, *, sender: str | None = None) -> int:
        """Issue claims for the assets transferred in since the last update.

        Raises:
            InsufficientInitialLiquidity: If a first deposit cannot cover MINIMUM_LIQUIDITY
            InsufficientLiquidityMinted: If the deposit is worth zero claims

        Returns:
            Claims minted to ``to``.
        """
        to = normalize_address(to, validate=True)
        reserve0, reserve1, _ = self.get_reserves()
        balance0, balance1 = self._asset_balances()
        amount0 = (S(balance0) - reserve0).value
        amount1 = (S(balance1) - reserve1).value

        fee_on = self._mint_fee(reserve0, reserve1)
        # Read after _mint_fee, which can grow the supply
        total_supply = self.total_supply
        if total_supply == 0:
            root_k = isqrt(S(amount0) * amount1)
            if root_k <= MINIMUM_LIQUIDITY:
                raise InsufficientInitialLiquidity(
                    f"sqrt({amount0} * {amount1}) = {root_k} does not exceed {MINIMUM_LIQUIDITY}"
                )
            liquidity = root_k - MINIMUM_LIQUIDITY
            self._mint(BURN_ADDRESS, MINIMUM_LIQUIDITY)
        else:
            liquidity = min(
                (S(amount0) * total_supply // reserve0).value,
                (S(amount1) * total_supply // reserve1).value,
            )
            if liquidity == 0:
                raise InsufficientLiquidityMinted(
                    f"Deposit ({amount0}, {amount1}) mints no claims"
                )
        self._mint(to, liquidity)

        self._update(balance0, balance1, reserve0, reserve1)
        if fee_on:
            self.k_last = (S(self.reserve0) * self.reserve1).value

        self.emit(
            Mint(
                emitter=self.address,
                sender=normalize_address(sender) if sender else to,
                amount0=amount0,
                amount1=amount1,
            )
        )
        logger.info(
            "liquidity_minted",
            pool=self.address,
            to=to,
            amount0=amount0,
            amount1=amount1,
            liquidity=liquidity,
        )
        return liquidity

    @lock
    def burn(self, to: str, *, sender: str | None = None) -> tuple[int, int]:
        """Redeem the claims held by the pool for a proportional share of reserves.

        Raises:
            InsufficientLiquidityBurned: If either redeemed amount is zero

        Returns:
            (amount0, amount1) sent to ``to``.
        """
        to = normalize_address(to, validate=True)
        reserve0, reserve1, _ = self.get_reserves()
        liquidity = self.balance_of(self.address)

        fee_on = self._mint_fee(reserve0, reserve1)
        total_supply = self.total_supply
        if total_supply == 0:
            raise InsufficientLiquidityBurned("Pool has no claim supply")
        amount0 = (S(liquidity) * reserve0 // total_supply).value
        amount1 = (S(liquidity) * reserve1 // total_supply).value
        if amount0 == 0 or amount1 == 0:
            raise InsufficientLiquidityBurned(
                f"Redeeming {liquidity} claims yields ({amount0}, {amount1})"
            )

        self._burn(self.address, liquidity)
        self._safe_transfer(self.token0, to, amount0)
        self._safe_transfer(self.token1, to, amount1)

        balance0, balance1 = self._asset_balances()
        self._update(balance0, balance1, reserve0, reserve1)
        if fee_on:
            self.k_last = (S(self.reserve0) * self.reserve1).value

        self.emit(
            Burn(
                emitter=self.address,
                sender=normalize_address(sender) if sender else to,
                amount0=amount0,
                amount1=amount1,
                to=to,
            )
        )
        logger.info(
            "liquidity_burned",
            pool=self.address,
            to=to,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
        )
        return amount0, amount1

    def deposit(self, to: str, *, sender: str | None = None) -> int:
        """Alias of :meth:`mint`."""
        return self.mint(to, sender=sender)

    def withdraw(self, to: str, *, sender: str | None = None) -> tuple[int, int]:
        """Alias of :meth:`burn`."""
        return self.burn(to, sender=sender)

    @lock
    def swap(
        self,
        amount0_out: int,
        amount1_out: int,
        to: str,
        data: bytes = b"",
        *,
        sender: str | None = None,
    ) -> tuple[int, int]:
        """Send the requested outputs, then check the fee-adjusted invariant.

        Outputs are transferred before inputs are measured. When ``data`` is
        non-empty the recipient's ``exchange_call`` runs in between, which
        lets it use the outputs and repay within the same call.

        Raises:
            InsufficientOutputAmount: If both outputs are zero
            InsufficientLiquidity: If an output is not below its reserve
            InvalidRecipient: If ``to`` is one of the pool's assets
            MissingCallback: If ``data`` is set but ``to`` is not a SwapCallee
            InsufficientInputAmount: If nothing was paid in
            InvariantViolated: If the fee-adjusted product fell below k

        Returns:
            (amount0_in, amount1_in) measured by the pool.
        """
        amount0_out = S(amount0_out).value
        amount1_out = S(amount1_out).value
        if amount0_out == 0 and amount1_out == 0:
            raise InsufficientOutputAmount("Swap requests no output")
        reserve0, reserve1, _ = self.get_reserves()
        if amount0_out >= reserve0 or amount1_out >= reserve1:
            raise InsufficientLiquidity(
                f"Outputs ({amount0_out}, {amount1_out}) exceed reserves ({reserve0}, {reserve1})"
            )

        to = normalize_address(to, validate=True)
        if to in (self.token0, self.token1):
            raise InvalidRecipient(f"Swap recipient {to} is a pool asset")
        caller = normalize_address(sender) if sender else to

        # Optimistic transfer
        if amount0_out > 0:
            self._safe_transfer(self.token0, to, amount0_out)
        if amount1_out > 0:
            self._safe_transfer(self.token1, to, amount1_out)
        if data:
            callee = self.chain.contract_at(to)
            if not isinstance(callee, SwapCallee):
                raise MissingCallback(f"Recipient {to} cannot settle a flash swap")
            callee.exchange_call(caller, amount0_out, amount1_out, data)

        balance0, balance1 = self._asset_balances()
        amount0_in = S(balance0).saturating_sub(reserve0 - amount0_out).value
        amount1_in = S(balance1).saturating_sub(reserve1 - amount1_out).value
        if amount0_in == 0 and amount1_in == 0:
            raise InsufficientInputAmount("Swap received no input")

        balance0_adjusted = S(balance0) * FEE_DENOMINATOR - S(amount0_in) * FEE_NUMERATOR
        balance1_adjusted = S(balance1) * FEE_DENOMINATOR - S(amount1_in) * FEE_NUMERATOR
        if balance0_adjusted * balance1_adjusted < S(reserve0) * reserve1 * FEE_DENOMINATOR**2:
            raise InvariantViolated(
                f"Swap out ({amount0_out}, {amount1_out}) for in ({amount0_in}, {amount1_in}) "
                f"decreases k"
            )

        self._update(balance0, balance1, reserve0, reserve1)
        self.emit(
            Swap(
                emitter=self.address,
                sender=caller,
                amount0_in=amount0_in,
                amount1_in=amount1_in,
                amount0_out=amount0_out,
                amount1_out=amount1_out,
                to=to,
            )
        )
        logger.debug(
            "swap_executed",
            pool=self.address,
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
            flash=bool(data),
        )
        return amount0_in, amount1_in

    @lock
    def skim(self, to: str) -> tuple[int, int]:
        """Send balances held above the reserves to ``to``.

        Returns:
            (excess0, excess1) transferred.
        """
        to = normalize_address(to, validate=True)
        balance0, balance1 = self._asset_balances()
        excess0 = S(balance0).saturating_sub(self.reserve0).value
        excess1 = S(balance1).saturating_sub(self.reserve1).value
        if excess0:
            self._safe_transfer(self.token0, to, excess0)
        if excess1:
            self._safe_transfer(self.token1, to, excess1)
        logger.debug("pool_skimmed", pool=self.address, to=to, excess0=excess0, excess1=excess1)
        return excess0, excess1

    @lock
    def sync(self) -> None:
        """Force the reserves to match the balances the pool holds."""
        balance0, balance1 = self._asset_balances()
        self._update(balance0, balance1, self.reserve0, self.reserve1)
