"""Exchange error classes.

Each error carries the revert reason the on-chain exchange reports for the
same condition. Errors are never retried internally; the execution context
rolls back every state change made by the failing call before the error
propagates.
"""

from __future__ import annotations


class ExchangeError(Exception):
    """Base error for exchange operations."""

    reason: str = "Exchange: FAILED"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


# --- Registry ---


class IdenticalAssets(ExchangeError):
    """Pool requested for an asset paired with itself."""

    reason = "Exchange: IDENTICAL_ADDRESSES"


class ZeroAsset(ExchangeError):
    """Pool requested with the null identity as one of its assets."""

    reason = "Exchange: ZERO_ADDRESS"


class PoolExists(ExchangeError):
    """A pool for the canonical pair is already registered."""

    reason = "Exchange: PAIR_EXISTS"


class Forbidden(ExchangeError):
    """Caller is not the registry administrator."""

    reason = "Exchange: FORBIDDEN"


class UnknownPool(ExchangeError):
    """No pool is registered at the requested address or index."""

    reason = "Exchange: UNKNOWN_PAIR"


# --- Pool engine ---


class Reentrant(ExchangeError):
    """Pool entered while another call on it is still running."""

    reason = "Exchange: LOCKED"


class InsufficientInitialLiquidity(ExchangeError):
    """First deposit too small to cover MINIMUM_LIQUIDITY."""

    reason = "Exchange: INSUFFICIENT_INITIAL_LIQUIDITY"


class InsufficientLiquidityMinted(ExchangeError):
    """Deposit would mint zero claims."""

    reason = "Exchange: INSUFFICIENT_LIQUIDITY_MINTED"


class InsufficientLiquidityBurned(ExchangeError):
    """Withdrawal would redeem zero of either asset."""

    reason = "Exchange: INSUFFICIENT_LIQUIDITY_BURNED"


class InsufficientOutputAmount(ExchangeError):
    """Swap requested no output."""

    reason = "Exchange: INSUFFICIENT_OUTPUT_AMOUNT"


class InsufficientLiquidity(ExchangeError):
    """Swap output would drain a reserve."""

    reason = "Exchange: INSUFFICIENT_LIQUIDITY"


class InsufficientInputAmount(ExchangeError):
    """Swap received no input."""

    reason = "Exchange: INSUFFICIENT_INPUT_AMOUNT"


class InvariantViolated(ExchangeError):
    """Fee-adjusted reserve product decreased across a swap."""

    reason = "Exchange: K"


class Overflow(ExchangeError):
    """Balance does not fit in a uint112 reserve slot."""

    reason = "Exchange: OVERFLOW"


class MissingCallback(ExchangeError):
    """Swap data supplied but the recipient cannot receive a swap callback."""

    reason = "Exchange: MISSING_CALLBACK"


class UnknownAsset(ExchangeError):
    """Pool asset is not deployed on the chain."""

    reason = "Exchange: UNKNOWN_TOKEN"


# --- Ledger ---


class InvalidRecipient(ExchangeError):
    """Transfer or swap recipient is not allowed."""

    reason = "Exchange: INVALID_TO"


class InsufficientBalance(ExchangeError):
    """Holder balance is lower than the amount moved."""

    reason = "Exchange: INSUFFICIENT_BALANCE"


class InsufficientAllowance(ExchangeError):
    """Spender allowance is lower than the amount moved."""

    reason = "Exchange: INSUFFICIENT_ALLOWANCE"


class Expired(ExchangeError):
    """Authorization deadline has passed."""

    reason = "Exchange: EXPIRED"


class InvalidSignature(ExchangeError):
    """Authorization signature does not recover to the owner."""

    reason = "Exchange: INVALID_SIGNATURE"
