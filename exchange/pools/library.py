"""Single-pool helpers: pair canonicalization, pool addresses and quotes.

Formula: amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)

The 997/1000 factor accounts for the 0.3% fee. These functions are pure:
they read nothing from the chain and are what a routing layer would call
to size the outputs it passes to ``ExchangePair.swap``.
"""

from __future__ import annotations

from eth_abi.packed import encode_packed  # type: ignore[attr-defined]
from web3 import Web3

from exchange.constants import FEE_DENOMINATOR, FEE_NUMERATOR, INIT_CODE_HASH
from exchange.errors import (
    IdenticalAssets,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    ZeroAsset,
)
from exchange.models.types import ZERO_ADDRESS, sort_addresses, to_checksum
from exchange.safe_int import S

FEE_MULTIPLIER = FEE_DENOMINATOR - FEE_NUMERATOR


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Canonical (token0, token1) ordering of an asset pair.

    Raises:
        IdenticalAssets: If both tokens are the same
        ZeroAsset: If the lower token is the null identity
    """
    token0, token1 = sort_addresses(token_a, token_b)
    if token0 == token1:
        raise IdenticalAssets(f"Cannot pair {token0} with itself")
    if token0 == ZERO_ADDRESS:
        raise ZeroAsset("Cannot pair the zero address")
    return token0, token1


def pool_address_for(registry: str, token_a: str, token_b: str) -> str:
    """CREATE2-style pool address for a pair, without touching any state.

    address = keccak256(0xff ++ registry ++ keccak256(token0 ++ token1) ++ INIT_CODE_HASH)[12:]
    """
    token0, token1 = sort_tokens(token_a, token_b)
    salt = Web3.keccak(
        encode_packed(["address", "address"], [to_checksum(token0), to_checksum(token1)])
    )
    digest = Web3.keccak(
        encode_packed(
            ["bytes1", "address", "bytes32", "bytes32"],
            [b"\xff", to_checksum(registry), bytes(salt), INIT_CODE_HASH],
        )
    )
    return "0x" + bytes(digest)[12:].hex()


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Equivalent amount of the other asset at the current reserve ratio (no fee).

    Raises:
        InsufficientInputAmount: If amount_a is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_a <= 0:
        raise InsufficientInputAmount("Quote requires a positive amount")
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity("Quote requires non-empty reserves")
    return (S(amount_a) * reserve_b // reserve_a).value


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Maximum output for an exact input, net of the swap fee.

    Raises:
        InsufficientInputAmount: If amount_in is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_in <= 0:
        raise InsufficientInputAmount("Swap requires a positive input")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity("Swap requires non-empty reserves")

    amount_in_with_fee = S(amount_in) * FEE_MULTIPLIER
    numerator = amount_in_with_fee * reserve_out
    denominator = S(reserve_in) * FEE_DENOMINATOR + amount_in_with_fee
    return (numerator // denominator).value


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Minimum input for an exact output, including the swap fee.

    Formula: amount_in = (reserve_in * amount_out * 1000) / ((reserve_out - amount_out) * 997) + 1

    Raises:
        InsufficientOutputAmount: If amount_out is zero
        InsufficientLiquidity: If a reserve is zero or amount_out drains reserve_out
    """
    if amount_out <= 0:
        raise InsufficientOutputAmount("Swap requires a positive output")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity("Swap requires non-empty reserves")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(f"Output {amount_out} drains reserve {reserve_out}")

    numerator = S(reserve_in) * amount_out * FEE_DENOMINATOR
    denominator = (S(reserve_out) - amount_out) * FEE_MULTIPLIER
    return (numerator // denominator + 1).value
