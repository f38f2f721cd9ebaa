"""Shared type definitions for exchange models.

Addresses are carried as lowercase ``0x``-prefixed hex strings. Because all
normalized addresses have the same length, string ordering matches the
numeric ordering of the underlying 160-bit identifiers.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field
from web3 import Web3

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

# The null identity
ZERO_ADDRESS = "0x" + "00" * 20


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 and render it as a decimal string.

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return str(int_value)


# 20-byte address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with a 0x prefix.

    Args:
        address: An address (with or without 0x prefix, any case)
        validate: If True, raises ValueError for invalid addresses.

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a 0x-prefixed 20-byte hex address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def sort_addresses(address_a: str, address_b: str) -> tuple[str, str]:
    """Return the two normalized addresses in ascending numeric order."""
    a = normalize_address(address_a, validate=True)
    b = normalize_address(address_b, validate=True)
    return (a, b) if a < b else (b, a)


def to_checksum(address: str) -> str:
    """EIP-55 checksummed form, as expected by eth_abi and eth_account."""
    return Web3.to_checksum_address(normalize_address(address, validate=True))
