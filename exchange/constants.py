"""Protocol constants for the exchange.

Centralizes protocol parameters, claim-token metadata and integer widths.
"""

from web3 import Web3

from exchange.models.types import ZERO_ADDRESS, is_valid_address

# Integer widths used by pool storage
UINT32_MODULUS = 2**32
UINT112_MAX = 2**112 - 1
UINT256_MAX = 2**256 - 1
UINT256_MODULUS = 2**256

# Claims permanently locked at ZERO_ADDRESS by the first deposit
MINIMUM_LIQUIDITY = 10**3

# Swap fee: 3 / 1000 = 0.3% of the input amount stays in the pool
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000

# Protocol fee takes 1 / (PROTOCOL_FEE_DIVISOR + 1) of the accrued trading fees
PROTOCOL_FEE_DIVISOR = 5

# Claim token metadata (also the EIP-712 domain name/version)
CLAIM_TOKEN_NAME = "Exchange LP Token"
CLAIM_TOKEN_SYMBOL = "EX-LP"
CLAIM_TOKEN_DECIMALS = 18
CLAIM_TOKEN_VERSION = "1"

# Hardhat's default chain id, used when no chain id is configured
DEFAULT_CHAIN_ID = 31337

# Stands in for keccak256(type(ExchangePair).creationCode) in CREATE2 derivation
INIT_CODE_HASH = bytes(Web3.keccak(text="ExchangePair(address token0,address token1)"))


def _validate_reserved_address(name: str, address: str) -> str:
    """Validate and return a reserved address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Holder of the locked MINIMUM_LIQUIDITY claims
BURN_ADDRESS = _validate_reserved_address("burn", ZERO_ADDRESS)
