"""Test helpers module for shared test utilities.

- constants: Accounts and common amounts
- factories: Asset deployment, pool operations and swap callees
"""

from tests.helpers.constants import (
    ETHER,
    OTHER,
    OTHER_KEY,
    START_TIMESTAMP,
    TEST_AMOUNT,
    TOTAL_SUPPLY,
    WALLET,
    WALLET_KEY,
)
from tests.helpers.factories import (
    FlashBorrower,
    ReentrantCallee,
    deposit,
    make_asset,
    swap_exact_in,
    withdraw,
)

__all__ = [
    # Constants
    "ETHER",
    "OTHER",
    "OTHER_KEY",
    "START_TIMESTAMP",
    "TEST_AMOUNT",
    "TOTAL_SUPPLY",
    "WALLET",
    "WALLET_KEY",
    # Factories
    "FlashBorrower",
    "ReentrantCallee",
    "deposit",
    "make_asset",
    "swap_exact_in",
    "withdraw",
]
