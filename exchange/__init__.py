"""Token Exchange - two-asset constant-product market maker."""

from exchange.assets import Asset, ERC20Asset
from exchange.chain import Chain
from exchange.ledger import ClaimToken, PermitSignature, sign_permit
from exchange.pools import ExchangePair, FeeConfig, PoolRegistry, SwapCallee

__version__ = "0.1.0"
__all__ = [
    "Asset",
    "Chain",
    "ClaimToken",
    "ERC20Asset",
    "ExchangePair",
    "FeeConfig",
    "PermitSignature",
    "PoolRegistry",
    "SwapCallee",
    "sign_permit",
    "__version__",
]
