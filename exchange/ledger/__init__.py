"""Fungible ledgers: plain ERC20 balances and the permit-enabled claim token."""

from exchange.ledger.claim_token import ClaimToken
from exchange.ledger.erc20 import ERC20
from exchange.ledger.permit import PermitSignature, permit_digest, sign_permit

__all__ = ["ERC20", "ClaimToken", "PermitSignature", "permit_digest", "sign_permit"]
