"""Claim token: an ERC20 ledger with EIP-712 permit.

Every pool embeds one ClaimToken whose balances represent proportional
ownership of the pool's reserves.
"""

from __future__ import annotations

from typing import ClassVar

import structlog

from exchange.chain import Chain, atomic
from exchange.constants import (
    CLAIM_TOKEN_DECIMALS,
    CLAIM_TOKEN_NAME,
    CLAIM_TOKEN_SYMBOL,
    CLAIM_TOKEN_VERSION,
)
from exchange.errors import Expired, InvalidSignature
from exchange.ledger.erc20 import ERC20
from exchange.ledger.permit import (
    PERMIT_TYPEHASH,
    PermitSignature,
    domain_separator,
    permit_message,
    recover_signer,
)
from exchange.models.types import ZERO_ADDRESS, normalize_address
from exchange.safe_int import S

logger = structlog.get_logger()


class ClaimToken(ERC20):
    """ERC20 claim ledger with nonce-based signed approvals.

    The domain separator is computed once, at construction, from the token
    name, version, chain id and ledger address.
    """

    STATE_FIELDS: ClassVar[tuple[str, ...]] = ERC20.STATE_FIELDS + ("_nonces",)

    PERMIT_TYPEHASH: ClassVar[bytes] = PERMIT_TYPEHASH
    VERSION: ClassVar[str] = CLAIM_TOKEN_VERSION

    def __init__(self, chain: Chain, address: str) -> None:
        super().__init__(
            chain,
            address,
            name=CLAIM_TOKEN_NAME,
            symbol=CLAIM_TOKEN_SYMBOL,
            decimals=CLAIM_TOKEN_DECIMALS,
        )
        self._nonces: dict[str, int] = {}
        self.DOMAIN_SEPARATOR = domain_separator(
            self.name, self.VERSION, chain.chain_id, self.address
        )

    def nonces(self, owner: str) -> int:
        return self._nonces.get(normalize_address(owner), 0)

    def current_nonce(self, owner: str) -> int:
        """Nonce the next permit signed by ``owner`` must carry."""
        return self.nonces(owner)

    @atomic
    def permit(
        self,
        owner: str,
        spender: str,
        value: int,
        deadline: int,
        signature: PermitSignature | bytes | str,
    ) -> None:
        """Set an allowance from an owner-signed permit.

        Raises:
            Expired: If the chain timestamp is past ``deadline``
            InvalidSignature: If the signature does not recover to ``owner``
        """
        if self.chain.timestamp > deadline:
            raise Expired(f"Permit deadline {deadline} passed at {self.chain.timestamp}")

        owner = normalize_address(owner, validate=True)
        spender = normalize_address(spender, validate=True)
        nonce = self.nonces(owner)
        message = permit_message(self.DOMAIN_SEPARATOR, owner, spender, value, nonce, deadline)
        try:
            parsed = PermitSignature.coerce(signature)
        except ValueError as err:
            raise InvalidSignature(f"Unparseable permit signature for {owner}: {err}") from err
        signer = recover_signer(message, parsed)
        if signer is None or signer == ZERO_ADDRESS or signer != owner:
            raise InvalidSignature(f"Permit for {owner} signed by {signer}")

        self._nonces[owner] = (S(nonce) + 1).value
        self._approve(owner, spender, value)
        logger.debug(
            "permit_consumed", token=self.address, owner=owner, spender=spender, nonce=nonce
        )

    def authorize(
        self,
        owner: str,
        spender: str,
        value: int,
        deadline: int,
        signature: PermitSignature | bytes | str,
    ) -> None:
        """Alias of :meth:`permit`."""
        self.permit(owner, spender, value, deadline, signature)
