"""EIP-712 offline authorization ("permit") for claim tokens.

A permit lets a token owner grant an allowance by signing a typed message
instead of sending an approve call themselves. The signed digest is

    keccak256(0x19 0x01 || DOMAIN_SEPARATOR || keccak256(abi.encode(
        PERMIT_TYPEHASH, owner, spender, value, nonce, deadline)))

The domain separator binds the signature to one ledger address on one chain;
the per-owner nonce makes every signature single use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from eth_abi import encode  # type: ignore[attr-defined]
from eth_account import Account
from eth_account.messages import SignableMessage
from eth_keys.exceptions import BadSignature, ValidationError
from web3 import Web3

from exchange.models.types import normalize_address, to_checksum

if TYPE_CHECKING:
    from exchange.ledger.claim_token import ClaimToken

logger = structlog.get_logger()

EIP712_DOMAIN_TYPEHASH = bytes(
    Web3.keccak(
        text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
    )
)

PERMIT_TYPEHASH = bytes(
    Web3.keccak(
        text="Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"
    )
)

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def domain_separator(name: str, version: str, chain_id: int, verifying_contract: str) -> bytes:
    """EIP-712 domain separator for a ledger deployed at ``verifying_contract``."""
    return bytes(
        Web3.keccak(
            encode(
                ["bytes32", "bytes32", "bytes32", "uint256", "address"],
                [
                    EIP712_DOMAIN_TYPEHASH,
                    bytes(Web3.keccak(text=name)),
                    bytes(Web3.keccak(text=version)),
                    chain_id,
                    to_checksum(verifying_contract),
                ],
            )
        )
    )


def permit_struct_hash(owner: str, spender: str, value: int, nonce: int, deadline: int) -> bytes:
    """keccak256 of the ABI-encoded Permit struct."""
    return bytes(
        Web3.keccak(
            encode(
                ["bytes32", "address", "address", "uint256", "uint256", "uint256"],
                [PERMIT_TYPEHASH, to_checksum(owner), to_checksum(spender), value, nonce, deadline],
            )
        )
    )


def permit_message(
    separator: bytes,
    owner: str,
    spender: str,
    value: int,
    nonce: int,
    deadline: int,
) -> SignableMessage:
    """EIP-712 signable message (EIP-191 version 0x01) for a permit."""
    return SignableMessage(
        version=b"\x01",
        header=separator,
        body=permit_struct_hash(owner, spender, value, nonce, deadline),
    )


def permit_digest(
    separator: bytes,
    owner: str,
    spender: str,
    value: int,
    nonce: int,
    deadline: int,
) -> bytes:
    """The 32-byte digest a permit signature commits to."""
    struct_hash = permit_struct_hash(owner, spender, value, nonce, deadline)
    return bytes(Web3.keccak(b"\x19\x01" + separator + struct_hash))


@dataclass(frozen=True)
class PermitSignature:
    """A secp256k1 signature split into its (v, r, s) components."""

    v: int
    r: int
    s: int

    @classmethod
    def from_bytes(cls, signature: bytes) -> PermitSignature:
        """Parse a 65-byte ``r || s || v`` signature.

        Raises:
            ValueError: If the signature is not 65 bytes long
        """
        if len(signature) != 65:
            raise ValueError(f"Signature must be 65 bytes, got {len(signature)}")
        return cls(
            v=signature[64],
            r=int.from_bytes(signature[:32], "big"),
            s=int.from_bytes(signature[32:64], "big"),
        )

    @classmethod
    def coerce(cls, signature: PermitSignature | bytes | str) -> PermitSignature:
        """Accept a PermitSignature, 65 raw bytes or a 0x-prefixed hex string."""
        if isinstance(signature, PermitSignature):
            return signature
        if isinstance(signature, str):
            return cls.from_bytes(bytes.fromhex(signature.removeprefix("0x")))
        return cls.from_bytes(bytes(signature))

    def to_bytes(self) -> bytes:
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    @property
    def is_well_formed(self) -> bool:
        """Whether the components are in range for ecrecover."""
        return self.v in (27, 28) and 0 < self.r < SECP256K1_N and 0 < self.s < SECP256K1_N


def recover_signer(message: SignableMessage, signature: PermitSignature) -> str | None:
    """Recover the signing address, or None if the signature is unusable."""
    if not signature.is_well_formed:
        return None
    try:
        recovered = Account.recover_message(message, vrs=(signature.v, signature.r, signature.s))
    except (BadSignature, ValidationError) as err:
        logger.debug("signature_recovery_failed", error=str(err))
        return None
    return normalize_address(recovered)


def sign_permit(
    private_key: str | bytes,
    token: ClaimToken,
    spender: str,
    value: int,
    deadline: int,
    nonce: int | None = None,
) -> PermitSignature:
    """Sign a permit for ``token`` with the owner's private key.

    The owner is the address of ``private_key``. ``nonce`` defaults to the
    owner's current nonce on ``token``.
    """
    owner = normalize_address(Account.from_key(private_key).address)
    if nonce is None:
        nonce = token.nonces(owner)
    message = permit_message(token.DOMAIN_SEPARATOR, owner, spender, value, nonce, deadline)
    signed = Account.sign_message(message, private_key=private_key)
    return PermitSignature(v=signed.v, r=signed.r, s=signed.s)
