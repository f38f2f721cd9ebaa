"""Fungible balance ledger.

ERC20 keeps balances, allowances and total supply for one token and emits
Transfer / Approval events. Supply changes go through ``_mint`` / ``_burn``,
which only the owning contract calls.

All public mutators run inside a chain transaction, so a failing call leaves
balances, allowances and supply exactly as they were.
"""

from __future__ import annotations

from typing import ClassVar

import structlog

from exchange.chain import Chain, Contract, atomic
from exchange.constants import UINT256_MAX
from exchange.errors import InsufficientAllowance, InsufficientBalance, InvalidRecipient
from exchange.events import Approval, Transfer
from exchange.models.types import ZERO_ADDRESS, normalize_address
from exchange.safe_int import S

logger = structlog.get_logger()


class ERC20(Contract):
    """Balance/allowance ledger for a single fungible token.

    An allowance of ``UINT256_MAX`` is unlimited and never decremented.

    Attributes:
        name: Token name
        symbol: Token symbol
        decimals: Display decimals
        total_supply: Sum of all balances
    """

    STATE_FIELDS: ClassVar[tuple[str, ...]] = ("total_supply", "_balances", "_allowances")

    # Whether the ledger's own address may receive tokens
    ACCEPTS_OWN_ADDRESS: ClassVar[bool] = False

    def __init__(
        self,
        chain: Chain,
        address: str,
        name: str,
        symbol: str,
        decimals: int = 18,
    ) -> None:
        super().__init__(chain, address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.total_supply = 0
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    # --- Read surface ---

    def balance_of(self, holder: str) -> int:
        return self._balances.get(normalize_address(holder), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def holders(self) -> dict[str, int]:
        """Non-zero balances by holder."""
        return {holder: balance for holder, balance in self._balances.items() if balance}

    # --- Public mutators ---

    @atomic
    def transfer(self, sender: str, to: str, value: int) -> bool:
        """Move ``value`` tokens from ``sender`` to ``to``.

        Raises:
            InvalidRecipient: If ``to`` is the null identity or a rejected address
            InsufficientBalance: If ``sender`` holds less than ``value``
        """
        self._transfer(normalize_address(sender), normalize_address(to, validate=True), value)
        return True

    @atomic
    def approve(self, owner: str, spender: str, value: int) -> bool:
        """Set ``spender``'s allowance over ``owner``'s tokens (overwrites)."""
        self._approve(normalize_address(owner), normalize_address(spender, validate=True), value)
        return True

    @atomic
    def transfer_from(self, spender: str, owner: str, to: str, value: int) -> bool:
        """Move ``value`` tokens from ``owner`` to ``to`` on behalf of ``spender``.

        Raises:
            InsufficientAllowance: If the allowance is limited and below ``value``
            InvalidRecipient: If ``to`` is rejected
            InsufficientBalance: If ``owner`` holds less than ``value``
        """
        spender = normalize_address(spender)
        owner = normalize_address(owner)
        current = self.allowance(owner, spender)
        if current != UINT256_MAX:
            if current < value:
                raise InsufficientAllowance(
                    f"Allowance {current} of {spender} over {owner} is below {value}"
                )
            self._allowances[(owner, spender)] = (S(current) - value).value
        self._transfer(owner, normalize_address(to, validate=True), value)
        return True

    # --- Internal operations ---

    def _check_recipient(self, to: str) -> None:
        if to == ZERO_ADDRESS:
            raise InvalidRecipient("Cannot transfer to the zero address")
        if to == self.address and not self.ACCEPTS_OWN_ADDRESS:
            raise InvalidRecipient(f"{self.symbol} ledger does not accept its own tokens")

    def _transfer(self, sender: str, to: str, value: int) -> None:
        value = S(value).value
        self._check_recipient(to)
        balance = self.balance_of(sender)
        if balance < value:
            raise InsufficientBalance(f"Balance {balance} of {sender} is below {value}")
        self._balances[sender] = balance - value
        self._balances[to] = (S(self.balance_of(to)) + value).value
        self.emit(Transfer(emitter=self.address, sender=sender, to=to, value=value))

    def _approve(self, owner: str, spender: str, value: int) -> None:
        value = S(value).value
        self._allowances[(owner, spender)] = value
        self.emit(Approval(emitter=self.address, owner=owner, spender=spender, value=value))

    def _mint(self, to: str, value: int) -> None:
        to = normalize_address(to)
        self.total_supply = (S(self.total_supply) + value).value
        self._balances[to] = (S(self.balance_of(to)) + value).value
        self.emit(Transfer(emitter=self.address, sender=ZERO_ADDRESS, to=to, value=value))

    def _burn(self, holder: str, value: int) -> None:
        holder = normalize_address(holder)
        balance = self.balance_of(holder)
        if balance < value:
            raise InsufficientBalance(f"Cannot burn {value} from {holder} holding {balance}")
        self._balances[holder] = balance - value
        self.total_supply = (S(self.total_supply) - value).value
        self.emit(Transfer(emitter=self.address, sender=holder, to=ZERO_ADDRESS, value=value))
