"""Factories and test contracts for pool tests."""

from exchange.assets import ERC20Asset
from exchange.chain import Chain, Contract
from exchange.pools import ExchangePair, get_amount_in, get_amount_out
from tests.helpers.constants import TOTAL_SUPPLY, WALLET


def make_asset(chain: Chain, name: str, supply: int = TOTAL_SUPPLY, holder: str = WALLET):
    """Deploy a test asset with ``supply`` minted to ``holder``."""
    return ERC20Asset(
        chain, name=name, symbol=name[:4].upper(), initial_supply=supply, holder=holder
    )


def deposit(pair: ExchangePair, amount0: int, amount1: int, provider: str = WALLET) -> int:
    """Transfer both assets into ``pair`` and mint claims to ``provider``."""
    chain = pair.chain
    chain.contract_at(pair.token0).transfer(provider, pair.address, amount0)
    chain.contract_at(pair.token1).transfer(provider, pair.address, amount1)
    return pair.mint(provider)


def withdraw(pair: ExchangePair, liquidity: int, holder: str = WALLET) -> tuple[int, int]:
    """Return ``liquidity`` claims to the pool and redeem them to ``holder``."""
    pair.transfer(holder, pair.address, liquidity)
    return pair.burn(holder)


def swap_exact_in(
    pair: ExchangePair,
    amount_in: int,
    *,
    zero_for_one: bool,
    trader: str = WALLET,
    extra_out: int = 0,
) -> int:
    """Pay ``amount_in`` of one asset and request the quoted output of the other."""
    reserve0, reserve1, _ = pair.get_reserves()
    token_in, reserve_in, reserve_out = (
        (pair.token0, reserve0, reserve1) if zero_for_one else (pair.token1, reserve1, reserve0)
    )
    amount_out = get_amount_out(amount_in, reserve_in, reserve_out) + extra_out
    pair.chain.contract_at(token_in).transfer(trader, pair.address, amount_in)
    if zero_for_one:
        pair.swap(0, amount_out, trader)
    else:
        pair.swap(amount_out, 0, trader)
    return amount_out


class FlashBorrower(Contract):
    """Swap callee that repays a flash swap out of its own balance.

    Repays with the other asset when ``repay_in_kind`` is False, otherwise
    returns the borrowed asset plus the fee.
    """

    def __init__(
        self,
        chain: Chain,
        pair: ExchangePair,
        *,
        repay_in_kind: bool = True,
        shortfall: int = 0,
    ):
        super().__init__(chain, chain.address_for(f"flash-borrower:{pair.address}"))
        self.pair = pair
        self.repay_in_kind = repay_in_kind
        self.shortfall = shortfall
        self.calls: list[tuple[str, int, int, bytes]] = []

    def exchange_call(self, sender: str, amount0: int, amount1: int, data: bytes) -> None:
        self.calls.append((sender, amount0, amount1, data))
        pair = self.pair
        reserve0, reserve1, _ = pair.get_reserves()
        if amount0:
            borrowed, token, other, reserve_in, reserve_out = (
                amount0, pair.token0, pair.token1, reserve1, reserve0
            )
        else:
            borrowed, token, other, reserve_in, reserve_out = (
                amount1, pair.token1, pair.token0, reserve0, reserve1
            )

        if self.repay_in_kind:
            # amount * 1000 / 997, rounded up
            repayment = (borrowed * 1000 + 996) // 997 - self.shortfall
            self.chain.contract_at(token).transfer(self.address, pair.address, repayment)
        else:
            repayment = get_amount_in(borrowed, reserve_in, reserve_out) - self.shortfall
            self.chain.contract_at(other).transfer(self.address, pair.address, repayment)


class ReentrantCallee(Contract):
    """Swap callee that calls back into the pool it is settling."""

    def __init__(self, chain: Chain, pair: ExchangePair):
        super().__init__(chain, chain.address_for(f"reentrant-callee:{pair.address}"))
        self.pair = pair

    def exchange_call(self, sender: str, amount0: int, amount1: int, data: bytes) -> None:
        self.pair.sync()
