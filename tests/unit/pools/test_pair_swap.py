"""Tests for swaps against the fee-adjusted constant product."""

import pytest

from exchange.errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    InvalidRecipient,
    InvariantViolated,
)
from exchange.events import Swap, Sync
from exchange.pools import get_amount_out
from tests.helpers import ETHER, OTHER, TEST_AMOUNT, TOTAL_SUPPLY, WALLET, deposit


# (swap_amount, token0_amount, token1_amount, expected_output), in whole tokens
# except the output, which is exact.
INPUT_PRICE_CASES = [
    (1, 5, 10, 1662497915624478906),
    (1, 10, 5, 453305446940074565),
    (2, 5, 10, 2851015155847869602),
    (2, 10, 5, 831248957812239453),
    (1, 10, 10, 906610893880149131),
    (1, 100, 100, 987158034397061298),
    (1, 1000, 1000, 996006981039903216),
]

# (output_amount, token0_amount, token1_amount, input_amount): withdraw token0
# and pay it back in kind, exactly covering the fee. Amounts in wei, reserves
# in whole tokens.
OPTIMISTIC_CASES = [
    (997 * 10**15, 5, 10, ETHER),
    (997 * 10**15, 10, 5, ETHER),
    (997 * 10**15, 5, 5, ETHER),
    (ETHER, 5, 5, 1003009027081243732),
]


class TestInputPrice:
    @pytest.mark.parametrize(
        ("swap_amount", "token0_amount", "token1_amount", "expected_output"), INPUT_PRICE_CASES
    )
    def test_exact_output_passes_and_one_more_fails(
        self, pair, token0, swap_amount, token0_amount, token1_amount, expected_output
    ):
        """The quoted output is the most the invariant allows."""
        deposit(pair, token0_amount * ETHER, token1_amount * ETHER)
        token0.transfer(WALLET, pair.address, swap_amount * ETHER)

        quoted = get_amount_out(swap_amount * ETHER, token0_amount * ETHER, token1_amount * ETHER)
        assert quoted == expected_output
        with pytest.raises(InvariantViolated):
            pair.swap(0, expected_output + 1, WALLET)
        pair.swap(0, expected_output, WALLET)

    @pytest.mark.parametrize(
        ("output_amount", "token0_amount", "token1_amount", "input_amount"), OPTIMISTIC_CASES
    )
    def test_optimistic_in_kind(
        self, pair, token0, output_amount, token0_amount, token1_amount, input_amount
    ):
        deposit(pair, token0_amount * ETHER, token1_amount * ETHER)
        token0.transfer(WALLET, pair.address, input_amount)

        with pytest.raises(InvariantViolated):
            pair.swap(output_amount + 1, 0, WALLET)
        pair.swap(output_amount, 0, WALLET)


class TestSwapToken0:
    def test_swap_token0_for_token1(self, chain, pair, token0, token1):
        token0_amount = 5 * ETHER
        token1_amount = 10 * ETHER
        deposit(pair, token0_amount, token1_amount)

        swap_amount = 1 * ETHER
        expected_output = 1662497915624478906
        token0.transfer(WALLET, pair.address, swap_amount)
        amounts_in = pair.swap(0, expected_output, WALLET)

        assert amounts_in == (swap_amount, 0)
        assert pair.get_reserves()[:2] == (
            token0_amount + swap_amount,
            token1_amount - expected_output,
        )
        assert token0.balance_of(pair.address) == token0_amount + swap_amount
        assert token1.balance_of(pair.address) == token1_amount - expected_output
        assert token0.balance_of(WALLET) == TOTAL_SUPPLY - token0_amount - swap_amount
        assert token1.balance_of(WALLET) == TOTAL_SUPPLY - token1_amount + expected_output

        swap = chain.events_of(Swap)[-1]
        assert (swap.amount0_in, swap.amount1_in) == (swap_amount, 0)
        assert (swap.amount0_out, swap.amount1_out) == (0, expected_output)
        assert (swap.sender, swap.to) == (WALLET, WALLET)
        assert chain.events_of(Sync)[-1].reserve1 == token1_amount - expected_output

    def test_swap_token1_for_token0(self, pair, token0, token1):
        token0_amount = 5 * ETHER
        token1_amount = 10 * ETHER
        deposit(pair, token0_amount, token1_amount)

        swap_amount = 1 * ETHER
        expected_output = 453305446940074565
        token1.transfer(WALLET, pair.address, swap_amount)
        pair.swap(expected_output, 0, OTHER, sender=WALLET)

        assert pair.get_reserves()[:2] == (
            token0_amount - expected_output,
            token1_amount + swap_amount,
        )
        assert token0.balance_of(OTHER) == expected_output

    def test_reported_sender_defaults_to_recipient(self, chain, pair, token0):
        deposit(pair, TEST_AMOUNT, TEST_AMOUNT)
        token0.transfer(WALLET, pair.address, ETHER)
        pair.swap(0, get_amount_out(ETHER, TEST_AMOUNT, TEST_AMOUNT), OTHER)
        assert chain.events_of(Swap)[-1].sender == OTHER


class TestSwapValidation:
    def test_no_output_requested(self, pair):
        deposit(pair, TEST_AMOUNT, TEST_AMOUNT)
        with pytest.raises(InsufficientOutputAmount):
            pair.swap(0, 0, WALLET)

    @pytest.mark.parametrize("drain0", [True, False])
    def test_output_must_be_below_reserve(self, pair, drain0):
        deposit(pair, TEST_AMOUNT, TEST_AMOUNT)
        with pytest.raises(InsufficientLiquidity):
            if drain0:
                pair.swap(TEST_AMOUNT, 0, WALLET)
            else:
                pair.swap(0, TEST_AMOUNT, WALLET)

    def test_empty_pool(self, pair):
        with pytest.raises(InsufficientLiquidity):
            pair.swap(0, 1, WALLET)

    def test_recipient_cannot_be_an_asset(self, pair):
        deposit(pair, TEST_AMOUNT, TEST_AMOUNT)
        with pytest.raises(InvalidRecipient):
            pair.swap(1, 0, pair.token0)
        with pytest.raises(InvalidRecipient):
            pair.swap(0, 1, pair.token1)

    def test_no_input_reverts_optimistic_transfer(self, chain, pair, token0):
        """The output already sent is returned when nothing was paid in."""
        deposit(pair, TEST_AMOUNT, TEST_AMOUNT)
        events_before = chain.events

        with pytest.raises(InsufficientInputAmount):
            pair.swap(ETHER, 0, OTHER)

        assert token0.balance_of(OTHER) == 0
        assert token0.balance_of(pair.address) == TEST_AMOUNT
        assert chain.events == events_before
        assert not pair.locked

    def test_failed_swap_leaves_state_unchanged(self, pair, token0, token1):
        deposit(pair, TEST_AMOUNT, TEST_AMOUNT)
        token0.transfer(WALLET, pair.address, ETHER)
        reserves = pair.get_reserves()
        accumulators = pair.price_accumulators()

        with pytest.raises(InvariantViolated):
            pair.swap(0, ETHER, WALLET)

        assert pair.get_reserves() == reserves
        assert pair.price_accumulators() == accumulators
        assert token1.balance_of(pair.address) == TEST_AMOUNT

    def test_repeated_swaps_never_decrease_k(self, pair, token0, token1):
        deposit(pair, TEST_AMOUNT, TEST_AMOUNT)
        for i in range(1, 6):
            reserve0, reserve1, _ = pair.get_reserves()
            k_before = reserve0 * reserve1
            amount_in = i * ETHER
            if i % 2:
                token0.transfer(WALLET, pair.address, amount_in)
                pair.swap(0, get_amount_out(amount_in, reserve0, reserve1), WALLET)
            else:
                token1.transfer(WALLET, pair.address, amount_in)
                pair.swap(get_amount_out(amount_in, reserve1, reserve0), 0, WALLET)
            reserve0, reserve1, _ = pair.get_reserves()
            assert reserve0 * reserve1 >= k_before
