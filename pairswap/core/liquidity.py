"""
Liquidity math: deposit sizing, share minting and withdrawal amounts.

Reserves are passed in the caller's (A, B) orientation. Shares are minted
linearly as amount_a + amount_b rather than by a geometric mean, and the
first deposit has no locked minimum.
"""

from typing import Tuple

from .cpmm import quote
from .errors import (
    DivisionByZero,
    ExcessiveInputRequired,
    SlippageExceeded,
)


def compute_deposit_amounts(
    *,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
    amount_a_desired: int,
    amount_b_desired: int,
) -> Tuple[int, int]:
    """
    Choose the amounts credited to reserves for a deposit.

    Empty pool (total_shares == 0): both desired amounts are used as-is.

    Otherwise both proportional amounts are computed unconditionally:
        amount_a = floor(amount_b_desired * reserve_a / reserve_b) <= amount_a_desired
        amount_b = floor(amount_a_desired * reserve_b / reserve_a) <= amount_b_desired

    Returns:
        Tuple of (amount_a, amount_b)

    Raises:
        ExcessiveInputRequired: If a proportional amount exceeds its desired amount
        DivisionByZero: If a non-empty pool has a zero reserve
    """
    if total_shares == 0:
        return amount_a_desired, amount_b_desired

    amount_a = quote(amount_b_desired, reserve_b, reserve_a)
    if amount_a > amount_a_desired:
        raise ExcessiveInputRequired("A", amount_a, amount_a_desired)
    amount_b = quote(amount_a_desired, reserve_a, reserve_b)
    if amount_b > amount_b_desired:
        raise ExcessiveInputRequired("B", amount_b, amount_b_desired)
    return amount_a, amount_b


def compute_liquidity_minted(amount_a: int, amount_b: int) -> int:
    """Shares minted for a deposit: amount_a + amount_b."""
    if amount_a < 0 or amount_b < 0:
        raise ValueError(f"Deposit amounts must be non-negative: ({amount_a}, {amount_b})")
    return amount_a + amount_b


def compute_withdrawal_amounts(
    *,
    liquidity: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> Tuple[int, int]:
    """
    Compute reserve amounts released for burning shares.

    Formula:
        amount_a = floor(liquidity * reserve_a / total_shares)
        amount_b = floor(liquidity * reserve_b / total_shares)

    Raises:
        DivisionByZero: If total_shares is zero
    """
    if total_shares == 0:
        raise DivisionByZero("cannot withdraw from a pool with no shares outstanding")
    if liquidity < 0 or liquidity > total_shares:
        raise ValueError(f"liquidity must be in [0, {total_shares}]: {liquidity}")

    amount_a = (liquidity * reserve_a) // total_shares
    amount_b = (liquidity * reserve_b) // total_shares
    return amount_a, amount_b


def check_minimums(amount_a: int, amount_b: int, amount_a_min: int, amount_b_min: int) -> None:
    """
    Raises:
        SlippageExceeded: If either amount is below its minimum
    """
    if amount_a < amount_a_min:
        raise SlippageExceeded("amount_a", amount_a, amount_a_min)
    if amount_b < amount_b_min:
        raise SlippageExceeded("amount_b", amount_b, amount_b_min)
