"""
Constant Product Market Maker (CPMM) pricing.

Pure integer functions with no shared state. Python ints are arbitrary
precision, so intermediate products such as amount_in * 997 * reserve_out
never overflow before the final floor division.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Floor Rounding
- Time Complexity: O(1) per quote
- Invariant: After each swap, x' * y' >= x * y (the fee stays in the pool)
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import DivisionByZero, InsufficientPoolLiquidity

# 0.3% fee charged on the input amount
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


def _require_amount(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Output amount for an exact input, after the 0.3% input fee.

        amount_in_with_fee = amount_in * 997
        amount_out = floor(amount_in_with_fee * reserve_out
                           / (reserve_in * 1000 + amount_in_with_fee))

    Example: get_amount_out(100, 1000, 1000) == 90.

    Raises:
        InsufficientPoolLiquidity: If either reserve is zero
    """
    for name, v in (("amount_in", amount_in), ("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        _require_amount(name, v)
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientPoolLiquidity(
            f"cannot price against empty reserves ({reserve_in}, {reserve_out})"
        )

    amount_in_with_fee = amount_in * FEE_NUMERATOR
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """
    Amount of B proportional to amount_a at the current reserve ratio (floor).

    Raises:
        DivisionByZero: If reserve_a is zero
    """
    for name, v in (("amount_a", amount_a), ("reserve_a", reserve_a), ("reserve_b", reserve_b)):
        _require_amount(name, v)
    if reserve_a == 0:
        raise DivisionByZero("cannot quote against a zero reserve")
    return (amount_a * reserve_b) // reserve_a


def swap_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int) -> SwapQuote:
    """
    Exact-in swap quote + post-state.

    Post-swap reserves:
        new_reserve_in = reserve_in + amount_in  (fee stays in pool)
        new_reserve_out = reserve_out - amount_out

    Raises:
        InsufficientPoolLiquidity: If either reserve is zero
        ValueError: If the constant product would decrease
    """
    amount_out = get_amount_out(amount_in, reserve_in, reserve_out)
    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out

    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise ValueError(f"Invariant violation: new_k ({k_after}) < old_k ({k_before})")

    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
