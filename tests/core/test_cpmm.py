# [TESTER] v1

from __future__ import annotations

import importlib.util

import pytest

from pairswap.core.cpmm import get_amount_out, quote, swap_exact_in
from pairswap.core.errors import DivisionByZero, InsufficientPoolLiquidity

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

reserves = st.integers(min_value=1, max_value=10**30)
amounts = st.integers(min_value=0, max_value=10**30)


def test_get_amount_out_worked_example() -> None:
    # amount_in_with_fee = 99_700; 99_700_000 // 1_099_700 == 90
    assert get_amount_out(100, 1000, 1000) == 90


def test_get_amount_out_zero_input_is_zero() -> None:
    assert get_amount_out(0, 1000, 5000) == 0


def test_get_amount_out_requires_both_reserves() -> None:
    with pytest.raises(InsufficientPoolLiquidity):
        get_amount_out(100, 0, 1000)
    with pytest.raises(InsufficientPoolLiquidity):
        get_amount_out(100, 1000, 0)


def test_get_amount_out_rejects_malformed_amounts() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        get_amount_out(-1, 1000, 1000)
    with pytest.raises(TypeError):
        get_amount_out(True, 1000, 1000)  # type: ignore[arg-type]


def test_get_amount_out_handles_values_beyond_256_bits() -> None:
    big = 2**255
    out = get_amount_out(big, big, big)
    assert 0 < out < big


def test_quote_is_proportional_floor() -> None:
    assert quote(5, 7, 3) == 2
    assert quote(100, 1000, 2000) == 200
    with pytest.raises(DivisionByZero):
        quote(1, 0, 10)


def test_swap_exact_in_reports_post_reserves() -> None:
    q = swap_exact_in(reserve_in=1000, reserve_out=1000, amount_in=100)
    assert q.amount_out == 90
    assert (q.new_reserve_in, q.new_reserve_out) == (1100, 910)
    assert q.k_after >= q.k_before


@settings(max_examples=300)
@given(amount_in=amounts, reserve_in=reserves, reserve_out=reserves)
def test_amount_out_is_below_reserve_out(amount_in: int, reserve_in: int, reserve_out: int) -> None:
    assert get_amount_out(amount_in, reserve_in, reserve_out) < reserve_out


@settings(max_examples=300)
@given(a=amounts, b=amounts, reserve_in=reserves, reserve_out=reserves)
def test_amount_out_is_monotone_in_amount_in(a: int, b: int, reserve_in: int, reserve_out: int) -> None:
    lo, hi = min(a, b), max(a, b)
    assert get_amount_out(lo, reserve_in, reserve_out) <= get_amount_out(hi, reserve_in, reserve_out)


@settings(max_examples=300)
@given(amount_in=amounts, reserve_in=reserves, reserve_out=reserves)
def test_swap_never_decreases_constant_product(amount_in: int, reserve_in: int, reserve_out: int) -> None:
    q = swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    assert q.new_reserve_in * q.new_reserve_out >= reserve_in * reserve_out
