# [TESTER] v1

from __future__ import annotations

from pairswap.core.events import EventLog, LiquidityAdded, LiquidityRemoved, TokenSwapped


def test_event_log_records_in_order_and_filters() -> None:
    log = EventLog()
    added = LiquidityAdded(provider="p", token_a="a", token_b="b", amount_a=1, amount_b=2, liquidity=3)
    swapped = TokenSwapped(user="u", token_in="a", token_out="b", amount_in=5, amount_out=4)
    log(added)
    log(swapped)

    assert log.events == [added, swapped]
    assert log.of_type(TokenSwapped) == [swapped]
    assert log.of_type(LiquidityRemoved) == []
    log.clear()
    assert len(log) == 0


def test_to_dict_names_the_event() -> None:
    removed = LiquidityRemoved(provider="p", token_a="a", token_b="b", amount_a=1, amount_b=2)
    assert removed.to_dict() == {
        "event": "LiquidityRemoved",
        "provider": "p",
        "token_a": "a",
        "token_b": "b",
        "amount_a": 1,
        "amount_b": 2,
    }
