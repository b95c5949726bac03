# [TESTER] v1

from __future__ import annotations

import threading
import time

import pytest

from engine_fixtures import ALICE, DEADLINE, ENGINE, STARTING_BALANCE, TOKEN_X, TOKEN_Y, addr, make_engine, seed_pool
from pairswap.core.errors import ReentrantCall
from pairswap.core.events import TokenSwapped
from pairswap.integration.tokens import InMemoryToken
from pairswap.integration.view import PoolView
from pairswap.state.keys import canonicalize


class SlowToken(InMemoryToken):
    """Sleeps inside every transfer to widen any window for interleaving."""

    def _move(self, sender, recipient, amount):
        time.sleep(0.001)
        return super()._move(sender, recipient, amount)


def test_concurrent_swaps_on_one_pool_stay_consistent() -> None:
    engine, tokens, log = make_engine()
    seed_pool(engine, 1_000_000, 1_000_000)
    k0 = 1_000_000 * 1_000_000

    traders = [addr(0x5000 + i) for i in range(6)]
    for trader in traders:
        tokens[TOKEN_X].mint(trader, 100_000)
        tokens[TOKEN_Y].mint(trader, 100_000)

    errors = []

    def trade(trader: str, forward: bool) -> None:
        path = [TOKEN_X, TOKEN_Y] if forward else [TOKEN_Y, TOKEN_X]
        try:
            for n in range(15):
                engine.swap_exact_tokens_for_tokens(trader, 100 + n, 0, path, trader, DEADLINE)
        except Exception as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=trade, args=(t, i % 2 == 0)) for i, t in enumerate(traders)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(log.of_type(TokenSwapped)) == len(traders) * 15

    pool = engine.registry.get(canonicalize(TOKEN_X, TOKEN_Y))
    # Only exact-ratio deposits and swaps happened, so custody equals reserves.
    assert tokens[TOKEN_X].balance_of(ENGINE) == pool.reserve0
    assert tokens[TOKEN_Y].balance_of(ENGINE) == pool.reserve1
    assert pool.reserve0 * pool.reserve1 >= k0


def test_reader_never_sees_uncommitted_reserves() -> None:
    engine, tokens, _ = make_engine()
    slow = SlowToken(TOKEN_X, custodian=ENGINE)
    slow.mint(ALICE, 10_000)
    engine._tokens[TOKEN_X] = slow
    seed_pool(engine, 1_000, 1_000)

    view = PoolView(engine.registry)
    seen = []
    stop = threading.Event()

    def read() -> None:
        while not stop.is_set():
            seen.append(view.get_reserves(TOKEN_X, TOKEN_Y))

    reader = threading.Thread(target=read)
    reader.start()
    try:
        for _ in range(10):
            engine.swap_exact_tokens_for_tokens(ALICE, 10, 0, [TOKEN_X, TOKEN_Y], ALICE, DEADLINE)
    finally:
        stop.set()
        reader.join()

    # Every observed state must be one reachable by whole swaps.
    reachable = {(1_000, 1_000)}
    r0, r1 = 1_000, 1_000
    for _ in range(10):
        out = (10 * 997 * r1) // (r0 * 1000 + 10 * 997)
        r0, r1 = r0 + 10, r1 - out
        reachable.add((r0, r1))
    assert set(seen) <= reachable
    assert tokens[TOKEN_Y].balance_of(ENGINE) == r1


class CallbackToken(InMemoryToken):
    """Runs `on_pull` before moving funds in transfer_from."""

    on_pull = None

    def transfer_from(self, owner, recipient, amount):
        if self.on_pull is not None:
            self.on_pull()
        return super().transfer_from(owner, recipient, amount)


def test_token_callback_reentering_the_pool_is_rejected() -> None:
    engine, tokens, log = make_engine()
    seed_pool(engine, 1_000, 1_000)
    hook = CallbackToken(TOKEN_X, custodian=ENGINE)
    hook.mint(ALICE, STARTING_BALANCE)
    engine._tokens[TOKEN_X] = hook
    events_before = len(log)

    def nested_swap() -> None:
        engine.swap_exact_tokens_for_tokens(ALICE, 100, 0, [TOKEN_Y, TOKEN_X], ALICE, DEADLINE)

    hook.on_pull = nested_swap
    with pytest.raises(ReentrantCall):
        engine.swap_exact_tokens_for_tokens(ALICE, 100, 0, [TOKEN_X, TOKEN_Y], ALICE, DEADLINE)

    pool = engine.registry.get(canonicalize(TOKEN_X, TOKEN_Y))
    assert (pool.reserve0, pool.reserve1) == (1_000, 1_000)
    assert tokens[TOKEN_Y].balance_of(ENGINE) == 1_000
    assert tokens[TOKEN_Y].balance_of(ALICE) == STARTING_BALANCE - 1_000
    assert hook.balance_of(ALICE) == STARTING_BALANCE
    assert len(log) == events_before

    # The pool stays usable, and a callback may still read it.
    seen = []
    hook.on_pull = lambda: seen.append(PoolView(engine.registry).get_reserves(TOKEN_X, TOKEN_Y))
    assert engine.swap_exact_tokens_for_tokens(ALICE, 100, 0, [TOKEN_X, TOKEN_Y], ALICE, DEADLINE) == (100, 90)
    assert seen == [(1_000, 1_000)]
    assert hook.balance_of(ENGINE) == 100
