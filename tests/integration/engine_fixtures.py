"""Shared setup for engine tests: two in-memory tokens and a fixed clock."""

from __future__ import annotations

from typing import Dict, Tuple

from pairswap.core.events import EventLog
from pairswap.integration.config import EngineConfig
from pairswap.integration.engine import PoolEngine
from pairswap.integration.tokens import InMemoryToken


def addr(n: int) -> str:
    return "0x" + f"{n:040x}"


ENGINE = "0x" + "ee" * 20
ALICE = addr(0xA11CE)
BOB = addr(0xB0B)
CAROL = addr(0xCA201)

# TOKEN_X sorts before TOKEN_Y, so X occupies reserve0.
TOKEN_X = addr(0x1000)
TOKEN_Y = addr(0x2000)

NOW = 1_000
DEADLINE = 2_000

STARTING_BALANCE = 1_000_000


def make_engine(balance: int = STARTING_BALANCE) -> Tuple[PoolEngine, Dict[str, InMemoryToken], EventLog]:
    tokens = {t: InMemoryToken(t, custodian=ENGINE) for t in (TOKEN_X, TOKEN_Y)}
    for token in tokens.values():
        token.mint(ALICE, balance)
        token.mint(BOB, balance)
    log = EventLog()
    engine = PoolEngine(
        tokens,
        config=EngineConfig(engine_address=ENGINE),
        clock=lambda: NOW,
        event_sink=log,
    )
    return engine, tokens, log


def seed_pool(engine: PoolEngine, amount_x: int, amount_y: int, provider: str = ALICE) -> int:
    _, _, liquidity = engine.add_liquidity(provider, TOKEN_X, TOKEN_Y, amount_x, amount_y, 0, 0, provider, DEADLINE)
    return liquidity
