"""
Domain events emitted after a pool operation commits.

Events are informational; nothing in the engine consumes them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Type, TypeVar, Union


@dataclass(frozen=True)
class LiquidityAdded:
    provider: str
    token_a: str
    token_b: str
    amount_a: int
    amount_b: int
    liquidity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "LiquidityAdded", **asdict(self)}


@dataclass(frozen=True)
class LiquidityRemoved:
    provider: str
    token_a: str
    token_b: str
    amount_a: int
    amount_b: int

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "LiquidityRemoved", **asdict(self)}


@dataclass(frozen=True)
class TokenSwapped:
    user: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "TokenSwapped", **asdict(self)}


PoolEvent = Union[LiquidityAdded, LiquidityRemoved, TokenSwapped]
EventSink = Callable[[PoolEvent], None]

E = TypeVar("E", LiquidityAdded, LiquidityRemoved, TokenSwapped)


class EventLog:
    """List-backed event sink, in emission order."""

    def __init__(self) -> None:
        self._events: List[PoolEvent] = []

    def __call__(self, event: PoolEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> List[PoolEvent]:
        return list(self._events)

    def of_type(self, kind: Type[E]) -> List[E]:
        return [e for e in self._events if isinstance(e, kind)]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
