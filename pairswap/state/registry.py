"""
Registry of pool records keyed by canonical pool key.

The registry exclusively owns every PoolState. Records are created lazily and
never removed. Mutations go through `transaction()`, which works on a staged
copy and publishes it only when the caller's block completes without error.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Set, Union

from ..core.errors import ReentrantCall
from .keys import PoolKey
from .pools import PoolSnapshot, PoolState

logger = logging.getLogger(__name__)


def _key_str(key: Union[PoolKey, str]) -> str:
    return key.key if isinstance(key, PoolKey) else key


class PoolRegistry:
    """
    Arena of PoolState records with one re-entrant lock per pool.

    Locks exist independently of records so that the first liquidity addition
    for a pair is serialized like any other call. The lock is re-entrant so a
    token callback may read the pool; a second `transaction()` on a pool that
    already has one open raises ReentrantCall.
    """

    def __init__(self) -> None:
        self._pools: Dict[str, PoolState] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._active: Set[str] = set()
        self._guard = threading.Lock()

    def lock_for(self, key: Union[PoolKey, str]) -> threading.RLock:
        """Return the lock serializing calls on one pool, creating it on demand."""
        k = _key_str(key)
        with self._guard:
            lock = self._locks.get(k)
            if lock is None:
                lock = threading.RLock()
                self._locks[k] = lock
            return lock

    def get_or_create(self, key: PoolKey) -> PoolState:
        """Return the live record for key, inserting an empty pool if absent."""
        with self._guard:
            pool = self._pools.get(key.key)
            if pool is None:
                pool = PoolState(pool_key=key.key, token0=key.token0, token1=key.token1)
                self._pools[key.key] = pool
                logger.info("created pool %s for (%s, %s)", key.key, key.token0, key.token1)
            return pool

    def get(self, key: Union[PoolKey, str]) -> Optional[PoolSnapshot]:
        """Return a read-only snapshot of the pool, or None if it was never created."""
        with self.lock_for(key):
            with self._guard:
                pool = self._pools.get(_key_str(key))
            return None if pool is None else pool.snapshot()

    @contextmanager
    def transaction(self, key: PoolKey) -> Iterator[PoolState]:
        """
        Stage mutations on a copy of the pool and commit them atomically.

        The pool lock is held for the whole block. If the block raises, the
        staged copy is dropped and no record is created or changed.

        Raises:
            ReentrantCall: If this pool already has an open transaction
        """
        with self.lock_for(key):
            # Only the thread owning the pool lock can find its own key here.
            with self._guard:
                if key.key in self._active:
                    raise ReentrantCall(key.key)
                self._active.add(key.key)
                live = self._pools.get(key.key)
            try:
                if live is None:
                    staged = PoolState(pool_key=key.key, token0=key.token0, token1=key.token1)
                else:
                    staged = live.copy()
                yield staged
                staged.check_invariants()
                self.get_or_create(key).restore_from(staged)
            finally:
                with self._guard:
                    self._active.discard(key.key)
            logger.debug(
                "committed pool %s reserves=(%d, %d) total_shares=%d",
                key.key,
                staged.reserve0,
                staged.reserve1,
                staged.total_shares,
            )

    def keys(self) -> List[str]:
        with self._guard:
            return sorted(self._pools)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (PoolKey, str)):
            return False
        with self._guard:
            return _key_str(key) in self._pools

    def __len__(self) -> int:
        with self._guard:
            return len(self._pools)

    def __repr__(self) -> str:
        return f"PoolRegistry({len(self)} pools)"
