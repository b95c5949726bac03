"""
State management for pairswap pools
"""

from .balances import BalanceTable, ZERO_ADDRESS, normalize_address
from .keys import PoolKey, canonicalize, sort_tokens
from .pools import PoolSnapshot, PoolState
from .registry import PoolRegistry

__all__ = [
    "BalanceTable",
    "ZERO_ADDRESS",
    "normalize_address",
    "PoolKey",
    "canonicalize",
    "sort_tokens",
    "PoolSnapshot",
    "PoolState",
    "PoolRegistry",
]
