"""
Pool state for two-token liquidity pools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from ..core.errors import InsufficientLiquidityShares
from .balances import AccountId, Amount, TokenId, address_value


def _orient(pool, token: TokenId) -> Tuple[Amount, Amount]:
    if token == pool.token0:
        return pool.reserve0, pool.reserve1
    if token == pool.token1:
        return pool.reserve1, pool.reserve0
    raise ValueError(f"Token {token} not in pool {pool.pool_key}")


@dataclass
class PoolState:
    """
    Reserve and share state of one pool.

    Attributes:
        pool_key: Canonical pool key (hex string)
        token0: Token with the lower address value
        token1: Token with the higher address value
        reserve0: Reserve amount for token0
        reserve1: Reserve amount for token1
        total_shares: Total liquidity shares outstanding
        shares: Per-account share balances (zero balances omitted)
    """
    pool_key: str
    token0: TokenId
    token1: TokenId
    reserve0: Amount = 0
    reserve1: Amount = 0
    total_shares: Amount = 0
    shares: Dict[AccountId, Amount] = field(default_factory=dict)

    def __post_init__(self):
        """Validate pool state invariants."""
        if address_value(self.token0) >= address_value(self.token1):
            raise ValueError(
                f"Tokens must be in canonical order: {self.token0} < {self.token1}"
            )
        self.check_invariants()

    def is_empty(self) -> bool:
        return self.total_shares == 0

    def reserves_for(self, token: TokenId) -> Tuple[Amount, Amount]:
        """
        Reserves oriented to a token.

        Returns:
            Tuple of (reserve of token, reserve of the other token)

        Raises:
            ValueError: If token is not in this pool
        """
        return _orient(self, token)

    def set_reserves_for(self, token: TokenId, reserve_token: Amount, reserve_other: Amount) -> None:
        """Store reserves given in the orientation of reserves_for(token)."""
        if reserve_token < 0 or reserve_other < 0:
            raise ValueError(f"Reserves must be non-negative: ({reserve_token}, {reserve_other})")
        if token == self.token0:
            self.reserve0, self.reserve1 = reserve_token, reserve_other
        elif token == self.token1:
            self.reserve1, self.reserve0 = reserve_token, reserve_other
        else:
            raise ValueError(f"Token {token} not in pool {self.pool_key}")

    def share_of(self, account: AccountId) -> Amount:
        return self.shares.get(account, 0)

    def mint_shares(self, account: AccountId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Share amount must be non-negative: {amount}")
        if amount == 0:
            return
        self.shares[account] = self.share_of(account) + amount
        self.total_shares += amount

    def burn_shares(self, account: AccountId, amount: Amount) -> None:
        """
        Burn shares held by account.

        Raises:
            InsufficientLiquidityShares: If account holds fewer than amount
        """
        if amount < 0:
            raise ValueError(f"Share amount must be non-negative: {amount}")
        available = self.share_of(account)
        if available < amount:
            raise InsufficientLiquidityShares(account, amount, available)
        remaining = available - amount
        if remaining == 0:
            self.shares.pop(account, None)
        else:
            self.shares[account] = remaining
        self.total_shares -= amount

    def check_invariants(self) -> None:
        """
        Raises:
            ValueError: If any reserve/share invariant does not hold
        """
        if self.reserve0 < 0 or self.reserve1 < 0:
            raise ValueError(
                f"Reserves must be non-negative: ({self.reserve0}, {self.reserve1})"
            )
        if self.total_shares < 0:
            raise ValueError(f"Total shares must be non-negative: {self.total_shares}")
        if any(amount <= 0 for amount in self.shares.values()):
            raise ValueError("Stored share balances must be positive")
        if sum(self.shares.values()) != self.total_shares:
            raise ValueError(
                f"Share balances sum to {sum(self.shares.values())}, total_shares is {self.total_shares}"
            )
        reserves_empty = self.reserve0 == 0 and self.reserve1 == 0
        if (self.total_shares == 0) != reserves_empty:
            raise ValueError(
                f"total_shares ({self.total_shares}) and reserves "
                f"({self.reserve0}, {self.reserve1}) disagree on emptiness"
            )

    def copy(self) -> PoolState:
        return PoolState(
            pool_key=self.pool_key,
            token0=self.token0,
            token1=self.token1,
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            total_shares=self.total_shares,
            shares=dict(self.shares),
        )

    def restore_from(self, other: PoolState) -> None:
        """Overwrite this record's mutable state with another record of the same pool."""
        if other.pool_key != self.pool_key:
            raise ValueError(f"Cannot restore {self.pool_key} from {other.pool_key}")
        self.reserve0 = other.reserve0
        self.reserve1 = other.reserve1
        self.total_shares = other.total_shares
        self.shares = dict(other.shares)

    def snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            pool_key=self.pool_key,
            token0=self.token0,
            token1=self.token1,
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            total_shares=self.total_shares,
            shares=MappingProxyType(dict(self.shares)),
        )

    def __repr__(self) -> str:
        return (
            f"PoolState(pool_key={self.pool_key[:16]}..., "
            f"tokens=({self.token0[:10]}..., {self.token1[:10]}...), "
            f"reserves=({self.reserve0}, {self.reserve1}), "
            f"total_shares={self.total_shares})"
        )


@dataclass(frozen=True)
class PoolSnapshot:
    """Read-only copy of a pool, detached from the registry."""

    pool_key: str
    token0: TokenId
    token1: TokenId
    reserve0: Amount
    reserve1: Amount
    total_shares: Amount
    shares: Mapping[AccountId, Amount]

    def reserves_for(self, token: TokenId) -> Tuple[Amount, Amount]:
        return _orient(self, token)

    def share_of(self, account: AccountId) -> Amount:
        return self.shares.get(account, 0)
