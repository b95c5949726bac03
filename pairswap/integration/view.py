"""
Read-only pool queries.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.cpmm import get_amount_out
from ..core.errors import DivisionByZero
from ..state.balances import AccountId, Amount, TokenId, normalize_address
from ..state.keys import canonicalize
from ..state.pools import PoolSnapshot
from ..state.registry import PoolRegistry
from .config import EngineConfig


class PoolView:
    """
    Price and reserve reads over a PoolRegistry. Missing pools read as zero.

    Prices are scaled by `config.price_scale` (10**18 by default).
    """

    def __init__(self, registry: PoolRegistry, *, config: Optional[EngineConfig] = None) -> None:
        self._registry = registry
        self._config = config if config is not None else EngineConfig()

    @property
    def price_scale(self) -> int:
        return self._config.price_scale

    def get_pool(self, token_a: TokenId, token_b: TokenId) -> Optional[PoolSnapshot]:
        return self._registry.get(canonicalize(token_a, token_b))

    def get_price(self, token_a: TokenId, token_b: TokenId) -> int:
        """
        Price of token_a in units of token_b, fixed point.

            price = reserve_a * price_scale // reserve_b

        Reserves are oriented to the order of the query arguments.

        Raises:
            DivisionByZero: If the token_b reserve is zero
        """
        key = canonicalize(token_a, token_b)
        token_a = normalize_address(token_a, name="token_a")
        pool = self._registry.get(key)
        reserve_a, reserve_b = (0, 0) if pool is None else pool.reserves_for(token_a)
        if reserve_b == 0:
            raise DivisionByZero(f"zero {normalize_address(token_b, name='token_b')} reserve in pool {key.key}")
        return reserve_a * self.price_scale // reserve_b

    def get_reserves(self, token_a: TokenId, token_b: TokenId) -> Tuple[Amount, Amount]:
        """
        Raw stored reserves (reserve0, reserve1) in canonical slot order.

        Unlike get_price, the result is not reordered to match the arguments.
        """
        pool = self.get_pool(token_a, token_b)
        if pool is None:
            return 0, 0
        return pool.reserve0, pool.reserve1

    def shares_of(self, token_a: TokenId, token_b: TokenId, account: AccountId) -> Amount:
        pool = self.get_pool(token_a, token_b)
        if pool is None:
            return 0
        return pool.share_of(normalize_address(account, name="account"))

    def total_shares(self, token_a: TokenId, token_b: TokenId) -> Amount:
        pool = self.get_pool(token_a, token_b)
        return 0 if pool is None else pool.total_shares

    def get_amount_out(self, amount_in: Amount, token_in: TokenId, token_out: TokenId) -> Amount:
        """Quote a direct swap against current reserves without executing it."""
        pool = self.get_pool(token_in, token_out)
        reserve_in, reserve_out = (0, 0) if pool is None else pool.reserves_for(normalize_address(token_in))
        return get_amount_out(amount_in, reserve_in, reserve_out)
