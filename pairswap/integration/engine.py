"""
Pool engine: liquidity provision and direct two-token swaps.

This is the imperative shell around the pure kernels in `pairswap.core`:
- Validates the call (deadline, pair, recipient) once at entry.
- Holds the pool lock for the whole call, external transfers included.
- Mutates a staged copy of the pool and commits it only after every transfer
  of the call has succeeded.
- Emits one domain event per successful call.

If a call fails after tokens were pulled from the caller, the pulled amounts
are sent back before the error is re-raised.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from ..core.cpmm import swap_exact_in
from ..core.errors import (
    AmmError,
    ExpiredDeadline,
    ExternalTransferFailed,
    InsufficientLiquidityShares,
    InvalidRecipient,
    SlippageExceeded,
    UnsupportedPath,
)
from ..core.events import EventSink, LiquidityAdded, LiquidityRemoved, PoolEvent, TokenSwapped
from ..core.liquidity import (
    check_minimums,
    compute_deposit_amounts,
    compute_liquidity_minted,
    compute_withdrawal_amounts,
)
from ..state.balances import AccountId, Amount, TokenId, ZERO_ADDRESS, normalize_address
from ..state.keys import canonicalize
from ..state.registry import PoolRegistry
from .config import EngineConfig
from .tokens import Token
from .view import PoolView

logger = logging.getLogger(__name__)


def _wall_clock() -> int:
    return int(time.time())


def _require_amount(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


class _TransferJournal:
    """Pulls completed during one call, in order."""

    def __init__(self) -> None:
        self.pulls: List[Tuple[TokenId, Token, AccountId, Amount]] = []

    def record_pull(self, token_id: TokenId, token: Token, owner: AccountId, amount: Amount) -> None:
        self.pulls.append((token_id, token, owner, amount))


class PoolEngine:
    """
    Liquidity and swap operations over a PoolRegistry.

    Args:
        tokens: Token collaborators by (normalized) token address
        registry: Pool registry; a fresh one is created if omitted
        config: Engine configuration (custody address, price scale)
        clock: Returns the current time compared against deadlines
        event_sink: Receives each committed event
    """

    def __init__(
        self,
        tokens: Mapping[TokenId, Token],
        *,
        registry: Optional[PoolRegistry] = None,
        config: Optional[EngineConfig] = None,
        clock: Optional[Callable[[], int]] = None,
        event_sink: Optional[EventSink] = None,
    ) -> None:
        self._tokens = {normalize_address(k, name="token"): v for k, v in tokens.items()}
        self._registry = registry if registry is not None else PoolRegistry()
        self._config = config if config is not None else EngineConfig()
        self._clock = clock if clock is not None else _wall_clock
        self._event_sink = event_sink

    @property
    def registry(self) -> PoolRegistry:
        return self._registry

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def address(self) -> AccountId:
        return self._config.engine_address

    def view(self) -> PoolView:
        """Read-only queries over this engine's pools, priced with its config."""
        return PoolView(self._registry, config=self._config)

    # ------------------------------------------------------------------
    # Liquidity
    # ------------------------------------------------------------------

    def add_liquidity(
        self,
        caller: AccountId,
        token_a: TokenId,
        token_b: TokenId,
        amount_a_desired: Amount,
        amount_b_desired: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        recipient: AccountId,
        deadline: int,
    ) -> Tuple[Amount, Amount, Amount]:
        """
        Deposit both tokens of a pair and mint shares to recipient.

        The full desired amounts are pulled before the credited amounts are
        computed; any excess stays in engine custody.

        Returns:
            Tuple of (amount_a, amount_b, liquidity)
        """
        self._check_deadline(deadline)
        pool_key = canonicalize(token_a, token_b)
        token_a = normalize_address(token_a, name="token_a")
        token_b = normalize_address(token_b, name="token_b")
        recipient = self._check_recipient(recipient)
        caller = normalize_address(caller, name="caller")
        for name, v in (
            ("amount_a_desired", amount_a_desired),
            ("amount_b_desired", amount_b_desired),
            ("amount_a_min", amount_a_min),
            ("amount_b_min", amount_b_min),
        ):
            _require_amount(name, v)

        journal = _TransferJournal()
        with self._registry.lock_for(pool_key):
            try:
                with self._registry.transaction(pool_key) as pool:
                    self._pull(journal, token_a, caller, amount_a_desired)
                    self._pull(journal, token_b, caller, amount_b_desired)

                    reserve_a, reserve_b = pool.reserves_for(token_a)
                    amount_a, amount_b = compute_deposit_amounts(
                        reserve_a=reserve_a,
                        reserve_b=reserve_b,
                        total_shares=pool.total_shares,
                        amount_a_desired=amount_a_desired,
                        amount_b_desired=amount_b_desired,
                    )
                    check_minimums(amount_a, amount_b, amount_a_min, amount_b_min)

                    liquidity = compute_liquidity_minted(amount_a, amount_b)
                    pool.set_reserves_for(token_a, reserve_a + amount_a, reserve_b + amount_b)
                    pool.mint_shares(recipient, liquidity)
            except Exception as exc:
                self._reject("add_liquidity", pool_key.key, exc, journal)
                raise

            self._emit(
                LiquidityAdded(
                    provider=caller,
                    token_a=token_a,
                    token_b=token_b,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    liquidity=liquidity,
                )
            )
        return amount_a, amount_b, liquidity

    def remove_liquidity(
        self,
        caller: AccountId,
        token_a: TokenId,
        token_b: TokenId,
        liquidity: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        recipient: AccountId,
        deadline: int,
    ) -> Tuple[Amount, Amount]:
        """
        Burn the caller's shares and send the released reserves to recipient.

        Returns:
            Tuple of (amount_a, amount_b)
        """
        self._check_deadline(deadline)
        pool_key = canonicalize(token_a, token_b)
        token_a = normalize_address(token_a, name="token_a")
        token_b = normalize_address(token_b, name="token_b")
        recipient = self._check_recipient(recipient)
        caller = normalize_address(caller, name="caller")
        for name, v in (
            ("liquidity", liquidity),
            ("amount_a_min", amount_a_min),
            ("amount_b_min", amount_b_min),
        ):
            _require_amount(name, v)

        journal = _TransferJournal()
        with self._registry.lock_for(pool_key):
            try:
                with self._registry.transaction(pool_key) as pool:
                    available = pool.share_of(caller)
                    if available < liquidity:
                        raise InsufficientLiquidityShares(caller, liquidity, available)

                    reserve_a, reserve_b = pool.reserves_for(token_a)
                    amount_a, amount_b = compute_withdrawal_amounts(
                        liquidity=liquidity,
                        reserve_a=reserve_a,
                        reserve_b=reserve_b,
                        total_shares=pool.total_shares,
                    )
                    check_minimums(amount_a, amount_b, amount_a_min, amount_b_min)

                    pool.set_reserves_for(token_a, reserve_a - amount_a, reserve_b - amount_b)
                    pool.burn_shares(caller, liquidity)

                    self._push(token_a, recipient, amount_a)
                    self._push(token_b, recipient, amount_b)
            except Exception as exc:
                self._reject("remove_liquidity", pool_key.key, exc, journal)
                raise

            self._emit(
                LiquidityRemoved(
                    provider=caller,
                    token_a=token_a,
                    token_b=token_b,
                    amount_a=amount_a,
                    amount_b=amount_b,
                )
            )
        return amount_a, amount_b

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------

    def swap_exact_tokens_for_tokens(
        self,
        caller: AccountId,
        amount_in: Amount,
        amount_out_min: Amount,
        path: Sequence[TokenId],
        recipient: AccountId,
        deadline: int,
    ) -> Tuple[Amount, Amount]:
        """
        Swap an exact amount of path[0] for as much path[1] as the pool gives.

        Only direct swaps are supported: path must hold exactly two tokens.

        Returns:
            Tuple of (amount_in, amount_out)
        """
        self._check_deadline(deadline)
        if len(path) != 2:
            raise UnsupportedPath(len(path))
        recipient = self._check_recipient(recipient)
        pool_key = canonicalize(path[0], path[1])
        token_in = normalize_address(path[0], name="token_in")
        token_out = normalize_address(path[1], name="token_out")
        caller = normalize_address(caller, name="caller")
        _require_amount("amount_in", amount_in)
        _require_amount("amount_out_min", amount_out_min)

        journal = _TransferJournal()
        with self._registry.lock_for(pool_key):
            try:
                with self._registry.transaction(pool_key) as pool:
                    self._pull(journal, token_in, caller, amount_in)

                    reserve_in, reserve_out = pool.reserves_for(token_in)
                    quote = swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
                    if quote.amount_out < amount_out_min:
                        raise SlippageExceeded("amount_out", quote.amount_out, amount_out_min)

                    pool.set_reserves_for(token_in, quote.new_reserve_in, quote.new_reserve_out)
                    self._push(token_out, recipient, quote.amount_out)
            except Exception as exc:
                self._reject("swap", pool_key.key, exc, journal)
                raise

            self._emit(
                TokenSwapped(
                    user=caller,
                    token_in=token_in,
                    token_out=token_out,
                    amount_in=amount_in,
                    amount_out=quote.amount_out,
                )
            )
        return amount_in, quote.amount_out

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_deadline(self, deadline: int) -> None:
        if not isinstance(deadline, int) or isinstance(deadline, bool):
            raise TypeError("deadline must be an int")
        now = self._clock()
        if now > deadline:
            raise ExpiredDeadline(deadline, now)

    def _check_recipient(self, recipient: Optional[AccountId]) -> AccountId:
        if recipient is None:
            raise InvalidRecipient(recipient)
        normalized = normalize_address(recipient, name="recipient")
        if normalized == ZERO_ADDRESS:
            raise InvalidRecipient(recipient)
        return normalized

    def _token(self, token_id: TokenId) -> Token:
        token = self._tokens.get(token_id)
        if token is None:
            raise ExternalTransferFailed(token_id, "lookup", 0, "no token collaborator registered")
        return token

    def _pull(self, journal: _TransferJournal, token_id: TokenId, owner: AccountId, amount: Amount) -> None:
        token = self._token(token_id)
        try:
            ok = token.transfer_from(owner, self.address, amount)
        except AmmError:
            raise
        except Exception as exc:
            raise ExternalTransferFailed(token_id, "transfer_from", amount, str(exc)) from exc
        if not ok:
            raise ExternalTransferFailed(token_id, "transfer_from", amount, "token returned false")
        journal.record_pull(token_id, token, owner, amount)

    def _push(self, token_id: TokenId, recipient: AccountId, amount: Amount) -> None:
        token = self._token(token_id)
        try:
            ok = token.transfer(recipient, amount)
        except AmmError:
            raise
        except Exception as exc:
            raise ExternalTransferFailed(token_id, "transfer", amount, str(exc)) from exc
        if not ok:
            raise ExternalTransferFailed(token_id, "transfer", amount, "token returned false")

    def _reject(self, op: str, pool_key: str, exc: Exception, journal: _TransferJournal) -> None:
        logger.warning("%s on pool %s rejected: %s", op, pool_key, exc)
        for token_id, token, owner, amount in reversed(journal.pulls):
            if amount == 0:
                continue
            try:
                ok = token.transfer(owner, amount)
            except Exception:
                logger.exception("refund of %d %s to %s raised", amount, token_id, owner)
                continue
            if ok:
                logger.warning("refunded %d %s to %s", amount, token_id, owner)
            else:
                logger.error("refund of %d %s to %s was rejected by the token", amount, token_id, owner)

    def _emit(self, event: PoolEvent) -> None:
        logger.debug("event %s", event)
        if self._event_sink is not None:
            self._event_sink(event)
