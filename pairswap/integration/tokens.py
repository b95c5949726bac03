"""
Token collaborator interface and an in-memory reference ledger.

The engine only ever calls `transfer_from` (pull into custody) and `transfer`
(push out of custody). A False result or an exception aborts the calling
operation.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from ..state.balances import AccountId, Amount, BalanceTable, TokenId, normalize_address

logger = logging.getLogger(__name__)


class Token(Protocol):
    def transfer_from(self, owner: AccountId, recipient: AccountId, amount: Amount) -> bool:
        ...

    def transfer(self, recipient: AccountId, amount: Amount) -> bool:
        ...


class InMemoryToken:
    """
    Fungible token ledger held in memory.

    `transfer` moves funds out of the `custodian` account, which is the
    engine's custody address. Setting `paused` makes every transfer return
    False.
    """

    def __init__(self, token_id: TokenId, *, custodian: AccountId) -> None:
        self.token_id = normalize_address(token_id, name="token_id")
        self.custodian = normalize_address(custodian, name="custodian")
        self.paused = False
        self._balances = BalanceTable()
        self._lock = threading.Lock()

    def mint(self, account: AccountId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        with self._lock:
            self._balances.add(normalize_address(account, name="account"), amount)

    def balance_of(self, account: AccountId) -> Amount:
        with self._lock:
            return self._balances.get(normalize_address(account, name="account"))

    def total_supply(self) -> Amount:
        with self._lock:
            return self._balances.total()

    def _move(self, sender: AccountId, recipient: AccountId, amount: Amount) -> bool:
        if amount < 0:
            raise ValueError(f"transfer amount must be non-negative: {amount}")
        sender = normalize_address(sender, name="sender")
        recipient = normalize_address(recipient, name="recipient")
        with self._lock:
            if self.paused:
                logger.debug("%s: transfer %s -> %s rejected", self.token_id, sender, recipient)
                return False
            if self._balances.get(sender) < amount:
                logger.debug(
                    "%s: %s has %d, cannot send %d",
                    self.token_id,
                    sender,
                    self._balances.get(sender),
                    amount,
                )
                return False
            self._balances.subtract(sender, amount)
            self._balances.add(recipient, amount)
        return True

    def transfer_from(self, owner: AccountId, recipient: AccountId, amount: Amount) -> bool:
        return self._move(owner, recipient, amount)

    def transfer(self, recipient: AccountId, amount: Amount) -> bool:
        return self._move(self.custodian, recipient, amount)

    def __repr__(self) -> str:
        return f"InMemoryToken({self.token_id}, supply={self.total_supply()})"
