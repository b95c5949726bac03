"""
Identifiers and single-token balance tracking.

Token and account identifiers are 20-byte addresses carried as 0x-prefixed
lower-case hex strings. Their total order is the numeric value of the address.
"""

import re
from typing import Dict


# Type aliases
TokenId = str  # 20-byte address as hex string
AccountId = str  # 20-byte address as hex string
Amount = int  # Non-negative integer (arbitrary precision)

ADDRESS_BYTES = 20

# Null account; never a valid recipient
ZERO_ADDRESS = "0x" + "00" * ADDRESS_BYTES

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]+$")


def normalize_address(value: str, *, name: str = "address") -> str:
    """
    Canonicalize an address (lowercase, 0x-prefixed).

    Accepts either 0x-prefixed or raw hex input.

    Raises:
        TypeError: If value is not a string
        ValueError: If value is not a 20-byte hex string
    """
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str")
    s = value.strip()
    if s.lower().startswith("0x"):
        s = s[2:]
    expected_len = 2 * ADDRESS_BYTES
    if len(s) != expected_len:
        raise ValueError(f"{name} must be {ADDRESS_BYTES} bytes (hex length {expected_len})")
    if not _HEX_CHARS_RE.fullmatch(s):
        raise ValueError(f"{name} must be valid hex")
    return "0x" + s.lower()


def address_value(address: str) -> int:
    """Numeric value of a normalized address; defines the identifier order."""
    return int(address[2:], 16)


class BalanceTable:
    """
    Balance table for one token, mapping account -> amount.

    Zero balances are omitted to keep the table sparse.
    """

    def __init__(self):
        self._balances: Dict[AccountId, Amount] = {}

    def get(self, account: AccountId) -> Amount:
        """Get balance for account. Returns 0 if not found."""
        return self._balances.get(account, 0)

    def set(self, account: AccountId, amount: Amount) -> None:
        """
        Set balance for account.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def add(self, account: AccountId, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(account)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(account, new_balance)

    def subtract(self, account: AccountId, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(account, -delta)

    def total(self) -> Amount:
        return sum(self._balances.values())

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
