"""Error taxonomy for pool operations.

Every error is terminal for the call that raised it: the engine discards the
staged pool state, returns any tokens it already pulled, and re-raises to the
immediate caller. Each class carries a stable ``code`` for callers that
report errors as strings.
"""

from __future__ import annotations


class AmmError(Exception):
    """Base class for rejected pool operations."""

    code = "AMM_ERROR"


class ExpiredDeadline(AmmError):
    """Raised when a mutating call arrives after its deadline."""

    code = "EXPIRED"

    def __init__(self, deadline: int, now: int) -> None:
        self.deadline = deadline
        self.now = now
        super().__init__(f"deadline {deadline} has passed (now={now})")


class InvalidTokenPair(AmmError):
    """Raised when both sides of a pair are the same token."""

    code = "IDENTICAL_TOKENS"

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"token pair must be two distinct tokens, got {token} twice")


class InvalidRecipient(AmmError):
    """Raised for a null or zero-address recipient."""

    code = "INVALID_RECIPIENT"

    def __init__(self, recipient: object) -> None:
        self.recipient = recipient
        super().__init__(f"invalid recipient: {recipient!r}")


class ExcessiveInputRequired(AmmError):
    """Raised when the proportional deposit of one side exceeds its desired amount."""

    code = "EXCESSIVE_INPUT"

    def __init__(self, side: str, required: int, desired: int) -> None:
        self.side = side
        self.required = required
        self.desired = desired
        super().__init__(f"excessive input amount {side}: required {required} > desired {desired}")


class SlippageExceeded(AmmError):
    """Raised when a realized amount is below its caller-supplied minimum."""

    code = "SLIPPAGE"

    def __init__(self, what: str, actual: int, minimum: int) -> None:
        self.what = what
        self.actual = actual
        self.minimum = minimum
        super().__init__(f"{what} ({actual}) < minimum ({minimum})")


class InsufficientLiquidityShares(AmmError):
    """Raised when an account burns more shares than it holds."""

    code = "INSUFFICIENT_SHARES"

    def __init__(self, account: str, requested: int, available: int) -> None:
        self.account = account
        self.requested = requested
        self.available = available
        super().__init__(f"{account} holds {available} shares, cannot burn {requested}")


class InsufficientPoolLiquidity(AmmError):
    """Raised when a pool cannot price or accept an operation with its reserves."""

    code = "INSUFFICIENT_LIQUIDITY"


class DivisionByZero(AmmError):
    """Raised by guarded divisions whose divisor is a zero reserve or share supply."""

    code = "DIVISION_BY_ZERO"


class UnsupportedPath(AmmError):
    """Raised for swap paths that are not exactly two tokens."""

    code = "UNSUPPORTED_PATH"

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"only direct two-token swaps are supported, path has {length} tokens")


class ExternalTransferFailed(AmmError):
    """Raised when a Token collaborator rejects or fails a transfer."""

    code = "TRANSFER_FAILED"

    def __init__(self, token: str, action: str, amount: int, detail: str = "") -> None:
        self.token = token
        self.action = action
        self.amount = amount
        msg = f"{action} of {amount} {token} failed"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class ReentrantCall(AmmError):
    """Raised when a call re-enters a pool that already has a call in progress."""

    code = "REENTRANT_CALL"

    def __init__(self, pool_key: str) -> None:
        self.pool_key = pool_key
        super().__init__(f"pool {pool_key} is locked by a call in progress")
