"""
Core AMM algorithms
"""

from .cpmm import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    SwapQuote,
    get_amount_out,
    quote,
    swap_exact_in,
)
from .liquidity import (
    check_minimums,
    compute_deposit_amounts,
    compute_liquidity_minted,
    compute_withdrawal_amounts,
)
from .events import EventLog, LiquidityAdded, LiquidityRemoved, TokenSwapped
from .errors import (
    AmmError,
    DivisionByZero,
    ExcessiveInputRequired,
    ExpiredDeadline,
    ExternalTransferFailed,
    InsufficientLiquidityShares,
    InsufficientPoolLiquidity,
    InvalidRecipient,
    InvalidTokenPair,
    ReentrantCall,
    SlippageExceeded,
    UnsupportedPath,
)

__all__ = [
    "FEE_DENOMINATOR",
    "FEE_NUMERATOR",
    "SwapQuote",
    "get_amount_out",
    "quote",
    "swap_exact_in",
    "check_minimums",
    "compute_deposit_amounts",
    "compute_liquidity_minted",
    "compute_withdrawal_amounts",
    "EventLog",
    "LiquidityAdded",
    "LiquidityRemoved",
    "TokenSwapped",
    "AmmError",
    "DivisionByZero",
    "ExcessiveInputRequired",
    "ExpiredDeadline",
    "ExternalTransferFailed",
    "InsufficientLiquidityShares",
    "InsufficientPoolLiquidity",
    "InvalidRecipient",
    "InvalidTokenPair",
    "ReentrantCall",
    "SlippageExceeded",
    "UnsupportedPath",
]
