"""
Canonical pool keys.

A pool is identified by its unordered token pair. The pair is sorted by
address value and hashed behind a domain-separation prefix:

    key = H("pairswap:PoolKey:v1\\0" || len(token0) || token0 || len(token1) || token1)

so that (A, B) and (B, A) resolve to the same record.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Tuple

from ..core.errors import InvalidTokenPair
from .balances import TokenId, address_value, normalize_address


POOL_KEY_VERSION = 1


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """
    Create a domain separation prefix.

    The output is ASCII-only and NUL-terminated to make concatenation unambiguous.
    """
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label:
        raise ValueError("label must not contain NUL")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return b"pairswap:" + label.encode("ascii") + b":v" + str(version).encode("ascii") + b"\x00"


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uvarint must be a non-negative int, got {value!r}")
    out = bytearray()
    n = value
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _length_prefixed(token: TokenId) -> bytes:
    raw = bytes.fromhex(token[2:])
    return encode_uvarint(len(raw)) + raw


@dataclass(frozen=True)
class PoolKey:
    """
    Canonical identity of a token pair.

    Attributes:
        key: 32-byte pool key (hex string)
        token0: Token with the lower address value
        token1: Token with the higher address value
    """

    key: str
    token0: TokenId
    token1: TokenId

    def __str__(self) -> str:
        return self.key


def sort_tokens(token_a: TokenId, token_b: TokenId) -> Tuple[TokenId, TokenId]:
    """Return (token0, token1) ordered by address value."""
    a = normalize_address(token_a, name="token_a")
    b = normalize_address(token_b, name="token_b")
    if a == b:
        raise InvalidTokenPair(a)
    return (a, b) if address_value(a) < address_value(b) else (b, a)


def canonicalize(token_a: TokenId, token_b: TokenId) -> PoolKey:
    """
    Derive the canonical key for an unordered pair.

    Commutative: canonicalize(A, B) == canonicalize(B, A).

    Raises:
        InvalidTokenPair: If both tokens are the same
    """
    token0, token1 = sort_tokens(token_a, token_b)
    data = domain_sep_bytes("PoolKey", POOL_KEY_VERSION) + _length_prefixed(token0) + _length_prefixed(token1)
    return PoolKey(key="0x" + hashlib.sha256(data).hexdigest(), token0=token0, token1=token1)
