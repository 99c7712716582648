# -*- coding: utf-8 -*-
"""
allowance_contracts.stdlib.token
================================

Shared constants and helpers for the AN20 fungible token
(``allowance_contracts.stdlib.token.fungible``) and its client proxy
(``allowance_contracts.stdlib.token.client``).

Storage layout
--------------
- Balances:   ``b"tok:bal:" + addr``                      -> u256 (32B BE)
- Allowances: ``b"tok:allow:" + sha3_256(owner|spender)`` -> u256 (32B BE)

The allowance key hashes the (owner, spender) pair so it stays within the VM
storage key cap for full-width addresses.

Events
------
- ``b"Transfer"``  {from, to, value}
- ``b"Approval"``  {owner, spender, value}
"""
from __future__ import annotations

from typing import Any, Final

from allowance_vm.stdlib import abi, hash

from ..math import U256_MAX

BAL_PREFIX: Final[bytes] = b"tok:bal:"
ALLOW_PREFIX: Final[bytes] = b"tok:allow:"

EVT_TRANSFER: Final[bytes] = b"Transfer"
EVT_APPROVAL: Final[bytes] = b"Approval"

RECEIVER_HOOK: Final[str] = "on_token_received"

DEFAULT_DECIMALS: Final[int] = 18
MAX_DECIMALS: Final[int] = 36

ERR_BAD_ADDR: Final[str] = "TOKEN:BAD_ADDR"
ERR_BAD_AMOUNT: Final[str] = "TOKEN:BAD_AMOUNT"
ERR_BAD_SYMBOL: Final[str] = "TOKEN:BAD_SYMBOL"
ERR_BAD_NAME: Final[str] = "TOKEN:BAD_NAME"


# -----------------------------------------------------------------------------
# Key derivation
# -----------------------------------------------------------------------------


def key_balance(addr: bytes) -> bytes:
    require_address(addr)
    return BAL_PREFIX + bytes(addr)


def key_allow(owner: bytes, spender: bytes) -> bytes:
    require_address(owner)
    require_address(spender)
    return ALLOW_PREFIX + hash.sha3_256(bytes(owner) + b"|" + bytes(spender))


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


def require_address(addr: Any) -> None:
    """Ensure `addr` is non-empty bytes."""
    if not isinstance(addr, (bytes, bytearray)) or len(addr) == 0:
        abi.revert(b"TOKEN:BAD_ADDR", code=ERR_BAD_ADDR)


def require_amount(n: Any) -> None:
    """Ensure `n` is an integer amount in [0, 2**256-1]."""
    if isinstance(n, bool) or not isinstance(n, int) or n < 0 or n > U256_MAX:
        abi.revert(b"TOKEN:BAD_AMOUNT", code=ERR_BAD_AMOUNT)


def is_printable_ascii(s: Any) -> bool:
    if not isinstance(s, (bytes, bytearray)) or len(s) == 0:
        return False
    return all(32 <= b <= 126 for b in s)


def require_symbol(sym: bytes) -> None:
    """Symbol must be 1..11 printable ASCII."""
    if not is_printable_ascii(sym) or not (1 <= len(sym) <= 11):
        abi.revert(b"TOKEN:BAD_SYMBOL", code=ERR_BAD_SYMBOL)


def require_name(name: bytes) -> None:
    """Name must be 1..64 printable ASCII."""
    if not is_printable_ascii(name) or not (1 <= len(name) <= 64):
        abi.revert(b"TOKEN:BAD_NAME", code=ERR_BAD_NAME)


def normalize_symbol(sym: bytes) -> bytes:
    """ASCII-uppercase a (validated) symbol."""
    return bytes(sym).upper()


def clamp_decimals(n: int) -> int:
    if n < 0:
        return 0
    if n > MAX_DECIMALS:
        return MAX_DECIMALS
    return n


__all__ = [
    "BAL_PREFIX",
    "ALLOW_PREFIX",
    "EVT_TRANSFER",
    "EVT_APPROVAL",
    "RECEIVER_HOOK",
    "DEFAULT_DECIMALS",
    "MAX_DECIMALS",
    "ERR_BAD_ADDR",
    "ERR_BAD_AMOUNT",
    "ERR_BAD_SYMBOL",
    "ERR_BAD_NAME",
    "key_balance",
    "key_allow",
    "require_address",
    "require_amount",
    "is_printable_ascii",
    "require_symbol",
    "require_name",
    "normalize_symbol",
    "clamp_decimals",
]
