# -*- coding: utf-8 -*-
"""
AN20 fungible token
===================

Deterministic, float-free, storage-backed token contract for ``allowance_vm``.
It is the collaborator the allowance vault moves value through.

Public interface (ABI sketch)
-----------------------------
# metadata / views
name() -> bytes
symbol() -> bytes
decimals() -> int
total_supply() -> int
balance_of(addr: bytes) -> int
allowance(owner: bytes, spender: bytes) -> int

# state-changing (caller is the immediate caller, ``env.caller()``)
init(name: bytes, symbol: bytes, decimals: int, initial_supply: int) -> None
transfer(to: bytes, amount: int) -> bool
approve(spender: bytes, amount: int) -> bool
transfer_from(owner: bytes, to: bytes, amount: int) -> bool

Receiver hook
-------------
After a non-zero ``transfer``/``transfer_from`` commits its balance moves, if
the recipient is a contract exporting ``on_token_received(sender, amount)``
the token calls it. The hook runs inside the transfer: if it raises, the
whole transfer is undone.

Insufficient balance or allowance reverts (``TOKEN:INSUFFICIENT_BALANCE``,
``TOKEN:ALLOWANCE_LOW``); the boolean return is always True on success.
"""

from __future__ import annotations

from typing import Final

from allowance_vm.stdlib import abi, env, events, storage

from ..math.safe_uint import u256_add, u256_from_bytes, u256_sub, u256_to_bytes
from . import (EVT_APPROVAL, EVT_TRANSFER, RECEIVER_HOOK, clamp_decimals,
               key_allow, key_balance, normalize_symbol, require_address,
               require_amount, require_name, require_symbol)

K_NAME: Final[bytes] = b"tok:meta:name"
K_SYMBOL: Final[bytes] = b"tok:meta:symbol"
K_DECIMALS: Final[bytes] = b"tok:meta:dec"
K_TOTAL: Final[bytes] = b"tok:meta:total"
K_INIT: Final[bytes] = b"tok:meta:inited"

ZERO_ADDR: Final[bytes] = b"\x00"  # non-empty sentinel for mint Transfer events


def _get_u256(k: bytes) -> int:
    return u256_from_bytes(storage.get(k))


def _set_u256(k: bytes, n: int) -> None:
    storage.set(k, u256_to_bytes(n))


# ------------------------------------------------------------------------------
# Metadata
# ------------------------------------------------------------------------------


def name() -> bytes:
    return storage.get(K_NAME) or b""


def symbol() -> bytes:
    return storage.get(K_SYMBOL) or b""


def decimals() -> int:
    return _get_u256(K_DECIMALS)


def total_supply() -> int:
    return _get_u256(K_TOTAL)


# ------------------------------------------------------------------------------
# Init (one-time)
# ------------------------------------------------------------------------------


def init(name: bytes, symbol: bytes, decimals: int, initial_supply: int) -> None:
    """Record metadata and mint `initial_supply` to the deployer."""
    if storage.get(K_INIT):
        abi.revert(b"TOKEN:ALREADY_INIT", code="TOKEN:ALREADY_INIT")

    require_name(name)
    require_symbol(symbol)
    require_amount(initial_supply)
    owner = env.caller()

    storage.set(K_NAME, bytes(name))
    storage.set(K_SYMBOL, normalize_symbol(symbol))
    _set_u256(K_DECIMALS, clamp_decimals(int(decimals)))
    storage.set(K_INIT, b"1")

    if initial_supply > 0:
        _set_u256(K_TOTAL, initial_supply)
        _set_u256(key_balance(owner), initial_supply)
        events.emit(EVT_TRANSFER, {b"from": ZERO_ADDR, b"to": owner, b"value": initial_supply})


# ------------------------------------------------------------------------------
# Views
# ------------------------------------------------------------------------------


def balance_of(addr: bytes) -> int:
    require_address(addr)
    return _get_u256(key_balance(addr))


def allowance(owner: bytes, spender: bytes) -> int:
    return _get_u256(key_allow(owner, spender))


# ------------------------------------------------------------------------------
# Mutations
# ------------------------------------------------------------------------------


def transfer(to: bytes, amount: int) -> bool:
    sender = env.caller()
    require_address(to)
    require_amount(amount)
    if amount == 0:
        events.emit(EVT_TRANSFER, {b"from": sender, b"to": to, b"value": 0})
        return True

    _move(sender, to, amount)
    _notify_receiver(sender, to, amount)
    return True


def approve(spender: bytes, amount: int) -> bool:
    owner = env.caller()
    require_address(spender)
    require_amount(amount)

    _set_u256(key_allow(owner, spender), amount)
    events.emit(EVT_APPROVAL, {b"owner": owner, b"spender": spender, b"value": amount})
    return True


def transfer_from(owner: bytes, to: bytes, amount: int) -> bool:
    """Spender (the caller) moves `amount` from `owner` to `to` using allowance."""
    spender = env.caller()
    require_address(owner)
    require_address(to)
    require_amount(amount)
    if amount == 0:
        events.emit(EVT_TRANSFER, {b"from": owner, b"to": to, b"value": 0})
        return True

    allow_key = key_allow(owner, spender)
    current_allow = _get_u256(allow_key)
    if current_allow < amount:
        abi.revert(b"TOKEN:ALLOWANCE_LOW", code="TOKEN:ALLOWANCE_LOW")
    _set_u256(allow_key, u256_sub(current_allow, amount))

    _move(owner, to, amount)
    _notify_receiver(owner, to, amount)
    return True


# ------------------------------------------------------------------------------
# Internals
# ------------------------------------------------------------------------------


def _move(src: bytes, dst: bytes, amount: int) -> None:
    src_key = key_balance(src)
    src_bal = _get_u256(src_key)
    if src_bal < amount:
        abi.revert(b"TOKEN:INSUFFICIENT_BALANCE", code="TOKEN:INSUFFICIENT_BALANCE")
    _set_u256(src_key, u256_sub(src_bal, amount))

    dst_key = key_balance(dst)
    _set_u256(dst_key, u256_add(_get_u256(dst_key), amount))
    events.emit(EVT_TRANSFER, {b"from": src, b"to": dst, b"value": amount})


def _notify_receiver(src: bytes, dst: bytes, amount: int) -> None:
    if dst != env.address() and env.exports(dst, RECEIVER_HOOK):
        env.call(dst, RECEIVER_HOOK, src, amount)


__all__ = [
    "name",
    "symbol",
    "decimals",
    "total_supply",
    "balance_of",
    "allowance",
    "init",
    "transfer",
    "approve",
    "transfer_from",
]
