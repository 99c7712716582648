# -*- coding: utf-8 -*-
"""
Token stand-in whose transfers can be told to misbehave.

mode b"ok"     transfers succeed (no balances are tracked)
mode b"false"  transfers return False
mode b"abort"  transfers revert
mode b"none"   transfers return None
"""
from __future__ import annotations

from allowance_vm.stdlib import abi, storage

K_MODE = b"stub:mode"


def init(mode: bytes) -> None:
    storage.set(K_MODE, mode)


def set_mode(mode: bytes) -> None:
    storage.set(K_MODE, mode)


def _outcome():
    mode = storage.get(K_MODE)
    if mode == b"abort":
        abi.revert(b"stub token abort", code="STUB:ABORT")
    if mode == b"false":
        return False
    if mode == b"none":
        return None
    return True


def transfer(to: bytes, amount: int):
    return _outcome()


def transfer_from(owner: bytes, to: bytes, amount: int):
    return _outcome()


def balance_of(who: bytes) -> int:
    return 0


def allowance(owner: bytes, spender: bytes) -> int:
    return 0


__all__ = ["init", "set_mode", "transfer", "transfer_from", "balance_of", "allowance"]
