# -*- coding: utf-8 -*-
"""
Beneficiary contract that re-enters the vault from the token receiver hook.

mode b"catch"      the nested claim's error is recorded and swallowed
mode b"propagate"  the nested claim's error aborts the hook (and the transfer)

It re-enters at most once.
"""
from __future__ import annotations

from allowance_vm.stdlib import env, storage
from allowance_vm.stdlib.abi import VmError

K_VAULT = b"rx:vault"
K_AMOUNT = b"rx:amount"
K_MODE = b"rx:mode"
K_ENTERED = b"rx:entered"
K_CODE = b"rx:code"


def init(vault: bytes, reenter_amount: int, mode: bytes) -> None:
    storage.set(K_VAULT, vault)
    storage.set_int(K_AMOUNT, reenter_amount)
    storage.set(K_MODE, mode)


def claim(amount: int) -> int:
    return env.call(storage.get(K_VAULT), "claim", amount)


def on_token_received(sender: bytes, amount: int) -> None:
    if storage.get(K_ENTERED):
        return
    storage.set(K_ENTERED, b"1")
    vault = storage.get(K_VAULT)
    again = storage.get_int(K_AMOUNT)
    if storage.get(K_MODE) == b"catch":
        try:
            env.call(vault, "claim", again)
        except VmError as exc:
            storage.set(K_CODE, exc.code.encode("ascii"))
        else:
            storage.set(K_CODE, b"ok")
    else:
        env.call(vault, "claim", again)


def last_code() -> bytes:
    return storage.get(K_CODE) or b""


__all__ = ["init", "claim", "on_token_received", "last_code"]
