# -*- coding: utf-8 -*-
"""
Typed proxy for calling an AN20 token from another contract.

    token = TokenClient(token_address)
    ok = token.transfer(beneficiary, 25)

Every method is a nested ``env.call``: the token sees the calling contract as
its caller. Results come back untouched; deciding what a ``False`` or an
exception means is the caller's job.
"""
from __future__ import annotations

from typing import Any

from allowance_vm.stdlib import env


class TokenClient:
    __slots__ = ("address",)

    def __init__(self, address: bytes) -> None:
        self.address = bytes(address)

    def __repr__(self) -> str:
        return f"TokenClient(0x{self.address.hex()})"

    def transfer(self, to: bytes, amount: int) -> Any:
        return env.call(self.address, "transfer", to, amount)

    def transfer_from(self, owner: bytes, to: bytes, amount: int) -> Any:
        return env.call(self.address, "transfer_from", owner, to, amount)

    def balance_of(self, who: bytes) -> int:
        return env.call(self.address, "balance_of", who)

    def allowance(self, owner: bytes, spender: bytes) -> int:
        return env.call(self.address, "allowance", owner, spender)


__all__ = ["TokenClient"]
