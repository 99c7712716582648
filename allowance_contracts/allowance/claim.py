# -*- coding: utf-8 -*-
"""
allowance_contracts.allowance.claim
===================================

Beneficiary withdrawal. The order of steps is fixed:

1. no active record            -> NotFound
2. amount == 0 (or malformed)  -> InvalidArgument
3. roll the window over if it has elapsed (persisted)
4. amount > available          -> ExceedsAllowance
5. debit ``spent``
6. token transfer to the caller; False or abort -> TransferFailed
7. emit ``Claimed``

The debit in step 5 is written before the token is called, so a receiver hook
that re-enters ``claim`` during step 6 sees the reduced quota. Any failure
unwinds the whole call, debit included.
"""
from __future__ import annotations

from typing import Any, Callable

from allowance_vm.stdlib import env, events

from ..errors import ExceedsAllowance, InvalidArgument, NotFound, TransferFailed
from ..stdlib.math import is_u256
from ..stdlib.token.client import TokenClient
from . import ledger

EVT_CLAIMED = b"Claimed"


def require_positive_amount(amount: Any) -> int:
    if not is_u256(amount):
        raise InvalidArgument("amount must be an integer in [0, 2**256-1]", context={"amount": repr(amount)})
    if amount == 0:
        raise InvalidArgument("amount must be non-zero")
    return amount


def checked_transfer(op: str, fn: Callable[..., Any], *args: Any) -> None:
    """
    Run a token call and map both a non-True result and an abort to
    ``TransferFailed``.
    """
    try:
        ok = fn(*args)
    except Exception as exc:
        code = getattr(exc, "code", type(exc).__name__)
        raise TransferFailed(f"token {op} aborted", context={"cause": code}) from exc
    if ok is not True:
        raise TransferFailed(f"token {op} reported failure", context={"result": repr(ok)})


def claim(amount: int) -> int:
    who = env.caller()
    rec = ledger.load(who)
    if rec is None:
        raise NotFound("caller is not a beneficiary")
    require_positive_amount(amount)

    now = env.now()
    rec = ledger.rollover(who, rec, now)
    available = rec.available(now, ledger.window_duration())
    if amount > available:
        raise ExceedsAllowance(
            "claim exceeds remaining quota",
            context={"requested": amount, "available": available},
        )

    ledger.debit(who, rec, amount)

    token = TokenClient(ledger.token_address())
    checked_transfer("transfer", token.transfer, who, amount)

    events.emit(EVT_CLAIMED, {b"beneficiary": who, b"amount": amount})
    return amount


__all__ = ["EVT_CLAIMED", "claim", "checked_transfer", "require_positive_amount"]
