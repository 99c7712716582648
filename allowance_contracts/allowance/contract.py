# -*- coding: utf-8 -*-
"""
Allowance vault contract
========================

Deployable module. The deployer becomes the grantor.

Public interface (ABI sketch)
-----------------------------
# construction
init(token: bytes, window_duration: int) -> None

# grantor-only
fund(amount: int) -> int
configure(beneficiary: bytes, quota: int) -> None
revoke(beneficiary: bytes) -> None

# beneficiary
claim(amount: int) -> int

# views
remaining_quota(beneficiary: bytes) -> int
grantor() -> bytes
token() -> bytes
window_duration() -> int
is_beneficiary(who: bytes) -> bool
allowance_of(who: bytes) -> dict
window_ends_at(who: bytes) -> int
pool_balance() -> int
fundable() -> int

Events
------
- b"Funded"               {from, amount}
- b"AllowanceConfigured"  {beneficiary, quota}
- b"Claimed"              {beneficiary, amount}
- b"Revoked"              {beneficiary}
"""
from __future__ import annotations

from typing import Any, Dict

from allowance_vm.stdlib import env, events

from ..errors import InvalidArgument, InvalidConfiguration, NotFound
from ..stdlib.access import get_grantor, init_grantor, require_grantor
from ..stdlib.math import is_u256
from ..stdlib.token.client import TokenClient
from ..stdlib.utils import is_address, is_null_address
from . import claim as _claim
from . import ledger

EVT_FUNDED = b"Funded"
EVT_CONFIGURED = b"AllowanceConfigured"
EVT_REVOKED = b"Revoked"
EVT_CLAIMED = _claim.EVT_CLAIMED

_NO_RECORD = ledger.AllowanceRecord(quota=0, spent=0, window_start=0)


def _require_identity(who: Any) -> bytes:
    if not is_address(who, env.address_len()) or is_null_address(who):
        raise InvalidArgument("beneficiary must be a non-null identity")
    return bytes(who)


def _require_quota(quota: Any) -> int:
    if not is_u256(quota):
        raise InvalidArgument("quota must be an integer in [0, 2**256-1]", context={"quota": repr(quota)})
    return quota


def _token() -> TokenClient:
    return TokenClient(ledger.token_address())


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def init(token: bytes, window_duration: int) -> None:
    if ledger.is_configured() or get_grantor() is not None:
        raise InvalidConfiguration("vault already initialized")
    if is_null_address(token) or not is_address(token, env.address_len()):
        raise InvalidConfiguration("token must be a non-null identity")
    if not is_u256(window_duration) or window_duration == 0:
        raise InvalidConfiguration(
            "window duration must be a positive integer",
            context={"window_duration": repr(window_duration)},
        )
    if not env.is_contract(token):
        raise InvalidConfiguration("no token contract at the given address")

    init_grantor(env.caller())
    ledger.set_params(token, window_duration)


# ---------------------------------------------------------------------------
# Grantor operations
# ---------------------------------------------------------------------------

def fund(amount: int) -> int:
    """Pull `amount` from the grantor into the pool (requires a prior token approval)."""
    grantor_ = require_grantor()
    _claim.require_positive_amount(amount)
    _claim.checked_transfer("transfer_from", _token().transfer_from, grantor_, env.address(), amount)
    events.emit(EVT_FUNDED, {b"from": grantor_, b"amount": amount})
    return amount


def configure(beneficiary: bytes, quota: int) -> None:
    require_grantor()
    who = _require_identity(beneficiary)
    _require_quota(quota)
    ledger.configure(who, quota, env.now())
    events.emit(EVT_CONFIGURED, {b"beneficiary": who, b"quota": quota})


def revoke(beneficiary: bytes) -> None:
    require_grantor()
    if not ledger.is_active(beneficiary):
        raise NotFound("no active allowance for beneficiary")
    ledger.revoke(beneficiary)
    events.emit(EVT_REVOKED, {b"beneficiary": bytes(beneficiary)})


# ---------------------------------------------------------------------------
# Beneficiary operations
# ---------------------------------------------------------------------------

def claim(amount: int) -> int:
    return _claim.claim(amount)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

def remaining_quota(beneficiary: bytes) -> int:
    if not ledger.is_identity(beneficiary):
        return 0
    return ledger.remaining(bytes(beneficiary), env.now())


def grantor() -> bytes:
    return get_grantor() or b""


def token() -> bytes:
    return ledger.token_address()


def window_duration() -> int:
    return ledger.window_duration()


def is_beneficiary(who: bytes) -> bool:
    return ledger.is_active(who)


def allowance_of(who: bytes) -> Dict[str, Any]:
    rec = ledger.load(who)
    if rec is None:
        return _NO_RECORD.to_dict(active=False)
    return rec.to_dict()


def window_ends_at(who: bytes) -> int:
    if not is_beneficiary(who):
        return 0
    return ledger.window_ends_at(bytes(who), env.now())


def pool_balance() -> int:
    return _token().balance_of(env.address())


def fundable() -> int:
    g = get_grantor()
    if g is None:
        return 0
    tok = _token()
    return min(tok.allowance(g, env.address()), tok.balance_of(g))


__all__ = [
    "init",
    "fund",
    "configure",
    "revoke",
    "claim",
    "remaining_quota",
    "grantor",
    "token",
    "window_duration",
    "is_beneficiary",
    "allowance_of",
    "window_ends_at",
    "pool_balance",
    "fundable",
]
