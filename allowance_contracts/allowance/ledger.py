# -*- coding: utf-8 -*-
"""
allowance_contracts.allowance.ledger
====================================

Quota ledger: the per-beneficiary allowance records and the window logic.

Storage layout
--------------
- ``b"alw:token"``          token contract address
- ``b"alw:window"``         window duration in seconds (u256, 32B BE)
- ``b"alw:rec:" + who``     packed record: quota | spent | window_start (3 x 32B)

Only fixed-width identities can own a record; any other value reads as
absent. A record exists iff the beneficiary is active; ``revoke`` deletes it
outright, so a later ``configure`` starts a fresh window with zero spend.

Rollover is lazy. Reads compute the post-rollover view without writing it;
only ``rollover`` (called from a claim) persists a new window, anchored at
``now`` no matter how many whole windows went by idle.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from allowance_vm.stdlib import env, storage

from ..stdlib.math import (u256_add, u256_add_sat, u256_from_bytes,
                           u256_sub_floor, u256_to_bytes)
from ..stdlib.utils import is_address

K_TOKEN = b"alw:token"
K_WINDOW = b"alw:window"
REC_PREFIX = b"alw:rec:"

_FIELD = 32


@dataclass(frozen=True)
class AllowanceRecord:
    quota: int
    spent: int
    window_start: int

    def window_elapsed(self, now: int, duration: int) -> bool:
        # now - start >= duration; never forms start + duration
        return now >= self.window_start and now - self.window_start >= duration

    def available(self, now: int, duration: int) -> int:
        """Remaining quota as of `now`, including a not-yet-persisted rollover."""
        if self.window_elapsed(now, duration):
            return self.quota
        return u256_sub_floor(self.quota, self.spent)

    def rolled_over(self, now: int) -> "AllowanceRecord":
        return replace(self, spent=0, window_start=now)

    def encode(self) -> bytes:
        return u256_to_bytes(self.quota) + u256_to_bytes(self.spent) + u256_to_bytes(self.window_start)

    @classmethod
    def decode(cls, raw: bytes) -> "AllowanceRecord":
        return cls(
            quota=u256_from_bytes(raw[0:_FIELD]),
            spent=u256_from_bytes(raw[_FIELD:2 * _FIELD]),
            window_start=u256_from_bytes(raw[2 * _FIELD:3 * _FIELD]),
        )

    def to_dict(self, active: bool = True) -> Dict[str, Any]:
        return {
            "quota": self.quota,
            "spent": self.spent,
            "window_start": self.window_start,
            "active": active,
        }


# ---------------------------------------------------------------------------
# Global parameters (set once at construction)
# ---------------------------------------------------------------------------

def set_params(token: bytes, window_duration: int) -> None:
    storage.set(K_TOKEN, bytes(token))
    storage.set(K_WINDOW, u256_to_bytes(window_duration))


def is_configured() -> bool:
    return storage.exists(K_WINDOW)


def token_address() -> bytes:
    return storage.get(K_TOKEN) or b""


def window_duration() -> int:
    return u256_from_bytes(storage.get(K_WINDOW))


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def _key(who: bytes) -> bytes:
    return REC_PREFIX + bytes(who)


def is_identity(who: Any) -> bool:
    return is_address(who, env.address_len())


def load(who: bytes) -> Optional[AllowanceRecord]:
    if not is_identity(who):
        return None
    raw = storage.get(_key(who))
    return AllowanceRecord.decode(raw) if raw else None


def store(who: bytes, rec: AllowanceRecord) -> None:
    storage.set(_key(who), rec.encode())


def is_active(who: bytes) -> bool:
    return is_identity(who) and storage.exists(_key(who))


def remaining(who: bytes, now: int) -> int:
    """0 for non-beneficiaries; otherwise the post-rollover remaining quota."""
    rec = load(who)
    if rec is None:
        return 0
    return rec.available(now, window_duration())


def window_ends_at(who: bytes, now: int) -> int:
    rec = load(who)
    if rec is None:
        return 0
    duration = window_duration()
    start = now if rec.window_elapsed(now, duration) else rec.window_start
    return u256_add_sat(start, duration)


def configure(who: bytes, quota: int, now: int) -> AllowanceRecord:
    """Create (fresh window, zero spend) or update the quota of an existing record."""
    rec = load(who)
    if rec is None:
        rec = AllowanceRecord(quota=quota, spent=0, window_start=now)
    else:
        rec = replace(rec, quota=quota)
    store(who, rec)
    return rec


def revoke(who: bytes) -> None:
    storage.delete(_key(who))


def rollover(who: bytes, rec: AllowanceRecord, now: int) -> AllowanceRecord:
    """Persist a single window advance if the current window has elapsed."""
    if not rec.window_elapsed(now, window_duration()):
        return rec
    rec = rec.rolled_over(now)
    store(who, rec)
    return rec


def debit(who: bytes, rec: AllowanceRecord, amount: int) -> AllowanceRecord:
    rec = replace(rec, spent=u256_add(rec.spent, amount))
    store(who, rec)
    return rec


__all__ = [
    "AllowanceRecord",
    "set_params",
    "is_configured",
    "token_address",
    "window_duration",
    "is_identity",
    "load",
    "store",
    "is_active",
    "remaining",
    "window_ends_at",
    "configure",
    "revoke",
    "rollover",
    "debit",
]
