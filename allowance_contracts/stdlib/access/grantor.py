# -*- coding: utf-8 -*-
"""
allowance_contracts.stdlib.access.grantor
=========================================

Grantor storage and checks. The grantor is stored once at a deterministic key
and compared byte-for-byte against the immediate caller.
"""
from __future__ import annotations

from typing import Optional

from allowance_vm.stdlib import env, storage

from ...errors import InvalidConfiguration, Unauthorized
from ..utils import is_null_address

GRANTOR_KEY: bytes = b"access:grantor"


def get_grantor() -> Optional[bytes]:
    """Return the grantor, or None before construction."""
    v = storage.get(GRANTOR_KEY)
    return v if v else None


def init_grantor(grantor: bytes) -> None:
    """
    Record the grantor. Must run exactly once, during construction; a second
    call or a null grantor is an ``InvalidConfiguration``.
    """
    if get_grantor() is not None:
        raise InvalidConfiguration("grantor already set")
    if is_null_address(grantor):
        raise InvalidConfiguration("grantor must be a non-null identity")
    storage.set(GRANTOR_KEY, bytes(grantor))


def is_grantor(who: bytes) -> bool:
    g = get_grantor()
    return g is not None and isinstance(who, (bytes, bytearray)) and bytes(who) == g


def require_grantor(caller: Optional[bytes] = None) -> bytes:
    """
    Raise ``Unauthorized`` unless `caller` (default: the immediate caller) is
    the grantor. Returns the grantor on success.
    """
    who = env.caller() if caller is None else caller
    if not is_grantor(who):
        raise Unauthorized(
            "caller is not the grantor",
            context={"caller": bytes(who).hex() if isinstance(who, (bytes, bytearray)) else repr(who)},
        )
    return bytes(who)


__all__ = ["GRANTOR_KEY", "get_grantor", "init_grantor", "is_grantor", "require_grantor"]
