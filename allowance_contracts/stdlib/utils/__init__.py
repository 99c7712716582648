# -*- coding: utf-8 -*-
"""
allowance_contracts.stdlib.utils
================================

Identity predicates shared by contract modules. Identities are opaque
fixed-width ``bytes``; the *null identity* is the empty string or all zeros.
"""
from __future__ import annotations

from typing import Any


def is_address(value: Any, length: int) -> bool:
    """True iff `value` is bytes-like of exactly `length` bytes."""
    return isinstance(value, (bytes, bytearray)) and len(value) == length


def is_null_address(value: Any) -> bool:
    """True for anything that cannot name a principal (non-bytes, empty, all-zero)."""
    if not isinstance(value, (bytes, bytearray)) or len(value) == 0:
        return True
    return not any(value)


__all__ = ["is_address", "is_null_address"]
