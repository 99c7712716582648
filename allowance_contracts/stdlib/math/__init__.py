# -*- coding: utf-8 -*-
"""
allowance_contracts.stdlib.math
===============================

Integer-only u256 helpers for allowance contracts. No floats anywhere.

    from allowance_contracts.stdlib.math import u256_add, u256_sub_floor

Checked variants revert (``Revert`` with a ``UINT:*`` code); saturating
variants clamp into ``[0, U256_MAX]``.
"""
from __future__ import annotations

from .safe_uint import (ERR_OOB, ERR_OVER, ERR_UNDER, U256_MAX, is_u256,
                        require_u256, u256_add, u256_add_sat, u256_from_bytes,
                        u256_sub, u256_sub_floor, u256_to_bytes)

__all__ = [
    "U256_MAX",
    "ERR_OOB",
    "ERR_OVER",
    "ERR_UNDER",
    "is_u256",
    "require_u256",
    "u256_add",
    "u256_sub",
    "u256_add_sat",
    "u256_sub_floor",
    "u256_to_bytes",
    "u256_from_bytes",
]
