# -*- coding: utf-8 -*-
"""
allowance_contracts.stdlib.math.safe_uint
=========================================

Checked and saturating unsigned-integer helpers over the u256 envelope.

Conventions
-----------
- "checked" variants revert via ``abi.revert`` with a stable ``UINT:*`` code.
- "sat"/"floor" variants never revert due to range; they clamp.
- Inputs are validated to lie in ``[0, U256_MAX]``; ``bool`` is not an int here.
- Storage encoding is fixed-width: 32 bytes, big-endian.
"""
from __future__ import annotations

from typing import Any, Final, Optional

from allowance_vm.stdlib import abi

U256_MAX: Final[int] = (1 << 256) - 1
U256_BYTES: Final[int] = 32

# Canonical error tags (short, stable)
ERR_OOB: Final[str] = "UINT:OOB"          # input/result outside [0, U256_MAX]
ERR_OVER: Final[str] = "UINT:OVERFLOW"
ERR_UNDER: Final[str] = "UINT:UNDERFLOW"


def is_u256(x: Any) -> bool:
    """True iff `x` is a plain int in [0, U256_MAX]."""
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= U256_MAX


def require_u256(*xs: Any) -> None:
    """Revert if any value is not a u256."""
    for n in xs:
        if not is_u256(n):
            abi.revert(b"UINT:OOB", code=ERR_OOB)


# ---------------------------------------------------------------------------
# Saturating (never revert due to range)
# ---------------------------------------------------------------------------

def u256_add_sat(x: int, y: int) -> int:
    """Saturating add: min(x+y, U256_MAX)."""
    require_u256(x, y)
    return min(x + y, U256_MAX)


def u256_sub_floor(x: int, y: int) -> int:
    """Saturating subtract: returns 0 when y > x."""
    require_u256(x, y)
    return x - y if x > y else 0


# ---------------------------------------------------------------------------
# Checked (fail-fast on errors)
# ---------------------------------------------------------------------------

def u256_add(x: int, y: int) -> int:
    """Checked add: revert on overflow."""
    require_u256(x, y)
    s = x + y
    if s > U256_MAX:
        abi.revert(b"UINT:OVERFLOW", code=ERR_OVER)
    return s


def u256_sub(x: int, y: int) -> int:
    """Checked sub: revert on underflow (y > x)."""
    require_u256(x, y)
    if y > x:
        abi.revert(b"UINT:UNDERFLOW", code=ERR_UNDER)
    return x - y


# ---------------------------------------------------------------------------
# Storage codec
# ---------------------------------------------------------------------------

def u256_to_bytes(x: int) -> bytes:
    require_u256(x)
    return x.to_bytes(U256_BYTES, "big")


def u256_from_bytes(raw: Optional[bytes]) -> int:
    """Decode a stored u256; missing or empty values read as 0."""
    return int.from_bytes(raw, "big") if raw else 0


__all__ = [
    "U256_MAX",
    "U256_BYTES",
    "ERR_OOB",
    "ERR_OVER",
    "ERR_UNDER",
    "is_u256",
    "require_u256",
    "u256_add_sat",
    "u256_sub_floor",
    "u256_add",
    "u256_sub",
    "u256_to_bytes",
    "u256_from_bytes",
]
