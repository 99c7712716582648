"""
allowance_vm.runtime.storage_api — contract-facing key/value storage.

This module provides the storage primitives that ``allowance_vm.stdlib.storage``
re-exports to contracts.

Design goals
------------
- Deterministic: pure functions over (key, value) with no wall-clock or I/O.
- Scoped: every read/write targets the *executing contract's* address, taken
  from the innermost call frame; contracts cannot touch each other's storage.
- Journaled: writes land in the engine's journal, so a reverted call leaves
  storage exactly as it found it.
- Safe: strict byte-length caps; typed helpers for common int ↔ bytes use.

Public API
----------
- get(key: bytes) -> Optional[bytes]
- set(key: bytes, value: bytes) -> None
- delete(key: bytes) -> None
- exists(key: bytes) -> bool
- get_int(key: bytes) -> Optional[int]           # big-endian, unsigned
- set_int(key: bytes, value: int) -> None        # big-endian, unsigned
"""

from __future__ import annotations

from typing import Optional

from .context import current_frame
from .error import VmError


def _scope():
    frame = current_frame()
    return frame.host, frame.address


# --------------------------- Validation helpers --------------------------- #


def _check_key(host, key: bytes) -> None:
    if not isinstance(key, (bytes, bytearray)):
        raise VmError("storage key must be bytes", code="storage.bad_key")
    if len(key) == 0:
        raise VmError("storage key must be non-empty", code="storage.bad_key")
    limit = host.config.max_storage_key_bytes
    if len(key) > limit:
        raise VmError(f"storage key too long (>{limit} bytes)", code="storage.bad_key")


def _check_value(host, value: bytes) -> None:
    if not isinstance(value, (bytes, bytearray)):
        raise VmError("storage value must be bytes", code="storage.bad_value")
    limit = host.config.max_storage_value_bytes
    if len(value) > limit:
        raise VmError(f"storage value too large (>{limit} bytes)", code="storage.bad_value")


# --------------------------- Contract-facing API --------------------------- #


def get(key: bytes) -> Optional[bytes]:
    """Return the value for `key`, or None if not set."""
    host, addr = _scope()
    _check_key(host, key)
    return host.journal.storage_get(addr, bytes(key))


def set(key: bytes, value: bytes) -> None:
    """Set `key` to `value` (overwrites existing)."""
    host, addr = _scope()
    _check_key(host, key)
    _check_value(host, value)
    host.journal.storage_set(addr, bytes(key), bytes(value))


def delete(key: bytes) -> None:
    """Delete `key` if present (no-op otherwise)."""
    host, addr = _scope()
    _check_key(host, key)
    host.journal.storage_delete(addr, bytes(key))


def exists(key: bytes) -> bool:
    """Return True if `key` is present."""
    host, addr = _scope()
    _check_key(host, key)
    return host.journal.storage_exists(addr, bytes(key))


# ------------------------------ Typed helpers ----------------------------- #

_U256_MAX = (1 << 256) - 1


def get_int(key: bytes) -> Optional[int]:
    """
    Read big-endian unsigned integer at `key`. Returns None if not set.
    Empty value is treated as 0 (but we never write empty for ints).
    """
    raw = get(key)
    if raw is None:
        return None
    if len(raw) == 0:
        return 0
    return int.from_bytes(raw, byteorder="big", signed=False)


def set_int(key: bytes, value: int) -> None:
    """
    Store `value` as big-endian unsigned integer. Enforces 0 <= value <= 2^256-1.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise VmError("set_int value must be int", code="storage.bad_value")
    if value < 0 or value > _U256_MAX:
        raise VmError("set_int out of range (must fit in 256 bits)", code="storage.bad_value")
    # Minimal bytes representation (zero -> b"\x00")
    if value == 0:
        encoded = b"\x00"
    else:
        width = (value.bit_length() + 7) // 8
        encoded = value.to_bytes(width, "big")
    set(key, encoded)


__all__ = [
    "get",
    "set",
    "delete",
    "exists",
    "get_int",
    "set_int",
]
