"""
allowance_vm.config — runtime feature flags and numeric caps.

This module centralizes configuration for the deterministic contract host. It
has NO third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (ALLOWANCE_VM_*)
  2) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - ALLOWANCE_VM_STRICT                 (bool)  default: true
  - ALLOWANCE_VM_CHAIN_ID               (int)   default: 1337
  - ALLOWANCE_VM_ADDRESS_LEN            (int)   default: 32
  - ALLOWANCE_VM_MAX_CALL_DEPTH         (int)   default: 64
  - ALLOWANCE_VM_MAX_STORAGE_KEY_BYTES  (int)   default: 64
  - ALLOWANCE_VM_MAX_STORAGE_VAL_BYTES  (int)   default: 131_072   (128 KiB)
  - ALLOWANCE_VM_MAX_LOGS_PER_CALL      (int)   default: 1024

Out-of-range integers are clamped into their allowed interval; unparsable
values fall back to the default.

Usage:
    from allowance_vm.config import load_config
    CFG = load_config()
    if CFG.strict_mode: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Dict


# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in ("1", "true", "t", "yes", "y", "on")


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class VMConfig:
    # Feature flags
    strict_mode: bool

    # Chain identity
    chain_id: int
    address_len: int

    # Numeric caps / limits (enforced by the engine and stdlib)
    max_call_depth: int
    max_storage_key_bytes: int
    max_storage_value_bytes: int
    max_logs_per_call: int

    def with_overrides(self, **changes: Any) -> "VMConfig":
        """Return a copy with some fields replaced (tests, CLI flags)."""
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strict_mode": self.strict_mode,
            "chain_id": self.chain_id,
            "address_len": self.address_len,
            "max_call_depth": self.max_call_depth,
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "max_storage_value_bytes": self.max_storage_value_bytes,
            "max_logs_per_call": self.max_logs_per_call,
        }


@lru_cache(maxsize=1)
def load_config() -> VMConfig:
    """
    Build and cache a VMConfig from environment + safe defaults.
    """
    return VMConfig(
        strict_mode=_env_bool("ALLOWANCE_VM_STRICT", True),
        chain_id=_env_int("ALLOWANCE_VM_CHAIN_ID", 1337, min_v=0, max_v=(1 << 63) - 1),
        # Addresses are derived from sha3-256 digests, so 32 is the ceiling.
        address_len=_env_int("ALLOWANCE_VM_ADDRESS_LEN", 32, min_v=16, max_v=32),
        max_call_depth=_env_int("ALLOWANCE_VM_MAX_CALL_DEPTH", 64, min_v=8, max_v=1024),
        max_storage_key_bytes=_env_int("ALLOWANCE_VM_MAX_STORAGE_KEY_BYTES", 64, min_v=48, max_v=256),
        max_storage_value_bytes=_env_int("ALLOWANCE_VM_MAX_STORAGE_VAL_BYTES", 131_072, min_v=32, max_v=1_048_576),
        max_logs_per_call=_env_int("ALLOWANCE_VM_MAX_LOGS_PER_CALL", 1024, min_v=1, max_v=10_000),
    )


# Eagerly construct a module-level singleton for convenience, but keep load_config()
# as the canonical accessor (cached).
CFG: VMConfig = load_config()

__all__ = ["VMConfig", "load_config", "CFG"]
