"""
allowance_vm.runtime.context — BlockEnv and call frames (deterministic)

These lightweight environments are what contracts read when they ask "what
time is it" and "who is calling". They contain only pure data (ints/bytes)
and perform strict validation.

Design notes
------------
- Addresses are raw bytes of a fixed width (``VMConfig.address_len``).
- Hex strings (with or without "0x") are accepted by helpers and normalized to
  bytes.
- All numeric fields are validated to be non-negative.
- ``timestamp`` is the host-provided consensus time in seconds; there is no
  wall clock anywhere in the runtime.
- Frames form a stack: the engine pushes one per (possibly nested) call and
  pops it when the call commits or reverts. Contract code only ever sees the
  innermost frame.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Union

from .error import VmError


# ----------------------------- helpers ----------------------------- #

class ContextError(Exception):
    """Validation or coercion failure for BlockEnv / frames / addresses."""


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def to_address(value: Union[bytes, bytearray, memoryview, str], address_len: int) -> bytes:
    """Coerce and check a fixed-width address."""
    b = to_bytes(value)
    if len(b) != address_len:
        raise ContextError(f"address must be exactly {address_len} bytes, got {len(b)}")
    return b


def _require_non_negative_int(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


# ----------------------------- models ------------------------------ #

@dataclass(frozen=True)
class BlockEnv:
    """
    Deterministic block environment seen by every call in the block.

    Fields
    ------
    height:     Block height (0-based).
    timestamp:  Consensus timestamp (seconds since epoch or chain-defined unit).
    chain_id:   Integer chain identifier.
    """
    height: int
    timestamp: int
    chain_id: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "height", _require_non_negative_int("height", self.height))
        object.__setattr__(self, "timestamp", _require_non_negative_int("timestamp", self.timestamp))
        object.__setattr__(self, "chain_id", _require_non_negative_int("chain_id", self.chain_id))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BlockEnv":
        return cls(
            height=_require_non_negative_int("height", d.get("height", 0)),
            timestamp=_require_non_negative_int("timestamp", d.get("timestamp", 0)),
            chain_id=_require_non_negative_int("chain_id", d.get("chain_id", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Frame:
    """
    One executing call.

    Fields
    ------
    caller:   Immediate caller (an account, or the contract that made a nested call).
    address:  Contract whose code is executing; storage and events are scoped to it.
    depth:    0 for a top-level call, +1 per nested call.
    host:     The engine executing the call (opaque to contracts).
    """
    caller: bytes
    address: bytes
    depth: int
    host: Any


# ----------------------------- frame stack ------------------------------ #

_FRAMES: List[Frame] = []


def push_frame(frame: Frame) -> None:
    _FRAMES.append(frame)


def pop_frame() -> Frame:
    if not _FRAMES:
        raise VmError("frame stack underflow", code="env.no_frame")
    return _FRAMES.pop()


def current_frame() -> Frame:
    """Innermost frame; raises if no contract call is executing."""
    if not _FRAMES:
        raise VmError("no contract call is executing", code="env.no_frame")
    return _FRAMES[-1]


def maybe_current_frame() -> Optional[Frame]:
    return _FRAMES[-1] if _FRAMES else None


def frame_depth() -> int:
    return len(_FRAMES)


__all__ = [
    "ContextError",
    "to_bytes",
    "to_hex",
    "to_address",
    "BlockEnv",
    "Frame",
    "push_frame",
    "pop_frame",
    "current_frame",
    "maybe_current_frame",
    "frame_depth",
]
