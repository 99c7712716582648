"""Contract-facing event emission. Keys may be given as ASCII bytes."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from allowance_vm.runtime import events_api as _rt
from allowance_vm.runtime.error import VmError

Event = _rt.Event
CanonicalEvent = _rt.CanonicalEvent

__all__ = ["Event", "CanonicalEvent", "emit"]


def _key(k: Any) -> str:
    if isinstance(k, str):
        return k
    if isinstance(k, (bytes, bytearray)):
        try:
            return bytes(k).decode("ascii")
        except UnicodeDecodeError as exc:
            raise VmError("event key must be ASCII", code="event_invalid", context={"key": bytes(k).hex()}) from exc
    raise VmError(
        "event key must be bytes or str",
        code="event_invalid",
        context={"where": "key_type", "py_type": type(k).__name__},
    )


def emit(name: bytes, args: Mapping[Any, Any]) -> None:
    """
    emit(b"Claimed", {b"beneficiary": who, b"amount": 5})

    Validation of names, values and the per-call log limit happens in the runtime.
    """
    if not isinstance(args, Mapping):
        raise VmError("event args must be a mapping", code="event_invalid", context={"where": "args_type"})
    converted: Dict[str, Any] = {_key(k): v for k, v in args.items()}
    _rt.emit(name, converted)
