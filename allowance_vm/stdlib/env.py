"""
Execution environment as seen by a contract: who is calling, which contract is
running, what time it is, and how to call another contract.
"""

from __future__ import annotations

from typing import Any

from allowance_vm.runtime.context import current_frame


def caller() -> bytes:
    """Immediate caller of the executing contract."""
    return current_frame().caller


def address() -> bytes:
    """Address of the executing contract."""
    return current_frame().address


def now() -> int:
    """Block timestamp in seconds."""
    return current_frame().host.block.timestamp


def height() -> int:
    return current_frame().host.block.height


def address_len() -> int:
    return current_frame().host.config.address_len


def is_contract(who: bytes) -> bool:
    return current_frame().host.is_contract(who)


def exports(who: bytes, fn: str) -> bool:
    return current_frame().host.exports(who, fn)


def call(target: bytes, fn: str, *args: Any) -> Any:
    """
    Call `fn` on the contract at `target`. The callee sees this contract as
    its caller. The callee's effects are undone if it raises; the exception
    propagates to this contract.
    """
    frame = current_frame()
    return frame.host.invoke(target, fn, args, caller=frame.address)


__all__ = ["caller", "address", "now", "height", "address_len", "is_contract", "exports", "call"]
