from __future__ import annotations

from typing import Any, Mapping, NoReturn, Optional

from .error import Revert


def revert(
    message: Any = "revert",
    *,
    code: str = "revert",
    context: Optional[Mapping[str, Any]] = None,
) -> NoReturn:
    """
    Abort the current call. The engine discards every state change the call
    (and any call nested in it) made.

        abi.revert(b"TOKEN:INSUFFICIENT_BALANCE", code="TOKEN:INSUFFICIENT_BALANCE")
    """
    raise Revert(message, code=code, context=dict(context or {}))


def require(
    condition: bool,
    message: Any = "abi.require failed",
    *,
    code: str = "abi.require_failed",
    context: Optional[Mapping[str, Any]] = None,
) -> None:
    """
    Simple assertion helper for contracts.

        abi.require(amount > 0, b"token: zero amount")
    """
    if condition:
        return
    revert(message, code=code, context=context)


__all__ = ["revert", "require"]
