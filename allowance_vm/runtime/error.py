from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping


@dataclass(eq=False)
class VmError(Exception):
    """
    Structured error used inside the contract host and by contract code.

    Supported call patterns:

        VmError("simple message")

        VmError("message", code="some_code", context={...})

        # 2-positional form:
        VmError("SOME_CODE", "message")

    Subclasses pin their own machine-readable code through ``default_code`` so
    callers can branch on ``exc.code`` (or on the class) without parsing text.

    Attributes:
        code: short machine-readable code string
        message: human-readable message
        context: optional extra fields for debugging / receipts
    """

    default_code: ClassVar[str] = "vm_error"

    code: str
    message: str
    context: Dict[str, Any]

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        code: str = self.default_code
        context: Dict[str, Any] = {}

        if "code" in kwargs:
            code = str(kwargs.pop("code"))

        if "context" in kwargs:
            ctx = kwargs.pop("context")
            if ctx is None:
                context = {}
            elif isinstance(ctx, Mapping):
                context = dict(ctx)
            else:
                context = dict(ctx)  # type: ignore[arg-type]

        if kwargs:
            raise TypeError(f"unexpected keyword arguments: {sorted(kwargs)}")

        if len(args) == 0:
            message = ""
        elif len(args) == 1:
            message = _to_message(args[0])
        else:
            code = str(args[0])
            message = _to_message(args[1])

        super().__init__(message)

        object.__setattr__(self, "code", code)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "context", context)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.message else f"[{self.code}]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }


class Revert(VmError):
    """A contract deliberately aborted the current call."""

    default_code = "revert"


def _to_message(msg: Any) -> str:
    if isinstance(msg, (bytes, bytearray)):
        return bytes(msg).decode("utf-8", errors="replace")
    return str(msg)


__all__ = ["VmError", "Revert"]
