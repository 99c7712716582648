# -*- coding: utf-8 -*-
"""
allowance_contracts.errors
==========================

Error kinds raised by the allowance vault and its helpers. Every kind is a
``Revert`` (so the engine discards all state changes of the failing call) with
a stable machine-readable ``code``; callers branch on the class or the code,
never on the message.

- ``Unauthorized``          caller lacks the required role
- ``InvalidArgument``       zero/negative/oversized amount, malformed or null identity
- ``InvalidConfiguration``  bad construction parameters, double initialization
- ``NotFound``              operation targets a non-beneficiary
- ``ExceedsAllowance``      claim amount over remaining quota
- ``TransferFailed``        token collaborator reported failure or aborted
"""
from __future__ import annotations

from allowance_vm.errors import Revert


class AllowanceError(Revert):
    """Base class for vault errors."""

    default_code = "ALLOWANCE:ERROR"


class Unauthorized(AllowanceError):
    default_code = "ALLOWANCE:UNAUTHORIZED"


class InvalidArgument(AllowanceError):
    default_code = "ALLOWANCE:INVALID_ARGUMENT"


class InvalidConfiguration(AllowanceError):
    default_code = "ALLOWANCE:INVALID_CONFIGURATION"


class NotFound(AllowanceError):
    default_code = "ALLOWANCE:NOT_FOUND"


class ExceedsAllowance(AllowanceError):
    default_code = "ALLOWANCE:EXCEEDS_ALLOWANCE"


class TransferFailed(AllowanceError):
    default_code = "ALLOWANCE:TRANSFER_FAILED"


__all__ = [
    "AllowanceError",
    "Unauthorized",
    "InvalidArgument",
    "InvalidConfiguration",
    "NotFound",
    "ExceedsAllowance",
    "TransferFailed",
]
