"""
Compatibility layer for host errors.

Callers import:

    from allowance_vm.errors import VmError, Revert

The canonical implementation lives in allowance_vm.runtime.error.
"""

from __future__ import annotations

from allowance_vm.runtime.context import ContextError
from allowance_vm.runtime.error import Revert, VmError

__all__ = ["VmError", "Revert", "ContextError"]
