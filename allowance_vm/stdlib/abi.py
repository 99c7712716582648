from __future__ import annotations

from allowance_vm.runtime.abi import require, revert
from allowance_vm.runtime.error import Revert, VmError

__all__ = ["require", "revert", "Revert", "VmError"]
