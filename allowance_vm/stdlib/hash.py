from __future__ import annotations

from allowance_vm.runtime.hash_api import sha3_256

__all__ = ["sha3_256"]
