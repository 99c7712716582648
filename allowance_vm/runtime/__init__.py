"""
Allowance VM (Python) — runtime package

This package contains the call engine and the host-facing APIs
(storage/events/abi/hash) that contracts use via the injected
``allowance_vm.stdlib`` surface.

Convenience re-exports live here so callers can do:

    from allowance_vm.runtime import Engine, BlockEnv, Journal
    from allowance_vm.runtime import abi, storage, events, hashing  # module namespaces

Notes
-----
- All code that can affect determinism is behind explicit APIs.
- No wall-clock I/O or system randomness is exposed here.
- For contract code, import **only** from ``allowance_vm.stdlib``.
"""

from __future__ import annotations

from ..version import __version__
from . import abi as abi
from . import events_api as events
from . import hash_api as hashing  # avoid shadowing builtin `hash`
from . import storage_api as storage
from .context import BlockEnv, ContextError, Frame
from .engine import Deployment, Engine, Receipt
from .error import Revert, VmError
from .journal import Journal

__all__ = [
    "__version__",
    # Core classes
    "Engine",
    "Deployment",
    "Receipt",
    "BlockEnv",
    "Frame",
    "Journal",
    # Errors
    "VmError",
    "Revert",
    "ContextError",
    # Namespaces (modules)
    "abi",
    "storage",
    "events",
    "hashing",
]
