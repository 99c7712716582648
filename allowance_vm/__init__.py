"""
Allowance VM (allowance_vm) — package marker and public entrypoints.

A small deterministic host for Python contract modules: per-call frames
(caller identity, contract address, block time), journaled storage and events,
and all-or-nothing call execution with nested calls.

- Engine            : deploy contract modules and execute calls
- BlockEnv          : block height / timestamp / chain id
- VmError, Revert   : structured errors raised by the host and by contracts
- load_config()     : environment-driven caps and flags

Contracts import their surface from ``allowance_vm.stdlib``; hosts and tests
use the names re-exported here.
"""

from __future__ import annotations

from .config import VMConfig, load_config
from .runtime.context import BlockEnv, ContextError
from .runtime.engine import Deployment, Engine, Receipt
from .runtime.error import Revert, VmError
from .version import __version__


def version() -> str:
    """Return the allowance_vm semantic version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "Engine",
    "Deployment",
    "Receipt",
    "BlockEnv",
    "ContextError",
    "VmError",
    "Revert",
    "VMConfig",
    "load_config",
]
