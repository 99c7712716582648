"""
allowance_vm.stdlib
===================

Contract-facing standard library surface.

Contracts can do:

    from allowance_vm.stdlib import abi, env, events, hash, storage

Exports
-------
- storage : get/set/delete/exists/get_int/set_int, scoped to the executing contract
- events  : emit(name: bytes, args: dict) -> None
- abi     : require(...), revert(...)
- hash    : sha3_256(b)
- env     : caller(), address(), now(), height(), call(...), is_contract(...), exports(...)

Everything here only works while the engine is executing a call; outside a
call the helpers raise ``VmError(code="env.no_frame")``.
"""

from __future__ import annotations

from . import abi, env, events, hash, storage

__all__ = ("storage", "events", "abi", "hash", "env")
