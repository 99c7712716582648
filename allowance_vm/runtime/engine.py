"""
allowance_vm.runtime.engine — deploys contract modules and executes calls.

Design goals
------------
- Run-to-completion: every call body finishes (commits) or fully reverts
  before control returns to its caller. Nothing is ever half-applied.
- Nested calls are first-class: a contract may call another contract (and be
  called back) through ``stdlib.env.call``. Each nested call gets its own
  journal checkpoint, so a failing inner call is undone on its own and the
  outer call decides whether to propagate.
- Deterministic: time and caller identity come from the engine (BlockEnv and
  frames), never from the host machine.

Contracts are plain Python modules. Their public entrypoints are the names
listed in ``__all__`` (strict mode); an optional ``init`` runs once at deploy.
All persistent state lives in journaled storage keyed by contract address, so
one module may be deployed many times.

Usage
-----
    engine = Engine()
    token = engine.deploy(fungible, b"Coin", b"CN", 18, 1_000, sender=alice)
    engine.call(token, "transfer", bob, 10, sender=alice)
    engine.advance(60)
"""

from __future__ import annotations

import importlib
import logging
import types
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Union

from ..config import VMConfig, load_config
from .context import (BlockEnv, ContextError, Frame, maybe_current_frame,
                      pop_frame, push_frame, to_address, to_hex)
from .error import VmError
from .events_api import Event
from .hash_api import sha3_256
from .journal import Journal

log = logging.getLogger(__name__)

AddressLike = Union[bytes, bytearray, str]
ModuleLike = Union[types.ModuleType, str]


@dataclass(frozen=True)
class Deployment:
    """A contract module bound to an address."""

    address: bytes
    module: types.ModuleType
    deployer: bytes
    height: int

    @property
    def name(self) -> str:
        return self.module.__name__


@dataclass
class Receipt:
    """Outcome of one top-level call (or deploy)."""

    ok: bool
    fn: str
    caller: bytes
    address: bytes
    timestamp: int
    height: int
    return_value: Any = None
    events: List[Event] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        from .events_api import to_canonical

        return {
            "ok": self.ok,
            "fn": self.fn,
            "caller": to_hex(self.caller),
            "address": to_hex(self.address),
            "timestamp": self.timestamp,
            "height": self.height,
            "return": to_jsonable(self.return_value),
            "events": [ev.to_dict() for ev in to_canonical(self.events)],
            "error": self.error,
        }


def to_jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return value


class Engine:
    """
    In-process contract host.

    Parameters
    ----------
    config : VMConfig | None
        Caps and flags; defaults to ``load_config()``.
    block : BlockEnv | None
        Initial block environment; defaults to height 0, timestamp 0.
    """

    def __init__(self, config: Optional[VMConfig] = None, block: Optional[BlockEnv] = None) -> None:
        self.config = config or load_config()
        self.block = block or BlockEnv(height=0, timestamp=0, chain_id=self.config.chain_id)
        self.journal = Journal()
        self.receipts: List[Receipt] = []
        self._contracts: Dict[bytes, Deployment] = {}
        self._nonces: Dict[bytes, int] = {}

    # ------------------------------------------------------------------ #
    # Clock
    # ------------------------------------------------------------------ #

    def set_time(self, timestamp: int) -> BlockEnv:
        """Move the block timestamp forward to `timestamp` (never backwards)."""
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ContextError(f"timestamp must be int, got {type(timestamp).__name__}")
        if timestamp < self.block.timestamp:
            raise ContextError(f"time cannot go backwards ({timestamp} < {self.block.timestamp})")
        self.block = replace(self.block, timestamp=timestamp)
        return self.block

    def advance(self, seconds: int) -> BlockEnv:
        return self.set_time(self.block.timestamp + seconds)

    def mine(self, blocks: int = 1) -> BlockEnv:
        if blocks < 0:
            raise ContextError("cannot mine a negative number of blocks")
        self.block = replace(self.block, height=self.block.height + blocks)
        return self.block

    # ------------------------------------------------------------------ #
    # Addresses & introspection
    # ------------------------------------------------------------------ #

    def address(self, value: AddressLike) -> bytes:
        """Coerce `value` (bytes or hex) to a checked address."""
        return to_address(value, self.config.address_len)

    def _next_address(self, deployer: bytes) -> bytes:
        nonce = self._nonces.get(deployer, 0)
        self._nonces[deployer] = nonce + 1
        digest = sha3_256(b"allowance-vm/deploy|" + deployer + nonce.to_bytes(8, "big"))
        return digest[: self.config.address_len]

    def is_contract(self, address: AddressLike) -> bool:
        try:
            return self.address(address) in self._contracts
        except ContextError:
            return False

    def deployment(self, address: AddressLike) -> Deployment:
        addr = self.address(address)
        dep = self._contracts.get(addr)
        if dep is None:
            raise VmError(f"no contract at {to_hex(addr)}", code="engine.no_contract")
        return dep

    def exports(self, address: AddressLike, fn: str) -> bool:
        """True if contract at `address` exposes entrypoint `fn`."""
        if not self.is_contract(address):
            return False
        return self._resolve_entrypoint(self.deployment(address), fn) is not None

    def storage_of(self, address: AddressLike) -> Dict[bytes, bytes]:
        """Committed (plus any open-overlay) storage of a contract."""
        return self.journal.storage_snapshot(self.address(address))

    def events(self, address: Optional[AddressLike] = None, name: Optional[bytes] = None) -> List[Event]:
        """Committed event log, optionally filtered by emitter and/or name."""
        addr = self.address(address) if address is not None else None
        out = []
        for ev in self.journal.committed_events():
            if addr is not None and ev.address != addr:
                continue
            if name is not None and ev.name != name:
                continue
            out.append(ev)
        return out

    # ------------------------------------------------------------------ #
    # Deploy / call
    # ------------------------------------------------------------------ #

    def deploy(
        self,
        module: ModuleLike,
        *args: Any,
        sender: AddressLike,
        address: Optional[AddressLike] = None,
    ) -> bytes:
        """
        Register `module` at a fresh address and run its ``init(*args)`` if
        present. A failing ``init`` leaves no trace.
        """
        mod = importlib.import_module(module) if isinstance(module, str) else module
        deployer = self.address(sender)
        addr = self.address(address) if address is not None else self._next_address(deployer)
        if addr in self._contracts:
            raise VmError(f"address {to_hex(addr)} already has a contract", code="engine.address_taken")

        dep = Deployment(address=addr, module=mod, deployer=deployer, height=self.block.height)
        self._contracts[addr] = dep
        init = getattr(mod, "init", None)
        try:
            if callable(init):
                self._top_level(dep, "init", init, args, deployer)
        except Exception:
            del self._contracts[addr]
            raise
        log.info("deployed %s at %s (deployer=%s)", dep.name, to_hex(addr), to_hex(deployer))
        return addr

    def call(self, address: AddressLike, fn: str, *args: Any, sender: AddressLike) -> Any:
        """Execute one top-level call; commits on success, reverts and re-raises on failure."""
        dep = self.deployment(address)
        target = self._require_entrypoint(dep, fn)
        return self._top_level(dep, fn, target, args, self.address(sender))

    def view(self, address: AddressLike, fn: str, *args: Any, sender: Optional[AddressLike] = None) -> Any:
        """
        Execute a call and discard all of its effects, even on success.
        """
        dep = self.deployment(address)
        target = self._require_entrypoint(dep, fn)
        caller = self.address(sender) if sender is not None else bytes(self.config.address_len)
        self.journal.begin()
        try:
            return self._execute(dep, fn, target, args, caller, depth=0)
        finally:
            self.journal.revert()

    def invoke(self, address: AddressLike, fn: str, args: tuple, *, caller: bytes) -> Any:
        """
        Nested call issued by a contract (see ``stdlib.env.call``). The caller
        is the contract making the call.
        """
        parent = maybe_current_frame()
        depth = parent.depth + 1 if parent is not None else 0
        if depth > self.config.max_call_depth:
            raise VmError(
                "max call depth exceeded",
                code="engine.call_depth",
                context={"limit": self.config.max_call_depth},
            )
        dep = self.deployment(address)
        target = self._require_entrypoint(dep, fn)
        return self._execute(dep, fn, target, tuple(args), caller, depth=depth)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _resolve_entrypoint(self, dep: Deployment, fn: str) -> Optional[Callable[..., Any]]:
        if not isinstance(fn, str) or not fn or fn.startswith("_"):
            return None
        if self.config.strict_mode and fn not in getattr(dep.module, "__all__", ()):
            return None
        target = getattr(dep.module, fn, None)
        return target if callable(target) else None

    def _require_entrypoint(self, dep: Deployment, fn: str) -> Callable[..., Any]:
        target = self._resolve_entrypoint(dep, fn)
        if target is None:
            raise VmError(
                f"{dep.name} does not export {fn!r}",
                code="engine.not_exported",
                context={"address": to_hex(dep.address), "fn": fn},
            )
        return target

    def _top_level(
        self, dep: Deployment, fn: str, target: Callable[..., Any], args: tuple, caller: bytes
    ) -> Any:
        parent = maybe_current_frame()
        if parent is not None:
            # Host re-entered from inside a contract; treat it as a nested call.
            return self._execute(dep, fn, target, args, caller, depth=parent.depth + 1)

        start = self.journal.committed_event_count()
        receipt = Receipt(
            ok=False,
            fn=fn,
            caller=caller,
            address=dep.address,
            timestamp=self.block.timestamp,
            height=self.block.height,
        )
        log.debug("call %s.%s from %s at t=%d", dep.name, fn, to_hex(caller), self.block.timestamp)
        try:
            result = self._execute(dep, fn, target, args, caller, depth=0)
        except VmError as exc:
            receipt.error = exc.to_dict()
            log.debug("call %s.%s reverted: %s", dep.name, fn, exc.code)
            raise
        except Exception as exc:
            receipt.error = {"code": "python_error", "message": repr(exc), "context": {}}
            log.exception("call %s.%s raised a non-VM error", dep.name, fn)
            raise
        else:
            receipt.ok = True
            receipt.return_value = result
            receipt.events = self.journal.committed_events()[start:]
            return result
        finally:
            self.receipts.append(receipt)

    def _execute(
        self,
        dep: Deployment,
        fn: str,
        target: Callable[..., Any],
        args: tuple,
        caller: bytes,
        *,
        depth: int,
    ) -> Any:
        self.journal.begin()
        push_frame(Frame(caller=caller, address=dep.address, depth=depth, host=self))
        try:
            result = target(*args)
        except Exception:
            self.journal.revert()
            raise
        else:
            self.journal.commit()
            return result
        finally:
            pop_frame()


__all__ = ["Engine", "Deployment", "Receipt", "to_jsonable"]
