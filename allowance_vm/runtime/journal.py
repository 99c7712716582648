"""
allowance_vm.runtime.journal — journaled contract storage and event log.

This module provides a deterministic, in-memory write journal layered over a
base ``{address: {key: value}}`` store and a base event log. It supports
nested checkpoints via a stack of overlays. Writes go to the top overlay;
reads consult overlays from top → base. ``commit()`` merges the top overlay
into the next layer (or the base state if it's the last layer). ``revert()``
discards the top overlay.

Key properties
--------------
- Pure Python, no I/O; safe for unit tests and simulations.
- Storage overlay per (address, key) with explicit deletion markers (None).
- Events are staged per overlay, so a reverted call leaves no log behind.
- Nested checkpoints (begin/commit/revert) with O(changes) merge cost.

Intended usage
--------------
    j = Journal()
    j.begin()                          # start a checkpoint
    j.storage_set(addr, b"k", b"v")
    j.append_event(ev)
    j.commit()                         # apply to parent/base
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, MutableMapping, Optional

from .error import VmError


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


@dataclass
class _Overlay:
    """
    A single journal layer.

    - `storage`: staged storage changes. `None` means deletion for that key.
    - `events`: events emitted while this layer was on top.
    """

    storage: Dict[bytes, Dict[bytes, Optional[bytes]]] = field(default_factory=dict)
    events: List[Any] = field(default_factory=list)

    def storage_get_local(self, addr: bytes, key: bytes) -> tuple[bool, Optional[bytes]]:
        m = self.storage.get(addr)
        if m is None or key not in m:
            return False, None
        return True, m[key]

    def storage_set_local(self, addr: bytes, key: bytes, value: Optional[bytes]) -> None:
        self.storage.setdefault(addr, {})[key] = value


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    Parameters
    ----------
    storage : MutableMapping[bytes, Dict[bytes, bytes]] | None
        The base (persisted) storage, keyed by contract address.

    Reads consult overlays from top to bottom and then the base. Writes made
    while no checkpoint is open go straight to the base.
    """

    def __init__(self, storage: Optional[MutableMapping[bytes, Dict[bytes, bytes]]] = None) -> None:
        self._base_storage: MutableMapping[bytes, Dict[bytes, bytes]] = storage if storage is not None else {}
        self._base_events: List[Any] = []
        self._layers: List[_Overlay] = []

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of open checkpoints."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """Merge the top overlay into its parent, or into the base state."""
        if not self._layers:
            raise VmError("commit without an open checkpoint", code="journal.no_checkpoint")
        top = self._layers.pop()
        if self._layers:
            self._merge_layers(self._layers[-1], top)
        else:
            self._apply_to_base(top)

    def revert(self) -> None:
        """Discard the top overlay."""
        if not self._layers:
            raise VmError("revert without an open checkpoint", code="journal.no_checkpoint")
        self._layers.pop()

    @staticmethod
    def _merge_layers(parent: _Overlay, child: _Overlay) -> None:
        for addr, m in child.storage.items():
            parent.storage.setdefault(addr, {}).update(m)
        parent.events.extend(child.events)

    def _apply_to_base(self, layer: _Overlay) -> None:
        for addr, m in layer.storage.items():
            base = self._base_storage.setdefault(addr, {})
            for key, value in m.items():
                if value is None:
                    base.pop(key, None)
                else:
                    base[key] = value
            if not base:
                self._base_storage.pop(addr, None)
        self._base_events.extend(layer.events)

    # --------------------------------------------------------------------- #
    # Storage
    # --------------------------------------------------------------------- #

    def storage_get(self, addr: bytes, key: bytes) -> Optional[bytes]:
        addr = _b(addr, name="addr")
        key = _b(key, name="key")
        for layer in reversed(self._layers):
            found, value = layer.storage_get_local(addr, key)
            if found:
                return value
        return self._base_storage.get(addr, {}).get(key)

    def storage_set(self, addr: bytes, key: bytes, value: bytes) -> None:
        addr = _b(addr, name="addr")
        key = _b(key, name="key")
        value = _b(value, name="value")
        if self._layers:
            self._layers[-1].storage_set_local(addr, key, value)
        else:
            self._base_storage.setdefault(addr, {})[key] = value

    def storage_delete(self, addr: bytes, key: bytes) -> None:
        addr = _b(addr, name="addr")
        key = _b(key, name="key")
        if self._layers:
            self._layers[-1].storage_set_local(addr, key, None)
        else:
            base = self._base_storage.get(addr)
            if base is not None:
                base.pop(key, None)
                if not base:
                    self._base_storage.pop(addr, None)

    def storage_exists(self, addr: bytes, key: bytes) -> bool:
        return self.storage_get(addr, key) is not None

    def storage_snapshot(self, addr: bytes) -> Dict[bytes, bytes]:
        """Visible storage of `addr` with all open overlays applied."""
        addr = _b(addr, name="addr")
        view: Dict[bytes, Optional[bytes]] = dict(self._base_storage.get(addr, {}))
        for layer in self._layers:
            view.update(layer.storage.get(addr, {}))
        return {k: v for k, v in view.items() if v is not None}

    # --------------------------------------------------------------------- #
    # Events
    # --------------------------------------------------------------------- #

    def append_event(self, event: Any) -> None:
        if self._layers:
            self._layers[-1].events.append(event)
        else:
            self._base_events.append(event)

    def pending_event_count(self) -> int:
        return sum(len(layer.events) for layer in self._layers)

    def committed_events(self) -> List[Any]:
        return list(self._base_events)

    def committed_event_count(self) -> int:
        return len(self._base_events)


__all__ = ["Journal"]
