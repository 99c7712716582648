"""
allowance_vm.runtime.hash_api — deterministic hashing for contracts and the host.

Only SHA3 (FIPS-202) from hashlib is exposed; it is available on every
supported CPython build and behaves identically across platforms.
"""

from __future__ import annotations

import hashlib

from .error import VmError


def _as_bytes(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise VmError(f"hash input must be bytes, got {type(data).__name__}", code="hash.bad_input")
    return bytes(data)


def sha3_256(data: bytes) -> bytes:
    return hashlib.sha3_256(_as_bytes(data)).digest()


__all__ = ["sha3_256"]
