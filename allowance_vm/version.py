"""allowance_vm.version — semantic version with optional overrides.

Resolution order (first match wins):
- ALLOWANCE_VM_VERSION (exact value)
- installed package metadata for the ``allowance-vault`` distribution
- BASE_VERSION + "+dev"
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata
from typing import Optional

# Bump on changes to storage layout, event names or error codes.
BASE_VERSION = "0.1.0"

DIST_NAME = "allowance-vault"


def _pkg_metadata_version(dist_name: str = DIST_NAME) -> Optional[str]:
    """Try to read installed package version; None if unavailable."""
    try:
        v = importlib_metadata.version(dist_name)
        return v if v and v != "0.0.0" else None
    except importlib_metadata.PackageNotFoundError:
        return None


@lru_cache(maxsize=1)
def compute_version() -> str:
    val = os.getenv("ALLOWANCE_VM_VERSION")
    if val:
        return val

    meta_v = _pkg_metadata_version()
    if meta_v:
        return meta_v

    return f"{BASE_VERSION}+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "DIST_NAME", "compute_version"]
