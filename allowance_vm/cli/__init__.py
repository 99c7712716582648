"""
allowance_vm.cli — command line entrypoint (``allowance-vm``).

    allowance-vm run scenarios/basic.json --json
    allowance-vm config
    allowance-vm version
"""

from __future__ import annotations

from .main import app, main

__all__ = ["app", "main"]
