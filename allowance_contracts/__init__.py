# -*- coding: utf-8 -*-
"""
allowance_contracts
===================

Contracts written for the allowance VM (``allowance_vm``).

- ``allowance_contracts.allowance``: the custodial allowance vault: a grantor
  funds a shared pool and lets beneficiaries withdraw up to a quota per
  recurring time window.
- ``allowance_contracts.stdlib``: reusable contract helpers: grantor gate,
  checked u256 math, the AN20 fungible token and its client proxy.
- ``allowance_contracts.errors``: the error kinds contracts raise.

Contracts are deployed by module path, e.g.::

    engine.deploy("allowance_contracts.allowance.contract", token, 86_400, sender=grantor)
"""
from __future__ import annotations

from allowance_vm.version import __version__

__all__ = ["__version__"]
