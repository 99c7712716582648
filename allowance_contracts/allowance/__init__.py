# -*- coding: utf-8 -*-
"""
allowance_contracts.allowance
=============================

Custodial allowance vault. A single *grantor* funds a shared token pool and
lets named *beneficiaries* withdraw up to a per-window quota. Unspent quota
never carries over; each window's spend resets when the window elapses.

Modules
-------
- ``ledger``    per-beneficiary records and the lazy window-rollover view
- ``claim``     the beneficiary withdrawal protocol
- ``contract``  the deployable contract (entrypoints + views)

Deploy with::

    vault = engine.deploy("allowance_contracts.allowance.contract",
                          token_address, 86_400, sender=grantor)
"""
from __future__ import annotations

from .ledger import AllowanceRecord

__all__ = ["AllowanceRecord"]
