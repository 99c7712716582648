# -*- coding: utf-8 -*-
"""
allowance_contracts.stdlib
==========================

Deterministic building blocks for contracts running on ``allowance_vm``:

- ``access``: grantor role gate (single immutable administrative principal)
- ``math``: checked/saturating u256 arithmetic and fixed-width codecs
- ``token``: AN20 fungible token contract and a typed client proxy
- ``utils``: identity predicates

Helpers only use the sanctioned ``allowance_vm.stdlib`` modules; there is no
I/O, wall clock, or randomness.
"""
from __future__ import annotations
