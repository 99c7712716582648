# -*- coding: utf-8 -*-
"""
allowance_contracts.stdlib.access
=================================

Role gate for contracts with a single administrative principal (the
*grantor*). The grantor is fixed when the contract is constructed and can
never change afterwards; there is deliberately no transfer or renounce path.

    from allowance_contracts.stdlib.access import init_grantor, require_grantor

    def init(token: bytes, window_duration: int) -> None:
        init_grantor(env.caller())

    def configure(beneficiary: bytes, quota: int) -> None:
        require_grantor()
        ...
"""
from __future__ import annotations

from .grantor import (GRANTOR_KEY, get_grantor, init_grantor, is_grantor,
                      require_grantor)

__all__ = ["GRANTOR_KEY", "get_grantor", "init_grantor", "is_grantor", "require_grantor"]
