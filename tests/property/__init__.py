# -*- coding: utf-8 -*-
"""
tests.property package bootstrap.

Registers Hypothesis profiles and selects one on import:
HYPOTHESIS_PROFILE if set, otherwise "ci" under CI and "dev" locally.
Per-test ``@settings(...)`` still override the profile.
"""
from __future__ import annotations

import os
from typing import Final

from hypothesis import HealthCheck, Verbosity, settings

settings.register_profile(
    "dev",
    settings(
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow,),
        verbosity=Verbosity.normal,
    ),
)

settings.register_profile(
    "ci",
    settings(
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow,),
        verbosity=Verbosity.verbose,
        derandomize=True,  # deterministic example generation
    ),
)


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)
