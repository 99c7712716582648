# -*- coding: utf-8 -*-
"""
tests.conftest
==============

Pytest fixtures for the allowance VM and the allowance vault.

- ``config``    fresh ``VMConfig`` from defaults (env cache cleared)
- ``engine``    bare ``Engine`` at t=0
- ``accounts``  stable named addresses (grantor, alice, bob, carol, mallory)
- ``world``     engine + AN20 token + vault funded with 10_000 units
- ``kv``        a deployed ``kv_store`` contract for raw VM checks

Usage (inside a test file):
    def test_claim(world):
        alice = world.accounts["alice"]
        world.configure(alice, 100)
        world.at(10).claim(alice, 60)
        assert world.remaining(alice) == 40
"""
from __future__ import annotations

import os
from typing import Dict

import pytest

from allowance_vm import Engine, VMConfig, load_config

from .fixtures.contracts import kv_store
from .fixtures.world import ACCOUNT_TAGS, World, det_address

# Prefer UTC everywhere.
os.environ.setdefault("TZ", "UTC")

_ENV_KEYS = (
    "ALLOWANCE_VM_STRICT",
    "ALLOWANCE_VM_CHAIN_ID",
    "ALLOWANCE_VM_ADDRESS_LEN",
    "ALLOWANCE_VM_MAX_CALL_DEPTH",
    "ALLOWANCE_VM_MAX_STORAGE_KEY_BYTES",
    "ALLOWANCE_VM_MAX_STORAGE_VAL_BYTES",
    "ALLOWANCE_VM_MAX_LOGS_PER_CALL",
)


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> VMConfig:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    load_config.cache_clear()
    yield load_config()
    load_config.cache_clear()


@pytest.fixture
def engine(config: VMConfig) -> Engine:
    return Engine(config=config)


@pytest.fixture
def accounts(config: VMConfig) -> Dict[str, bytes]:
    return {tag: det_address(tag, config.address_len) for tag in ACCOUNT_TAGS}


@pytest.fixture
def world(config: VMConfig) -> World:
    return World.create(config=config)


@pytest.fixture
def kv(engine: Engine, accounts: Dict[str, bytes]) -> bytes:
    return engine.deploy(kv_store, sender=accounts["alice"])


# --- pretty assertion diffs for addresses ------------------------------------


def pytest_assertrepr_compare(op, left, right):
    if op == "==" and isinstance(left, (bytes, bytearray)) and isinstance(right, (bytes, bytearray)):
        return [
            "bytes differ:",
            f"  left : 0x{bytes(left).hex()}",
            f"  right: 0x{bytes(right).hex()}",
        ]
    return None
