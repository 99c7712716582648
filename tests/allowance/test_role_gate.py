# -*- coding: utf-8 -*-
"""Grantor-only operations and construction checks."""
from __future__ import annotations

import pytest

from allowance_contracts.errors import (InvalidArgument, InvalidConfiguration,
                                        Unauthorized)

from ..fixtures.world import DAY, VAULT_MODULE


def test_deployer_becomes_grantor(world):
    assert world.view("grantor") == world.grantor
    assert world.view("token") == world.token
    assert world.view("window_duration") == DAY


@pytest.mark.parametrize(
    "fn, args",
    [
        ("fund", (500,)),
        ("configure", ("@alice", 100)),
        ("revoke", ("@alice",)),
    ],
)
def test_restricted_operations_reject_non_grantor(world, fn, args):
    alice = world.accounts["alice"]
    world.configure(alice, 100)
    resolved = [world.accounts[a[1:]] if isinstance(a, str) else a for a in args]
    with pytest.raises(Unauthorized) as ei:
        world.call(fn, *resolved, sender=world.accounts["mallory"])
    assert ei.value.code == "ALLOWANCE:UNAUTHORIZED"
    assert world.remaining(alice) == 100


def test_beneficiary_cannot_reconfigure_itself(world):
    alice = world.accounts["alice"]
    world.configure(alice, 10)
    with pytest.raises(Unauthorized):
        world.call("configure", alice, 1_000, sender=alice)


def test_role_check_precedes_argument_checks(world):
    with pytest.raises(Unauthorized):
        world.call("fund", 0, sender=world.accounts["mallory"])
    with pytest.raises(InvalidArgument):
        world.call("fund", 0, sender=world.grantor)


def test_grantor_cannot_be_changed_by_reinit(world):
    with pytest.raises(InvalidConfiguration):
        world.call("init", world.token, 10, sender=world.accounts["mallory"])
    with pytest.raises(InvalidConfiguration):
        world.call("init", world.token, 10, sender=world.grantor)
    assert world.view("grantor") == world.grantor
    assert world.view("window_duration") == DAY


@pytest.mark.parametrize("duration", [0, -1, True, "86400", 2**256])
def test_construction_rejects_bad_window(world, duration):
    with pytest.raises(InvalidConfiguration):
        world.engine.deploy(VAULT_MODULE, world.token, duration, sender=world.grantor)


def test_construction_rejects_null_token(world):
    with pytest.raises(InvalidConfiguration):
        world.engine.deploy(VAULT_MODULE, bytes(32), DAY, sender=world.grantor)
    with pytest.raises(InvalidConfiguration):
        world.engine.deploy(VAULT_MODULE, b"", DAY, sender=world.grantor)


def test_construction_rejects_token_without_contract(world):
    with pytest.raises(InvalidConfiguration):
        world.engine.deploy(VAULT_MODULE, world.accounts["alice"], DAY, sender=world.grantor)


def test_construction_rejects_null_grantor(world):
    with pytest.raises(InvalidConfiguration):
        world.engine.deploy(VAULT_MODULE, world.token, DAY, sender=bytes(32))
