# -*- coding: utf-8 -*-
"""A token that reports failure or aborts: every claim/fund effect rolls back."""
from __future__ import annotations

import pytest

from allowance_contracts.errors import TransferFailed

from ..fixtures.contracts import stub_token
from ..fixtures.world import DAY, VAULT_MODULE


@pytest.fixture
def stubbed(engine, accounts):
    grantor = accounts["grantor"]
    token = engine.deploy(stub_token, b"ok", sender=grantor)
    vault = engine.deploy(VAULT_MODULE, token, DAY, sender=grantor)
    engine.call(vault, "configure", accounts["alice"], 100, sender=grantor)
    return engine, token, vault


def test_healthy_stub_claims(stubbed, accounts):
    engine, _, vault = stubbed
    assert engine.call(vault, "claim", 10, sender=accounts["alice"]) == 10
    assert engine.view(vault, "remaining_quota", accounts["alice"]) == 90


@pytest.mark.parametrize("mode, cause_key", [(b"false", "result"), (b"none", "result"), (b"abort", "cause")])
def test_claim_rolls_back_on_bad_transfer(stubbed, accounts, mode, cause_key):
    engine, token, vault = stubbed
    alice = accounts["alice"]
    engine.call(vault, "claim", 10, sender=alice)
    engine.call(token, "set_mode", mode, sender=alice)
    storage_before = engine.storage_of(vault)

    with pytest.raises(TransferFailed) as ei:
        engine.call(vault, "claim", 20, sender=alice)
    assert ei.value.code == "ALLOWANCE:TRANSFER_FAILED"
    assert cause_key in ei.value.context

    assert engine.storage_of(vault) == storage_before
    assert engine.view(vault, "remaining_quota", alice) == 90
    assert len(engine.events(address=vault, name=b"Claimed")) == 1


def test_rollover_is_undone_with_failed_transfer(stubbed, accounts):
    engine, token, vault = stubbed
    alice = accounts["alice"]
    engine.call(vault, "claim", 100, sender=alice)
    engine.call(token, "set_mode", b"false", sender=alice)
    engine.set_time(2 * DAY)
    with pytest.raises(TransferFailed):
        engine.call(vault, "claim", 5, sender=alice)
    assert engine.view(vault, "allowance_of", alice) == {
        "quota": 100,
        "spent": 100,
        "window_start": 0,
        "active": True,
    }


def test_fund_rolls_back_on_bad_pull(stubbed, accounts):
    engine, token, vault = stubbed
    engine.call(token, "set_mode", b"false", sender=accounts["grantor"])
    with pytest.raises(TransferFailed):
        engine.call(vault, "fund", 10, sender=accounts["grantor"])
    assert engine.events(address=vault, name=b"Funded") == []
