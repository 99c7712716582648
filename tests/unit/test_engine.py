# -*- coding: utf-8 -*-
"""Deploy/call/view semantics of the in-process engine."""
from __future__ import annotations

import pytest

from allowance_vm import BlockEnv, ContextError, Engine, Revert, VmError
from allowance_contracts.errors import InvalidConfiguration

from ..fixtures.contracts import kv_store
from ..fixtures.world import TOKEN_MODULE, VAULT_MODULE


def test_deploy_addresses_are_deterministic(config, accounts):
    a = Engine(config=config).deploy(kv_store, sender=accounts["alice"])
    b = Engine(config=config).deploy(kv_store, sender=accounts["alice"])
    assert a == b
    assert len(a) == config.address_len


def test_deploy_by_module_path(engine, accounts):
    addr = engine.deploy("tests.fixtures.contracts.kv_store", sender=accounts["alice"])
    assert engine.deployment(addr).module is kv_store
    assert engine.deployment(addr).deployer == accounts["alice"]


def test_successive_deploys_get_distinct_addresses(engine, accounts):
    a = engine.deploy(kv_store, sender=accounts["alice"])
    b = engine.deploy(kv_store, sender=accounts["alice"])
    assert a != b


def test_failed_init_leaves_no_trace(engine, accounts):
    token = engine.deploy(TOKEN_MODULE, b"Coin", b"CN", 18, 100, sender=accounts["grantor"])
    target = b"\x42" * engine.config.address_len
    with pytest.raises(InvalidConfiguration):
        engine.deploy(VAULT_MODULE, token, 0, sender=accounts["grantor"], address=target)
    assert not engine.is_contract(target)
    assert engine.storage_of(target) == {}
    assert engine.receipts[-1].ok is False


def test_deploy_onto_taken_address_rejected(engine, accounts, kv):
    with pytest.raises(VmError) as ei:
        engine.deploy(kv_store, sender=accounts["alice"], address=kv)
    assert ei.value.code == "engine.address_taken"


def test_call_unknown_contract(engine, accounts):
    with pytest.raises(VmError) as ei:
        engine.call(b"\x07" * 32, "get", b"k", sender=accounts["alice"])
    assert ei.value.code == "engine.no_contract"


@pytest.mark.parametrize("fn", ["_hidden", "not_listed", "missing", ""])
def test_only_exported_entrypoints_callable(engine, accounts, kv, fn):
    with pytest.raises(VmError) as ei:
        engine.call(kv, fn, sender=accounts["alice"])
    assert ei.value.code == "engine.not_exported"


def test_non_strict_mode_allows_unlisted_public_functions(config, accounts):
    engine = Engine(config=config.with_overrides(strict_mode=False))
    kv = engine.deploy(kv_store, sender=accounts["alice"])
    assert engine.call(kv, "not_listed", sender=accounts["alice"]) == 2
    with pytest.raises(VmError):
        engine.call(kv, "_hidden", sender=accounts["alice"])


def test_call_commits_and_records_receipt(engine, accounts, kv):
    engine.call(kv, "put", b"k", b"v", sender=accounts["alice"])
    assert engine.storage_of(kv) == {b"k": b"v"}
    receipt = engine.receipts[-1]
    assert receipt.ok and receipt.fn == "put" and receipt.caller == accounts["alice"]
    assert receipt.to_dict()["error"] is None


def test_failed_call_reverts_storage_and_events(engine, accounts, kv):
    with pytest.raises(Revert) as ei:
        engine.call(kv, "fail_after_put", b"k", b"v", sender=accounts["alice"])
    assert ei.value.code == "kv.fail"
    assert engine.storage_of(kv) == {}
    assert engine.events() == []
    receipt = engine.receipts[-1]
    assert receipt.ok is False
    assert receipt.error["code"] == "kv.fail"


def test_view_discards_effects(engine, accounts, kv):
    engine.view(kv, "put", b"k", b"v")
    assert engine.storage_of(kv) == {}
    assert engine.journal.depth() == 0


def test_view_returns_value(engine, accounts, kv):
    engine.call(kv, "put", b"k", b"v", sender=accounts["alice"])
    assert engine.view(kv, "get", b"k") == b"v"


def test_nested_call_sees_calling_contract_as_caller(engine, accounts, kv):
    other = engine.deploy(kv_store, sender=accounts["bob"])
    assert engine.call(kv, "whoami", sender=accounts["alice"]) == accounts["alice"]
    assert engine.call(kv, "call_other", other, "whoami", sender=accounts["alice"]) == kv


def test_failed_nested_call_is_undone_but_outer_continues(engine, accounts, kv):
    other = engine.deploy(kv_store, sender=accounts["bob"])
    code = engine.call(kv, "try_call", other, "fail_after_put", b"k", b"v", sender=accounts["alice"])
    assert code == "kv.fail"
    assert engine.storage_of(other) == {}
    assert engine.events(name=b"Put") == []
    assert engine.receipts[-1].ok


def test_host_call_from_inside_a_contract_runs_nested(engine, accounts, kv):
    other = engine.deploy(kv_store, sender=accounts["bob"])
    receipts = len(engine.receipts)
    assert engine.call(kv, "host_call", other, "whoami", sender=accounts["alice"]) == kv
    engine.call(kv, "host_call", other, "put", b"k", b"v", sender=accounts["alice"])
    assert engine.storage_of(other) == {b"k": b"v"}
    assert len(engine.receipts) == receipts + 2
    assert all(r.fn == "host_call" for r in engine.receipts[receipts:])
    assert engine.journal.depth() == 0


def test_call_depth_is_capped(config, accounts):
    engine = Engine(config=config.with_overrides(max_call_depth=8))
    kv = engine.deploy(kv_store, sender=accounts["alice"])
    with pytest.raises(VmError) as ei:
        engine.call(kv, "recurse", 0, sender=accounts["alice"])
    assert ei.value.code == "engine.call_depth"
    assert engine.journal.depth() == 0


def test_clock_moves_forward_only(engine, accounts, kv):
    engine.set_time(100)
    assert engine.call(kv, "now", sender=accounts["alice"]) == 100
    engine.advance(50)
    assert engine.block.timestamp == 150
    with pytest.raises(ContextError):
        engine.set_time(149)
    engine.mine(3)
    assert engine.block.height == 3


def test_block_env_rejects_negative_fields():
    with pytest.raises(ContextError):
        BlockEnv(height=-1, timestamp=0, chain_id=1)
    with pytest.raises(ContextError):
        BlockEnv(height=0, timestamp=True, chain_id=1)  # type: ignore[arg-type]


def test_events_filter_by_address_and_name(engine, accounts, kv):
    other = engine.deploy(kv_store, sender=accounts["bob"])
    engine.call(kv, "emit", b"A", {b"x": 1}, sender=accounts["alice"])
    engine.call(other, "emit", b"B", {b"x": 2}, sender=accounts["alice"])
    assert [e.name for e in engine.events()] == [b"A", b"B"]
    assert [e.name for e in engine.events(address=other)] == [b"B"]
    assert [e.args["x"] for e in engine.events(name=b"A")] == [1]
    assert engine.receipts[-1].to_dict()["events"][0]["args"] == [{"k": "x", "t": "i", "v": 2}]


def test_stdlib_outside_a_call_raises():
    from allowance_vm.stdlib import env

    with pytest.raises(VmError) as ei:
        env.caller()
    assert ei.value.code == "env.no_frame"
