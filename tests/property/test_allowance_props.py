# -*- coding: utf-8 -*-
"""
Property tests for the allowance vault.

Random claim/advance sequences are replayed against a reference model of the
window accounting. Checked after every step:

- 0 <= remaining_quota(b) <= quota(b)
- window_start never decreases
- a claim succeeds iff 0 < amount <= remaining quota before the claim
- tokens are conserved between pool and beneficiary
- configure(b, q) twice leaves the same storage as once
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from allowance_vm import load_config

from ..fixtures.world import DAY, World

QUOTA = st.integers(min_value=0, max_value=150)
STEP = st.tuples(
    st.integers(min_value=0, max_value=2 * DAY),  # seconds to advance
    st.integers(min_value=0, max_value=200),  # claim amount
)
POOL = 10_000


@pytest.mark.slow
@settings(max_examples=40, deadline=None)
@given(quota=QUOTA, steps=st.lists(STEP, min_size=1, max_size=25))
def test_claims_follow_window_model(quota, steps):
    world = World.create(config=load_config(), pool=POOL)
    alice = world.accounts["alice"]
    world.configure(alice, quota)

    now = 0
    last_start = 0
    claimed = 0
    for dt, amount in steps:
        now += dt
        world.at(now)
        before = world.remaining(alice)
        assert 0 <= before <= quota

        outcome = world.try_claim(alice, amount)
        if amount == 0:
            assert outcome == "ALLOWANCE:INVALID_ARGUMENT"
        elif amount > before:
            assert outcome == "ALLOWANCE:EXCEEDS_ALLOWANCE"
        else:
            assert outcome == "ok"
            claimed += amount
            assert world.remaining(alice) == before - amount

        rec = world.record(alice)
        assert rec["window_start"] >= last_start
        assert rec["spent"] <= quota
        last_start = rec["window_start"]
        assert world.balance(alice) == claimed
        assert world.view("pool_balance") == POOL - claimed


@settings(max_examples=30, deadline=None)
@given(quota=QUOTA, first=QUOTA, t=st.integers(min_value=0, max_value=3 * DAY))
def test_configure_idempotent(quota, first, t):
    world = World.create(config=load_config(), pool=0)
    alice = world.accounts["alice"]
    world.configure(alice, first)
    world.at(t).configure(alice, quota)
    once = world.engine.storage_of(world.vault)
    world.configure(alice, quota)
    assert world.engine.storage_of(world.vault) == once
    assert world.remaining(alice) <= quota


@settings(max_examples=30, deadline=None)
@given(quota=st.integers(min_value=1, max_value=150), spent=st.integers(min_value=0, max_value=150), lowered=QUOTA)
def test_lowered_quota_never_negative(quota, spent, lowered):
    world = World.create(config=load_config(), pool=POOL)
    alice = world.accounts["alice"]
    world.configure(alice, quota)
    take = min(spent, quota)
    if take:
        world.claim(alice, take)
    world.configure(alice, lowered)
    assert world.remaining(alice) == max(lowered - take, 0)
