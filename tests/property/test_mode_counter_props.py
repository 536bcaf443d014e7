# -*- coding: utf-8 -*-
"""
Property tests for the mode counter: accepted sequences, rejections that never
write, and the storage codec.
"""
from __future__ import annotations

from typing import List

import pytest
from hypothesis import given, strategies as st

from mode_counter.config import load_config
from mode_counter.encoding import decode_state, encode_state
from mode_counter.errors import ErrorKind
from mode_counter.runtime.calls import ExecuteAction, SetValue, SwitchState
from mode_counter.runtime.dispatcher import dispatch
from mode_counter.runtime.event_sink import EventSink
from mode_counter.runtime.origin import Origin
from mode_counter.state.store import InMemoryAccountStore
from mode_counter.types import U32_MAX, AccountState, DispatchStatus, Mode
from mode_counter.types.arithmetic import ArithmeticPolicy, step

CFG = load_config(env={}, overrides={"metrics": False})

u32 = st.integers(min_value=0, max_value=U32_MAX)
nonzero_u32 = st.integers(min_value=1, max_value=U32_MAX)
modes = st.sampled_from(list(Mode))
accounts = st.one_of(
    st.integers(min_value=0, max_value=2**64 - 1),
    st.binary(max_size=8),
    st.text(max_size=8),
)
calls = st.one_of(
    u32.map(SetValue),
    st.integers(min_value=0, max_value=4).map(SwitchState),
    st.just(ExecuteAction()),
)


def _run(store, who, call, cfg=CFG):
    return dispatch(Origin.signed(who), call, store, sink=EventSink(), config=cfg)


# ---- set_value ----


@given(who=accounts, seeded=st.booleans())
def test_zero_is_always_rejected(who, seeded):
    store = InMemoryAccountStore()
    if seeded:
        store.put(who, AccountState(7, Mode.INCREASING))
    before = store.state_root()
    res = _run(store, who, SetValue(0))
    assert res.error_kind is ErrorKind.CannotBeZero
    assert store.state_root() == before


@given(who=accounts, first=nonzero_u32, second=nonzero_u32)
def test_second_set_value_is_rejected(who, first, second):
    store = InMemoryAccountStore()
    assert _run(store, who, SetValue(first)).is_success
    res = _run(store, who, SetValue(second))
    assert res.error_kind is ErrorKind.SetOnSome
    assert store.get(who) == AccountState(first, Mode.IDLE)


# ---- Uninitialized accounts ----


@given(who=accounts, code=st.integers(min_value=0, max_value=2))
def test_operations_on_missing_entries(who, code):
    store = InMemoryAccountStore()
    assert _run(store, who, SwitchState(code)).error_kind is ErrorKind.SwitchOnNone
    assert _run(store, who, ExecuteAction()).error_kind is ErrorKind.ExecuteOnNone
    assert len(store) == 0


@given(code=st.integers(min_value=3, max_value=U32_MAX), seeded=st.booleans())
def test_unknown_codes_are_invalid(code, seeded):
    store = InMemoryAccountStore()
    if seeded:
        store.put(1, AccountState(5))
    assert _run(store, 1, SwitchState(code)).error_kind is ErrorKind.InvalidStateInt


# ---- switch_state ----


@given(value=nonzero_u32, mode=modes)
def test_redundant_switch_is_rejected(value, mode):
    store = InMemoryAccountStore({1: AccountState(value, mode)})
    res = _run(store, 1, SwitchState(mode.code))
    assert res.error_kind is ErrorKind.RedundantSwitch
    assert store.get(1) == AccountState(value, mode)


@given(mode=st.sampled_from([Mode.IDLE, Mode.INCREASING]))
def test_cannot_enter_decreasing_at_one(mode):
    store = InMemoryAccountStore({1: AccountState(1, mode)})
    assert _run(store, 1, SwitchState(2)).error_kind is ErrorKind.CannotDecreaseToZero


@given(mode=st.sampled_from([Mode.IDLE, Mode.DECREASING]))
def test_cannot_enter_increasing_at_max(mode):
    store = InMemoryAccountStore({1: AccountState(U32_MAX, mode)})
    assert _run(store, 1, SwitchState(1)).error_kind is ErrorKind.CannotIncreasePastMax


# ---- execute_action ----


@given(value=u32, policy=st.sampled_from(list(ArithmeticPolicy)))
def test_idle_execution_keeps_value(value, policy):
    store = InMemoryAccountStore({1: AccountState(value, Mode.IDLE)})
    res = _run(store, 1, ExecuteAction(), CFG.with_arithmetic(policy))
    assert res.is_success
    assert res.event.value == value
    assert store.get(1) == AccountState(value, Mode.IDLE)


@given(value=u32, mode=modes)
def test_wrapping_step_matches_modular_arithmetic(value, mode):
    delta = {Mode.IDLE: 0, Mode.INCREASING: 1, Mode.DECREASING: -1}[mode]
    assert step(value, mode) == (value + delta) % (U32_MAX + 1)


@given(value=st.integers(min_value=1, max_value=U32_MAX), mode=modes)
def test_saturating_stays_in_stored_range(value, mode):
    assert 1 <= step(value, mode, ArithmeticPolicy.SATURATING) <= U32_MAX


# ---- Whole sequences ----


@given(seq=st.lists(calls, max_size=30))
def test_failures_never_write(seq: List):
    store = InMemoryAccountStore()
    for call in seq:
        before = store.state_root()
        res = _run(store, "acct", call)
        if res.is_success:
            continue
        assert res.status is DispatchStatus.MODULE_ERROR
        assert store.state_root() == before


@given(seq=st.lists(calls, max_size=30))
def test_checked_sequences_stay_in_range(seq: List):
    cfg = CFG.with_arithmetic(ArithmeticPolicy.CHECKED)
    store = InMemoryAccountStore()
    for call in seq:
        _run(store, 0, call, cfg)
        st_ = store.get(0)
        if st_ is not None:
            assert 1 <= st_.value <= U32_MAX


@given(seq=st.lists(calls, max_size=20))
def test_other_accounts_untouched(seq: List):
    store = InMemoryAccountStore({"other": AccountState(3, Mode.DECREASING)})
    for call in seq:
        _run(store, "me", call)
    assert store.get("other") == AccountState(3, Mode.DECREASING)


# ---- Codec ----


@pytest.mark.parametrize("mode", list(Mode))
@given(value=u32)
def test_state_codec_round_trip(mode, value):
    st_ = AccountState(value, mode)
    raw = encode_state(st_)
    assert len(raw) == 5
    assert decode_state(raw) == st_
