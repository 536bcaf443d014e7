import pytest

from mode_counter.errors import ErrorKind, ModuleError
from mode_counter.runtime.calls import ExecuteAction, SetValue, SwitchState
from mode_counter.runtime.module import (apply_call, execute_action, set_value,
                                         switch_mode, switch_state)
from mode_counter.state.store import InMemoryAccountStore
from mode_counter.types import U32_MAX, AccountState, ArithmeticPolicy, Event, Mode


def seeded(**entries) -> InMemoryAccountStore:
    s = InMemoryAccountStore()
    for who, (value, mode) in entries.items():
        s.put(who, AccountState(value, mode))
    return s


def expect(kind: ErrorKind, fn, *args, **kwargs):
    with pytest.raises(ModuleError) as ei:
        fn(*args, **kwargs)
    assert ei.value.kind is kind
    return ei.value


# ---- set_value ----


def test_set_value_creates_idle_entry():
    s = InMemoryAccountStore()
    assert set_value(s, 1, 42) == Event.value_set(1)
    assert s.get(1) == AccountState(42, Mode.IDLE)


def test_set_value_zero_rejected_even_when_initialized():
    s = seeded(a=(3, Mode.DECREASING))
    expect(ErrorKind.CannotBeZero, set_value, s, "a", 0)
    assert s.get("a") == AccountState(3, Mode.DECREASING)


def test_set_value_twice_keeps_first_entry():
    s = InMemoryAccountStore()
    set_value(s, 1, 1)
    err = expect(ErrorKind.SetOnSome, set_value, s, 1, 2)
    assert err.code == "MODULE_ERROR"
    assert err.data == {"error": "SetOnSome", "index": 6}
    assert s.get(1) == AccountState(1, Mode.IDLE)


@pytest.mark.parametrize("bad", [-1, U32_MAX + 1])
def test_set_value_out_of_u32_range_is_malformed(bad):
    with pytest.raises(ValueError):
        set_value(InMemoryAccountStore(), 1, bad)


def test_set_value_rejects_non_int():
    with pytest.raises(TypeError):
        set_value(InMemoryAccountStore(), 1, "5")
    with pytest.raises(TypeError):
        set_value(InMemoryAccountStore(), 1, True)


# ---- switch_state ----


def test_invalid_code_checked_before_store():
    # Uninitialized account: InvalidStateInt wins over SwitchOnNone.
    expect(ErrorKind.InvalidStateInt, switch_state, InMemoryAccountStore(), 1, 3)
    expect(ErrorKind.InvalidStateInt, switch_state, InMemoryAccountStore(), 1, U32_MAX)


def test_switch_on_none():
    expect(ErrorKind.SwitchOnNone, switch_state, InMemoryAccountStore(), 1, 1)


def test_redundant_checked_before_boundaries():
    # value 1 in Decreasing: switching to Decreasing again is Redundant, not CannotDecreaseToZero
    s = seeded(a=(1, Mode.DECREASING))
    expect(ErrorKind.RedundantSwitch, switch_state, s, "a", 2)
    s = seeded(a=(U32_MAX, Mode.INCREASING))
    expect(ErrorKind.RedundantSwitch, switch_state, s, "a", 1)


def test_boundary_switches_rejected():
    s = seeded(lo=(1, Mode.IDLE), hi=(U32_MAX, Mode.DECREASING))
    expect(ErrorKind.CannotDecreaseToZero, switch_state, s, "lo", 2)
    expect(ErrorKind.CannotIncreasePastMax, switch_state, s, "hi", 1)
    assert s.get("lo") == AccountState(1, Mode.IDLE)
    assert s.get("hi") == AccountState(U32_MAX, Mode.DECREASING)


def test_boundary_values_allow_other_targets():
    s = seeded(lo=(1, Mode.IDLE), hi=(U32_MAX, Mode.IDLE))
    assert switch_state(s, "lo", 1) == Event.state_switched("lo")
    assert switch_state(s, "hi", 2) == Event.state_switched("hi")
    assert s.get("lo").mode is Mode.INCREASING
    assert s.get("hi").mode is Mode.DECREASING


def test_any_non_redundant_target_is_accepted():
    s = seeded(a=(5, Mode.IDLE))
    for code, mode in ((2, Mode.DECREASING), (1, Mode.INCREASING), (0, Mode.IDLE), (1, Mode.INCREASING)):
        switch_state(s, "a", code)
        assert s.get("a") == AccountState(5, mode)


def test_switch_mode_alias():
    assert switch_mode is switch_state


# ---- execute_action ----


def test_execute_on_none():
    expect(ErrorKind.ExecuteOnNone, execute_action, InMemoryAccountStore(), 1)


@pytest.mark.parametrize(
    "mode,before,after",
    [(Mode.IDLE, 7, 7), (Mode.INCREASING, 7, 8), (Mode.DECREASING, 7, 6)],
)
def test_execute_steps(mode, before, after):
    s = seeded(a=(before, mode))
    assert execute_action(s, "a") == Event.state_executed("a", after)
    assert s.get("a") == AccountState(after, mode)


def test_wrapping_is_default():
    s = seeded(up=(U32_MAX, Mode.INCREASING), down=(1, Mode.DECREASING))
    execute_action(s, "up")
    assert s.get("up").value == 0
    execute_action(s, "down")
    assert s.get("down").value == 0
    execute_action(s, "down")
    assert s.get("down").value == U32_MAX


def test_checked_policy_refuses_edge_steps():
    s = seeded(up=(U32_MAX, Mode.INCREASING), down=(1, Mode.DECREASING))
    expect(ErrorKind.CannotIncreasePastMax, execute_action, s, "up", policy=ArithmeticPolicy.CHECKED)
    expect(ErrorKind.CannotDecreaseToZero, execute_action, s, "down", policy=ArithmeticPolicy.CHECKED)
    assert s.get("up") == AccountState(U32_MAX, Mode.INCREASING)
    assert s.get("down") == AccountState(1, Mode.DECREASING)


def test_saturating_policy_clamps():
    s = seeded(up=(U32_MAX, Mode.INCREASING), down=(1, Mode.DECREASING))
    assert execute_action(s, "up", policy=ArithmeticPolicy.SATURATING) == Event.state_executed("up", U32_MAX)
    assert execute_action(s, "down", policy=ArithmeticPolicy.SATURATING) == Event.state_executed("down", 1)


def test_idle_never_changes_value_under_any_policy():
    for policy in ArithmeticPolicy:
        s = seeded(a=(U32_MAX, Mode.IDLE))
        execute_action(s, "a", policy=policy)
        assert s.get("a") == AccountState(U32_MAX, Mode.IDLE)


# ---- apply_call ----


def test_apply_call_routes_records():
    s = InMemoryAccountStore()
    assert apply_call(s, 9, SetValue(3)) == Event.value_set(9)
    assert apply_call(s, 9, SwitchState(1)) == Event.state_switched(9)
    assert apply_call(s, 9, ExecuteAction()) == Event.state_executed(9, 4)


def test_apply_call_rejects_non_call():
    with pytest.raises(TypeError):
        apply_call(InMemoryAccountStore(), 1, {"call": "set_value", "value": 1})
