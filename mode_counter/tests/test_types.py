import pytest

from mode_counter.errors import BadOrigin, ErrorKind, ExhaustsResources, ModuleError
from mode_counter.runtime.origin import Origin, OriginKind, ensure_signed
from mode_counter.types import (U32_MAX, AccountState, ArithmeticPolicy, DispatchResult,
                                DispatchStatus, Event, EventKind, Mode)
from mode_counter.types.arithmetic import clamp, step


# ---- Mode ----


def test_mode_codes_are_pinned():
    assert [m.code for m in (Mode.IDLE, Mode.INCREASING, Mode.DECREASING)] == [0, 1, 2]
    assert Mode.from_code(2) is Mode.DECREASING
    assert Mode.from_str(" INC ") is Mode.INCREASING
    assert Mode.DECREASING.label == "Decreasing"


@pytest.mark.parametrize("bad", [3, -1, True, "1", None])
def test_mode_from_code_rejects(bad):
    with pytest.raises(ValueError):
        Mode.from_code(bad)


# ---- Error catalogue ----


def test_error_indices_follow_declaration():
    expected = [
        "CannotBeZero", "CannotDecreaseToZero", "CannotIncreasePastMax", "InvalidStateInt",
        "ExecuteOnNone", "RedundantSwitch", "SetOnSome", "SwitchOnNone",
    ]
    assert [k.value for k in ErrorKind] == expected
    assert [k.ordinal for k in ErrorKind] == list(range(8))
    assert ErrorKind.from_index(5) is ErrorKind.RedundantSwitch
    with pytest.raises(ValueError):
        ErrorKind.from_index(8)


def test_failures_serialize():
    assert ModuleError(ErrorKind.SwitchOnNone).to_dict() == {
        "code": "MODULE_ERROR",
        "message": "switching state on an uninitialized value",
        "data": {"error": "SwitchOnNone", "index": 7},
    }
    assert BadOrigin().to_dict() == {"code": "BAD_ORIGIN", "message": "bad origin"}
    assert ExhaustsResources(weight=3).data == {"weight": 3}


# ---- State & events ----


def test_account_state_range():
    assert AccountState(U32_MAX).mode is Mode.IDLE
    with pytest.raises(ValueError):
        AccountState(U32_MAX + 1)
    with pytest.raises(TypeError):
        AccountState(1, 1)


def test_account_state_dict_forms():
    st = AccountState(9, Mode.INCREASING)
    assert st.to_dict() == {"value": 9, "mode": "Increasing", "mode_code": 1}
    assert AccountState.from_dict(st.to_dict()) == st
    assert AccountState.from_dict({"value": 9, "mode": "dec"}) == AccountState(9, Mode.DECREASING)
    with pytest.raises(ValueError):
        AccountState.from_dict({"mode": 1})


def test_events():
    ev = Event.state_executed(b"\xab", 2)
    assert ev.args() == (b"\xab", 2)
    assert ev.to_dict() == {"event": "StateExecuted", "who": "0xab", "value": 2}
    assert repr(Event.value_set(1)) == "ValueSet(1)"
    assert [k.ordinal for k in EventKind] == [0, 1, 2]
    with pytest.raises(ValueError):
        Event(EventKind.ValueSet, 1, 5)
    with pytest.raises(TypeError):
        Event(EventKind.StateExecuted, 1)


# ---- Status & results ----


def test_status():
    assert DispatchStatus.from_str("OOG") is DispatchStatus.EXHAUSTS_RESOURCES
    assert DispatchStatus.MODULE_ERROR.charged and not DispatchStatus.BAD_ORIGIN.charged
    assert DispatchStatus.SUCCESS.code == "SUCCESS"
    with pytest.raises(ValueError):
        DispatchStatus.from_str("meh")


def test_result_shape_is_enforced():
    ok = DispatchResult.ok("set_value", Event.value_set(1), weight=5)
    assert ok.is_success and ok.error_kind is None
    err = DispatchResult.failed("set_value", DispatchStatus.MODULE_ERROR, ModuleError(ErrorKind.SetOnSome), weight=5)
    assert err.error_kind is ErrorKind.SetOnSome
    assert err.to_dict()["error"]["data"]["error"] == "SetOnSome"
    with pytest.raises(ValueError):
        DispatchResult(DispatchStatus.SUCCESS, "set_value")
    with pytest.raises(ValueError):
        DispatchResult(DispatchStatus.BAD_ORIGIN, "set_value", event=Event.value_set(1), error=BadOrigin())
    with pytest.raises(ValueError):
        DispatchResult.ok("set_value", Event.value_set(1), weight=-1)


# ---- Origins ----


def test_origins():
    assert ensure_signed(Origin.signed("bob")) == "bob"
    assert Origin.parse("ROOT") == Origin.root()
    assert Origin.parse("signed", 3) == Origin.signed(3)
    with pytest.raises(BadOrigin):
        ensure_signed(Origin.none())
    with pytest.raises(ValueError):
        Origin(OriginKind.ROOT, 1)
    with pytest.raises(TypeError):
        Origin.signed(None)
    with pytest.raises(ValueError):
        Origin.signed(2**64)
    assert Origin.signed(2**64 - 1).who == 2**64 - 1


# ---- Arithmetic ----


def test_step_policies():
    assert step(U32_MAX, Mode.INCREASING) == 0
    assert step(0, Mode.DECREASING) == U32_MAX
    assert step(U32_MAX, Mode.INCREASING, ArithmeticPolicy.SATURATING) == U32_MAX
    assert step(1, Mode.DECREASING, ArithmeticPolicy.SATURATING) == 1
    with pytest.raises(OverflowError):
        step(U32_MAX, Mode.INCREASING, ArithmeticPolicy.CHECKED)
    assert step(5, Mode.IDLE, ArithmeticPolicy.CHECKED) == 5
    assert ArithmeticPolicy.from_str(" Checked ") is ArithmeticPolicy.CHECKED
    with pytest.raises(ValueError):
        ArithmeticPolicy.from_str("modular")
    with pytest.raises(ValueError):
        clamp(1, 3, 2)
