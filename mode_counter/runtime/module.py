"""
mode_counter.runtime.module — the three operations.

Each operation is a pure function of (store, who, arguments):

  * it reads at most the caller's own entry,
  * evaluates every precondition in a fixed order,
  * raises `ModuleError(kind)` on the first failed check (nothing is written), or
  * writes exactly one entry and returns the Event to deposit.

Authentication, weight and event deposit are the dispatcher's job
(`mode_counter.runtime.dispatcher`); these functions trust `who`.

Transitions
-----------
    Uninitialized --set_value(v != 0)--> (v, Idle)
    (v, m)        --switch_state(t)-->   (v, t)    t != m, boundary-safe
    (v, m)        --execute_action-->    (step(v, m), m)
"""

from __future__ import annotations

from ..errors import ErrorKind, ModuleError
from ..state.store import AccountStore
from ..types.arithmetic import ArithmeticPolicy, step
from ..types.events import Event
from ..types.mode import Mode
from ..types.state import U32_MAX, AccountId, AccountState, ensure_u32
from .calls import Call, ExecuteAction, SetValue, SwitchState


def set_value(store: AccountStore, who: AccountId, value: int) -> Event:
    """
    Initialize `who` with `value` in Idle mode.

    Errors: CannotBeZero (value == 0), SetOnSome (entry already present).
    """
    ensure_u32("value", value)
    if value == 0:
        raise ModuleError(ErrorKind.CannotBeZero)
    if store.get(who) is not None:
        raise ModuleError(ErrorKind.SetOnSome)
    store.put(who, AccountState(value=value, mode=Mode.IDLE))
    return Event.value_set(who)


def switch_state(store: AccountStore, who: AccountId, new_int_state: int) -> Event:
    """
    Move `who` into the mode with code `new_int_state`.

    Checks, in order: InvalidStateInt, SwitchOnNone, RedundantSwitch,
    CannotDecreaseToZero (value 1 -> Decreasing), CannotIncreasePastMax
    (value u32::MAX -> Increasing).
    """
    ensure_u32("new_int_state", new_int_state)
    try:
        target = Mode.from_code(new_int_state)
    except ValueError:
        raise ModuleError(ErrorKind.InvalidStateInt) from None

    current = store.get(who)
    if current is None:
        raise ModuleError(ErrorKind.SwitchOnNone)
    if current.mode is target:
        raise ModuleError(ErrorKind.RedundantSwitch)
    if current.value == 1 and target is Mode.DECREASING:
        raise ModuleError(ErrorKind.CannotDecreaseToZero)
    if current.value == U32_MAX and target is Mode.INCREASING:
        raise ModuleError(ErrorKind.CannotIncreasePastMax)

    store.put(who, current.with_mode(target))
    return Event.state_switched(who)


switch_mode = switch_state


def execute_action(
    store: AccountStore,
    who: AccountId,
    *,
    policy: ArithmeticPolicy = ArithmeticPolicy.WRAPPING,
) -> Event:
    """
    Apply the current mode once: Increasing +1, Decreasing -1, Idle unchanged.

    Errors: ExecuteOnNone. Under the `checked` policy a step leaving
    [1, u32::MAX] fails with CannotIncreasePastMax / CannotDecreaseToZero.
    """
    current = store.get(who)
    if current is None:
        raise ModuleError(ErrorKind.ExecuteOnNone)
    try:
        new_value = step(current.value, current.mode, policy)
    except OverflowError:
        if current.mode is Mode.INCREASING:
            raise ModuleError(ErrorKind.CannotIncreasePastMax) from None
        raise ModuleError(ErrorKind.CannotDecreaseToZero) from None

    store.put(who, current.with_value(new_value))
    return Event.state_executed(who, new_value)


def apply_call(
    store: AccountStore,
    who: AccountId,
    call: Call,
    *,
    policy: ArithmeticPolicy = ArithmeticPolicy.WRAPPING,
) -> Event:
    """Run `call` on behalf of `who`. Raises ModuleError on a rejected call."""
    if isinstance(call, SetValue):
        return set_value(store, who, call.value)
    if isinstance(call, SwitchState):
        return switch_state(store, who, call.new_int_state)
    if isinstance(call, ExecuteAction):
        return execute_action(store, who, policy=policy)
    raise TypeError(f"not a call: {call!r}")


__all__ = [
    "set_value",
    "switch_state",
    "switch_mode",
    "execute_action",
    "apply_call",
]
