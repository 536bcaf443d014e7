"""
mode_counter.runtime — operations, routing, weights and the dispatch entry points.

    from mode_counter.runtime import Origin, dispatch, SetValue
    from mode_counter.state import InMemoryAccountStore

    store = InMemoryAccountStore()
    res = dispatch(Origin.signed(1), SetValue(5), store)
    assert res.is_success
"""

from __future__ import annotations

from .calls import (Call, ExecuteAction, SetValue, SwitchMode, SwitchState,
                    decode_call, encode_call, resolve_call)
from .dispatcher import dispatch
from .event_sink import EventSink
from .executor import BatchResult, apply_calls
from .module import apply_call, execute_action, set_value, switch_mode, switch_state
from .origin import Origin, OriginKind, ensure_signed
from .weights import DbWeight, WeightMeter, declared_weight

__all__ = [
    "Call",
    "SetValue",
    "SwitchState",
    "SwitchMode",
    "ExecuteAction",
    "resolve_call",
    "encode_call",
    "decode_call",
    "dispatch",
    "EventSink",
    "BatchResult",
    "apply_calls",
    "apply_call",
    "set_value",
    "switch_state",
    "switch_mode",
    "execute_action",
    "Origin",
    "OriginKind",
    "ensure_signed",
    "DbWeight",
    "WeightMeter",
    "declared_weight",
]
