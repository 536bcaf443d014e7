"""
mode_counter.runtime.calls — the three callable entry points and how to route them.

    index  name             args
    0      set_value        value: u32
    1      switch_state     new_int_state: u32     (alias: switch_mode)
    2      execute_action   -

Calls are small frozen records. Their arguments are range-checked on
construction (a u32 that does not fit is malformed input, not a module error);
the *meaning* of the arguments (zero value, unknown mode code) is judged by the
operations in `mode_counter.runtime.module`.

Routing
-------
`resolve_call` accepts a call record, or a mapping such as

    {"call": "set_value", "value": 5}
    {"call": 1, "new_int_state": 2}
    {"call": "switch_mode", "mode": "decreasing"}

Byte form (`encode_call` / `decode_call`): u8 call index followed by the u32 LE
argument, if any.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Union

from ..types.mode import Mode
from ..types.state import ensure_u32


@dataclass(frozen=True)
class SetValue:
    value: int

    name: ClassVar[str] = "set_value"
    index: ClassVar[int] = 0

    def __post_init__(self) -> None:
        ensure_u32("value", self.value)

    def args(self) -> Dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class SwitchState:
    new_int_state: int

    name: ClassVar[str] = "switch_state"
    index: ClassVar[int] = 1

    def __post_init__(self) -> None:
        ensure_u32("new_int_state", self.new_int_state)

    def args(self) -> Dict[str, Any]:
        return {"new_int_state": self.new_int_state}


SwitchMode = SwitchState


@dataclass(frozen=True)
class ExecuteAction:
    name: ClassVar[str] = "execute_action"
    index: ClassVar[int] = 2

    def args(self) -> Dict[str, Any]:
        return {}


Call = Union[SetValue, SwitchState, ExecuteAction]

CALLS_BY_INDEX = {c.index: c for c in (SetValue, SwitchState, ExecuteAction)}

_ALIAS_CALL = {
    "set_value": SetValue,
    "set": SetValue,
    "switch_state": SwitchState,
    "switch_mode": SwitchState,
    "switch": SwitchState,
    "execute_action": ExecuteAction,
    "execute": ExecuteAction,
    "exec": ExecuteAction,
}


# --------------------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------------------


def _int_arg(raw: Any, name: str) -> int:
    if isinstance(raw, bool):
        raise TypeError(f"{name} must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip(), 10)
    raise TypeError(f"{name} must be an integer, got {raw!r}")


def _mode_arg(raw: Any) -> int:
    """Mode argument as a raw code. Names are translated, ints pass through unchecked."""
    if isinstance(raw, Mode):
        return raw.code
    if isinstance(raw, str) and not raw.strip().isdigit():
        return Mode.from_str(raw).code
    return _int_arg(raw, "new_int_state")


def call_class(kind: Any) -> type:
    """Resolve a call name, alias or numeric index to its record class."""
    if isinstance(kind, bool):
        raise ValueError(f"unknown call: {kind!r}")
    if isinstance(kind, int):
        try:
            return CALLS_BY_INDEX[kind]
        except KeyError:
            raise ValueError(f"unknown call index: {kind}") from None
    k = str(kind).strip().lower().replace("-", "_")
    if k.isdigit():
        return call_class(int(k))
    try:
        return _ALIAS_CALL[k]
    except KeyError:
        raise ValueError(f"unknown call: {kind!r}") from None


def resolve_call(obj: Union[Call, Mapping[str, Any]]) -> Call:
    """
    Build a call record from a record (returned as-is) or a mapping.

    Raises:
        ValueError / TypeError for unknown calls or malformed arguments.
    """
    if isinstance(obj, (SetValue, SwitchState, ExecuteAction)):
        return obj
    if not isinstance(obj, Mapping):
        raise TypeError(f"cannot resolve call from {type(obj).__name__}")
    if "call" not in obj:
        raise ValueError("call mapping needs a 'call' field")

    cls = call_class(obj["call"])
    if cls is SetValue:
        if "value" not in obj:
            raise ValueError("set_value needs 'value'")
        return SetValue(_int_arg(obj["value"], "value"))
    if cls is SwitchState:
        for key in ("new_int_state", "mode", "state"):
            if key in obj:
                return SwitchState(_mode_arg(obj[key]))
        raise ValueError("switch_state needs 'new_int_state' (or 'mode')")
    return ExecuteAction()


def call_to_dict(call: Call) -> Dict[str, Any]:
    out: Dict[str, Any] = {"call": call.name}
    out.update(call.args())
    return out


# --------------------------------------------------------------------------------------
# Byte form
# --------------------------------------------------------------------------------------


def encode_call(call: Call) -> bytes:
    out = bytearray([call.index])
    if isinstance(call, SetValue):
        out += call.value.to_bytes(4, "little")
    elif isinstance(call, SwitchState):
        out += call.new_int_state.to_bytes(4, "little")
    return bytes(out)


def decode_call(data: bytes) -> Call:
    if not data:
        raise ValueError("empty call encoding")
    cls = call_class(data[0])
    body = bytes(data[1:])
    if cls is ExecuteAction:
        if body:
            raise ValueError("execute_action takes no arguments")
        return ExecuteAction()
    if len(body) != 4:
        raise ValueError(f"{cls.name} needs a 4-byte u32 argument")
    return cls(int.from_bytes(body, "little"))


__all__ = [
    "SetValue",
    "SwitchState",
    "SwitchMode",
    "ExecuteAction",
    "Call",
    "CALLS_BY_INDEX",
    "call_class",
    "resolve_call",
    "call_to_dict",
    "encode_call",
    "decode_call",
]
