"""
mode_counter.errors — error catalogue and dispatch failures.

The module communicates failures via *typed exceptions* that the dispatcher
converts into structured `DispatchResult` records. These exceptions are
pure-Python, dependency-free, and deliberately small.

Catalogue
---------
`ErrorKind` is the closed, flat set of module errors. The index of each kind is
its position in the original declaration and is part of the wire format of a
failed dispatch; never reorder the members.

    0 CannotBeZero           value passed to set_value was 0
    1 CannotDecreaseToZero   switch to Decreasing while value == 1
    2 CannotIncreasePastMax  switch to Increasing while value == u32::MAX
    3 InvalidStateInt        mode code not in {0, 1, 2}
    4 ExecuteOnNone          execute_action on an uninitialized account
    5 RedundantSwitch        switch to the mode already active
    6 SetOnSome              set_value on an initialized account
    7 SwitchOnNone           switch_state on an uninitialized account

Exceptions
----------
DispatchFailure (base)
 ├─ ModuleError        : one of the catalogue errors above (carries `kind`)
 ├─ BadOrigin          : the origin is not a signed account
 └─ ExhaustsResources  : the declared weight does not fit the remaining budget

None of these imply a node bug; each is a deterministic function of
(store, origin, input, remaining weight) and maps to a failed result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    CannotBeZero = "CannotBeZero"
    CannotDecreaseToZero = "CannotDecreaseToZero"
    CannotIncreasePastMax = "CannotIncreasePastMax"
    InvalidStateInt = "InvalidStateInt"
    ExecuteOnNone = "ExecuteOnNone"
    RedundantSwitch = "RedundantSwitch"
    SetOnSome = "SetOnSome"
    SwitchOnNone = "SwitchOnNone"

    @property
    def ordinal(self) -> int:
        """Stable numeric index (declaration order)."""
        return _ERROR_INDEX[self]

    @property
    def doc(self) -> str:
        return _ERROR_DOCS[self]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_index(cls, index: int) -> "ErrorKind":
        for kind, idx in _ERROR_INDEX.items():
            if idx == index:
                return kind
        raise ValueError(f"unknown error index: {index!r}")


_ERROR_INDEX: Dict[ErrorKind, int] = {kind: i for i, kind in enumerate(ErrorKind)}

_ERROR_DOCS: Dict[ErrorKind, str] = {
    ErrorKind.CannotBeZero: "integer cannot be zero",
    ErrorKind.CannotDecreaseToZero: "cannot decrease an integer with a value of 1",
    ErrorKind.CannotIncreasePastMax: "cannot increase an integer with a value of 4294967295",
    ErrorKind.InvalidStateInt: "invalid integer code for state",
    ErrorKind.ExecuteOnNone: "executing a state on an uninitialized value",
    ErrorKind.RedundantSwitch: "switching to the state already active",
    ErrorKind.SetOnSome: "setting a value on an initialized value",
    ErrorKind.SwitchOnNone: "switching state on an uninitialized value",
}


@dataclass
class DispatchFailure(Exception):
    """
    Base dispatch failure.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'MODULE_ERROR', 'BAD_ORIGIN').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "dispatch failed"
    code: str = "DISPATCH_FAILURE"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for results/logs/CLI output."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class ModuleError(DispatchFailure):
    """
    A catalogue error raised by one of the three operations.

    The store is guaranteed untouched when this is raised.
    """
    def __init__(self, kind: ErrorKind) -> None:
        self.kind = ErrorKind(kind)
        super().__init__(
            message=self.kind.doc,
            code="MODULE_ERROR",
            data={"error": self.kind.value, "index": self.kind.ordinal},
        )


class BadOrigin(DispatchFailure):
    """The call was not made from a signed origin."""
    def __init__(self, message: str = "bad origin", *, origin: Optional[str] = None) -> None:
        super().__init__(
            message=message,
            code="BAD_ORIGIN",
            data={"origin": origin} if origin is not None else None,
        )


class ExhaustsResources(DispatchFailure):
    """
    The call's declared weight exceeds the remaining budget.

    Raised before the call runs; nothing is charged and nothing is written.
    """
    def __init__(
        self,
        message: str = "exhausts resources",
        *,
        weight: Optional[int] = None,
        remaining: Optional[int] = None,
    ) -> None:
        d: Dict[str, Any] = {}
        if weight is not None:
            d["weight"] = weight
        if remaining is not None:
            d["remaining"] = remaining
        super().__init__(message=message, code="EXHAUSTS_RESOURCES", data=d or None)


__all__ = [
    "ErrorKind",
    "DispatchFailure",
    "ModuleError",
    "BadOrigin",
    "ExhaustsResources",
]
