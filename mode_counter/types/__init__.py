"""
mode_counter.types — canonical types shared by the store, the runtime and the CLI.

Public surface (re-exported):
    Mode                       : IntEnum — IDLE / INCREASING / DECREASING (codes 0/1/2)
    AccountState               : Dataclass — (value, mode) per account
    AccountId, U32_MAX         : identity alias and u32 bound
    Event, EventKind           : the event catalogue
    DispatchStatus             : Enum — outcome of a dispatched call
    DispatchResult             : Dataclass — result returned to the host
    ArithmeticPolicy           : Enum — wrapping / checked / saturating execution steps
"""

from __future__ import annotations

from .arithmetic import ArithmeticPolicy
from .events import Event, EventKind
from .mode import Mode
from .result import DispatchResult
from .state import U32_MAX, AccountId, AccountState
from .status import DispatchStatus

__all__ = [
    "ArithmeticPolicy",
    "Mode",
    "AccountState",
    "AccountId",
    "U32_MAX",
    "Event",
    "EventKind",
    "DispatchStatus",
    "DispatchResult",
]
