"""
mode_counter.types.result — DispatchResult container for a single call.

`DispatchResult` is what the host receives back for every dispatched call,
successful or not. It is intentionally minimal and serializable to JSON-friendly
structures.

Fields
------
* status : DispatchStatus — SUCCESS / MODULE_ERROR / BAD_ORIGIN / EXHAUSTS_RESOURCES
* call   : str            — canonical call name ('set_value', 'switch_state', 'execute_action')
* weight : int            — weight actually charged (0 when the call never ran)
* event  : Optional[Event]           — deposited event (SUCCESS only)
* error  : Optional[DispatchFailure] — failure detail (non-SUCCESS only)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import DispatchFailure, ErrorKind, ModuleError
from .events import Event
from .status import DispatchStatus


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    call: str
    weight: int = 0
    event: Optional[Event] = None
    error: Optional[DispatchFailure] = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError("weight must be >= 0")
        if self.status.is_success:
            if self.event is None or self.error is not None:
                raise ValueError("successful result needs an event and no error")
        elif self.error is None or self.event is not None:
            raise ValueError("failed result needs an error and no event")

    # ----------------------------- conveniences ------------------------------

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        """The catalogue error, if the call failed with one."""
        if isinstance(self.error, ModuleError):
            return self.error.kind
        return None

    @classmethod
    def ok(cls, call: str, event: Event, *, weight: int) -> "DispatchResult":
        return cls(status=DispatchStatus.SUCCESS, call=call, weight=weight, event=event)

    @classmethod
    def failed(
        cls,
        call: str,
        status: DispatchStatus,
        error: DispatchFailure,
        *,
        weight: int = 0,
    ) -> "DispatchResult":
        return cls(status=status, call=call, weight=weight, error=error)

    # --------------------------- (de)serialization ---------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-friendly mapping.

        Example:
            {
              "status": "module_error",
              "call": "switch_state",
              "weight": 100010000,
              "event": None,
              "error": {"code": "MODULE_ERROR", "message": "...", "data": {...}}
            }
        """
        return {
            "status": str(self.status),
            "call": self.call,
            "weight": self.weight,
            "event": self.event.to_dict() if self.event is not None else None,
            "error": self.error.to_dict() if self.error is not None else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        detail = repr(self.event) if self.event is not None else (
            self.error_kind.value if self.error_kind is not None else self.error.code  # type: ignore[union-attr]
        )
        return f"DispatchResult({self.call}: {self.status.code} {detail}, weight={self.weight})"


__all__ = ["DispatchResult"]
