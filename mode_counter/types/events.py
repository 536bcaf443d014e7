"""
mode_counter.types.events — the closed catalogue of observable events.

Three events exist, each with a stable index used by the byte encoding in
`mode_counter.encoding.encode_event`:

    0 ValueSet(who)                  set_value created the account entry
    1 StateSwitched(who)             switch_state changed the mode
    2 StateExecuted(who, new_value)  execute_action ran; carries the stored value

`Event` is a frozen record. Build it through the named constructors so the
`value` field is present exactly when the kind carries one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .state import AccountId, ensure_u32


class EventKind(str, Enum):
    ValueSet = "ValueSet"
    StateSwitched = "StateSwitched"
    StateExecuted = "StateExecuted"

    @property
    def ordinal(self) -> int:
        return _EVENT_INDEX[self]

    @property
    def carries_value(self) -> bool:
        return self is EventKind.StateExecuted

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


_EVENT_INDEX: Dict[EventKind, int] = {kind: i for i, kind in enumerate(EventKind)}


@dataclass(frozen=True)
class Event:
    """
    A single event deposited by a successful call.

    Attributes:
        kind:  EventKind
        who:   the account the call acted on
        value: new stored value (StateExecuted only; None otherwise)
    """

    kind: EventKind
    who: AccountId
    value: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, EventKind):
            raise TypeError("kind must be an EventKind")
        if self.kind.carries_value:
            ensure_u32("value", self.value)
        elif self.value is not None:
            raise ValueError(f"{self.kind.value} carries no value")

    # --------------------- construction helpers ---------------------

    @classmethod
    def value_set(cls, who: AccountId) -> "Event":
        return cls(EventKind.ValueSet, who)

    @classmethod
    def state_switched(cls, who: AccountId) -> "Event":
        return cls(EventKind.StateSwitched, who)

    @classmethod
    def state_executed(cls, who: AccountId, new_value: int) -> "Event":
        return cls(EventKind.StateExecuted, who, new_value)

    # --------------------- conversions & representations ---------------------

    def args(self) -> tuple:
        """Positional payload as the host would render it, e.g. (who, 2)."""
        if self.kind.carries_value:
            return (self.who, self.value)
        return (self.who,)

    def to_dict(self) -> Dict[str, Any]:
        who = "0x" + self.who.hex() if isinstance(self.who, bytes) else self.who
        out: Dict[str, Any] = {"event": self.kind.value, "who": who}
        if self.kind.carries_value:
            out["value"] = self.value
        return out

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"{self.kind.value}({', '.join(repr(a) for a in self.args())})"


__all__ = ["EventKind", "Event"]
