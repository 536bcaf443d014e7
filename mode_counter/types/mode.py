"""
mode_counter.types.mode — the three behavioral modes of an account.

`Mode` decides what `execute_action` does to the stored value:
  - IDLE       (0): no-op
  - INCREASING (1): value + 1
  - DECREASING (2): value - 1

The integer codes are the storage/wire discriminants and the codes accepted by
`switch_state`. They are pinned explicitly; never derive them from declaration
order.

String forms:
  - str(Mode.IDLE) -> "Idle"      (good for logs/CLI)
  - Mode.IDLE.code -> 0           (good for storage/protocols)

Parsing is lenient via `Mode.from_str(...)` and strict via `Mode.from_code(...)`.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict


class Mode(IntEnum):
    IDLE = 0
    INCREASING = 1
    DECREASING = 2

    # ---------- convenience ----------

    @property
    def code(self) -> int:
        """Single-byte storage discriminant."""
        return int(self.value)

    @property
    def label(self) -> str:
        return _LABELS[self]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.label

    # ---------- parsing ----------

    @classmethod
    def from_code(cls, code: int) -> "Mode":
        """
        Decode a mode code. Raises ValueError for anything outside {0, 1, 2}.

        bool is rejected even though it is an int subclass.
        """
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError(f"mode code must be int, got {type(code).__name__}")
        try:
            return _BY_CODE[code]
        except KeyError:
            raise ValueError(f"unknown mode code: {code!r}") from None

    @classmethod
    def from_str(cls, s: str) -> "Mode":
        """
        Parse a mode from a string (case-insensitive).

        Accepted: "idle", "increasing"/"inc", "decreasing"/"dec", or the numeric code.
        """
        norm = (s or "").strip().lower()
        if norm in {"idle", "0"}:
            return cls.IDLE
        if norm in {"increasing", "inc", "1"}:
            return cls.INCREASING
        if norm in {"decreasing", "dec", "2"}:
            return cls.DECREASING
        raise ValueError(f"unknown mode: {s!r}")


_BY_CODE: Dict[int, Mode] = {
    0: Mode.IDLE,
    1: Mode.INCREASING,
    2: Mode.DECREASING,
}

_LABELS: Dict[Mode, str] = {
    Mode.IDLE: "Idle",
    Mode.INCREASING: "Increasing",
    Mode.DECREASING: "Decreasing",
}


__all__ = ["Mode"]
