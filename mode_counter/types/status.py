"""
mode_counter.types.status — canonical dispatch status enum.

DispatchStatus models the *logical* outcome of dispatching one call:
  - SUCCESS            : the call ran, wrote its entry and deposited its event
  - MODULE_ERROR       : a catalogue error (see mode_counter.errors.ErrorKind)
  - BAD_ORIGIN         : the origin was not a signed account
  - EXHAUSTS_RESOURCES : the declared weight did not fit the remaining budget

Only SUCCESS mutates the store.

String forms:
  - str(DispatchStatus.SUCCESS) -> "success"   (good for logs/metrics)
  - DispatchStatus.SUCCESS.code  -> "SUCCESS"  (good for protocols)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class DispatchStatus(str, Enum):
    SUCCESS = "success"
    MODULE_ERROR = "module_error"
    BAD_ORIGIN = "bad_origin"
    EXHAUSTS_RESOURCES = "exhausts_resources"

    @property
    def code(self) -> str:
        """Uppercase code form, e.g., 'SUCCESS' / 'MODULE_ERROR'."""
        return self.value.upper()

    @property
    def is_success(self) -> bool:
        return self is DispatchStatus.SUCCESS

    @property
    def charged(self) -> bool:
        """True iff the declared weight was debited (the call actually ran)."""
        return self in (DispatchStatus.SUCCESS, DispatchStatus.MODULE_ERROR)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_str(cls, s: str, *, default: Optional["DispatchStatus"] = None) -> "DispatchStatus":
        """
        Parse a status from a string (case/format-insensitive).

        Accepted aliases: "ok" → success, "error"/"failed" → module_error,
        "oog"/"out_of_weight" → exhausts_resources.
        """
        norm = (s or "").strip().lower().replace("-", "_")
        if norm in {"success", "ok"}:
            return cls.SUCCESS
        if norm in {"module_error", "error", "failed"}:
            return cls.MODULE_ERROR
        if norm in {"bad_origin", "origin"}:
            return cls.BAD_ORIGIN
        if norm in {"exhausts_resources", "oog", "out_of_weight"}:
            return cls.EXHAUSTS_RESOURCES
        if default is not None:
            return default
        raise ValueError(f"unknown DispatchStatus: {s!r}")


__all__ = ["DispatchStatus"]
