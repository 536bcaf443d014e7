"""
mode_counter.types.arithmetic — u32 step arithmetic used by `execute_action`.

`execute_action` moves the stored value by exactly one. What happens at the
edges of the u32 range is a policy choice:

  wrapping   (default) u32 wrap-around: u32::MAX + 1 -> 0, 0 - 1 -> u32::MAX
  checked    refuse any step whose result would leave [1, u32::MAX]
             (raises OverflowError; the caller maps it to a module error)
  saturating clamp the result into [1, u32::MAX]

Accepted sequences of calls keep the value inside [1, u32::MAX] only as long as
the edge is never crossed by execution itself; the switch-time boundary checks
cover the first step only.
"""

from __future__ import annotations

from enum import Enum

from .mode import Mode
from .state import U32_MAX, ensure_u32

U32_MIN_STORED = 1


class ArithmeticPolicy(str, Enum):
    WRAPPING = "wrapping"
    CHECKED = "checked"
    SATURATING = "saturating"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_str(cls, s: str) -> "ArithmeticPolicy":
        norm = (s or "").strip().lower()
        for p in cls:
            if p.value == norm:
                return p
        raise ValueError(f"unknown arithmetic policy: {s!r} (expected wrapping|checked|saturating)")


# ------------------------------ primitives -----------------------------------


def wrapping_add(a: int, b: int) -> int:
    return (a + b) & U32_MAX


def wrapping_sub(a: int, b: int) -> int:
    return (a - b) & U32_MAX


def checked_inc(v: int) -> int:
    """v + 1, or OverflowError past u32::MAX."""
    if v >= U32_MAX:
        raise OverflowError(f"increment overflow: {v} + 1 > {U32_MAX}")
    return v + 1


def checked_dec(v: int) -> int:
    """v - 1, or OverflowError when the result would drop below 1."""
    if v <= U32_MIN_STORED:
        raise OverflowError(f"decrement underflow: {v} - 1 < {U32_MIN_STORED}")
    return v - 1


def clamp(n: int, lo: int, hi: int) -> int:
    """Clamp integer `n` to the inclusive range [lo, hi]."""
    if lo > hi:
        raise ValueError("clamp: lo must be <= hi")
    return hi if n > hi else lo if n < lo else n


# ------------------------------ step -----------------------------------------


def step(value: int, mode: Mode, policy: ArithmeticPolicy = ArithmeticPolicy.WRAPPING) -> int:
    """
    Value after one `execute_action` in `mode` under `policy`.

    Idle never changes the value. Raises OverflowError only under CHECKED.
    """
    ensure_u32("value", value)
    if mode is Mode.IDLE:
        return value

    delta = 1 if mode is Mode.INCREASING else -1
    if policy is ArithmeticPolicy.WRAPPING:
        return wrapping_add(value, 1) if delta > 0 else wrapping_sub(value, 1)
    if policy is ArithmeticPolicy.CHECKED:
        return checked_inc(value) if delta > 0 else checked_dec(value)
    if policy is ArithmeticPolicy.SATURATING:
        return clamp(value + delta, U32_MIN_STORED, U32_MAX)
    raise ValueError(f"unsupported arithmetic policy: {policy!r}")


__all__ = [
    "ArithmeticPolicy",
    "U32_MIN_STORED",
    "wrapping_add",
    "wrapping_sub",
    "checked_inc",
    "checked_dec",
    "clamp",
    "step",
]
