"""
mode_counter.runtime.weights — declared call weights and the block WeightMeter.

Every call has a weight that is known *before* it runs ("declare a cost, then
execute"):

    set_value      = base
    switch_state   = base + writes(1)
    execute_action = base + reads_writes(1, 1)

with `base` and the per-access `DbWeight` taken from `mode_counter.config`.

The WeightMeter tracks the remaining budget of a block. The dispatcher debits
the declared weight before executing; a call that does not fit fails with
`ExhaustsResources` and leaves the meter untouched. Weight is refunded only for
a rejected origin; a call that fails with a module error has still paid.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional

from ..config import DEFAULT_CONFIG, WeightConfig
from ..errors import ExhaustsResources


@dataclass(frozen=True)
class DbWeight:
    """Cost of one storage read / write."""
    read: int
    write: int

    def reads(self, n: int) -> int:
        return self.read * n

    def writes(self, n: int) -> int:
        return self.write * n

    def reads_writes(self, r: int, w: int) -> int:
        return self.read * r + self.write * w

    @classmethod
    def from_config(cls, weights: WeightConfig) -> "DbWeight":
        return cls(read=weights.db_read, write=weights.db_write)


def set_value_weight(weights: WeightConfig = DEFAULT_CONFIG.weights) -> int:
    return weights.base


def switch_state_weight(weights: WeightConfig = DEFAULT_CONFIG.weights) -> int:
    return weights.base + DbWeight.from_config(weights).writes(1)


def execute_action_weight(weights: WeightConfig = DEFAULT_CONFIG.weights) -> int:
    return weights.base + DbWeight.from_config(weights).reads_writes(1, 1)


_WEIGHT_FNS = {
    "set_value": set_value_weight,
    "switch_state": switch_state_weight,
    "execute_action": execute_action_weight,
}


def declared_weight(call_name: str, weights: WeightConfig = DEFAULT_CONFIG.weights) -> int:
    """Declared weight of a call by canonical name."""
    try:
        fn = _WEIGHT_FNS[call_name]
    except KeyError:
        raise ValueError(f"unknown call: {call_name!r}") from None
    return fn(weights)


# --------------------------------------------------------------------------------------
# WeightMeter
# --------------------------------------------------------------------------------------


class WeightSnapshot(NamedTuple):
    consumed: int


class WeightMeter:
    """
    Deterministic block weight meter.

    Parameters
    ----------
    limit : int
        Total weight available to the block.
    """

    __slots__ = ("_limit", "_consumed")

    def __init__(self, limit: int = DEFAULT_CONFIG.limits.max_block_weight) -> None:
        lim = int(limit)
        if lim < 0:
            raise ValueError("weight limit must be non-negative")
        self._limit = lim
        self._consumed = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def consumed(self) -> int:
        return self._consumed

    @property
    def remaining(self) -> int:
        return self._limit - self._consumed

    def can_consume(self, amount: int) -> bool:
        return 0 <= amount <= self.remaining

    def require(self, amount: int, *, reason: Optional[str] = None) -> None:
        """Raise ExhaustsResources unless `amount` fits. Does not consume."""
        amt = int(amount)
        if amt < 0:
            raise ValueError("weight must be non-negative")
        if amt > self.remaining:
            msg = "exhausts resources"
            if reason:
                msg = f"{msg}: {reason}"
            raise ExhaustsResources(msg, weight=amt, remaining=self.remaining)

    def debit(self, amount: int, *, reason: Optional[str] = None) -> None:
        """Consume `amount`, raising ExhaustsResources (no mutation) if it does not fit."""
        self.require(amount, reason=reason)
        self._consumed += int(amount)

    def try_debit(self, amount: int) -> bool:
        if not self.can_consume(int(amount)):
            return False
        self._consumed += int(amount)
        return True

    def snapshot(self) -> WeightSnapshot:
        return WeightSnapshot(self._consumed)

    def restore(self, snap: WeightSnapshot) -> None:
        if not 0 <= snap.consumed <= self._limit:
            raise ValueError("snapshot out of range")
        self._consumed = int(snap.consumed)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"WeightMeter(limit={self._limit}, consumed={self._consumed}, remaining={self.remaining})"


__all__ = [
    "DbWeight",
    "set_value_weight",
    "switch_state_weight",
    "execute_action_weight",
    "declared_weight",
    "WeightMeter",
    "WeightSnapshot",
]
