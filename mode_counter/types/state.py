"""
mode_counter.types.state — the persisted per-account record.

An AccountState holds two fields:

- value: u32 integer driven by `execute_action`
- mode:  Mode deciding the direction of the next `execute_action`

The record itself only enforces the u32 range (0..=u32::MAX). The stronger
"value >= 1" rule is a property of the accepted call sequence (set_value refuses 0,
switch_state refuses to enter Decreasing at 1), not of the record: under the
default wrapping arithmetic repeated execution may legitimately store 0.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Union

from .mode import Mode

U32_MAX: int = (1 << 32) - 1
"""Maximum 32-bit unsigned integer."""

U64_MAX: int = (1 << 64) - 1

# Opaque, hashable, comparable caller identity. ints (u64), bytes and strs are
# supported by the storage codec (see mode_counter.encoding.encode_account).
AccountId = Union[int, bytes, str]


def ensure_u32(name: str, n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"{name} must be int")
    if not 0 <= n <= U32_MAX:
        raise ValueError(f"{name} out of u32 range: {n}")
    return n


def ensure_account_id(who: Any) -> AccountId:
    if isinstance(who, bool) or not isinstance(who, (int, bytes, str)):
        raise TypeError(f"account id must be int, bytes or str, got {type(who).__name__}")
    if isinstance(who, int) and not 0 <= who <= U64_MAX:
        raise ValueError(f"integer account id out of u64 range: {who}")
    return who


@dataclass(frozen=True)
class AccountState:
    """
    Immutable (value, mode) pair stored per account.

    Use `with_value` / `with_mode` to derive the next record.
    """

    value: int
    mode: Mode = Mode.IDLE

    def __post_init__(self) -> None:
        ensure_u32("value", self.value)
        if not isinstance(self.mode, Mode):
            raise TypeError("mode must be a Mode")

    def with_value(self, value: int) -> "AccountState":
        return replace(self, value=value)

    def with_mode(self, mode: Mode) -> "AccountState":
        return replace(self, mode=mode)

    # ----------------------- (de)serialization ----------------------------- #

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "mode": self.mode.label, "mode_code": self.mode.code}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountState":
        try:
            value = int(data["value"])
            raw_mode = data.get("mode_code", data.get("mode", 0))
            mode = Mode.from_str(raw_mode) if isinstance(raw_mode, str) else Mode.from_code(raw_mode)
        except (KeyError, TypeError) as e:
            raise ValueError(f"bad account state dict: {e}") from e
        return cls(value=value, mode=mode)


__all__ = [
    "U32_MAX",
    "U64_MAX",
    "AccountId",
    "AccountState",
    "ensure_u32",
    "ensure_account_id",
]
