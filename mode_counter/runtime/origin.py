"""
mode_counter.runtime.origin — who is calling.

The host authenticates transactions before they reach the module; what arrives
here is an `Origin`:

  - Origin.signed(who) : a transaction signed by account `who`
  - Origin.root()      : the privileged system origin
  - Origin.none()      : an unsigned (inherent) extrinsic

Every call of this module requires a signed origin; `ensure_signed` returns the
signer or raises `BadOrigin`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..errors import BadOrigin
from ..types.state import AccountId, ensure_account_id


class OriginKind(str, Enum):
    SIGNED = "signed"
    ROOT = "root"
    NONE = "none"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class Origin:
    kind: OriginKind
    who: Optional[AccountId] = None

    def __post_init__(self) -> None:
        if self.kind is OriginKind.SIGNED:
            ensure_account_id(self.who)
        elif self.who is not None:
            raise ValueError(f"{self.kind.value} origin carries no account")

    @classmethod
    def signed(cls, who: AccountId) -> "Origin":
        return cls(OriginKind.SIGNED, who)

    @classmethod
    def root(cls) -> "Origin":
        return cls(OriginKind.ROOT)

    @classmethod
    def none(cls) -> "Origin":
        return cls(OriginKind.NONE)

    @classmethod
    def parse(cls, kind: str, who: Any = None) -> "Origin":
        """Build from a CLI/script form, e.g. ("signed", 1) or ("root", None)."""
        k = OriginKind((kind or "signed").strip().lower())
        if k is OriginKind.SIGNED:
            return cls.signed(who)
        return cls(k)

    @property
    def is_signed(self) -> bool:
        return self.kind is OriginKind.SIGNED

    def __str__(self) -> str:  # pragma: no cover - cosmetic
        return f"signed({self.who!r})" if self.is_signed else self.kind.value


def ensure_signed(origin: Origin) -> AccountId:
    """Return the signer of `origin`, or raise BadOrigin."""
    if not isinstance(origin, Origin):
        raise TypeError("origin must be an Origin")
    if not origin.is_signed:
        raise BadOrigin(origin=origin.kind.value)
    return origin.who  # type: ignore[return-value]


__all__ = ["OriginKind", "Origin", "ensure_signed"]
