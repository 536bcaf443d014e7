"""
mode_counter.state.store — the `ValueOf` map: AccountId → AccountState.

Two interchangeable backends implement the same small surface:

- InMemoryAccountStore : dict-backed, for tests and embedding.
- KVAccountStore       : persists each entry under `encoding.storage_key(who)` as
                         the 5-byte record of `encoding.encode_state`, over any
                         `mode_counter.db.KV` backend (SQLite file or memory).

Semantics shared by both
------------------------
- get(who)        -> Optional[AccountState]   (None = uninitialized)
- put(who, state) overwrites unconditionally; single-entry writes are atomic
- entries are never deleted by the module (`clear()` exists for tests/tools)
- items() iterates in storage-key order, so iteration is deterministic even
  when account ids of different Python types are mixed
- state_root() commits to the full content; two stores holding the same
  entries have the same root regardless of backend or insertion order
"""

from __future__ import annotations

import hashlib
from typing import Dict, Iterable, Iterator, Optional, Protocol, Tuple, runtime_checkable

from ..db.kv import KV, count_prefix, delete_many
from ..encoding import (VALUE_OF_PREFIX, account_from_storage_key, decode_state,
                        encode_state, storage_key)
from ..types.state import AccountId, AccountState, ensure_account_id

# Root of an empty store: sha3_256(b"").
EMPTY_STATE_ROOT = hashlib.sha3_256(b"").digest()


def compute_state_root(pairs: Iterable[Tuple[bytes, bytes]]) -> bytes:
    """
    SHA3-256 over the sorted, length-prefixed (key, value) pairs:

        H( ‖ over sorted keys: u32le(len k) ‖ k ‖ u32le(len v) ‖ v )
    """
    h = hashlib.sha3_256()
    for k, v in sorted(pairs):
        h.update(len(k).to_bytes(4, "little"))
        h.update(k)
        h.update(len(v).to_bytes(4, "little"))
        h.update(v)
    return h.digest()


@runtime_checkable
class AccountStore(Protocol):
    """What the operations need from a store."""

    def get(self, who: AccountId) -> Optional[AccountState]: ...
    def put(self, who: AccountId, state: AccountState) -> None: ...


class InMemoryAccountStore:
    """Dict-backed store."""

    def __init__(self, initial: Optional[Dict[AccountId, AccountState]] = None) -> None:
        self._entries: Dict[AccountId, AccountState] = {}
        for who, st in (initial or {}).items():
            self.put(who, st)

    def get(self, who: AccountId) -> Optional[AccountState]:
        return self._entries.get(ensure_account_id(who))

    def put(self, who: AccountId, state: AccountState) -> None:
        if not isinstance(state, AccountState):
            raise TypeError("state must be an AccountState")
        self._entries[ensure_account_id(who)] = state

    def items(self) -> Iterator[Tuple[AccountId, AccountState]]:
        keyed = sorted((storage_key(who), who, st) for who, st in self._entries.items())
        for _, who, st in keyed:
            yield who, st

    def raw_items(self) -> Iterator[Tuple[bytes, bytes]]:
        """Encoded (storage key, record) pairs, the same bytes a KV store would hold."""
        for who, st in self._entries.items():
            yield storage_key(who), encode_state(st)

    def state_root(self) -> bytes:
        return compute_state_root(self.raw_items())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, who: object) -> bool:
        try:
            return ensure_account_id(who) in self._entries
        except (TypeError, ValueError):
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"InMemoryAccountStore(entries={len(self)})"


class KVAccountStore:
    """
    Store over a KV backend. Records are decoded on every read, so a corrupted
    record surfaces as ValueError instead of a silently wrong state.
    """

    def __init__(self, kv: KV) -> None:
        self.kv = kv

    @classmethod
    def open(cls, uri: str, *, create: bool = True) -> "KVAccountStore":
        from ..db import open_kv

        return cls(open_kv(uri, create=create))

    def get(self, who: AccountId) -> Optional[AccountState]:
        raw = self.kv.get(storage_key(who))
        if raw is None:
            return None
        return decode_state(raw)

    def put(self, who: AccountId, state: AccountState) -> None:
        if not isinstance(state, AccountState):
            raise TypeError("state must be an AccountState")
        self.kv.put(storage_key(who), encode_state(state))

    def items(self) -> Iterator[Tuple[AccountId, AccountState]]:
        for k, v in self.kv.iter_prefix(VALUE_OF_PREFIX):
            yield account_from_storage_key(k), decode_state(v)

    def raw_items(self) -> Iterator[Tuple[bytes, bytes]]:
        return self.kv.iter_prefix(VALUE_OF_PREFIX)

    def state_root(self) -> bytes:
        return compute_state_root(self.raw_items())

    def clear(self) -> None:
        delete_many(self.kv, (k for k, _ in self.kv.iter_prefix(VALUE_OF_PREFIX)))

    def close(self) -> None:
        self.kv.close()

    def __contains__(self, who: object) -> bool:
        try:
            key = storage_key(who)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False
        return self.kv.has(key)

    def __len__(self) -> int:
        return count_prefix(self.kv, VALUE_OF_PREFIX)

    def __enter__(self) -> "KVAccountStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"KVAccountStore(kv={self.kv!r})"


__all__ = [
    "AccountStore",
    "InMemoryAccountStore",
    "KVAccountStore",
    "compute_state_root",
    "EMPTY_STATE_ROOT",
]
