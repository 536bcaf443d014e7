from __future__ import annotations

"""
mode_counter.db.kv — byte-level storage protocols behind KVAccountStore.

The account store only needs a handful of primitives from a backend:

  * point reads (`get`, `has`) for one `ValueOf` entry
  * ordered prefix scans (`iter_prefix`) to enumerate every entry and hash the
    state root
  * single-entry writes (`put`, `delete`)
  * an atomic write group (`batch()`), used when several entries change at once
    (e.g. `KVAccountStore.clear`)

A batch commits when its `with` block exits normally and rolls back when an
exception escapes:

>>> with kv.batch() as b:
...     b.put(storage_key(1), encode_state(AccountState(5)))
...     b.delete(storage_key(2))
"""

from typing import Iterable, Iterator, Optional, Protocol, Tuple, runtime_checkable

Pair = Tuple[bytes, bytes]


@runtime_checkable
class ReadOnlyKV(Protocol):
    def get(self, key: bytes) -> Optional[bytes]:
        """Stored bytes for `key`, or None."""
        ...

    def has(self, key: bytes) -> bool: ...

    def iter_prefix(self, prefix: bytes) -> Iterator[Pair]:
        """(key, value) pairs whose key starts with `prefix`, ordered by key bytes."""
        ...

    def close(self) -> None: ...


@runtime_checkable
class Batch(Protocol):
    """Atomic write group; a context manager."""

    def put(self, key: bytes, value: bytes) -> None: ...
    def delete(self, key: bytes) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def __enter__(self) -> "Batch": ...
    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...


@runtime_checkable
class KV(ReadOnlyKV, Protocol):
    def put(self, key: bytes, value: bytes) -> None:
        """Insert or overwrite."""
        ...

    def delete(self, key: bytes) -> None:
        """Remove `key`; a missing key is not an error."""
        ...

    def batch(self) -> Batch: ...


# ---- helpers ----


def put_many(kv: KV, items: Iterable[Pair]) -> None:
    with kv.batch() as b:
        for k, v in items:
            b.put(k, v)


def delete_many(kv: KV, keys: Iterable[bytes]) -> None:
    """Delete `keys` in one batch. `keys` is materialized first so it may come from a scan of `kv`."""
    pending = list(keys)
    with kv.batch() as b:
        for k in pending:
            b.delete(k)


def count_prefix(kv: ReadOnlyKV, prefix: bytes) -> int:
    return sum(1 for _ in kv.iter_prefix(prefix))


__all__ = ["Pair", "ReadOnlyKV", "KV", "Batch", "put_many", "delete_many", "count_prefix"]
