from __future__ import annotations

"""
mode_counter.db.sqlite — the SQLite backend for persistent account stores.

One table holds every entry:

    kv(k BLOB PRIMARY KEY, v BLOB NOT NULL)

Keys compare as raw bytes (memcmp), so `ORDER BY k` is exactly the storage-key
order `KVAccountStore.items()` promises. A prefix scan is the half-open range
[prefix, next_prefix(prefix)) with a `substr` guard for the unbounded case.

The connection runs in autocommit mode; `batch()` opens an explicit
`BEGIN IMMEDIATE` transaction so a group of writes lands atomically (and takes
the write lock up front instead of failing at COMMIT time).
"""

import os
import sqlite3
from typing import Dict, Iterator, List, Optional, Union

from .kv import KV, Batch, Pair

DEFAULT_PRAGMAS: Dict[str, str] = {
    "journal_mode": "WAL",
    "synchronous": "NORMAL",
    "temp_store": "MEMORY",
    "foreign_keys": "OFF",
}

_SCHEMA = "CREATE TABLE IF NOT EXISTS kv (k BLOB PRIMARY KEY, v BLOB NOT NULL)"
_GET = "SELECT v FROM kv WHERE k = ?"
_HAS = "SELECT 1 FROM kv WHERE k = ? LIMIT 1"
_UPSERT = "INSERT INTO kv(k, v) VALUES(?, ?) ON CONFLICT(k) DO UPDATE SET v = excluded.v"
_DELETE = "DELETE FROM kv WHERE k = ?"
_SCAN_RANGE = "SELECT k, v FROM kv WHERE k >= ? AND k < ? ORDER BY k"
_SCAN_OPEN = "SELECT k, v FROM kv WHERE substr(k, 1, ?) = ? ORDER BY k"

PathLike = Union[str, "os.PathLike[str]"]


def _prefix_hi(prefix: bytes) -> Optional[bytes]:
    """
    Exclusive upper bound of the keys starting with `prefix`: drop trailing 0xFF
    bytes and increment the last remaining one. None if no such bound exists.

        b"ab\\x01" -> b"ab\\x02"    b"a\\xff" -> b"b"    b"\\xff\\xff" -> None
    """
    stripped = prefix.rstrip(b"\xff")
    if not stripped:
        return None
    return stripped[:-1] + bytes([stripped[-1] + 1])


class SQLiteBatch(Batch):
    """One `BEGIN IMMEDIATE ... COMMIT` transaction; nested batches are refused."""

    __slots__ = ("_conn", "_open")

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._open = False

    def _require_open(self) -> None:
        if not self._open:
            raise RuntimeError("batch not open")

    def __enter__(self) -> "SQLiteBatch":
        if self._open:
            raise RuntimeError("batch already open")
        self._conn.execute("BEGIN IMMEDIATE")
        self._open = True
        return self

    def put(self, key: bytes, value: bytes) -> None:
        self._require_open()
        self._conn.execute(_UPSERT, (bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        self._require_open()
        self._conn.execute(_DELETE, (bytes(key),))

    def commit(self) -> None:
        if self._open:
            self._open = False
            self._conn.execute("COMMIT")

    def rollback(self) -> None:
        if self._open:
            self._open = False
            self._conn.execute("ROLLBACK")

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return None


class SQLiteKV(KV):
    """KV over one SQLite connection. Build with `open_sqlite_kv(path)`."""

    __slots__ = ("_conn", "path")

    def __init__(self, conn: sqlite3.Connection, *, path: str = ":memory:") -> None:
        self._conn = conn
        self.path = path

    def _one(self, sql: str, key: bytes) -> Optional[tuple]:
        cur = self._conn.execute(sql, (bytes(key),))
        try:
            return cur.fetchone()
        finally:
            cur.close()

    def get(self, key: bytes) -> Optional[bytes]:
        row = self._one(_GET, key)
        return None if row is None else bytes(row[0])

    def has(self, key: bytes) -> bool:
        return self._one(_HAS, key) is not None

    def iter_prefix(self, prefix: bytes) -> Iterator[Pair]:
        prefix = bytes(prefix)
        hi = _prefix_hi(prefix)
        if hi is None:
            cur = self._conn.execute(_SCAN_OPEN, (len(prefix), prefix))
        else:
            cur = self._conn.execute(_SCAN_RANGE, (prefix, hi))
        # Rows are fetched up front so callers can write while iterating.
        try:
            rows: List[tuple] = cur.fetchall()
        finally:
            cur.close()
        for k, v in rows:
            yield bytes(k), bytes(v)

    def put(self, key: bytes, value: bytes) -> None:
        self._conn.execute(_UPSERT, (bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        self._conn.execute(_DELETE, (bytes(key),))

    def batch(self) -> Batch:
        return SQLiteBatch(self._conn)

    def close(self) -> None:
        self._conn.close()

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"SQLiteKV(path={self.path!r})"


def open_sqlite_kv(path: PathLike, *, pragmas: Optional[Dict[str, str]] = None, create: bool = True) -> SQLiteKV:
    """
    Open the store at `path` (":memory:" for a private in-memory database).

    Raises FileNotFoundError when `create` is False and the file does not exist.
    """
    target = os.fspath(path)
    if target != ":memory:" and not create and not os.path.exists(target):
        raise FileNotFoundError(f"no SQLite store at {target}")

    # isolation_level=None: autocommit; batches issue BEGIN themselves.
    conn = sqlite3.connect(target, isolation_level=None, check_same_thread=False)
    for name, value in {**DEFAULT_PRAGMAS, **(pragmas or {})}.items():
        conn.execute(f"PRAGMA {name}={value}")
    conn.execute(_SCHEMA)
    return SQLiteKV(conn, path=target)


__all__ = ["SQLiteKV", "SQLiteBatch", "open_sqlite_kv", "DEFAULT_PRAGMAS"]
