from __future__ import annotations

"""
mode_counter.db — open the byte store behind a persistent account store.

`open_kv(uri)` understands:

    sqlite:///counter.db        file relative to the working directory
    sqlite:////var/lib/mc.db    absolute file (four slashes)
    sqlite:///:memory:          private in-memory database
    memory://                   same as sqlite:///:memory: (the config default)
    counter.db                  bare path ending in .db

Anything else raises ValueError, so a typo in MODE_COUNTER_DB or --db fails
loudly instead of silently creating a stray file.

>>> kv = open_kv("memory://")
>>> kv.put(b"k", b"v"); kv.get(b"k")
b'v'
"""

from typing import Tuple

from .kv import KV, Batch, ReadOnlyKV, count_prefix, delete_many, put_many
from .sqlite import SQLiteKV, open_sqlite_kv

_MEMORY = ":memory:"


def _parse_uri(uri: str) -> Tuple[str, str]:
    """-> (backend, target); backend is "memory" or "sqlite"."""
    u = (uri or "").strip()
    if u == "memory://" or u == "sqlite:///" + _MEMORY:
        return "memory", _MEMORY
    if u.startswith("sqlite:///") and len(u) > len("sqlite:///"):
        return "sqlite", u[len("sqlite:///"):]
    if "://" not in u and u.endswith(".db"):
        return "sqlite", u
    raise ValueError(f"unsupported store URI {uri!r} (expected sqlite:///<path>, memory:// or <file>.db)")


def open_kv(uri: str, create: bool = True) -> SQLiteKV:
    """
    Open the KV named by `uri`.

    Raises ValueError for an unsupported URI and FileNotFoundError when `create`
    is False and the SQLite file does not exist. In-memory stores always start empty.
    """
    backend, target = _parse_uri(uri)
    if backend == "memory":
        return open_sqlite_kv(_MEMORY)
    return open_sqlite_kv(target, create=create)


__all__ = [
    "KV",
    "ReadOnlyKV",
    "Batch",
    "SQLiteKV",
    "open_kv",
    "open_sqlite_kv",
    "put_many",
    "delete_many",
    "count_prefix",
]
