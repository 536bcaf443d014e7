"""
mode_counter.state — the single persisted mapping (`ValueOf`) and its backends.
"""

from __future__ import annotations

from .store import (EMPTY_STATE_ROOT, AccountStore, InMemoryAccountStore,
                    KVAccountStore, compute_state_root)

__all__ = [
    "AccountStore",
    "InMemoryAccountStore",
    "KVAccountStore",
    "compute_state_root",
    "EMPTY_STATE_ROOT",
]
