"""
mode_counter — per-account value/mode state machine for a deterministic ledger host.

Each account holds one u32 value and one of three modes (Idle, Increasing,
Decreasing). Three calls act on it: ``set_value``, ``switch_state`` and
``execute_action``. The host supplies an authenticated origin, an event sink
and a weight meter; this package supplies the state transitions.

This package exposes only lightweight metadata at import time. Runtime, storage
and CLI modules should be imported explicitly from their subpackages.
"""

from .version import __version__, git_describe

__all__ = ["__version__", "git_describe"]
