"""
mode_counter.runtime.event_sink — collect deposited events, compute an events root.

The sink is the host's event channel for one block:
- `deposit(event)` appends an Event (in call order)
- `events` returns a copy of what has been deposited
- `events_root()` is a deterministic Merkle root over the encoded events

Events root
-----------
Leaf:  sha3_256(b"EV\\0" || encode_event(event))
Node:  sha3_256(b"MR\\0" || left || right), duplicating the last node on odd levels
Empty: sha3_256(b"MR\\0EMPTY")

The root is order-sensitive: the same events deposited in a different order give
a different root.
"""

from __future__ import annotations

import hashlib
from typing import Iterable, List, Optional

from ..encoding import encode_event
from ..types.events import Event

_HASH = hashlib.sha3_256


def _h(data: bytes) -> bytes:
    return _HASH(data).digest()


def _hash_event(ev: Event) -> bytes:
    return _h(b"EV\0" + encode_event(ev))


def _merkle_pair(l: bytes, r: bytes) -> bytes:
    return _h(b"MR\0" + l + r)


EMPTY_EVENTS_ROOT = _h(b"MR\0EMPTY")


def events_root(events: Iterable[Event]) -> bytes:
    level = [_hash_event(e) for e in events]
    if not level:
        return EMPTY_EVENTS_ROOT
    while len(level) > 1:
        nxt: List[bytes] = []
        it = iter(level)
        for a in it:
            b = next(it, None)
            if b is None:
                b = a  # duplicate last
            nxt.append(_merkle_pair(a, b))
        level = nxt
    return level[0]


class EventSink:
    """
    Collects Events deposited by successful calls.

    Typical use:
        sink = EventSink()
        sink.deposit(Event.value_set(1))
        root = sink.events_root()

    `max_events` bounds the sink; the dispatcher checks `is_full` before running a
    call so a full sink never loses an event after the store was written.
    Caches the root until the next mutation.
    """

    __slots__ = ["_events", "_max_events", "_cached_root"]

    def __init__(self, max_events: Optional[int] = None) -> None:
        if max_events is not None and max_events <= 0:
            raise ValueError("max_events must be > 0")
        self._events: List[Event] = []
        self._max_events = max_events
        self._cached_root: Optional[bytes] = None

    # ------------------------ mutation ------------------------

    def deposit(self, event: Event) -> int:
        """Append an event. Returns its index."""
        if not isinstance(event, Event):
            raise TypeError("event must be an Event")
        if self.is_full:
            raise OverflowError(f"event sink full ({self._max_events} events)")
        self._events.append(event)
        self._cached_root = None
        return len(self._events) - 1

    def clear(self) -> None:
        self._events.clear()
        self._cached_root = None

    # ------------------------ accessors ------------------------

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    @property
    def max_events(self) -> Optional[int]:
        return self._max_events

    @property
    def is_full(self) -> bool:
        return self._max_events is not None and len(self._events) >= self._max_events

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(list(self._events))

    # ------------------------ digests ------------------------

    def events_root(self) -> bytes:
        """32-byte Merkle root of the deposited events. Cached until next mutation."""
        if self._cached_root is None:
            self._cached_root = events_root(self._events)
        return self._cached_root


__all__ = ["EventSink", "events_root", "EMPTY_EVENTS_ROOT"]
