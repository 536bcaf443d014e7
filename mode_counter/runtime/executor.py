"""
mode_counter.runtime.executor — apply an ordered batch of calls (a "block").

apply_calls runs `(origin, call)` pairs strictly in order against one store, one
event sink and one weight meter, and aggregates the per-call DispatchResults
into a BatchResult. Failed calls are results, not exceptions: they leave the
store untouched and the batch continues.

The store's `state_root()` (if it has one) is taken after the last call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .. import metrics
from ..config import ModuleConfig, get_config
from ..state.store import AccountStore
from ..types.events import Event
from ..types.result import DispatchResult
from ..types.status import DispatchStatus
from .calls import Call
from .dispatcher import dispatch
from .event_sink import EventSink, events_root
from .origin import Origin
from .weights import WeightMeter

CallItem = Tuple[Origin, Union[Call, Mapping[str, Any]]]


@dataclass
class BatchResult:
    """
    Result of applying all calls of a batch *in order*.
    """
    results: List[DispatchResult]
    total_weight: int
    events: List[Event]
    events_root: bytes
    state_root: Optional[bytes] = None
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def all_succeeded(self) -> bool:
        return all(r.is_success for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total_weight": self.total_weight,
            "events": [e.to_dict() for e in self.events],
            "events_root": "0x" + self.events_root.hex(),
            "state_root": "0x" + self.state_root.hex() if self.state_root is not None else None,
            "counts": dict(self.counts),
        }


def _state_root(store: Any) -> Optional[bytes]:
    fn = getattr(store, "state_root", None)
    return fn() if callable(fn) else None


def apply_calls(
    calls: Iterable[CallItem],
    store: AccountStore,
    *,
    sink: Optional[EventSink] = None,
    meter: Optional[WeightMeter] = None,
    config: Optional[ModuleConfig] = None,
) -> BatchResult:
    """
    Apply a sequence of `(origin, call)` pairs *in order*.

    Events are collected in `sink` (a fresh one unless given); `BatchResult.events`
    holds only the events of this batch.
    """
    cfg = config or get_config()
    sink = sink if sink is not None else EventSink(max_events=cfg.limits.max_events)
    meter = meter if meter is not None else WeightMeter(cfg.limits.max_block_weight)

    first_event = len(sink)
    start_weight = meter.consumed
    results: List[DispatchResult] = []
    counts: Dict[str, int] = {s.value: 0 for s in DispatchStatus}

    def _run() -> None:
        for origin, call in calls:
            res = dispatch(origin, call, store, sink=sink, meter=meter, config=cfg)
            counts[res.status.value] += 1
            results.append(res)

    if cfg.features.metrics:
        with metrics.time_batch_apply():
            _run()
    else:
        _run()

    events = sink.events[first_event:]
    return BatchResult(
        results=results,
        total_weight=meter.consumed - start_weight,
        events=events,
        events_root=events_root(events),
        state_root=_state_root(store),
        counts=counts,
    )


__all__ = ["BatchResult", "CallItem", "apply_calls"]
