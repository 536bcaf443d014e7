"""
mode_counter.runtime.dispatcher — the host entry point for one call.

    dispatch(origin, call, store, sink=..., meter=..., config=...) -> DispatchResult

Order of work for every call:

  1. resolve the call record (name / index / mapping → SetValue | SwitchState | ExecuteAction)
  2. refuse if the event sink is full                  → EXHAUSTS_RESOURCES (nothing charged)
  3. declare its weight and debit the meter           → EXHAUSTS_RESOURCES if it does not fit
  4. check the origin is signed                        → BAD_ORIGIN (weight refunded)
  5. run the operation (mode_counter.runtime.module)   → MODULE_ERROR (weight kept)
  6. deposit the returned event in the sink            → SUCCESS

Resource checks (2, 3) come before the origin check, so a root or none origin
against a full sink or an exhausted meter reports EXHAUSTS_RESOURCES.

`dispatch` never raises for these outcomes; they become a failed DispatchResult.
Malformed input (wrong types, u32 overflow, unknown call names) propagates as
TypeError / ValueError before anything is charged.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .. import metrics
from ..config import ModuleConfig, get_config
from ..errors import BadOrigin, ExhaustsResources, ModuleError
from ..state.store import AccountStore
from ..types.result import DispatchResult
from ..types.status import DispatchStatus
from .calls import Call, resolve_call
from .event_sink import EventSink
from .module import apply_call
from .origin import Origin, ensure_signed
from .weights import WeightMeter, declared_weight

log = logging.getLogger(__name__)


def _who_field(origin: Origin) -> Any:
    if not origin.is_signed:
        return None
    who = origin.who
    return "0x" + who.hex() if isinstance(who, bytes) else who


def _record(result: DispatchResult, origin: Origin, cfg: ModuleConfig) -> DispatchResult:
    kind = result.error_kind
    extra = {
        "call": result.call,
        "who": _who_field(origin),
        "status": result.status.value,
        "error": kind.value if kind is not None else (result.error.code if result.error else None),
        "weight": result.weight,
    }
    if result.is_success:
        log.debug("call applied", extra=extra)
    else:
        log.info("call rejected", extra=extra)

    if cfg.features.metrics:
        metrics.observe_call(
            call=result.call,
            status=result.status.value,
            weight=result.weight,
            error_kind=kind.value if kind is not None else None,
        )
    return result


def dispatch(
    origin: Origin,
    call: Union[Call, Mapping[str, Any]],
    store: AccountStore,
    *,
    sink: Optional[EventSink] = None,
    meter: Optional[WeightMeter] = None,
    config: Optional[ModuleConfig] = None,
) -> DispatchResult:
    """
    Dispatch one call against `store`.

    Parameters
    ----------
    origin : Origin
        Authenticated origin from the host (must be signed to succeed).
    call : Call | Mapping
        Call record, or a mapping accepted by `resolve_call`.
    store : AccountStore
        The ValueOf map; only written on SUCCESS.
    sink : EventSink | None
        Receives the event on SUCCESS. A private sink is used if omitted.
    meter : WeightMeter | None
        Block weight budget. A fresh meter at `limits.max_block_weight` if omitted.
    config : ModuleConfig | None
        Weights, arithmetic policy and feature flags (default: `get_config()`).
    """
    cfg = config or get_config()
    if not isinstance(origin, Origin):
        raise TypeError("origin must be an Origin")
    record = resolve_call(call)
    sink = sink if sink is not None else EventSink(max_events=cfg.limits.max_events)
    meter = meter if meter is not None else WeightMeter(cfg.limits.max_block_weight)

    weight = declared_weight(record.name, cfg.weights)

    if sink.is_full:
        err = ExhaustsResources("event sink full", weight=weight, remaining=meter.remaining)
        return _record(
            DispatchResult.failed(record.name, DispatchStatus.EXHAUSTS_RESOURCES, err),
            origin,
            cfg,
        )

    snap = meter.snapshot()
    try:
        meter.debit(weight, reason=record.name)
    except ExhaustsResources as err:
        return _record(
            DispatchResult.failed(record.name, DispatchStatus.EXHAUSTS_RESOURCES, err),
            origin,
            cfg,
        )

    try:
        who = ensure_signed(origin)
    except BadOrigin as err:
        meter.restore(snap)
        return _record(
            DispatchResult.failed(record.name, DispatchStatus.BAD_ORIGIN, err),
            origin,
            cfg,
        )

    try:
        event = apply_call(store, who, record, policy=cfg.arithmetic)
    except ModuleError as err:
        return _record(
            DispatchResult.failed(record.name, DispatchStatus.MODULE_ERROR, err, weight=weight),
            origin,
            cfg,
        )

    sink.deposit(event)
    return _record(DispatchResult.ok(record.name, event, weight=weight), origin, cfg)


__all__ = ["dispatch"]
