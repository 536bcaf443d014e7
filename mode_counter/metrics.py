"""
mode_counter.metrics — Prometheus counters & histograms for dispatched calls.

Centralized registry: consumers call `get_registry()` / `generate_latest_text()` to
expose metrics (e.g. from a host's /metrics handler). `observe_call(...)` and
`time_batch_apply()` cover the common paths.

Exposed metrics (names are prefixed with `mode_counter_`):
  - calls_total{call,status}     : Counter — dispatched calls by outcome
  - errors_total{kind}           : Counter — module errors by catalogue kind
  - call_weight{call}            : Histogram — weight charged per call
  - batch_apply_seconds          : Histogram — wall time to apply a batch of calls

Labels:
  - call   ∈ {set_value, switch_state, execute_action}
  - status ∈ {success, module_error, bad_origin, exhausts_resources}
  - kind   ∈ ErrorKind values (CannotBeZero, ...)
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

# ------------------------------ configuration -------------------------------

_PREFIX = "mode_counter_"


def _buckets_from_env(name: str, default: Iterable[float]) -> Iterable[float]:
    raw = os.getenv(name)
    if not raw:
        return default
    out = []
    for tok in raw.split(","):
        tok = tok.strip()
        if not tok:
            continue
        try:
            out.append(float(tok))
        except ValueError:
            raise ValueError(f"{name}: bad bucket bound {tok!r}") from None
    return out or default


# Declared weights are 10_000 (set_value), ~1e8 (switch_state) and ~1.25e8 (execute_action).
_CALL_WEIGHT_BUCKETS = tuple(_buckets_from_env(
    "MODE_COUNTER_METRICS_WEIGHT_BUCKETS",
    (1e4, 1e5, 1e6, 1e7, 5e7, 1e8, 1.25e8, 2.5e8, 5e8, 1e9),
))
_BATCH_SECONDS_BUCKETS = tuple(_buckets_from_env(
    "MODE_COUNTER_METRICS_BATCH_SECONDS_BUCKETS",
    (0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
))


# ------------------------------ registry & ctor ------------------------------

_registry: Optional[CollectorRegistry] = None

# Metric singletons (bound during _build_metrics)
CALLS_TOTAL: Counter
ERRORS_TOTAL: Counter
CALL_WEIGHT: Histogram
BATCH_APPLY_SECONDS: Histogram


def _build_metrics(reg: CollectorRegistry) -> None:
    global CALLS_TOTAL, ERRORS_TOTAL, CALL_WEIGHT, BATCH_APPLY_SECONDS

    CALLS_TOTAL = Counter(
        _PREFIX + "calls_total",
        "Dispatched calls (by call and status).",
        labelnames=("call", "status"),
        registry=reg,
    )
    ERRORS_TOTAL = Counter(
        _PREFIX + "errors_total",
        "Module errors (by catalogue kind).",
        labelnames=("kind",),
        registry=reg,
    )
    CALL_WEIGHT = Histogram(
        _PREFIX + "call_weight",
        "Weight charged per call.",
        labelnames=("call",),
        buckets=_CALL_WEIGHT_BUCKETS,
        registry=reg,
    )
    BATCH_APPLY_SECONDS = Histogram(
        _PREFIX + "batch_apply_seconds",
        "Wall time to apply a batch of calls end-to-end.",
        buckets=_BATCH_SECONDS_BUCKETS,
        registry=reg,
    )


def get_registry() -> CollectorRegistry:
    """Return the metrics registry, creating it (and the metrics) on first use."""
    global _registry
    if _registry is None:
        _registry = CollectorRegistry()
        _build_metrics(_registry)
    return _registry


def set_registry(registry: CollectorRegistry) -> None:
    """
    Bind the metrics to `registry` (e.g. an app-global one shared across modules,
    or a fresh one per test). Previously collected values stay in the old registry.
    """
    global _registry
    _registry = registry
    _build_metrics(registry)


# ------------------------------ helpers -------------------------------------


def observe_call(*, call: str, status: str, weight: int, error_kind: Optional[str] = None) -> None:
    """
    Record metrics for a single dispatched call.

    Args:
        call:       canonical call name
        status:     DispatchStatus value ('success', 'module_error', ...)
        weight:     weight charged (0 when the call never ran)
        error_kind: ErrorKind value for module errors
    """
    get_registry()
    CALLS_TOTAL.labels(call=call, status=status).inc()
    if error_kind:
        ERRORS_TOTAL.labels(kind=error_kind).inc()
    if weight > 0:
        CALL_WEIGHT.labels(call=call).observe(float(weight))


@dataclass
class _TimerCtx:
    h: Histogram
    t0: float

    def stop(self) -> float:
        dt = max(0.0, time.perf_counter() - self.t0)
        self.h.observe(dt)
        return dt

    def __enter__(self) -> "_TimerCtx":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def time_batch_apply() -> _TimerCtx:
    """
    Context manager timing one batch application.

    Example:
        with time_batch_apply():
            apply_calls(calls, store)
    """
    get_registry()
    return _TimerCtx(h=BATCH_APPLY_SECONDS, t0=time.perf_counter())


# ------------------------------ exposition ----------------------------------


def generate_latest_text() -> bytes:
    """Prometheus exposition format for the current registry."""
    return generate_latest(get_registry())


__all__ = [
    "get_registry",
    "set_registry",
    "generate_latest_text",
    "observe_call",
    "time_batch_apply",
    "CALLS_TOTAL",
    "ERRORS_TOTAL",
    "CALL_WEIGHT",
    "BATCH_APPLY_SECONDS",
]
