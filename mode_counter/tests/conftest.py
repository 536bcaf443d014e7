import logging

import pytest
from prometheus_client import CollectorRegistry

from mode_counter import metrics
from mode_counter.config import load_config
from mode_counter.runtime.event_sink import EventSink
from mode_counter.runtime.weights import WeightMeter
from mode_counter.state.store import InMemoryAccountStore, KVAccountStore


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """configure() replaces handlers on the `mode_counter` logger; undo it after each test."""
    logger = logging.getLogger("mode_counter")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for h in list(logger.handlers):
        if h not in saved[0]:
            logger.removeHandler(h)
            h.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh metrics registry per test."""
    reg = CollectorRegistry()
    metrics.set_registry(reg)
    return reg


@pytest.fixture
def cfg():
    return load_config(env={})


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def kv_store(tmp_path):
    s = KVAccountStore.open(f"sqlite:///{tmp_path / 'counter.db'}")
    yield s
    s.close()


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryAccountStore()
        return
    s = KVAccountStore.open(f"sqlite:///{tmp_path / 'counter.db'}")
    yield s
    s.close()


@pytest.fixture
def sink() -> EventSink:
    return EventSink()


@pytest.fixture
def meter(cfg) -> WeightMeter:
    return WeightMeter(cfg.limits.max_block_weight)
