import pytest

from mode_counter.config import (DEFAULT_CONFIG, ModuleConfig, get_config, load_config,
                                 summary)
from mode_counter.types import ArithmeticPolicy


def test_defaults():
    cfg = load_config(env={})
    assert cfg == DEFAULT_CONFIG
    assert cfg.weights.base == 10_000
    assert cfg.weights.db_read == 25_000_000
    assert cfg.weights.db_write == 100_000_000
    assert cfg.arithmetic is ArithmeticPolicy.WRAPPING
    assert cfg.db_uri == "memory://"
    assert cfg.features.metrics is True


def test_env_values():
    cfg = load_config(
        env={
            "MODE_COUNTER_BASE_WEIGHT": "5",
            "MODE_COUNTER_MAX_BLOCK_WEIGHT": "1_000_000",
            "MODE_COUNTER_MAX_EVENTS": "3",
            "MODE_COUNTER_ARITHMETIC": "Saturating",
            "MODE_COUNTER_DB": " sqlite:///x.db ",
            "MODE_COUNTER_METRICS": "off",
        }
    )
    assert cfg.weights.base == 5
    assert cfg.limits.max_block_weight == 1_000_000
    assert cfg.limits.max_events == 3
    assert cfg.arithmetic is ArithmeticPolicy.SATURATING
    assert cfg.db_uri == "sqlite:///x.db"
    assert cfg.features.metrics is False


def test_overrides_win_over_env():
    cfg = load_config(
        env={"MODE_COUNTER_ARITHMETIC": "checked", "MODE_COUNTER_BASE_WEIGHT": "5"},
        overrides={"arithmetic": ArithmeticPolicy.WRAPPING, "base_weight": 7},
    )
    assert cfg.arithmetic is ArithmeticPolicy.WRAPPING
    assert cfg.weights.base == 7


@pytest.mark.parametrize(
    "env",
    [
        {"MODE_COUNTER_BASE_WEIGHT": "ten"},
        {"MODE_COUNTER_BASE_WEIGHT": "-1"},
        {"MODE_COUNTER_MAX_BLOCK_WEIGHT": "0"},
        {"MODE_COUNTER_MAX_EVENTS": "0"},
        {"MODE_COUNTER_ARITHMETIC": "floating"},
        {"MODE_COUNTER_METRICS": "maybe"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_config(env=env)


def test_get_config_is_cached(monkeypatch):
    first = get_config()
    assert get_config() is first
    monkeypatch.setenv("MODE_COUNTER_ARITHMETIC", "checked")
    assert get_config() is first
    get_config.cache_clear()
    assert get_config().arithmetic is ArithmeticPolicy.CHECKED


def test_with_arithmetic_and_to_dict():
    cfg = DEFAULT_CONFIG.with_arithmetic("checked")
    assert isinstance(cfg, ModuleConfig)
    assert cfg.arithmetic is ArithmeticPolicy.CHECKED
    assert DEFAULT_CONFIG.arithmetic is ArithmeticPolicy.WRAPPING
    d = cfg.to_dict()
    assert d["arithmetic"] == "checked"
    assert d["weights"] == {"base": 10_000, "db_read": 25_000_000, "db_write": 100_000_000}


def test_summary():
    s = summary(load_config(env={}))
    assert s.startswith("mode_counter{")
    assert "arith=wrapping" in s and "db=memory://" in s
