"""
mode_counter.config — runtime configuration for the mode counter module.

This module centralizes knobs for:
  • Call weights (base cost and DB read/write costs used to declare weights)
  • Limits (block weight budget, events kept per sink)
  • Execution arithmetic at the u32 edges (wrapping / checked / saturating)
  • Feature flags (metrics) and the default store URI

Configuration may be provided via environment variables. Safe defaults are chosen so a
local developer run works out of the box.

Environment variables (all optional):
  MODE_COUNTER_BASE_WEIGHT         -> integer (default: 10000)
  MODE_COUNTER_DB_READ_WEIGHT      -> integer (default: 25000000)
  MODE_COUNTER_DB_WRITE_WEIGHT     -> integer (default: 100000000)
  MODE_COUNTER_MAX_BLOCK_WEIGHT    -> integer, accepts "_" separators (default: 2000000000000)
  MODE_COUNTER_MAX_EVENTS          -> integer (default: 10000)
  MODE_COUNTER_ARITHMETIC          -> wrapping|checked|saturating (default: wrapping)
  MODE_COUNTER_DB                  -> store URI, see mode_counter.db (default: memory://)
  MODE_COUNTER_METRICS             -> 0/1/true/false (default: 1)

Programmatic usage:
    from mode_counter.config import get_config
    cfg = get_config()
    if cfg.features.metrics:
        ...
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, replace
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

from .types.arithmetic import ArithmeticPolicy

# ----------------------------- helpers -------------------------------------


_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}


def _bool_env(value: Optional[Union[str, bool]], default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    v = value.strip().lower()
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    if v == "":
        return default
    raise ValueError(f"invalid boolean: {value!r}")


def _int_env(name: str, value: Union[str, int, None], default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    s = str(value).strip().replace("_", "")
    if s == "":
        return default
    try:
        return int(s, 10)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _pick(
    key: str,
    env_name: str,
    env: Mapping[str, str],
    overrides: Mapping[str, object],
) -> Optional[object]:
    """Explicit override wins over the environment."""
    if key in overrides:
        return overrides[key]
    return env.get(env_name)


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class WeightConfig:
    base: int = 10_000
    db_read: int = 25_000_000
    db_write: int = 100_000_000


@dataclass(frozen=True)
class Limits:
    max_block_weight: int = 2_000_000_000_000
    max_events: int = 10_000


@dataclass(frozen=True)
class FeatureFlags:
    metrics: bool = True


@dataclass(frozen=True)
class ModuleConfig:
    weights: WeightConfig = field(default_factory=WeightConfig)
    limits: Limits = field(default_factory=Limits)
    features: FeatureFlags = field(default_factory=FeatureFlags)
    arithmetic: ArithmeticPolicy = ArithmeticPolicy.WRAPPING
    db_uri: str = "memory://"

    def with_arithmetic(self, policy: Union[str, ArithmeticPolicy]) -> "ModuleConfig":
        if not isinstance(policy, ArithmeticPolicy):
            policy = ArithmeticPolicy.from_str(policy)
        return replace(self, arithmetic=policy)

    def to_dict(self) -> Dict[str, object]:
        d = asdict(self)
        d["arithmetic"] = self.arithmetic.value
        return d


DEFAULT_CONFIG = ModuleConfig()


# ------------------------------ loader --------------------------------------


def _validate(cfg: ModuleConfig) -> ModuleConfig:
    w = cfg.weights
    if w.base < 0 or w.db_read < 0 or w.db_write < 0:
        raise ValueError("weights must be ≥ 0")
    l = cfg.limits
    if l.max_block_weight <= 0:
        raise ValueError("max_block_weight must be > 0")
    if l.max_events <= 0:
        raise ValueError("max_events must be > 0")
    if not cfg.db_uri:
        raise ValueError("db_uri must be non-empty")
    return cfg


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, object]] = None,
) -> ModuleConfig:
    """
    Build a ModuleConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support:
          'base_weight', 'db_read_weight', 'db_write_weight', 'max_block_weight',
          'max_events', 'arithmetic', 'db_uri', 'metrics'

    Raises:
        ValueError on any unparsable or out-of-range value.
    """
    env = os.environ if env is None else env
    ov = dict(overrides or {})

    def num(key: str, env_name: str, default: int) -> int:
        return _int_env(env_name, _pick(key, env_name, env, ov), default)  # type: ignore[arg-type]

    weights = WeightConfig(
        base=num("base_weight", "MODE_COUNTER_BASE_WEIGHT", WeightConfig.base),
        db_read=num("db_read_weight", "MODE_COUNTER_DB_READ_WEIGHT", WeightConfig.db_read),
        db_write=num("db_write_weight", "MODE_COUNTER_DB_WRITE_WEIGHT", WeightConfig.db_write),
    )
    limits = Limits(
        max_block_weight=num("max_block_weight", "MODE_COUNTER_MAX_BLOCK_WEIGHT", Limits.max_block_weight),
        max_events=num("max_events", "MODE_COUNTER_MAX_EVENTS", Limits.max_events),
    )
    features = FeatureFlags(
        metrics=_bool_env(_pick("metrics", "MODE_COUNTER_METRICS", env, ov), True),  # type: ignore[arg-type]
    )

    raw_policy = _pick("arithmetic", "MODE_COUNTER_ARITHMETIC", env, ov)
    if isinstance(raw_policy, ArithmeticPolicy):
        policy = raw_policy
    elif raw_policy is None or str(raw_policy).strip() == "":
        policy = ArithmeticPolicy.WRAPPING
    else:
        policy = ArithmeticPolicy.from_str(str(raw_policy))

    db_uri = str(_pick("db_uri", "MODE_COUNTER_DB", env, ov) or "memory://").strip()

    return _validate(
        ModuleConfig(
            weights=weights,
            limits=limits,
            features=features,
            arithmetic=policy,
            db_uri=db_uri,
        )
    )


@lru_cache(maxsize=1)
def get_config() -> ModuleConfig:
    """
    Cached global config. Call `get_config.cache_clear()` after changing the environment.
    """
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def summary(cfg: Optional[ModuleConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the most important knobs.
    """
    cfg = cfg or get_config()
    w = cfg.weights
    l = cfg.limits
    return (
        "mode_counter{"
        f"base={w.base}, read={w.db_read}, write={w.db_write}, "
        f"block={l.max_block_weight}, events={l.max_events}, "
        f"arith={cfg.arithmetic.value}, metrics={int(cfg.features.metrics)}, db={cfg.db_uri}"
        "}"
    )


__all__ = [
    "WeightConfig",
    "Limits",
    "FeatureFlags",
    "ModuleConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "get_config",
    "summary",
]
