"""
mode_counter.logging — structured logs for dispatch and batch runs.

Everything logs through stdlib `logging` under the `mode_counter` logger tree
(the dispatcher uses `mode_counter.runtime.dispatcher`). This module adds:

- a JSON formatter (one object per line) and a compact text formatter, with
  ANSI colors only when the stream is a TTY and NO_COLOR is unset
- context fields held in a `contextvars.ContextVar` (trace_id, batch, index)
  that are merged into every record logged inside the scope
- `extra={...}` fields rendered as top-level keys; bytes become hex, enums
  their value, dataclasses their `to_dict()`

    from mode_counter import logging as mlog

    mlog.configure(json=False, level="INFO")
    with mlog.trace_scope():
        mlog.bind(batch="calls.json")
        mlog.get_logger(__name__).info("applying", extra={"count": 3})

Environment: MODE_COUNTER_LOG_FORMAT=json|text, MODE_COUNTER_LOG_LEVEL=<level>
(read by `configure_from_env`; the format also by `configure(json=None)`).
"""

from __future__ import annotations

import datetime as _dt
import enum
import io
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, Union

ROOT_LOGGER = "mode_counter"

# ---------------------------------------------------------------------------
# Context fields
# ---------------------------------------------------------------------------

_CTX: ContextVar[Dict[str, Any]] = ContextVar("mode_counter_log_ctx", default={})

# Shown inline by TextFormatter, in this order.
DEFAULT_CONTEXT_KEYS = ("trace_id", "batch", "index")


def context() -> Dict[str, Any]:
    return dict(_CTX.get())


def bind(**fields: Any) -> None:
    _CTX.set({**_CTX.get(), **{k: _plain(v) for k, v in fields.items()}})


def unbind(*keys: str) -> None:
    _CTX.set({k: v for k, v in _CTX.get().items() if k not in keys})


def clear_context() -> None:
    _CTX.set({})


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """Bind a trace_id (fresh unless given) for the scope; the previous context is restored on exit."""
    token = _CTX.set({**_CTX.get(), "trace_id": trace_id or short_uuid()})
    try:
        yield _CTX.get()["trace_id"]
    finally:
        _CTX.reset(token)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came in through `extra`.
_STD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime", "taskName"}


def _plain(v: Any) -> Any:
    """JSON-friendly form of a log field."""
    if isinstance(v, enum.Enum):
        return v.value
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v).hex()
    if is_dataclass(v) and not isinstance(v, type):
        to_dict = getattr(v, "to_dict", None)
        return to_dict() if callable(to_dict) else asdict(v)
    return str(v)


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _STD_ATTRS and not k.startswith("_")}


def _now() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _traceback(record: logging.LogRecord) -> str:
    return "".join(traceback.format_exception(*record.exc_info)).rstrip() if record.exc_info else ""


class JSONFormatter(logging.Formatter):
    """{"ts", "level", "logger", "msg", "pid", <context>, <extras>, ["err"]}"""

    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "ts": _now(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "pid": os.getpid(),
        }
        out.update(_CTX.get())
        for k, v in _extras(record).items():
            out.setdefault(k, _plain(v))
        err = _traceback(record)
        if err:
            out["err"] = err
        return json.dumps(out, default=_plain, separators=(",", ":"))


_COLORS = {
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[35m",
}
_RESET = "\x1b[0m"


def _is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    if not callable(isatty) or os.environ.get("NO_COLOR") is not None:
        return False
    try:
        return bool(isatty())
    except ValueError:  # closed stream
        return False


class TextFormatter(logging.Formatter):
    """
    `<ts> | LEVEL | logger | trace_id=.. call=.. status=.. | message`
    """

    def __init__(self, stream: Any = None) -> None:
        super().__init__()
        self._color = stream is not None and _is_tty(stream)

    def format(self, record: logging.LogRecord) -> str:
        ctx = _CTX.get()
        fields = [f"{k}={ctx[k]}" for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None]
        fields += [f"{k}={_plain(v)}" for k, v in _extras(record).items() if k not in ctx]

        level = f"{record.levelname:<5}"
        if self._color:
            level = f"{_COLORS.get(record.levelno, '')}{level}{_RESET}"
        parts = [_now(), level, record.name]
        if fields:
            parts.append(" ".join(fields))
        parts.append(record.getMessage())

        line = " | ".join(parts)
        err = _traceback(record)
        return f"{line}\n{err}" if err else line


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_LEVELS = {name: getattr(logging, name) for name in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")}


def _coerce_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[level.strip().upper()]
    except KeyError:
        raise ValueError(f"unknown log level: {level!r}") from None


def _format_from_env() -> Optional[bool]:
    fmt = os.environ.get("MODE_COUNTER_LOG_FORMAT", "").strip().lower()
    return {"json": True, "text": False}.get(fmt)


def configure(
    *,
    json: Optional[bool] = None,
    level: Union[str, int] = "INFO",
    stream: Optional[io.TextIOBase] = None,
    file_path: Optional[Union[Path, str]] = None,
) -> logging.Logger:
    """
    (Re)configure the `mode_counter` logger and return it.

    Existing handlers are closed and replaced; records stop propagating to the
    root logger so a host's own logging setup does not print them twice.

    json:      JSON lines if True, text if False; None picks MODE_COUNTER_LOG_FORMAT,
               else text on a TTY and JSON otherwise
    level:     name or number; unknown names raise ValueError
    stream:    console stream (default: sys.stderr at call time)
    file_path: optional extra file receiving JSON lines
    """
    lvl = _coerce_level(level)
    stream = stream if stream is not None else sys.stderr
    if json is None:
        json = _format_from_env()
    if json is None:
        json = not _is_tty(stream)

    logger = logging.getLogger(ROOT_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(lvl)

    handlers = [(logging.StreamHandler(stream), JSONFormatter() if json else TextFormatter(stream))]
    if file_path:
        path = Path(file_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append((logging.FileHandler(path, encoding="utf-8"), JSONFormatter()))
    for handler, fmt in handlers:
        handler.setLevel(lvl)
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def configure_from_env(*, level: Optional[Union[str, int]] = None, stream: Optional[io.TextIOBase] = None) -> logging.Logger:
    """`configure` driven by MODE_COUNTER_LOG_FORMAT / MODE_COUNTER_LOG_LEVEL; an explicit `level` wins."""
    if level is None:
        level = os.environ.get("MODE_COUNTER_LOG_LEVEL", "INFO")
    return configure(json=_format_from_env(), level=level, stream=stream)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or ROOT_LOGGER)


class ContextAdapter(logging.LoggerAdapter):
    """Adds constant fields to every record; call-site `extra` wins on conflicts."""

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def with_fields(logger: logging.Logger, **fields: Any) -> ContextAdapter:
    return ContextAdapter(logger, {k: _plain(v) for k, v in fields.items()})


__all__ = [
    "ROOT_LOGGER",
    "configure",
    "configure_from_env",
    "get_logger",
    "with_fields",
    "ContextAdapter",
    "JSONFormatter",
    "TextFormatter",
    "bind",
    "unbind",
    "clear_context",
    "context",
    "trace_scope",
    "short_uuid",
]
