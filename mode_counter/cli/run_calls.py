"""
mode_counter.cli.run_calls
--------------------------

Apply a JSON script of calls to a store and print the results.

Script format: a JSON list, one object per call, applied in order:

    [
      {"who": 1, "call": "set_value", "value": 5},
      {"who": 1, "call": "switch_state", "new_int_state": 1},
      {"who": 1, "call": "execute_action"},
      {"who": 2, "call": 2, "origin": "none"}
    ]

`call` is a name, alias or call index; `origin` is signed (default), root or
none. Account ids are JSON integers or strings; a "0x"-prefixed string is taken
as raw bytes.

Examples
--------
# Throwaway in-memory store
python -m mode_counter.cli.run_calls run script.json

# Persistent store, JSON output, checked arithmetic
python -m mode_counter.cli.run_calls run script.json --db sqlite:///counter.db --json --arithmetic checked

# Inspect one account
python -m mode_counter.cli.run_calls show 1 --db sqlite:///counter.db

Exit codes: 0 when the script was applied (rejected calls are results, not
failures), 2 when the script cannot be read or is malformed.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer

from .. import logging as mlog
from ..config import load_config
from ..runtime.calls import resolve_call
from ..runtime.executor import CallItem, apply_calls
from ..runtime.origin import Origin
from ..state.store import KVAccountStore
from ..types.state import AccountId, ensure_account_id
from ..version import __version__, version_metadata

app = typer.Typer(
    name="run-calls",
    add_completion=False,
    no_args_is_help=True,
    help="Apply scripted set_value / switch_state / execute_action calls to a mode counter store.",
)


# -------------------- utils --------------------


class ScriptError(ValueError):
    """The call script cannot be read or does not have the expected shape."""


def _die(msg: str, code: int = 2) -> None:
    typer.echo(msg.rstrip(), err=True)
    raise typer.Exit(code)


def parse_account(raw: Any) -> AccountId:
    """JSON/CLI account id: ints stay ints, "0x.." becomes bytes, other strings stay strings."""
    if isinstance(raw, str):
        s = raw.strip()
        if s.startswith(("0x", "0X")):
            try:
                return bytes.fromhex(s[2:])
            except ValueError:
                raise ScriptError(f"bad hex account id: {raw!r}") from None
        raw = int(s) if s.isdigit() else s
    try:
        return ensure_account_id(raw)
    except (TypeError, ValueError) as e:
        raise ScriptError(str(e)) from None


def load_script(path: Path) -> List[CallItem]:
    """Read and validate the whole script before anything is applied."""
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ScriptError(f"cannot read {path}: {e}") from None
    except json.JSONDecodeError as e:
        raise ScriptError(f"{path}: invalid JSON: {e}") from None
    if not isinstance(doc, list):
        raise ScriptError(f"{path}: expected a JSON list of calls")

    items: List[CallItem] = []
    for i, entry in enumerate(doc):
        if not isinstance(entry, dict):
            raise ScriptError(f"call #{i}: expected an object")
        try:
            origin_kind = str(entry.get("origin", "signed"))
            who = parse_account(entry["who"]) if "who" in entry else None
            origin = Origin.parse(origin_kind, who)
            call = resolve_call(entry)
        except KeyError as e:
            raise ScriptError(f"call #{i}: missing field {e}") from None
        except (TypeError, ValueError) as e:
            raise ScriptError(f"call #{i}: {e}") from None
        items.append((origin, call))
    return items


def _hex(b: Optional[bytes]) -> str:
    return "0x" + b.hex() if b is not None else "-"


def _setup_logging(level: Optional[str]) -> None:
    try:
        mlog.configure_from_env(
            level=level or os.environ.get("MODE_COUNTER_LOG_LEVEL", "WARNING"),
            stream=sys.stderr,
        )
    except ValueError as e:
        _die(str(e))


# -------------------- commands --------------------


@app.command("run")
def run_cmd(
    script: Path = typer.Argument(..., help="JSON list of calls"),
    db: Optional[str] = typer.Option(None, "--db", help="Store URI (default: MODE_COUNTER_DB or memory://)"),
    json_out: bool = typer.Option(False, "--json", help="Print the full batch result as JSON"),
    arithmetic: Optional[str] = typer.Option(
        None, "--arithmetic", help="wrapping | checked | saturating (default: MODE_COUNTER_ARITHMETIC)"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG | INFO | WARNING | ERROR"),
) -> None:
    """
    Apply every call of SCRIPT in order and print one line per call plus the roots.
    """
    _setup_logging(log_level)
    try:
        cfg = load_config()
        if arithmetic:
            cfg = cfg.with_arithmetic(arithmetic)
        items = load_script(script)
    except (ScriptError, ValueError) as e:
        _die(f"[run_calls] {e}")
        return

    try:
        store = KVAccountStore.open(db or cfg.db_uri)
    except ValueError as e:
        _die(f"[run_calls] {e}")
        return

    with store, mlog.trace_scope():
        mlog.bind(batch=script.name)
        batch = apply_calls(items, store, config=cfg)

    if json_out:
        typer.echo(json.dumps(batch.to_dict(), indent=2, sort_keys=True))
        return

    for i, ((origin, _), res) in enumerate(zip(items, batch.results)):
        if res.is_success:
            detail = repr(res.event)
        elif res.error_kind is not None:
            detail = res.error_kind.value
        else:
            detail = res.error.code if res.error is not None else "-"
        typer.echo(f"#{i} {origin} {res.call} -> {res.status.value} {detail} weight={res.weight}")
    typer.echo(
        f"BATCH CALLS={len(batch.results)} OK={batch.counts['success']} "
        f"WEIGHT={batch.total_weight} EVENTS_ROOT={_hex(batch.events_root)} STATE_ROOT={_hex(batch.state_root)}"
    )


@app.command("show")
def show_cmd(
    who: str = typer.Argument(..., help='Account id (integer, string, or "0x.." bytes)'),
    db: str = typer.Option(..., "--db", help="Store URI, e.g. sqlite:///counter.db"),
    json_out: bool = typer.Option(False, "--json", help="Print as JSON"),
) -> None:
    """
    Print the stored (value, mode) entry of one account.
    """
    try:
        account = parse_account(who)
    except ScriptError as e:
        _die(f"[show] {e}")
        return
    try:
        store = KVAccountStore.open(db, create=False)
    except (FileNotFoundError, ValueError) as e:
        _die(f"[show] {e}")
        return
    with store:
        state = store.get(account)

    if json_out:
        typer.echo(json.dumps({"who": who, "state": state.to_dict() if state is not None else None}, sort_keys=True))
    elif state is None:
        typer.echo(f"{who}: uninitialized")
    else:
        typer.echo(f"{who}: value={state.value} mode={state.mode.label}")


@app.command("version")
def version_cmd(json_out: bool = typer.Option(False, "--json", help="Print as JSON")) -> None:
    """Print version metadata."""
    if json_out:
        typer.echo(json.dumps(version_metadata(), sort_keys=True))
    else:
        typer.echo(f"mode-counter {__version__}")


def main(argv: Optional[List[str]] = None) -> int:
    app(args=argv)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
