"""
passport-assessment — command-line front end for the contract.

Each command is one invocation against a SQLite store (``--db`` /
PASSPORT_DB); without a store path the state lives in memory and is lost when
the command exits.

Examples:
  passport-assessment --db ./state.db instantiate --owner owner
  passport-assessment --db ./state.db set-score someone 50 --sender owner
  passport-assessment --db ./state.db score someone
  passport-assessment --db ./state.db owner
  passport-assessment --db ./state.db info
  passport-assessment schema --out ./schema

Exit codes:
  0 on success, 1 when the contract returns an error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from passport_assessment import logging as plog
from passport_assessment.config import load_config
from passport_assessment.runtime.context import MessageInfo, default_env
from passport_assessment.runtime.engine import Engine
from passport_assessment.runtime.outcome import Outcome
from passport_assessment.runtime.storage_api import open_backend
from passport_assessment.schema import export_schemas
from passport_assessment.version import __version__


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


app = typer.Typer(
    name="passport-assessment",
    help="Owner-gated score registry contract",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.db: Optional[Path] = None
        self.json_output: bool = False


_ctx = GlobalContext()


@app.callback()
def main_callback(
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="SQLite store path (default: in-memory)",
        envvar="PASSPORT_DB",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output JSON instead of human-readable text",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Minimum log level (DEBUG, INFO, WARNING, ERROR)",
        envvar="PASSPORT_LOG_LEVEL",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the package version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Instantiate, execute and query the passport assessment contract.
    """
    cfg = load_config()
    _ctx.db = db if db is not None else cfg.db_path
    _ctx.json_output = json_output
    fmt = cfg.log_format
    plog.configure(json=None if fmt is None else fmt == "json", level=log_level or cfg.log_level)


def _engine() -> Engine:
    return Engine(open_backend(_ctx.db))


def _emit(outcome: Outcome[Any], text: str) -> None:
    """Print the outcome and exit non-zero on error."""
    if _ctx.json_output:
        typer.echo(json.dumps(outcome.to_dict(), indent=2, sort_keys=True))
    elif outcome.ok:
        typer.echo(text)
    else:
        err = outcome.unwrap_err()
        typer.echo(f"Error [{err.code}]: {err.message}")
    if not outcome.ok:
        raise typer.Exit(1)


def _query(msg: Dict[str, Any]) -> Outcome[Dict[str, Any]]:
    """Run a query and decode its JSON payload."""
    with _engine() as engine:
        outcome = engine.query(default_env(), msg)
    if not outcome.ok:
        return Outcome.failure(outcome.unwrap_err())
    return Outcome.success(json.loads(outcome.unwrap()))


@app.command()
def instantiate(
    owner: str = typer.Option(..., "--owner", help="Address allowed to set scores"),
    sender: Optional[str] = typer.Option(None, "--sender", help="Caller address (default: owner)"),
) -> None:
    """Record the contract owner (re-running replaces it)."""
    with _engine() as engine:
        outcome = engine.instantiate(default_env(), MessageInfo(sender=sender or owner), {"owner": owner})
    _emit(outcome, f"Instantiated; owner={owner}")


@app.command("set-score")
def set_score(
    address: str = typer.Argument(..., help="Address to score"),
    score: int = typer.Argument(..., help="Signed 32-bit score"),
    sender: str = typer.Option(..., "--sender", help="Caller address (must be the owner)"),
) -> None:
    """Owner-only: set an address's score."""
    msg = {"set_score": {"address": address, "new_score": score}}
    with _engine() as engine:
        outcome = engine.execute(default_env(), MessageInfo(sender=sender), msg)
    _emit(outcome, f"Score for {address} set to {score}")


@app.command()
def owner() -> None:
    """Show the contract owner."""
    outcome = _query({"get_owner": {}})
    text = outcome.value["owner"] if outcome.ok else ""
    _emit(outcome, text)


@app.command()
def score(address: str = typer.Argument(..., help="Address to look up")) -> None:
    """Show an address's score (0 when never set)."""
    outcome = _query({"get_score": {"address": address}})
    text = str(outcome.value["score"]) if outcome.ok else ""
    _emit(outcome, text)


@app.command()
def info() -> None:
    """Show the contract name/version stored at instantiation."""
    with _engine() as engine:
        outcome = engine.contract_version()
    record = outcome.value if outcome.ok else None
    text = f"{record.contract} {record.version}" if record is not None else "not instantiated"
    if outcome.ok:
        outcome = Outcome.success(record.model_dump() if record is not None else None)
    _emit(outcome, text)


@app.command()
def schema(
    out: Path = typer.Option(Path("schema"), "--out", help="Output directory"),
) -> None:
    """Export JSON Schemas for all messages and responses."""
    paths = export_schemas(out)
    if _ctx.json_output:
        typer.echo(json.dumps([str(p) for p in paths], indent=2))
    else:
        for p in paths:
            typer.echo(str(p))


def main() -> None:
    """Entry point for the passport-assessment CLI."""
    app()


if __name__ == "__main__":
    main()
