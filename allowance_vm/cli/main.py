from __future__ import annotations

"""
allowance_vm.cli.main
---------------------

Replay allowance-vault scenarios and inspect the VM configuration.

Examples
--------
# Run a scenario, human-readable table; exit code 1 on any mismatch
allowance-vm run scenarios/daily_allowance.json

# Same, machine-readable
allowance-vm run scenarios/daily_allowance.json --json

# Effective configuration (env vars applied)
allowance-vm config
"""

import json
import logging
from pathlib import Path
from typing import Any, List

import typer

from ..config import load_config
from ..runtime.error import VmError
from ..version import __version__
from .scenario import ScenarioError, ScenarioReport, load_scenario, run_scenario

app = typer.Typer(
    name="allowance-vm",
    add_completion=False,
    no_args_is_help=True,
    help="Deterministic host for the allowance vault: replay scenarios, inspect config.",
)

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


# -------------------- utils --------------------

def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _pad(s: str, n: int) -> str:
    if len(s) <= n:
        return s + " " * (n - len(s))
    return s[: n - 1] + "…"


def _fmt(v: Any) -> str:
    if v is None:
        return "-"
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()[:8] + "…"
    return str(v)


def _print_report(report: ScenarioReport) -> None:
    cols = [("#", 4), ("t", 8), ("sender", 10), ("call", 24), ("outcome", 32), ("return", 12), ("", 4)]
    typer.echo(" ".join(_pad(name, w) for name, w in cols))
    typer.echo("-" * (sum(w for _, w in cols) + len(cols) - 1))
    for s in report.steps:
        row: List[str] = [
            str(s.index),
            str(s.at),
            s.sender,
            s.call,
            s.outcome,
            _fmt(s.return_value),
            "ok" if s.matched else "FAIL",
        ]
        typer.echo(" ".join(_pad(v, w) for v, (_, w) in zip(row, cols)))
        if not s.matched:
            want = s.expect if s.expected_return is None else f"{s.expect} returning {s.expected_return}"
            typer.echo(f"     expected {want}")
    passed = sum(1 for s in report.steps if s.matched)
    typer.echo("")
    typer.echo(f"{passed}/{len(report.steps)} steps matched")


# -------------------- commands --------------------

@app.command("run")
def cmd_run(
    scenario: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Scenario JSON file."),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
    log_level: str = typer.Option("WARNING", "--log-level", help=f"One of {', '.join(_LEVELS)}."),
) -> None:
    """Replay a scenario; exit 1 if any step's outcome differs from its expectation."""
    _setup_logging(log_level)
    try:
        report = run_scenario(load_scenario(scenario))
    except ScenarioError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(2)
    except VmError as e:
        typer.echo(f"error: scenario setup failed: {e}", err=True)
        raise typer.Exit(2)

    if json_out:
        typer.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        _print_report(report)
    if not report.ok:
        raise typer.Exit(1)


@app.command("config")
def cmd_config() -> None:
    """Print the effective VM configuration as JSON."""
    typer.echo(json.dumps(load_config().as_dict(), indent=2, sort_keys=True))


@app.command("version")
def cmd_version() -> None:
    typer.echo(__version__)


def main() -> None:  # pragma: no cover
    app()


__all__ = ["app", "main"]
