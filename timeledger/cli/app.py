"""Typer application for the timeledger command; every command is registered here.

Entry point: ``timeledger`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from timeledger.cli.commands.backups import backup_app
from timeledger.cli.commands.labels import label_app
from timeledger.cli.commands.projects import project_app
from timeledger.cli.commands.punch import (
    cycle_cmd,
    note_cmd,
    select_cmd,
    status_cmd,
    toggle_cmd,
)
from timeledger.cli.commands.transfer import csv_cmd, export_cmd, import_cmd
from timeledger.cli.context import configure_logging
from timeledger.config import LedgerSettings

app = typer.Typer(
    name="timeledger",
    help="TimeLedger: punch in and out of projects, one row per day.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Path = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Ledger directory (default: TIMELEDGER_DATA_DIR or ./.timeledger).",
    ),
    locale: str = typer.Option(
        None, "--locale", help="Day label language: 'it' or 'en'."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Build the settings shared by every command."""
    overrides: dict[str, object] = {}
    if data_dir is not None:
        overrides["data_dir"] = data_dir
    if locale is not None:
        overrides["locale"] = locale
    try:
        settings = LedgerSettings(**overrides)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    configure_logging("DEBUG" if verbose or settings.debug else settings.log_level)
    ctx.obj = settings


# Register subcommands
app.command(name="toggle", help="Start or stop the timer of the current project.")(toggle_cmd)
app.command(name="status", help="Show a project's day rows and totals.")(status_cmd)
app.command(name="cycle", help="Switch to the next project.")(cycle_cmd)
app.command(name="select", help="Make a project current.")(select_cmd)
app.command(name="note", help="Annotate a day row.")(note_cmd)
app.command(name="export", help="Export everything to a JSON bundle.")(export_cmd)
app.command(name="import", help="Replace everything from a JSON bundle.")(import_cmd)
app.command(name="csv", help="Export a CSV report.")(csv_cmd)
app.add_typer(project_app, name="project")
app.add_typer(label_app, name="label")
app.add_typer(backup_app, name="backup")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
