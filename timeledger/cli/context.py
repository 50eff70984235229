"""Shared plumbing for CLI commands: settings, tracker access, error reporting."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.logging import RichHandler

from timeledger.config import LedgerSettings
from timeledger.core.bundle import BundleValidationError
from timeledger.core.ledger_store import LedgerError
from timeledger.core.repository import LedgerWriteError
from timeledger.core.tracker import Tracker

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def get_settings(ctx: typer.Context) -> LedgerSettings:
    settings = ctx.find_object(LedgerSettings)
    if settings is None:
        settings = LedgerSettings()
        ctx.obj = settings
    return settings


def open_tracker(ctx: typer.Context) -> Tracker:
    return Tracker(get_settings(ctx))


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn ledger errors into a red message and exit code 1."""
    try:
        yield
    except (LedgerError, BundleValidationError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    except LedgerWriteError as exc:
        console.print(f"[bold red]Write failed:[/bold red] {exc}")
        console.print("[dim]Nothing was saved; in-memory changes were discarded.[/dim]")
        raise typer.Exit(code=1) from exc
