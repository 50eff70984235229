"""``timeledger toggle|status|cycle|select|note`` — the everyday commands.

``toggle`` is the timer button: it starts a new day, stops the running
interval, or starts another one, rolling the month over when needed.
"""

from __future__ import annotations

from datetime import datetime

import typer

from timeledger.cli.context import console, open_tracker, reporting_errors
from timeledger.core.ledger_store import NoActiveProjectError
from timeledger.core.selection import CycleDirection
from timeledger.report.renderer import LedgerRenderer


def _parse_moment(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(
            f"Expected an ISO date-time such as 2026-10-19T09:30, got {value!r}"
        ) from exc


def toggle_cmd(
    ctx: typer.Context,
    project: str = typer.Option(
        None,
        "--project",
        "-p",
        help="Project name or id (default: the current project).",
    ),
    at: str = typer.Option(
        None,
        "--at",
        help="Punch at this ISO date-time instead of now.",
    ),
) -> None:
    """Start or stop the timer of a project."""
    now = _parse_moment(at)
    with reporting_errors():
        tracker = open_tracker(ctx)
        project_id = tracker.resolve(project).project_id if project else None
        result = tracker.toggle(now, project_id)
        LedgerRenderer(console).print_toggle(
            result, tracker.store.get_project(result.project_id)
        )


def status_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(
        None,
        help="Project or backup name/id (default: the current project).",
    ),
) -> None:
    """Show the day rows and totals of a project."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(project) if project else tracker.current_project
        if target is None:
            raise NoActiveProjectError("No project yet. Create one with: timeledger project add NAME")
        LedgerRenderer(console).print_project(tracker.store, target)


def cycle_cmd(
    ctx: typer.Context,
    back: bool = typer.Option(
        False,
        "--back",
        "-b",
        help="Step to the previous project instead of the next one.",
    ),
) -> None:
    """Switch to the next project (restricted to the locked label, if any)."""
    direction = CycleDirection.BACKWARD if back else CycleDirection.FORWARD
    with reporting_errors():
        tracker = open_tracker(ctx)
        if tracker.cycle(direction) is None:
            console.print("[dim]Nothing to cycle to.[/dim]")
            return
        current = tracker.current_project
        console.print(f"Current project: [bold]{current.display_name}[/bold]")


def select_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project name or id."),
) -> None:
    """Make a project the current one."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(project)
        tracker.select(target.project_id)
        console.print(f"Current project: [bold]{target.display_name}[/bold]")


def note_cmd(
    ctx: typer.Context,
    row: int = typer.Argument(..., help="Row number as shown by 'status' (1-based)."),
    text: str = typer.Argument(..., help="Annotation text (empty string clears it)."),
    project: str = typer.Option(
        None, "--project", "-p", help="Project name or id (default: current)."
    ),
) -> None:
    """Attach a note to one day row."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(project) if project else tracker.current_project
        if target is None:
            raise NoActiveProjectError("No project selected")
        if not 1 <= row <= len(target.rows):
            raise ValueError(f"Row {row} out of range (1-{len(target.rows)})")
        day = target.rows[row - 1]
        tracker.annotate_row(target.project_id, day.row_id, text)
        console.print(f"Noted [bold]{day.date_label}[/bold] on {target.display_name}")
