"""``timeledger project ...`` — create, rename, delete, list and reorder projects."""

from __future__ import annotations

import typer

from timeledger.cli.context import console, open_tracker, reporting_errors
from timeledger.report.renderer import LedgerRenderer

project_app = typer.Typer(help="Manage projects.", no_args_is_help=True)


@project_app.command("add")
def add_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new project."),
) -> None:
    """Create a project and make it current."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        change = tracker.add_project(name)
        console.print(f"[bold green]Created[/bold green] {name.strip()} [dim]({change.subject_id})[/dim]")


@project_app.command("rename")
def rename_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project name or id."),
    new_name: str = typer.Argument(..., help="New name."),
) -> None:
    """Rename an active project."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(project)
        tracker.rename_project(target.project_id, new_name)
        console.print(f"Renamed to [bold]{new_name.strip()}[/bold]")


@project_app.command("delete")
def delete_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project name or id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete an active project and all its rows."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(project)
        if not yes and not typer.confirm(f"Delete {target.display_name}?"):
            raise typer.Abort()
        tracker.delete_project(target.project_id)
        console.print(f"[bold red]Deleted[/bold red] {target.display_name}")


@project_app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """List active projects and backups, grouped by label."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        if not tracker.store.projects and not tracker.store.backups:
            console.print("[dim]No projects yet.[/dim]")
            return
        console.print(LedgerRenderer(console).render_overview(tracker.store))


@project_app.command("move")
def move_cmd(
    ctx: typer.Context,
    from_index: int = typer.Argument(..., help="Position within the group (0-based)."),
    to_index: int = typer.Argument(..., help="Drop position within the group (0-based)."),
    label: str = typer.Option(
        None, "--label", "-l", help="Label group to reorder (default: unlabelled)."
    ),
) -> None:
    """Reorder a project inside its label group."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        label_id = tracker.resolve_label(label).label_id if label else None
        tracker.move_projects(label_id, [from_index], to_index)
        console.print("Projects reordered.")
