"""``timeledger label ...`` — coloured labels, assignment and the cycle lock."""

from __future__ import annotations

import typer

from timeledger.cli.context import console, open_tracker, reporting_errors
from timeledger.report.renderer import LedgerRenderer

label_app = typer.Typer(help="Manage labels and the label lock.", no_args_is_help=True)


@label_app.command("add")
def add_cmd(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Label title."),
    color: str = typer.Option("#000000", "--color", "-c", help="Hex colour (RGB or RRGGBB)."),
) -> None:
    """Create a label."""
    with reporting_errors():
        open_tracker(ctx).add_label(title, color)
        console.print(f"[bold green]Created[/bold green] label {title.strip()}")


@label_app.command("rename")
def rename_cmd(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label title or id."),
    new_title: str = typer.Argument(..., help="New title."),
) -> None:
    """Rename a label."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        tracker.rename_label(tracker.resolve_label(label).label_id, new_title)
        console.print(f"Renamed to [bold]{new_title.strip()}[/bold]")


@label_app.command("color")
def color_cmd(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label title or id."),
    color: str = typer.Argument(..., help="New hex colour."),
) -> None:
    """Change a label's colour."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve_label(label)
        tracker.recolor_label(target.label_id, color)
        console.print(f"Recoloured {target.title} to {tracker.store.get_label(target.label_id).color}")


@label_app.command("delete")
def delete_cmd(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label title or id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete a label. Its projects become unlabelled; none are deleted."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve_label(label)
        if not yes and not typer.confirm(f"Delete label {target.title}?"):
            raise typer.Abort()
        tracker.delete_label(target.label_id)
        console.print(f"[bold red]Deleted[/bold red] label {target.title}")


@label_app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """List labels with their colour, member count and lock state."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        if not tracker.store.labels:
            console.print("[dim]No labels yet.[/dim]")
            return
        console.print(LedgerRenderer(console).render_labels(tracker.store))


@label_app.command("move")
def move_cmd(
    ctx: typer.Context,
    from_index: int = typer.Argument(..., help="Current position (0-based)."),
    to_index: int = typer.Argument(..., help="Drop position (0-based)."),
) -> None:
    """Reorder the label list."""
    with reporting_errors():
        open_tracker(ctx).move_labels([from_index], to_index)
        console.print("Labels reordered.")


@label_app.command("assign")
def assign_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project or backup name/id."),
    label: str = typer.Argument(..., help="Label title or id."),
) -> None:
    """Put a project under a label."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(project)
        chosen = tracker.resolve_label(label)
        tracker.assign_label(target.project_id, chosen.label_id)
        console.print(f"{target.display_name} -> [bold]{chosen.title}[/bold]")


@label_app.command("clear")
def clear_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(..., help="Project or backup name/id."),
) -> None:
    """Remove a project's label."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(project)
        tracker.assign_label(target.project_id, None)
        console.print(f"{target.display_name} is now unlabelled")


@label_app.command("lock")
def lock_cmd(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label title or id."),
) -> None:
    """Restrict 'cycle' to the projects of one label."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve_label(label)
        tracker.lock_label(target.label_id)
        console.print(f"Cycling locked to [bold]{target.title}[/bold]")


@label_app.command("unlock")
def unlock_cmd(ctx: typer.Context) -> None:
    """Let 'cycle' visit every project again."""
    with reporting_errors():
        open_tracker(ctx).unlock_label()
        console.print("Cycling unlocked")
