"""``timeledger backup ...`` — browse and delete monthly backups."""

from __future__ import annotations

import typer
from rich.table import Table

from timeledger.cli.context import console, open_tracker, reporting_errors
from timeledger.report.renderer import LedgerRenderer

backup_app = typer.Typer(help="Browse and delete monthly backups.", no_args_is_help=True)


@backup_app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """List the monthly backups."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        if not tracker.store.backups:
            console.print("[dim]No backups yet.[/dim]")
            return
        table = Table(title="Backups", header_style="bold cyan")
        table.add_column("Backup", style="cyan")
        table.add_column("Days", justify="right")
        table.add_column("Total", justify="right")
        table.add_column("ID", style="dim")
        for backup in tracker.store.backups:
            table.add_row(
                backup.display_name, str(len(backup.rows)), backup.total_time, backup.project_id
            )
        console.print(table)


@backup_app.command("show")
def show_cmd(
    ctx: typer.Context,
    backup: str = typer.Argument(..., help="Backup name or id."),
) -> None:
    """Show the rows of one backup."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(backup)
        LedgerRenderer(console).print_project(tracker.store, target)


@backup_app.command("delete")
def delete_cmd(
    ctx: typer.Context,
    backup: str = typer.Argument(..., help="Backup name or id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete a backup and its record."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        target = tracker.resolve(backup)
        if not yes and not typer.confirm(f"Delete backup {target.display_name}?"):
            raise typer.Abort()
        tracker.delete_backup(target.project_id)
        console.print(f"[bold red]Deleted[/bold red] backup {target.display_name}")
