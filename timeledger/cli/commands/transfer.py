"""``timeledger export|import|csv`` — bundles and spreadsheet reports.

``import`` replaces every project, backup and label with the bundle's
content.  It asks for confirmation unless ``--yes`` is given.
"""

from __future__ import annotations

from pathlib import Path

import typer

from timeledger.cli.context import console, get_settings, open_tracker, reporting_errors
from timeledger.core.bundle import read_bundle


def export_cmd(
    ctx: typer.Context,
    out: Path = typer.Option(
        None,
        "--out",
        "-o",
        help="Bundle path (default: ./TimeLedgerExport.json or TIMELEDGER_EXPORT_FILENAME).",
    ),
) -> None:
    """Write projects, backups, labels and the lock to one JSON bundle."""
    with reporting_errors():
        tracker = open_tracker(ctx)
        path = tracker.export_bundle(out)
        console.print(f"[bold green]Exported[/bold green] to {path}")


def import_cmd(
    ctx: typer.Context,
    bundle_file: Path = typer.Argument(..., help="Bundle written by 'export' or the mobile app."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Replace the whole ledger with a bundle. Destructive."""
    with reporting_errors():
        bundle = read_bundle(bundle_file)
        console.print(
            f"Bundle holds {len(bundle.projects)} projects, "
            f"{len(bundle.backup_projects)} backups, {len(bundle.labels)} labels."
        )
        if not yes and not typer.confirm(
            "Overwrite? All current projects will be lost.", default=False
        ):
            raise typer.Abort()
        tracker = open_tracker(ctx)
        change = tracker.import_bundle(bundle)
        console.print(f"[bold green]Imported[/bold green] {change.detail} into {get_settings(ctx).data_dir}")


def csv_cmd(
    ctx: typer.Context,
    out: Path = typer.Option(Path("timeledger.csv"), "--out", "-o", help="CSV file to write."),
    include_backups: bool = typer.Option(
        False, "--include-backups", "-B", help="Append the monthly backups after the projects."
    ),
) -> None:
    """Write a CSV report: one header line per project, one line per day."""
    with reporting_errors():
        path = open_tracker(ctx).export_csv(out, include_backups=include_backups)
        console.print(f"[bold green]Wrote[/bold green] {path}")
