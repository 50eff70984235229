"""Rich terminal renderer for the ledger.

Turns projects, labels and punch results into Rich renderables.

Color scheme
------------
- yellow    : project with an open interval (timer running)
- bold cyan : current project marker
- label     : each label's own hex colour
- dim       : backups and empty values
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from timeledger.models.events import ToggleAction

if TYPE_CHECKING:
    from timeledger.core.ledger_store import LedgerStore
    from timeledger.models.events import ToggleResult
    from timeledger.models.label import Label
    from timeledger.models.project import Project


_ACTION_TEXT: dict[ToggleAction, str] = {
    ToggleAction.STARTED_DAY: "[bold green]Started[/bold green] a new day",
    ToggleAction.OPENED_INTERVAL: "[bold green]Started[/bold green] a new interval",
    ToggleAction.CLOSED_INTERVAL: "[bold red]Stopped[/bold red] the running interval",
}


def label_badge(label: Label | None) -> str:
    if label is None:
        return "[dim]-[/dim]"
    return f"[{label.color}]●[/] {escape(label.title)}"


class LedgerRenderer:
    """Renders ledger state as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Single project
    # ------------------------------------------------------------------

    def render_project(
        self,
        project: Project,
        *,
        label: Label | None = None,
        is_backup: bool = False,
    ) -> Panel:
        """Render one project's day rows inside a Panel."""
        table = self._build_row_table(project)

        summary_parts = [
            f"[bold]Total:[/bold] {project.total_time}",
            f"[bold]Days:[/bold] {len(project.rows)}",
            f"[bold]Label:[/bold] {label_badge(label)}",
        ]
        if project.is_running:
            summary_parts.append("[bold yellow]RUNNING[/bold yellow]")
        if is_backup:
            summary_parts.append("[dim]backup (read-only)[/dim]")

        content = Group(table, Text(""), Text.from_markup("  |  ".join(summary_parts)))
        return Panel(
            content,
            title=f"[bold]{escape(project.display_name)}[/bold]",
            border_style="yellow" if project.is_running else "blue",
            padding=(1, 2),
        )

    def _build_row_table(self, project: Project) -> Table:
        table = Table(
            show_header=True,
            header_style="bold cyan",
            expand=True,
            show_lines=False,
        )
        table.add_column("#", style="dim", width=4, justify="right")
        table.add_column("Day", min_width=18)
        table.add_column("Intervals", min_width=20)
        table.add_column("Total", justify="right", width=9)
        table.add_column("Note")

        for i, row in enumerate(project.rows, start=1):
            style = "yellow" if row.is_open else ""
            table.add_row(
                str(i),
                escape(row.date_label),
                escape(row.intervals),
                row.total_time,
                escape(row.annotation) if row.annotation else "[dim]-[/dim]",
                style=style,
            )
        if not project.rows:
            table.add_row("", "[dim]no punches yet[/dim]", "", "", "")
        return table

    # ------------------------------------------------------------------
    # Overview
    # ------------------------------------------------------------------

    def render_overview(self, store: LedgerStore) -> Table:
        """All projects grouped like the project manager: unlabelled first,
        then one group per label, then the backups."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("", width=2)
        table.add_column("Project", min_width=20)
        table.add_column("Label", min_width=12)
        table.add_column("Total", justify="right", width=10)
        table.add_column("Status", justify="center", width=10)
        table.add_column("ID", style="dim")

        def add_group(projects: list[Project], is_backup: bool) -> None:
            for project in projects:
                label = self._label_for(store, project.label_id)
                marker = "[bold cyan]>[/bold cyan]" if project.project_id == store.current_project_id else ""
                if is_backup:
                    status = "[dim]backup[/dim]"
                elif project.is_running:
                    status = "[bold yellow]running[/bold yellow]"
                else:
                    status = "[dim]idle[/dim]"
                table.add_row(
                    marker,
                    escape(project.display_name),
                    label_badge(label),
                    project.total_time,
                    status,
                    project.project_id,
                )

        known = {label.label_id for label in store.labels}
        for is_backup, pool in ((False, store.projects), (True, store.backups)):
            if is_backup and pool:
                table.add_section()
            add_group([p for p in pool if p.label_id not in known], is_backup)
            for label in store.labels:
                add_group([p for p in pool if p.label_id == label.label_id], is_backup)
        return table

    def render_labels(self, store: LedgerStore) -> Table:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Label")
        table.add_column("Colour")
        table.add_column("Projects", justify="right")
        table.add_column("Lock", justify="center")
        table.add_column("ID", style="dim")
        for i, label in enumerate(store.labels):
            locked = "[bold]locked[/bold]" if store.locked_label_id == label.label_id else ""
            table.add_row(
                str(i),
                label_badge(label),
                label.color,
                str(len(store.label_members(label.label_id))),
                locked,
                label.label_id,
            )
        return table

    @staticmethod
    def _label_for(store: LedgerStore, label_id: str | None) -> Label | None:
        if label_id is None:
            return None
        return next((lbl for lbl in store.labels if lbl.label_id == label_id), None)

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_project(self, store: LedgerStore, project: Project) -> None:
        self.console.print(
            self.render_project(
                project,
                label=self._label_for(store, project.label_id),
                is_backup=store.is_backup(project.project_id),
            )
        )

    def print_toggle(self, result: ToggleResult, project: Project) -> None:
        if result.rollover is not None:
            self.console.print(
                f"[magenta]Month closed:[/magenta] rows moved to backup "
                f"[bold]{escape(result.rollover.backup.display_name)}[/bold]"
            )
        self.console.print(
            f"{_ACTION_TEXT[result.action]} on [bold]{escape(project.display_name)}[/bold] "
            f"at {result.punched_at.strftime('%H:%M')}"
        )
        self.console.print(
            f"  {escape(result.row.date_label)}: {escape(result.row.intervals)} "
            f"[dim]({result.row.total_time} today, {project.total_time} total)[/dim]"
        )
