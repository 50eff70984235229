"""In-memory ledger state and every mutation on it.

The store never touches the filesystem.  Each mutating method changes the
in-memory collections and returns a ``LedgerChange`` (or a richer result)
describing what happened; persisting is a separate step performed by the
Tracker.  This keeps the punch state machine testable without I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from timeledger.core import rollover
from timeledger.core.calendar_labels import day_label
from timeledger.core.intervals import close_interval, open_interval, time_label
from timeledger.core.selection import CycleDirection, move_items, next_project_id
from timeledger.models.bundle import ExportBundle, Preferences
from timeledger.models.events import (
    ChangeKind,
    LedgerChange,
    ToggleAction,
    ToggleResult,
)
from timeledger.models.label import Label
from timeledger.models.project import DayRow, Project

logger = logging.getLogger(__name__)


class LedgerError(RuntimeError):
    """Base class for rejected ledger operations."""


class ProjectNotFoundError(LedgerError):
    """Raised when a project id or name matches nothing."""


class LabelNotFoundError(LedgerError):
    """Raised when a label id matches nothing."""


class ArchivedProjectError(LedgerError):
    """Raised when a mutation targets a read-only backup project."""


class NoActiveProjectError(LedgerError):
    """Raised when an operation needs a current project and there is none."""


class LedgerStore:
    """Active projects, monthly backups, labels and selection state.

    Parameters
    ----------
    projects, backups, labels:
        Initial collections (copied into fresh lists).
    locale:
        Locale for day labels and backup month names.
    """

    def __init__(
        self,
        projects: Iterable[Project] = (),
        backups: Iterable[Project] = (),
        labels: Iterable[Label] = (),
        *,
        locale: str = "it",
    ) -> None:
        self.projects: list[Project] = list(projects)
        self.backups: list[Project] = list(backups)
        self.labels: list[Label] = list(labels)
        self.locale = locale
        self.current_project_id: str | None = None
        self.locked_label_id: str | None = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_project(self, project_id: str) -> Project:
        """Return the active project with ``project_id``."""
        for project in self.projects:
            if project.project_id == project_id:
                return project
        if any(b.project_id == project_id for b in self.backups):
            raise ArchivedProjectError(f"Project {project_id} is a read-only backup")
        raise ProjectNotFoundError(f"No project with id {project_id}")

    def get_backup(self, backup_id: str) -> Project:
        for backup in self.backups:
            if backup.project_id == backup_id:
                return backup
        raise ProjectNotFoundError(f"No backup with id {backup_id}")

    def get_any(self, project_id: str) -> Project:
        """Return an active or backup project."""
        for project in (*self.projects, *self.backups):
            if project.project_id == project_id:
                return project
        raise ProjectNotFoundError(f"No project with id {project_id}")

    def find(self, ref: str, *, include_backups: bool = False) -> Project:
        """Resolve ``ref`` by id, then by exact display name."""
        pool = [*self.projects, *self.backups] if include_backups else self.projects
        for project in pool:
            if project.project_id == ref:
                return project
        for project in pool:
            if project.display_name == ref:
                return project
        raise ProjectNotFoundError(f"No project matching {ref!r}")

    def get_label(self, label_id: str) -> Label:
        for label in self.labels:
            if label.label_id == label_id:
                return label
        raise LabelNotFoundError(f"No label with id {label_id}")

    def find_label(self, ref: str) -> Label:
        """Resolve ``ref`` by id, then by exact title."""
        for label in self.labels:
            if label.label_id == ref:
                return label
        for label in self.labels:
            if label.title == ref:
                return label
        raise LabelNotFoundError(f"No label matching {ref!r}")

    def is_backup(self, project_id: str) -> bool:
        return any(b.project_id == project_id for b in self.backups)

    @property
    def current_project(self) -> Project | None:
        if self.current_project_id is None:
            return None
        try:
            return self.get_any(self.current_project_id)
        except ProjectNotFoundError:
            return None

    def is_running(self, project_id: str) -> bool:
        return self.get_any(project_id).is_running

    def label_members(self, label_id: str | None) -> list[Project]:
        return [p for p in self.projects if p.label_id == label_id]

    # ------------------------------------------------------------------
    # Selection state
    # ------------------------------------------------------------------

    @property
    def preferences(self) -> Preferences:
        return Preferences(
            last_project_id=self.current_project_id,
            locked_label_id=self.locked_label_id,
        )

    def restore_selection(self, preferences: Preferences) -> None:
        """Re-apply remembered selection after loading.

        The lock survives only if its label still exists; the current
        project falls back to the first active project.
        """
        locked = preferences.locked_label_id
        if locked is not None and any(lbl.label_id == locked for lbl in self.labels):
            self.locked_label_id = locked
        else:
            self.locked_label_id = None

        remembered = preferences.last_project_id
        if remembered is not None and any(p.project_id == remembered for p in self.projects):
            self.current_project_id = remembered
        elif self.projects:
            self.current_project_id = self.projects[0].project_id
        else:
            self.current_project_id = None

    def select_project(self, project_id: str) -> LedgerChange:
        project = self.get_any(project_id)
        self.current_project_id = project.project_id
        return LedgerChange(kind=ChangeKind.PROJECT_SELECTED, subject_id=project.project_id)

    def cycle_project(
        self, direction: CycleDirection = CycleDirection.FORWARD
    ) -> LedgerChange | None:
        """Step the current project through the cycle candidates.

        Returns ``None`` when nothing changed.
        """
        target = next_project_id(
            self.projects, self.current_project_id, self.locked_label_id, direction
        )
        if target is None:
            return None
        self.current_project_id = target
        return LedgerChange(kind=ChangeKind.PROJECT_SELECTED, subject_id=target)

    # ------------------------------------------------------------------
    # Punch state machine
    # ------------------------------------------------------------------

    def toggle(self, now: datetime, project_id: str | None = None) -> ToggleResult:
        """Press the timer button for ``project_id`` (default: current project).

        Runs the rollover check first, then starts a new day row, closes the
        open interval, or opens a new one.
        """
        if project_id is None:
            project_id = self.current_project_id
        if project_id is None:
            raise NoActiveProjectError("No project selected")
        project = self.get_project(project_id)

        today = day_label(now, self.locale)
        clock = time_label(now)

        event = None
        if rollover.needs_rollover(project, now, today):
            event = rollover.roll_over(project, self.locale)

        if not project.rows or project.rows[-1].date_label != today:
            row = DayRow(date_label=today, intervals=open_interval("", clock))
            project.rows = [*project.rows, row]
            action = ToggleAction.STARTED_DAY
        else:
            last = project.rows[-1]
            if last.is_open:
                row = last.model_copy(update={"intervals": close_interval(last.intervals, clock)})
                action = ToggleAction.CLOSED_INTERVAL
            else:
                row = last.model_copy(update={"intervals": open_interval(last.intervals, clock)})
                action = ToggleAction.OPENED_INTERVAL
            project.rows = [*project.rows[:-1], row]

        logger.debug(
            "Toggle %s on %r at %s -> %s",
            action.value, project.display_name, clock, row.intervals,
        )
        return ToggleResult(
            project_id=project.project_id,
            action=action,
            row=row,
            punched_at=now,
            rollover=event,
        )

    def annotate_row(self, project_id: str, row_id: str, text: str) -> LedgerChange:
        project = self.get_project(project_id)
        rows = list(project.rows)
        for i, row in enumerate(rows):
            if row.row_id == row_id:
                rows[i] = row.model_copy(update={"annotation": text})
                project.rows = rows
                return LedgerChange(
                    kind=ChangeKind.ROW_ANNOTATED, subject_id=project_id, detail=row_id
                )
        raise LedgerError(f"Project {project.display_name!r} has no row {row_id}")

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def add_project(self, name: str) -> LedgerChange:
        """Create an empty project and make it current."""
        name = name.strip()
        if not name:
            raise ValueError("Project name cannot be empty")
        project = Project(display_name=name)
        self.projects.append(project)
        self.current_project_id = project.project_id
        return LedgerChange(kind=ChangeKind.PROJECT_ADDED, subject_id=project.project_id)

    def rename_project(self, project_id: str, new_name: str) -> LedgerChange:
        new_name = new_name.strip()
        if not new_name:
            raise ValueError("Project name cannot be empty")
        project = self.get_project(project_id)
        project.display_name = new_name
        return LedgerChange(kind=ChangeKind.PROJECT_RENAMED, subject_id=project_id)

    def delete_project(self, project_id: str) -> LedgerChange:
        project = self.get_project(project_id)
        self.projects.remove(project)
        if self.current_project_id == project_id:
            self.current_project_id = self.projects[0].project_id if self.projects else None
        self._release_empty_lock()
        return LedgerChange(kind=ChangeKind.PROJECT_DELETED, subject_id=project_id)

    def move_projects(
        self, label_id: str | None, offsets: Iterable[int], to_offset: int
    ) -> LedgerChange:
        """Reorder the projects of one label group.

        The reordered group is re-appended after all other projects.
        """
        group = self.label_members(label_id)
        reordered = move_items(group, offsets, to_offset)
        others = [p for p in self.projects if p.label_id != label_id]
        self.projects = others + reordered
        return LedgerChange(kind=ChangeKind.PROJECTS_REORDERED, subject_id=label_id)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def add_label(self, title: str, color: str) -> LedgerChange:
        title = title.strip()
        if not title:
            raise ValueError("Label title cannot be empty")
        label = Label(title=title, color=color)
        self.labels.append(label)
        return LedgerChange(kind=ChangeKind.LABEL_ADDED, subject_id=label.label_id)

    def _replace_label(self, label_id: str, **update: str) -> None:
        label = self.get_label(label_id)
        index = self.labels.index(label)
        self.labels[index] = Label.model_validate({**label.model_dump(), **update})

    def rename_label(self, label_id: str, new_title: str) -> LedgerChange:
        new_title = new_title.strip()
        if not new_title:
            raise ValueError("Label title cannot be empty")
        self._replace_label(label_id, title=new_title)
        return LedgerChange(kind=ChangeKind.LABEL_RENAMED, subject_id=label_id)

    def recolor_label(self, label_id: str, color: str) -> LedgerChange:
        self._replace_label(label_id, color=color)
        return LedgerChange(kind=ChangeKind.LABEL_RECOLORED, subject_id=label_id)

    def delete_label(self, label_id: str) -> LedgerChange:
        """Remove a label and clear every reference to it.

        Projects are never deleted; both active and backup projects lose the
        reference, and the lock is released if it pointed here.
        """
        label = self.get_label(label_id)
        self.labels.remove(label)
        cleared = 0
        for project in (*self.projects, *self.backups):
            if project.label_id == label_id:
                project.label_id = None
                cleared += 1
        if self.locked_label_id == label_id:
            self.locked_label_id = None
        logger.debug("Deleted label %r, cleared %d references", label.title, cleared)
        return LedgerChange(kind=ChangeKind.LABEL_DELETED, subject_id=label_id)

    def move_labels(self, offsets: Iterable[int], to_offset: int) -> LedgerChange:
        self.labels = move_items(self.labels, offsets, to_offset)
        return LedgerChange(kind=ChangeKind.LABELS_REORDERED)

    def assign_label(self, project_id: str, label_id: str | None) -> LedgerChange:
        """Point a project (active or backup) at a label, or clear it with ``None``."""
        project = self.get_any(project_id)
        if label_id is not None:
            self.get_label(label_id)
        project.label_id = label_id
        self._release_empty_lock()
        return LedgerChange(
            kind=ChangeKind.LABEL_ASSIGNED, subject_id=project_id, detail=label_id or ""
        )

    def toggle_label(self, project_id: str, label_id: str) -> LedgerChange:
        """Assign ``label_id``, or clear it if the project already has it."""
        project = self.get_any(project_id)
        target = None if project.label_id == label_id else label_id
        return self.assign_label(project_id, target)

    # ------------------------------------------------------------------
    # Lock
    # ------------------------------------------------------------------

    def lock_label(self, label_id: str) -> LedgerChange:
        """Restrict cycling to the active projects carrying ``label_id``."""
        label = self.get_label(label_id)
        if not self.label_members(label_id):
            raise LedgerError(f"Label {label.title!r} has no active projects to lock onto")
        self.locked_label_id = label_id
        return LedgerChange(kind=ChangeKind.LOCK_CHANGED, subject_id=label_id)

    def unlock_label(self) -> LedgerChange:
        self.locked_label_id = None
        return LedgerChange(kind=ChangeKind.LOCK_CHANGED)

    def toggle_lock(self, label_id: str) -> LedgerChange:
        if self.locked_label_id == label_id:
            return self.unlock_label()
        return self.lock_label(label_id)

    def _release_empty_lock(self) -> None:
        if self.locked_label_id is not None and not self.label_members(self.locked_label_id):
            logger.debug("Releasing lock on label %s: no active members", self.locked_label_id)
            self.locked_label_id = None

    # ------------------------------------------------------------------
    # Backups and bundles
    # ------------------------------------------------------------------

    def delete_backup(self, backup_id: str) -> LedgerChange:
        backup = self.get_backup(backup_id)
        self.backups.remove(backup)
        if self.current_project_id == backup_id:
            self.current_project_id = self.projects[0].project_id if self.projects else None
        return LedgerChange(
            kind=ChangeKind.BACKUP_DELETED, subject_id=backup_id, detail=backup.display_name
        )

    def replace_backups(self, backups: Iterable[Project]) -> LedgerChange:
        self.backups = list(backups)
        return LedgerChange(kind=ChangeKind.BACKUPS_RELOADED, detail=str(len(self.backups)))

    def to_bundle(self) -> ExportBundle:
        return ExportBundle(
            projects=[p.model_copy(deep=True) for p in self.projects],
            backup_projects=[p.model_copy(deep=True) for p in self.backups],
            labels=list(self.labels),
            locked_label_id=self.locked_label_id,
        )

    def replace_all(self, bundle: ExportBundle) -> LedgerChange:
        """Overwrite projects, backups, labels and the lock from ``bundle``.

        Destructive.  The first imported project becomes current.
        """
        self.projects = [p.model_copy(deep=True) for p in bundle.projects]
        self.backups = [p.model_copy(deep=True) for p in bundle.backup_projects]
        self.labels = list(bundle.labels)
        locked = bundle.locked_label_id
        self.locked_label_id = (
            locked if locked is not None and any(lbl.label_id == locked for lbl in self.labels) else None
        )
        self.current_project_id = self.projects[0].project_id if self.projects else None
        return LedgerChange(
            kind=ChangeKind.BUNDLE_IMPORTED,
            detail=f"{len(self.projects)} projects, {len(self.backups)} backups",
        )
