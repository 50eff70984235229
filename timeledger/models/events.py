"""Change events returned by every mutating ledger operation.

Callers receive the event directly; the Tracker additionally publishes it
on its own ChangeBus so that in-process listeners can react synchronously.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from timeledger.models.project import DayRow, Project


class ChangeKind(str, Enum):
    """What a mutation touched."""

    PROJECT_ADDED = "project_added"
    PROJECT_RENAMED = "project_renamed"
    PROJECT_DELETED = "project_deleted"
    PROJECTS_REORDERED = "projects_reordered"
    PROJECT_SELECTED = "project_selected"
    ROW_TOGGLED = "row_toggled"
    ROW_ANNOTATED = "row_annotated"
    LABEL_ADDED = "label_added"
    LABEL_RENAMED = "label_renamed"
    LABEL_RECOLORED = "label_recolored"
    LABEL_DELETED = "label_deleted"
    LABEL_ASSIGNED = "label_assigned"
    LABELS_REORDERED = "labels_reordered"
    LOCK_CHANGED = "lock_changed"
    BACKUP_DELETED = "backup_deleted"
    BACKUPS_RELOADED = "backups_reloaded"
    BUNDLE_IMPORTED = "bundle_imported"


# Edits after which the mobile app stepped to the next project.
CYCLE_TRIGGERS: frozenset[ChangeKind] = frozenset({
    ChangeKind.PROJECT_ADDED,
    ChangeKind.PROJECT_RENAMED,
    ChangeKind.PROJECT_DELETED,
    ChangeKind.LABEL_ADDED,
    ChangeKind.LABEL_RENAMED,
    ChangeKind.LABEL_DELETED,
    ChangeKind.LABEL_ASSIGNED,
})


class LedgerChange(BaseModel):
    """A single mutation outcome."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    subject_id: str | None = None
    detail: str = ""

    @property
    def requests_cycle(self) -> bool:
        return self.kind in CYCLE_TRIGGERS


class ToggleAction(str, Enum):
    """Which branch of the punch state machine ran."""

    STARTED_DAY = "started_day"
    CLOSED_INTERVAL = "closed_interval"
    OPENED_INTERVAL = "opened_interval"


class RolloverEvent(BaseModel):
    """A live project's rows were drained into a monthly backup."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    backup: Project
    last_day_label: str


class ToggleResult(BaseModel):
    """Outcome of one press of the timer button."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    action: ToggleAction
    row: DayRow
    punched_at: datetime
    rollover: RolloverEvent | None = None

    @property
    def change(self) -> LedgerChange:
        return LedgerChange(
            kind=ChangeKind.ROW_TOGGLED,
            subject_id=self.project_id,
            detail=self.action.value,
        )
