"""Export bundle and sticky preference models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from timeledger.models.label import Label
from timeledger.models.project import Project


class ExportBundle(BaseModel):
    """Everything needed to restore a ledger: the backup/restore document.

    Serialized with aliases (``backupProjects``, ``lockedLabelID``) so it
    round-trips with the mobile app's export file.
    """

    model_config = ConfigDict(populate_by_name=True)

    projects: list[Project] = Field(default_factory=list)
    backup_projects: list[Project] = Field(
        default_factory=list, alias="backupProjects"
    )
    labels: list[Label] = Field(default_factory=list)
    locked_label_id: str | None = Field(default=None, alias="lockedLabelID")


class Preferences(BaseModel):
    """Selection state remembered across restarts."""

    model_config = ConfigDict(frozen=True)

    last_project_id: str | None = None
    locked_label_id: str | None = None
