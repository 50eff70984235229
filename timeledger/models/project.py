"""Project and day-row models.

Field aliases follow the JSON written by the TimeLedger mobile app
(``name``/``noteRows``/``labelID`` for projects, ``giorno``/``orari``/``note``
for rows), so records and export bundles from either side load unchanged.
Python code always uses the attribute names.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field

from timeledger.core.intervals import OPEN_MARKER, format_minutes, row_minutes


def new_record_id() -> str:
    """Return a fresh upper-case UUID string, as the mobile app writes them."""
    return str(uuid.uuid4()).upper()


class DayRow(BaseModel):
    """One calendar day of punches for a project.

    ``intervals`` is a space-separated run of ``HH:MM-HH:MM`` segments; the
    last one may be open (``HH:MM-``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    row_id: str = Field(default_factory=new_record_id, alias="id")
    date_label: str = Field(alias="giorno")
    intervals: str = Field(default="", alias="orari")
    annotation: str = Field(default="", alias="note")

    @property
    def total_minutes(self) -> int:
        return row_minutes(self.intervals)

    @property
    def total_time(self) -> str:
        return format_minutes(self.total_minutes)

    @property
    def is_open(self) -> bool:
        return self.intervals.endswith(OPEN_MARKER)


class Project(BaseModel):
    """A named time bucket accumulating day rows.

    Mutable: the ledger store appends and amends rows in place. Backup
    projects share this shape but are never toggled.
    """

    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    project_id: str = Field(default_factory=new_record_id, alias="id")
    display_name: str = Field(alias="name")
    rows: list[DayRow] = Field(default_factory=list, alias="noteRows")
    label_id: str | None = Field(default=None, alias="labelID")

    @property
    def total_minutes(self) -> int:
        return sum(row.total_minutes for row in self.rows)

    @property
    def total_time(self) -> str:
        return format_minutes(self.total_minutes)

    @property
    def is_running(self) -> bool:
        """True when the last row ends with an open interval."""
        return bool(self.rows) and self.rows[-1].is_open
