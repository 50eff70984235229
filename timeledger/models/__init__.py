"""TimeLedger data models — all Pydantic v2."""

from timeledger.models.bundle import ExportBundle, Preferences
from timeledger.models.events import (
    CYCLE_TRIGGERS,
    ChangeKind,
    LedgerChange,
    RolloverEvent,
    ToggleAction,
    ToggleResult,
)
from timeledger.models.label import Label, normalize_hex_color
from timeledger.models.project import DayRow, Project, new_record_id

__all__ = [
    # project
    "DayRow",
    "Project",
    "new_record_id",
    # label
    "Label",
    "normalize_hex_color",
    # bundle
    "ExportBundle",
    "Preferences",
    # events
    "ChangeKind",
    "CYCLE_TRIGGERS",
    "LedgerChange",
    "RolloverEvent",
    "ToggleAction",
    "ToggleResult",
]
