"""Monthly rollover — freezes a project's rows into a backup snapshot.

A live project is rolled over when its last row belongs to another day
*and* another calendar month than ``now``.  The whole row list moves into
a new backup project named ``"{name} {Month} {YY}"`` after the month of the
last row, and the live project starts over empty.

Three behaviours are kept as observed in the mobile app:

* only the month number is compared, so the same month of another year
  does not roll over;
* the snapshot carries every row, so rows of an older month that never
  rolled over end up in the backup named after the most recent month;
* ``YY`` is ``year % 100`` without zero padding (2005 -> ``"5"``).

The backup does not inherit the live project's label.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from timeledger.core.calendar_labels import month_name, parse_day_label
from timeledger.models.events import RolloverEvent
from timeledger.models.project import Project

logger = logging.getLogger(__name__)


def last_row_date(project: Project) -> date | None:
    if not project.rows:
        return None
    return parse_day_label(project.rows[-1].date_label)


def needs_rollover(project: Project, now: datetime, today_label: str) -> bool:
    """Whether the next toggle at ``now`` must roll ``project`` over."""
    if not project.rows:
        return False
    if project.rows[-1].date_label == today_label:
        return False
    last_day = last_row_date(project)
    if last_day is None:
        return False
    return last_day.month != now.month


def backup_name(project: Project, last_day: date, locale: str = "it") -> str:
    return f"{project.display_name} {month_name(last_day, locale)} {last_day.year % 100}"


def roll_over(project: Project, locale: str = "it") -> RolloverEvent:
    """Move every row of ``project`` into a new backup project.

    Mutates ``project`` (rows cleared) and returns the event carrying the
    backup.  The caller is responsible for persisting it.
    """
    last_day = last_row_date(project)
    if last_day is None:
        raise ValueError(
            f"Project {project.display_name!r} has no dated rows to roll over"
        )
    last_label = project.rows[-1].date_label
    backup = Project(
        display_name=backup_name(project, last_day, locale),
        rows=list(project.rows),
    )
    project.rows = []
    logger.info(
        "Rolled %d rows of %r into backup %r",
        len(backup.rows),
        project.display_name,
        backup.display_name,
    )
    return RolloverEvent(
        project_id=project.project_id,
        backup=backup,
        last_day_label=last_label,
    )
