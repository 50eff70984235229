"""Spreadsheet report — one block of CSV lines per project.

Block layout::

    Project name,12h 30m
    Lunedì 05/10/26,"09:00-12:30 13:30-18:00",8h 0m,"client visit"
    ...
    <empty line>

The interval and annotation columns are always double-quoted (embedded
quotes doubled); the project name is quoted only when it has to be.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from timeledger.core.repository import atomic_write
from timeledger.models.project import DayRow, Project


def quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def quote_if_needed(value: str) -> str:
    if any(ch in value for ch in (",", '"', "\n", "\r")):
        return quote(value)
    return value


def row_line(row: DayRow) -> str:
    return ",".join([
        quote_if_needed(row.date_label),
        quote(row.intervals),
        row.total_time,
        quote(row.annotation),
    ])


def project_lines(project: Project) -> list[str]:
    lines = [f"{quote_if_needed(project.display_name)},{project.total_time}"]
    lines.extend(row_line(row) for row in project.rows)
    return lines


def render_csv_report(projects: Iterable[Project]) -> str:
    blocks = ["\n".join(project_lines(p)) for p in projects]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def write_csv_report(projects: Iterable[Project], path: Path) -> Path:
    atomic_write(path, render_csv_report(projects).encode("utf-8"))
    return path
