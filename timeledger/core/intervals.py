"""Interval-string arithmetic for day rows.

A day row stores its punches as ``"HH:MM-HH:MM HH:MM-HH:MM ..."``.  The
last segment may be open (``"HH:MM-"``).  Everything here is pure and
never raises on bad data: malformed segments are worth zero minutes.
"""

from __future__ import annotations

import re
from datetime import datetime

OPEN_MARKER = "-"
SEGMENT_SEPARATOR = " "

_CLOCK_RE = re.compile(r"([0-9]{1,2}):([0-9]{2})")


def minutes_from_string(value: str) -> int | None:
    """Parse ``H:MM``/``HH:MM`` into minutes since midnight.

    ASCII digits only. Returns ``None`` unless the whole string matches and
    the hour is 0-23 and the minute 0-59.
    """
    match = _CLOCK_RE.fullmatch(value)
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def split_segments(intervals: str) -> list[str]:
    """Split an interval string on spaces, dropping empty pieces."""
    return [seg for seg in intervals.split(SEGMENT_SEPARATOR) if seg]


def segment_minutes(segment: str) -> int:
    """Minutes covered by one ``start-end`` segment (0 if open or malformed)."""
    parts = segment.split(OPEN_MARKER)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return 0
    start = minutes_from_string(parts[0])
    end = minutes_from_string(parts[1])
    if start is None or end is None:
        return 0
    return max(0, end - start)


def row_minutes(intervals: str) -> int:
    return sum(segment_minutes(seg) for seg in split_segments(intervals))


def format_minutes(total_minutes: int) -> str:
    """Render minutes as ``"{h}h {m}m"``."""
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def time_label(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def is_open(intervals: str) -> bool:
    return intervals.endswith(OPEN_MARKER)


def open_interval(intervals: str, clock: str) -> str:
    """Append a new open segment starting at ``clock``."""
    if not intervals:
        return f"{clock}{OPEN_MARKER}"
    return f"{intervals}{SEGMENT_SEPARATOR}{clock}{OPEN_MARKER}"


def close_interval(intervals: str, clock: str) -> str:
    """Close the trailing open segment at ``clock``."""
    return f"{intervals}{clock}"
