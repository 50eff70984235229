"""Project cycling and list reordering helpers (pure functions)."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import IntEnum
from typing import TypeVar

from timeledger.models.project import Project

T = TypeVar("T")


class CycleDirection(IntEnum):
    FORWARD = 1
    BACKWARD = -1


def cycle_candidates(
    projects: Sequence[Project], locked_label_id: str | None
) -> list[Project]:
    """Projects that take part in cycling, in list order."""
    if locked_label_id is None:
        return list(projects)
    return [p for p in projects if p.label_id == locked_label_id]


def next_project_id(
    projects: Sequence[Project],
    current_id: str | None,
    locked_label_id: str | None,
    direction: CycleDirection = CycleDirection.FORWARD,
) -> str | None:
    """Return the id to select after one cycle step, or ``None`` for a no-op.

    No-op when there is no current project, it is not a candidate, or there
    are fewer than two candidates.  Wraps in both directions.
    """
    candidates = cycle_candidates(projects, locked_label_id)
    if current_id is None or len(candidates) < 2:
        return None
    ids = [p.project_id for p in candidates]
    if current_id not in ids:
        return None
    index = ids.index(current_id)
    return ids[(index + int(direction)) % len(ids)]


def move_items(items: Sequence[T], offsets: Iterable[int], to_offset: int) -> list[T]:
    """Move the items at ``offsets`` so they land before position ``to_offset``.

    ``to_offset`` is measured in the list *before* the move, as list views
    report drop positions.  Moved items keep their relative order.
    """
    picked = sorted(set(offsets))
    for offset in picked:
        if not 0 <= offset < len(items):
            raise IndexError(f"Offset {offset} out of range for {len(items)} items")
    if not 0 <= to_offset <= len(items):
        raise IndexError(f"Destination {to_offset} out of range for {len(items)} items")

    moving = [items[i] for i in picked]
    remaining = [item for i, item in enumerate(items) if i not in picked]
    insert_at = to_offset - sum(1 for i in picked if i < to_offset)
    return remaining[:insert_at] + moving + remaining[insert_at:]
