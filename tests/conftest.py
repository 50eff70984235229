"""Shared test fixtures for TimeLedger."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from timeledger.config import LedgerSettings
from timeledger.core.ledger_store import LedgerStore
from timeledger.core.repository import LedgerRepository
from timeledger.core.tracker import Tracker
from timeledger.models.project import DayRow, Project


class FakeClock:
    """Callable clock whose time the test sets explicitly."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for ledger records."""
    return tmp_path


@pytest.fixture
def settings(tmp_dir: Path) -> LedgerSettings:
    """Settings pointing at a fresh data directory, Italian day labels."""
    return LedgerSettings(data_dir=tmp_dir / "ledger", locale="it")


@pytest.fixture
def repository(settings: LedgerSettings) -> LedgerRepository:
    return LedgerRepository(settings)


@pytest.fixture
def store() -> LedgerStore:
    """An empty in-memory store (no I/O)."""
    return LedgerStore(locale="it")


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen on Monday 19 October 2026, 09:00."""
    return FakeClock(datetime(2026, 10, 19, 9, 0))


@pytest.fixture
def tracker(settings: LedgerSettings, clock: FakeClock) -> Tracker:
    return Tracker(settings, clock=clock)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_project() -> Callable[..., Project]:
    """Factory fixture: build a Project from ``(date_label, intervals)`` pairs."""

    def _factory(
        name: str = "Client A",
        rows: list[tuple[str, str]] | None = None,
        **overrides: Any,
    ) -> Project:
        day_rows = [DayRow(date_label=d, intervals=i) for d, i in (rows or [])]
        return Project(display_name=name, rows=day_rows, **overrides)

    return _factory
