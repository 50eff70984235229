"""Tests for LedgerStore — the in-memory punch state machine and edits."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from timeledger.core.calendar_labels import day_label
from timeledger.core.ledger_store import (
    ArchivedProjectError,
    LabelNotFoundError,
    LedgerError,
    LedgerStore,
    NoActiveProjectError,
    ProjectNotFoundError,
)
from timeledger.core.selection import CycleDirection
from timeledger.models.bundle import ExportBundle, Preferences
from timeledger.models.events import ChangeKind, ToggleAction
from timeledger.models.label import Label

MONDAY = datetime(2026, 10, 19, 9, 0)
TUESDAY = datetime(2026, 10, 20, 8, 30)


def _add(store: LedgerStore, name: str) -> str:
    return store.add_project(name).subject_id


def _add_label(store: LedgerStore, title: str, color: str = "#112233") -> str:
    return store.add_label(title, color).subject_id


# ---------------------------------------------------------------------------
# Punch state machine
# ---------------------------------------------------------------------------


class TestToggle:
    def test_first_toggle_starts_a_day(self, store):
        pid = _add(store, "Acme")
        result = store.toggle(MONDAY)
        assert result.action == ToggleAction.STARTED_DAY
        assert result.row.date_label == "Lunedì 19/10/26"
        assert result.row.intervals == "09:00-"
        assert store.is_running(pid) is True

    def test_second_toggle_closes(self, store):
        pid = _add(store, "Acme")
        store.toggle(MONDAY)
        result = store.toggle(datetime(2026, 10, 19, 12, 30))
        assert result.action == ToggleAction.CLOSED_INTERVAL
        assert result.row.intervals == "09:00-12:30"
        assert store.get_project(pid).total_time == "3h 30m"
        assert store.is_running(pid) is False

    def test_third_toggle_opens_another_interval(self, store):
        pid = _add(store, "Acme")
        store.toggle(MONDAY)
        store.toggle(datetime(2026, 10, 19, 12, 0))
        result = store.toggle(datetime(2026, 10, 19, 13, 0))
        assert result.action == ToggleAction.OPENED_INTERVAL
        assert result.row.intervals == "09:00-12:00 13:00-"
        assert len(store.get_project(pid).rows) == 1

    def test_double_press_in_same_minute(self, store):
        pid = _add(store, "Acme")
        store.toggle(MONDAY)
        result = store.toggle(MONDAY)
        assert result.row.intervals == "09:00-09:00"
        assert store.get_project(pid).total_time == "0h 0m"

    def test_next_day_starts_new_row(self, store):
        pid = _add(store, "Acme")
        store.toggle(MONDAY)
        store.toggle(datetime(2026, 10, 19, 10, 0))
        result = store.toggle(TUESDAY)
        project = store.get_project(pid)
        assert result.action == ToggleAction.STARTED_DAY
        assert [r.date_label for r in project.rows] == ["Lunedì 19/10/26", "Martedì 20/10/26"]
        assert result.rollover is None

    def test_open_interval_left_over_midnight_is_not_closed(self, store):
        pid = _add(store, "Acme")
        store.toggle(MONDAY)
        store.toggle(TUESDAY)
        project = store.get_project(pid)
        assert project.rows[0].intervals == "09:00-"
        assert project.rows[1].intervals == "08:30-"

    def test_row_identity_kept_while_amending(self, store):
        pid = _add(store, "Acme")
        first = store.toggle(MONDAY).row
        second = store.toggle(datetime(2026, 10, 19, 10, 0)).row
        assert first.row_id == second.row_id
        assert store.get_project(pid).rows[-1].row_id == first.row_id

    def test_explicit_project(self, store):
        first = _add(store, "Acme")
        _add(store, "Globex")
        result = store.toggle(MONDAY, first)
        assert result.project_id == first
        assert store.current_project.display_name == "Globex"

    def test_no_project(self, store):
        with pytest.raises(NoActiveProjectError):
            store.toggle(MONDAY)

    def test_unknown_project(self, store):
        with pytest.raises(ProjectNotFoundError):
            store.toggle(MONDAY, "nope")

    def test_backup_cannot_be_toggled(self, store, make_project):
        backup = make_project(name="Acme Settembre 26")
        store.backups.append(backup)
        with pytest.raises(ArchivedProjectError):
            store.toggle(MONDAY, backup.project_id)


class TestToggleRollover:
    def test_new_month_rolls_over_first(self, store):
        pid = _add(store, "Acme")
        store.toggle(datetime(2026, 9, 30, 9, 0))
        store.toggle(datetime(2026, 9, 30, 17, 0))
        before = list(store.get_project(pid).rows)

        result = store.toggle(datetime(2026, 10, 1, 9, 0))

        assert result.rollover is not None
        assert result.rollover.backup.display_name == "Acme Settembre 26"
        assert result.rollover.backup.rows == before
        project = store.get_project(pid)
        assert [r.date_label for r in project.rows] == [day_label(date(2026, 10, 1))]
        assert project.rows[0].intervals == "09:00-"

    def test_store_does_not_register_backup_itself(self, store):
        _add(store, "Acme")
        store.toggle(datetime(2026, 9, 30, 9, 0))
        store.toggle(datetime(2026, 10, 1, 9, 0))
        assert store.backups == []

    def test_running_interval_is_carried_into_backup(self, store):
        _add(store, "Acme")
        store.toggle(datetime(2026, 9, 30, 22, 0))
        result = store.toggle(datetime(2026, 10, 1, 9, 0))
        assert result.rollover.backup.rows[0].intervals == "22:00-"
        assert result.action == ToggleAction.STARTED_DAY


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class TestProjects:
    def test_add_makes_current(self, store):
        pid = _add(store, "  Acme  ")
        assert store.current_project_id == pid
        assert store.get_project(pid).display_name == "Acme"

    def test_add_empty_name(self, store):
        with pytest.raises(ValueError):
            store.add_project("   ")

    def test_rename(self, store):
        pid = _add(store, "Acme")
        change = store.rename_project(pid, "Acme Corp")
        assert change.kind == ChangeKind.PROJECT_RENAMED
        assert store.get_project(pid).display_name == "Acme Corp"

    def test_rename_backup_is_rejected(self, store, make_project):
        backup = make_project(name="Old")
        store.backups.append(backup)
        with pytest.raises(ArchivedProjectError):
            store.rename_project(backup.project_id, "New")

    def test_delete_current_selects_first(self, store):
        a = _add(store, "A")
        _add(store, "B")
        c = _add(store, "C")
        store.delete_project(c)
        assert store.current_project_id == a

    def test_delete_last_project_clears_selection(self, store):
        pid = _add(store, "A")
        store.delete_project(pid)
        assert store.current_project_id is None
        assert store.current_project is None

    def test_delete_releases_empty_lock(self, store):
        pid = _add(store, "A")
        lid = _add_label(store, "Work")
        store.assign_label(pid, lid)
        store.lock_label(lid)
        store.delete_project(pid)
        assert store.locked_label_id is None

    def test_find_by_id_then_name(self, store):
        pid = _add(store, "Acme")
        assert store.find(pid).project_id == pid
        assert store.find("Acme").project_id == pid
        with pytest.raises(ProjectNotFoundError):
            store.find("Globex")

    def test_find_backups_only_when_asked(self, store, make_project):
        backup = make_project(name="Acme Settembre 26")
        store.backups.append(backup)
        with pytest.raises(ProjectNotFoundError):
            store.find("Acme Settembre 26")
        assert store.find("Acme Settembre 26", include_backups=True) is backup

    def test_move_within_group_appends_group_last(self, store):
        a = _add(store, "A")
        b = _add(store, "B")
        c = _add(store, "C")
        lid = _add_label(store, "Work")
        store.assign_label(a, lid)
        store.assign_label(c, lid)

        store.move_projects(lid, [0], 2)

        assert [p.project_id for p in store.projects] == [b, c, a]

    def test_move_unlabelled_group(self, store):
        a = _add(store, "A")
        b = _add(store, "B")
        store.move_projects(None, [1], 0)
        assert [p.project_id for p in store.projects] == [b, a]

    def test_annotate_row(self, store):
        pid = _add(store, "Acme")
        row = store.toggle(MONDAY).row
        change = store.annotate_row(pid, row.row_id, "client call")
        assert change.detail == row.row_id
        assert store.get_project(pid).rows[0].annotation == "client call"
        assert store.get_project(pid).rows[0].intervals == "09:00-"

    def test_annotate_unknown_row(self, store):
        pid = _add(store, "Acme")
        with pytest.raises(LedgerError):
            store.annotate_row(pid, "nope", "text")


# ---------------------------------------------------------------------------
# Selection and cycling
# ---------------------------------------------------------------------------


class TestSelection:
    def test_cycle_wraps(self, store):
        a = _add(store, "A")
        b = _add(store, "B")
        store.select_project(a)
        assert store.cycle_project().subject_id == b
        assert store.cycle_project().subject_id == a

    def test_cycle_backward(self, store):
        a = _add(store, "A")
        _add(store, "B")
        c = _add(store, "C")
        store.select_project(a)
        store.cycle_project(CycleDirection.BACKWARD)
        assert store.current_project_id == c

    def test_cycle_noop_returns_none(self, store):
        _add(store, "A")
        assert store.cycle_project() is None

    def test_cycle_respects_lock(self, store):
        a = _add(store, "A")
        _add(store, "B")
        c = _add(store, "C")
        lid = _add_label(store, "Work")
        store.assign_label(a, lid)
        store.assign_label(c, lid)
        store.lock_label(lid)
        store.select_project(a)

        assert store.cycle_project().subject_id == c
        assert store.cycle_project().subject_id == a

    def test_select_backup_allowed(self, store, make_project):
        backup = make_project(name="Old")
        store.backups.append(backup)
        store.select_project(backup.project_id)
        assert store.current_project is backup

    def test_restore_selection(self, store):
        _add(store, "A")
        b = _add(store, "B")
        lid = _add_label(store, "Work")
        store.restore_selection(Preferences(last_project_id=b, locked_label_id=lid))
        assert store.current_project_id == b
        assert store.locked_label_id == lid

    def test_restore_selection_falls_back(self, store):
        a = _add(store, "A")
        store.restore_selection(Preferences(last_project_id="gone", locked_label_id="gone"))
        assert store.current_project_id == a
        assert store.locked_label_id is None

    def test_preferences_snapshot(self, store):
        pid = _add(store, "A")
        assert store.preferences == Preferences(last_project_id=pid, locked_label_id=None)


# ---------------------------------------------------------------------------
# Labels and lock
# ---------------------------------------------------------------------------


class TestLabels:
    def test_add_normalizes_colour(self, store):
        lid = _add_label(store, "Work", "#abc")
        assert store.get_label(lid).color == "#AABBCC"

    def test_add_empty_title(self, store):
        with pytest.raises(ValueError):
            store.add_label(" ", "#000000")

    def test_rename_and_recolor_replace_record(self, store):
        lid = _add_label(store, "Work")
        store.rename_label(lid, "Clients")
        store.recolor_label(lid, "ff0000")
        label = store.get_label(lid)
        assert (label.label_id, label.title, label.color) == (lid, "Clients", "#FF0000")

    def test_recolor_rejects_bad_colour(self, store):
        lid = _add_label(store, "Work")
        with pytest.raises(ValueError):
            store.recolor_label(lid, "purple")
        assert store.get_label(lid).color == "#112233"

    def test_delete_clears_projects_backups_and_lock(self, store, make_project):
        pid = _add(store, "A")
        lid = _add_label(store, "Work")
        backup = make_project(name="Old", label_id=lid)
        store.backups.append(backup)
        store.assign_label(pid, lid)
        store.lock_label(lid)

        store.delete_label(lid)

        assert store.labels == []
        assert store.get_project(pid).label_id is None
        assert backup.label_id is None
        assert store.locked_label_id is None
        assert len(store.projects) == 1

    def test_delete_unknown(self, store):
        with pytest.raises(LabelNotFoundError):
            store.delete_label("nope")

    def test_move_labels(self, store):
        first = _add_label(store, "A")
        second = _add_label(store, "B")
        store.move_labels([1], 0)
        assert [lbl.label_id for lbl in store.labels] == [second, first]

    def test_assign_unknown_label(self, store):
        pid = _add(store, "A")
        with pytest.raises(LabelNotFoundError):
            store.assign_label(pid, "nope")

    def test_assign_to_backup(self, store, make_project):
        lid = _add_label(store, "Work")
        backup = make_project(name="Old")
        store.backups.append(backup)
        store.assign_label(backup.project_id, lid)
        assert backup.label_id == lid

    def test_toggle_label(self, store):
        pid = _add(store, "A")
        lid = _add_label(store, "Work")
        store.toggle_label(pid, lid)
        assert store.get_project(pid).label_id == lid
        change = store.toggle_label(pid, lid)
        assert store.get_project(pid).label_id is None
        assert change.detail == ""

    def test_find_label(self, store):
        lid = _add_label(store, "Work")
        assert store.find_label("Work").label_id == lid
        assert store.find_label(lid).label_id == lid


class TestLock:
    def test_lock_requires_members(self, store):
        lid = _add_label(store, "Work")
        with pytest.raises(LedgerError, match="no active projects"):
            store.lock_label(lid)

    def test_toggle_lock(self, store):
        pid = _add(store, "A")
        lid = _add_label(store, "Work")
        store.assign_label(pid, lid)
        store.toggle_lock(lid)
        assert store.locked_label_id == lid
        store.toggle_lock(lid)
        assert store.locked_label_id is None

    def test_unassigning_last_member_releases_lock(self, store):
        pid = _add(store, "A")
        lid = _add_label(store, "Work")
        store.assign_label(pid, lid)
        store.lock_label(lid)
        store.assign_label(pid, None)
        assert store.locked_label_id is None


# ---------------------------------------------------------------------------
# Backups and bundles
# ---------------------------------------------------------------------------


class TestBackupsAndBundles:
    def test_delete_backup(self, store, make_project):
        a = _add(store, "A")
        backup = make_project(name="Old")
        store.backups.append(backup)
        store.select_project(backup.project_id)
        change = store.delete_backup(backup.project_id)
        assert change.detail == "Old"
        assert store.backups == []
        assert store.current_project_id == a

    def test_to_bundle_is_a_copy(self, store):
        pid = _add(store, "A")
        store.toggle(MONDAY)
        bundle = store.to_bundle()
        store.toggle(datetime(2026, 10, 19, 10, 0))
        assert bundle.projects[0].project_id == pid
        assert bundle.projects[0].rows[0].intervals == "09:00-"

    def test_replace_all(self, store, make_project):
        _add(store, "Old")
        label = Label(title="Work")
        first = make_project(name="X", label_id=label.label_id)
        bundle = ExportBundle(
            projects=[first, make_project(name="Y")],
            backup_projects=[make_project(name="X Settembre 26")],
            labels=[label],
            locked_label_id=label.label_id,
        )

        change = store.replace_all(bundle)

        assert change.kind == ChangeKind.BUNDLE_IMPORTED
        assert change.detail == "2 projects, 1 backups"
        assert [p.display_name for p in store.projects] == ["X", "Y"]
        assert store.current_project_id == first.project_id
        assert store.locked_label_id == label.label_id

    def test_replace_all_drops_dangling_lock(self, store):
        store.replace_all(ExportBundle(locked_label_id="missing"))
        assert store.locked_label_id is None
        assert store.current_project_id is None
