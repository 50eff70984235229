"""Tracker — the application service around the ledger.

The Tracker wires together the LedgerStore (in-memory state), the
LedgerRepository (JSON records) and a ChangeBus.  Every public mutation
runs as two explicit steps: mutate the store, then persist.  Tests that
only need the state machine can use ``tracker.store`` directly and call
``persist()`` themselves, or skip it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from timeledger.config import LedgerSettings
from timeledger.core.bundle import write_bundle
from timeledger.core.change_bus import ChangeBus
from timeledger.core.ledger_store import LedgerStore
from timeledger.core.repository import LedgerRepository, LedgerWriteError
from timeledger.core.selection import CycleDirection
from timeledger.models.bundle import ExportBundle
from timeledger.models.events import LedgerChange, ToggleResult
from timeledger.models.label import Label
from timeledger.models.project import Project
from timeledger.report.csv_report import write_csv_report

logger = logging.getLogger(__name__)


class Tracker:
    """Loads the ledger, applies operations and saves the results.

    Parameters
    ----------
    settings:
        Storage locations, locale and behaviour flags.  Uses defaults
        (environment-driven) if not provided.
    repository:
        Override the persistence layer (defaults to a LedgerRepository on
        ``settings``).
    clock:
        Source of "now" for punches.  Defaults to local wall-clock time.
    """

    def __init__(
        self,
        settings: LedgerSettings | None = None,
        *,
        repository: LedgerRepository | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings or LedgerSettings()
        self.repository = repository or LedgerRepository(self.settings)
        self.bus = ChangeBus()
        self._clock = clock

        self.store = LedgerStore(locale=self.settings.locale)
        self.reload()

        if self.settings.cycle_after_edits:
            self.bus.register_handler(self._cycle_after_edit)

    # ------------------------------------------------------------------
    # Load / persist
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """Replace in-memory state with what is on disk."""
        self.store.projects = self.repository.load_projects()
        self.store.backups = self.repository.load_backups()
        self.store.labels = self.repository.load_labels()
        self.store.restore_selection(self.repository.load_preferences())
        logger.debug(
            "Loaded %d projects, %d backups, %d labels from %s",
            len(self.store.projects),
            len(self.store.backups),
            len(self.store.labels),
            self.repository.data_dir,
        )

    def persist(self) -> None:
        """Write projects, labels and preferences."""
        self.repository.save_projects(self.store.projects)
        self.repository.save_labels(self.store.labels)
        self.persist_preferences()

    def persist_preferences(self) -> None:
        self.repository.save_preferences(self.store.preferences)

    @contextmanager
    def _rolling_back_on_write_error(self) -> Iterator[None]:
        """Reload in-memory state from disk if any write in the block fails."""
        try:
            yield
        except LedgerWriteError:
            logger.error("Write failed; reloading ledger from %s", self.repository.data_dir)
            self.reload()
            raise

    def _publish(self, change: LedgerChange) -> LedgerChange:
        return self.bus.publish(change)

    def _commit(self, change: LedgerChange, backups: Iterable[Project] = ()) -> LedgerChange:
        """Write ``backups`` and the records, then publish ``change``."""
        with self._rolling_back_on_write_error():
            for backup in backups:
                self.repository.write_backup(backup)
            self.persist()
        return self._publish(change)

    def _commit_preferences(self, change: LedgerChange) -> LedgerChange:
        with self._rolling_back_on_write_error():
            self.persist_preferences()
        return self._publish(change)

    def _cycle_after_edit(self, change: LedgerChange) -> None:
        if change.requests_cycle:
            self.cycle()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def current_project(self) -> Project | None:
        return self.store.current_project

    def resolve(self, ref: str) -> Project:
        """Find an active or backup project by id or name."""
        return self.store.find(ref, include_backups=True)

    def resolve_label(self, ref: str) -> Label:
        return self.store.find_label(ref)

    # ------------------------------------------------------------------
    # Punching
    # ------------------------------------------------------------------

    def toggle(
        self, now: datetime | None = None, project_id: str | None = None
    ) -> ToggleResult:
        """Punch the timer for ``project_id`` (default: current project).

        A rollover backup is written before the live project is saved.  If
        that write fails the error is logged and the backup list is left as
        it was, but the live rows stay cleared.
        """
        result = self.store.toggle(now or self._clock(), project_id)
        if result.rollover is not None:
            self._store_backup(result.rollover.backup)
        self._commit(result.change)
        return result

    def _store_backup(self, backup: Project) -> None:
        try:
            path = self.repository.write_backup(backup)
        except LedgerWriteError as exc:
            logger.error("Backup %r was not saved: %s", backup.display_name, exc)
            return
        logger.info("Backup %r written to %s", backup.display_name, path)
        self._publish(self.store.replace_backups(self.repository.load_backups()))

    def annotate_row(self, project_id: str, row_id: str, text: str) -> LedgerChange:
        return self._commit(self.store.annotate_row(project_id, row_id, text))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, project_id: str) -> LedgerChange:
        return self._commit_preferences(self.store.select_project(project_id))

    def cycle(self, direction: CycleDirection = CycleDirection.FORWARD) -> LedgerChange | None:
        change = self.store.cycle_project(direction)
        if change is None:
            return None
        return self._commit_preferences(change)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def add_project(self, name: str) -> LedgerChange:
        return self._commit(self.store.add_project(name))

    def rename_project(self, project_id: str, new_name: str) -> LedgerChange:
        return self._commit(self.store.rename_project(project_id, new_name))

    def delete_project(self, project_id: str) -> LedgerChange:
        return self._commit(self.store.delete_project(project_id))

    def move_projects(
        self, label_id: str | None, offsets: Iterable[int], to_offset: int
    ) -> LedgerChange:
        return self._commit(self.store.move_projects(label_id, offsets, to_offset))

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def add_label(self, title: str, color: str) -> LedgerChange:
        return self._commit(self.store.add_label(title, color))

    def rename_label(self, label_id: str, new_title: str) -> LedgerChange:
        return self._commit(self.store.rename_label(label_id, new_title))

    def recolor_label(self, label_id: str, color: str) -> LedgerChange:
        return self._commit(self.store.recolor_label(label_id, color))

    def delete_label(self, label_id: str) -> LedgerChange:
        """Delete a label; backups that referenced it are rewritten too."""
        had_backup_refs = any(b.label_id == label_id for b in self.store.backups)
        change = self.store.delete_label(label_id)
        return self._commit(change, self.store.backups if had_backup_refs else ())

    def move_labels(self, offsets: Iterable[int], to_offset: int) -> LedgerChange:
        return self._commit(self.store.move_labels(offsets, to_offset))

    def assign_label(self, project_id: str, label_id: str | None) -> LedgerChange:
        return self._commit_assignment(
            project_id, self.store.assign_label(project_id, label_id)
        )

    def toggle_label(self, project_id: str, label_id: str) -> LedgerChange:
        return self._commit_assignment(
            project_id, self.store.toggle_label(project_id, label_id)
        )

    def _commit_assignment(self, project_id: str, change: LedgerChange) -> LedgerChange:
        if self.store.is_backup(project_id):
            return self._commit(change, [self.store.get_backup(project_id)])
        return self._commit(change)

    def lock_label(self, label_id: str) -> LedgerChange:
        return self._commit_preferences(self.store.lock_label(label_id))

    def unlock_label(self) -> LedgerChange:
        return self._commit_preferences(self.store.unlock_label())

    def toggle_lock(self, label_id: str) -> LedgerChange:
        return self._commit_preferences(self.store.toggle_lock(label_id))

    # ------------------------------------------------------------------
    # Backups, bundles, reports
    # ------------------------------------------------------------------

    def delete_backup(self, backup_id: str) -> LedgerChange:
        """Remove a backup record first, then drop it from memory."""
        with self._rolling_back_on_write_error():
            self.repository.delete_backup(self.store.get_backup(backup_id))
            change = self.store.delete_backup(backup_id)
            self.persist_preferences()
        return self._publish(change)

    def export_bundle(self, path: Path | None = None) -> Path:
        target = path or Path(self.settings.export_filename)
        write_bundle(self.store.to_bundle(), target)
        logger.info("Exported bundle to %s", target)
        return target

    def import_bundle(self, bundle: ExportBundle) -> LedgerChange:
        """Replace the whole ledger with ``bundle``.  Destructive.

        If any record fails to write, the ledger is reloaded from disk and
        the error propagates.
        """
        with self._rolling_back_on_write_error():
            change = self.store.replace_all(bundle)
            self.repository.replace_backups(self.store.backups)
            self.persist()
        logger.warning("Ledger replaced from bundle: %s", change.detail)
        return self._publish(change)

    def export_csv(self, path: Path, *, include_backups: bool = False) -> Path:
        projects = list(self.store.projects)
        if include_backups:
            projects.extend(self.store.backups)
        write_csv_report(projects, path)
        logger.info("Exported CSV report for %d projects to %s", len(projects), path)
        return path
