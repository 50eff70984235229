"""JSON file persistence for the ledger.

Data directory layout::

    {data_dir}/
        projects.json       # active projects (canonical record)
        labels.json         # label registry
        preferences.json    # last selected project, locked label
        backups/
            {backup name}.json   # one frozen project per monthly rollover

Every record is read and written whole.  Reads never raise: a missing or
malformed record loads as an empty collection (with a warning).  Writes
are atomic — a temp file in the same directory replaces the target — and
raise ``LedgerWriteError`` on failure, leaving the old file in place.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import TypeVar

from pydantic import TypeAdapter

from timeledger.config import LedgerSettings
from timeledger.models.bundle import Preferences
from timeledger.models.label import Label
from timeledger.models.project import Project

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PROJECT_LIST = TypeAdapter(list[Project])
_LABEL_LIST = TypeAdapter(list[Label])

_UNSAFE_NAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class LedgerWriteError(OSError):
    """Raised when a record could not be written."""


def atomic_write(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` via a temp file and ``os.replace``."""
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as handle:
            tmp_name = handle.name
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise LedgerWriteError(f"Could not write {path}: {exc}") from exc
    logger.debug("Wrote %d bytes to %s", len(data), path)


def backup_file_stem(name: str) -> str:
    """File stem for a backup named ``name`` (path separators replaced)."""
    stem = _UNSAFE_NAME_RE.sub("_", name).strip().strip(".")
    return stem or "backup"


class LedgerRepository:
    """Loads and saves ledger records under ``settings.data_dir``.

    Parameters
    ----------
    settings:
        Provides the record paths.  The data directory is created lazily
        on first write.
    """

    def __init__(self, settings: LedgerSettings) -> None:
        self._settings = settings

    @property
    def data_dir(self) -> Path:
        return self._settings.data_dir

    # ------------------------------------------------------------------
    # Generic record I/O
    # ------------------------------------------------------------------

    def _read(self, path: Path, adapter: TypeAdapter[T], default: T) -> T:
        if not path.exists():
            return default
        try:
            return adapter.validate_json(path.read_bytes())
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable record %s: %s", path, exc)
            return default

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def load_projects(self) -> list[Project]:
        return self._read(self._settings.projects_path, _PROJECT_LIST, [])

    def save_projects(self, projects: list[Project]) -> None:
        atomic_write(
            self._settings.projects_path,
            _PROJECT_LIST.dump_json(projects, by_alias=True, indent=2),
        )

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def load_labels(self) -> list[Label]:
        return self._read(self._settings.labels_path, _LABEL_LIST, [])

    def save_labels(self, labels: list[Label]) -> None:
        atomic_write(
            self._settings.labels_path,
            _LABEL_LIST.dump_json(labels, by_alias=True, indent=2),
        )

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def load_preferences(self) -> Preferences:
        path = self._settings.preferences_path
        if not path.exists():
            return Preferences()
        try:
            return Preferences.model_validate_json(path.read_bytes())
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences %s: %s", path, exc)
            return Preferences()

    def save_preferences(self, preferences: Preferences) -> None:
        atomic_write(
            self._settings.preferences_path,
            preferences.model_dump_json(indent=2).encode("utf-8"),
        )

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def backup_path(self, name: str) -> Path:
        return self._settings.backups_path / f"{backup_file_stem(name)}.json"

    def load_backups(self) -> list[Project]:
        """Scan the backups directory; malformed files are skipped."""
        directory = self._settings.backups_path
        if not directory.is_dir():
            return []
        backups: list[Project] = []
        for path in sorted(directory.glob("*.json")):
            if path.name.startswith("."):
                continue
            try:
                backups.append(Project.model_validate_json(path.read_bytes()))
            except (OSError, ValueError) as exc:
                logger.warning("Skipping malformed backup %s: %s", path, exc)
        return backups

    def write_backup(self, backup: Project) -> Path:
        """Persist one backup; an existing backup of the same name is overwritten."""
        path = self.backup_path(backup.display_name)
        if path.exists():
            logger.info("Overwriting existing backup %s", path)
        atomic_write(path, backup.model_dump_json(by_alias=True, indent=2).encode("utf-8"))
        return path

    def delete_backup(self, backup: Project) -> bool:
        path = self.backup_path(backup.display_name)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            raise LedgerWriteError(f"Could not delete {path}: {exc}") from exc
        return True

    def replace_backups(self, backups: list[Project]) -> None:
        """Make the backups directory hold exactly ``backups``.

        New records are written before stale ones are removed.  If a write
        fails, files this call created are removed and the error propagates.
        """
        directory = self._settings.backups_path
        existing = set(directory.glob("*.json")) if directory.is_dir() else set()
        written: list[Path] = []
        try:
            for backup in backups:
                written.append(self.write_backup(backup))
        except LedgerWriteError:
            for path in written:
                if path not in existing:
                    path.unlink(missing_ok=True)
            raise
        keep = set(written)
        for path in existing - keep:
            try:
                path.unlink()
            except OSError as exc:
                raise LedgerWriteError(f"Could not delete {path}: {exc}") from exc
