"""Runtime configuration — env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
TIMELEDGER_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timeledger.core.calendar_labels import SUPPORTED_LOCALES


class LedgerSettings(BaseSettings):
    """Ledger configuration with environment variable overrides.

    All settings can be overridden via TIMELEDGER_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export TIMELEDGER_DATA_DIR=~/Documents/timeledger
        export TIMELEDGER_LOCALE=en
        export TIMELEDGER_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TIMELEDGER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging (debug forces DEBUG regardless of log_level)
    log_level: str = "INFO"
    debug: bool = False

    # Storage layout (relative names are resolved under data_dir)
    data_dir: Path = Path(".timeledger")
    projects_file: str = "projects.json"
    labels_file: str = "labels.json"
    preferences_file: str = "preferences.json"
    backups_dir: str = "backups"
    export_filename: str = "TimeLedgerExport.json"

    # Day labels and month names ("it" or "en")
    locale: str = "it"

    # Step the current project after project/label edits
    cycle_after_edits: bool = False

    @field_validator("locale")
    @classmethod
    def _check_locale(cls, value: str) -> str:
        if value not in SUPPORTED_LOCALES:
            raise ValueError(f"locale must be one of {SUPPORTED_LOCALES}, got {value!r}")
        return value

    @property
    def projects_path(self) -> Path:
        return self.data_dir / self.projects_file

    @property
    def labels_path(self) -> Path:
        return self.data_dir / self.labels_file

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / self.preferences_file

    @property
    def backups_path(self) -> Path:
        return self.data_dir / self.backups_dir


# Module-level singleton, import as `from timeledger.config import settings`
settings = LedgerSettings()
