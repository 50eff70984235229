"""Tests for LedgerSettings — env-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from timeledger.config import LedgerSettings


class TestLedgerSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TIMELEDGER_LOCALE", raising=False)
        monkeypatch.delenv("TIMELEDGER_DATA_DIR", raising=False)
        config = LedgerSettings()
        assert config.log_level == "INFO"
        assert config.debug is False
        assert config.locale == "it"
        assert config.cycle_after_edits is False

    def test_default_paths(self):
        config = LedgerSettings(data_dir=Path(".timeledger"))
        assert config.projects_path == Path(".timeledger/projects.json")
        assert config.labels_path == Path(".timeledger/labels.json")
        assert config.preferences_path == Path(".timeledger/preferences.json")
        assert config.backups_path == Path(".timeledger/backups")

    def test_env_override(self, monkeypatch, tmp_dir):
        monkeypatch.setenv("TIMELEDGER_DATA_DIR", str(tmp_dir))
        monkeypatch.setenv("TIMELEDGER_LOCALE", "en")
        monkeypatch.setenv("TIMELEDGER_CYCLE_AFTER_EDITS", "true")
        config = LedgerSettings()
        assert config.data_dir == tmp_dir
        assert config.locale == "en"
        assert config.cycle_after_edits is True

    def test_unknown_locale_rejected(self):
        with pytest.raises(ValidationError):
            LedgerSettings(locale="fr")

    def test_debug_from_env(self, monkeypatch):
        monkeypatch.setenv("TIMELEDGER_DEBUG", "1")
        assert LedgerSettings().debug is True
