from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from elmos_console.logging import setup_console_logging
from elmos_console.settings import Settings, load_settings

_ENV = (
    "ELMOS_EXECUTABLE",
    "ELMOS_CONSOLE_TITLE",
    "ELMOS_CONSOLE_INPUT_LIMIT",
    "ELMOS_CONSOLE_SPINNER_INTERVAL",
    "ELMOS_CONSOLE_LOG_DIR",
    "ELMOS_CONSOLE_LOG_LEVEL",
    "ELMOS_CONSOLE_LOG_BACKUP_COUNT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_defaults(clean_env):
    """Test settings defaults without environment overrides."""
    s = Settings(_env_file=None)
    assert s.ELMOS_EXECUTABLE == "elmos"
    assert s.ELMOS_CONSOLE_TITLE == "ELMOS"
    assert s.ELMOS_CONSOLE_INPUT_LIMIT == 64
    assert s.ELMOS_CONSOLE_SPINNER_INTERVAL == 0.1
    assert s.ELMOS_CONSOLE_LOG_DIR is None


def test_settings_from_env(clean_env, tmp_path: Path):
    """Test settings are read from environment variables."""
    clean_env.setenv("ELMOS_EXECUTABLE", "/usr/local/bin/elmos")
    clean_env.setenv("ELMOS_CONSOLE_INPUT_LIMIT", "16")
    clean_env.setenv("ELMOS_CONSOLE_LOG_DIR", str(tmp_path))

    s = Settings(_env_file=None)
    assert s.ELMOS_EXECUTABLE == "/usr/local/bin/elmos"
    assert s.ELMOS_CONSOLE_INPUT_LIMIT == 16
    assert s.ELMOS_CONSOLE_LOG_DIR == tmp_path


def test_settings_reject_bad_limit(clean_env):
    """Test a zero input limit fails validation."""
    clean_env.setenv("ELMOS_CONSOLE_INPUT_LIMIT", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_load_settings_overrides(clean_env):
    """Test load_settings applies only known, non-None overrides."""
    s = load_settings(ELMOS_EXECUTABLE="./elmos", ELMOS_CONSOLE_TITLE=None, UNKNOWN="x")
    assert s.ELMOS_EXECUTABLE == "./elmos"
    assert s.ELMOS_CONSOLE_TITLE == "ELMOS"
    assert not hasattr(s, "UNKNOWN")


def test_logging_disabled_without_dir(clean_env, restore_root_logging):
    """Test no log file is written without a log directory."""
    s = Settings(_env_file=None)
    assert setup_console_logging(s) is None
    assert all(isinstance(h, logging.NullHandler) for h in restore_root_logging.handlers)


def test_logging_writes_file(clean_env, restore_root_logging, tmp_path: Path):
    """Test the rotating log file receives formatted records."""
    clean_env.setenv("ELMOS_CONSOLE_LOG_DIR", str(tmp_path / "logs"))
    clean_env.setenv("ELMOS_CONSOLE_LOG_LEVEL", "debug")
    s = Settings(_env_file=None)

    log_file = setup_console_logging(s)
    assert log_file == tmp_path / "logs" / "elmos_console.log"
    assert restore_root_logging.level == logging.DEBUG

    logging.getLogger("elmos_console.tui.session").debug("session mode browsing -> running")
    for handler in restore_root_logging.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "elmos console logging enabled" in text
    assert "| DEBUG | elmos_console.tui.session | session mode browsing -> running" in text
