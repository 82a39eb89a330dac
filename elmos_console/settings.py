from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the elmos console.

    Values are loaded from environment variables and `.env`.

    Notes:
    - ELMOS_EXECUTABLE is prefixed to every action argv.
    - Diagnostic logging is off unless ELMOS_CONSOLE_LOG_DIR is set; the
      terminal itself belongs to the console renderer.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Action executor
    ELMOS_EXECUTABLE: str = Field(default="elmos")

    # Console
    ELMOS_CONSOLE_TITLE: str = Field(default="ELMOS")
    ELMOS_CONSOLE_INPUT_LIMIT: int = Field(default=64, ge=1)
    ELMOS_CONSOLE_SPINNER_INTERVAL: float = Field(default=0.1, gt=0)

    # Diagnostic logging (rotated daily)
    ELMOS_CONSOLE_LOG_DIR: Path | None = Field(default=None)
    ELMOS_CONSOLE_LOG_LEVEL: str = Field(default="INFO")
    ELMOS_CONSOLE_LOG_BACKUP_COUNT: int = Field(default=7)


def load_settings(**overrides: object) -> Settings:
    """Load settings, applying non-None keyword overrides on top."""
    s = Settings()
    for key, value in overrides.items():
        if value is not None and hasattr(s, key):
            setattr(s, key, value)
    return s
