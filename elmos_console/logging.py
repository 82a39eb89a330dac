from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .settings import Settings


def setup_console_logging(settings: Settings) -> Path | None:
    """Configure Python logging to write to a rotating diagnostic log file.

    Returns the resolved log file path, or None when logging is disabled.

    Rotation:
      - Daily rotation at midnight.
      - Keep the last `ELMOS_CONSOLE_LOG_BACKUP_COUNT` rotated files.

    Notes:
      - There is no stream handler: stdout/stderr belong to the console
        renderer or to the child of an interactive handoff.
      - This function is safe to call multiple times (it resets handlers).
    """

    root = logging.getLogger()
    root.handlers = []

    log_dir = settings.ELMOS_CONSOLE_LOG_DIR
    if log_dir is None:
        root.addHandler(logging.NullHandler())
        return None

    log_dir = log_dir.expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "elmos_console.log"

    level_name = str(settings.ELMOS_CONSOLE_LOG_LEVEL or "INFO").upper().strip()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    file_handler = TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=max(0, int(settings.ELMOS_CONSOLE_LOG_BACKUP_COUNT or 0)),
        encoding="utf-8",
        utc=False,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt))

    root.setLevel(level)
    root.addHandler(file_handler)

    logging.getLogger("elmos_console").info(
        "elmos console logging enabled (file=%s, level=%s)",
        os.fspath(log_file),
        level_name,
    )

    return log_file
