from __future__ import annotations

import logging
import os
import sys

import pytest


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `elmos_console/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()


@pytest.fixture
def session():
    """Console session over the default menu and action table."""
    from elmos_console.tui.actions import ActionTable
    from elmos_console.tui.menu import default_menu
    from elmos_console.tui.session import ConsoleSession

    return ConsoleSession(default_menu(), ActionTable())


@pytest.fixture
def restore_root_logging():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
