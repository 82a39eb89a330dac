"""Error taxonomy for the console."""
from __future__ import annotations


class ConsoleError(Exception):
    """Base class for every error raised by elmos_console."""


class InvalidMenuNode(ConsoleError):
    """The menu tree is malformed or names an action with no argv mapping.

    Raised before the event loop starts; the console refuses to launch.
    """


class CommandSpawnError(ConsoleError):
    """The action executable is missing or could not be started."""

    def __init__(self, executable: str, reason: str):
        super().__init__(f"failed to start {executable}: {reason}")
        self.executable = executable
        self.reason = reason


class CommandExecutionError(ConsoleError):
    """The action executable ran and exited with a non-zero status."""

    def __init__(self, returncode: int):
        super().__init__(f"exit status {returncode}")
        self.returncode = returncode


class TerminalHandoffError(ConsoleError):
    """Terminal mode could not be restored after an interactive handoff.

    Fatal: the console exits and reports the failure outside the TUI.
    """


class InputValidationError(ConsoleError):
    """An empty value was submitted from input capture."""
