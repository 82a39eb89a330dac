"""Background execution of actions with captured output."""
from __future__ import annotations

import logging
import subprocess
import threading
from typing import Callable, Sequence

from ..errors import CommandExecutionError, CommandSpawnError, ConsoleError
from .actions import ActionID, ActionTable
from .state import BackgroundCommand, CompletionEvent

logger = logging.getLogger(__name__)

Deliver = Callable[[CompletionEvent], None]


class AsyncCommandRunner:
    """Runs one action at a time off the event loop.

    ``run`` returns immediately; the worker hands exactly one
    :class:`CompletionEvent` to ``deliver`` when the process has finished or
    failed to start. Keeping only one command outstanding is the caller's
    job.
    """

    def __init__(self, executable: str, table: ActionTable | None = None, cwd: str | None = None):
        self.executable = executable
        self.table = table or ActionTable()
        self.cwd = cwd

    def invoke(self, action: ActionID | str, value: str = "") -> list[str]:
        """Map an action and its optional value to the executor's argv."""
        return self.table.invoke(action, value)

    def command_line(self, argv: Sequence[str]) -> list[str]:
        return [self.executable, *argv]

    def execute(self, action: ActionID, argv: Sequence[str]) -> CompletionEvent:
        """Run the action to completion on the calling thread."""
        cmd = self.command_line(argv)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except (OSError, subprocess.SubprocessError) as exc:
            reason = getattr(exc, "strerror", None) or str(exc)
            logger.warning("could not start %s: %s", self.executable, reason)
            return CompletionEvent(action=action, error=CommandSpawnError(self.executable, reason))

        error: ConsoleError | None = None
        if result.returncode != 0:
            error = CommandExecutionError(result.returncode)
        logger.info("%s finished with exit status %s", action, result.returncode)
        return CompletionEvent(action=action, error=error, output=result.stdout or "")

    def run(self, command: BackgroundCommand, deliver: Deliver) -> threading.Thread:
        """Start ``command`` on a daemon worker thread.

        The worker is never joined, so quitting the console does not wait for
        (or stop) the child process.
        """

        def _work() -> None:
            deliver(self.execute(command.action, command.argv))

        worker = threading.Thread(target=_work, name=f"elmos-{command.action}", daemon=True)
        worker.start()
        return worker
