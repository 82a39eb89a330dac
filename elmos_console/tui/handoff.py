"""Full terminal handoff to interactive actions (menuconfig, QEMU, GDB)."""
from __future__ import annotations

import logging
import signal
import subprocess
from typing import AsyncContextManager, Callable, Sequence

from prompt_toolkit.application import in_terminal

from ..errors import CommandSpawnError, ConsoleError, TerminalHandoffError
from .state import HandoffResult, InteractiveCommand

logger = logging.getLogger(__name__)

TerminalFactory = Callable[[], AsyncContextManager[None]]
Spawner = Callable[[Sequence[str]], int]


def _default_sigint() -> None:
    # Ignored dispositions survive exec; the child gets its Ctrl+C back.
    signal.signal(signal.SIGINT, signal.SIG_DFL)


def spawn_foreground(cmd: Sequence[str]) -> int:
    """Run ``cmd`` on the inherited stdin/stdout/stderr and wait for it.

    Ctrl+C belongs to the child while it runs, so the console ignores SIGINT
    from before the child is started until it exits.
    """
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        proc = subprocess.Popen(list(cmd), preexec_fn=_default_sigint)
        return proc.wait()
    finally:
        signal.signal(signal.SIGINT, previous)


class InteractiveHandoff:
    """Suspends the console renderer and gives the terminal to a child.

    The event loop is blocked for the whole lifetime of the child: no ticks,
    no redraws, no key handling.
    """

    def __init__(
        self,
        executable: str,
        terminal: TerminalFactory = in_terminal,
        spawn: Spawner = spawn_foreground,
    ):
        self.executable = executable
        self._terminal = terminal
        self._spawn = spawn

    async def run(self, command: InteractiveCommand) -> HandoffResult:
        """Hand the terminal over and take it back.

        Raises:
            TerminalHandoffError: the console could not release or restore
                its terminal mode.
        """
        try:
            async with self._terminal():
                result = self.run_attached(command)
        except ConsoleError:
            raise
        except Exception as exc:
            raise TerminalHandoffError(
                f"terminal not restored after '{command.display}': {exc}"
            ) from exc
        logger.info("control returned from %s", command.action)
        return result

    def run_attached(self, command: InteractiveCommand) -> HandoffResult:
        """Run the child on the terminal as it is, without suspending a renderer."""
        cmd = [self.executable, *command.argv]
        try:
            returncode = self._spawn(cmd)
        except OSError as exc:
            reason = exc.strerror or str(exc)
            logger.warning("could not start %s: %s", self.executable, reason)
            return HandoffResult(
                action=command.action,
                error=CommandSpawnError(self.executable, reason),
            )
        return HandoffResult(action=command.action, returncode=returncode)
