"""Console session: the state machine driven by the event loop.

The session never touches the terminal or spawns processes itself. Operations
that start work return a :class:`Command` which the caller (the full-screen
app or the line-mode prompt loop) executes, feeding the outcome back through
:meth:`ConsoleSession.complete` or :meth:`ConsoleSession.finish_handoff`.
"""
from __future__ import annotations

import logging

from ..errors import InputValidationError
from .actions import ActionTable
from .input_capture import PendingAction
from .log_viewport import COMMAND_PREFIX, RETURN_PREFIX, SUCCESS_MARKER, LogViewport, error_marker
from .menu import MenuNode, MenuTree
from .navigator import NavigationController
from .state import (
    BackgroundCommand,
    Command,
    CompletionEvent,
    HandoffResult,
    InteractiveCommand,
    SessionMode,
)

logger = logging.getLogger(__name__)


class ConsoleSession:
    """Navigation, input capture and command bookkeeping for one run."""

    def __init__(
        self,
        tree: MenuTree,
        table: ActionTable,
        *,
        input_limit: int = 64,
        log: LogViewport | None = None,
    ):
        tree.validate(table)
        self.tree = tree
        self.table = table
        self.input_limit = input_limit
        self.nav = NavigationController(tree)
        self.log = log or LogViewport()
        self.mode = SessionMode.BROWSING
        self.pending: PendingAction | None = None
        self.current_task = ""

    def _set_mode(self, mode: SessionMode) -> None:
        if mode is not self.mode:
            logger.debug("session mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode

    @property
    def busy(self) -> bool:
        """True while a background command or a handoff is outstanding."""
        return self.mode in (SessionMode.RUNNING, SessionMode.INTERACTIVE_HANDOFF)

    # ═══════════════════════════════════════════════════════════════════════
    # BROWSING
    # ═══════════════════════════════════════════════════════════════════════

    def move_cursor(self, delta: int) -> None:
        if self.mode is SessionMode.BROWSING:
            self.nav.move_cursor(delta)

    def enter(self) -> Command | None:
        """Select the highlighted node.

        Returns:
            A command for the caller to execute, or None when the selection
            only changed state (descended, opened input) or was rejected
        """
        if self.mode is not SessionMode.BROWSING:
            logger.debug("enter rejected in mode %s", self.mode.value)
            return None

        node = self.nav.enter()
        if node is None:
            return None

        if node.needs_input:
            self.pending = PendingAction.for_node(node, limit=self.input_limit)
            self._set_mode(SessionMode.INPUT_CAPTURE)
            return None

        if node.interactive:
            return self._start_handoff(node)
        return self._start_background(node, "", task=node.label)

    def back(self) -> None:
        if self.mode is SessionMode.BROWSING:
            self.nav.back()

    def quit_key(self) -> None:
        """Pop one level, or quit when already at the root.

        Live while a background command is running; the command is neither
        awaited nor cancelled.
        """
        if self.mode not in (SessionMode.BROWSING, SessionMode.RUNNING):
            return
        if not self.nav.back():
            self._set_mode(SessionMode.QUITTING)

    def clear_log(self) -> None:
        if self.mode is SessionMode.BROWSING:
            self.log.clear()

    # ═══════════════════════════════════════════════════════════════════════
    # INPUT CAPTURE
    # ═══════════════════════════════════════════════════════════════════════

    def confirm_input(self) -> Command | None:
        """Submit the pending value; empty values are silently rejected."""
        if self.mode is not SessionMode.INPUT_CAPTURE or self.pending is None:
            return None
        try:
            value = self.pending.submit()
        except InputValidationError as exc:
            logger.debug("input rejected: %s", exc)
            return None

        pending, self.pending = self.pending, None
        return self._start_background(pending.node, value, task=f"{pending.prompt} {value}")

    def cancel_input(self) -> None:
        if self.mode is not SessionMode.INPUT_CAPTURE:
            return
        self.pending = None
        self._set_mode(SessionMode.BROWSING)

    # ═══════════════════════════════════════════════════════════════════════
    # COMMANDS
    # ═══════════════════════════════════════════════════════════════════════

    def _start_background(self, node: MenuNode, value: str, task: str) -> BackgroundCommand:
        action = node.require_action()
        argv = tuple(self.table.invoke(action, value))
        if value and value not in argv:
            # The value picked a listing variant; show what actually runs.
            display = node.bare_command()
            task = node.list_task or node.label
        else:
            display = node.render_command(value)
        self.log.append(COMMAND_PREFIX + display)
        self.current_task = task
        self._set_mode(SessionMode.RUNNING)
        logger.info("running %s: %s", action, " ".join(argv))
        return BackgroundCommand(action=action, argv=argv, display=display, task=task)

    def _start_handoff(self, node: MenuNode) -> InteractiveCommand:
        action = node.require_action()
        argv = tuple(self.table.invoke(action, ""))
        display = node.render_command()
        self.log.append(COMMAND_PREFIX + display)
        self._set_mode(SessionMode.INTERACTIVE_HANDOFF)
        logger.info("handing terminal to %s: %s", action, " ".join(argv))
        return InteractiveCommand(action=action, argv=argv, display=display)

    def complete(self, event: CompletionEvent) -> None:
        """Record a finished background command and return to browsing."""
        output = event.output.strip()
        if output:
            self.log.append(*output.splitlines())
        if event.error is None:
            self.log.append(SUCCESS_MARKER)
        else:
            self.log.append(error_marker(event.error))
        self.current_task = ""
        if self.mode is SessionMode.RUNNING:
            self._set_mode(SessionMode.BROWSING)

    def finish_handoff(self, result: HandoffResult) -> None:
        """Record that the terminal came back from an interactive command."""
        if result.error is not None:
            self.log.append(f"{RETURN_PREFIX}Control returned: {result.error}")
        else:
            self.log.append(f"{RETURN_PREFIX}Control returned (exit status {result.returncode})")
        if self.mode is SessionMode.INTERACTIVE_HANDOFF:
            self._set_mode(SessionMode.BROWSING)
