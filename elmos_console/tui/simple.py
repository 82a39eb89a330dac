"""Line-mode console for terminals that cannot host the full-screen app.

Walks the same session state machine with questionary prompts. Commands run
in the foreground: background actions under a rich status spinner,
interactive actions attached directly to the terminal.
"""
from __future__ import annotations

import questionary
from questionary import Choice, Separator
from rich.console import Console
from rich.text import Text

from .components import BRAND_STYLE, item_prefix
from .handoff import InteractiveHandoff
from .log_viewport import COMMAND_PREFIX, ERROR_PREFIX, RETURN_PREFIX, SUCCESS_MARKER
from .runner import AsyncCommandRunner
from .session import ConsoleSession
from .state import BackgroundCommand, Command, InteractiveCommand, SessionMode

_LINE_STYLES = (
    (COMMAND_PREFIX, "cyan"),
    (SUCCESS_MARKER, "green"),
    (ERROR_PREFIX, "red"),
    (RETURN_PREFIX, "yellow"),
)


def nav_choices(at_root: bool) -> list:
    """Back/Home below a submenu, Quit at the root."""
    choices: list = [Separator()]
    if at_root:
        choices.append(Choice(title="Quit", value="quit"))
    else:
        choices.extend([
            Choice(title="← Back", value="back"),
            Choice(title="Home", value="home"),
        ])
    return choices


def print_log_lines(console: Console, lines: list[str]) -> None:
    for line in lines:
        style = next((s for prefix, s in _LINE_STYLES if line.startswith(prefix)), "")
        console.print(Text("  " + line, style=style))


class LineModeConsole:
    """Prompt loop over a :class:`ConsoleSession`."""

    def __init__(
        self,
        session: ConsoleSession,
        runner: AsyncCommandRunner,
        handoff: InteractiveHandoff,
        console: Console | None = None,
    ):
        self.session = session
        self.runner = runner
        self.handoff = handoff
        self.console = console or Console()

    def run(self) -> None:
        session = self.session
        while session.mode is not SessionMode.QUITTING:
            self.console.print(f"[dim]{session.nav.breadcrumbs()}[/dim]")
            choice = self._select()
            if choice is None:
                # Ctrl+C behaves like the quit key.
                session.quit_key()
            elif choice == "back":
                session.back()
            elif choice == "home":
                session.nav.home()
            elif choice == "quit":
                session.quit_key()
            else:
                session.move_cursor(int(choice) - session.nav.current.cursor)
                self._select_current()
        self.console.print("\n[dim]👋 Goodbye![/]")

    def _select(self) -> str | int | None:
        level = self.session.nav.current
        items = [
            Choice(title=item_prefix(node) + node.label, value=index)
            for index, node in enumerate(level.items)
        ]
        return questionary.select(
            level.title,
            choices=items + nav_choices(self.session.nav.at_root()),
            default=items[level.cursor],
            style=BRAND_STYLE,
        ).ask()

    def _select_current(self) -> None:
        start = len(self.session.log.lines)
        command = self.session.enter()
        if self.session.mode is SessionMode.INPUT_CAPTURE:
            command = self._capture_input()
        self._execute(command)
        print_log_lines(self.console, self.session.log.lines[start:])

    def _capture_input(self) -> Command | None:
        session = self.session
        while session.mode is SessionMode.INPUT_CAPTURE and session.pending is not None:
            pending = session.pending
            value = questionary.text(
                pending.prompt,
                instruction=f"(e.g. {pending.placeholder})" if pending.placeholder else None,
                style=BRAND_STYLE,
            ).ask()
            if value is None:
                session.cancel_input()
                return None
            pending.buffer, pending.position = "", 0
            pending.insert(value)
            command = session.confirm_input()
            if command is not None:
                return command
            self.console.print("[yellow]A value is required (Ctrl+C to cancel).[/]")
        return None

    def _execute(self, command: Command | None) -> None:
        if isinstance(command, BackgroundCommand):
            with self.console.status(f"[cyan]{command.task}...[/]"):
                event = self.runner.execute(command.action, command.argv)
            self.session.complete(event)
        elif isinstance(command, InteractiveCommand):
            self.session.finish_handoff(self.handoff.run_attached(command))
