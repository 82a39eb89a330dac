"""Full-screen console: event loop, key bindings and layout."""
from __future__ import annotations

import asyncio
import logging

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.output import Output
from prompt_toolkit.widgets import Frame

from ..errors import TerminalHandoffError
from .components import (
    BRAND_STYLE,
    menu_title,
    output_title,
    render_details,
    render_footer,
    render_log,
    render_menu,
)
from .handoff import InteractiveHandoff
from .runner import AsyncCommandRunner
from .session import ConsoleSession
from .state import BackgroundCommand, Command, CompletionEvent, InteractiveCommand, SessionMode

logger = logging.getLogger(__name__)


class ConsoleApp:
    """Wires a :class:`ConsoleSession` to a prompt_toolkit application.

    One asyncio loop handles keys, resizes, spinner ticks and completion
    events, one message at a time. Background commands report back through
    ``call_soon_threadsafe``; interactive commands block the loop inside
    ``in_terminal`` until the child exits.
    """

    def __init__(
        self,
        session: ConsoleSession,
        runner: AsyncCommandRunner,
        handoff: InteractiveHandoff,
        spinner_interval: float = 0.1,
        input: Input | None = None,
        output: Output | None = None,
    ):
        self.session = session
        self.runner = runner
        self.handoff = handoff
        self.spinner_interval = spinner_interval
        self.spinner_frame = 0

        self._log_window = Window(
            FormattedTextControl(self._log_text),
            wrap_lines=False,
        )
        self.app: Application = Application(
            layout=self._build_layout(),
            key_bindings=self._build_key_bindings(),
            style=BRAND_STYLE,
            full_screen=True,
            mouse_support=False,
            input=input,
            output=output,
        )
        self.app.ttimeoutlen = 0.05

    # ═══════════════════════════════════════════════════════════════════════
    # LAYOUT
    # ═══════════════════════════════════════════════════════════════════════

    def _log_text(self):
        info = self._log_window.render_info
        if info is not None:
            self.session.log.resize(info.window_height)
        return render_log(self.session.log)

    def _build_layout(self) -> Layout:
        menu = Frame(
            Window(FormattedTextControl(lambda: render_menu(self.session)), wrap_lines=False),
            title=lambda: f"─ {menu_title(self.session)} ─",
            width=Dimension(weight=3, min=25),
        )
        output = Frame(
            HSplit([
                Window(
                    FormattedTextControl(lambda: render_details(self.session)),
                    dont_extend_height=True,
                    wrap_lines=True,
                ),
                self._log_window,
            ]),
            title=lambda: f"─ {output_title(self.session, self.spinner_frame)} ─",
            width=Dimension(weight=7),
        )
        footer = Window(FormattedTextControl(render_footer), height=1)
        return Layout(HSplit([VSplit([menu, output]), footer]))

    # ═══════════════════════════════════════════════════════════════════════
    # KEY BINDINGS
    # ═══════════════════════════════════════════════════════════════════════

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        session = self.session

        browsing = Condition(lambda: session.mode is SessionMode.BROWSING)
        capturing = Condition(lambda: session.mode is SessionMode.INPUT_CAPTURE)
        running = Condition(lambda: session.mode is SessionMode.RUNNING)
        live = browsing | running

        # ── browsing ───────────────────────────────────────────────────

        @kb.add("up", filter=browsing)
        @kb.add("k", filter=browsing)
        def _up(event: KeyPressEvent) -> None:
            session.move_cursor(-1)

        @kb.add("down", filter=browsing)
        @kb.add("j", filter=browsing)
        def _down(event: KeyPressEvent) -> None:
            session.move_cursor(1)

        @kb.add("enter", filter=browsing)
        def _enter(event: KeyPressEvent) -> None:
            self.dispatch(session.enter())

        @kb.add("escape", filter=browsing)
        @kb.add("backspace", filter=browsing)
        def _back(event: KeyPressEvent) -> None:
            session.back()

        @kb.add("c", filter=browsing)
        def _clear(event: KeyPressEvent) -> None:
            session.clear_log()

        # ── live while a command runs ──────────────────────────────────

        @kb.add("q", filter=live)
        @kb.add("c-c", filter=live)
        def _quit(event: KeyPressEvent) -> None:
            session.quit_key()
            if session.mode is SessionMode.QUITTING:
                event.app.exit()

        @kb.add("[", filter=live)
        @kb.add("c-u", filter=live)
        @kb.add("pageup", filter=live)
        def _page_up(event: KeyPressEvent) -> None:
            session.log.page_up()

        @kb.add("]", filter=live)
        @kb.add("c-d", filter=live)
        @kb.add("pagedown", filter=live)
        def _page_down(event: KeyPressEvent) -> None:
            session.log.page_down()

        @kb.add("{", filter=live)
        def _line_up(event: KeyPressEvent) -> None:
            session.log.scroll_up()

        @kb.add("}", filter=live)
        def _line_down(event: KeyPressEvent) -> None:
            session.log.scroll_down()

        # ── input capture ──────────────────────────────────────────────

        @kb.add(Keys.Any, filter=capturing)
        def _type(event: KeyPressEvent) -> None:
            if session.pending is not None and event.data.isprintable():
                session.pending.insert(event.data)

        @kb.add(Keys.BracketedPaste, filter=capturing)
        def _paste(event: KeyPressEvent) -> None:
            if session.pending is not None:
                session.pending.insert(event.data.replace("\r", " ").replace("\n", " "))

        @kb.add("backspace", filter=capturing)
        def _delete_backward(event: KeyPressEvent) -> None:
            if session.pending is not None:
                session.pending.delete_backward()

        @kb.add("delete", filter=capturing)
        def _delete_forward(event: KeyPressEvent) -> None:
            if session.pending is not None:
                session.pending.delete_forward()

        @kb.add("left", filter=capturing)
        def _left(event: KeyPressEvent) -> None:
            if session.pending is not None:
                session.pending.move(-1)

        @kb.add("right", filter=capturing)
        def _right(event: KeyPressEvent) -> None:
            if session.pending is not None:
                session.pending.move(1)

        @kb.add("home", filter=capturing)
        def _home(event: KeyPressEvent) -> None:
            if session.pending is not None:
                session.pending.home()

        @kb.add("end", filter=capturing)
        def _end(event: KeyPressEvent) -> None:
            if session.pending is not None:
                session.pending.end()

        @kb.add("enter", filter=capturing)
        def _confirm(event: KeyPressEvent) -> None:
            self.dispatch(session.confirm_input())

        @kb.add("escape", filter=capturing)
        @kb.add("c-c", filter=capturing)
        def _cancel(event: KeyPressEvent) -> None:
            session.cancel_input()

        return kb

    # ═══════════════════════════════════════════════════════════════════════
    # COMMAND DISPATCH
    # ═══════════════════════════════════════════════════════════════════════

    def dispatch(self, command: Command | None) -> None:
        """Start whatever the session asked for; must run on the loop."""
        if isinstance(command, BackgroundCommand):
            loop = asyncio.get_running_loop()
            self.runner.run(command, lambda event: self._deliver(loop, event))
        elif isinstance(command, InteractiveCommand):
            self.app.create_background_task(self._handoff(command))

    def _deliver(self, loop: asyncio.AbstractEventLoop, event: CompletionEvent) -> None:
        # Called on the worker thread.
        try:
            loop.call_soon_threadsafe(self.on_complete, event)
        except RuntimeError:
            logger.info("console closed before %s finished; result dropped", event.action)

    def on_complete(self, event: CompletionEvent) -> None:
        self.session.complete(event)
        self.app.invalidate()

    async def _handoff(self, command: InteractiveCommand) -> None:
        try:
            result = await self.handoff.run(command)
        except TerminalHandoffError as exc:
            logger.error("%s", exc)
            self.app.exit(exception=exc)
            return
        self.session.finish_handoff(result)
        self.app.invalidate()

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.spinner_interval)
            if self.session.mode is SessionMode.RUNNING:
                self.spinner_frame += 1
                self.app.invalidate()

    def _pre_run(self) -> None:
        self.app.create_background_task(self._tick())

    def run(self) -> None:
        """Run until the operator quits.

        Raises:
            TerminalHandoffError: terminal mode was lost during a handoff.
        """
        self.app.run(pre_run=self._pre_run)
