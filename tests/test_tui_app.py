"""Tests for ConsoleApp wiring: key bindings and completion delivery."""
from __future__ import annotations

import asyncio
import sys
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from elmos_console.errors import TerminalHandoffError
from elmos_console.tui.actions import DEFAULT_ARGV, ActionID, ActionTable
from elmos_console.tui.app import ConsoleApp
from elmos_console.tui.handoff import InteractiveHandoff
from elmos_console.tui.menu import default_menu
from elmos_console.tui.runner import AsyncCommandRunner
from elmos_console.tui.session import ConsoleSession
from elmos_console.tui.state import CompletionEvent, SessionMode


@asynccontextmanager
async def _terminal():
    yield


@asynccontextmanager
async def _broken_terminal():
    yield
    raise OSError("terminal gone")


@pytest.fixture
def session():
    """Session whose Doctor action runs a tiny Python snippet."""
    builders = dict(DEFAULT_ARGV)
    builders[ActionID.DOCTOR_CHECK] = lambda _value: ["-c", "print('ok')"]
    return ConsoleSession(default_menu(), ActionTable(builders))


@pytest.fixture
def console_app(session):
    with create_pipe_input() as pipe_input:
        yield ConsoleApp(
            session,
            AsyncCommandRunner(sys.executable),
            InteractiveHandoff("elmos", terminal=_terminal, spawn=lambda cmd: 0),
            input=pipe_input,
            output=DummyOutput(),
        )


def _press(console_app: ConsoleApp, key: str, data: str = "") -> MagicMock:
    """Run the first active binding for ``key`` with a fake event."""
    bindings = [
        b for b in console_app.app.key_bindings.get_bindings_for_keys((key,)) if b.filter()
    ]
    assert bindings, f"no active binding for {key!r}"
    event = MagicMock()
    event.data = data or key
    bindings[-1].handler(event)
    return event


def test_navigation_keys(console_app, session):
    """Test j/down/k move the cursor while browsing."""
    _press(console_app, "j")
    _press(console_app, "down")
    assert session.nav.current.cursor == 2
    _press(console_app, "k")
    assert session.nav.current.cursor == 1


def test_quit_key_exits_at_root(console_app, session):
    """Test q at the root exits the application."""
    event = _press(console_app, "q")
    assert session.mode is SessionMode.QUITTING
    event.app.exit.assert_called_once_with()


def test_quit_key_pops_in_submenu(console_app, session):
    """Test q in a submenu pops one level without exiting."""
    session.enter()
    event = _press(console_app, "q")
    assert session.nav.at_root()
    event.app.exit.assert_not_called()


def test_typing_goes_to_input_buffer(console_app, session):
    """Test letter keys are text while capturing input."""
    session.move_cursor(2)
    session.enter()
    session.move_cursor(2)
    session.enter()
    assert session.mode is SessionMode.INPUT_CAPTURE

    for ch in "kqj":
        _press(console_app, ch)
    assert session.pending.buffer == "kqj"
    assert session.nav.current.cursor == 2

    _press(console_app, "c-c")
    assert session.mode is SessionMode.BROWSING


def test_background_command_completes_on_loop(console_app, session):
    """Test a background command reports back through the event loop."""
    async def scenario():
        session.move_cursor(8)
        console_app.dispatch(session.enter())
        assert session.mode is SessionMode.RUNNING
        for _ in range(300):
            if session.mode is SessionMode.BROWSING:
                break
            await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert session.mode is SessionMode.BROWSING
    assert session.log.lines == ["▶ elmos doctor", "ok", "✓ Completed"]


def test_scroll_keys_live_while_running(console_app, session):
    """Test log paging works while a command runs."""
    session.log.resize(2)
    session.log.append("a", "b", "c", "d")
    session.move_cursor(8)
    session.enter()

    _press(console_app, "[")
    assert not session.log.at_bottom()
    _press(console_app, "]")
    assert session.log.at_bottom()


def test_completion_after_loop_closed_is_dropped(console_app, session):
    """Test a late completion after shutdown is dropped quietly."""
    loop = asyncio.new_event_loop()
    loop.close()
    console_app._deliver(loop, CompletionEvent(action=ActionID.DOCTOR_CHECK))
    assert session.log.lines == []


def test_handoff_resumes_browsing(console_app, session):
    """Test a finished handoff returns the session to browsing."""
    session.move_cursor(4)
    session.enter()
    command = session.enter()

    asyncio.run(console_app._handoff(command))
    assert session.mode is SessionMode.BROWSING
    assert session.log.lines[-1] == "↩ Control returned (exit status 0)"


def test_handoff_failure_exits_app(console_app, session, monkeypatch):
    """Test a terminal restore failure exits the application with the error."""
    console_app.handoff = InteractiveHandoff("elmos", terminal=_broken_terminal, spawn=lambda cmd: 0)
    exit_mock = MagicMock()
    monkeypatch.setattr(console_app.app, "exit", exit_mock)

    session.move_cursor(4)
    session.enter()
    command = session.enter()
    asyncio.run(console_app._handoff(command))

    (call,) = exit_mock.call_args_list
    assert isinstance(call.kwargs["exception"], TerminalHandoffError)
