"""Session mode and the messages exchanged with the event loop."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..errors import ConsoleError
from .actions import ActionID


class SessionMode(Enum):
    """Exactly one mode is active at a time."""

    BROWSING = "browsing"
    INPUT_CAPTURE = "input_capture"
    RUNNING = "running"
    INTERACTIVE_HANDOFF = "interactive_handoff"
    QUITTING = "quitting"


@dataclass(frozen=True)
class BackgroundCommand:
    """Request to run an action with captured output."""

    action: ActionID
    argv: tuple[str, ...]
    display: str
    task: str


@dataclass(frozen=True)
class InteractiveCommand:
    """Request to hand the terminal to an action."""

    action: ActionID
    argv: tuple[str, ...]
    display: str


Command = Union[BackgroundCommand, InteractiveCommand]


@dataclass(frozen=True)
class CompletionEvent:
    """The one message a background command sends back when it finishes."""

    action: ActionID
    error: ConsoleError | None = None
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class HandoffResult:
    """Outcome of an interactive handoff once the console has resumed."""

    action: ActionID
    returncode: int | None = None
    error: ConsoleError | None = None
