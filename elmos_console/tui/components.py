"""Rendering helpers: project session state onto formatted text."""
from __future__ import annotations

from typing import TYPE_CHECKING

import questionary
from prompt_toolkit.formatted_text import StyleAndTextTuples

from .log_viewport import COMMAND_PREFIX, ERROR_PREFIX, RETURN_PREFIX, SUCCESS_MARKER, LogViewport
from .menu import MenuNode
from .state import SessionMode

if TYPE_CHECKING:
    from .session import ConsoleSession


# ═══════════════════════════════════════════════════════════════════════════════
# BRAND STYLING
# ═══════════════════════════════════════════════════════════════════════════════

# Shared by the full-screen console and the questionary prompts of line mode.
BRAND_STYLE = questionary.Style([
    ("qmark", "fg:#af87ff bold"),
    ("question", "bold"),
    ("answer", "fg:#00ffff bold"),
    ("highlighted", "fg:#af87ff bold"),
    ("pointer", "fg:#af87ff bold"),
    ("selected", "fg:#00ffff"),
    ("frame.border", "fg:#585858"),
    ("frame.label", "fg:#af87ff bold"),
    ("menu", "fg:#8a8a8a"),
    ("menu.selected", "bg:#af87ff fg:#ffffff bold"),
    ("menu.back", "fg:#444444"),
    ("hint", "fg:#00ffff"),
    ("desc", "fg:#6c6c6c italic"),
    ("input.label", "fg:#ffaf00 bold"),
    ("input", "bg:#303030 fg:#ffffff"),
    ("input.placeholder", "bg:#303030 fg:#6c6c6c"),
    ("input.cursor", "reverse"),
    ("log", ""),
    ("log.command", "fg:#00ffff"),
    ("log.success", "fg:#87ff87"),
    ("log.error", "fg:#ff5f5f"),
    ("log.return", "fg:#ffaf00"),
    ("footer", "fg:#444444"),
    ("footer.key", "fg:#00ffff"),
])

SPINNER_FRAMES = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")

FOOTER_KEYS = (
    ("↑↓", "Navigate"),
    ("⏎", "Select"),
    ("Esc", "Back"),
    ("[ ]", "Scroll"),
    ("c", "Clear"),
    ("q", "Quit"),
)


# ═══════════════════════════════════════════════════════════════════════════════
# LEFT PANE
# ═══════════════════════════════════════════════════════════════════════════════

def item_prefix(node: MenuNode) -> str:
    if node.is_category:
        return "▸ "
    if node.interactive:
        return "⚡"
    if node.needs_input:
        return "✎ "
    return "• "


def menu_title(session: ConsoleSession) -> str:
    return session.nav.current.title


def render_menu(session: ConsoleSession) -> StyleAndTextTuples:
    """Menu items of the current level with the cursor highlighted."""
    out: StyleAndTextTuples = []
    if not session.nav.at_root():
        out.append(("class:menu.back", "  ← Back (Esc)\n\n"))
    level = session.nav.current
    for index, node in enumerate(level.items):
        label = item_prefix(node) + node.label
        if index == level.cursor:
            out.append(("class:menu.selected", f" {label} "))
        else:
            out.append(("class:menu", label))
        out.append(("", "\n"))
    return out


# ═══════════════════════════════════════════════════════════════════════════════
# RIGHT PANE
# ═══════════════════════════════════════════════════════════════════════════════

def output_title(session: ConsoleSession, spinner_frame: int = 0) -> str:
    """Right pane title: task + spinner, input marker, or "Output"."""
    if session.mode is SessionMode.RUNNING:
        title = f"{SPINNER_FRAMES[spinner_frame % len(SPINNER_FRAMES)]} {session.current_task}"
    elif session.mode is SessionMode.INPUT_CAPTURE:
        title = "📝 Input Required"
    else:
        title = "Output"
    if session.log.overflowing():
        title += f" [{session.log.scroll_percent()}%]"
    return title


def render_details(session: ConsoleSession) -> StyleAndTextTuples:
    """Input field while capturing, otherwise a hint for the selected node."""
    out: StyleAndTextTuples = []
    pending = session.pending
    if session.mode is SessionMode.INPUT_CAPTURE and pending is not None:
        out.append(("class:input.label", pending.prompt + "\n\n"))
        out.append(("class:input", " "))
        if pending.buffer:
            at = pending.position
            out.append(("class:input", pending.buffer[:at]))
            out.append(("class:input.cursor", pending.buffer[at : at + 1] or " "))
            out.append(("class:input", pending.buffer[at + 1 :]))
        else:
            out.append(("class:input.cursor", " "))
            out.append(("class:input.placeholder", pending.placeholder))
        out.append(("class:input", " "))
        out.append(("", "\n\n"))
        out.append(("class:desc", "  Press Enter to confirm, Esc to cancel\n\n"))
        return out

    if session.mode is not SessionMode.BROWSING:
        return out

    node = session.nav.selected()
    if node.command:
        out.append(("class:hint", f" $ {node.command} \n"))
        if node.description:
            out.append(("class:desc", f"  {node.description}\n"))
        if node.needs_input:
            out.append(("class:input.label", f"\n  ✎ Press Enter to type: {node.input_prompt}\n"))
    elif node.is_category:
        out.append(("class:desc", f"  Press Enter to expand → {node.description}\n"))
    out.append(("", "\n"))
    return out


def log_line_style(line: str) -> str:
    if line.startswith(COMMAND_PREFIX):
        return "class:log.command"
    if line == SUCCESS_MARKER:
        return "class:log.success"
    if line.startswith(ERROR_PREFIX):
        return "class:log.error"
    if line.startswith(RETURN_PREFIX):
        return "class:log.return"
    return "class:log"


def render_log(log: LogViewport) -> StyleAndTextTuples:
    out: StyleAndTextTuples = []
    for line in log.visible():
        out.append((log_line_style(line), "  " + line))
        out.append(("", "\n"))
    return out


def render_footer() -> StyleAndTextTuples:
    out: StyleAndTextTuples = []
    for key, label in FOOTER_KEYS:
        out.append(("class:footer.key", key))
        out.append(("class:footer", f" {label}  "))
    return out
