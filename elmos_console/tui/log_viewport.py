"""Append-only, scrollable log of command invocations and their output."""
from __future__ import annotations

SUCCESS_MARKER = "✓ Completed"
ERROR_PREFIX = "✗ Error: "
COMMAND_PREFIX = "▶ "
RETURN_PREFIX = "↩ "


def error_marker(error: object) -> str:
    return f"{ERROR_PREFIX}{error}"


class LogViewport:
    """Ordered text lines plus an independent scroll position.

    Lines are never removed. Every append snaps the view to the newest line,
    even if the operator had scrolled up; ``clear`` only moves the start of
    the visible window past the lines already recorded.
    """

    def __init__(self, height: int = 20):
        self.lines: list[str] = []
        self.height = max(1, height)
        self.offset = 0
        self._start = 0

    # ── content ────────────────────────────────────────────────────────

    def append(self, *lines: str) -> None:
        self.lines.extend(lines)
        self.goto_bottom()

    def clear(self) -> None:
        """Hide everything recorded so far from the view."""
        self._start = len(self.lines)
        self.offset = 0

    @property
    def window(self) -> list[str]:
        """Lines the view can scroll over (everything since the last clear)."""
        return self.lines[self._start :]

    def visible(self) -> list[str]:
        return self.window[self.offset : self.offset + self.height]

    # ── scrolling ──────────────────────────────────────────────────────

    def resize(self, height: int) -> None:
        at_bottom = self.at_bottom()
        self.height = max(1, height)
        if at_bottom:
            self.goto_bottom()
        else:
            self.offset = min(self.offset, self._max_offset())

    def _max_offset(self) -> int:
        return max(0, len(self.window) - self.height)

    def at_bottom(self) -> bool:
        return self.offset >= self._max_offset()

    def goto_bottom(self) -> None:
        self.offset = self._max_offset()

    def scroll_up(self, n: int = 1) -> None:
        self.offset = max(0, self.offset - n)

    def scroll_down(self, n: int = 1) -> None:
        self.offset = min(self._max_offset(), self.offset + n)

    def page_up(self) -> None:
        self.scroll_up(self.height)

    def page_down(self) -> None:
        self.scroll_down(self.height)

    def overflowing(self) -> bool:
        return len(self.window) > self.height

    def scroll_percent(self) -> int:
        """Scroll position as 0-100, 100 when the whole window fits."""
        max_offset = self._max_offset()
        if max_offset == 0:
            return 100
        return int(self.offset * 100 / max_offset)
