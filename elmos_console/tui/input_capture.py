"""Single-line text capture for actions that take a parameter."""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import InputValidationError
from .actions import ActionID
from .menu import MenuNode


@dataclass
class PendingAction:
    """Action waiting for its value while input capture is active."""

    action: ActionID
    node: MenuNode
    prompt: str
    placeholder: str
    buffer: str = ""
    position: int = 0
    limit: int = 64

    @classmethod
    def for_node(cls, node: MenuNode, limit: int = 64) -> PendingAction:
        return cls(
            action=node.require_action(),
            node=node,
            prompt=node.input_prompt,
            placeholder=node.input_placeholder,
            limit=limit,
        )

    # ── editing ────────────────────────────────────────────────────────

    def insert(self, text: str) -> None:
        """Insert printable ``text`` at the edit position, up to ``limit``."""
        text = "".join(ch for ch in text if ch.isprintable())
        room = self.limit - len(self.buffer)
        if room <= 0 or not text:
            return
        text = text[:room]
        self.buffer = self.buffer[: self.position] + text + self.buffer[self.position :]
        self.position += len(text)

    def delete_backward(self) -> None:
        if self.position == 0:
            return
        self.buffer = self.buffer[: self.position - 1] + self.buffer[self.position :]
        self.position -= 1

    def delete_forward(self) -> None:
        if self.position >= len(self.buffer):
            return
        self.buffer = self.buffer[: self.position] + self.buffer[self.position + 1 :]

    def move(self, delta: int) -> None:
        self.position = max(0, min(len(self.buffer), self.position + delta))

    def home(self) -> None:
        self.position = 0

    def end(self) -> None:
        self.position = len(self.buffer)

    # ── submission ─────────────────────────────────────────────────────

    def submit(self) -> str:
        """Return the trimmed value.

        Raises:
            InputValidationError: the trimmed buffer is empty.
        """
        value = self.buffer.strip()
        if not value:
            raise InputValidationError(f"{self.prompt} value is required")
        return value
