"""Navigation stack over the menu tree."""
from __future__ import annotations

from dataclasses import dataclass

from .menu import MenuNode, MenuTree


@dataclass
class MenuLevel:
    """One frame of the navigation stack: a sibling list and its cursor."""

    items: tuple[MenuNode, ...]
    title: str
    cursor: int = 0

    def selected(self) -> MenuNode:
        return self.items[self.cursor]


class NavigationController:
    """Stack-based walker over a :class:`MenuTree`.

    - Enter on a category pushes the current level and shows its children
    - Back pops, restoring the parent level with its cursor untouched
    - The stack is empty exactly when the root menu is displayed
    """

    def __init__(self, tree: MenuTree):
        self.tree = tree
        self.current = MenuLevel(items=tree.roots, title=tree.title)
        self.stack: list[MenuLevel] = []

    def move_cursor(self, delta: int) -> None:
        """Move the cursor by ``delta``, clamped to the current level."""
        last = len(self.current.items) - 1
        self.current.cursor = max(0, min(last, self.current.cursor + delta))

    def selected(self) -> MenuNode:
        return self.current.selected()

    def enter(self) -> MenuNode | None:
        """Descend into the selected category or hand back the selected leaf.

        Returns:
            The selected leaf, or None when a category was entered
        """
        node = self.current.selected()
        if node.is_category:
            self.stack.append(self.current)
            self.current = MenuLevel(items=node.children, title=node.label)
            return None
        return node

    def back(self) -> bool:
        """Return to the parent level.

        Returns:
            True if a level was popped, False at the root
        """
        if not self.stack:
            return False
        self.current = self.stack.pop()
        return True

    def home(self) -> None:
        """Unwind to the root level, keeping the root cursor."""
        if self.stack:
            self.current = self.stack[0]
            self.stack.clear()

    def at_root(self) -> bool:
        return not self.stack

    def depth(self) -> int:
        """Number of levels above the one displayed."""
        return len(self.stack)

    def breadcrumbs(self) -> str:
        """Breadcrumb path like "ELMOS > Modules"."""
        return " > ".join(level.title for level in [*self.stack, self.current])
