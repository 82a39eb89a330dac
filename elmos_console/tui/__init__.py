"""TUI (Terminal User Interface) module for elmos_console.

A menu pane, a details/log pane and a key footer on one screen, driven by a
single session state machine.
"""
from .menu import MenuNode, MenuTree, default_menu
from .navigator import NavigationController
from .session import ConsoleSession
from .state import SessionMode

__all__ = ["ConsoleSession", "MenuNode", "MenuTree", "NavigationController", "SessionMode", "default_menu"]
