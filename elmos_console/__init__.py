"""elmos-console: interactive menu-driven command console for elmos."""

__version__ = "0.1.0"
