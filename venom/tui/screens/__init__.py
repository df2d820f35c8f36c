"""Textual screens."""

from venom.tui.screens.session import SessionScreen

__all__ = ["SessionScreen"]
