"""Single Textual screen that draws whatever the session controller shows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from rich.console import RenderableType
from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Header, Static

if TYPE_CHECKING:
    from venom.tui.app import VenomApp


def controller_key(key: str, character: Optional[str]) -> str:
    """Map Textual key names to the key the controller matches on.

    Punctuation arrives named (``question_mark``, ``full_stop``); the
    character itself is used instead. Whitespace keeps its name (``space``,
    ``tab``, ``enter``).
    """
    if (
        character is not None
        and len(character) == 1
        and character.isprintable()
        and not character.isspace()
    ):
        return character
    return key


class SessionScreen(Screen, inherit_bindings=False):
    """Forwards every key to the app's message queue and displays the session view."""

    BINDINGS = []

    DEFAULT_CSS = """
    #session-banner {
        height: auto;
        content-align: center middle;
        color: #908dfb;
        text-style: bold;
        padding: 1 0;
    }

    #session-body {
        padding: 0 2;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="session-banner-container"):
            yield Static(Text("~ venom ~", justify="center"), id="session-banner")
        with Container(id="session-body"):
            yield Static("", id="session-view")

    def on_mount(self) -> None:
        """Draw the initial state once widgets exist."""
        app: VenomApp = self.app  # type: ignore[assignment]
        app.redraw()

    def on_key(self, event: events.Key) -> None:
        """Every key becomes controller input; nothing is handled locally."""
        event.stop()
        event.prevent_default()
        app: VenomApp = self.app  # type: ignore[assignment]
        app.post_key(controller_key(event.key, event.character), event.character)

    def show(self, renderable: RenderableType) -> None:
        """Replace the session view."""
        self.query_one("#session-view", Static).update(renderable)
