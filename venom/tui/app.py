"""Main TUI app: the render loop that drains the controller's message queue."""

import logging
from typing import Optional

from textual.app import App

from venom.config import Settings, get_settings
from venom.core.commands import Command, Quit
from venom.core.controller import Controller
from venom.core.engine import Engine
from venom.core.messages import KeyInput
from venom.core.runner import CommandRunner
from venom.core.scheduler import MessageQueue, Scheduler
from venom.tui.screens.session import SessionScreen
from venom.tui.views import render_session

logger = logging.getLogger(__name__)


class VenomApp(App):
    """Venom TUI. Starts in Loading and fetches all projects.

    Keys, spinner ticks and command completions all go through one queue;
    the consumer worker hands them to the controller one at a time and
    redraws after each.
    """

    TITLE = "Venom"
    SUB_TITLE = "Project variables"

    def __init__(
        self,
        engine: Engine,
        settings: Optional[Settings] = None,
        controller: Optional[Controller] = None,
        **kwargs,
    ):  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        settings = settings or get_settings()
        self._engine = engine
        self._controller = controller or Controller()
        self._queue = MessageQueue()
        self._scheduler = Scheduler(
            CommandRunner(
                engine,
                connect_timeout=settings.connect_timeout,
                spinner_interval=settings.spinner_interval,
            ),
            self._queue,
            timeout=settings.operation_timeout,
        )
        self._session_screen = SessionScreen()

    @property
    def controller(self) -> Controller:
        return self._controller

    def on_mount(self) -> None:
        """Show the session screen, start the consumer and the startup command."""
        self.push_screen(self._session_screen)
        self.run_worker(self._consume(), exclusive=True, group="controller")
        self._dispatch(self._controller.init())

    def on_unmount(self) -> None:
        """Cancel whatever is still running when the app goes away."""
        self._scheduler.cancel_all()

    def post_key(self, key: str, character: Optional[str] = None) -> None:
        """Queue one key press for the controller."""
        self._queue.post(KeyInput(key, character))

    async def _consume(self) -> None:
        """Handle queued messages serially; the only await is waiting for the next one."""
        while True:
            envelope = await self._queue.get()
            try:
                command = self._controller.handle(envelope.message)
            finally:
                envelope.handled.set()
            self.redraw()
            if command is not None:
                self._dispatch(command)

    def _dispatch(self, command: Command) -> None:
        if isinstance(command, Quit):
            self._quit(command)
            return
        self._scheduler.dispatch(command)

    def _quit(self, command: Quit) -> None:
        """Stop in-flight commands and leave the app."""
        logger.info("Quitting (exit code %d)", command.exit_code)
        self._scheduler.cancel_all()
        self.exit(return_code=command.exit_code, message=command.message or None)

    def redraw(self) -> None:
        """Draw the current session state."""
        if not self._session_screen.is_mounted:
            return
        self._session_screen.show(render_session(self._controller.session))
