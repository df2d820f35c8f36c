"""Unit tests for the render loop wiring (no terminal)."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import pytest

from venom.config import Settings
from venom.core.commands import LoadProjects, Quit
from venom.core.controller import Controller
from venom.core.engine import Engine
from venom.core.messages import ProjectsLoaded
from venom.core.session import Screen
from venom.models import Project
from venom.tui.app import VenomApp
from venom.tui.screens.session import SessionScreen, controller_key


def _app(engine: Engine) -> VenomApp:
    settings = Settings(spinner_interval=0.0, connect_timeout=1.0, operation_timeout=1.0)
    return VenomApp(engine, settings=settings)


def test_quit_cancels_commands_and_exits_with_code(monkeypatch: Any, engine: Engine) -> None:
    app = _app(engine)
    exits: list[dict[str, object]] = []
    cancelled: list[bool] = []
    monkeypatch.setattr(app, "exit", lambda **kwargs: exits.append(kwargs))
    monkeypatch.setattr(app._scheduler, "cancel_all", lambda: cancelled.append(True))

    app._dispatch(Quit(exit_code=1, message="Store unavailable: refused"))

    assert cancelled == [True]
    assert exits == [{"return_code": 1, "message": "Store unavailable: refused"}]


def test_non_quit_commands_go_to_scheduler(monkeypatch: Any, engine: Engine) -> None:
    app = _app(engine)
    dispatched: list[object] = []
    monkeypatch.setattr(app._scheduler, "dispatch", dispatched.append)
    app._dispatch(LoadProjects())
    assert dispatched == [LoadProjects()]


def test_redraw_noop_before_mount(engine: Engine) -> None:
    _app(engine).redraw()


@pytest.mark.asyncio
async def test_consume_routes_keys_to_controller(monkeypatch: Any, engine: Engine) -> None:
    """Queued keys reach the controller in order and trigger a redraw each."""
    app = _app(engine)
    app.controller.handle(ProjectsLoaded({"X": Project(name="X")}))
    redraws: list[Screen] = []
    monkeypatch.setattr(app, "redraw", lambda: redraws.append(app.controller.session.screen))

    consumer = asyncio.create_task(app._consume())
    app.post_key("d")
    app.post_key("n")
    await asyncio.sleep(0.01)
    consumer.cancel()

    assert redraws == [Screen.CONFIRM, Screen.PROJECTS_LIST]
    assert "X" in app.controller.session.cache


@pytest.mark.asyncio
async def test_consume_dispatches_returned_command(monkeypatch: Any, engine: Engine) -> None:
    app = _app(engine)
    app.controller.handle(ProjectsLoaded({}))
    dispatched: list[object] = []
    monkeypatch.setattr(app, "redraw", lambda: None)
    monkeypatch.setattr(app, "_dispatch", dispatched.append)

    consumer = asyncio.create_task(app._consume())
    app.post_key("q")
    await asyncio.sleep(0.01)
    consumer.cancel()

    assert dispatched == [Quit()]


def test_uses_given_controller(engine: Engine) -> None:
    controller = Controller()
    app = VenomApp(engine, settings=Settings(), controller=controller)
    assert app.controller is controller


class _FakeStatic:
    def __init__(self) -> None:
        self.updates: list[object] = []

    def update(self, renderable: object) -> None:
        self.updates.append(renderable)


def test_session_screen_forwards_keys(monkeypatch: Any) -> None:
    """Every key is stopped locally and posted to the app queue."""
    posted: list[tuple[str, object]] = []
    fake_app = SimpleNamespace(post_key=lambda key, character: posted.append((key, character)))
    monkeypatch.setattr(SessionScreen, "app", property(lambda self: fake_app))
    screen = SessionScreen()
    stopped: list[str] = []
    event = SimpleNamespace(
        key="a",
        character="a",
        stop=lambda: stopped.append("stop"),
        prevent_default=lambda: stopped.append("prevent"),
    )

    screen.on_key(event)  # type: ignore[arg-type]

    assert posted == [("a", "a")]
    assert stopped == ["stop", "prevent"]


def test_session_screen_show_updates_view(monkeypatch: Any) -> None:
    screen = SessionScreen()
    static = _FakeStatic()
    monkeypatch.setattr(screen, "query_one", lambda *args, **kwargs: static)
    screen.show("hello")
    assert static.updates == ["hello"]


def test_controller_key_uses_printable_character() -> None:
    assert controller_key("question_mark", "?") == "?"
    assert controller_key("full_stop", ".") == "."
    assert controller_key("a", "a") == "a"
    assert controller_key("space", " ") == "space"
    assert controller_key("enter", "\r") == "enter"
    assert controller_key("ctrl+u", "\x15") == "ctrl+u"
    assert controller_key("up", None) == "up"


async def _wait_for_screen(pilot: Any, app: VenomApp, screen: Screen) -> None:
    for _ in range(200):
        if app.controller.session.screen == screen:
            return
        await pilot.pause(0.01)
    raise AssertionError(f"never reached {screen}, stuck on {app.controller.session.screen}")


@pytest.mark.asyncio
async def test_help_key_toggles_help_in_running_app(engine: Engine, fake_store) -> None:
    """Pressing ? in the real app expands and collapses the key help."""
    fake_store.add(Project(name="X"))
    app = VenomApp(
        engine,
        settings=Settings(spinner_interval=0.01, connect_timeout=1.0, operation_timeout=1.0),
    )
    async with app.run_test() as pilot:
        await _wait_for_screen(pilot, app, Screen.PROJECTS_LIST)

        await pilot.press("?")
        await pilot.pause(0.05)
        assert app.controller.session.show_help is True

        await pilot.press("?")
        await pilot.pause(0.05)
        assert app.controller.session.show_help is False


@pytest.mark.asyncio
async def test_typed_punctuation_reaches_form_in_running_app(engine: Engine, fake_store) -> None:
    app = VenomApp(
        engine,
        settings=Settings(spinner_interval=0.01, connect_timeout=1.0, operation_timeout=1.0),
    )
    async with app.run_test() as pilot:
        await _wait_for_screen(pilot, app, Screen.PROJECTS_LIST)
        await pilot.press("a", "d", "b", "enter", "enter", "full_stop", "e", "n", "v")
        await pilot.pause(0.05)
        form = app.controller.session.form
        assert form.get_string("name") == "db"
        assert form.get_string("file") == ".env"
