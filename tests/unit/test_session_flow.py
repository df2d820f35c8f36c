"""End-to-end session scenarios: controller + scheduler + runner over a fake store."""

import asyncio
from pathlib import Path
from typing import Optional

import pytest

from venom.core.commands import Command, Quit
from venom.core.controller import Controller
from venom.core.engine import Engine
from venom.core.messages import KeyInput
from venom.core.runner import CommandRunner
from venom.core.scheduler import MessageQueue, Scheduler
from venom.core.session import Screen
from venom.models import Project
from venom.tui.views import variable_rows


class _Harness:
    """Plays the render loop: one consumer draining the queue into the controller."""

    def __init__(self, engine: Engine) -> None:
        self.controller = Controller()
        self.queue = MessageQueue()
        self.scheduler = Scheduler(
            CommandRunner(engine, connect_timeout=1.0, spinner_interval=0.0),
            self.queue,
            timeout=1.0,
        )
        self.quit: Optional[Quit] = None

    def _dispatch(self, command: Optional[Command]) -> None:
        if command is None:
            return
        if isinstance(command, Quit):
            self.quit = command
            self.scheduler.cancel_all()
            return
        self.scheduler.dispatch(command)

    async def settle(self) -> None:
        """Handle messages until no command is running and the queue is empty."""
        deadline = asyncio.get_running_loop().time() + 5.0
        while self.quit is None:
            assert asyncio.get_running_loop().time() < deadline, "session never settled"
            if self.queue.empty():
                if not self.scheduler.pending:
                    return
                await asyncio.sleep(0.001)
                continue
            envelope = self.queue.get_nowait()
            try:
                command = self.controller.handle(envelope.message)
            finally:
                envelope.handled.set()
            self._dispatch(command)

    async def start(self) -> None:
        self._dispatch(self.controller.init())
        await self.settle()

    async def keys(self, *keys: str) -> None:
        for key in keys:
            self._dispatch(self.controller.handle(KeyInput(key)))
            await self.settle()

    async def text(self, text: str) -> None:
        for ch in text:
            self._dispatch(self.controller.handle(KeyInput(ch, ch)))

    @property
    def session(self):
        return self.controller.session


@pytest.mark.asyncio
async def test_startup_loads_projects(engine: Engine, fake_store) -> None:
    fake_store.add(Project(name="X"))
    harness = _Harness(engine)
    await harness.start()
    assert harness.session.screen == Screen.PROJECTS_LIST
    assert list(harness.session.cache) == ["X"]


@pytest.mark.asyncio
async def test_startup_store_unavailable_quits(engine: Engine, fake_store) -> None:
    fake_store.unavailable = True
    harness = _Harness(engine)
    await harness.start()
    assert harness.quit is not None
    assert harness.quit.exit_code == 1
    assert ("list", None) not in fake_store.calls


@pytest.mark.asyncio
async def test_create_add_variable_and_export(
    engine: Engine, fake_store, tmp_path: Path
) -> None:
    """Create P, add A=1 and B=2, export: the file holds both lines."""
    harness = _Harness(engine)
    await harness.start()

    await harness.keys("a")
    await harness.text("P")
    await harness.keys("enter")
    await harness.text("out")
    await harness.keys("enter")
    await harness.text(".env")
    await harness.keys("enter", "enter")
    assert harness.session.screen == Screen.PROJECTS_LIST
    assert fake_store.projects["P"].file_name == ".env"

    await harness.keys("v")
    for key, value in (("A", "1"), ("B", "2")):
        await harness.keys("a")
        await harness.text(key)
        await harness.keys("enter")
        await harness.text(value)
        await harness.keys("enter", "enter")
        assert harness.session.screen == Screen.VARIABLES_LIST
    assert fake_store.projects["P"].variables == {"A": "1", "B": "2"}

    await harness.keys("p")
    assert harness.session.screen == Screen.VARIABLES_LIST
    assert (tmp_path / "out" / ".env").read_text() == "A=1\nB=2\n"


@pytest.mark.asyncio
async def test_delete_project_empties_list(engine: Engine, fake_store) -> None:
    fake_store.add(Project(name="X"))
    harness = _Harness(engine)
    await harness.start()
    await harness.keys("d", "y")
    assert harness.session.screen == Screen.PROJECTS_LIST
    assert len(harness.session.cache) == 0
    assert fake_store.projects == {}


@pytest.mark.asyncio
async def test_declined_delete_never_touches_store(engine: Engine, fake_store) -> None:
    fake_store.add(Project(name="X"))
    harness = _Harness(engine)
    await harness.start()
    await harness.keys("d", "n")
    assert ("delete", "X") not in fake_store.calls
    assert "X" in harness.session.cache


@pytest.mark.asyncio
async def test_failed_delete_shows_error_and_keeps_cache(engine: Engine, fake_store) -> None:
    """The project vanished remotely: error screen, cache untouched, list on any key."""
    fake_store.add(Project(name="X"))
    harness = _Harness(engine)
    await harness.start()
    del fake_store.projects["X"]

    await harness.keys("d", "y")
    assert harness.session.screen == Screen.ERROR
    assert "not found" in harness.session.error
    assert "X" in harness.session.cache

    await harness.keys("enter")
    assert harness.session.screen == Screen.PROJECTS_LIST


@pytest.mark.asyncio
async def test_create_db_next_to_existing_projects(engine: Engine, fake_store) -> None:
    """web and api exist; creating db with /d and .env yields three cached projects."""
    fake_store.add(Project(name="web"))
    fake_store.add(Project(name="api"))
    harness = _Harness(engine)
    await harness.start()

    await harness.keys("a")
    await harness.text("db")
    await harness.keys("enter")
    await harness.text("/d")
    await harness.keys("enter")
    await harness.text(".env")
    await harness.keys("enter", "enter")

    assert sorted(harness.session.cache) == ["api", "db", "web"]
    assert [c for c in fake_store.calls if c[0] == "create"] == [("create", "db")]
    assert harness.session.cache.get("db").target_folder == "/d"


@pytest.mark.asyncio
async def test_delete_last_variable_renders_zero_rows(engine: Engine, fake_store) -> None:
    fake_store.add(Project(name="web", variables={"X": "1"}))
    harness = _Harness(engine)
    await harness.start()

    await harness.keys("v", "d", "y")
    assert harness.session.screen == Screen.VARIABLES_LIST
    assert fake_store.projects["web"].variables == {}
    assert variable_rows(harness.session) == []


@pytest.mark.asyncio
async def test_cache_tracks_net_effect_of_mutations(engine: Engine, fake_store) -> None:
    """Create two projects, edit one, delete the other: cache mirrors the store."""
    harness = _Harness(engine)
    await harness.start()
    for name in ("one", "two"):
        await harness.keys("a")
        await harness.text(name)
        await harness.keys("enter", "enter", "enter", "enter")

    await harness.keys("e")
    await harness.text("dir")
    await harness.keys("enter", "enter", "enter")
    await harness.keys("j", "d", "y")

    assert list(harness.session.cache) == ["one"]
    assert harness.session.cache.all() == list(fake_store.projects.values())
    assert harness.session.cache.get("one").target_folder == "dir"
