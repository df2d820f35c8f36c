"""Global fixtures: temp store, in-memory fake store, engine over tmp_path."""

import tempfile
from pathlib import Path
from typing import Optional

import pytest

from venom.core.engine import Engine
from venom.core.errors import NotFound, StoreUnavailable
from venom.database.sqlite import SqliteProjectStore
from venom.database.store import ProjectStore
from venom.models import Project
from venom.sync.exporter import Exporter


class FakeStore(ProjectStore):
    """In-memory ProjectStore recording every call."""

    def __init__(self, projects: Optional[dict[str, Project]] = None) -> None:
        self.projects = {n: p.model_copy(deep=True) for n, p in (projects or {}).items()}
        self.unavailable = False
        self.calls: list[tuple[str, object]] = []
        self.closed = False

    def add(self, project: Project) -> None:
        self.projects[project.name] = project.model_copy(deep=True)

    def wait_until_ready(self, timeout: float) -> None:
        self.calls.append(("connect", timeout))
        if self.unavailable:
            raise StoreUnavailable("connection refused")

    def list_all(self) -> dict[str, Project]:
        self.calls.append(("list", None))
        return {n: p.model_copy(deep=True) for n, p in self.projects.items()}

    def get(self, name: str) -> Project:
        self.calls.append(("get", name))
        if name not in self.projects:
            raise NotFound(name, operation="get")
        return self.projects[name].model_copy(deep=True)

    def create(self, project: Project) -> str:
        self.calls.append(("create", project.name))
        self.projects[project.name] = project.model_copy(deep=True)
        return project.name

    def update(self, name: str, project: Project) -> Project:
        self.calls.append(("update", name))
        if name not in self.projects:
            raise NotFound(name, operation="update")
        stored = project.model_copy(update={"name": name}, deep=True)
        self.projects[name] = stored
        return stored.model_copy(deep=True)

    def delete(self, name: str) -> None:
        self.calls.append(("delete", name))
        if name not in self.projects:
            raise NotFound(name, operation="delete")
        del self.projects[name]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_db_path() -> Path:
    """Temporary SQLite path (cleaned up after test)."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    if path.exists():
        path.unlink(missing_ok=True)


@pytest.fixture
def store(temp_db_path: Path) -> SqliteProjectStore:
    """Ready SqliteProjectStore with temp path."""
    s = SqliteProjectStore(temp_db_path)
    s.wait_until_ready(1.0)
    return s


@pytest.fixture
def sample_project() -> Project:
    """Single project for tests."""
    return Project(
        name="api",
        target_folder="services/api",
        file_name=".env",
        variables={"A": "1", "B": "2"},
    )


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def engine(fake_store: FakeStore, tmp_path: Path) -> Engine:
    """Engine over the fake store, exporting under tmp_path."""
    return Engine(store=fake_store, exporter=Exporter(tmp_path))
