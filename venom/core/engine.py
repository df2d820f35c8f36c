"""Project operations over the document store and the env-file exporter."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from venom.config import Settings, get_settings
from venom.core.errors import OperationFailed
from venom.database.factory import create_store
from venom.database.store import ProjectStore
from venom.models import Project
from venom.sync.exporter import Exporter

logger = logging.getLogger(__name__)


class Engine:
    """Orchestrates store CRUD and exports. Synchronous; callers own threading."""

    def __init__(
        self,
        store: Optional[ProjectStore] = None,
        exporter: Optional[Exporter] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self._store = store or create_store(settings)
        self._exporter = exporter or Exporter(settings.export_base_dir)

    def connect(self, timeout: float) -> None:
        """Wait for the store to become ready (raises StoreUnavailable)."""
        logger.info("Connecting to project store (timeout %.1fs)", timeout)
        self._store.wait_until_ready(timeout)

    def close(self) -> None:
        self._store.close()

    def list_projects(self) -> dict[str, Project]:
        return self._store.list_all()

    def get_project(self, name: str) -> Project:
        return self._store.get(name)

    def create_project(self, project: Project) -> Project:
        """Upsert a project and return it as stored under its name."""
        name = self._store.create(project)
        logger.info("Created project %s", name)
        return project.model_copy(update={"name": name}, deep=True)

    def update_project(self, project: Project) -> Project:
        """Replace a project; its name is the key and is never changed."""
        stored = self._store.update(project.name, project)
        logger.info("Updated project %s", stored.name)
        return stored

    def delete_project(self, name: str) -> None:
        self._store.delete(name)
        logger.info("Deleted project %s", name)

    def export(self, projects: Iterable[Project]) -> list[Path]:
        """Write env files for ``projects`` (raises ExportFailed)."""
        return self._exporter.export(projects)

    # ---- Single-shot edits (CLI) ----
    def add_project(self, name: str, file_name: str = "", target_folder: str = "") -> Project:
        return self.create_project(
            Project(name=name, file_name=file_name, target_folder=target_folder)
        )

    def edit_project(self, name: str, file_name: str, target_folder: str) -> Project:
        project = self._store.get(name)
        project.file_name = file_name
        project.target_folder = target_folder
        return self.update_project(project)

    def set_variable(self, name: str, key: str, value: str) -> Project:
        project = self._store.get(name)
        project.variables[key] = value
        return self.update_project(project)

    def unset_variable(self, name: str, key: str) -> Project:
        project = self._store.get(name)
        if key not in project.variables:
            raise OperationFailed(
                f"Key {key} not found in project {name}", operation="unset"
            )
        del project.variables[key]
        return self.update_project(project)

    def pull(self, name: Optional[str] = None) -> list[Path]:
        """Export one named project, or every project when ``name`` is None."""
        if name:
            projects = [self._store.get(name)]
        else:
            projects = list(self._store.list_all().values())
        return self.export(projects)
