"""Executes operation commands off the render loop and returns one message each."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from venom.core.commands import (
    ConnectStore,
    CreateProject,
    DeleteProject,
    ExportProjects,
    LoadProjects,
    Operation,
    SaveVariables,
    SpinnerTick,
    UpdateProject,
)
from venom.core.engine import Engine
from venom.core.messages import (
    Message,
    ProjectCreated,
    ProjectDeleted,
    ProjectsExported,
    ProjectsLoaded,
    ProjectUpdated,
    SpinnerTicked,
    StoreConnected,
    VariablesSaved,
)

logger = logging.getLogger(__name__)


class CommandRunner:
    """Maps each operation type to a coroutine around a blocking Engine call."""

    def __init__(
        self,
        engine: Engine,
        connect_timeout: float = 5.0,
        spinner_interval: float = 0.1,
    ) -> None:
        self._engine = engine
        self._connect_timeout = connect_timeout
        self._spinner_interval = spinner_interval
        self._handlers: dict[type, Callable[[Operation], Awaitable[Message]]] = {
            ConnectStore: self._connect,
            LoadProjects: self._load,
            CreateProject: self._create,
            UpdateProject: self._update,
            DeleteProject: self._delete,
            SaveVariables: self._save_variables,
            ExportProjects: self._export,
            SpinnerTick: self._tick,
        }

    async def run(self, operation: Operation) -> Message:
        """Run one operation. Errors propagate to the scheduler."""
        handler = self._handlers.get(type(operation))
        if handler is None:
            raise TypeError(f"No handler for {type(operation).__name__}")
        return await handler(operation)

    async def _connect(self, op: ConnectStore) -> Message:
        await asyncio.to_thread(self._engine.connect, self._connect_timeout)
        return StoreConnected()

    async def _load(self, op: LoadProjects) -> Message:
        projects = await asyncio.to_thread(self._engine.list_projects)
        logger.debug("Loaded %d projects", len(projects))
        return ProjectsLoaded(projects)

    async def _create(self, op: CreateProject) -> Message:
        project = await asyncio.to_thread(self._engine.create_project, op.project)
        return ProjectCreated(project)

    async def _update(self, op: UpdateProject) -> Message:
        project = await asyncio.to_thread(self._engine.update_project, op.project)
        return ProjectUpdated(project)

    async def _delete(self, op: DeleteProject) -> Message:
        await asyncio.to_thread(self._engine.delete_project, op.name)
        return ProjectDeleted(op.name)

    async def _save_variables(self, op: SaveVariables) -> Message:
        project = await asyncio.to_thread(self._engine.update_project, op.project)
        return VariablesSaved(project)

    async def _export(self, op: ExportProjects) -> Message:
        paths = await asyncio.to_thread(self._engine.export, list(op.projects))
        return ProjectsExported(tuple(paths))

    async def _tick(self, op: SpinnerTick) -> Message:
        await asyncio.sleep(self._spinner_interval)
        return SpinnerTicked()
