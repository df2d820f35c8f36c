"""Commands: tagged units of asynchronous work issued by the controller.

A command is plain data. The scheduler runs it through the runner and the
outcome re-enters the controller as exactly one completion message.
``Sequence`` and ``Batch`` compose commands; ``Quit`` is handled by the
render loop itself and never reaches the scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from venom.models import Project


@dataclass(frozen=True)
class ConnectStore:
    """Bounded readiness wait on the document store."""


@dataclass(frozen=True)
class LoadProjects:
    """Full fetch of the project set."""


@dataclass(frozen=True)
class CreateProject:
    project: Project


@dataclass(frozen=True)
class UpdateProject:
    project: Project


@dataclass(frozen=True)
class DeleteProject:
    name: str


@dataclass(frozen=True)
class SaveVariables:
    """Re-persist a whole project after its variables changed."""

    project: Project


@dataclass(frozen=True)
class ExportProjects:
    projects: tuple[Project, ...]


@dataclass(frozen=True)
class SpinnerTick:
    """Wait one spinner interval, then post ``SpinnerTicked``."""


@dataclass(frozen=True)
class Sequence:
    """Run steps one after another; each result is handled before the next step starts."""

    steps: tuple["Command", ...]

    def __init__(self, *steps: "Command") -> None:
        object.__setattr__(self, "steps", tuple(steps))


@dataclass(frozen=True)
class Batch:
    """Run steps concurrently; results arrive in completion order."""

    steps: tuple["Command", ...]

    def __init__(self, *steps: "Command") -> None:
        object.__setattr__(self, "steps", tuple(steps))


@dataclass(frozen=True)
class Quit:
    """Leave the application with ``exit_code``; ``message`` is shown after exit."""

    exit_code: int = 0
    message: str = ""


Operation = Union[
    ConnectStore,
    LoadProjects,
    CreateProject,
    UpdateProject,
    DeleteProject,
    SaveVariables,
    ExportProjects,
    SpinnerTick,
]

Command = Union[Operation, Sequence, Batch, Quit]
