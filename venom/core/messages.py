"""Messages consumed by the session controller.

Two families share one queue: operator input (keys, spinner ticks) and
completion messages posted by the scheduler when a command finishes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from venom.models import Project

if TYPE_CHECKING:
    from venom.core.commands import Command
    from venom.core.errors import VenomError


class Message:
    """Base for everything the controller handles."""


# ---- Input ----
@dataclass(frozen=True)
class KeyInput(Message):
    """One key press. ``character`` is set for printable keys."""

    key: str
    character: Optional[str] = None

    @property
    def is_printable(self) -> bool:
        return (
            self.character is not None
            and len(self.character) == 1
            and self.character.isprintable()
        )


@dataclass(frozen=True)
class SpinnerTicked(Message):
    """Loading spinner animation frame."""


# ---- Completions ----
@dataclass(frozen=True)
class StoreConnected(Message):
    """The store answered its readiness probe."""


@dataclass(frozen=True)
class ProjectsLoaded(Message):
    projects: dict[str, Project] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectCreated(Message):
    project: Project


@dataclass(frozen=True)
class ProjectUpdated(Message):
    project: Project


@dataclass(frozen=True)
class ProjectDeleted(Message):
    name: str


@dataclass(frozen=True)
class VariablesSaved(Message):
    project: Project


@dataclass(frozen=True)
class ProjectsExported(Message):
    paths: tuple[Path, ...] = ()


@dataclass(frozen=True)
class CommandFailed(Message):
    """A command raised; carries the typed error and the failing command."""

    error: "VenomError"
    command: Optional["Command"] = None
