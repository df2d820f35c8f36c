"""Local mirror of the project set, keyed by name."""

from __future__ import annotations

from typing import Iterator, Mapping, Optional

from venom.models import Project


class ProjectCache:
    """Name-keyed copy of the last acknowledged remote state.

    Only completion messages for successful store calls write here; drafts
    never do.
    """

    def __init__(self) -> None:
        self._projects: dict[str, Project] = {}

    def replace_all(self, projects: Mapping[str, Project]) -> None:
        """Replace the whole cache (initial load and refresh)."""
        self._projects = {name: p.copy_draft() for name, p in projects.items()}

    def upsert(self, name: str, project: Project) -> None:
        self._projects[name] = project.copy_draft()

    def remove(self, name: str) -> None:
        self._projects.pop(name, None)

    def get(self, name: str) -> Optional[Project]:
        project = self._projects.get(name)
        return project.copy_draft() if project is not None else None

    def all(self) -> list[Project]:
        """Return projects ordered by name."""
        return [self._projects[name].copy_draft() for name in sorted(self._projects)]

    def __contains__(self, name: object) -> bool:
        return name in self._projects

    def __len__(self) -> int:
        return len(self._projects)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._projects))
