"""Abstract base class for project document stores."""

from abc import ABC, abstractmethod

from venom.models import Project


class ProjectStore(ABC):
    """CRUD over Project documents keyed by name.

    Every method may raise a ``VenomError`` subclass: ``StoreUnavailable``
    from ``wait_until_ready``, ``NotFound`` when a named document is
    missing, ``OperationFailed`` for any other backend failure.
    Implementations are synchronous; the TUI calls them off the render
    loop.
    """

    @abstractmethod
    def wait_until_ready(self, timeout: float) -> None:
        """Block until the store answers, or raise StoreUnavailable after ``timeout``."""
        ...

    @abstractmethod
    def list_all(self) -> dict[str, Project]:
        """Return every project keyed by name."""
        ...

    @abstractmethod
    def get(self, name: str) -> Project:
        """Return one project by name."""
        ...

    @abstractmethod
    def create(self, project: Project) -> str:
        """Upsert a project by name and return the name.

        Creating with an existing name overwrites the stored document.
        """
        ...

    @abstractmethod
    def update(self, name: str, project: Project) -> Project:
        """Replace an existing project document and return what was stored."""
        ...

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete a project document."""
        ...

    def close(self) -> None:
        """Release connections. Default: nothing to release."""
        return None
