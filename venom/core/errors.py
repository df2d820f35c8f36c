"""Error taxonomy for store, command and export failures."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class VenomError(Exception):
    """Base class for every failure the UI knows how to report."""


class StoreUnavailable(VenomError):
    """The document store could not be reached or never became ready."""


class OperationFailed(VenomError):
    """A store call failed while the UI is running."""

    def __init__(self, message: str, operation: str = "") -> None:
        super().__init__(message)
        self.operation = operation


class NotFound(OperationFailed):
    """The target project vanished between read and write."""

    def __init__(self, name: str, operation: str = "") -> None:
        super().__init__(f"Project '{name}' not found", operation=operation)
        self.name = name


class ExportFailed(VenomError):
    """Writing a project's env file failed."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
