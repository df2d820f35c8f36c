"""Database layer - project document stores."""

from .factory import create_store
from .http import HttpProjectStore
from .sqlite import SqliteProjectStore
from .store import ProjectStore

__all__ = ["HttpProjectStore", "ProjectStore", "SqliteProjectStore", "create_store"]
