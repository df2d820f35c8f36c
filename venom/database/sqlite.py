"""Local document store: one JSON document per project in SQLite."""

import logging
import re
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from venom.core.errors import NotFound, OperationFailed, StoreUnavailable
from venom.database.store import ProjectStore
from venom.models import Project

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SqliteProjectStore(ProjectStore):
    """SQLite-backed project documents. All I/O stays in this module."""

    def __init__(self, db_path: Path, collection: str = "projects") -> None:
        if not _IDENTIFIER_RE.match(collection):
            raise ValueError(f"Invalid collection name: {collection!r}")
        self._path = Path(db_path)
        self._table = collection
        self._timeout = 5.0

    def wait_until_ready(self, timeout: float) -> None:
        """Create the data directory and collection table, bounded by ``timeout``."""
        self._timeout = timeout
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with sqlite3.connect(self._path, timeout=timeout) as conn:
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {self._table} (
                        name TEXT PRIMARY KEY,
                        document TEXT NOT NULL
                    )
                """
                )
                conn.commit()
        except (OSError, sqlite3.Error) as e:
            logger.error("SQLite store at %s unavailable: %s", self._path, e)
            raise StoreUnavailable(f"Cannot open store at {self._path}: {e}") from e
        logger.debug("SQLite store ready at %s", self._path)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._path, timeout=self._timeout)

    def _load(self, name: str, raw: str) -> Project:
        try:
            return Project.model_validate_json(raw)
        except ValidationError as e:
            raise OperationFailed(
                f"Stored document for '{name}' is invalid: {e}", operation="read"
            ) from e

    def list_all(self) -> dict[str, Project]:
        """Return every project keyed by name."""
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT name, document FROM {self._table} ORDER BY name"
                ).fetchall()
        except sqlite3.Error as e:
            raise OperationFailed(str(e), operation="list") from e
        return {name: self._load(name, doc) for name, doc in rows}

    def get(self, name: str) -> Project:
        """Return one project or raise NotFound."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT document FROM {self._table} WHERE name = ?", (name,)
                ).fetchone()
        except sqlite3.Error as e:
            raise OperationFailed(str(e), operation="get") from e
        if row is None:
            raise NotFound(name, operation="get")
        return self._load(name, row[0])

    def create(self, project: Project) -> str:
        """Upsert by name (existing documents are overwritten)."""
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT OR REPLACE INTO {self._table} (name, document) VALUES (?, ?)",
                    (project.name, project.model_dump_json()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise OperationFailed(str(e), operation="create") from e
        return project.name

    def update(self, name: str, project: Project) -> Project:
        """Replace an existing document; the key is always ``name``."""
        stored = project.model_copy(update={"name": name}, deep=True)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"UPDATE {self._table} SET document = ? WHERE name = ?",
                    (stored.model_dump_json(), name),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise OperationFailed(str(e), operation="update") from e
        if cursor.rowcount == 0:
            raise NotFound(name, operation="update")
        return stored

    def delete(self, name: str) -> None:
        """Delete a document or raise NotFound."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"DELETE FROM {self._table} WHERE name = ?", (name,)
                )
                conn.commit()
        except sqlite3.Error as e:
            raise OperationFailed(str(e), operation="delete") from e
        if cursor.rowcount == 0:
            raise NotFound(name, operation="delete")
