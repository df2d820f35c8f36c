"""Write each project's variables to ``<target-folder>/<file-name>``."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from venom.core.errors import ExportFailed
from venom.models import Project

logger = logging.getLogger(__name__)


class Exporter:
    """Writes ``KEY=VALUE`` env files for projects.

    Relative target folders resolve against ``base_dir``; absolute ones are
    used as they are. Existing files are truncated and overwritten.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def target_path(self, project: Project) -> Path:
        """Return the file path a project exports to."""
        return self._base_dir / project.target_folder / project.file_name

    def export(self, projects: Iterable[Project]) -> list[Path]:
        """Write one env file per project and return the written paths.

        Raises:
            ExportFailed: On the first filesystem error; files already
                written for earlier projects are kept.
        """
        written: list[Path] = []
        for project in projects:
            path = self.target_path(project)
            if not project.file_name:
                raise ExportFailed(
                    f"Project '{project.name}' has no file name", path=path
                )
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                if path.exists():
                    logger.warning("File %s already exists and will be overwritten", path)
                with path.open("w", encoding="utf-8") as f:
                    for key, value in project.variables.items():
                        f.write(f"{key}={value}\n")
            except OSError as e:
                logger.warning("Export of %s to %s failed: %s", project.name, path, e)
                raise ExportFailed(f"Failed to write {path}: {e}", path=path) from e
            logger.info("Exported %d variables of %s to %s", len(project.variables), project.name, path)
            written.append(path)
        return written
