"""One-JSON-document-per-project store.

Why JSON:
- Interchangeable with the relational store for save/load/list/delete.
- Each document is written to a temporary file and `os.replace`d into place,
  so a crash mid-write leaves the previous document untouched.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from core.domain.errors import StorageError
from core.domain.models import Project, ProjectSummary

logger = logging.getLogger(__name__)


class JsonProjectStore:
    """`ProjectStore` backed by `<directory>/<project id>.json` files."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create storage directory {directory}: {exc}") from exc

    def _path_for(self, project_id: str) -> Path:
        if not project_id or "/" in project_id or "\\" in project_id or project_id.startswith("."):
            raise StorageError(f"invalid project id: {project_id!r}")
        return self.directory / f"{project_id}.json"

    def save(self, project: Project) -> None:
        path = self._path_for(project.id)
        payload = project.model_dump(mode="json")
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"save of project {project.id} failed: {exc}") from exc
        logger.debug("saved project %s to %s", project.id, path)

    def load(self, project_id: str) -> Project | None:
        path = self._path_for(project_id)
        if not path.exists():
            return None
        try:
            return Project.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError, ValueError) as exc:
            raise StorageError(f"load of project {project_id} failed: {exc}") from exc

    def list(self) -> list[ProjectSummary]:
        summaries: list[ProjectSummary] = []
        try:
            for path in self.directory.glob("*.json"):
                if path.name.startswith("."):
                    continue
                summaries.append(ProjectSummary.model_validate_json(path.read_text(encoding="utf-8")))
        except (OSError, ValidationError, ValueError) as exc:
            raise StorageError(f"listing projects failed: {exc}") from exc
        return sorted(summaries, key=lambda s: s.id)

    def delete(self, project_id: str) -> None:
        try:
            self._path_for(project_id).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"delete of project {project_id} failed: {exc}") from exc
        logger.debug("deleted project %s", project_id)
