"""Project storage contract.

Why Protocol:
- Structural contract (duck typing) with no rigid inheritance.
- The relational backend and the one-file-per-project backend are
  interchangeable, and tests can swap in either.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Project, ProjectSummary


@runtime_checkable
class ProjectStore(Protocol):
    """Durable, key-indexed storage of projects and their children.

    Design rules:
    - `save` is all-or-nothing and fully replaces the project's children.
    - `load` returns None for an unknown id (not an error).
    - `delete` of an unknown id is a successful no-op.
    - Failures raise `core.domain.errors.StorageError`.
    """

    def save(self, project: Project) -> None:
        ...

    def load(self, project_id: str) -> Project | None:
        ...

    def list(self) -> list[ProjectSummary]:
        """Every stored project (id + name), ordered by id, children not loaded."""

        ...

    def delete(self, project_id: str) -> None:
        ...
