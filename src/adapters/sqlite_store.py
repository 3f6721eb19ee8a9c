"""Relational project store (SQLAlchemy over SQLite).

Responsibility:
- Map the nested `Project` graph onto flat tables and rebuild it on load.
- Every `save` / `delete` is one transaction: children are deleted and
  re-inserted, never diffed, so a failure leaves the previous version intact.

Layout (additive `position` columns keep child order exact):
- projects(id, name, created_at, updated_at)
- requests(id, project_id, position, name, method, url, body,
  query_params JSON, path_params JSON, auth_data JSON, created_at, updated_at)
- headers(id, request_id, position, name, value)
- environments(id, project_id, position, name, created_at, updated_at)
- environment_variables(id, environment_id, position, name, value)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy import Column, ForeignKey, Integer, String, Text, create_engine, delete, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from core.domain.errors import StorageError
from core.domain.models import Environment, Project, ProjectSummary, Request

logger = logging.getLogger(__name__)

Base = declarative_base()


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    created_at = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=False)


class RequestRow(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    method = Column(String)
    url = Column(Text)
    body = Column(Text)
    query_params = Column(Text)
    path_params = Column(Text)
    auth_data = Column(Text)
    created_at = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=False)


class HeaderRow(Base):
    __tablename__ = "headers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    value = Column(Text, nullable=False)


class EnvironmentRow(Base):
    __tablename__ = "environments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    created_at = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=False)


class EnvironmentVariableRow(Base):
    __tablename__ = "environment_variables"

    id = Column(Integer, primary_key=True, autoincrement=True)
    environment_id = Column(Integer, ForeignKey("environments.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    value = Column(Text, nullable=False)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_path: Path) -> Engine:
    engine = create_engine(f"sqlite:///{database_path}")
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def _dump_json(value: object) -> str:
    return json.dumps(value, ensure_ascii=False)


def _load_json(text: str | None) -> object:
    if text is None:
        return None
    return json.loads(text)


class SqliteProjectStore:
    """`ProjectStore` backed by one SQLite database file."""

    def __init__(self, database_path: Path) -> None:
        self.database_path = database_path
        try:
            self._engine = build_engine(database_path)
            # Schema changes are additive only: create what is missing.
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot open database {database_path}: {exc}") from exc
        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)

    def close(self) -> None:
        self._engine.dispose()

    # -- ProjectStore

    def save(self, project: Project) -> None:
        try:
            with self._sessions.begin() as session:
                session.merge(
                    ProjectRow(
                        id=project.id,
                        name=project.name,
                        created_at=project.created_at,
                        updated_at=project.updated_at,
                    )
                )
                self._delete_children(session, project.id)
                self._write_environments(session, project)
                self._write_requests(session, project)
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            raise StorageError(f"save of project {project.id} failed: {exc}") from exc
        logger.debug("saved project %s (%d requests)", project.id, len(project.requests))

    def load(self, project_id: str) -> Project | None:
        try:
            with self._sessions() as session:
                row = session.get(ProjectRow, project_id)
                if row is None:
                    return None
                return Project(
                    id=row.id,
                    name=row.name,
                    created_at=row.created_at,
                    updated_at=row.updated_at,
                    environments=self._read_environments(session, project_id),
                    requests=self._read_requests(session, project_id),
                )
        except (SQLAlchemyError, ValidationError, ValueError) as exc:
            raise StorageError(f"load of project {project_id} failed: {exc}") from exc

    def list(self) -> list[ProjectSummary]:
        try:
            with self._sessions() as session:
                rows = session.execute(select(ProjectRow.id, ProjectRow.name).order_by(ProjectRow.id))
                return [ProjectSummary(id=row.id, name=row.name) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError(f"listing projects failed: {exc}") from exc

    def delete(self, project_id: str) -> None:
        try:
            with self._sessions.begin() as session:
                self._delete_children(session, project_id)
                session.execute(
                    delete(ProjectRow)
                    .where(ProjectRow.id == project_id)
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"delete of project {project_id} failed: {exc}") from exc
        logger.debug("deleted project %s", project_id)

    # -- writes

    def _delete_children(self, session: Session, project_id: str) -> None:
        """headers -> requests, then variables -> environments."""

        request_ids = select(RequestRow.id).where(RequestRow.project_id == project_id)
        environment_ids = select(EnvironmentRow.id).where(EnvironmentRow.project_id == project_id)
        statements = (
            delete(HeaderRow).where(HeaderRow.request_id.in_(request_ids)),
            delete(RequestRow).where(RequestRow.project_id == project_id),
            delete(EnvironmentVariableRow).where(EnvironmentVariableRow.environment_id.in_(environment_ids)),
            delete(EnvironmentRow).where(EnvironmentRow.project_id == project_id),
        )
        for statement in statements:
            session.execute(statement.execution_options(synchronize_session=False))

    def _write_environments(self, session: Session, project: Project) -> None:
        for position, environment in enumerate(project.environments):
            env_row = EnvironmentRow(
                project_id=project.id,
                position=position,
                name=environment.name,
                created_at=project.created_at,
                updated_at=project.updated_at,
            )
            session.add(env_row)
            session.flush()
            for var_position, (name, value) in enumerate(environment.variables.items()):
                session.add(
                    EnvironmentVariableRow(
                        environment_id=env_row.id,
                        position=var_position,
                        name=name,
                        value=value,
                    )
                )

    def _write_requests(self, session: Session, project: Project) -> None:
        for position, request in enumerate(project.requests):
            data = request.model_dump(mode="json")
            request_row = RequestRow(
                project_id=project.id,
                position=position,
                name=request.name,
                method=request.method,
                url=request.url,
                body=request.body,
                query_params=_dump_json(data["query_params"]),
                path_params=_dump_json(data["path_params"]),
                auth_data=_dump_json(data["auth"]),
                created_at=request.created_at,
                updated_at=request.updated_at,
            )
            session.add(request_row)
            session.flush()
            for header_position, (name, value) in enumerate(request.headers or []):
                session.add(
                    HeaderRow(
                        request_id=request_row.id,
                        position=header_position,
                        name=name,
                        value=value,
                    )
                )

    # -- reads

    def _read_environments(self, session: Session, project_id: str) -> list[Environment]:
        environments: list[Environment] = []
        env_rows = session.scalars(
            select(EnvironmentRow)
            .where(EnvironmentRow.project_id == project_id)
            .order_by(EnvironmentRow.position, EnvironmentRow.id)
        ).all()
        for env_row in env_rows:
            variables = session.scalars(
                select(EnvironmentVariableRow)
                .where(EnvironmentVariableRow.environment_id == env_row.id)
                .order_by(EnvironmentVariableRow.position, EnvironmentVariableRow.id)
            )
            environments.append(
                Environment(name=env_row.name, variables={var.name: var.value for var in variables})
            )
        return environments

    def _read_requests(self, session: Session, project_id: str) -> list[Request]:
        requests: list[Request] = []
        request_rows = session.scalars(
            select(RequestRow)
            .where(RequestRow.project_id == project_id)
            .order_by(RequestRow.position, RequestRow.id)
        ).all()
        for request_row in request_rows:
            headers = session.scalars(
                select(HeaderRow)
                .where(HeaderRow.request_id == request_row.id)
                .order_by(HeaderRow.position, HeaderRow.id)
            )
            requests.append(
                Request.model_validate(
                    {
                        "name": request_row.name,
                        "method": request_row.method,
                        "url": request_row.url,
                        "body": request_row.body,
                        "headers": [(h.name, h.value) for h in headers],
                        "query_params": _load_json(request_row.query_params),
                        "path_params": _load_json(request_row.path_params),
                        "auth": _load_json(request_row.auth_data),
                        "created_at": request_row.created_at,
                        "updated_at": request_row.updated_at,
                    }
                )
            )
        return requests
