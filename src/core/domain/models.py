"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  Core to storage or terminal libraries.
- `model_dump(mode="json")` / `model_validate` give both storage backends the
  same lossless serialization contract.

Note:
- These models describe *what* a project is, not *how* it is stored or drawn.
  Every mutation goes through `Project.apply_update`.
"""

from __future__ import annotations

import time
import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


def now_ts() -> int:
    """Seconds since epoch, the timestamp unit used across the model."""

    return int(time.time())


KeyValue = tuple[str, str]


class NoAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class BasicAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["basic"] = "basic"
    username: str
    password: str


class BearerAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bearer"] = "bearer"
    token: str


class ApiKeyAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["apikey"] = "apikey"
    key: str
    value: str
    in_header: bool = Field(
        default=True,
        description="True: sent as a header. False: sent as a query parameter.",
    )


Auth = Annotated[
    Union[NoAuth, BasicAuth, BearerAuth, ApiKeyAuth],
    Field(discriminator="kind"),
]


class Response(BaseModel):
    """Result of executing a request.

    Ephemeral: it is attached to the in-memory `Request` for display only and
    never reaches a storage backend.
    """

    status_code: int | None = None
    body: str | None = None
    headers: list[KeyValue] = Field(default_factory=list)
    response_time_ms: int = Field(default=0, ge=0)
    timestamp: int = Field(default_factory=now_ts)


class Request(BaseModel):
    """A named, editable HTTP call definition.

    `name` is the key used to locate a request for update-in-place, so names
    are expected to be unique within a project.
    """

    name: str = Field(..., description="Display name and update key.")
    method: str | None = Field(default=None, description="HTTP verb, free text.")
    url: str | None = None
    headers: list[KeyValue] | None = Field(
        default=None,
        description="Ordered `(name, value)` header pairs.",
    )
    query_params: list[KeyValue] | None = None
    path_params: list[KeyValue] | None = None
    auth: Auth | None = Field(default_factory=NoAuth)
    body: str | None = None
    created_at: int = Field(default_factory=now_ts)
    updated_at: int = Field(default_factory=now_ts)
    response: Response | None = Field(
        default=None,
        exclude=True,
        description="Last execution result (display only, never persisted).",
    )

    @field_validator("headers", "query_params", "path_params")
    @classmethod
    def _empty_list_is_absent(cls, value: list[KeyValue] | None) -> list[KeyValue] | None:
        # The relational layout cannot tell [] from NULL, so neither does the model.
        return value or None

    @classmethod
    def new(cls, name: str) -> "Request":
        return cls(name=name)

    def touch(self) -> None:
        self.updated_at = now_ts()


class Environment(BaseModel):
    """Named set of variables scoped to a project."""

    name: str
    variables: dict[str, str] = Field(default_factory=dict)


class ProjectSummary(BaseModel):
    """Identity + name only; what the tab bar needs."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str


# --- Update descriptors -----------------------------------------------------


class AddRequest(BaseModel):
    op: Literal["add_request"] = "add_request"
    request: Request


class UpdateRequest(BaseModel):
    op: Literal["update_request"] = "update_request"
    index: int
    request: Request


class DeleteRequest(BaseModel):
    op: Literal["delete_request"] = "delete_request"
    index: int


class RenameProject(BaseModel):
    op: Literal["rename_project"] = "rename_project"
    name: str


class AddEnvironment(BaseModel):
    op: Literal["add_environment"] = "add_environment"
    environment: Environment


class UpdateEnvironment(BaseModel):
    op: Literal["update_environment"] = "update_environment"
    index: int
    environment: Environment


class DeleteEnvironment(BaseModel):
    op: Literal["delete_environment"] = "delete_environment"
    index: int


ProjectUpdate = Annotated[
    Union[
        AddRequest,
        UpdateRequest,
        DeleteRequest,
        RenameProject,
        AddEnvironment,
        UpdateEnvironment,
        DeleteEnvironment,
    ],
    Field(discriminator="op"),
]


def _in_range(index: int, items: list) -> bool:
    return 0 <= index < len(items)


class Project(BaseModel):
    """Aggregate root: owns its requests and environments exclusively.

    Invariants:
    - `id` never changes after creation (frozen field).
    - `updated_at` is refreshed by every `apply_update`, including no-ops.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1, frozen=True)
    name: str
    requests: list[Request] = Field(default_factory=list)
    environments: list[Environment] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ts)
    updated_at: int = Field(default_factory=now_ts)

    @classmethod
    def new(cls, name: str) -> "Project":
        now = now_ts()
        return cls(id=str(uuid.uuid4()), name=name, created_at=now, updated_at=now)

    def summary(self) -> ProjectSummary:
        return ProjectSummary(id=self.id, name=self.name)

    def find_request_index(self, name: str) -> int | None:
        for index, request in enumerate(self.requests):
            if request.name == name:
                return index
        return None

    def apply_update(self, update: ProjectUpdate) -> None:
        """Apply one update descriptor in place.

        Index-based updates whose index is out of range are silently ignored:
        the UI may hold a stale index after a delete.
        """

        self.updated_at = now_ts()

        if isinstance(update, AddRequest):
            self.requests.append(update.request)
        elif isinstance(update, UpdateRequest):
            if _in_range(update.index, self.requests):
                self.requests[update.index] = update.request
        elif isinstance(update, DeleteRequest):
            if _in_range(update.index, self.requests):
                del self.requests[update.index]
        elif isinstance(update, RenameProject):
            self.name = update.name
        elif isinstance(update, AddEnvironment):
            self.environments.append(update.environment)
        elif isinstance(update, UpdateEnvironment):
            if _in_range(update.index, self.environments):
                self.environments[update.index] = update.environment
        elif isinstance(update, DeleteEnvironment):
            if _in_range(update.index, self.environments):
                del self.environments[update.index]
