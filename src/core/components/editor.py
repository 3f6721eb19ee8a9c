"""Field-cycling request editor.

A small state machine that walks the editable fields of a `Request`
(Method -> Url -> Headers -> QueryParams -> PathParams -> Auth -> Body, wrapping)
and turns keystrokes into committed request values.

Rules:
- Tab / Shift+Tab move with wraparound; leaving a scalar field (Method, Url,
  Body) commits its buffer, so typed text is never dropped.
- Enter on a multi-valued field parses `key SEP value` (`:` for headers, `=`
  for params). A buffer without the separator is kept as-is, no error.
- Enter on Auth parses `basic <user> <pass>`, `bearer <token>` or
  `apikey <key> <value> header|query`; anything else resets auth to none.
- Escape is two-level: it first drops the active field, then leaves the editor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.domain.events import KeyCode, KeyEvent
from core.domain.models import (
    ApiKeyAuth,
    Auth,
    BasicAuth,
    BearerAuth,
    KeyValue,
    NoAuth,
    Request,
)


class EditField(str, Enum):
    METHOD = "method"
    URL = "url"
    HEADERS = "headers"
    QUERY_PARAMS = "query_params"
    PATH_PARAMS = "path_params"
    AUTH = "auth"
    BODY = "body"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_scalar(self) -> bool:
        return self in (EditField.METHOD, EditField.URL, EditField.BODY)

    @property
    def separator(self) -> str | None:
        return _SEPARATORS.get(self)


FIELD_ORDER: tuple[EditField, ...] = tuple(EditField)

_LABELS = {
    EditField.METHOD: "Method",
    EditField.URL: "URL",
    EditField.HEADERS: "Headers",
    EditField.QUERY_PARAMS: "Query Parameters",
    EditField.PATH_PARAMS: "Path Parameters",
    EditField.AUTH: "Auth",
    EditField.BODY: "Body",
}

_SEPARATORS = {
    EditField.HEADERS: ":",
    EditField.QUERY_PARAMS: "=",
    EditField.PATH_PARAMS: "=",
}


def next_field(field: EditField | None) -> EditField:
    if field is None:
        return FIELD_ORDER[0]
    return FIELD_ORDER[(FIELD_ORDER.index(field) + 1) % len(FIELD_ORDER)]


def previous_field(field: EditField | None) -> EditField:
    if field is None:
        return FIELD_ORDER[-1]
    return FIELD_ORDER[(FIELD_ORDER.index(field) - 1) % len(FIELD_ORDER)]


def parse_key_value(text: str, separator: str) -> KeyValue | None:
    """Split `key SEP value` on the first separator; None if it does not parse."""

    key, sep, value = text.partition(separator)
    if not sep:
        return None
    key = key.strip()
    if not key:
        return None
    return key, value.strip()


def parse_auth_command(text: str) -> Auth:
    parts = text.split()
    if not parts:
        return NoAuth()

    scheme = parts[0].lower()
    if scheme == "basic" and len(parts) == 3:
        return BasicAuth(username=parts[1], password=parts[2])
    if scheme == "bearer" and len(parts) == 2:
        return BearerAuth(token=parts[1])
    if scheme == "apikey" and len(parts) == 4 and parts[3].lower() in ("header", "query"):
        return ApiKeyAuth(key=parts[1], value=parts[2], in_header=parts[3].lower() == "header")
    return NoAuth()


def format_auth(auth: Auth | None) -> str:
    """Inverse of `parse_auth_command` (used for display)."""

    if isinstance(auth, BasicAuth):
        return f"basic {auth.username} {auth.password}"
    if isinstance(auth, BearerAuth):
        return f"bearer {auth.token}"
    if isinstance(auth, ApiKeyAuth):
        return f"apikey {auth.key} {auth.value} {'header' if auth.in_header else 'query'}"
    return ""


def format_pairs(pairs: list[KeyValue] | None, separator: str) -> str:
    return "\n".join(f"{key}{separator}{value}" for key, value in pairs or [])


# --- Actions ----------------------------------------------------------------


@dataclass(frozen=True)
class EditorNoop:
    pass


@dataclass(frozen=True)
class EditorChanged:
    """Buffer or active field changed; nothing to persist."""


@dataclass(frozen=True)
class EditorCommitted:
    request: Request


@dataclass(frozen=True)
class EditorExited:
    pass


EditorAction = EditorNoop | EditorChanged | EditorCommitted | EditorExited


class FieldCyclingEditor:
    def __init__(self, request: Request) -> None:
        self.request = request.model_copy(deep=True)
        self.field_active: EditField | None = None
        self.buffer = ""

    def start(self) -> None:
        self._enter(FIELD_ORDER[0])

    def handle_key(self, event: KeyEvent) -> EditorAction:
        code = event.code
        if code is KeyCode.ESCAPE:
            return self._escape()
        if code is KeyCode.TAB:
            return self._move(next_field(self.field_active))
        if code is KeyCode.BACK_TAB:
            return self._move(previous_field(self.field_active))
        if code is KeyCode.ENTER:
            return self._enter_key()
        if self.field_active is None:
            return EditorNoop()
        if code is KeyCode.BACKSPACE:
            self.buffer = self.buffer[:-1]
            return EditorChanged()
        if code is KeyCode.CHAR and event.char:
            self.buffer += event.char
            return EditorChanged()
        return EditorNoop()

    def activate(self, field: EditField) -> EditorAction:
        """Jump straight to `field` (mouse click on its row)."""

        if field is self.field_active:
            return EditorNoop()
        return self._move(field)

    # -- internals

    def _enter(self, field: EditField | None) -> None:
        self.field_active = field
        self.buffer = self._current_text(field)

    def _current_text(self, field: EditField | None) -> str:
        if field is EditField.METHOD:
            return self.request.method or ""
        if field is EditField.URL:
            return self.request.url or ""
        if field is EditField.BODY:
            return self.request.body or ""
        # Multi-valued fields and auth start from an empty entry line.
        return ""

    def _escape(self) -> EditorAction:
        if self.field_active is not None:
            self.field_active = None
            self.buffer = ""
            return EditorChanged()
        return EditorExited()

    def _move(self, target: EditField) -> EditorAction:
        committed = self._commit_scalar()
        self._enter(target)
        if committed:
            return EditorCommitted(self.request.model_copy(deep=True))
        return EditorChanged()

    def _commit_scalar(self) -> bool:
        """Store the buffer of a scalar field; True when the value changed."""

        field = self.field_active
        if field is None or not field.is_scalar:
            return False
        value = self.buffer or None
        if getattr(self.request, field.value) == value:
            return False
        setattr(self.request, field.value, value)
        self.request.touch()
        return True

    def _enter_key(self) -> EditorAction:
        field = self.field_active
        if field is None:
            return EditorNoop()

        if field.is_scalar:
            self._commit_scalar()
            if field is EditField.BODY:
                self.buffer = self.request.body or ""
            else:
                self._enter(next_field(field))
            return EditorCommitted(self.request.model_copy(deep=True))

        if field is EditField.AUTH:
            self.request.auth = parse_auth_command(self.buffer)
            self.request.touch()
            self.buffer = ""
            return EditorCommitted(self.request.model_copy(deep=True))

        pair = parse_key_value(self.buffer, field.separator or "")
        if pair is None:
            return EditorChanged()
        pairs = list(getattr(self.request, field.value) or [])
        pairs.append(pair)
        setattr(self.request, field.value, pairs)
        self.request.touch()
        self.buffer = ""
        return EditorCommitted(self.request.model_copy(deep=True))
