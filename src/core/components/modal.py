"""Request-creation dialog.

While open it captures every key and mouse event; the router forwards nothing
else until it answers `ModalClose` or `ModalSubmit`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.components.base import Region
from core.components.editor import parse_auth_command, parse_key_value
from core.domain.events import InputEvent, KeyCode, KeyEvent, MouseEvent
from core.domain.models import Auth, KeyValue, NoAuth, Request


class ModalField(str, Enum):
    NAME = "name"
    METHOD = "method"
    URL = "url"
    HEADERS = "headers"
    QUERY_PARAMS = "query_params"
    PATH_PARAMS = "path_params"
    AUTH = "auth"
    BODY = "body"

    @property
    def label(self) -> str:
        if self is ModalField.URL:
            return "URL"
        return self.value.replace("_", " ").title()


MODAL_FIELDS: tuple[ModalField, ...] = tuple(ModalField)

_SEPARATORS = {
    ModalField.HEADERS: ":",
    ModalField.QUERY_PARAMS: "=",
    ModalField.PATH_PARAMS: "=",
}


@dataclass(frozen=True)
class ModalNoop:
    pass


@dataclass(frozen=True)
class ModalClose:
    pass


@dataclass(frozen=True)
class ModalSubmit:
    request: Request


ModalAction = ModalNoop | ModalClose | ModalSubmit


@dataclass(frozen=True)
class ModalView:
    current_field: ModalField
    values: dict[ModalField, str]
    headers: list[KeyValue]
    query_params: list[KeyValue]
    path_params: list[KeyValue]
    auth: Auth
    error: str | None


class RequestModal(Region):
    def __init__(self) -> None:
        super().__init__()
        self._focused = True
        self.current_field = ModalField.NAME
        self.values: dict[ModalField, str] = {field: "" for field in MODAL_FIELDS}
        self.pairs: dict[ModalField, list[KeyValue]] = {field: [] for field in _SEPARATORS}
        self.auth: Auth = NoAuth()
        self.error: str | None = None

    def tick(self, event: InputEvent | None) -> ModalAction:
        if isinstance(event, KeyEvent):
            return self._handle_key(event)
        if isinstance(event, MouseEvent):
            row = self.inner_row(event)
            if row is not None and row < len(MODAL_FIELDS):
                self.current_field = MODAL_FIELDS[row]
        return ModalNoop()

    def snapshot(self) -> ModalView:
        return ModalView(
            current_field=self.current_field,
            values=dict(self.values),
            headers=list(self.pairs[ModalField.HEADERS]),
            query_params=list(self.pairs[ModalField.QUERY_PARAMS]),
            path_params=list(self.pairs[ModalField.PATH_PARAMS]),
            auth=self.auth,
            error=self.error,
        )

    def _handle_key(self, event: KeyEvent) -> ModalAction:
        code = event.code
        field = self.current_field

        if code is KeyCode.ESCAPE:
            return ModalClose()
        if code is KeyCode.TAB:
            if field is MODAL_FIELDS[-1]:
                return self._submit()
            self._advance()
            return ModalNoop()
        if code is KeyCode.BACK_TAB:
            index = MODAL_FIELDS.index(field)
            self.current_field = MODAL_FIELDS[max(index - 1, 0)]
            return ModalNoop()
        if code is KeyCode.ENTER:
            return self._enter()
        if code is KeyCode.BACKSPACE:
            self.values[field] = self.values[field][:-1]
        elif code is KeyCode.CHAR and event.char:
            self.values[field] += event.char
        return ModalNoop()

    def _advance(self) -> None:
        index = MODAL_FIELDS.index(self.current_field)
        self.current_field = MODAL_FIELDS[min(index + 1, len(MODAL_FIELDS) - 1)]

    def _enter(self) -> ModalAction:
        field = self.current_field
        text = self.values[field]

        if field is ModalField.BODY:
            return self._submit()
        if field in _SEPARATORS:
            pair = parse_key_value(text, _SEPARATORS[field])
            if pair is not None:
                self.pairs[field].append(pair)
                self.values[field] = ""
        elif field is ModalField.AUTH:
            self.auth = parse_auth_command(text)
            self.values[field] = ""
        else:
            self._advance()
        return ModalNoop()

    def _submit(self) -> ModalAction:
        name = self.values[ModalField.NAME].strip()
        if not name:
            self.error = "Name is required"
            self.current_field = ModalField.NAME
            return ModalNoop()

        return ModalSubmit(
            Request(
                name=name,
                method=self.values[ModalField.METHOD].strip() or None,
                url=self.values[ModalField.URL].strip() or None,
                headers=list(self.pairs[ModalField.HEADERS]),
                query_params=list(self.pairs[ModalField.QUERY_PARAMS]),
                path_params=list(self.pairs[ModalField.PATH_PARAMS]),
                auth=self.auth,
                body=self.values[ModalField.BODY] or None,
            )
        )
