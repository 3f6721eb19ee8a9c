"""Content: request summary (view) or the field-cycling editor (edit)."""

from __future__ import annotations

from dataclasses import dataclass

from core.components.base import Region
from core.components.editor import (
    FIELD_ORDER,
    EditField,
    EditorAction,
    EditorChanged,
    EditorCommitted,
    EditorExited,
    FieldCyclingEditor,
)
from core.domain.events import InputEvent, KeyEvent, MouseEvent
from core.domain.models import Request, Response


@dataclass(frozen=True)
class ContentNoop:
    pass


@dataclass(frozen=True)
class ContentUpdated:
    pass


@dataclass(frozen=True)
class ContentRequestUpdated:
    request: Request


@dataclass(frozen=True)
class ContentEditRequested:
    pass


@dataclass(frozen=True)
class ContentEditExited:
    pass


ContentAction = ContentNoop | ContentUpdated | ContentRequestUpdated | ContentEditRequested | ContentEditExited


@dataclass(frozen=True)
class ContentView:
    focused: bool
    request: Request | None
    response: Response | None
    editing: bool
    field_active: EditField | None
    buffer: str


class Content(Region):
    def __init__(self) -> None:
        super().__init__()
        self.request: Request | None = None
        self.editor: FieldCyclingEditor | None = None

    @property
    def editing(self) -> bool:
        return self.editor is not None

    def set_request(self, request: Request) -> None:
        self.request = request.model_copy(deep=True)
        self.editor = None

    def clear_request(self) -> None:
        self.request = None
        self.editor = None

    def enter_edit_mode(self) -> bool:
        if self.request is None:
            return False
        self.editor = FieldCyclingEditor(self.request)
        self.editor.start()
        return True

    def tick(self, event: InputEvent | None) -> ContentAction:
        if isinstance(event, KeyEvent):
            if self.editor is None:
                if event.is_char("e") and self.request is not None:
                    return ContentEditRequested()
                return ContentNoop()
            return self._translate(self.editor.handle_key(event))
        if isinstance(event, MouseEvent):
            return self._handle_mouse(event)
        return ContentNoop()

    def snapshot(self) -> ContentView:
        editor = self.editor
        return ContentView(
            focused=self.focused,
            request=editor.request if editor else self.request,
            response=self.request.response if self.request else None,
            editing=editor is not None,
            field_active=editor.field_active if editor else None,
            buffer=editor.buffer if editor else "",
        )

    def _translate(self, action: EditorAction) -> ContentAction:
        if isinstance(action, EditorCommitted):
            self.request = action.request
            return ContentRequestUpdated(action.request)
        if isinstance(action, EditorExited):
            self.editor = None
            return ContentEditExited()
        if isinstance(action, EditorChanged):
            return ContentUpdated()
        return ContentNoop()

    def _handle_mouse(self, event: MouseEvent) -> ContentAction:
        row = self.inner_row(event)
        if row is None or self.editor is None:
            return ContentNoop()
        # One line per field, in cycle order.
        if row >= len(FIELD_ORDER):
            return ContentNoop()
        return self._translate(self.editor.activate(FIELD_ORDER[row]))
