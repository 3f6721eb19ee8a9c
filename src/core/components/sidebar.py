"""Sidebar: the request list of the current project."""

from __future__ import annotations

from dataclasses import dataclass

from core.components.base import Region
from core.domain.events import InputEvent, KeyCode, KeyEvent, MouseEvent
from core.domain.models import DeleteRequest, Request


@dataclass(frozen=True)
class SidebarNoop:
    pass


@dataclass(frozen=True)
class SidebarSelected:
    index: int
    request: Request


@dataclass(frozen=True)
class SidebarDelete:
    """Single-keypress delete of the selected request (no confirmation dialog)."""

    update: DeleteRequest


@dataclass(frozen=True)
class SidebarEditRequested:
    index: int
    request: Request


@dataclass(frozen=True)
class SidebarShowModal:
    pass


SidebarAction = SidebarNoop | SidebarSelected | SidebarDelete | SidebarEditRequested | SidebarShowModal


@dataclass(frozen=True)
class SidebarView:
    focused: bool
    requests: list[Request]
    selected_index: int | None


class Sidebar(Region):
    def __init__(self) -> None:
        super().__init__()
        self.requests: list[Request] = []
        self.selected_index: int | None = None

    def set_requests(self, requests: list[Request], *, keep_selection: bool = True) -> None:
        """Replace the list, keeping the selection when it is still in range."""

        self.requests = [r.model_copy(deep=True) for r in requests]
        if not keep_selection:
            self.selected_index = None
        if not self.requests:
            self.selected_index = None
        elif self.selected_index is None:
            self.selected_index = 0
        else:
            self.selected_index = min(self.selected_index, len(self.requests) - 1)

    @property
    def selected(self) -> Request | None:
        if self.selected_index is None:
            return None
        return self.requests[self.selected_index]

    def tick(self, event: InputEvent | None) -> SidebarAction:
        if isinstance(event, KeyEvent):
            return self._handle_key(event)
        if isinstance(event, MouseEvent):
            return self._handle_mouse(event)
        return SidebarNoop()

    def snapshot(self) -> SidebarView:
        return SidebarView(
            focused=self.focused,
            requests=list(self.requests),
            selected_index=self.selected_index,
        )

    def _select(self, index: int) -> SidebarAction:
        self.selected_index = index
        return SidebarSelected(index, self.requests[index])

    def _handle_key(self, event: KeyEvent) -> SidebarAction:
        count = len(self.requests)

        if event.code is KeyCode.DOWN or event.is_char("j"):
            if not count:
                return SidebarNoop()
            if self.selected_index is None:
                return self._select(0)
            return self._select(min(self.selected_index + 1, count - 1))

        if event.code is KeyCode.UP or event.is_char("k"):
            if not count:
                return SidebarNoop()
            if self.selected_index is None:
                return self._select(count - 1)
            return self._select(max(self.selected_index - 1, 0))

        if event.is_char("a"):
            return SidebarShowModal()

        index = self.selected_index
        if index is None:
            return SidebarNoop()
        if event.code is KeyCode.ENTER:
            return self._select(index)
        if event.is_char("e"):
            return SidebarEditRequested(index, self.requests[index])
        if event.is_char("d"):
            return SidebarDelete(DeleteRequest(index=index))
        return SidebarNoop()

    def _handle_mouse(self, event: MouseEvent) -> SidebarAction:
        row = self.inner_row(event)
        if row is None or row >= len(self.requests):
            return SidebarNoop()
        return self._select(row)
