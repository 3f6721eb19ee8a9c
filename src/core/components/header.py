"""Header: one tab per stored project."""

from __future__ import annotations

from dataclasses import dataclass

from core.components.base import Region
from core.domain.events import InputEvent, KeyCode, KeyEvent, MouseEvent
from core.domain.models import ProjectSummary


@dataclass(frozen=True)
class HeaderNoop:
    pass


@dataclass(frozen=True)
class HeaderTabChanged:
    index: int


@dataclass(frozen=True)
class HeaderDeleteProject:
    index: int


@dataclass(frozen=True)
class HeaderCreateProject:
    pass


HeaderAction = HeaderNoop | HeaderTabChanged | HeaderDeleteProject | HeaderCreateProject


@dataclass(frozen=True)
class HeaderView:
    focused: bool
    projects: list[ProjectSummary]
    active_tab: int


class Header(Region):
    def __init__(self, projects: list[ProjectSummary] | None = None) -> None:
        super().__init__()
        self.projects: list[ProjectSummary] = list(projects or [])
        self.active_tab = 0

    def set_projects(self, projects: list[ProjectSummary], active_id: str | None = None) -> None:
        self.projects = list(projects)
        self.active_tab = 0
        for index, project in enumerate(self.projects):
            if project.id == active_id:
                self.active_tab = index
                break

    def tick(self, event: InputEvent | None) -> HeaderAction:
        if isinstance(event, KeyEvent):
            return self.handle_key(event)
        if isinstance(event, MouseEvent):
            return self._handle_mouse(event)
        return HeaderNoop()

    def snapshot(self) -> HeaderView:
        return HeaderView(focused=self.focused, projects=list(self.projects), active_tab=self.active_tab)

    def handle_key(self, event: KeyEvent) -> HeaderAction:
        count = len(self.projects)

        if event.is_char("t"):
            return HeaderCreateProject() if not count else HeaderNoop()
        if not count:
            return HeaderNoop()

        if event.code is KeyCode.LEFT or event.is_char("h"):
            if self.active_tab > 0:
                self.active_tab -= 1
                return HeaderTabChanged(self.active_tab)
            return HeaderNoop()
        if event.code is KeyCode.RIGHT or event.is_char("l"):
            if self.active_tab < count - 1:
                self.active_tab += 1
                return HeaderTabChanged(self.active_tab)
            return HeaderNoop()
        if event.is_char("d"):
            return HeaderDeleteProject(self.active_tab)
        if event.code is KeyCode.CHAR and event.char and event.char in "123456789":
            number = int(event.char)
            if 1 <= number <= count:
                self.active_tab = number - 1
                return HeaderTabChanged(self.active_tab)
        return HeaderNoop()

    def _handle_mouse(self, event: MouseEvent) -> HeaderAction:
        row = self.inner_row(event)
        if row != 0 or not self.projects or self.rect is None:
            return HeaderNoop()
        tab_width = max((self.rect.width - 2) // len(self.projects), 1)
        clicked = (event.column - self.rect.x - 1) // tab_width
        if 0 <= clicked < len(self.projects):
            self.active_tab = clicked
            return HeaderTabChanged(clicked)
        return HeaderNoop()
