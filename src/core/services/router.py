"""Focus/mode router.

This module owns the interaction state of the terminal UI:
- exactly one `Mode` at a time (initially NORMAL),
- at most one focused region (`FocusTarget`), with radio-button semantics,
- an optional modal that captures every event while it is open.

Region components return closed action values; the router interprets them,
mutates the current project and saves it through the `ProjectStore` before
refreshing the regions that show it. The current project lives in an explicit
`SessionContext` handed to every handler that touches it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from core.components.content import (
    Content,
    ContentEditExited,
    ContentEditRequested,
    ContentRequestUpdated,
)
from core.components.footer import Footer
from core.components.header import (
    Header,
    HeaderCreateProject,
    HeaderDeleteProject,
    HeaderTabChanged,
)
from core.components.modal import ModalClose, ModalSubmit, RequestModal
from core.components.sidebar import (
    Sidebar,
    SidebarDelete,
    SidebarEditRequested,
    SidebarSelected,
    SidebarShowModal,
)
from core.domain.errors import StorageError
from core.domain.events import InputEvent, KeyCode, KeyEvent, MouseEvent
from core.domain.models import (
    AddRequest,
    Project,
    ProjectSummary,
    ProjectUpdate,
    Request,
    UpdateRequest,
)
from core.interfaces.component import Component
from core.interfaces.storage import ProjectStore

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    NORMAL = "NORMAL"
    COMMAND = "COMMAND"
    TAB = "TAB"
    CREATE_PROJECT = "CREATE"
    EDIT_REQUEST = "EDIT"


class FocusTarget(str, Enum):
    HEADER = "header"
    SIDEBAR = "sidebar"
    CONTENT = "content"
    FOOTER = "footer"


class AppAction(Enum):
    NOOP = "noop"
    QUIT = "quit"


# Directional focus moves. Every (direction, region) pair is listed; None is an
# explicit no-op.
_NAVIGATION: dict[tuple[str, FocusTarget], FocusTarget | None] = {
    ("left", FocusTarget.HEADER): None,
    ("left", FocusTarget.SIDEBAR): FocusTarget.CONTENT,
    ("left", FocusTarget.CONTENT): FocusTarget.SIDEBAR,
    ("left", FocusTarget.FOOTER): None,
    ("right", FocusTarget.HEADER): None,
    ("right", FocusTarget.SIDEBAR): FocusTarget.CONTENT,
    ("right", FocusTarget.CONTENT): FocusTarget.SIDEBAR,
    ("right", FocusTarget.FOOTER): None,
}


def _direction(event: KeyEvent) -> str | None:
    if event.code is KeyCode.LEFT or event.is_char("h"):
        return "left"
    if event.code is KeyCode.RIGHT or event.is_char("l"):
        return "right"
    return None


@dataclass
class SessionContext:
    """The store plus what is currently loaded from it."""

    store: ProjectStore
    projects: list[ProjectSummary] = field(default_factory=list)
    current_project: Project | None = None


@dataclass(frozen=True)
class AppView:
    """Everything the rendering collaborator needs for one frame."""

    mode: Mode
    focus: FocusTarget | None
    project_name_buffer: str
    header: object
    sidebar: object
    content: object
    footer: object
    modal: object | None


class Router:
    def __init__(self, store: ProjectStore) -> None:
        self.context = SessionContext(store=store)
        self.header = Header()
        self.sidebar = Sidebar()
        self.content = Content()
        self.footer = Footer()
        self.modal: RequestModal | None = None

        self.mode = Mode.NORMAL
        self.focus_target: FocusTarget | None = None
        self.previous_focus: FocusTarget | None = None
        self.modal_return_focus: FocusTarget | None = None
        self.project_name_buffer = ""
        self.tick_count = 0
        self.should_render = True

        self._load_initial(self.context)
        self.set_focus(FocusTarget.SIDEBAR)

    # -- public surface

    @property
    def current_project(self) -> Project | None:
        return self.context.current_project

    def regions(self) -> dict[FocusTarget, Component]:
        return {
            FocusTarget.HEADER: self.header,
            FocusTarget.SIDEBAR: self.sidebar,
            FocusTarget.CONTENT: self.content,
            FocusTarget.FOOTER: self.footer,
        }

    def focused_targets(self) -> list[FocusTarget]:
        return [target for target, region in self.regions().items() if region.focused]

    def set_focus(self, target: FocusTarget | None) -> None:
        for candidate, region in self.regions().items():
            region.focus(candidate is target)
        self.focus_target = target
        self.should_render = True

    def view(self) -> AppView:
        return AppView(
            mode=self.mode,
            focus=self.focus_target,
            project_name_buffer=self.project_name_buffer,
            header=self.header.snapshot(),
            sidebar=self.sidebar.snapshot(),
            content=self.content.snapshot(),
            footer=self.footer.snapshot(),
            modal=self.modal.snapshot() if self.modal else None,
        )

    def handle_event(self, event: InputEvent | None) -> AppAction:
        """Route one input event; `None` is a poll timeout (tick)."""

        if event is None:
            self.tick_count += 1
            return AppAction.NOOP

        self.should_render = True
        if self.modal is not None:
            self._handle_modal_event(self.context, self.modal, event)
            return AppAction.NOOP
        if isinstance(event, KeyEvent):
            return self._handle_key(event)
        if isinstance(event, MouseEvent):
            self._handle_mouse(event)
        return AppAction.NOOP

    # -- modes

    def _set_mode(self, mode: Mode) -> None:
        self.mode = mode
        self.footer.set_mode(mode.value)

    def _handle_key(self, event: KeyEvent) -> AppAction:
        if self.mode is Mode.CREATE_PROJECT:
            self._handle_project_creation(self.context, event)
        elif self.mode is Mode.TAB:
            self._handle_tab_key(event)
        elif self.mode is Mode.COMMAND:
            return self._handle_command_key(event)
        elif self.mode is Mode.EDIT_REQUEST:
            self._dispatch_content(self.context, self.content.tick(event))
        elif event.is_char(" "):
            self._set_mode(Mode.COMMAND)
        elif _direction(event) is not None:
            self._navigate(_direction(event))
        else:
            self._forward_key(event)
        return AppAction.NOOP

    def _handle_command_key(self, event: KeyEvent) -> AppAction:
        if event.is_char("q"):
            return AppAction.QUIT
        if event.is_char(" ", "n") or event.code is KeyCode.ESCAPE:
            self._set_mode(Mode.NORMAL)
        elif event.is_char("t"):
            self._enter_tab_mode()
        elif event.is_char("c"):
            self._enter_create_mode()
        return AppAction.NOOP

    def _enter_tab_mode(self) -> None:
        self.previous_focus = self.focus_target
        self.set_focus(FocusTarget.HEADER)
        self._set_mode(Mode.TAB)

    def _exit_tab_mode(self) -> None:
        self._set_mode(Mode.NORMAL)
        self.set_focus(self.previous_focus)
        self.previous_focus = None

    def _enter_create_mode(self) -> None:
        self.project_name_buffer = ""
        self.footer.set_status("New project name: ")
        self._set_mode(Mode.CREATE_PROJECT)

    def _handle_tab_key(self, event: KeyEvent) -> None:
        if event.code is KeyCode.ESCAPE:
            self._exit_tab_mode()
        elif not event.is_char(" "):
            self._dispatch_header(self.context, self.header.handle_key(event))

    def _navigate(self, direction: str | None) -> None:
        if self.focus_target is None or direction is None:
            return
        target = _NAVIGATION[(direction, self.focus_target)]
        if target is not None:
            self.set_focus(target)

    def _forward_key(self, event: KeyEvent) -> None:
        target = self.focus_target
        if target is FocusTarget.HEADER:
            self._dispatch_header(self.context, self.header.tick(event))
        elif target is FocusTarget.SIDEBAR:
            self._dispatch_sidebar(self.context, self.sidebar.tick(event))
        elif target is FocusTarget.CONTENT:
            self._dispatch_content(self.context, self.content.tick(event))

    def _handle_mouse(self, event: MouseEvent) -> None:
        if not event.is_left_click or self.mode is Mode.CREATE_PROJECT:
            return
        target = None
        for candidate, region in self.regions().items():
            if region.rect is not None and region.rect.contains(event.column, event.row):
                target = candidate
                break
        if target is None:
            return
        # Edit and tab modes keep their region; clicks elsewhere are ignored.
        if self.mode is Mode.EDIT_REQUEST and target is not FocusTarget.CONTENT:
            return
        if self.mode is Mode.TAB and target is not FocusTarget.HEADER:
            return

        self.set_focus(target)
        if target is FocusTarget.HEADER:
            self._dispatch_header(self.context, self.header.tick(event))
        elif target is FocusTarget.SIDEBAR:
            self._dispatch_sidebar(self.context, self.sidebar.tick(event))
        elif target is FocusTarget.CONTENT:
            self._dispatch_content(self.context, self.content.tick(event))

    # -- action interpretation

    def _dispatch_header(self, ctx: SessionContext, action: object) -> None:
        if isinstance(action, HeaderTabChanged):
            self._change_tab(ctx, action.index)
        elif isinstance(action, HeaderDeleteProject):
            self._delete_project(ctx, action.index)
            if self.mode is Mode.TAB:
                self._exit_tab_mode()
        elif isinstance(action, HeaderCreateProject):
            if self.mode is Mode.TAB:
                self._exit_tab_mode()
            self._enter_create_mode()

    def _dispatch_sidebar(self, ctx: SessionContext, action: object) -> None:
        if isinstance(action, SidebarSelected):
            self.content.set_request(action.request)
        elif isinstance(action, SidebarDelete):
            self._apply_update(ctx, action.update)
            selected = self.sidebar.selected
            if selected is None:
                self.content.clear_request()
            else:
                self.content.set_request(selected)
        elif isinstance(action, SidebarEditRequested):
            self._start_editing(action.request)
        elif isinstance(action, SidebarShowModal):
            self._open_modal()

    def _dispatch_content(self, ctx: SessionContext, action: object) -> None:
        if isinstance(action, ContentRequestUpdated):
            self._commit_request(ctx, action.request)
        elif isinstance(action, ContentEditRequested) and self.content.request is not None:
            self._start_editing(self.content.request)
        elif isinstance(action, ContentEditExited):
            self._set_mode(Mode.NORMAL)

    def _start_editing(self, request: Request) -> None:
        self.content.set_request(request)
        self.content.enter_edit_mode()
        self.set_focus(FocusTarget.CONTENT)
        self._set_mode(Mode.EDIT_REQUEST)

    # -- modal

    def _open_modal(self) -> None:
        self.modal_return_focus = self.focus_target
        self.set_focus(None)
        self.modal = RequestModal()

    def _close_modal(self) -> None:
        self.modal = None
        self.set_focus(self.modal_return_focus)
        self.modal_return_focus = None

    def _handle_modal_event(self, ctx: SessionContext, modal: RequestModal, event: InputEvent) -> None:
        action = modal.tick(event)
        if isinstance(action, ModalClose):
            self._close_modal()
        elif isinstance(action, ModalSubmit):
            self._close_modal()
            if ctx.current_project is None:
                self.footer.set_status("Create a project first (SPACE c)")
                return
            self._apply_update(ctx, AddRequest(request=action.request))

    # -- project mutations

    def _save(self, ctx: SessionContext) -> bool:
        project = ctx.current_project
        if project is None:
            return False
        try:
            ctx.store.save(project)
        except StorageError as exc:
            # The in-memory change stays; the next successful save catches up.
            logger.warning("save of project %s failed: %s", project.id, exc)
            self.footer.set_status(f"Failed to save project: {exc}")
            return False
        return True

    def _apply_update(self, ctx: SessionContext, update: ProjectUpdate) -> None:
        project = ctx.current_project
        if project is None:
            return
        project.apply_update(update)
        self._save(ctx)
        self.sidebar.set_requests(project.requests)

    def _commit_request(self, ctx: SessionContext, request: Request) -> None:
        project = ctx.current_project
        if project is None:
            return
        index = project.find_request_index(request.name)
        if index is None:
            self.footer.set_status(f"Request not found: {request.name}")
            return
        self._apply_update(ctx, UpdateRequest(index=index, request=request))

    def _refresh_projects(self, ctx: SessionContext) -> None:
        try:
            ctx.projects = ctx.store.list()
        except StorageError as exc:
            logger.warning("listing projects failed: %s", exc)
            self.footer.set_status(f"Failed to list projects: {exc}")

    def _load(self, ctx: SessionContext, project_id: str) -> Project | None:
        try:
            return ctx.store.load(project_id)
        except StorageError as exc:
            logger.warning("load of project %s failed: %s", project_id, exc)
            self.footer.set_status(f"Failed to load project: {exc}")
            return None

    def _show_project(self, project: Project | None) -> None:
        self.sidebar.set_requests(project.requests if project else [], keep_selection=False)
        self.content.clear_request()

    def _load_initial(self, ctx: SessionContext) -> None:
        self._refresh_projects(ctx)
        if ctx.projects:
            ctx.current_project = self._load(ctx, ctx.projects[0].id)
        current = ctx.current_project
        self.header.set_projects(ctx.projects, current.id if current else None)
        self._show_project(current)

    def _handle_project_creation(self, ctx: SessionContext, event: KeyEvent) -> None:
        if event.code is KeyCode.ENTER:
            name = self.project_name_buffer.strip()
            if name:
                self._create_project(ctx, name)
            else:
                self.footer.set_status("Ready")
            self.project_name_buffer = ""
            self._set_mode(Mode.NORMAL)
        elif event.code is KeyCode.ESCAPE:
            self.project_name_buffer = ""
            self.footer.set_status("Ready")
            self._set_mode(Mode.NORMAL)
        elif event.code is KeyCode.BACKSPACE:
            self.project_name_buffer = self.project_name_buffer[:-1]
            self.footer.set_status(f"New project name: {self.project_name_buffer}")
        elif event.code is KeyCode.CHAR and event.char:
            self.project_name_buffer += event.char
            self.footer.set_status(f"New project name: {self.project_name_buffer}")

    def _create_project(self, ctx: SessionContext, name: str) -> None:
        project = Project.new(name)
        try:
            ctx.store.save(project)
        except StorageError as exc:
            logger.warning("creating project %r failed: %s", name, exc)
            self.footer.set_status(f"Failed to save project: {exc}")
            return
        ctx.current_project = project
        self._refresh_projects(ctx)
        self.header.set_projects(ctx.projects, project.id)
        self._show_project(project)
        self.footer.set_status(f"Created project {name}")

    def _change_tab(self, ctx: SessionContext, index: int) -> None:
        if not 0 <= index < len(ctx.projects):
            return
        project = self._load(ctx, ctx.projects[index].id)
        if project is None:
            # Keep the tab bar on the project the sidebar still shows.
            current = ctx.current_project
            self.header.set_projects(ctx.projects, current.id if current else None)
            return
        ctx.current_project = project
        self._show_project(project)

    def _delete_project(self, ctx: SessionContext, index: int) -> None:
        if not 0 <= index < len(ctx.projects):
            return
        project_id = ctx.projects[index].id
        try:
            ctx.store.delete(project_id)
        except StorageError as exc:
            logger.warning("delete of project %s failed: %s", project_id, exc)
            self.footer.set_status(f"Failed to delete project: {exc}")
            return

        self._refresh_projects(ctx)
        ctx.current_project = self._load(ctx, ctx.projects[0].id) if ctx.projects else None
        current = ctx.current_project
        self.header.set_projects(ctx.projects, current.id if current else None)
        self._show_project(current)
        self.footer.set_status("Project deleted successfully")
