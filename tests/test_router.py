from __future__ import annotations

import pytest
from conftest import keys

from core.domain.errors import StorageError
from core.domain.events import KeyCode, KeyEvent, MouseEvent, MouseKind, Rect
from core.domain.models import Project, Request
from core.services.router import AppAction, FocusTarget, Mode, Router


def press(router: Router, *items) -> list[AppAction]:
    return [router.handle_event(event) for event in keys(*items)]


def create_project(router: Router, name: str) -> None:
    press(router, " ", "c", name, KeyCode.ENTER)


def add_request(router: Router, name: str, method: str = "GET", url: str = "https://api.example.com") -> None:
    press(router, "a", name, KeyCode.TAB, method, KeyCode.TAB, url)
    # URL -> Headers -> Query -> Path -> Auth -> Body, then submit.
    press(router, *[KeyCode.TAB] * 6)


@pytest.fixture
def router(json_store) -> Router:
    return Router(json_store)


def test_initial_state(router):
    assert router.mode is Mode.NORMAL
    assert router.focused_targets() == [FocusTarget.SIDEBAR]
    assert router.current_project is None
    assert router.footer.status == "Ready"


def test_command_mode_toggles(router):
    press(router, " ")
    assert router.mode is Mode.COMMAND
    assert router.footer.mode == "COMMAND"

    press(router, " ")
    assert router.mode is Mode.NORMAL

    press(router, " ", "n")
    assert router.mode is Mode.NORMAL

    press(router, " ", KeyCode.ESCAPE)
    assert router.mode is Mode.NORMAL


def test_quit_only_from_command_mode(router):
    assert press(router, "q") == [AppAction.NOOP]
    assert press(router, " ", "q")[-1] is AppAction.QUIT


def test_ticks_do_not_change_state(router):
    for _ in range(3):
        assert router.handle_event(None) is AppAction.NOOP

    assert router.tick_count == 3
    assert router.mode is Mode.NORMAL


def test_directional_focus_is_exclusive(router):
    press(router, "l")
    assert router.focused_targets() == [FocusTarget.CONTENT]

    press(router, "l")
    assert router.focused_targets() == [FocusTarget.SIDEBAR]

    press(router, "h")
    assert router.focused_targets() == [FocusTarget.CONTENT]

    router.handle_event(KeyEvent(KeyCode.LEFT))
    assert router.focused_targets() == [FocusTarget.SIDEBAR]


def test_create_project(router, json_store):
    press(router, " ", "c", "API")
    assert router.mode is Mode.CREATE_PROJECT
    assert router.footer.status == "New project name: API"

    press(router, " Tests", KeyCode.ENTER)

    assert router.mode is Mode.NORMAL
    assert router.current_project.name == "API Tests"
    assert [p.name for p in json_store.list()] == ["API Tests"]
    assert router.footer.status == "Created project API Tests"


def test_create_project_cancel_and_empty_name(router, json_store):
    press(router, " ", "c", "Nope", KeyCode.ESCAPE)
    press(router, " ", "c", "   ", KeyCode.ENTER)

    assert router.mode is Mode.NORMAL
    assert json_store.list() == []
    assert router.current_project is None


def test_full_session_across_projects(router, json_store):
    create_project(router, "API Tests")
    add_request(router, "Get Users")

    project = router.current_project
    assert [r.name for r in project.requests] == ["Get Users"]
    assert json_store.load(project.id).requests[0].method == "GET"
    assert router.sidebar.selected.name == "Get Users"

    create_project(router, "Other")
    assert router.current_project.name == "Other"
    assert router.sidebar.requests == []

    press(router, " ", "t")
    assert router.mode is Mode.TAB
    assert router.focused_targets() == [FocusTarget.HEADER]

    index = [p.name for p in router.header.projects].index("API Tests")
    press(router, str(index + 1))
    assert router.current_project.name == "API Tests"
    assert [r.name for r in router.sidebar.requests] == ["Get Users"]

    press(router, KeyCode.ESCAPE)
    assert router.mode is Mode.NORMAL
    assert router.focused_targets() == [FocusTarget.SIDEBAR]


def test_reopening_loads_first_project(json_store):
    json_store.save(Project(id="b", name="Second"))
    json_store.save(Project(id="a", name="First", requests=[Request(name="r")]))

    router = Router(json_store)

    assert router.current_project.name == "First"
    assert router.sidebar.selected.name == "r"
    assert router.header.active_tab == 0


def test_modal_captures_every_event(router):
    create_project(router, "P")
    press(router, "a")

    assert router.modal is not None
    assert router.focused_targets() == []

    press(router, " ", "h")
    assert router.mode is Mode.NORMAL
    assert router.modal.values[router.modal.current_field] == " h"

    press(router, KeyCode.ESCAPE)
    assert router.modal is None
    assert router.focused_targets() == [FocusTarget.SIDEBAR]
    assert router.current_project.requests == []


def test_modal_submit_without_project(router):
    add_request(router, "Orphan")

    assert router.modal is None
    assert router.footer.status == "Create a project first (SPACE c)"


def test_sidebar_delete_request(router, json_store):
    create_project(router, "P")
    add_request(router, "one")
    add_request(router, "two")

    press(router, "j", "d")

    project = json_store.load(router.current_project.id)
    assert [r.name for r in project.requests] == ["one"]
    assert router.content.request.name == "one"

    press(router, "d")
    assert router.sidebar.requests == []
    assert router.content.request is None


def test_edit_request_flow(router, json_store):
    create_project(router, "P")
    add_request(router, "Get Users", method="GET")

    press(router, "e")
    assert router.mode is Mode.EDIT_REQUEST
    assert router.focused_targets() == [FocusTarget.CONTENT]

    # Leave Method as-is, then add a header.
    press(router, KeyCode.TAB, KeyCode.TAB, "Accept:application/json", KeyCode.ENTER)
    saved = json_store.load(router.current_project.id).requests[0]
    assert saved.headers == [("Accept", "application/json")]

    # Global keys are routed to the editor while editing.
    press(router, " ")
    assert router.mode is Mode.EDIT_REQUEST

    press(router, KeyCode.ESCAPE, KeyCode.ESCAPE)
    assert router.mode is Mode.NORMAL
    assert router.sidebar.requests[0].headers == [("Accept", "application/json")]


def test_renamed_request_cannot_be_found(router):
    create_project(router, "P")
    add_request(router, "old")

    router._commit_request(router.context, Request(name="new"))

    assert router.footer.status == "Request not found: new"
    assert [r.name for r in router.current_project.requests] == ["old"]


def test_delete_project_from_tab_mode(router, json_store):
    create_project(router, "A")
    create_project(router, "B")

    press(router, " ", "t", "d")

    assert len(json_store.list()) == 1
    assert router.current_project is not None
    assert router.mode is Mode.NORMAL
    assert router.footer.status == "Project deleted successfully"

    press(router, " ", "t", "d")
    assert json_store.list() == []
    assert router.current_project is None
    assert router.header.projects == []


def test_failed_save_reports_and_keeps_memory(router, json_store, monkeypatch):
    create_project(router, "P")

    def fail(project):
        raise StorageError("disk full")

    monkeypatch.setattr(json_store, "save", fail)
    add_request(router, "kept")

    assert router.footer.status == "Failed to save project: disk full"
    assert [r.name for r in router.current_project.requests] == ["kept"]


def test_startup_survives_listing_failure(json_store, monkeypatch):
    def fail():
        raise StorageError("locked")

    monkeypatch.setattr(json_store, "list", fail)

    router = Router(json_store)

    assert router.current_project is None
    assert router.footer.status == "Failed to list projects: locked"


def _layout(router: Router) -> None:
    router.header.rect = Rect(0, 0, 80, 3)
    router.sidebar.rect = Rect(0, 3, 24, 18)
    router.content.rect = Rect(24, 3, 56, 18)
    router.footer.rect = Rect(0, 21, 80, 3)


def test_click_moves_focus_and_selects(router):
    create_project(router, "P")
    add_request(router, "one")
    add_request(router, "two")
    _layout(router)

    router.handle_event(MouseEvent(MouseKind.DOWN, 40, 10))
    assert router.focused_targets() == [FocusTarget.CONTENT]

    router.handle_event(MouseEvent(MouseKind.DOWN, 5, 5))
    assert router.focused_targets() == [FocusTarget.SIDEBAR]
    assert router.sidebar.selected.name == "two"
    assert router.content.request.name == "two"

    router.handle_event(MouseEvent(MouseKind.UP, 40, 10))
    assert router.focused_targets() == [FocusTarget.SIDEBAR]


def test_clicks_outside_content_are_ignored_while_editing(router):
    create_project(router, "P")
    add_request(router, "one")
    _layout(router)
    press(router, "e")

    router.handle_event(MouseEvent(MouseKind.DOWN, 5, 5))

    assert router.focused_targets() == [FocusTarget.CONTENT]
    assert router.mode is Mode.EDIT_REQUEST


def test_superscript_digit_in_tab_mode_is_ignored(router):
    create_project(router, "P")
    press(router, " ", "t")

    assert press(router, "²") == [AppAction.NOOP]
    assert router.mode is Mode.TAB
    assert router.current_project.name == "P"


def test_startup_with_undecodable_document_reports_status(json_store):
    (json_store.directory / "bad.json").write_bytes(b"\xff")

    router = Router(json_store)

    assert router.current_project is None
    assert router.footer.status.startswith("Failed to list projects:")


def test_tab_switch_to_missing_project_keeps_header_in_sync(router, json_store, monkeypatch):
    create_project(router, "A")
    create_project(router, "B")
    current = router.current_project
    other_index = 1 - router.header.active_tab

    monkeypatch.setattr(json_store, "load", lambda project_id: None)
    press(router, " ", "t", str(other_index + 1))

    assert router.current_project is current
    assert router.header.projects[router.header.active_tab].id == current.id


def test_create_project_with_blank_name_resets_status(router):
    press(router, " ", "c", "   ", KeyCode.ENTER)

    assert router.mode is Mode.NORMAL
    assert router.footer.status == "Ready"
