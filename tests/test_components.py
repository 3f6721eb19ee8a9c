from __future__ import annotations

from conftest import keys

from core.components.content import Content, ContentEditRequested, ContentNoop, ContentRequestUpdated
from core.components.editor import EditField
from core.components.footer import Footer
from core.components.header import (
    Header,
    HeaderCreateProject,
    HeaderDeleteProject,
    HeaderNoop,
    HeaderTabChanged,
)
from core.components.modal import ModalClose, ModalField, ModalNoop, ModalSubmit, RequestModal
from core.components.sidebar import (
    Sidebar,
    SidebarEditRequested,
    SidebarNoop,
    SidebarSelected,
    SidebarShowModal,
)
from core.domain.events import KeyCode, KeyEvent, MouseEvent, MouseKind, Rect
from core.domain.models import BasicAuth, NoAuth, ProjectSummary, Request
from core.interfaces.component import Component


def _click(column: int, row: int) -> MouseEvent:
    return MouseEvent(MouseKind.DOWN, column, row)


# -- sidebar


def _sidebar(*names: str) -> Sidebar:
    sidebar = Sidebar()
    sidebar.set_requests([Request(name=name, method="GET") for name in names])
    return sidebar


def test_sidebar_selects_first_request_on_load():
    assert _sidebar("a", "b").selected_index == 0
    assert _sidebar().selected_index is None


def test_sidebar_navigation_clamps():
    sidebar = _sidebar("a", "b", "c")

    for event in keys("jjjj"):
        sidebar.tick(event)
    assert sidebar.selected_index == 2

    action = sidebar.tick(KeyEvent(KeyCode.UP))
    assert action == SidebarSelected(1, sidebar.requests[1])

    for event in keys("kkk"):
        sidebar.tick(event)
    assert sidebar.selected_index == 0


def test_sidebar_actions():
    sidebar = _sidebar("a", "b")
    sidebar.tick(KeyEvent.of("j"))

    assert isinstance(sidebar.tick(KeyEvent(KeyCode.ENTER)), SidebarSelected)
    assert sidebar.tick(KeyEvent.of("e")) == SidebarEditRequested(1, sidebar.requests[1])
    assert sidebar.tick(KeyEvent.of("d")).update.index == 1
    assert isinstance(sidebar.tick(KeyEvent.of("a")), SidebarShowModal)


def test_empty_sidebar_only_offers_new_request():
    sidebar = _sidebar()

    assert isinstance(sidebar.tick(KeyEvent.of("j")), SidebarNoop)
    assert isinstance(sidebar.tick(KeyEvent.of("d")), SidebarNoop)
    assert isinstance(sidebar.tick(KeyEvent.of("a")), SidebarShowModal)


def test_sidebar_selection_survives_shrinking_list():
    sidebar = _sidebar("a", "b", "c")
    sidebar.selected_index = 2

    sidebar.set_requests([Request(name="a")])

    assert sidebar.selected_index == 0


def test_sidebar_click_selects_row():
    sidebar = _sidebar("a", "b", "c")
    sidebar.rect = Rect(0, 3, 30, 10)

    action = sidebar.tick(_click(5, 6))

    assert action == SidebarSelected(2, sidebar.requests[2])
    assert isinstance(sidebar.tick(_click(5, 3)), SidebarNoop)
    assert isinstance(sidebar.tick(_click(5, 9)), SidebarNoop)


# -- header


def _header(count: int) -> Header:
    header = Header()
    header.set_projects([ProjectSummary(id=str(i), name=f"P{i}") for i in range(count)])
    return header


def test_header_t_creates_only_when_empty():
    assert isinstance(_header(0).handle_key(KeyEvent.of("t")), HeaderCreateProject)
    assert isinstance(_header(2).handle_key(KeyEvent.of("t")), HeaderNoop)


def test_header_switches_tabs_within_bounds():
    header = _header(3)

    assert isinstance(header.handle_key(KeyEvent.of("h")), HeaderNoop)
    assert header.handle_key(KeyEvent.of("l")) == HeaderTabChanged(1)
    assert header.handle_key(KeyEvent(KeyCode.RIGHT)) == HeaderTabChanged(2)
    assert isinstance(header.handle_key(KeyEvent.of("l")), HeaderNoop)
    assert header.handle_key(KeyEvent.of("1")) == HeaderTabChanged(0)
    assert isinstance(header.handle_key(KeyEvent.of("9")), HeaderNoop)
    assert header.handle_key(KeyEvent.of("d")) == HeaderDeleteProject(0)


def test_header_keeps_active_project_when_refreshed():
    header = _header(3)

    header.set_projects(header.projects, active_id="2")

    assert header.active_tab == 2


def test_header_click_selects_tab():
    header = _header(2)
    header.rect = Rect(0, 0, 42, 3)

    assert header.tick(_click(30, 1)) == HeaderTabChanged(1)
    assert header.tick(_click(5, 1)) == HeaderTabChanged(0)
    assert isinstance(header.tick(_click(5, 0)), HeaderNoop)


# -- footer


def test_footer_hints_follow_mode():
    footer = Footer()
    footer.set_mode("COMMAND")
    footer.set_status("hello")

    view = footer.snapshot()

    assert ("q", "quit") in view.hints
    assert view.status == "hello"


# -- content


def test_content_asks_to_edit_only_with_a_request():
    content = Content()
    assert isinstance(content.tick(KeyEvent.of("e")), ContentNoop)

    content.set_request(Request(name="r"))
    assert isinstance(content.tick(KeyEvent.of("e")), ContentEditRequested)


def test_content_click_activates_field_row():
    content = Content()
    content.set_request(Request(name="r"))
    content.enter_edit_mode()
    content.rect = Rect(30, 3, 50, 12)

    content.tick(_click(40, 4 + 5))

    assert content.snapshot().field_active is EditField.AUTH


def test_content_commit_reports_updated_request():
    content = Content()
    content.set_request(Request(name="r"))
    content.enter_edit_mode()

    actions = [content.tick(event) for event in keys("GET", KeyCode.ENTER)]

    assert actions[-1] == ContentRequestUpdated(content.request)
    assert content.request.method == "GET"


# -- modal


def test_modal_requires_a_name():
    modal = RequestModal()

    action = modal.tick(KeyEvent(KeyCode.BACK_TAB))
    assert isinstance(action, ModalNoop)
    modal.current_field = ModalField.BODY
    action = modal.tick(KeyEvent(KeyCode.ENTER))

    assert isinstance(action, ModalNoop)
    assert modal.error == "Name is required"
    assert modal.current_field is ModalField.NAME


def test_modal_builds_request():
    modal = RequestModal()
    events = keys(
        "Get Users", KeyCode.TAB,
        "GET", KeyCode.ENTER,
        "https://api.example.com/users", KeyCode.TAB,
        "Accept:application/json", KeyCode.ENTER, "broken", KeyCode.ENTER, KeyCode.TAB,
        "page=1", KeyCode.ENTER, KeyCode.TAB,
        KeyCode.TAB,
        "basic admin pw", KeyCode.ENTER, KeyCode.TAB,
        "{}",
    )
    for event in events:
        assert isinstance(modal.tick(event), ModalNoop)

    action = modal.tick(KeyEvent(KeyCode.TAB))

    assert isinstance(action, ModalSubmit)
    request = action.request
    assert request.name == "Get Users"
    assert request.method == "GET"
    assert request.url == "https://api.example.com/users"
    assert request.headers == [("Accept", "application/json")]
    assert request.query_params == [("page", "1")]
    assert request.path_params is None
    assert request.auth == BasicAuth(username="admin", password="pw")
    assert request.body == "{}"


def test_modal_escape_closes_and_back_tab_stops_at_name():
    modal = RequestModal()

    modal.tick(KeyEvent(KeyCode.BACK_TAB))
    assert modal.current_field is ModalField.NAME
    assert modal.auth == NoAuth()
    assert isinstance(modal.tick(KeyEvent(KeyCode.ESCAPE)), ModalClose)


def test_modal_click_selects_field():
    modal = RequestModal()
    modal.rect = Rect(10, 5, 60, 12)

    modal.tick(_click(20, 5 + 1 + 2))

    assert modal.current_field is ModalField.URL


def test_every_region_satisfies_the_component_contract():
    for region in (Header(), Sidebar(), Content(), Footer(), RequestModal()):
        assert isinstance(region, Component)
        region.focus(True)
        assert region.focused
        assert region.snapshot() is not None


def test_header_ignores_non_decimal_digit_characters():
    header = _header(3)

    for char in ("²", "٣", "0"):
        assert isinstance(header.handle_key(KeyEvent.of(char)), HeaderNoop)
    assert header.active_tab == 0
