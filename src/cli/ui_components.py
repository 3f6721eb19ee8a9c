"""UI components for the terminal (Rich).

Why separate components:
- Keeps the textual adapter free of drawing details.
- Every function turns a Core snapshot into a Rich renderable; nothing here
  mutates state.

Geometry contract with the Core: each region is a bordered panel whose first
inner row is one line below the region's top edge, and list-like regions
(sidebar rows, editor fields, modal fields) draw exactly one line per item.
"""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.components.content import ContentView
from core.components.editor import FIELD_ORDER, EditField, format_auth, format_pairs
from core.components.footer import FooterView
from core.components.header import HeaderView
from core.components.modal import MODAL_FIELDS, ModalField, ModalView
from core.components.sidebar import SidebarView
from core.domain.models import Request

METHOD_STYLES: dict[str, str] = {
    "GET": "bold #61affe",
    "POST": "bold #49cc90",
    "PUT": "bold #fca130",
    "DELETE": "bold #f93e3e",
    "PATCH": "bold #50e3c2",
    "HEAD": "bold #9061f9",
}

MODE_STYLES: dict[str, str] = {
    "NORMAL": "bold black on green",
    "COMMAND": "bold black on cyan",
    "TAB": "bold black on yellow",
    "CREATE": "bold black on magenta",
    "EDIT": "bold black on blue",
}


def _border(focused: bool) -> str:
    return "bright_yellow" if focused else "grey37"


def method_style(method: str | None) -> str:
    return METHOD_STYLES.get((method or "").upper(), "bold grey50")


def render_header(view: HeaderView) -> Panel:
    if not view.projects:
        body: Text | Table = Text("Press SPACE then c to create a new project", style="white", justify="center")
    else:
        # Equal-width cells so a click column maps back to a tab index.
        body = Table.grid(expand=True)
        for _ in view.projects:
            body.add_column(ratio=1, no_wrap=True, overflow="ellipsis")
        cells = []
        for index, project in enumerate(view.projects):
            active = index == view.active_tab
            style = "bold bright_yellow" if active else ("white" if view.focused else "grey62")
            cells.append(Text(f"{'▸' if active else ' '}{index + 1} {project.name}", style=style))
        body.add_row(*cells)
    return Panel(body, border_style=_border(view.focused), title="Projects", title_align="left", padding=0)


def render_sidebar(view: SidebarView) -> Panel:
    lines = Text(no_wrap=True, overflow="ellipsis")
    for index, request in enumerate(view.requests):
        selected = index == view.selected_index
        if index:
            lines.append("\n")
        background = " on grey15" if selected else ""
        lines.append("→ " if selected else "  ", style=background.strip() or None)
        lines.append(f" {request.method or ''} ", style=method_style(request.method) + background)
        lines.append(f" {request.name}", style=("white" if view.focused else "grey62") + background)
    if not view.requests:
        lines.append("No requests (a: new)", style="dim")
    return Panel(lines, title="⦿ Requests", title_align="left", border_style=_border(view.focused))


def _field_text(request: Request, field: EditField) -> str:
    if field is EditField.METHOD:
        return request.method or ""
    if field is EditField.URL:
        return request.url or ""
    if field is EditField.HEADERS:
        return format_pairs(request.headers, ": ").replace("\n", ", ")
    if field is EditField.QUERY_PARAMS:
        return format_pairs(request.query_params, " = ").replace("\n", ", ")
    if field is EditField.PATH_PARAMS:
        return format_pairs(request.path_params, " = ").replace("\n", ", ")
    if field is EditField.AUTH:
        return format_auth(request.auth) or "none"
    return request.body or ""


def render_content(view: ContentView) -> Panel:
    request = view.request
    if request is None:
        body: Text | Group = Text("ℹ No request selected", justify="center")
        return Panel(body, border_style=_border(view.focused))

    if view.editing:
        lines = Text(no_wrap=True, overflow="ellipsis")
        for index, field in enumerate(FIELD_ORDER):
            active = field is view.field_active
            if index:
                lines.append("\n")
            lines.append(f"{field.label}: ", style="bold cyan")
            if active:
                lines.append(view.buffer + "▎", style="white on grey15")
                if not field.is_scalar:
                    current = _field_text(request, field)
                    if current:
                        lines.append(f"  [{current}]", style="dim")
            else:
                lines.append(_field_text(request, field), style="white")
        return Panel(lines, title=f"{request.name} - Edit", title_align="left", border_style=_border(view.focused))

    summary = Text(no_wrap=True, overflow="ellipsis")
    summary.append(f" {request.method or ''} ", style=method_style(request.method))
    summary.append(f" {request.url or ''} ", style="white")
    summary.append("(press e to edit)", style="dim")
    parts: list[Text] = [summary]
    response = view.response
    if response is None:
        parts.append(Text("No response available", style="dim"))
    else:
        status = response.status_code or 0
        style = "green" if 200 <= status < 300 else "yellow" if 300 <= status < 400 else "red"
        parts.append(Text.assemble((f" {status} ", f"bold {style}"), f" {response.response_time_ms}ms"))
        for key, value in response.headers:
            parts.append(Text.assemble((f"{key}: ", "bold"), value))
        parts.append(Text(response.body or "No body"))
    return Panel(Group(*parts), title=f"{request.name} - View", title_align="left", border_style=_border(view.focused))


def render_footer(view: FooterView) -> Panel:
    line = Text(no_wrap=True, overflow="ellipsis")
    line.append(f" {view.mode} ", style=MODE_STYLES.get(view.mode, "bold reverse"))
    for key, description in view.hints:
        line.append(" ")
        line.append(f" {key} ", style="bold black on white")
        line.append(f" {description}")
    line.append("  ")
    line.append(view.status, style="italic")
    return Panel(line, border_style=_border(view.focused))


def render_modal(view: ModalView) -> Panel:
    lines = Text(no_wrap=True, overflow="ellipsis")
    extras = {
        ModalField.HEADERS: format_pairs(view.headers, ": ").replace("\n", ", "),
        ModalField.QUERY_PARAMS: format_pairs(view.query_params, "=").replace("\n", ", "),
        ModalField.PATH_PARAMS: format_pairs(view.path_params, "=").replace("\n", ", "),
        ModalField.AUTH: format_auth(view.auth),
    }
    for index, field in enumerate(MODAL_FIELDS):
        active = field is view.current_field
        if index:
            lines.append("\n")
        lines.append(f"{field.label + ':':<14}", style="bold cyan" if active else "cyan")
        lines.append(view.values[field] + ("▎" if active else ""), style="white on grey15" if active else "white")
        if extras.get(field):
            lines.append(f"  [{extras[field]}]", style="dim")
    lines.append("\n")
    if view.error:
        lines.append(view.error, style="bold red")
    else:
        lines.append("TAB next • ENTER add/confirm • ESC cancel", style="dim")
    return Panel(lines, title="New Request", border_style="bright_cyan")
