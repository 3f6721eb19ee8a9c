"""Footer: mode indicator, key hints and the status line."""

from __future__ import annotations

from dataclasses import dataclass

from core.components.base import Region
from core.domain.events import InputEvent

KEY_HINTS: dict[str, list[tuple[str, str]]] = {
    "NORMAL": [("SPACE", "command mode"), ("h/l", "move focus"), ("a", "new request")],
    "COMMAND": [
        ("t", "tab mode"),
        ("c", "create project"),
        ("q", "quit"),
        ("n", "normal mode"),
        ("SPACE", "toggle mode"),
    ],
    "TAB": [("h/l", "switch tabs"), ("1-9", "select tab"), ("d", "delete project"), ("ESC", "back")],
    "CREATE": [("ENTER", "confirm"), ("ESC", "cancel")],
    "EDIT": [("TAB", "next field"), ("S-TAB", "previous field"), ("ENTER", "commit"), ("ESC", "back")],
}


@dataclass(frozen=True)
class FooterNoop:
    pass


FooterAction = FooterNoop


@dataclass(frozen=True)
class FooterView:
    focused: bool
    mode: str
    status: str
    hints: list[tuple[str, str]]


class Footer(Region):
    def __init__(self) -> None:
        super().__init__()
        self.status = "Ready"
        self.mode = "NORMAL"

    def set_status(self, status: str) -> None:
        self.status = status

    def set_mode(self, mode: str) -> None:
        self.mode = mode

    def tick(self, event: InputEvent | None) -> FooterAction:
        return FooterNoop()

    def snapshot(self) -> FooterView:
        return FooterView(
            focused=self.focused,
            mode=self.mode,
            status=self.status,
            hints=list(KEY_HINTS.get(self.mode, [])),
        )
