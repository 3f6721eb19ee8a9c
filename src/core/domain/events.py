"""Terminal input events, as seen by the Core.

The terminal adapter (textual) translates its own events into these values, so
the router and components never parse raw terminal sequences and can be
driven directly from tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyCode(str, Enum):
    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    BACK_TAB = "back_tab"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class MouseKind(str, Enum):
    DOWN = "down"
    UP = "up"
    DRAG = "drag"
    SCROLL = "scroll"


class MouseButton(str, Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


@dataclass(frozen=True)
class KeyEvent:
    code: KeyCode
    char: str | None = None

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        """Shorthand for a printable character key."""

        return cls(KeyCode.CHAR, char)

    def is_char(self, *chars: str) -> bool:
        return self.code is KeyCode.CHAR and self.char in chars


@dataclass(frozen=True)
class MouseEvent:
    kind: MouseKind
    column: int
    row: int
    button: MouseButton = MouseButton.LEFT

    @property
    def is_left_click(self) -> bool:
        return self.kind is MouseKind.DOWN and self.button is MouseButton.LEFT


InputEvent = KeyEvent | MouseEvent


@dataclass(frozen=True)
class Rect:
    """Viewport assigned to a region by the rendering collaborator."""

    x: int
    y: int
    width: int
    height: int

    def contains(self, column: int, row: int) -> bool:
        return self.x <= column < self.x + self.width and self.y <= row < self.y + self.height
