"""UI component contract.

Each region of the screen is a small state machine with a closed action type.
The router calls `tick` with the next input event and interprets the returned
action; the rendering collaborator only ever reads `snapshot()`.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from core.domain.events import InputEvent, Rect

ActionT = TypeVar("ActionT", covariant=True)


@runtime_checkable
class Component(Protocol[ActionT]):
    rect: Rect | None

    def tick(self, event: InputEvent | None) -> ActionT:
        ...

    def focus(self, focused: bool) -> None:
        ...

    @property
    def focused(self) -> bool:
        ...

    def snapshot(self) -> Any:
        ...
