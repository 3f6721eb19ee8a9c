"""Terminal adapter (Textual).

Responsibility:
- Own the terminal: alternate screen, raw input, mouse capture, restore on exit.
- Translate Textual key/click events into Core `InputEvent`s and feed the router.
- Draw the router's snapshot with the Rich renderables in `ui_components` and
  report each region's screen rectangle back for mouse hit-testing.

Textual's default bindings (tab focus cycling, command palette) are disabled so
every key reaches the router.
"""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import Click, Key, Resize
from textual.screen import Screen
from textual.widgets import Static

from cli.ui_components import render_content, render_footer, render_header, render_modal, render_sidebar
from core.domain.events import InputEvent, KeyCode, KeyEvent, MouseButton, MouseEvent, MouseKind, Rect
from core.services.router import AppAction, Router

logger = logging.getLogger(__name__)

_KEY_CODES: dict[str, KeyCode] = {
    "escape": KeyCode.ESCAPE,
    "enter": KeyCode.ENTER,
    "tab": KeyCode.TAB,
    "shift+tab": KeyCode.BACK_TAB,
    "backspace": KeyCode.BACKSPACE,
    "up": KeyCode.UP,
    "down": KeyCode.DOWN,
    "left": KeyCode.LEFT,
    "right": KeyCode.RIGHT,
}

_MOUSE_BUTTONS: dict[int, MouseButton] = {
    1: MouseButton.LEFT,
    2: MouseButton.MIDDLE,
    3: MouseButton.RIGHT,
}


def translate_key(event: Key) -> KeyEvent | None:
    """Textual key -> Core key. Unmapped control keys return None."""

    code = _KEY_CODES.get(event.key)
    if code is not None:
        return KeyEvent(code)
    if event.is_printable and event.character:
        return KeyEvent.of(event.character)
    return None


def translate_click(event: Click) -> MouseEvent:
    return MouseEvent(
        kind=MouseKind.DOWN,
        column=event.screen_x,
        row=event.screen_y,
        button=_MOUSE_BUTTONS.get(event.button, MouseButton.LEFT),
    )


class RegionView(Static):
    can_focus = False


class RurlScreen(Screen, inherit_bindings=False):
    """Default screen without Textual's focus-cycling bindings."""


class RurlApp(App[None], inherit_bindings=False):
    TITLE = "rurl"

    BINDINGS: list[Binding] = []

    CSS = """
    Screen {
        layers: base overlay;
        background: #1e1e2e;
    }
    RegionView {
        padding: 0;
        border: none;
    }
    #header {
        height: 3;
    }
    #body {
        height: 1fr;
    }
    #sidebar {
        width: 30%;
        height: 100%;
    }
    #content {
        width: 1fr;
        height: 100%;
    }
    #footer {
        height: 3;
    }
    #modal {
        layer: overlay;
        display: none;
        width: 60%;
        height: 12;
        offset: 20% 6;
        background: #1e1e2e;
    }
    """

    def __init__(self, router: Router, tick_interval_ms: int = 50) -> None:
        super().__init__()
        self.router = router
        self.tick_interval_ms = tick_interval_ms

    def get_default_screen(self) -> Screen:
        return RurlScreen(id="_default")

    def compose(self) -> ComposeResult:
        yield RegionView(id="header")
        with Horizontal(id="body"):
            yield RegionView(id="sidebar")
            yield RegionView(id="content")
        yield RegionView(id="footer")
        yield RegionView(id="modal")

    def on_mount(self) -> None:
        self.set_interval(self.tick_interval_ms / 1000, self._on_tick)
        self.refresh_view()

    def on_resize(self, event: Resize) -> None:
        self.call_after_refresh(self._sync_rects)

    def on_key(self, event: Key) -> None:
        event.prevent_default()
        event.stop()
        translated = translate_key(event)
        if translated is None:
            return
        self._feed(translated)

    def on_click(self, event: Click) -> None:
        event.stop()
        self._feed(translate_click(event))

    # -- router plumbing

    def _on_tick(self) -> None:
        self.router.handle_event(None)
        if self.router.should_render:
            self.refresh_view()

    def _feed(self, event: InputEvent) -> None:
        action = self.router.handle_event(event)
        if action is AppAction.QUIT:
            logger.info("quit requested")
            self.exit()
            return
        self.refresh_view()

    def refresh_view(self) -> None:
        view = self.router.view()
        self.query_one("#header", RegionView).update(render_header(view.header))
        self.query_one("#sidebar", RegionView).update(render_sidebar(view.sidebar))
        self.query_one("#content", RegionView).update(render_content(view.content))
        self.query_one("#footer", RegionView).update(render_footer(view.footer))

        modal = self.query_one("#modal", RegionView)
        if view.modal is not None:
            modal.update(render_modal(view.modal))
        modal.display = view.modal is not None

        self.router.should_render = False
        self.call_after_refresh(self._sync_rects)

    def _sync_rects(self) -> None:
        """Report the laid-out screen regions back to the Core components."""

        router = self.router
        pairs = (
            ("#header", router.header),
            ("#sidebar", router.sidebar),
            ("#content", router.content),
            ("#footer", router.footer),
        )
        for selector, component in pairs:
            component.rect = Rect(*self.query_one(selector, RegionView).region)
        if router.modal is not None:
            router.modal.rect = Rect(*self.query_one("#modal", RegionView).region)
