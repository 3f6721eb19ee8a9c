"""Shared focus/geometry plumbing for region components."""

from __future__ import annotations

from core.domain.events import MouseEvent, Rect


class Region:
    """Focus flag plus the viewport last assigned by the renderer."""

    def __init__(self) -> None:
        self.rect: Rect | None = None
        self._focused = False

    @property
    def focused(self) -> bool:
        return self._focused

    def focus(self, focused: bool) -> None:
        self._focused = focused

    def inner_row(self, event: MouseEvent) -> int | None:
        """Row index inside the border for a left click on this region, else None."""

        if self.rect is None or not event.is_left_click:
            return None
        if not self.rect.contains(event.column, event.row):
            return None
        # Row 0 of the rect is the border/title line.
        row = event.row - self.rect.y - 1
        return row if row >= 0 else None
