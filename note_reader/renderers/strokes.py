"""Ink stroke rendering."""

from __future__ import annotations

import logging

from ..content import StrokeSet
from ..options import StrokeColorMode
from ..window import PageWindow
from .base import DrawingBackend

LOGGER = logging.getLogger(__name__)


class StrokeRenderer:
    """Draw the part of a :class:`StrokeSet` that falls into one page window.

    Each point is tested on its own; a stroke that crosses a page boundary is
    cut at the edge rather than continued on the neighbouring page.
    """

    def __init__(
        self,
        backend: DrawingBackend,
        color_mode: StrokeColorMode = StrokeColorMode.NORMALIZED,
    ) -> None:
        self.backend = backend
        self.color_mode = color_mode

    def render(self, strokes: StrokeSet, window: PageWindow) -> int:
        """Render visible strokes and return how many were drawn."""

        drawn = 0
        for stroke in strokes.iter_strokes():
            visible = [
                (x, window.to_local(y)) for x, y in stroke.points if window.contains(y)
            ]
            if not visible:
                continue

            self.backend.set_color(*self.color_mode.channels(stroke.color))
            self.backend.set_line_width(stroke.width)
            self.backend.move_to(*visible[0])
            for x, y in visible[1:]:
                self.backend.line_to(x, y)
            self.backend.stroke()
            drawn += 1

        LOGGER.debug(
            "Page %d: drew %d of %d strokes", window.index, drawn, strokes.stroke_count
        )
        return drawn


__all__ = ["StrokeRenderer"]
