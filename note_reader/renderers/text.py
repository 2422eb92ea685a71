"""Rich text rendering.

Sub-ranges are drawn as stacked blocks: each one starts below the previous
one's laid out height. There is no paragraph reflow.
"""

from __future__ import annotations

import logging

from ..content import TextBlockObject, TextRun
from ..window import PageWindow
from .base import DrawingBackend

LOGGER = logging.getLogger(__name__)


class TextRunRenderer:
    def __init__(self, backend: DrawingBackend) -> None:
        self.backend = backend

    def _draw(self, run: TextRun, index: int, x: float, y: float) -> float:
        text_range = run.ranges[index]
        text = run.substring(text_range)
        if not text:
            return 0.0
        height = self.backend.measure_text(text, text_range.font_name, text_range.font_size)
        self.backend.set_color(*text_range.color)
        self.backend.show_text(text, text_range.font_name, text_range.font_size, x, y)
        return height

    def render_block(self, block: TextBlockObject, run: TextRun, window: PageWindow) -> bool:
        """Draw a text block if its whole extent lies on the page."""

        if not window.contains_extent(block.y, block.height):
            return False
        cursor = window.to_local(block.y)
        for index in range(len(run.ranges)):
            cursor += self._draw(run, index, block.x, cursor)
        return True

    def render_document(self, run: TextRun, window: PageWindow) -> int:
        """Draw the sub-ranges of the whole-document text whose top is on the page."""

        drawn = 0
        cursor = 0.0
        for index, text_range in enumerate(run.ranges):
            text = run.substring(text_range)
            if not text:
                continue
            height = self.backend.measure_text(text, text_range.font_name, text_range.font_size)
            if window.contains(cursor):
                self._draw(run, index, 0.0, window.to_local(cursor))
                drawn += 1
            cursor += height
        LOGGER.debug("Page %d: drew %d document text ranges", window.index, drawn)
        return drawn


__all__ = ["TextRunRenderer"]
