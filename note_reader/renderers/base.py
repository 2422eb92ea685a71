"""Backend protocols for drawing and image decoding."""

from __future__ import annotations

from typing import Any, Protocol


class DrawingBackend(Protocol):
    """Primitive drawing commands against a page-sized canvas."""

    def set_color(self, red: float, green: float, blue: float, alpha: float) -> None:
        """Set the source colour for following strokes and text."""

    def set_line_width(self, width: float) -> None:
        """Set the line width for following strokes."""

    def move_to(self, x: float, y: float) -> None:
        """Begin a new sub-path at ``(x, y)``."""

    def line_to(self, x: float, y: float) -> None:
        """Extend the current path to ``(x, y)``."""

    def stroke(self) -> None:
        """Stroke and clear the current path."""

    def paint_image(self, raster: Any, x: float, y: float) -> None:
        """Composite an already scaled raster with its top-left at ``(x, y)``."""

    def measure_text(self, text: str, font_name: str, font_size: float) -> float:
        """Return the height of the laid out text block."""

    def show_text(self, text: str, font_name: str, font_size: float, x: float, y: float) -> None:
        """Lay out and draw ``text`` with its top-left corner at ``(x, y)``."""


class ImageCodec(Protocol):
    """Decode encoded image bytes into rasters the drawing backend accepts."""

    def decode(self, data: bytes, encoding: str) -> Any:
        """Decode ``data`` declared as ``"jpeg"`` or ``"png"``."""

    def resample(self, raster: Any, width: float, height: float) -> Any:
        """Return ``raster`` scaled to ``width`` x ``height`` with filtering."""
