"""pycairo backend implementation for Note Reader."""

from __future__ import annotations

import cairo
from PIL import Image

from .base import DrawingBackend


def image_to_surface(image: Image.Image) -> cairo.ImageSurface:
    """Convert a Pillow image into a premultiplied ARGB32 cairo surface."""

    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    width, height = rgba.size
    data = bytearray(rgba.tobytes("raw", "BGRa"))
    stride = cairo.ImageSurface.format_stride_for_width(cairo.FORMAT_ARGB32, width)
    return cairo.ImageSurface.create_for_data(data, cairo.FORMAT_ARGB32, width, height, stride)


class CairoBackend(DrawingBackend):
    """Backend implementation that draws onto a :class:`cairo.Context`."""

    def __init__(self, context: cairo.Context) -> None:
        self.context = context

    def set_color(self, red: float, green: float, blue: float, alpha: float) -> None:
        self.context.set_source_rgba(red, green, blue, alpha)

    def set_line_width(self, width: float) -> None:
        self.context.set_line_width(width)

    def move_to(self, x: float, y: float) -> None:
        self.context.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        self.context.line_to(x, y)

    def stroke(self) -> None:
        self.context.stroke()

    def paint_image(self, raster: Image.Image, x: float, y: float) -> None:
        surface = image_to_surface(raster)
        self.context.save()
        self.context.set_source_surface(surface, x, y)
        self.context.paint()
        self.context.restore()

    def _select_font(self, font_name: str, font_size: float) -> tuple:
        self.context.select_font_face(
            font_name, cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_NORMAL
        )
        self.context.set_font_size(font_size)
        return self.context.font_extents()

    def measure_text(self, text: str, font_name: str, font_size: float) -> float:
        self.context.save()
        try:
            _, _, line_height, _, _ = self._select_font(font_name, font_size)
        finally:
            self.context.restore()
        return line_height * len(text.split("\n"))

    def show_text(self, text: str, font_name: str, font_size: float, x: float, y: float) -> None:
        ascent, _, line_height, _, _ = self._select_font(font_name, font_size)
        for number, line in enumerate(text.split("\n")):
            self.context.move_to(x, y + ascent + number * line_height)
            self.context.show_text(line)
        self.context.new_path()


__all__ = ["CairoBackend", "image_to_surface"]
