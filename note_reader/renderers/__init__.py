"""Renderers and backend abstractions for Note Reader."""

from .base import DrawingBackend, ImageCodec
from .cairo_backend import CairoBackend
from .images import ImageObjectRenderer
from .pillow_codec import PillowCodec
from .strokes import StrokeRenderer
from .text import TextRunRenderer

__all__ = [
    "CairoBackend",
    "DrawingBackend",
    "ImageCodec",
    "ImageObjectRenderer",
    "PillowCodec",
    "StrokeRenderer",
    "TextRunRenderer",
]
