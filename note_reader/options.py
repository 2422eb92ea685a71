"""
Render configuration for note documents.

Centralizes fallbacks and decode parameters so callers can tune behaviour
without touching core logic. ``RenderOptions.from_env`` lets reverse
engineering sessions flip decode parameters without code changes:

  export NOTE_READER_STROKE_COLORS=raw      # or normalized
  export NOTE_READER_DEFAULT_WIDTH=612
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_WIDTH = 500.0
# DIN ratio
DEFAULT_PAGE_RATIO = 1.414


class StrokeColorMode(Enum):
    """How the four colour bytes of a stroke are turned into channel values."""

    NORMALIZED = "normalized"  # byte / 255
    RAW = "raw"  # colour channels passed through, alpha still / 255

    def channels(self, rgba: bytes) -> tuple:
        alpha = rgba[3] / 255
        if self is StrokeColorMode.RAW:
            return (float(rgba[0]), float(rgba[1]), float(rgba[2]), alpha)
        return (rgba[0] / 255, rgba[1] / 255, rgba[2] / 255, alpha)


def _env_color_mode(default: StrokeColorMode) -> StrokeColorMode:
    raw = (os.getenv("NOTE_READER_STROKE_COLORS") or "").strip().lower()
    if not raw:
        return default
    for mode in StrokeColorMode:
        if raw == mode.value:
            return mode
    LOGGER.warning("Ignoring unknown NOTE_READER_STROKE_COLORS=%r", raw)
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric %s=%r", name, raw)
        return default
    if value < 1:
        LOGGER.warning("Ignoring %s=%r below 1", name, raw)
        return default
    return value


@dataclass(frozen=True)
class RenderOptions:
    """Options controlling document geometry fallbacks and page rendering."""

    default_width: float = DEFAULT_PAGE_WIDTH
    default_ratio: float = DEFAULT_PAGE_RATIO
    stroke_color_mode: StrokeColorMode = StrokeColorMode.NORMALIZED
    render_images: bool = True
    render_text: bool = True

    @classmethod
    def from_env(cls, base: Optional["RenderOptions"] = None) -> "RenderOptions":
        base = base or cls()
        return cls(
            default_width=_env_float("NOTE_READER_DEFAULT_WIDTH", base.default_width),
            default_ratio=base.default_ratio,
            stroke_color_mode=_env_color_mode(base.stroke_color_mode),
            render_images=base.render_images,
            render_text=base.render_text,
        )


__all__ = ["DEFAULT_PAGE_RATIO", "DEFAULT_PAGE_WIDTH", "RenderOptions", "StrokeColorMode"]
