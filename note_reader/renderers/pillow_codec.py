"""Pillow image codec for embedded note media."""

from __future__ import annotations

import io
import logging

from PIL import Image

from ..exceptions import AssetLoadError
from .base import ImageCodec

LOGGER = logging.getLogger(__name__)

_FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
}


class PillowCodec(ImageCodec):
    """Decode JPEG/PNG assets and resample them with a Lanczos filter."""

    def decode(self, data: bytes, encoding: str) -> Image.Image:
        fmt = _FORMATS.get(encoding.lower())
        if fmt is None:
            raise AssetLoadError(f"Unsupported image encoding: {encoding}")
        try:
            with Image.open(io.BytesIO(data), formats=[fmt]) as img:
                img.load()
                decoded = img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise AssetLoadError(f"Unable to decode {fmt} image: {exc}") from exc
        LOGGER.debug("Decoded %s image %dx%d", fmt, decoded.width, decoded.height)
        return decoded

    def resample(self, raster: Image.Image, width: float, height: float) -> Image.Image:
        try:
            size = (max(1, round(width)), max(1, round(height)))
            if raster.size == size:
                return raster
            return raster.resize(size, Image.LANCZOS)
        except (ValueError, OverflowError, MemoryError) as exc:
            raise AssetLoadError(f"Unable to resample image to {width}x{height}: {exc}") from exc


__all__ = ["PillowCodec"]
