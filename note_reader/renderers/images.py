"""Embedded image rendering."""

from __future__ import annotations

import logging
from typing import Callable

from ..content import ImageObject
from ..exceptions import AssetLoadError
from ..window import PageWindow
from .base import DrawingBackend, ImageCodec

LOGGER = logging.getLogger(__name__)

AssetReader = Callable[[str], bytes]


class ImageObjectRenderer:
    """Load, scale and composite image media objects onto a page."""

    def __init__(self, backend: DrawingBackend, read_asset: AssetReader, codec: ImageCodec) -> None:
        self.backend = backend
        self.read_asset = read_asset
        self.codec = codec

    def render(self, image: ImageObject, window: PageWindow) -> bool:
        """Draw ``image`` if it lies entirely on the page; return whether it was drawn."""

        if image.missing:
            LOGGER.debug("Image object %d is marked missing; skipped", image.index)
            return False
        if not window.contains_extent(image.y, image.height):
            return False

        try:
            data = self.read_asset(image.path)
            raster = self.codec.decode(data, image.encoding)
            raster = self.codec.resample(raster, image.width, image.height)
        except AssetLoadError as exc:
            LOGGER.warning(
                "Omitting image object %d (%s) from page %d: %s",
                image.index,
                image.path,
                window.index,
                exc,
            )
            return False

        self.backend.paint_image(raster, image.x, window.to_local(image.y))
        return True


__all__ = ["AssetReader", "ImageObjectRenderer"]
