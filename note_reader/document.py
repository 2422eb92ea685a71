"""Document and page objects driven by a viewer or exporter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .container import NoteContainer
from .content import (
    ImageObject,
    TextBlockObject,
    document_text_store,
    iter_media_objects,
    load_stroke_set,
    load_text_run,
)
from .exceptions import (
    InconsistentStrokeDataError,
    InvalidNoteError,
    NavigationError,
    PageOutOfBoundsError,
    UnsupportedModeError,
)
from .geometry import DocumentGeometry, derive_geometry
from .graph import ObjectGraph
from .options import RenderOptions
from .renderers import (
    DrawingBackend,
    ImageCodec,
    ImageObjectRenderer,
    PillowCodec,
    StrokeRenderer,
    TextRunRenderer,
)
from .types import NoteInfo, PageSize
from .utils import time_block
from .window import PageWindow

LOGGER = logging.getLogger(__name__)


class NoteDocument:
    """An open note document.

    The object graph and geometry are built once on open and never change;
    pages render by reading them, so any number of pages may be open at once.
    """

    def __init__(
        self,
        container: NoteContainer,
        graph: ObjectGraph,
        geometry: DocumentGeometry,
        *,
        options: Optional[RenderOptions] = None,
        codec: Optional[ImageCodec] = None,
    ) -> None:
        self.container = container
        self.graph = graph
        self.geometry = geometry
        self.options = options or RenderOptions()
        self.codec: ImageCodec = codec or PillowCodec()

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        options: Optional[RenderOptions] = None,
        *,
        container: Optional[NoteContainer] = None,
        codec: Optional[ImageCodec] = None,
    ) -> "NoteDocument":
        """Open ``path``; structural problems raise :class:`InvalidNoteError`."""

        options = options or RenderOptions()
        with time_block(LOGGER, f"opening {path}"):
            container = container or NoteContainer(path)
            try:
                graph = ObjectGraph.from_root(container.read_session())
            except InvalidNoteError:
                container.close()
                raise
            geometry = derive_geometry(graph, options)

        LOGGER.info(
            "Opened %s: %d page(s) of %gx%g",
            path,
            geometry.page_count,
            geometry.width,
            geometry.height,
        )
        return cls(container, graph, geometry, options=options, codec=codec)

    # ------------------------------------------------------------------
    # Document information
    # ------------------------------------------------------------------
    @property
    def page_count(self) -> int:
        return self.geometry.page_count

    @property
    def info(self) -> NoteInfo:
        try:
            stroke_count = load_stroke_set(self.graph).stroke_count
        except (InconsistentStrokeDataError, NavigationError) as exc:
            LOGGER.warning("Stroke data unreadable: %s", exc)
            stroke_count = 0
        try:
            file_size = self.container.path.stat().st_size
        except OSError:
            file_size = 0
        return NoteInfo(
            page_count=self.geometry.page_count,
            width=self.geometry.width,
            height=self.geometry.height,
            file_size=file_size,
            paper_identifier=self.geometry.paper_identifier,
            node_count=len(self.graph),
            stroke_count=stroke_count,
            media_objects=sum(1 for _ in iter_media_objects(self.graph)),
        )

    def page(self, index: int) -> "NotePage":
        if not 0 <= index < self.page_count:
            raise PageOutOfBoundsError(
                f"Page {index} out of range for document with {self.page_count} pages."
            )
        return NotePage(self, index)

    def close(self) -> None:
        self.container.close()

    def __enter__(self) -> "NoteDocument":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class NotePage:
    """One page of an open document, owning only its vertical window."""

    def __init__(self, document: NoteDocument, index: int) -> None:
        self.document = document
        self.index = index
        self._window: Optional[PageWindow] = PageWindow.for_page(
            index, document.geometry.height
        )

    @property
    def size(self) -> PageSize:
        return PageSize(width=self.document.geometry.width, height=self.document.geometry.height)

    @property
    def window(self) -> PageWindow:
        if self._window is None:
            self._window = PageWindow.for_page(self.index, self.document.geometry.height)
        return self._window

    def render(self, backend: DrawingBackend, for_printing: bool = False) -> List[str]:
        """Draw the page onto ``backend``.

        Returns the problems that made parts of the page degrade; each one
        has already been logged.
        """

        if for_printing:
            raise UnsupportedModeError("Rendering for printing is not supported.")

        window = self.window
        problems: List[str] = []
        self._render_media(backend, window, problems)
        if self.document.options.render_text:
            self._render_document_text(backend, window, problems)
        self._render_strokes(backend, window, problems)
        return problems

    def clear(self) -> None:
        self._window = None

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------
    def _render_media(self, backend: DrawingBackend, window: PageWindow, problems: List[str]) -> None:
        document = self.document
        images = ImageObjectRenderer(backend, document.container.read, document.codec)
        texts = TextRunRenderer(backend)

        for obj in iter_media_objects(document.graph):
            if isinstance(obj, ImageObject):
                if document.options.render_images:
                    images.render(obj, window)
            elif isinstance(obj, TextBlockObject):
                if not document.options.render_text:
                    continue
                try:
                    run = load_text_run(document.graph, obj.store)
                except NavigationError as exc:
                    message = f"text block {obj.index}: {exc}"
                    LOGGER.warning("Skipping %s", message)
                    problems.append(message)
                    continue
                texts.render_block(obj, run, window)
            else:
                message = f"unknown media object class {obj.tag!r} (table index {obj.index})"
                LOGGER.warning("Skipping %s, please report", message)
                problems.append(message)

    def _render_document_text(
        self, backend: DrawingBackend, window: PageWindow, problems: List[str]
    ) -> None:
        graph = self.document.graph
        try:
            store = document_text_store(graph)
            if store is None:
                return
            run = load_text_run(graph, store)
        except NavigationError as exc:
            message = f"document text: {exc}"
            LOGGER.warning("Skipping %s", message)
            problems.append(message)
            return
        TextRunRenderer(backend).render_document(run, window)

    def _render_strokes(self, backend: DrawingBackend, window: PageWindow, problems: List[str]) -> None:
        try:
            strokes = load_stroke_set(self.document.graph)
        except (InconsistentStrokeDataError, NavigationError) as exc:
            message = f"strokes: {exc}"
            LOGGER.error("Skipping %s on page %d", message, self.index)
            problems.append(message)
            return
        StrokeRenderer(backend, self.document.options.stroke_color_mode).render(strokes, window)


__all__ = ["NoteDocument", "NotePage"]
