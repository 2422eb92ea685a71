"""Export rendered note pages to PDF and PNG files."""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Optional, Union

import cairo
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from .document import NoteDocument
from .renderers import CairoBackend
from .types import ExportResult
from .utils import time_block

LOGGER = logging.getLogger(__name__)

PRODUCER = "Note Reader"


def stamp_metadata(pdf_path: Union[str, Path], *, title: str) -> None:
    """Rewrite ``pdf_path`` with document title and producer metadata."""

    path = Path(pdf_path)
    try:
        reader = PdfReader(io.BytesIO(path.read_bytes()))
    except PdfReadError as exc:
        LOGGER.warning("Unable to stamp metadata on %s: %s", path, exc)
        return

    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    writer.add_metadata({"/Title": title, "/Producer": PRODUCER, "/Creator": PRODUCER})

    buffer = io.BytesIO()
    writer.write(buffer)
    path.write_bytes(buffer.getvalue())


def export_pdf(
    document: NoteDocument,
    output: Union[str, Path],
    *,
    title: Optional[str] = None,
) -> ExportResult:
    """Render every page of ``document`` into one PDF file."""

    destination = Path(output)
    destination.parent.mkdir(parents=True, exist_ok=True)
    geometry = document.geometry
    warnings = []

    with time_block(LOGGER, f"PDF export of {document.page_count} page(s)"):
        surface = cairo.PDFSurface(str(destination), geometry.width, geometry.height)
        try:
            context = cairo.Context(surface)
            backend = CairoBackend(context)
            for index in range(document.page_count):
                page = document.page(index)
                for problem in page.render(backend):
                    warnings.append(f"page {index + 1}: {problem}")
                page.clear()
                context.show_page()
        finally:
            surface.finish()

    stamp_metadata(destination, title=title or document.container.path.stem)
    return ExportResult(
        success=True,
        output_file=str(destination),
        pages=document.page_count,
        source_file=str(document.container.path),
        warnings=warnings,
    )


def export_png(
    document: NoteDocument,
    page_index: int,
    output: Union[str, Path],
    *,
    scale: float = 1.0,
) -> ExportResult:
    """Render one page onto a white raster and write it as PNG."""

    if scale <= 0:
        raise ValueError("Scale must be positive")

    destination = Path(output)
    destination.parent.mkdir(parents=True, exist_ok=True)
    page = document.page(page_index)
    size = page.size

    surface = cairo.ImageSurface(
        cairo.FORMAT_ARGB32,
        max(1, math.ceil(size.width * scale)),
        max(1, math.ceil(size.height * scale)),
    )
    context = cairo.Context(surface)
    context.set_source_rgb(1, 1, 1)
    context.paint()
    context.scale(scale, scale)

    problems = page.render(CairoBackend(context))
    page.clear()
    surface.flush()
    surface.write_to_png(str(destination))

    return ExportResult(
        success=True,
        output_file=str(destination),
        pages=1,
        source_file=str(document.container.path),
        warnings=[f"page {page_index + 1}: {problem}" for problem in problems],
    )


__all__ = ["export_pdf", "export_png", "stamp_metadata"]
