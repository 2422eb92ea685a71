"""
Note Reader - Render reverse-engineered .note documents page by page.

This library opens the zip container of a note, resolves its keyed object
graph and draws ink strokes, embedded images and rich text onto fixed-height
pages of a single vertical canvas.

Quick Start:
    >>> from note_reader import NoteDocument, export_pdf
    >>> with NoteDocument.open('lecture.note') as document:
    ...     export_pdf(document, 'lecture.pdf')

Main Classes:
    - NoteDocument: An open document and its derived geometry
    - NotePage: One page window, rendered onto a drawing backend
    - ObjectGraph: Read-only view over the node table

Data Classes:
    - NoteInfo: Document information
    - PageSize: Size of a page
    - ExportResult: Result of an export operation
    - RenderOptions: Fallbacks and decode parameters

Exceptions:
    - NoteReaderException: Base exception
    - InvalidNoteError: Container or node table is structurally broken
    - NavigationError: A field could not be resolved
    - AssetLoadError: A media asset could not be loaded
    - UnsupportedModeError: Unsupported render mode requested
    - PageOutOfBoundsError: Page number out of bounds

For CLI usage, use the 'note-reader' command after installation.
"""

# Core classes
from note_reader.document import NoteDocument, NotePage
from note_reader.graph import ObjectGraph
from note_reader.export import export_pdf, export_png

# Data types
from note_reader.geometry import DocumentGeometry
from note_reader.options import RenderOptions, StrokeColorMode
from note_reader.types import ExportResult, NoteInfo, PageSize
from note_reader.window import PageWindow

# Exceptions
from note_reader.exceptions import (
    NoteReaderException,
    InvalidNoteError,
    NavigationError,
    MissingFieldError,
    TypeMismatchError,
    DanglingReferenceError,
    InconsistentStrokeDataError,
    AssetLoadError,
    UnsupportedModeError,
    PageOutOfBoundsError,
)

# Utility functions
from note_reader.validators import get_note_info, validate_note
from note_reader.utils import format_file_size

__version__ = "1.0.0"
__author__ = "Note Reader Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "NoteDocument",
    "NotePage",
    "ObjectGraph",
    "export_pdf",
    "export_png",
    # Data types
    "DocumentGeometry",
    "RenderOptions",
    "StrokeColorMode",
    "ExportResult",
    "NoteInfo",
    "PageSize",
    "PageWindow",
    # Exceptions
    "NoteReaderException",
    "InvalidNoteError",
    "NavigationError",
    "MissingFieldError",
    "TypeMismatchError",
    "DanglingReferenceError",
    "InconsistentStrokeDataError",
    "AssetLoadError",
    "UnsupportedModeError",
    "PageOutOfBoundsError",
    # Utility functions
    "get_note_info",
    "validate_note",
    "format_file_size",
    # Version info
    "__version__",
]
