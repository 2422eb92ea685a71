"""
Type definitions and dataclasses for Note Reader.

This module defines data structures returned to callers of the library.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class NoteInfo:
    """
    Note document information.

    Attributes:
        page_count: Number of pages in the document
        width: Page width in document coordinates
        height: Page height in document coordinates
        file_size: File size in bytes
        paper_identifier: Paper identifier stored in the document, if any
        node_count: Number of entries in the node table
        stroke_count: Number of ink strokes
        media_objects: Number of media objects
    """
    page_count: int
    width: float
    height: float
    file_size: int = 0
    paper_identifier: Optional[str] = None
    node_count: int = 0
    stroke_count: int = 0
    media_objects: int = 0


@dataclass
class PageSize:
    """Size of one page in document coordinates."""
    width: float
    height: float


@dataclass
class ExportResult:
    """
    Result of an export operation.

    Attributes:
        success: Whether the operation was successful
        output_file: Path of the written file
        pages: Number of pages written
        source_file: Path to source note file
        warnings: Pages that rendered with errors
    """
    success: bool
    output_file: str
    pages: int
    source_file: str
    warnings: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        """String representation of the result."""
        return (
            f"ExportResult(success={self.success}, pages={self.pages}, "
            f"warnings={len(self.warnings)})"
        )
