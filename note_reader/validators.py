"""Validation helpers for note_reader."""
from __future__ import annotations

import logging
import os
import zipfile
from typing import Optional, Tuple

from .document import NoteDocument
from .options import RenderOptions
from .types import NoteInfo

LOGGER = logging.getLogger(__name__)


def get_note_info(note_path: str, options: Optional[RenderOptions] = None) -> NoteInfo:
    """Return information about a note document using :class:`NoteInfo`."""

    with NoteDocument.open(note_path, options) as document:
        return document.info


def validate_note(note_path: str) -> Tuple[bool, str]:
    """Perform lightweight validation of a note file.

    Only file level checks run here; the session is decoded when the
    document is opened.
    """

    LOGGER.debug("Validating note input %s", note_path)
    if not os.path.exists(note_path):
        return False, f"File not found: {note_path}"

    if not os.path.isfile(note_path):
        return False, f"Path is not a file: {note_path}"

    if not note_path.lower().endswith(".note"):
        return False, f"File does not have .note extension: {note_path}"

    if not os.access(note_path, os.R_OK):
        return False, f"Cannot read file (permission denied): {note_path}"

    if not zipfile.is_zipfile(note_path):
        return False, f"Not a .note zip archive: {note_path}"

    return True, ""
