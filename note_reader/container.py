"""Zip container access and session property list decoding."""

from __future__ import annotations

import logging
import plistlib
import zipfile
from pathlib import Path
from typing import Optional, Union

from .exceptions import AssetLoadError, InvalidNoteError
from .nodes import Node, node_from_plist

LOGGER = logging.getLogger(__name__)

SESSION_MEMBER = "Session.plist"
BINARY_PLIST_MAGIC = b"bplist00"


def decode_plist(data: bytes) -> Node:
    """Validate the binary property list header and decode it into nodes."""

    if not data.startswith(BINARY_PLIST_MAGIC):
        raise InvalidNoteError("Session payload is not a binary property list")
    try:
        obj = plistlib.loads(data, fmt=plistlib.FMT_BINARY)
    except (plistlib.InvalidFileException, ValueError, TypeError, IndexError, OverflowError) as exc:
        raise InvalidNoteError(f"Corrupted session property list: {exc}") from exc
    try:
        return node_from_plist(obj)
    except RecursionError as exc:
        raise InvalidNoteError("Session property list is nested too deeply") from exc


class NoteContainer:
    """Read-only access to the members of a ``.note`` zip archive.

    All members live below one root directory named after the note; member
    paths passed to :meth:`read` are relative to it.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        if not self.path.exists() or not self.path.is_file():
            raise InvalidNoteError(f"Note file not found: {path}")
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (zipfile.BadZipFile, OSError) as exc:
            raise InvalidNoteError(f"Couldn't open .note zip: {path}. Error: {exc}") from exc

        names = self._zip.namelist()
        if not names:
            self._zip.close()
            raise InvalidNoteError(f"Note archive is empty: {path}")
        self.root_name = names[0].split("/", 1)[0]
        LOGGER.debug("Opened %s with root %r (%d members)", self.path, self.root_name, len(names))

    def member_name(self, relative: str) -> str:
        return f"{self.root_name}/{relative.lstrip('/')}"

    def read(self, relative: str) -> bytes:
        """Return the raw bytes of ``relative`` or raise :class:`AssetLoadError`."""

        name = self.member_name(relative)
        try:
            return self._zip.read(name)
        except KeyError as exc:
            raise AssetLoadError(f"Couldn't find '{name}' in zip") from exc
        except (zipfile.BadZipFile, OSError, RuntimeError) as exc:
            raise AssetLoadError(f"Unable to read '{name}': {exc}") from exc

    def read_session(self) -> Node:
        try:
            data = self.read(SESSION_MEMBER)
        except AssetLoadError as exc:
            raise InvalidNoteError(exc.message) from exc
        return decode_plist(data)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "NoteContainer":
        return self

    def __exit__(self, *exc_info: object) -> Optional[bool]:
        self.close()
        return None


__all__ = ["NoteContainer", "decode_plist"]
