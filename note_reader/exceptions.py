"""
Custom exceptions for Note Reader.

This module defines all custom exceptions used throughout the library.
"""

from typing import Optional


class NoteReaderException(Exception):
    """Base exception for all Note Reader errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown note reader error occurred."


class InvalidNoteError(NoteReaderException):
    """Raised when the container or its node table is structurally broken."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted note document."


class NavigationError(NoteReaderException):
    """Raised when a path through the object graph cannot be followed."""

    def __init__(
        self,
        message: str = "",
        *,
        path: str = "",
        position: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.position = position

    @property
    def default_message(self) -> str:
        return "Unable to navigate the object graph."


class MissingFieldError(NavigationError):
    """Raised when a map key or array index is absent."""

    @property
    def default_message(self) -> str:
        return "Field is missing from the object graph."


class TypeMismatchError(NavigationError):
    """Raised when a resolved node does not have the requested type."""

    @property
    def default_message(self) -> str:
        return "Field has an unexpected type."


class DanglingReferenceError(NavigationError):
    """Raised when a reference points outside the node table."""

    @property
    def default_message(self) -> str:
        return "Reference does not resolve to a node table entry."


class MalformedValueError(NavigationError):
    """Raised when a leaf value cannot be parsed (e.g. a ``{x, y}`` tuple)."""

    @property
    def default_message(self) -> str:
        return "Field value is malformed."


class InconsistentStrokeDataError(NoteReaderException):
    """Raised when the parallel stroke arrays disagree with each other."""

    @property
    def default_message(self) -> str:
        return "Stroke arrays are inconsistent."


class AssetLoadError(NoteReaderException):
    """Raised when an archive member cannot be read or decoded."""

    @property
    def default_message(self) -> str:
        return "Unable to load media asset."


class UnsupportedModeError(NoteReaderException):
    """Raised when a render mode is requested that is not supported."""

    @property
    def default_message(self) -> str:
        return "Requested render mode is not supported."


class PageOutOfBoundsError(NoteReaderException):
    """Raised when requested page number is out of bounds."""

    @property
    def default_message(self) -> str:
        return "Requested page number is out of bounds."
