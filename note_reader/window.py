"""Page windows over the single vertical document canvas."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PageWindow:
    """
    Vertical slice ``[start, end)`` owned by one page.

    Pages are contiguous bands of one infinite canvas, so a y coordinate
    belongs to exactly one page. The window owns no content.

    Attributes:
        index: Zero-based page index
        start: First y coordinate of the page (inclusive)
        end: End of the page (exclusive)
    """

    index: int
    start: float
    end: float

    @classmethod
    def for_page(cls, index: int, height: float) -> "PageWindow":
        return cls(index=index, start=height * index, end=height * (index + 1))

    @property
    def height(self) -> float:
        return self.end - self.start

    def contains(self, y: float) -> bool:
        return self.start <= y < self.end

    def contains_extent(self, y: float, height: float) -> bool:
        """True if the whole extent ``[y, y + height)`` lies inside the window."""
        return self.start <= y and y + height <= self.end

    def to_local(self, y: float) -> float:
        return y - self.start


__all__ = ["PageWindow"]
