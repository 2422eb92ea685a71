"""Document geometry: page width, page height and page count.

Every lookup here targets a field whose presence and shape were observed,
not specified, so each one fails independently onto a fallback. A malformed
document opens with a default width or ratio instead of being refused.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from .exceptions import InconsistentStrokeDataError, NavigationError
from .graph import GENERAL_INFO_INDEX, LAYOUT_INFO_INDEX, ObjectGraph
from .content import load_ink_points
from .nodes import NodeKind
from .options import RenderOptions
from .path import steps

LOGGER = logging.getLogger(__name__)

REFLOW_STATE_PATH = steps(LAYOUT_INFO_INDEX, "reflowState")
PAGE_WIDTH_KEY = "pageWidthInDocumentCoordsKey"
PAPER_IDENTIFIER_PATH = steps(
    GENERAL_INFO_INDEX,
    "NBNoteTakingSessionDocumentPaperLayoutModelKey",
    "documentPaperAttributes",
    "paperIdentifier",
)

LOCKED_REFLOW_CLASSES = frozenset({"NBReflowStateLocked", "ReflowStateLocked"})
REFLOWABLE_CLASSES = frozenset({"NBReflowStateReflowable", "ReflowStateReflowable"})

# "Legacy:0" marks a page the application itself considers not renderable
NOT_RENDERABLE_PAPER = "Legacy:0"
PAPER_RATIOS = {
    "Legacy:13": 1.3,
}


@dataclass(frozen=True)
class LockedReflow:
    tag: Optional[str] = None


@dataclass(frozen=True)
class ReflowableReflow:
    tag: str


@dataclass(frozen=True)
class UnknownReflow:
    tag: str


ReflowState = Union[LockedReflow, ReflowableReflow, UnknownReflow]


@dataclass(frozen=True)
class DocumentGeometry:
    """
    Page size and count of an open document.

    Attributes:
        width: Page width in document coordinates
        height: Page height (width times paper ratio)
        page_count: Number of pages, at least one
        ratio: Paper aspect ratio used for the height
        paper_identifier: Raw paper identifier if one was found
        reflow: Reflow state the width was read under
    """

    width: float
    height: float
    page_count: int
    ratio: float
    paper_identifier: Optional[str] = None
    reflow: Optional[ReflowState] = None


def reflow_state(graph: ObjectGraph) -> Optional[ReflowState]:
    """Classify the layout's reflow state; ``None`` if the node is absent."""

    try:
        tag = graph.class_name(graph.resolve(REFLOW_STATE_PATH))
    except NavigationError as exc:
        LOGGER.debug("No reflow state: %s", exc)
        return None
    if tag is None or tag in LOCKED_REFLOW_CLASSES:
        return LockedReflow(tag)
    if tag in REFLOWABLE_CLASSES:
        return ReflowableReflow(tag)
    return UnknownReflow(tag)


def page_width(graph: ObjectGraph, options: RenderOptions, reflow: Optional[ReflowState]) -> float:
    if isinstance(reflow, ReflowableReflow):
        LOGGER.warning(
            "Reflowable documents (%s) are not supported; using width %g",
            reflow.tag,
            options.default_width,
        )
        return options.default_width
    if isinstance(reflow, UnknownReflow):
        LOGGER.warning("Unknown reflow state %r, please report; trying stored width", reflow.tag)

    try:
        width = graph.value(REFLOW_STATE_PATH + steps(PAGE_WIDTH_KEY), NodeKind.REAL)
    except NavigationError as exc:
        LOGGER.warning("Page width unavailable (%s); using %g", exc, options.default_width)
        return options.default_width

    if not math.isfinite(width) or width < 1:
        LOGGER.warning("Setting invalid width %f to %g", width, options.default_width)
        return options.default_width
    return float(width)


def paper_ratio(graph: ObjectGraph, options: RenderOptions) -> tuple:
    """Return ``(ratio, paper_identifier)``."""

    try:
        identifier = graph.value(PAPER_IDENTIFIER_PATH, NodeKind.STRING)
    except NavigationError as exc:
        LOGGER.warning("Paper identifier unavailable (%s); using ratio %g", exc, options.default_ratio)
        return options.default_ratio, None

    if identifier in PAPER_RATIOS:
        return PAPER_RATIOS[identifier], identifier
    if identifier == NOT_RENDERABLE_PAPER:
        LOGGER.warning("Page identifies as not renderable, please report")
    else:
        LOGGER.warning("Unknown paper identifier, please report: %s", identifier)
    return options.default_ratio, identifier


def page_count(graph: ObjectGraph, page_height: float) -> int:
    """Count pages from the lowest ink point; one page when there is no ink."""

    try:
        points = load_ink_points(graph)
    except (NavigationError, InconsistentStrokeDataError) as exc:
        LOGGER.warning("Ink points unreadable (%s); assuming one page", exc)
        return 1

    max_y = 0.0
    for y in points[1::2]:
        if y > max_y:
            max_y = y
    if not math.isfinite(max_y):
        LOGGER.warning("Ink point with non-finite y; assuming one page")
        return 1
    return int(max_y // page_height) + 1


def derive_geometry(graph: ObjectGraph, options: Optional[RenderOptions] = None) -> DocumentGeometry:
    """Derive page geometry; a pure function of the graph and options."""

    options = options or RenderOptions()
    reflow = reflow_state(graph)
    width = page_width(graph, options, reflow)
    ratio, identifier = paper_ratio(graph, options)
    height = width * ratio
    return DocumentGeometry(
        width=width,
        height=height,
        page_count=page_count(graph, height),
        ratio=ratio,
        paper_identifier=identifier,
        reflow=reflow,
    )


__all__ = [
    "DocumentGeometry",
    "LockedReflow",
    "ReflowState",
    "ReflowableReflow",
    "UnknownReflow",
    "derive_geometry",
    "page_count",
    "page_width",
    "paper_ratio",
    "reflow_state",
]
