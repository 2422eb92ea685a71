"""Drawable content descriptors resolved from the object graph.

Descriptors are derived on demand at render time and never cached; the
graph is only read. Field names below were found by reverse engineering and
are collected here so new variants only need to touch one place.
"""

from __future__ import annotations

import logging
import math
import re
import struct
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import (
    InconsistentStrokeDataError,
    MalformedValueError,
    MissingFieldError,
    NavigationError,
    TypeMismatchError,
)
from .graph import LAYOUT_INFO_INDEX, ObjectGraph
from .nodes import Node, NodeKind
from .path import steps

LOGGER = logging.getLogger(__name__)

# Handwriting
OVERLAY_PATH = steps(LAYOUT_INFO_INDEX, "Handwriting Overlay", "SpatialHash")
POINTS_KEY = "curvespoints"
POINT_COUNTS_KEY = "curvesnumpoints"
WIDTHS_KEY = "curveswidth"
COLORS_KEY = "curvescolors"

# Media objects
MEDIA_OBJECTS_PATH = steps(LAYOUT_INFO_INDEX, "mediaObjects", "NS.objects")
ORIGIN_KEY = "documentContentOrigin"
SIZE_KEY = "unscaledContentSize"
IMAGE_PATH_KEY = "relativePath"
IMAGE_JPEG_KEY = "saveAsJPEG"
IMAGE_MISSING_KEY = "isMissing"
TEXT_STORE_KEY = "textStore"
IMAGE_CLASSES = frozenset({"ImageMediaObject"})
TEXT_BLOCK_CLASSES = frozenset({"TextBlockMediaObject"})

# Rich text
DOCUMENT_TEXT_PATH = steps(LAYOUT_INFO_INDEX, "richText")
STRING_KEY = "NSString"
ATTRIBUTES_PATH = steps("NSAttributes", "NS.objects")
RANGE_ATTR = "NSRange"
FONT_ATTR = "NSFont"
COLOR_ATTR = "NSColor"
PARAGRAPH_ATTR = "NSParagraphStyle"
DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_SIZE = 12.0
DEFAULT_TEXT_COLOR = (0.0, 0.0, 0.0, 1.0)

_TUPLE_RE = re.compile(r"^\s*\{\s*([^,{}]+?)\s*,\s*([^,{}]+?)\s*\}\s*$")

RGBA = Tuple[float, float, float, float]


def parse_tuple(text: str) -> Tuple[float, float]:
    """Parse the ``"{a, b}"`` encoding used for origins, sizes and ranges."""

    match = _TUPLE_RE.match(text or "")
    if not match:
        raise MalformedValueError(f"Malformed tuple value: {text!r}")
    try:
        first, second = float(match.group(1)), float(match.group(2))
    except ValueError as exc:
        raise MalformedValueError(f"Malformed tuple value: {text!r}") from exc
    if not (math.isfinite(first) and math.isfinite(second)):
        raise MalformedValueError(f"Non-finite tuple value: {text!r}")
    return first, second


# ----------------------------------------------------------------------
# Strokes
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Stroke:
    color: bytes
    width: float
    points: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class StrokeSet:
    """
    Four parallel arrays describing all ink of a document.

    Attributes:
        points: Flat x, y pairs of every stroke, in order
        point_counts: Number of point pairs belonging to each stroke
        widths: Line width of each stroke
        colors: Four RGBA bytes per stroke
    """

    points: Tuple[float, ...] = ()
    point_counts: Tuple[int, ...] = ()
    widths: Tuple[float, ...] = ()
    colors: bytes = b""

    def __post_init__(self) -> None:
        if sum(self.point_counts) * 2 != len(self.points):
            raise InconsistentStrokeDataError(
                f"Point counts declare {sum(self.point_counts)} pairs but "
                f"{len(self.points) / 2:g} are stored"
            )
        if not (len(self.point_counts) == len(self.widths) == len(self.colors) / 4):
            raise InconsistentStrokeDataError(
                f"Stroke arrays disagree: {len(self.point_counts)} counts, "
                f"{len(self.widths)} widths, {len(self.colors)} colour bytes"
            )

    @property
    def stroke_count(self) -> int:
        return len(self.point_counts)

    @property
    def is_empty(self) -> bool:
        return not self.point_counts

    def iter_strokes(self) -> Iterator[Stroke]:
        pos = 0
        for i, count in enumerate(self.point_counts):
            flat = self.points[pos:pos + count * 2]
            yield Stroke(
                color=self.colors[i * 4:i * 4 + 4],
                width=self.widths[i],
                points=tuple(zip(flat[0::2], flat[1::2])),
            )
            pos += count * 2


def _unpack(data: bytes, fmt: str, name: str) -> Tuple:
    size = struct.calcsize(fmt)
    if len(data) % size:
        raise InconsistentStrokeDataError(
            f"{name} length {len(data)} is not a multiple of {size}"
        )
    return struct.unpack(f"<{len(data) // size}{fmt}", data)


def _overlay(graph: ObjectGraph) -> Optional[Node]:
    try:
        overlay = graph.resolve(OVERLAY_PATH)
    except MissingFieldError:
        LOGGER.debug("No handwriting overlay; document has no ink yet")
        return None
    if overlay.kind is not NodeKind.MAP:
        raise InconsistentStrokeDataError(
            f"Invalid handwriting overlay: {overlay.describe()}"
        )
    return overlay


def _overlay_data(graph: ObjectGraph, overlay: Node, key: str) -> Optional[bytes]:
    try:
        return graph.value((key,), NodeKind.DATA, start=overlay)
    except MissingFieldError:
        return None
    except TypeMismatchError as exc:
        raise InconsistentStrokeDataError(f"{key}: {exc.message}") from exc


def load_ink_points(graph: ObjectGraph) -> Tuple[float, ...]:
    """Return the flat point array only; used for page counting."""

    overlay = _overlay(graph)
    if overlay is None:
        return ()
    data = _overlay_data(graph, overlay, POINTS_KEY)
    if not data:
        return ()
    return _unpack(data, "f", POINTS_KEY)


def load_stroke_set(graph: ObjectGraph) -> StrokeSet:
    """Decode the handwriting overlay into a :class:`StrokeSet`."""

    overlay = _overlay(graph)
    if overlay is None:
        return StrokeSet()

    arrays = {
        key: _overlay_data(graph, overlay, key)
        for key in (POINTS_KEY, POINT_COUNTS_KEY, WIDTHS_KEY, COLORS_KEY)
    }
    present = [key for key, data in arrays.items() if data]
    if not present:
        return StrokeSet()
    if len(present) != len(arrays):
        missing = sorted(set(arrays) - set(present))
        raise InconsistentStrokeDataError(
            f"Stroke arrays present without {', '.join(missing)}"
        )

    return StrokeSet(
        points=_unpack(arrays[POINTS_KEY], "f", POINTS_KEY),
        point_counts=_unpack(arrays[POINT_COUNTS_KEY], "I", POINT_COUNTS_KEY),
        widths=_unpack(arrays[WIDTHS_KEY], "f", WIDTHS_KEY),
        colors=bytes(arrays[COLORS_KEY]),
    )


# ----------------------------------------------------------------------
# Media objects
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class MediaObject:
    index: int
    tag: Optional[str]


@dataclass(frozen=True)
class SizedObject(MediaObject):
    origin: Tuple[float, float]
    size: Tuple[float, float]

    @property
    def x(self) -> float:
        return self.origin[0]

    @property
    def y(self) -> float:
        return self.origin[1]

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]


@dataclass(frozen=True)
class ImageObject(SizedObject):
    path: str
    is_jpeg: bool
    missing: bool = False

    @property
    def encoding(self) -> str:
        return "jpeg" if self.is_jpeg else "png"


@dataclass(frozen=True)
class TextBlockObject(SizedObject):
    store: Node


@dataclass(frozen=True)
class UnknownObject(MediaObject):
    pass


def _optional_bool(graph: ObjectGraph, node: Node, key: str) -> Optional[bool]:
    try:
        return bool(graph.value((key,), NodeKind.BOOL, start=node))
    except MissingFieldError:
        return None


def _read_tuple(graph: ObjectGraph, node: Node, key: str) -> Tuple[float, float]:
    return parse_tuple(graph.value((key,), NodeKind.STRING, start=node))


def parse_media_object(graph: ObjectGraph, index: int, node: Node) -> MediaObject:
    """Classify one media object by its ``$class`` tag and read its fields."""

    tag = graph.class_name(node)
    if tag in IMAGE_CLASSES:
        origin = _read_tuple(graph, node, ORIGIN_KEY)
        size = _read_tuple(graph, node, SIZE_KEY)
        path = graph.value((IMAGE_PATH_KEY,), NodeKind.STRING, start=node)
        is_jpeg = _optional_bool(graph, node, IMAGE_JPEG_KEY)
        if is_jpeg is None:
            is_jpeg = path.lower().endswith((".jpg", ".jpeg"))
        return ImageObject(
            index=index,
            tag=tag,
            origin=origin,
            size=size,
            path=path,
            is_jpeg=is_jpeg,
            missing=bool(_optional_bool(graph, node, IMAGE_MISSING_KEY)),
        )
    if tag in TEXT_BLOCK_CLASSES:
        return TextBlockObject(
            index=index,
            tag=tag,
            origin=_read_tuple(graph, node, ORIGIN_KEY),
            size=_read_tuple(graph, node, SIZE_KEY),
            store=graph.resolve((TEXT_STORE_KEY,), start=node),
        )
    return UnknownObject(index=index, tag=tag)


def iter_media_objects(graph: ObjectGraph) -> Iterator[MediaObject]:
    """Yield every media object; malformed entries are logged and skipped."""

    try:
        entries = graph.resolve(MEDIA_OBJECTS_PATH)
    except MissingFieldError:
        LOGGER.debug("Document has no media objects")
        return
    except NavigationError as exc:
        LOGGER.warning("Media object list unreadable: %s", exc)
        return
    if entries.kind is not NodeKind.ARRAY:
        LOGGER.warning("Media object list is %s, expected array", entries.describe())
        return

    for position, entry in enumerate(entries.value):
        index = entry.value if entry.is_ref else -1
        try:
            yield parse_media_object(graph, index, graph.deref(entry))
        except NavigationError as exc:
            LOGGER.warning(
                "Skipping media object %d (table index %d): %s", position, index, exc
            )


# ----------------------------------------------------------------------
# Text runs
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class TextRange:
    start: int
    length: int
    font_name: str = DEFAULT_FONT
    font_size: float = DEFAULT_FONT_SIZE
    color: RGBA = DEFAULT_TEXT_COLOR
    attributes: Dict[str, Node] = field(default_factory=dict)


@dataclass(frozen=True)
class TextRun:
    text: str
    ranges: Tuple[TextRange, ...]

    def substring(self, text_range: TextRange) -> str:
        return self.text[text_range.start:text_range.start + text_range.length]


def _backing_string(graph: ObjectGraph, store: Node) -> str:
    node = graph.resolve((STRING_KEY,), start=store)
    if node.kind in (NodeKind.STRING, NodeKind.KEY):
        return str(node.value)
    for key in ("NS.string", "NS.bytes"):
        inner = node.lookup(key)
        if inner is None:
            continue
        inner = graph.deref(inner)
        if inner.kind is NodeKind.DATA:
            return inner.value.decode("utf-8", errors="replace")
        if inner.kind is NodeKind.STRING:
            return inner.value
    raise TypeMismatchError(f"Unsupported backing string node: {node.describe()}")


def _parse_font(graph: ObjectGraph, node: Node) -> Tuple[str, float]:
    name = graph.value(("NSName",), NodeKind.STRING, start=node)
    size_node = graph.resolve(("NSSize",), start=node)
    if size_node.kind not in (NodeKind.REAL, NodeKind.UINT):
        raise TypeMismatchError(f"Font size is {size_node.describe()}")
    return name, float(size_node.value)


def _parse_color(graph: ObjectGraph, node: Node) -> RGBA:
    for key in ("NSRGB", "NSWhite"):
        component_node = node.lookup(key)
        if component_node is None:
            continue
        raw = graph.deref(component_node)
        if raw.kind is NodeKind.DATA:
            text = raw.value.rstrip(b"\x00").decode("ascii", errors="replace")
        elif raw.kind is NodeKind.STRING:
            text = raw.value
        else:
            raise TypeMismatchError(f"{key} is {raw.describe()}")
        try:
            values = [float(part) for part in text.split()]
        except ValueError as exc:
            raise MalformedValueError(f"Malformed {key} value: {text!r}") from exc
        if key == "NSWhite" and values:
            values = [values[0]] * 3 + values[1:2]
        if len(values) == 3:
            values.append(1.0)
        if len(values) != 4:
            raise MalformedValueError(f"Malformed {key} value: {text!r}")
        return (values[0], values[1], values[2], values[3])
    raise MissingFieldError("Colour has neither NSRGB nor NSWhite components")


def _parse_sub_range(graph: ObjectGraph, position: int, node: Node) -> Optional[TextRange]:
    keys = graph.resolve(("NS.keys",), start=node)
    values = graph.resolve(("NS.objects",), start=node)
    if keys.kind is not NodeKind.ARRAY or values.kind is not NodeKind.ARRAY:
        raise TypeMismatchError(f"Sub-range {position} key/value lists are not arrays")
    if len(keys) != len(values):
        LOGGER.warning(
            "Sub-range %d has %d keys but %d values", position, len(keys), len(values)
        )

    text_range = None
    font_name, font_size = DEFAULT_FONT, DEFAULT_FONT_SIZE
    color = DEFAULT_TEXT_COLOR
    attributes: Dict[str, Node] = {}
    # Keys and values are paired by position, not by key content
    for key_node, value_node in zip(keys.value, values.value):
        key = graph.deref(key_node)
        if key.kind not in (NodeKind.STRING, NodeKind.KEY):
            LOGGER.warning("Sub-range %d has non-string key %s", position, key.describe())
            continue
        value = graph.deref(value_node)
        name = str(key.value)
        if name == RANGE_ATTR:
            text_range = parse_tuple(str(value.value))
        elif name == FONT_ATTR:
            font_name, font_size = _parse_font(graph, value)
        elif name == COLOR_ATTR:
            color = _parse_color(graph, value)
        elif name == PARAGRAPH_ATTR:
            attributes[name] = value
        else:
            LOGGER.info("Ignoring unknown text attribute %r in sub-range %d", name, position)

    if text_range is None:
        LOGGER.warning("Sub-range %d has no %s; skipped", position, RANGE_ATTR)
        return None
    try:
        start, length = int(text_range[0]), int(text_range[1])
    except (OverflowError, ValueError) as exc:
        raise MalformedValueError(f"Unusable range {text_range!r} in sub-range {position}") from exc
    if start < 0 or length < 0:
        raise MalformedValueError(f"Negative range {{{start}, {length}}} in sub-range {position}")
    return TextRange(
        start=start,
        length=length,
        font_name=font_name,
        font_size=font_size,
        color=color,
        attributes=attributes,
    )


def load_text_run(graph: ObjectGraph, store: Node) -> TextRun:
    """Resolve a text store into its backing string and ordered sub-ranges."""

    store = graph.deref(store)
    text = _backing_string(graph, store)
    try:
        entries = graph.resolve(ATTRIBUTES_PATH, start=store)
    except MissingFieldError:
        LOGGER.debug("Text store has no attributes; using defaults for the whole text")
        return TextRun(text=text, ranges=(TextRange(0, len(text)),) if text else ())
    if entries.kind is not NodeKind.ARRAY:
        raise TypeMismatchError(f"Text attributes are {entries.describe()}")

    ranges: List[TextRange] = []
    for position, entry in enumerate(entries.value):
        try:
            parsed = _parse_sub_range(graph, position, graph.deref(entry))
        except NavigationError as exc:
            LOGGER.warning("Skipping text sub-range %d: %s", position, exc)
            continue
        if parsed is not None:
            ranges.append(parsed)
    return TextRun(text=text, ranges=tuple(ranges))


def document_text_store(graph: ObjectGraph) -> Optional[Node]:
    try:
        return graph.resolve(DOCUMENT_TEXT_PATH)
    except MissingFieldError:
        return None


__all__ = [
    "ImageObject",
    "MediaObject",
    "SizedObject",
    "Stroke",
    "StrokeSet",
    "TextBlockObject",
    "TextRange",
    "TextRun",
    "UnknownObject",
    "document_text_store",
    "iter_media_objects",
    "load_ink_points",
    "load_stroke_set",
    "load_text_run",
    "parse_media_object",
    "parse_tuple",
]
