from __future__ import annotations

import io
from pathlib import Path
import sys
from typing import Any, List, Tuple

import pytest
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from note_reader.exceptions import AssetLoadError  # noqa: E402
from notebuilder import NoteBuilder  # noqa: E402


class RecordingBackend:
    """Drawing backend that records every command it receives."""

    LINE_FACTOR = 1.5

    def __init__(self) -> None:
        self.commands: List[Tuple[Any, ...]] = []

    def set_color(self, red, green, blue, alpha):
        self.commands.append(("set_color", red, green, blue, alpha))

    def set_line_width(self, width):
        self.commands.append(("set_line_width", width))

    def move_to(self, x, y):
        self.commands.append(("move_to", x, y))

    def line_to(self, x, y):
        self.commands.append(("line_to", x, y))

    def stroke(self):
        self.commands.append(("stroke",))

    def paint_image(self, raster, x, y):
        self.commands.append(("paint_image", raster, x, y))

    def measure_text(self, text, font_name, font_size):
        return font_size * self.LINE_FACTOR * len(text.split("\n"))

    def show_text(self, text, font_name, font_size, x, y):
        self.commands.append(("show_text", text, font_name, font_size, x, y))

    def named(self, name: str) -> List[Tuple[Any, ...]]:
        return [command for command in self.commands if command[0] == name]

    def segments(self, offset: float = 0.0) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
        """Visible line segments, translated back by ``offset`` into document space."""
        result = []
        previous = None
        for command in self.commands:
            if command[0] == "move_to":
                previous = (command[1], command[2] + offset)
            elif command[0] == "line_to":
                point = (command[1], command[2] + offset)
                result.append((previous, point))
                previous = point
        return result


class FakeCodec:
    """Codec that records what it was asked to decode."""

    def decode(self, data, encoding):
        if data == b"corrupt":
            raise AssetLoadError("cannot decode")
        return ("decoded", data, encoding)

    def resample(self, raster, width, height):
        return ("scaled", raster, width, height)


@pytest.fixture()
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture()
def codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture()
def builder() -> NoteBuilder:
    return NoteBuilder().with_width(500.0).with_paper("Legacy:13")


@pytest.fixture()
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (8, 4), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def sample_note(tmp_path: Path, builder: NoteBuilder, png_bytes: bytes) -> Path:
    builder.with_strokes(
        [
            ([(10.0, 10.0), (20.0, 20.0), (30.0, 30.0)], 2.0, (255, 0, 0, 255)),
            ([(40.0, 700.0), (50.0, 710.0)], 1.5, (0, 0, 255, 128)),
        ]
    )
    builder.with_image((20, 100), (80, 40), "Images/figure.png")
    store = builder.text_store(
        "Heading\nBody",
        [
            {"range": (0, 7), "font": ("Helvetica", 18.0), "color": (0, 0, 0, 1)},
            {"range": (8, 4), "font": ("Helvetica", 12.0), "color": (0.2, 0.2, 0.2, 1)},
        ],
    )
    builder.with_text_block((30, 200), (200, 60), store)
    return builder.write(tmp_path / "lecture.note", assets={"Images/figure.png": png_bytes})
