"""Tests for opening documents and rendering pages."""

import logging
import plistlib
import zipfile

import pytest

from note_reader.document import NoteDocument
from note_reader.exceptions import (
    InvalidNoteError,
    PageOutOfBoundsError,
    UnsupportedModeError,
)
from note_reader.options import RenderOptions
from note_reader.validators import get_note_info, validate_note
from note_reader.window import PageWindow

from notebuilder import NoteBuilder


class TestOpen:
    def test_open_sample(self, sample_note):
        with NoteDocument.open(sample_note) as document:
            assert document.page_count == 2
            assert document.geometry.width == 500.0
            assert document.geometry.height == pytest.approx(650.0)
            assert document.container.root_name == "Lecture"

    def test_info(self, sample_note):
        info = get_note_info(str(sample_note))
        assert info.page_count == 2
        assert info.stroke_count == 2
        assert info.media_objects == 2
        assert info.paper_identifier == "Legacy:13"
        assert info.file_size == sample_note.stat().st_size
        assert info.node_count > 3

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "broken.note"
        path.write_bytes(b"definitely not a zip")
        with pytest.raises(InvalidNoteError) as excinfo:
            NoteDocument.open(path)
        assert "Couldn't open .note zip" in str(excinfo.value)

    def test_empty_zip(self, tmp_path):
        path = tmp_path / "empty.note"
        zipfile.ZipFile(path, "w").close()
        with pytest.raises(InvalidNoteError):
            NoteDocument.open(path)

    def test_missing_session(self, tmp_path):
        path = tmp_path / "nosession.note"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("Lecture/Images/a.png", b"x")
        with pytest.raises(InvalidNoteError) as excinfo:
            NoteDocument.open(path)
        assert "Session.plist" in str(excinfo.value)

    def test_xml_session(self, tmp_path):
        path = tmp_path / "xml.note"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("Lecture/Session.plist", plistlib.dumps({"$objects": []}))
        with pytest.raises(InvalidNoteError):
            NoteDocument.open(path)

    def test_objects_not_an_array(self, tmp_path):
        path = tmp_path / "objects.note"
        payload = plistlib.dumps({"$objects": {"a": 1}}, fmt=plistlib.FMT_BINARY)
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("Lecture/Session.plist", payload)
        with pytest.raises(InvalidNoteError) as excinfo:
            NoteDocument.open(path)
        assert "Invalid $objects type" in str(excinfo.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidNoteError):
            NoteDocument.open(tmp_path / "absent.note")


class TestValidateNote:
    def test_valid(self, sample_note):
        assert validate_note(str(sample_note)) == (True, "")

    def test_missing(self, tmp_path):
        ok, message = validate_note(str(tmp_path / "absent.note"))
        assert not ok
        assert "File not found" in message

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "lecture.zip"
        NoteBuilder().write(path)
        ok, message = validate_note(str(path))
        assert not ok
        assert ".note extension" in message

    def test_directory(self, tmp_path):
        ok, message = validate_note(str(tmp_path))
        assert not ok
        assert "not a file" in message

    def test_corrupt(self, tmp_path):
        path = tmp_path / "broken.note"
        path.write_bytes(b"junk")
        ok, message = validate_note(str(path))
        assert not ok
        assert "zip" in message

    def test_session_is_left_to_open(self, tmp_path):
        path = tmp_path / "nosession.note"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("Lecture/Images/a.png", b"x")
        assert validate_note(str(path)) == (True, "")
        with pytest.raises(InvalidNoteError):
            NoteDocument.open(path)


class TestPage:
    def test_page_bounds(self, sample_note):
        with NoteDocument.open(sample_note) as document:
            with pytest.raises(PageOutOfBoundsError):
                document.page(2)
            with pytest.raises(PageOutOfBoundsError):
                document.page(-1)

    def test_page_size_and_window(self, sample_note):
        with NoteDocument.open(sample_note) as document:
            page = document.page(1)
            assert page.size.width == 500.0
            assert page.window == PageWindow.for_page(1, document.geometry.height)

    def test_printing_is_unsupported(self, sample_note, backend):
        with NoteDocument.open(sample_note) as document:
            with pytest.raises(UnsupportedModeError):
                document.page(0).render(backend, for_printing=True)
        assert backend.commands == []

    def test_first_page_draw_order(self, sample_note, backend):
        with NoteDocument.open(sample_note) as document:
            problems = document.page(0).render(backend)
        assert problems == []
        kinds = [command[0] for command in backend.commands]
        assert kinds.index("paint_image") < kinds.index("show_text") < kinds.index("move_to")
        (paint,) = backend.named("paint_image")
        assert paint[1].size == (80, 40)
        assert paint[2:] == (20.0, 100.0)
        assert [c[1] for c in backend.named("show_text")] == ["Heading", "Body"]
        assert backend.named("move_to") == [("move_to", 10.0, 10.0)]

    def test_second_page_only_has_its_ink(self, sample_note, backend):
        with NoteDocument.open(sample_note) as document:
            document.page(1).render(backend)
        assert backend.named("paint_image") == []
        assert backend.named("show_text") == []
        (move,) = backend.named("move_to")
        assert move[1] == 40.0
        assert move[2] == pytest.approx(50.0)

    def test_pages_render_independently(self, sample_note, backend):
        with NoteDocument.open(sample_note) as document:
            first, second = document.page(0), document.page(1)
            second.render(backend)
            expected = list(backend.commands)
            backend.commands.clear()
            first.render(backend)
            backend.commands.clear()
            second.render(backend)
        assert backend.commands == expected

    def test_clear_recreates_window(self, sample_note, backend):
        with NoteDocument.open(sample_note) as document:
            page = document.page(0)
            window = page.window
            page.clear()
            assert page.window == window
            page.render(backend)
        assert backend.named("move_to")

    def test_options_disable_layers(self, sample_note, backend):
        options = RenderOptions(render_images=False, render_text=False)
        with NoteDocument.open(sample_note, options) as document:
            document.page(0).render(backend)
        assert backend.named("paint_image") == []
        assert backend.named("show_text") == []
        assert backend.named("stroke")


class TestDegradedRendering:
    def test_unknown_media_warns_once_and_siblings_render(self, tmp_path, builder, backend, png_bytes, caplog):
        builder.with_unknown_media("AudioMediaObject")
        builder.with_image((0, 0), (8, 4), "Images/a.png")
        path = builder.write(tmp_path / "audio.note", assets={"Images/a.png": png_bytes})
        with NoteDocument.open(path) as document:
            with caplog.at_level(logging.WARNING):
                problems = document.page(0).render(backend)
        assert len(problems) == 1
        assert "AudioMediaObject" in problems[0]
        assert caplog.text.count("AudioMediaObject") == 1
        assert "please report" in caplog.text
        assert len(backend.named("paint_image")) == 1

    def test_missing_asset_omits_only_that_image(self, tmp_path, builder, backend):
        builder.with_image((0, 0), (8, 4), "Images/gone.png")
        builder.with_strokes([([(1.0, 1.0)], 1.0, (0, 0, 0, 255))])
        path = builder.write(tmp_path / "gone.note")
        with NoteDocument.open(path) as document:
            document.page(0).render(backend)
        assert backend.named("paint_image") == []
        assert backend.named("stroke")

    def test_inconsistent_strokes_keep_other_layers(self, tmp_path, builder, backend, png_bytes, caplog):
        builder.with_image((0, 0), (8, 4), "Images/a.png")
        builder.with_strokes([([(1.0, 1.0)], 1.0, (0, 0, 0, 255))], omit=["curvescolors"])
        path = builder.write(tmp_path / "ink.note", assets={"Images/a.png": png_bytes})
        with NoteDocument.open(path) as document:
            with caplog.at_level(logging.ERROR):
                problems = document.page(0).render(backend)
        assert any(problem.startswith("strokes:") for problem in problems)
        assert backend.named("paint_image")
        assert backend.named("stroke") == []
        assert "curvescolors" in caplog.text

    def test_document_text_renders(self, tmp_path, builder, backend):
        builder.with_document_text(builder.text_store("Title", [{"range": (0, 5)}]))
        path = builder.write(tmp_path / "text.note")
        with NoteDocument.open(path) as document:
            document.page(0).render(backend)
        assert backend.named("show_text") == [("show_text", "Title", "Helvetica", 12.0, 0.0, 0.0)]
