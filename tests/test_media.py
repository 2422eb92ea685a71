"""Tests for media object classification and image rendering."""

import io
import logging

import pytest
from PIL import Image

from note_reader.content import (
    ImageObject,
    TextBlockObject,
    UnknownObject,
    iter_media_objects,
    parse_tuple,
)
from note_reader.document import NoteDocument
from note_reader.exceptions import AssetLoadError, MalformedValueError
from note_reader.renderers import ImageObjectRenderer, PillowCodec
from note_reader.window import PageWindow


class TestParseTuple:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("{20, 100}", (20.0, 100.0)),
            ("{ 1.5 ,2.25 }", (1.5, 2.25)),
            ("{-3, 0}", (-3.0, 0.0)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_tuple(text) == expected

    @pytest.mark.parametrize("text", ["", "20, 100", "{20}", "{a, b}", "{1, 2, 3}"])
    def test_malformed(self, text):
        with pytest.raises(MalformedValueError):
            parse_tuple(text)


class TestClassification:
    def test_image_fields(self, builder):
        builder.with_image((20, 100), (80, 40), "Images/figure.png")
        (image,) = list(iter_media_objects(builder.graph()))
        assert isinstance(image, ImageObject)
        assert image.origin == (20.0, 100.0)
        assert image.size == (80.0, 40.0)
        assert image.path == "Images/figure.png"
        assert image.encoding == "png"
        assert not image.missing

    def test_jpeg_flag(self, builder):
        builder.with_image((0, 0), (1, 1), "Images/photo.png", jpeg=True)
        (image,) = list(iter_media_objects(builder.graph()))
        assert image.encoding == "jpeg"

    @pytest.mark.parametrize(
        "path, encoding",
        [("Images/photo.JPG", "jpeg"), ("Images/photo.jpeg", "jpeg"), ("Images/scan.png", "png")],
    )
    def test_missing_jpeg_flag_follows_extension(self, builder, path, encoding):
        builder.with_image((0, 0), (1, 1), path, jpeg=None)
        (image,) = list(iter_media_objects(builder.graph()))
        assert image.encoding == encoding

    def test_text_block(self, builder):
        store = builder.text_store("Hi", [{"range": (0, 2)}])
        builder.with_text_block((30, 200), (200, 60), store)
        (block,) = list(iter_media_objects(builder.graph()))
        assert isinstance(block, TextBlockObject)
        assert (block.x, block.y, block.width, block.height) == (30.0, 200.0, 200.0, 60.0)

    def test_unknown_tag_keeps_siblings(self, builder):
        builder.with_image((0, 0), (1, 1), "a.png")
        builder.with_unknown_media("AudioMediaObject")
        builder.with_image((0, 10), (1, 1), "b.png")
        objects = list(iter_media_objects(builder.graph()))
        assert [type(obj) for obj in objects] == [ImageObject, UnknownObject, ImageObject]
        assert objects[1].tag == "AudioMediaObject"

    def test_malformed_entry_is_skipped(self, builder, caplog):
        builder.with_image((0, 0), (1, 1), "a.png")
        bad = builder.with_image((0, 0), (1, 1), "b.png")
        builder.objects[bad.data]["unscaledContentSize"] = "broken"
        with caplog.at_level(logging.WARNING):
            objects = list(iter_media_objects(builder.graph()))
        assert [obj.path for obj in objects] == ["a.png"]
        assert "Skipping media object 1" in caplog.text

    def test_no_media_objects(self, builder):
        assert list(iter_media_objects(builder.graph())) == []


def _image(y=100.0, height=40.0, path="Images/figure.png", missing=False):
    return ImageObject(
        index=7,
        tag="ImageMediaObject",
        origin=(20.0, y),
        size=(80.0, height),
        path=path,
        is_jpeg=False,
        missing=missing,
    )


class TestImageObjectRenderer:
    def _renderer(self, backend, codec, assets=None):
        assets = {"Images/figure.png": b"png-data"} if assets is None else assets

        def read_asset(relative):
            if relative not in assets:
                raise AssetLoadError(f"missing {relative}")
            return assets[relative]

        return ImageObjectRenderer(backend, read_asset, codec)

    def test_draws_at_page_local_position(self, backend, codec):
        drawn = self._renderer(backend, codec).render(_image(y=150.0), PageWindow.for_page(1, 100.0))
        assert drawn
        assert backend.commands == [
            ("paint_image", ("scaled", ("decoded", b"png-data", "png"), 80.0, 40.0), 20.0, 50.0)
        ]

    def test_extent_must_fit_window(self, backend, codec):
        renderer = self._renderer(backend, codec)
        assert not renderer.render(_image(y=80.0, height=40.0), PageWindow.for_page(0, 100.0))
        assert not renderer.render(_image(y=80.0, height=40.0), PageWindow.for_page(1, 100.0))
        assert renderer.render(_image(y=60.0, height=40.0), PageWindow.for_page(0, 100.0))
        assert len(backend.named("paint_image")) == 1

    def test_missing_image_is_skipped(self, backend, codec):
        assert not self._renderer(backend, codec).render(_image(missing=True), PageWindow.for_page(0, 650.0))
        assert backend.commands == []

    def test_unreadable_asset_is_omitted(self, backend, codec, caplog):
        renderer = self._renderer(backend, codec, assets={})
        with caplog.at_level(logging.WARNING):
            assert not renderer.render(_image(), PageWindow.for_page(0, 650.0))
        assert backend.commands == []
        assert "Omitting image object 7" in caplog.text

    def test_corrupt_asset_is_omitted(self, backend, codec):
        renderer = self._renderer(backend, codec, assets={"Images/figure.png": b"corrupt"})
        assert not renderer.render(_image(), PageWindow.for_page(0, 650.0))
        assert backend.commands == []


class TestPillowCodec:
    def test_decode_png(self, png_bytes):
        image = PillowCodec().decode(png_bytes, "png")
        assert image.size == (8, 4)
        assert image.mode == "RGBA"
        assert image.getpixel((0, 0)) == (255, 0, 0, 255)

    def test_decode_jpeg(self):
        buffer = io.BytesIO()
        Image.new("RGB", (6, 6), (0, 0, 255)).save(buffer, format="JPEG")
        image = PillowCodec().decode(buffer.getvalue(), "jpeg")
        assert image.size == (6, 6)
        assert image.mode == "RGBA"

    def test_encoding_mismatch(self, png_bytes):
        with pytest.raises(AssetLoadError):
            PillowCodec().decode(png_bytes, "jpeg")

    def test_garbage(self):
        with pytest.raises(AssetLoadError):
            PillowCodec().decode(b"not an image", "png")

    def test_unsupported_encoding(self, png_bytes):
        with pytest.raises(AssetLoadError):
            PillowCodec().decode(png_bytes, "tiff")

    def test_resample(self, png_bytes):
        codec = PillowCodec()
        image = codec.decode(png_bytes, "png")
        assert codec.resample(image, 16.4, 7.6).size == (16, 8)
        assert codec.resample(image, 0.2, 0.2).size == (1, 1)
        assert codec.resample(image, 8, 4) is image


class TestNonFiniteGeometry:
    @pytest.mark.parametrize("text", ["{nan, 4}", "{inf, 1}", "{0, -inf}"])
    def test_parse_tuple_rejects_non_finite(self, text):
        with pytest.raises(MalformedValueError):
            parse_tuple(text)

    def test_nan_sized_image_is_skipped(self, builder, caplog):
        builder.with_image((0, 0), (float("nan"), 4), "Images/a.png")
        with caplog.at_level(logging.WARNING):
            assert list(iter_media_objects(builder.graph())) == []
        assert "Non-finite" in caplog.text

    def test_nan_sized_image_keeps_the_page(self, tmp_path, builder, backend, png_bytes):
        builder.with_image((0, 0), (float("nan"), 4), "Images/a.png")
        builder.with_strokes([([(1.0, 1.0), (2.0, 2.0)], 1.0, (0, 0, 0, 255))])
        path = builder.write(tmp_path / "nan.note", assets={"Images/a.png": png_bytes})
        with NoteDocument.open(path) as document:
            document.page(0).render(backend)
        assert backend.named("paint_image") == []
        assert backend.named("stroke") == [("stroke",)]

    @pytest.mark.parametrize("size", [(float("nan"), 4.0), (float("inf"), 4.0)])
    def test_resample_failure_is_an_asset_error(self, png_bytes, size):
        codec = PillowCodec()
        image = codec.decode(png_bytes, "png")
        with pytest.raises(AssetLoadError):
            codec.resample(image, *size)
