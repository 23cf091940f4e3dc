"""
Tests for the Image wrapper
"""

import base64
import io

import numpy as np
import pytest
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from imagecanvas.enums import ImageState, Placement, ResampleFilter
from imagecanvas.exceptions import EmptyImageException, ImageEngineError, ImageNotFoundException
from imagecanvas.image import Image
from imagecanvas.schemas import Size


def decode(data):
    """Decode bytes with Pillow"""
    return PILImage.open(io.BytesIO(data))


class TestImageState:
    """Test Blank/Loaded transitions"""

    def test_new_image_is_blank(self, mock_engine):
        image = Image(engine=mock_engine)
        assert image.is_blank()
        assert image.state is ImageState.BLANK
        assert image.width == 0
        assert image.height == 0
        assert image.get_resource() is None

    def test_create_new_loads(self, mock_engine):
        image = Image(engine=mock_engine)
        image.create_new(800, 600)

        assert not image.is_blank()
        assert image.width == 800
        assert image.height == 600
        assert image.get_background() == "white"
        mock_engine.new_image.assert_called_once_with(800, 600, "white")

    def test_empty_background_is_not_replaced(self, mock_engine):
        image = Image(engine=mock_engine)
        image.create_new(10, 10, "")

        mock_engine.new_image.assert_called_once_with(10, 10, "")
        assert image.get_background() == ""

    def test_empty_background_fails_in_engine(self):
        image = Image()
        with pytest.raises(ImageEngineError):
            image.create_new(10, 10, "")
        assert image.is_blank()

    def test_load_loads(self, image_file):
        image = Image()
        result = image.load(image_file)

        assert result is image
        assert not image.is_blank()
        assert image.width == 640
        assert image.height == 480
        assert image.mime == "image/png"
        assert image.image_path == image_file

    def test_constructor_with_path(self, image_file):
        image = Image(image_file)
        assert not image.is_blank()
        assert image.get_format() == "png"

    def test_repr(self, mock_engine):
        image = Image(engine=mock_engine)
        assert "blank" in repr(image)


class TestLoad:
    """Test file loading"""

    def test_missing_file_never_reaches_engine(self, tmp_path, mock_engine):
        image = Image(engine=mock_engine)

        with pytest.raises(ImageNotFoundException):
            image.load(tmp_path / "missing.png")

        mock_engine.probe.assert_not_called()
        mock_engine.read.assert_not_called()
        assert image.is_blank()

    def test_directory_is_not_found(self, tmp_path, mock_engine):
        with pytest.raises(ImageNotFoundException):
            Image(engine=mock_engine).load(tmp_path)

    def test_not_found_is_file_not_found_error(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Image(tmp_path / "missing.png")

    def test_corrupt_file_leaves_wrapper_blank(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        image = Image()

        with pytest.raises(UnidentifiedImageError):
            image.load(path)

        assert image.is_blank()
        assert image.image_path is None

    def test_load_jpeg_metadata(self, jpeg_file):
        image = Image(jpeg_file)
        assert image.mime == "image/jpeg"
        assert image.get_format() == "jpeg"
        assert (image.width, image.height) == (640, 480)

    def test_load_image_info_requires_path(self, mock_engine):
        with pytest.raises(ImageNotFoundException):
            Image(engine=mock_engine).load_image_info()

    def test_load_image_info_refreshes(self, image_file, mock_engine):
        image = Image(engine=mock_engine)
        image.load(image_file)
        mock_engine.probe.return_value = mock_engine.probe.return_value.model_copy(
            update={"width": 10, "height": 20}
        )

        image.load_image_info()

        assert (image.width, image.height) == (10, 20)


class TestResize:
    """Test resizing"""

    def test_blank_raises_before_engine(self, mock_engine):
        image = Image(engine=mock_engine)

        with pytest.raises(EmptyImageException):
            image.resize(100, 100)

        mock_engine.resize.assert_not_called()

    def test_uses_lanczos_and_engine_geometry(self, mock_engine):
        image = Image(engine=mock_engine)
        image.create_new(10, 10)

        image.resize(400, 300)

        args = mock_engine.resize.call_args[0]
        assert args[1:4] == (400, 300, ResampleFilter.LANCZOS)
        # Stored size comes from the engine, not the request
        assert (image.width, image.height) == (800, 600)

    def test_real_resize(self, image_file):
        image = Image(image_file)
        image.resize(320, 240)
        assert (image.width, image.height) == (320, 240)
        assert decode(image.output()).size == (320, 240)

    def test_zero_height_keeps_aspect(self, image_file):
        image = Image(image_file)
        image.resize(320, 0)
        assert (image.width, image.height) == (320, 240)


class TestFormatAndOutput:
    """Test format handling and export"""

    def test_output_blank_raises_before_engine(self, mock_engine):
        image = Image(engine=mock_engine)

        with pytest.raises(EmptyImageException):
            image.output("png")

        mock_engine.encode.assert_not_called()

    def test_set_format_blank_raises(self, mock_engine):
        with pytest.raises(EmptyImageException):
            Image(engine=mock_engine).set_format("png")

    def test_get_format_blank_is_none(self, mock_engine):
        assert Image(engine=mock_engine).get_format() is None

    def test_new_canvas_has_no_format(self):
        image = Image()
        image.create_new(20, 10)

        assert image.get_format() is None
        with pytest.raises(ImageEngineError):
            image.output()

    def test_round_trip_size(self):
        image = Image()
        image.create_new(123, 45, "white")

        decoded = decode(image.output("png"))

        assert decoded.size == (123, 45)
        assert decoded.convert("RGB").getpixel((0, 0)) == (255, 255, 255)

    def test_output_is_idempotent(self, image_file):
        image = Image(image_file)
        first = image.output("png")
        second = image.output("png")

        assert len(first) > 0
        assert len(first) == len(second)

    def test_set_format_alias(self):
        image = Image()
        image.create_new(16, 16, "#336699")
        image.set_format("JPG")

        assert image.get_format() == "jpeg"
        assert image.output().startswith(b"\xff\xd8")

    def test_loaded_gif_outputs(self, tmp_path):
        path = tmp_path / "small.gif"
        PILImage.new("RGB", (20, 10), (0, 0, 255)).save(path)

        image = Image(path)
        data = image.output()

        assert image.get_format() == "gif"
        assert image.mime == "image/gif"
        assert decode(data).size == (20, 10)

    def test_set_format_gif(self):
        image = Image()
        image.create_new(8, 6, "red")
        image.set_format("gif")

        assert decode(image.output()).format == "GIF"

    def test_unsupported_format(self):
        image = Image()
        image.create_new(16, 16)
        with pytest.raises(ImageEngineError):
            image.set_format("xyz")

    def test_transparent_canvas(self):
        image = Image()
        image.create_new(8, 8, "rgba(0,0,0,0)")

        assert decode(image.output("png")).mode == "RGBA"
        # Alpha is dropped for formats without it
        assert decode(image.output("jpeg")).mode == "RGB"

    def test_output_base64(self):
        image = Image()
        image.create_new(5, 6)
        encoded = image.output_base64("png")
        assert decode(base64.b64decode(encoded)).size == (5, 6)

    def test_default_background_from_environment(self, monkeypatch):
        monkeypatch.setenv("IMAGECANVAS_IMAGE__DEFAULT_BACKGROUND", "black")
        image = Image()
        image.create_new(4, 4)

        assert image.get_background() == "black"
        assert decode(image.output("png")).convert("RGB").getpixel((1, 1)) == (0, 0, 0)


class TestPlacement:
    """Test relative placement of text and images"""

    def test_blank_raises(self, mock_engine):
        with pytest.raises(EmptyImageException):
            Image(engine=mock_engine).get_placement_coordinates(Size(width=1, height=1))

    def test_place_image_bottom_right(self, logo_file, mock_engine):
        image = Image(engine=mock_engine)
        image.create_new(800, 600)

        image.place_image(logo_file, Placement.BOTTOM_RIGHT)

        canvas = image.get_resource()
        overlay = mock_engine.read.return_value
        mock_engine.composite.assert_called_once_with(canvas, overlay, 700, 550)
        mock_engine.resize.assert_not_called()

    def test_place_image_resizes_only_with_both_sides(self, logo_file, mock_engine):
        image = Image(engine=mock_engine)
        image.create_new(800, 600)

        image.place_image(logo_file, "top-left", width=50)
        mock_engine.resize.assert_not_called()

        image.place_image(logo_file, "top-left", width=50, height=25)
        args = mock_engine.resize.call_args[0]
        assert args[0] is mock_engine.read.return_value
        assert args[1:3] == (50, 25)

    def test_place_image_missing_file(self, tmp_path, mock_engine):
        image = Image(engine=mock_engine)
        image.create_new(800, 600)

        with pytest.raises(ImageNotFoundException):
            image.place_image(tmp_path / "missing.png", Placement.MID_CENTER)

        mock_engine.read.assert_not_called()

    def test_place_text_mid_center(self, mock_engine, drawer):
        image = Image(engine=mock_engine)
        image.create_new(800, 600)

        image.place_text("Hello", Placement.MID_CENTER, drawer)

        mock_engine.annotate.assert_called_once_with(
            image.get_resource(), drawer, 340, 290, 0, "Hello"
        )

    def test_real_place_image_blends_alpha(self, logo_file):
        image = Image()
        image.create_new(800, 600, "white")

        image.place_image(logo_file, Placement.BOTTOM_RIGHT)

        pixels = image.get_resource().pixels
        # Opaque red half of the logo
        assert tuple(pixels[575, 710]) == (0, 0, 255)
        # Transparent half leaves the canvas untouched
        assert tuple(pixels[575, 790]) == (255, 255, 255)
        # Outside the logo
        assert tuple(pixels[540, 710]) == (255, 255, 255)

    def test_real_place_image_resized(self, logo_file):
        image = Image()
        image.create_new(200, 200, "white")

        image.place_image(logo_file, Placement.TOP_LEFT, width=20, height=10)

        pixels = image.get_resource().pixels
        assert tuple(pixels[5, 5]) == (0, 0, 255)
        assert tuple(pixels[5, 30]) == (255, 255, 255)

    def test_real_place_text(self, drawer):
        image = Image()
        image.create_new(400, 300, "white")
        size = image.get_text_geometry("Corner", drawer)

        image.place_text("Corner", Placement.BOTTOM_RIGHT, drawer)

        pixels = image.get_resource().pixels
        region = pixels[300 - size.height :, 400 - size.width :]
        assert (region < 255).any()
        # Nothing drawn in the opposite corner
        assert (pixels[: size.height, : size.width] == 255).all()


class TestAnnotate:
    """Test text drawing"""

    def test_blank_raises(self, mock_engine, drawer):
        with pytest.raises(EmptyImageException):
            Image(engine=mock_engine).annotate("x", 0, 0, 0, drawer)

    def test_text_geometry(self, drawer):
        image = Image()
        size = image.get_text_geometry("Hello", drawer)

        assert size.width > 0
        assert size.height > 0
        assert image.get_text_geometry("Hello Hello", drawer).width > size.width

    def test_annotate_draws(self, drawer):
        image = Image()
        image.create_new(200, 100, "white")

        image.annotate("Hi", 10, 10, 0, drawer)

        assert (image.get_resource().pixels < 255).any()

    def test_annotate_rotated(self, drawer):
        image = Image()
        image.create_new(200, 200, "white")

        image.annotate("Rotated", 100, 100, 45, drawer)

        pixels = image.get_resource().pixels
        assert (pixels < 255).any()
        assert pixels.dtype == np.uint8

    def test_annotate_rotated_clockwise(self, drawer):
        image = Image()
        image.create_new(400, 400, "white")

        image.annotate("Rotated", 200, 200, 90, drawer)

        ink_rows = np.argwhere((image.get_resource().pixels < 128).any(axis=2))[:, 0]
        assert ink_rows.min() >= 190

    def test_multiline_geometry(self, drawer):
        image = Image()
        one = image.get_text_geometry("Line", drawer)
        two = image.get_text_geometry("Line\nLine", drawer)

        assert two.width == one.width
        assert two.height == 2 * one.height
