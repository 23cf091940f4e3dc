"""
Pytest configuration and fixtures for imagecanvas tests
"""

from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest

from imagecanvas.config import get_settings
from imagecanvas.drawer import Drawer
from imagecanvas.engine.base import Raster
from imagecanvas.engine.opencv_engine import OpenCVEngine
from imagecanvas.schemas import ImageInfo, Size


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test see settings built from its own environment"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_image():
    """Create a 640x480 BGR test image"""
    image = np.zeros((480, 640, 3), dtype=np.uint8)
    cv2.rectangle(image, (100, 100), (300, 300), (255, 255, 255), -1)
    cv2.circle(image, (450, 350), 50, (128, 128, 128), -1)
    return image


@pytest.fixture
def image_file(tmp_path, test_image):
    """Write the test image to a PNG file"""
    path = tmp_path / "photo.png"
    cv2.imwrite(str(path), test_image)
    return path


@pytest.fixture
def jpeg_file(tmp_path, test_image):
    """Write the test image to a JPEG file"""
    path = tmp_path / "photo.jpg"
    cv2.imwrite(str(path), test_image)
    return path


@pytest.fixture
def logo_file(tmp_path):
    """Write a 100x50 BGRA logo: opaque red left half, transparent right half"""
    logo = np.zeros((50, 100, 4), dtype=np.uint8)
    logo[:, :50] = (0, 0, 255, 255)
    path = tmp_path / "logo.png"
    cv2.imwrite(str(path), logo)
    return path


@pytest.fixture
def engine():
    """Real OpenCV engine"""
    return OpenCVEngine()


@pytest.fixture
def drawer():
    """Default text style in black"""
    return Drawer(font_color="black", font_size=1.0, stroke_width=2)


@pytest.fixture
def mock_engine():
    """
    Create mock engine for unit testing.

    Canvas rasters report 800x600; rasters returned by read() report 100x50.
    """
    mock = MagicMock(spec=OpenCVEngine)
    canvas = Raster(pixels=np.zeros((1, 1, 3), dtype=np.uint8))
    overlay = Raster(pixels=np.zeros((1, 1, 4), dtype=np.uint8))

    mock.new_image.return_value = canvas
    mock.read.return_value = overlay
    mock.probe.return_value = ImageInfo(mime="image/png", format="png", width=800, height=600)
    mock.geometry.side_effect = lambda raster: (
        Size(width=100, height=50) if raster is overlay else Size(width=800, height=600)
    )
    mock.text_metrics.return_value = Size(width=120, height=20)
    mock.encode.return_value = b"encoded-bytes"
    mock.get_format.return_value = "png"
    return mock
