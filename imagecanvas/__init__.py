"""
imagecanvas - load, create, annotate, composite and export images with
relative placement of text and overlays.
"""

from .config import Settings, configure_logging, get_settings
from .drawer import Drawer
from .engine import ImageEngine, OpenCVEngine, Raster
from .enums import HersheyFont, ImageState, Placement, ResampleFilter
from .exceptions import (
    EmptyImageException,
    ImageCanvasError,
    ImageEngineError,
    ImageNotFoundException,
)
from .image import Image
from .placement import get_placement_coordinates
from .schemas import ImageInfo, Size

__version__ = "1.0.0"

__all__ = [
    "Image",
    "Drawer",
    "Placement",
    "ImageState",
    "ResampleFilter",
    "HersheyFont",
    "ImageEngine",
    "OpenCVEngine",
    "Raster",
    "Size",
    "ImageInfo",
    "get_placement_coordinates",
    "Settings",
    "get_settings",
    "configure_logging",
    "ImageCanvasError",
    "ImageNotFoundException",
    "EmptyImageException",
    "ImageEngineError",
]
