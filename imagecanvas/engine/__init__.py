"""
Imaging engine layer.

- base: ImageEngine protocol and the Raster handle
- converters: color, array and base64 conversions
- processors: resize and compositing on arrays
- opencv_engine: the OpenCV implementation
"""

from imagecanvas.engine.base import ImageEngine, Raster
from imagecanvas.engine.converters import ImageConverters
from imagecanvas.engine.opencv_engine import OpenCVEngine

__all__ = ["ImageEngine", "Raster", "ImageConverters", "OpenCVEngine"]
