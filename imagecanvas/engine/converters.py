"""
Image format conversion utilities.

Handles conversions between different representations:
- NumPy arrays (OpenCV BGR/BGRA format)
- PIL Images (RGB/RGBA format)
- CSS color strings
- Base64 encoded strings
"""

import base64
import logging
from typing import Tuple, Union

import cv2
import numpy as np
from PIL import Image, ImageColor

from imagecanvas.constants import ErrorMessages
from imagecanvas.exceptions import ImageEngineError

logger = logging.getLogger(__name__)


class ImageConverters:
    """Utilities for converting between image formats."""

    @staticmethod
    def pil_to_numpy(image: Image.Image) -> np.ndarray:
        """
        Convert PIL Image to an 8-bit OpenCV array.

        Palette and grayscale images are expanded; transparency is kept as a
        fourth channel.

        Args:
            image: PIL Image

        Returns:
            NumPy array in BGR or BGRA format
        """
        has_alpha = image.mode in ("RGBA", "LA", "PA") or (
            image.mode == "P" and "transparency" in image.info
        )
        if has_alpha:
            array = np.array(image.convert("RGBA"))
            return cv2.cvtColor(array, cv2.COLOR_RGBA2BGRA)

        array = np.array(image.convert("RGB"))
        return cv2.cvtColor(array, cv2.COLOR_RGB2BGR)

    @staticmethod
    def numpy_to_pil(image: np.ndarray) -> Image.Image:
        """
        Convert OpenCV array to PIL Image.

        Args:
            image: NumPy array in BGR or BGRA format

        Returns:
            PIL Image in RGB or RGBA mode
        """
        if image.ndim == 3 and image.shape[2] == 4:
            return Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA))
        return Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))

    @staticmethod
    def normalize(image: np.ndarray) -> np.ndarray:
        """
        Bring a decoded array to 8-bit BGR or BGRA.

        Args:
            image: Array as returned by cv2.imread(..., IMREAD_UNCHANGED)

        Returns:
            uint8 array with 3 or 4 channels
        """
        if image.dtype == np.uint16:
            image = (image / 257).astype(np.uint8)
        elif image.dtype != np.uint8:
            image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

        if image.ndim == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        if image.shape[2] == 1:
            return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2BGR)
        return image

    @staticmethod
    def ensure_bgr(image: np.ndarray) -> np.ndarray:
        """
        Drop the alpha channel of a BGRA array (copy otherwise).

        Args:
            image: BGR or BGRA array

        Returns:
            Image in BGR format
        """
        if image.ndim == 3 and image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        return image.copy()

    @staticmethod
    def parse_color(color: str) -> Union[Tuple[int, int, int], Tuple[int, int, int, int]]:
        """
        Parse a CSS color string into an OpenCV BGR(A) tuple.

        Args:
            color: Any color Pillow understands ("white", "#ff8800", "rgba(0,0,0,128)")

        Returns:
            (B, G, R) or (B, G, R, A) tuple

        Raises:
            ImageEngineError: If the color is not recognized
        """
        try:
            rgb = ImageColor.getrgb(color)
        except ValueError as e:
            raise ImageEngineError(ErrorMessages.INVALID_COLOR.format(color=color)) from e

        if len(rgb) == 4:
            r, g, b, a = rgb
            return (b, g, r, a)
        r, g, b = rgb
        return (b, g, r)

    @staticmethod
    def to_base64(data: bytes) -> str:
        """
        Convert encoded image bytes to a base64 string.

        Args:
            data: Encoded image bytes

        Returns:
            Base64 encoded string
        """
        return base64.b64encode(data).decode("utf-8")
