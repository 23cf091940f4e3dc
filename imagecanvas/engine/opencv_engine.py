"""
OpenCV-backed imaging engine.

Pixels live in NumPy arrays (BGR or BGRA, uint8). Pillow handles the
header-only metadata probe, CSS color parsing and decoding of formats
OpenCV cannot read (e.g. GIF).
"""

import io
import logging
from typing import Any, List, Optional, Tuple

import cv2
import numpy as np
from PIL import Image as PILImage

from imagecanvas.config import Settings, get_settings
from imagecanvas.constants import ErrorMessages, ImageConstants
from imagecanvas.drawer import Drawer
from imagecanvas.engine.base import PathLike, Raster
from imagecanvas.engine.converters import ImageConverters
from imagecanvas.engine.processors import composite_over, resize_image
from imagecanvas.enums import HersheyFont, ResampleFilter
from imagecanvas.exceptions import ImageEngineError
from imagecanvas.schemas import ImageInfo, Size

logger = logging.getLogger(__name__)

INTERPOLATION = {
    ResampleFilter.NEAREST: cv2.INTER_NEAREST,
    ResampleFilter.LINEAR: cv2.INTER_LINEAR,
    ResampleFilter.CUBIC: cv2.INTER_CUBIC,
    ResampleFilter.AREA: cv2.INTER_AREA,
    ResampleFilter.LANCZOS: cv2.INTER_LANCZOS4,
}

FONTS = {
    HersheyFont.SIMPLEX: cv2.FONT_HERSHEY_SIMPLEX,
    HersheyFont.PLAIN: cv2.FONT_HERSHEY_PLAIN,
    HersheyFont.DUPLEX: cv2.FONT_HERSHEY_DUPLEX,
    HersheyFont.COMPLEX: cv2.FONT_HERSHEY_COMPLEX,
    HersheyFont.TRIPLEX: cv2.FONT_HERSHEY_TRIPLEX,
    HersheyFont.COMPLEX_SMALL: cv2.FONT_HERSHEY_COMPLEX_SMALL,
    HersheyFont.SCRIPT_SIMPLEX: cv2.FONT_HERSHEY_SCRIPT_SIMPLEX,
    HersheyFont.SCRIPT_COMPLEX: cv2.FONT_HERSHEY_SCRIPT_COMPLEX,
}


class OpenCVEngine:
    """ImageEngine implementation on top of OpenCV."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize engine.

        Args:
            settings: Settings to read encoder and format defaults from
                (None = process-wide settings)
        """
        self.settings = settings or get_settings()

    # ---------- Creation / decoding ----------

    def new_image(self, width: int, height: int, background: str) -> Raster:
        """Allocate a canvas filled with the background color."""
        if width <= 0 or height <= 0:
            raise ImageEngineError(ErrorMessages.INVALID_SIZE.format(width=width, height=height))

        color = ImageConverters.parse_color(background)
        pixels = np.empty((height, width, len(color)), dtype=np.uint8)
        pixels[:] = color

        fmt = self.settings.image.default_format
        return Raster(pixels=pixels, format=self._normalize_format(fmt) if fmt else None)

    def read(self, path: PathLike) -> Raster:
        """
        Decode an image file.

        Args:
            path: Path to the image file

        Returns:
            Raster with the decoded pixels and the file's format

        Raises:
            ImageEngineError: If neither OpenCV nor Pillow can decode the file
        """
        pixels = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)

        if pixels is None:
            logger.debug(f"OpenCV could not decode {path}, falling back to Pillow")
            try:
                with PILImage.open(path) as image:
                    pixels = ImageConverters.pil_to_numpy(image)
            except Exception as e:
                logger.error(f"Failed to decode image {path}: {e}")
                raise ImageEngineError(ErrorMessages.DECODE_FAILED.format(path=path)) from e

        info = self.probe(path)
        return Raster(pixels=ImageConverters.normalize(pixels), format=info.format)

    def probe(self, path: PathLike) -> ImageInfo:
        """
        Read size and type from the file header without decoding pixels.

        Args:
            path: Path to the image file

        Returns:
            ImageInfo with mime, format, width and height
        """
        with PILImage.open(path) as image:
            fmt = image.format
            width, height = image.size

        return ImageInfo(
            mime=PILImage.MIME.get(fmt) if fmt else None,
            format=self._normalize_format(fmt) if fmt else None,
            width=width,
            height=height,
        )

    # ---------- Geometry ----------

    def resize(
        self,
        raster: Raster,
        width: int,
        height: int,
        resample: ResampleFilter = ResampleFilter.LANCZOS,
        blur: float = 1.0,
    ) -> None:
        """
        Resize raster in place.

        Args:
            raster: Raster to resize
            width: Target width (0 = derive from height, keeping aspect)
            height: Target height (0 = derive from width, keeping aspect)
            resample: Resampling filter
            blur: Values above 1.0 soften the result with a Gaussian pass
                of sigma (blur - 1.0)
        """
        pixels = resize_image(
            raster.pixels, width, height, interpolation=INTERPOLATION[ResampleFilter(resample)]
        )
        if blur > 1.0:
            pixels = cv2.GaussianBlur(pixels, (0, 0), sigmaX=blur - 1.0)
        raster.pixels = pixels

    def geometry(self, raster: Raster) -> Size:
        height, width = raster.pixels.shape[:2]
        return Size(width=width, height=height)

    # ---------- Drawing ----------

    def composite(self, canvas: Raster, overlay: Raster, x: int, y: int) -> None:
        """Composite overlay "over" canvas with its top-left corner at (x, y)."""
        composite_over(canvas.pixels, overlay.pixels, int(x), int(y))

    def text_metrics(self, drawer: Drawer, text: str) -> Size:
        """
        Measure text as it would be rendered with drawer.

        Lines separated by "\\n" are stacked: width is the widest line,
        height the sum of line heights. Each line's height covers ascent
        plus the baseline offset of descenders.
        """
        lines = self._measure_lines(drawer, text)
        return Size(
            width=max(width for _, width, _, _ in lines),
            height=sum(height + baseline for _, _, height, baseline in lines),
        )

    def annotate(
        self, raster: Raster, drawer: Drawer, x: int, y: int, angle: float, text: str
    ) -> None:
        """
        Draw text whose bounding box's top-left corner is at (x, y).

        Args:
            raster: Raster to draw on
            drawer: Text style
            x: Left edge of the text box
            y: Top edge of the text box
            angle: Rotation in degrees, clockwise about (x, y)
            text: Text to draw; "\\n" starts a new line
        """
        color = ImageConverters.parse_color(drawer.font_color)
        opaque = len(color) == 3 or color[3] == 255

        if angle % 360 == 0 and opaque:
            self._put_lines(raster.pixels, drawer, x, y, text, self._channel_color(color, raster))
            return

        # Render a coverage mask, rotate it, then blend it as a colored overlay
        height, width = raster.pixels.shape[:2]
        mask = np.zeros((height, width), dtype=np.uint8)
        self._put_lines(mask, drawer, x, y, text, 255)

        if angle % 360 != 0:
            # getRotationMatrix2D turns counter-clockwise for positive angles
            matrix = cv2.getRotationMatrix2D((float(x), float(y)), -float(angle), 1.0)
            mask = cv2.warpAffine(mask, matrix, (width, height), flags=cv2.INTER_LINEAR)

        alpha = color[3] / 255.0 if len(color) == 4 else 1.0
        overlay = np.empty((height, width, 4), dtype=np.uint8)
        overlay[:, :, :3] = color[:3]
        overlay[:, :, 3] = np.rint(mask.astype(np.float32) * alpha).astype(np.uint8)
        composite_over(raster.pixels, overlay, 0, 0)

    # ---------- Encoding ----------

    def get_format(self, raster: Raster) -> Optional[str]:
        return raster.format

    def set_format(self, raster: Raster, format: str) -> None:
        """
        Set the output format of raster.

        Raises:
            ImageEngineError: If the format cannot be encoded
        """
        fmt = self._normalize_format(format)
        if fmt not in ImageConstants.FORMAT_EXTENSIONS and fmt not in ImageConstants.PILLOW_FORMATS:
            raise ImageEngineError(ErrorMessages.UNSUPPORTED_FORMAT.format(format=format))
        raster.format = fmt

    def encode(self, raster: Raster) -> bytes:
        """
        Encode raster in its current format.

        Formats OpenCV cannot write (GIF) are encoded with Pillow.

        Returns:
            Encoded image bytes

        Raises:
            ImageEngineError: If no format is set, the format is not
                encodable, or the encoder fails
        """
        fmt = raster.format
        if not fmt:
            raise ImageEngineError(ErrorMessages.NO_FORMAT)

        if fmt in ImageConstants.PILLOW_FORMATS:
            return self._encode_with_pillow(raster.pixels, fmt)

        extension = ImageConstants.FORMAT_EXTENSIONS.get(fmt)
        if extension is None:
            raise ImageEngineError(ErrorMessages.UNSUPPORTED_FORMAT.format(format=fmt))

        pixels = raster.pixels
        if fmt in ImageConstants.OPAQUE_FORMATS and raster.has_alpha:
            pixels = ImageConverters.ensure_bgr(pixels)

        try:
            ok, buffer = cv2.imencode(extension, pixels, self._encode_params(fmt))
        except cv2.error as e:
            logger.error(f"Failed to encode image as {fmt}: {e}")
            raise

        if not ok:
            raise ImageEngineError(ErrorMessages.ENCODE_FAILED.format(format=fmt))
        return buffer.tobytes()

    # ---------- Helpers ----------

    @staticmethod
    def _encode_with_pillow(pixels: np.ndarray, fmt: str) -> bytes:
        buffer = io.BytesIO()
        try:
            ImageConverters.numpy_to_pil(pixels).save(
                buffer, format=ImageConstants.PILLOW_FORMATS[fmt]
            )
        except (OSError, ValueError) as e:
            logger.error(f"Failed to encode image as {fmt}: {e}")
            raise ImageEngineError(ErrorMessages.ENCODE_FAILED.format(format=fmt)) from e
        return buffer.getvalue()

    @staticmethod
    def _measure_lines(drawer: Drawer, text: str) -> List[Tuple[str, int, int, int]]:
        """Split text on newlines and measure each line as (line, width, height, baseline)."""
        font = FONTS[drawer.font]
        lines = []
        for line in text.split("\n"):
            (width, height), baseline = cv2.getTextSize(
                line, font, drawer.font_size, drawer.stroke_width
            )
            lines.append((line, width, height, baseline))
        return lines

    def _put_lines(
        self, pixels: np.ndarray, drawer: Drawer, x: int, y: int, text: str, color: Any
    ) -> None:
        """Draw text line by line, each line's box starting below the previous one."""
        font = FONTS[drawer.font]
        line_type = cv2.LINE_AA if drawer.anti_alias else cv2.LINE_8
        top = int(y)
        for line, _, height, baseline in self._measure_lines(drawer, text):
            if line:
                cv2.putText(
                    pixels,
                    line,
                    (int(x), top + height),
                    font,
                    drawer.font_size,
                    color,
                    drawer.stroke_width,
                    line_type,
                )
            top += height + baseline

    def _encode_params(self, fmt: str) -> List[int]:
        encoding = self.settings.encoding
        if fmt == "jpeg":
            return [cv2.IMWRITE_JPEG_QUALITY, encoding.jpeg_quality]
        if fmt == "png":
            return [cv2.IMWRITE_PNG_COMPRESSION, encoding.png_compression]
        if fmt == "webp":
            return [cv2.IMWRITE_WEBP_QUALITY, encoding.webp_quality]
        return []

    @staticmethod
    def _normalize_format(fmt: str) -> str:
        fmt = fmt.strip().lower().lstrip(".")
        return ImageConstants.FORMAT_ALIASES.get(fmt, fmt)

    @staticmethod
    def _channel_color(color: tuple, raster: Raster) -> tuple:
        """Match a BGR(A) color tuple to the raster's channel count."""
        if raster.has_alpha:
            return tuple(color[:3]) + (255,)
        return tuple(color[:3])
