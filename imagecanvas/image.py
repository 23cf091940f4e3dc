"""
Image wrapper.

Owns an engine handle and the metadata derived from it, and translates
high-level requests (create, load, resize, place text or images, export)
into engine calls.
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from imagecanvas.config import get_settings
from imagecanvas.constants import ErrorMessages
from imagecanvas.drawer import Drawer
from imagecanvas.engine.base import ImageEngine, PathLike, Raster
from imagecanvas.engine.converters import ImageConverters
from imagecanvas.engine.opencv_engine import OpenCVEngine
from imagecanvas.enums import ImageState, Placement, ResampleFilter
from imagecanvas.exceptions import EmptyImageException, ImageNotFoundException
from imagecanvas.placement import get_placement_coordinates
from imagecanvas.schemas import Size

logger = logging.getLogger(__name__)


class Image:
    """
    Convenience wrapper around an engine image handle.

    The wrapper is either BLANK (nothing created or loaded yet) or LOADED.
    resize() and output() require LOADED and raise EmptyImageException
    otherwise.

    Attributes:
        image_path: Source path when loaded from a file
        mime: MIME type when loaded from a file
        width: Current width in pixels (0 while blank)
        height: Current height in pixels (0 while blank)
        background: Background color given to create_new()
        state: ImageState.BLANK or ImageState.LOADED

    Example:
        >>> image = Image()
        >>> image.create_new(800, 600, "white")
        >>> image.place_image("logo.png", Placement.BOTTOM_RIGHT)
        >>> data = image.output("png")
    """

    def __init__(self, image_path: Optional[PathLike] = None, engine: Optional[ImageEngine] = None):
        """
        Create a new Image.

        Args:
            image_path: If provided, load() is called with it
            engine: Imaging engine (default: OpenCVEngine)
        """
        self.engine: ImageEngine = engine if engine is not None else OpenCVEngine()
        self.resource: Optional[Raster] = None
        self.state = ImageState.BLANK

        self.image_path: Optional[Path] = None
        self.mime: Optional[str] = None
        self.width = 0
        self.height = 0
        self.background: Optional[str] = None

        if image_path is not None:
            self.load(image_path)

    # ---------- Lifecycle ----------

    def create_new(self, width: int, height: int, background: Optional[str] = None) -> None:
        """
        Create a new canvas filled with a background color.

        A new canvas has no format unless one is configured; call
        set_format() (or pass a format to output()) before exporting it.

        Args:
            width: Canvas width
            height: Canvas height
            background: CSS color (default from settings, "white")
        """
        if background is None:
            background = get_settings().image.default_background
        self.resource = self.engine.new_image(width, height, background)

        self.width = width
        self.height = height
        self.background = background
        self.state = ImageState.LOADED
        logger.debug(f"Created {width}x{height} canvas with background {background}")

    def load(self, image_path: PathLike) -> "Image":
        """
        Load an image file into this wrapper.

        Args:
            image_path: Path to the image file

        Returns:
            self, for chaining

        Raises:
            ImageNotFoundException: If the path is not a regular file
        """
        path = self._require_file(image_path)
        info = self.engine.probe(path)
        resource = self.engine.read(path)

        self.image_path = path
        self.mime = info.mime
        self.width = info.width
        self.height = info.height
        self.resource = resource
        self.state = ImageState.LOADED
        logger.debug(f"Loaded {path} ({info.mime}, {info.width}x{info.height})")
        return self

    def load_image_info(self) -> None:
        """
        Refresh mime, width and height from the current image_path.

        Raises:
            ImageNotFoundException: If image_path is unset or not a regular file
        """
        path = self._require_file(self.image_path)
        info = self.engine.probe(path)

        self.mime = info.mime
        self.width = info.width
        self.height = info.height

    def get_resource(self) -> Optional[Raster]:
        """Return the underlying engine handle."""
        return self.resource

    def is_blank(self) -> bool:
        """True if nothing has been created or loaded yet."""
        return self.state is ImageState.BLANK

    # ---------- Geometry ----------

    def resize(self, width: int, height: int) -> None:
        """
        Resize the image with a Lanczos filter.

        Stored width/height are taken from the engine afterwards, so a 0 for
        one side (aspect preserved) is reflected correctly.

        Raises:
            EmptyImageException: If the image is blank
        """
        if self.is_blank():
            raise EmptyImageException(ErrorMessages.EMPTY_RESIZE)

        self.engine.resize(
            self.resource,
            width,
            height,
            ResampleFilter.LANCZOS,
            get_settings().image.resize_blur,
        )
        new_size = self.engine.geometry(self.resource)

        self.width = new_size.width
        self.height = new_size.height
        logger.debug(f"Resized to {self.width}x{self.height}")

    def get_placement_coordinates(
        self,
        target_size: Union[Size, Mapping[str, Any], Tuple[int, int]],
        placement: Union[Placement, str] = Placement.TOP_LEFT,
    ) -> Tuple[int, int]:
        """
        Get coordinates for placing a target of target_size on this image.

        Args:
            target_size: Size of the text or image to place
            placement: Anchor (default top-left)

        Returns:
            Tuple of (x, y) for the target's top-left corner

        Raises:
            EmptyImageException: If the image is blank
        """
        if self.is_blank():
            raise EmptyImageException(ErrorMessages.EMPTY_PLACEMENT)

        canvas_size = self.engine.geometry(self.resource)
        return get_placement_coordinates(canvas_size, target_size, placement)

    # ---------- Format / background ----------

    def set_format(self, format: str) -> None:
        """Set the output format, e.g. "jpeg" or "png"."""
        if self.is_blank():
            raise EmptyImageException(ErrorMessages.EMPTY_FORMAT)
        self.engine.set_format(self.resource, format)

    def get_format(self) -> Optional[str]:
        """Return the current output format (None if unset)."""
        if self.is_blank():
            return None
        return self.engine.get_format(self.resource)

    def get_background(self) -> Optional[str]:
        """Return the background given to create_new()."""
        return self.background

    # ---------- Text ----------

    def annotate(self, text: str, x: int, y: int, angle: float, drawer: Drawer) -> None:
        """
        Write text at absolute coordinates.

        Args:
            text: Text to write
            x: Left edge of the text box
            y: Top edge of the text box
            angle: Rotation in degrees
            drawer: Text style

        Raises:
            EmptyImageException: If the image is blank
        """
        if self.is_blank():
            raise EmptyImageException(ErrorMessages.EMPTY_ANNOTATE)
        self.engine.annotate(self.resource, drawer, x, y, angle, text)

    def get_text_geometry(self, text: str, drawer: Drawer) -> Size:
        """Return the size text would have when rendered with drawer."""
        return self.engine.text_metrics(drawer, text)

    def place_text(self, text: str, placement: Union[Placement, str], drawer: Drawer) -> None:
        """
        Write text at a relative position.

        Args:
            text: Text to write
            placement: Anchor
            drawer: Text style
        """
        text_size = self.get_text_geometry(text, drawer)
        x, y = self.get_placement_coordinates(text_size, placement)
        self.engine.annotate(self.resource, drawer, x, y, 0, text)

    # ---------- Compositing ----------

    def place_image(
        self,
        image_path: PathLike,
        placement: Union[Placement, str],
        width: int = 0,
        height: int = 0,
    ) -> None:
        """
        Composite another image file on top of this one at a relative position.

        Args:
            image_path: Path of the image to place
            placement: Anchor
            width: Width of the placed image (resized only if height is also set)
            height: Height of the placed image (resized only if width is also set)

        Raises:
            ImageNotFoundException: If image_path is not a regular file
        """
        if self.is_blank():
            raise EmptyImageException(ErrorMessages.EMPTY_PLACEMENT)

        overlay = self.engine.read(self._require_file(image_path))

        if width and height:
            self.engine.resize(
                overlay, width, height, ResampleFilter.LANCZOS, get_settings().image.resize_blur
            )

        x, y = self.get_placement_coordinates(self.engine.geometry(overlay), placement)
        self.engine.composite(self.resource, overlay, x, y)
        logger.debug(f"Placed {image_path} at ({x},{y})")

    # ---------- Export ----------

    def output(self, format: Optional[str] = None) -> bytes:
        """
        Return the encoded image data.

        Args:
            format: Overrides the current format; needed for new canvases
                when set_format() was not called

        Returns:
            Encoded image bytes

        Raises:
            EmptyImageException: If the image is blank
        """
        if self.is_blank():
            raise EmptyImageException(ErrorMessages.EMPTY_OUTPUT)

        if format is not None:
            self.engine.set_format(self.resource, format)

        data = self.engine.encode(self.resource)
        logger.debug(f"Exported {len(data)} bytes as {self.engine.get_format(self.resource)}")
        return data

    def output_base64(self, format: Optional[str] = None) -> str:
        """Return output() as a base64 string."""
        return ImageConverters.to_base64(self.output(format))

    # ---------- Helpers ----------

    @staticmethod
    def _require_file(image_path: Optional[PathLike]) -> Path:
        if image_path is None or not Path(image_path).is_file():
            raise ImageNotFoundException(ErrorMessages.FILE_NOT_FOUND.format(path=image_path))
        return Path(image_path)

    def __repr__(self) -> str:
        return f"Image(state={self.state.value}, size={self.width}x{self.height})"
