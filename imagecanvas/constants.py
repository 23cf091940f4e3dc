"""
Constants and configuration values for imagecanvas.
Centralizes all magic numbers and message templates.
"""


# Image Constants
class ImageConstants:
    """Constants related to canvas creation and resampling."""

    DEFAULT_BACKGROUND = "white"

    # Blur factor passed along with the resampling filter (1.0 = no extra blur)
    DEFAULT_RESIZE_BLUR = 1.0

    # Formats that cannot carry an alpha channel
    OPAQUE_FORMATS = ("jpeg", "bmp", "ppm")

    # Alternate spellings normalized by set_format
    FORMAT_ALIASES = {"jpg": "jpeg", "tif": "tiff"}

    # Encodable formats, mapped to the encoder extension
    FORMAT_EXTENSIONS = {
        "jpeg": ".jpg",
        "png": ".png",
        "bmp": ".bmp",
        "webp": ".webp",
        "tiff": ".tiff",
        "ppm": ".ppm",
    }

    # Encodable through Pillow only, mapped to the Pillow format name
    PILLOW_FORMATS = {"gif": "GIF"}


# Encoding Constants
class EncodingConstants:
    """Default encoder parameters."""

    DEFAULT_JPEG_QUALITY = 90
    DEFAULT_PNG_COMPRESSION = 3
    DEFAULT_WEBP_QUALITY = 90


# Drawing Constants
class DrawingConstants:
    """Constants for text drawing operations."""

    DEFAULT_FONT = "simplex"
    DEFAULT_FONT_SIZE = 1.0
    DEFAULT_FONT_COLOR = "black"
    DEFAULT_STROKE_WIDTH = 1


# System Constants
class SystemConstants:
    """Constants for system operations."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ENV_PREFIX = "IMAGECANVAS_"


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    FILE_NOT_FOUND = "File not found: {path}"
    EMPTY_RESIZE = "You are trying to resize an empty image."
    EMPTY_OUTPUT = "You are trying to output an empty image."
    EMPTY_PLACEMENT = "You are trying to place content on an empty image."
    EMPTY_ANNOTATE = "You are trying to draw on an empty image."
    EMPTY_FORMAT = "You are trying to set the format of an empty image."
    DECODE_FAILED = "Failed to decode image: {path}"
    ENCODE_FAILED = "Failed to encode image as {format}"
    NO_FORMAT = "No output format set. Call set_format() before exporting a new image."
    UNSUPPORTED_FORMAT = "Unsupported output format: {format}"
    INVALID_SIZE = "Invalid canvas size: {width}x{height}"
    INVALID_COLOR = "Invalid color: {color}"
