"""
Exception hierarchy for imagecanvas.

Failures are never caught or retried inside the library; every error aborts
the current call and surfaces to the caller.
"""


class ImageCanvasError(Exception):
    """Base class for all imagecanvas errors."""


class ImageNotFoundException(ImageCanvasError, FileNotFoundError):
    """Requested path does not exist or is not a regular file."""


class EmptyImageException(ImageCanvasError):
    """Operation needs pixel content but the image is blank."""


class ImageEngineError(ImageCanvasError):
    """The imaging engine reported a failure (decode, encode, allocation)."""
