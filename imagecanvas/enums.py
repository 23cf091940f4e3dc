"""
Enumerations shared across imagecanvas.
"""

from enum import Enum
from typing import Optional


class ImageState(str, Enum):
    """Lifecycle state of an Image wrapper."""

    BLANK = "blank"
    LOADED = "loaded"


class Placement(str, Enum):
    """
    Anchor positions for placing a smaller rectangle inside a larger one.

    Values are "<vertical>-<horizontal>". Lookup is case-insensitive and
    accepts "_" or spaces as separators, so Placement("BOTTOM_RIGHT") and
    Placement("bottom right") both resolve to Placement.BOTTOM_RIGHT.
    """

    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    MID_LEFT = "mid-left"
    MID_CENTER = "mid-center"
    MID_RIGHT = "mid-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Placement"]:
        if not isinstance(value, str):
            return None
        normalized = "-".join(value.strip().lower().replace("_", " ").replace("-", " ").split())
        for member in cls:
            if member.value == normalized:
                return member
        return None

    @property
    def vertical(self) -> str:
        """Vertical part of the anchor: top, mid or bottom."""
        return self.value.split("-")[0]

    @property
    def horizontal(self) -> str:
        """Horizontal part of the anchor: left, center or right."""
        return self.value.split("-")[1]


class ResampleFilter(str, Enum):
    """Resampling filters understood by the engine's resize."""

    NEAREST = "nearest"
    LINEAR = "linear"
    CUBIC = "cubic"
    AREA = "area"
    LANCZOS = "lanczos"


class HersheyFont(str, Enum):
    """Vector fonts available to the OpenCV text renderer."""

    SIMPLEX = "simplex"
    PLAIN = "plain"
    DUPLEX = "duplex"
    COMPLEX = "complex"
    TRIPLEX = "triplex"
    COMPLEX_SMALL = "complex_small"
    SCRIPT_SIMPLEX = "script_simplex"
    SCRIPT_COMPLEX = "script_complex"
