"""
Pydantic models for geometry and image metadata.
"""

from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field


class Size(BaseModel):
    """Width and height of a rectangle, in pixels."""

    width: int = Field(ge=0, description="Width in pixels")
    height: int = Field(ge=0, description="Height in pixels")

    @classmethod
    def coerce(cls, value: Union["Size", Mapping[str, Any], Tuple[int, int]]) -> "Size":
        """
        Build a Size from a Size, a mapping with width/height keys, or a
        (width, height) tuple.
        """
        if isinstance(value, Size):
            return value
        if isinstance(value, Mapping):
            return cls(width=int(value["width"]), height=int(value["height"]))
        width, height = value
        return cls(width=int(width), height=int(height))


class ImageInfo(BaseModel):
    """Result of a lightweight metadata probe (no full decode)."""

    mime: Optional[str] = Field(default=None, description="MIME type, e.g. image/png")
    format: Optional[str] = Field(default=None, description="Lower-case format name")
    width: int = Field(ge=0)
    height: int = Field(ge=0)
