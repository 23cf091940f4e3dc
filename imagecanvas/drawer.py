"""
Text style configuration used by annotate and font-metrics calls.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

from imagecanvas.config import get_settings
from imagecanvas.enums import HersheyFont


def _drawing_default(name: str):
    return lambda: getattr(get_settings().drawing, name)


class Drawer(BaseModel):
    """
    Font, color and stroke settings for rendering text.

    Unset fields fall back to the drawing section of the settings.

    Example:
        >>> drawer = Drawer(font_size=1.5, font_color="#ff0000", stroke_width=2)
        >>> image.place_text("Hello", Placement.BOTTOM_RIGHT, drawer)
    """

    model_config = {"extra": "forbid", "validate_assignment": True}

    font: HersheyFont = Field(
        default_factory=_drawing_default("font"), description="Hershey font face"
    )
    font_size: float = Field(
        default_factory=_drawing_default("font_size"), gt=0.0, description="Font scale factor"
    )
    font_color: str = Field(
        default_factory=_drawing_default("font_color"),
        description="Text color, any CSS color understood by Pillow",
    )
    stroke_width: int = Field(
        default_factory=_drawing_default("stroke_width"), ge=1, description="Stroke thickness"
    )
    anti_alias: bool = Field(default_factory=_drawing_default("anti_alias"))

    def set_font(self, font: HersheyFont) -> "Drawer":
        self.font = font
        return self

    def set_font_size(self, size: float) -> "Drawer":
        self.font_size = size
        return self

    def set_font_color(self, color: str) -> "Drawer":
        self.font_color = color
        return self

    def set_stroke_width(self, width: int) -> "Drawer":
        self.stroke_width = width
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Export style as a dict with enums converted to strings."""
        return self.model_dump(mode="json")
