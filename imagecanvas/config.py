"""
Configuration for imagecanvas.

Settings are read from environment variables prefixed with IMAGECANVAS_,
with "__" separating nested sections, e.g. IMAGECANVAS_ENCODING__JPEG_QUALITY=80.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from imagecanvas.constants import (
    DrawingConstants,
    EncodingConstants,
    ImageConstants,
    SystemConstants,
)
from imagecanvas.enums import HersheyFont


class ImageSettings(BaseModel):
    """Canvas and resampling defaults."""

    default_background: str = ImageConstants.DEFAULT_BACKGROUND
    default_format: Optional[str] = Field(
        default=None, description="Format assigned to new canvases (None = must be set)"
    )
    resize_blur: float = Field(default=ImageConstants.DEFAULT_RESIZE_BLUR, gt=0.0)


class EncodingSettings(BaseModel):
    """Encoder parameters used by output()."""

    jpeg_quality: int = Field(default=EncodingConstants.DEFAULT_JPEG_QUALITY, ge=0, le=100)
    png_compression: int = Field(default=EncodingConstants.DEFAULT_PNG_COMPRESSION, ge=0, le=9)
    webp_quality: int = Field(default=EncodingConstants.DEFAULT_WEBP_QUALITY, ge=1, le=100)


class DrawingSettings(BaseModel):
    """Defaults for Drawer instances."""

    font: HersheyFont = HersheyFont(DrawingConstants.DEFAULT_FONT)
    font_size: float = Field(default=DrawingConstants.DEFAULT_FONT_SIZE, gt=0.0)
    font_color: str = DrawingConstants.DEFAULT_FONT_COLOR
    stroke_width: int = Field(default=DrawingConstants.DEFAULT_STROKE_WIDTH, ge=1)
    anti_alias: bool = True


class SystemSettings(BaseModel):
    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT


class Settings(BaseSettings):
    """Top-level settings object."""

    model_config = SettingsConfigDict(
        env_prefix=SystemConstants.ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
    )

    image: ImageSettings = Field(default_factory=ImageSettings)
    encoding: EncodingSettings = Field(default_factory=EncodingSettings)
    drawing: DrawingSettings = Field(default_factory=DrawingSettings)
    system: SystemSettings = Field(default_factory=SystemSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Export settings as a plain dict."""
        return self.model_dump(mode="json")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for applications embedding imagecanvas.

    The library itself never calls this on import.

    Args:
        level: Log level name; defaults to settings.system.log_level
    """
    level_name = (level or get_settings().system.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=SystemConstants.LOG_FORMAT,
    )
