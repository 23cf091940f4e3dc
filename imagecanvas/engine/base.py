"""
Engine capability interface.

The Image wrapper talks to its imaging backend only through ImageEngine, so a
concrete engine can be swapped out or faked in tests.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

import numpy as np

from imagecanvas.drawer import Drawer
from imagecanvas.enums import ResampleFilter
from imagecanvas.schemas import ImageInfo, Size

PathLike = Union[str, Path]


@dataclass
class Raster:
    """Engine handle: a pixel buffer plus its output format."""

    pixels: np.ndarray  # uint8, BGR or BGRA
    format: Optional[str] = None

    @property
    def has_alpha(self) -> bool:
        return self.pixels.ndim == 3 and self.pixels.shape[2] == 4


class ImageEngine(Protocol):
    def new_image(self, width: int, height: int, background: str) -> Raster: ...

    def read(self, path: PathLike) -> Raster: ...

    def probe(self, path: PathLike) -> ImageInfo: ...

    def resize(
        self,
        raster: Raster,
        width: int,
        height: int,
        resample: ResampleFilter = ResampleFilter.LANCZOS,
        blur: float = 1.0,
    ) -> None: ...

    def geometry(self, raster: Raster) -> Size: ...

    def composite(self, canvas: Raster, overlay: Raster, x: int, y: int) -> None: ...

    def annotate(
        self, raster: Raster, drawer: Drawer, x: int, y: int, angle: float, text: str
    ) -> None: ...

    def text_metrics(self, drawer: Drawer, text: str) -> Size: ...

    def get_format(self, raster: Raster) -> Optional[str]: ...

    def set_format(self, raster: Raster, format: str) -> None: ...

    def encode(self, raster: Raster) -> bytes: ...
