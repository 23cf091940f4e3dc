"""
Placement arithmetic.

Computes the top-left coordinate at which a target rectangle must be drawn
so that it sits at one of nine anchors of a canvas. Centered axes use floor
division, so odd remainders bias one pixel towards the top/left.
"""

from typing import Any, Mapping, Tuple, Union

from imagecanvas.enums import Placement
from imagecanvas.schemas import Size

SizeLike = Union[Size, Mapping[str, Any], Tuple[int, int]]


def get_placement_coordinates(
    canvas_size: SizeLike,
    target_size: SizeLike,
    placement: Union[Placement, str] = Placement.TOP_LEFT,
) -> Tuple[int, int]:
    """
    Get the coordinates for placing a target inside a canvas.

    Args:
        canvas_size: Size of the canvas (width, height)
        target_size: Size of the rectangle to place
        placement: Anchor, a Placement or any name Placement accepts

    Returns:
        Tuple of (x, y) for the target's top-left corner. Negative when the
        target is larger than the canvas along that axis.

    Example:
        >>> get_placement_coordinates((800, 600), (100, 50), Placement.BOTTOM_RIGHT)
        (700, 550)
    """
    canvas = Size.coerce(canvas_size)
    target = Size.coerce(target_size)
    anchor = Placement(placement)

    free_x = canvas.width - target.width
    free_y = canvas.height - target.height

    x = 0
    y = 0

    if anchor.horizontal == "center":
        x = free_x // 2
    elif anchor.horizontal == "right":
        x = free_x

    if anchor.vertical == "mid":
        y = free_y // 2
    elif anchor.vertical == "bottom":
        y = free_y

    return x, y
