"""
Pixel-buffer operations.

Handles array-level manipulation tasks:
- Resizing (with aspect preservation when one side is 0)
- Alpha-aware "over" compositing with clipping
"""

import logging
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def resize_image(
    image: np.ndarray,
    width: Optional[int] = None,
    height: Optional[int] = None,
    interpolation: int = cv2.INTER_LANCZOS4,
) -> np.ndarray:
    """
    Resize image, preserving aspect ratio when only one side is given.

    Args:
        image: Input image as NumPy array
        width: Target width (if height not specified, maintains aspect)
        height: Target height (if width not specified, maintains aspect)
        interpolation: OpenCV interpolation flag

    Returns:
        Resized image as NumPy array (the input itself if both sides are 0)
    """
    h, w = image.shape[:2]

    if width and not height:
        # Scale by width, maintain aspect
        height = max(1, int(h * width / w))

    elif height and not width:
        # Scale by height, maintain aspect
        width = max(1, int(w * height / h))

    elif not width and not height:
        return image

    return cv2.resize(image, (width, height), interpolation=interpolation)


def composite_over(canvas: np.ndarray, overlay: np.ndarray, x: int, y: int) -> np.ndarray:
    """
    Composite overlay on top of canvas in place, at (x, y).

    The overlay is clipped to the canvas bounds. A BGRA overlay is blended
    with its alpha channel; a BGR overlay replaces the covered pixels.

    Args:
        canvas: Destination image (BGR or BGRA), modified in place
        overlay: Source image (BGR or BGRA)
        x: Overlay top-left x on the canvas (may be negative)
        y: Overlay top-left y on the canvas (may be negative)

    Returns:
        The canvas array
    """
    canvas_h, canvas_w = canvas.shape[:2]
    overlay_h, overlay_w = overlay.shape[:2]

    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + overlay_w, canvas_w), min(y + overlay_h, canvas_h)

    if x1 <= x0 or y1 <= y0:
        logger.warning(
            f"Overlay {overlay_w}x{overlay_h} at ({x},{y}) falls outside canvas "
            f"{canvas_w}x{canvas_h}"
        )
        return canvas

    region = overlay[y0 - y : y1 - y, x0 - x : x1 - x]
    target = canvas[y0:y1, x0:x1]
    canvas_has_alpha = canvas.shape[2] == 4

    if overlay.shape[2] != 4:
        target[:, :, :3] = region[:, :, :3]
        if canvas_has_alpha:
            target[:, :, 3] = 255
        return canvas

    src = region[:, :, :3].astype(np.float32)
    dst = target[:, :, :3].astype(np.float32)
    src_a = region[:, :, 3:4].astype(np.float32) / 255.0

    if not canvas_has_alpha:
        blended = src * src_a + dst * (1.0 - src_a)
        target[:, :, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
        return canvas

    dst_a = target[:, :, 3:4].astype(np.float32) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)
    safe_a = np.where(out_a > 0, out_a, 1.0)
    blended = (src * src_a + dst * dst_a * (1.0 - src_a)) / safe_a

    target[:, :, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
    target[:, :, 3:4] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)
    return canvas
