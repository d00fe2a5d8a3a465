"""Alpha-based edge-shrink trimming."""

from __future__ import annotations

from typing import Tuple

import numpy as np


def image_max_alpha(rgba: np.ndarray) -> int:
    """Return the maximum alpha value over every pixel of an RGBA buffer."""

    if rgba.size == 0:
        return 0
    return int(rgba[..., 3].max())


def _validate_rgba(rgba: np.ndarray) -> None:
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f"Expected an HxWx4 RGBA buffer, got shape {rgba.shape}.")
    if rgba.shape[0] < 1 or rgba.shape[1] < 1:
        raise ValueError("Cannot trim an empty buffer.")


def trim_bounds(rgba: np.ndarray) -> Tuple[int, int, int, int]:
    """Compute the trimmed rectangle (x0, y0, x1, y1) of an RGBA buffer.

    Each edge is shrunk inward one pixel at a time while its 1px strip is
    fully transparent, in the fixed order right, left, bottom, top. An edge
    stops once one pixel of span remains, so a fully transparent buffer
    yields a 1x1 rectangle.

    The fixed order reproduces the reference packer output exactly. It is
    not a joint tight bounding-box scan and may keep transparent margins for
    some concave alpha shapes.
    """

    _validate_rgba(rgba)
    height, width = rgba.shape[:2]
    x0, y0, x1, y1 = 0, 0, width, height

    while x1 - x0 > 1 and image_max_alpha(rgba[y0:y1, x1 - 1:x1]) == 0:
        x1 -= 1
    while x1 - x0 > 1 and image_max_alpha(rgba[y0:y1, x0:x0 + 1]) == 0:
        x0 += 1

    while y1 - y0 > 1 and image_max_alpha(rgba[y1 - 1:y1, x0:x1]) == 0:
        y1 -= 1
    while y1 - y0 > 1 and image_max_alpha(rgba[y0:y0 + 1, x0:x1]) == 0:
        y0 += 1

    return (x0, y0, x1, y1)


def trim_image(rgba: np.ndarray) -> np.ndarray:
    """Return a view of the buffer cropped to its trimmed rectangle."""

    x0, y0, x1, y1 = trim_bounds(rgba)
    return rgba[y0:y1, x0:x1]
