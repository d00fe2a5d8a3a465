"""Atlas compositing: copy placed sprites into one RGBA canvas."""

from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from sprite_atlas.data import Sprite

PADDING_COLOR = (0, 0, 0, 255)


def _fill_rect(canvas: np.ndarray, rect: Tuple[int, int, int, int], color: Tuple[int, int, int, int]) -> None:
    """Fill a rectangle clipped to the canvas."""

    height, width = canvas.shape[:2]
    x0, y0, x1, y1 = rect
    x0, y0 = max(x0, 0), max(y0, 0)
    x1, y1 = min(x1, width), min(y1, height)
    if x0 < x1 and y0 < y1:
        canvas[y0:y1, x0:x1] = color


def assemble_atlas(
    sprites: Iterable[Sprite],
    canvas_size: Tuple[int, int],
    draw_padding: bool = False,
) -> np.ndarray:
    """Copy every placed sprite into a transparent canvas.

    Sprites are copied, not blended. With ``draw_padding`` an opaque 1px
    border is drawn around each sprite first, to make the gutters visible.
    """

    width, height = canvas_size
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    for sprite in sprites:
        if sprite.position is None:
            raise ValueError(f"Sprite '{sprite.identifier}' has not been placed.")
        x0, y0 = sprite.position
        sprite_width, sprite_height = sprite.size
        x1, y1 = x0 + sprite_width, y0 + sprite_height
        if x0 < 0 or y0 < 0 or x1 > width or y1 > height:
            raise ValueError(f"Sprite '{sprite.identifier}' is out of canvas bounds.")
        if draw_padding:
            _fill_rect(canvas, (x0 - 1, y0 - 1, x1 + 1, y1 + 1), PADDING_COLOR)
        canvas[y0:y1, x0:x1] = sprite.image
    return canvas
