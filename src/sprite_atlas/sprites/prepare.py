"""Turn decoded images into trimmed sprites."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

import numpy as np

from sprite_atlas.data import Sprite, SpriteCollection
from sprite_atlas.sprites.trim import trim_bounds


def prepare_sprite(identifier: str, rgba: np.ndarray, source_path: Path) -> Sprite:
    """Trim a decoded RGBA buffer and wrap it as a sprite."""

    height, width = rgba.shape[:2]
    x0, y0, x1, y1 = trim_bounds(rgba)
    return Sprite(
        identifier=identifier,
        source_path=source_path,
        original_size=(width, height),
        image=rgba[y0:y1, x0:x1],
        trim_offset=(x0, y0),
    )


def prepare_sprites(images: Iterable[Tuple[str, np.ndarray, Path]], verbose: bool = True) -> SpriteCollection:
    """Trim every decoded image into a new sprite collection."""

    collection = SpriteCollection()
    for identifier, rgba, source_path in images:
        sprite = prepare_sprite(identifier, rgba, source_path)
        if verbose:
            print(
                f"{sprite.original_size[0]}x{sprite.original_size[1]} -> "
                f"{sprite.size[0]}x{sprite.size[1]} : {source_path}"
            )
        collection.add(sprite)
    return collection
