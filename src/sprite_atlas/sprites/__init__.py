"""Sprite trimming and preparation."""

from sprite_atlas.sprites.prepare import prepare_sprite, prepare_sprites
from sprite_atlas.sprites.trim import image_max_alpha, trim_bounds, trim_image

__all__ = [
    "image_max_alpha",
    "prepare_sprite",
    "prepare_sprites",
    "trim_bounds",
    "trim_image",
]
