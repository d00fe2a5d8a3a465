"""Image I/O utilities."""

from sprite_atlas.io.images import (
    decode_image,
    expand_patterns,
    iter_sprite_paths,
    load_images,
    load_sprite_images,
    rgba_from_buffer,
    save_image,
)

__all__ = [
    "decode_image",
    "expand_patterns",
    "iter_sprite_paths",
    "load_images",
    "load_sprite_images",
    "rgba_from_buffer",
    "save_image",
]
