"""Atlas compositing."""

from sprite_atlas.compositor.assemble import assemble_atlas

__all__ = ["assemble_atlas"]
