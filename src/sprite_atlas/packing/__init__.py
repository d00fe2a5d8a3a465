"""BSP packing, seeded layout search and run control."""

from sprite_atlas.packing.control import RunControl
from sprite_atlas.packing.prng import next_value, sequence
from sprite_atlas.packing.search import (
    SearchBest,
    build_tree,
    pack_sprites,
    pack_trial,
    search_layout,
)
from sprite_atlas.packing.tree import PackingTree

__all__ = [
    "PackingTree",
    "RunControl",
    "SearchBest",
    "build_tree",
    "next_value",
    "pack_sprites",
    "pack_trial",
    "search_layout",
    "sequence",
]
