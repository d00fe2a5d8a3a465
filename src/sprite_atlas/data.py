"""Core data structures used throughout the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

Rect = Tuple[int, int, int, int]

INFEASIBLE_SCORE = -1


@dataclass
class Sprite:
    """Trimmed sprite and its placement in the atlas.

    ``image`` is a view into the decoded RGBA buffer, cropped to the trimmed
    rectangle. ``trim_offset`` locates that rectangle inside the original
    image and ``position`` is set once the layout has been committed.
    """

    identifier: str
    source_path: Path
    original_size: Tuple[int, int]
    image: np.ndarray
    trim_offset: Tuple[int, int] = (0, 0)
    position: Optional[Tuple[int, int]] = None

    @property
    def size(self) -> Tuple[int, int]:
        return (int(self.image.shape[1]), int(self.image.shape[0]))

    @property
    def manhattan_size(self) -> int:
        width, height = self.size
        return width + height


@dataclass(frozen=True)
class LayoutResult:
    """Outcome of one packing trial."""

    seed: int
    score: int
    placements: Dict[str, Tuple[int, int]] = field(default_factory=dict)

    @property
    def feasible(self) -> bool:
        return self.score >= 0


@dataclass
class SpriteCollection:
    """Sprites of one atlas build, keyed by unique identifier."""

    sprites: List[Sprite] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._index: Dict[str, Sprite] = {}
        sprites, self.sprites = self.sprites, []
        for sprite in sprites:
            self.add(sprite)

    def __iter__(self) -> Iterator[Sprite]:
        return iter(self.sprites)

    def __len__(self) -> int:
        return len(self.sprites)

    def __getitem__(self, identifier: str) -> Sprite:
        return self._index[identifier]

    def add(self, sprite: Sprite) -> None:
        if sprite.identifier in self._index:
            raise ValueError(f"Duplicate sprite identifier '{sprite.identifier}'.")
        self._index[sprite.identifier] = sprite
        self.sprites.append(sprite)

    def packing_order(self) -> List[Sprite]:
        """Return sprites sorted for packing: longest (w + h) first.

        Ties fall back to the identifier so the order does not depend on the
        order sprites were added in.
        """

        return sorted(self.sprites, key=lambda sprite: (-sprite.manhattan_size, sprite.identifier))

    def commit(self, layout: LayoutResult) -> None:
        """Write the positions of a feasible layout into the sprites."""

        if not layout.feasible:
            raise ValueError("Cannot commit an infeasible layout.")
        missing = [sprite.identifier for sprite in self.sprites if sprite.identifier not in layout.placements]
        if missing:
            raise ValueError(f"Layout has no placement for: {', '.join(missing)}")
        for sprite in self.sprites:
            sprite.position = layout.placements[sprite.identifier]

    def placed_rects(self) -> List[Rect]:
        """Return (x0, y0, x1, y1) of every placed sprite."""

        rects: List[Rect] = []
        for sprite in self.sprites:
            if sprite.position is None:
                continue
            x, y = sprite.position
            width, height = sprite.size
            rects.append((x, y, x + width, y + height))
        return rects
