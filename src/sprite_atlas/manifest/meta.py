"""Atlas manifest: per-sprite coordinates, UVs and JSON export."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

from sprite_atlas.data import Sprite


@dataclass(frozen=True)
class ImageMeta:
    """Placement of one sprite inside the atlas."""

    position: Tuple[int, int]
    size: Tuple[int, int]
    original_size: Tuple[int, int]
    offset: Tuple[int, int]

    def uv(self, atlas_size: Tuple[int, int]) -> Tuple[float, float, float, float]:
        """Normalized (u0, v0, u1, v1) of the sprite in the atlas."""

        width, height = atlas_size
        x, y = self.position
        return (
            x / width,
            y / height,
            (x + self.size[0]) / width,
            (y + self.size[1]) / height,
        )

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "position": {"x": self.position[0], "y": self.position[1]},
            "size": {"width": self.size[0], "height": self.size[1]},
            "originalSize": {"width": self.original_size[0], "height": self.original_size[1]},
            "offset": {"x": self.offset[0], "y": self.offset[1]},
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ImageMeta":
        return cls(
            position=(int(raw["position"]["x"]), int(raw["position"]["y"])),
            size=(int(raw["size"]["width"]), int(raw["size"]["height"])),
            original_size=(int(raw["originalSize"]["width"]), int(raw["originalSize"]["height"])),
            offset=(int(raw["offset"]["x"]), int(raw["offset"]["y"])),
        )


@dataclass(frozen=True)
class AtlasMeta:
    """Atlas size plus the placement of every sprite, keyed by identifier."""

    size: Tuple[int, int]
    images: Dict[str, ImageMeta] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": {"width": self.size[0], "height": self.size[1]},
            "images": {key: self.images[key].to_dict() for key in sorted(self.images)},
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "AtlasMeta":
        size = (int(raw["size"]["width"]), int(raw["size"]["height"]))
        images = {key: ImageMeta.from_dict(value) for key, value in raw.get("images", {}).items()}
        return cls(size=size, images=images)


def strip_path(path: str, strip: int) -> str:
    """Drop the first ``strip`` separator-delimited components of ``path``."""

    if strip < 0:
        raise ValueError("Strip count must not be negative.")
    if strip == 0:
        return path
    parts = [part for part in path.split(os.sep)[strip:] if part]
    if not parts:
        raise ValueError(f"Stripping {strip} path components leaves nothing of '{path}'.")
    return os.path.join(*parts)


def build_atlas_meta(sprites: Iterable[Sprite], atlas_size: Tuple[int, int], strip: int = 0) -> AtlasMeta:
    """Build the manifest from sprites whose layout has been committed."""

    images: Dict[str, ImageMeta] = {}
    for sprite in sprites:
        if sprite.position is None:
            raise ValueError(f"Sprite '{sprite.identifier}' has not been placed.")
        key = strip_path(sprite.identifier, strip)
        if key in images:
            raise ValueError(f"Identifier '{key}' is not unique after stripping {strip} components.")
        images[key] = ImageMeta(
            position=sprite.position,
            size=sprite.size,
            original_size=sprite.original_size,
            offset=sprite.trim_offset,
        )
    return AtlasMeta(size=atlas_size, images=images)


def save_atlas_meta(path: Path, meta: AtlasMeta) -> None:
    """Write the manifest as indented JSON."""

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(json.dumps(meta.to_dict(), indent=2))


def load_atlas_meta(path: Path) -> AtlasMeta:
    return AtlasMeta.from_dict(json.loads(Path(path).read_text()))
