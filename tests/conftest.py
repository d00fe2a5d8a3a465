from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import pytest
from PIL import Image

from sprite_atlas.data import Sprite


def make_rgba(
    width: int,
    height: int,
    opaque: Optional[Tuple[int, int, int, int]] = None,
    color: Tuple[int, int, int] = (200, 100, 50),
) -> np.ndarray:
    """Transparent buffer with an optional opaque rectangle (x0, y0, x1, y1)."""

    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    if opaque is not None:
        x0, y0, x1, y1 = opaque
        rgba[y0:y1, x0:x1, :3] = color
        rgba[y0:y1, x0:x1, 3] = 255
    return rgba


def make_sprite(identifier: str, width: int, height: int) -> Sprite:
    rgba = make_rgba(width, height, (0, 0, width, height))
    return Sprite(
        identifier=identifier,
        source_path=Path(identifier),
        original_size=(width, height),
        image=rgba,
    )


def write_png(path: Path, rgba: np.ndarray) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(rgba).save(path)
    return path


@pytest.fixture
def sprite_dir(tmp_path: Path) -> Path:
    """Directory with three padded sprites of 64, 32 and 16 opaque pixels."""

    root = tmp_path / "sprites"
    write_png(root / "big.png", make_rgba(70, 70, (3, 3, 67, 67)))
    write_png(root / "medium.png", make_rgba(32, 40, (0, 8, 32, 40)))
    write_png(root / "small.png", make_rgba(16, 16, (0, 0, 16, 16)))
    return root
