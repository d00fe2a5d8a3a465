"""Image loading, raw buffer adoption and PNG saving."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from sprite_atlas.config.schema import Config
from sprite_atlas.errors import DecodeError

LoadedImage = Tuple[str, np.ndarray, Path]


def rgba_from_buffer(data: Union[bytes, bytearray, memoryview], width: int, height: int, stride: int) -> np.ndarray:
    """Wrap a raw RGBA8 buffer as an HxWx4 array without copying.

    Pixel (x, y) starts at byte ``x * 4 + y * stride``; rows may be padded,
    so ``stride`` can exceed ``width * 4``.
    """

    if width < 1 or height < 1:
        raise ValueError("Buffer width and height must be positive.")
    if stride < width * 4:
        raise ValueError(f"Stride {stride} is smaller than a row of {width} pixels.")
    required = stride * (height - 1) + width * 4
    flat = np.frombuffer(data, dtype=np.uint8)
    if flat.size < required:
        raise ValueError(f"Buffer holds {flat.size} bytes, {required} required.")
    return np.lib.stride_tricks.as_strided(
        flat,
        shape=(height, width, 4),
        strides=(stride, 4, 1),
        writeable=False,
    )


def decode_image(path: Path) -> np.ndarray:
    """Decode an image file into an HxWx4 uint8 RGBA array.

    Raises:
        OSError: the file could not be read.
        DecodeError: the file content is not a decodable image.
    """

    with Path(path).open("rb") as handle:
        try:
            with Image.open(handle) as image:
                rgba = image.convert("RGBA")
                return np.array(rgba, dtype=np.uint8)
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(path, str(exc) or exc.__class__.__name__) from exc


def save_image(path: Path, rgba: np.ndarray) -> None:
    """Save an RGBA uint8 array as PNG."""

    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("Expected an HxWx4 uint8 RGBA array.")
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(rgba)).save(path, format="PNG")


def expand_patterns(patterns: Iterable[str]) -> Iterator[str]:
    """Yield the files matched by each glob pattern, sorted per pattern."""

    for pattern in patterns:
        for match in sorted(glob.glob(pattern)):
            if Path(match).is_file():
                yield match


def iter_sprite_paths(config: Config) -> Iterator[str]:
    """Yield sprite paths from config in a deterministic order."""

    yield from expand_patterns(config.sprite_patterns)
    if config.sprite_dir:
        if not config.sprite_dir.is_dir():
            raise ValueError(f"Sprites directory '{config.sprite_dir}' does not exist.")
        for path in sorted(config.sprite_dir.iterdir()):
            if path.is_file() and path.suffix.lower() in config.sprite_extensions:
                yield str(path)


def load_images(paths: Sequence[str]) -> List[LoadedImage]:
    """Decode every path; the path string becomes the identifier."""

    return [(path, decode_image(Path(path)), Path(path)) for path in paths]


def load_sprite_images(config: Config) -> List[LoadedImage]:
    """Load sprite images from configured sources."""

    paths = list(iter_sprite_paths(config))
    if not paths:
        raise ValueError("No sprite images found; pass glob patterns or a sprites directory.")
    return load_images(paths)
