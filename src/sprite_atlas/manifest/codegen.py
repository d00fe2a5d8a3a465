"""ActionScript 3 constants generated from an atlas manifest."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Tuple

from jinja2 import Environment, PackageLoader, StrictUndefined

from sprite_atlas.manifest.meta import AtlasMeta

META_CLASS_NAME = "AtlasImageMeta"

_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9]")


def path_as_var_name(path: str) -> str:
    """Replace every character that is not an ASCII letter or digit with '_'."""

    return _NON_IDENTIFIER.sub("_", path)


def clean_path(path: str) -> str:
    """Use forward slashes in lookup keys."""

    return path.replace("\\", "/")


def split_class_name(name: str) -> Tuple[str, str]:
    """Split ``pkg.sub.Class`` into (``pkg.sub``, ``Class``)."""

    parts = name.split(".")
    return ".".join(parts[:-1]), parts[-1]


def _environment() -> Environment:
    env = Environment(
        loader=PackageLoader("sprite_atlas.manifest", "templates"),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["var_name"] = path_as_var_name
    env.filters["clean_path"] = clean_path
    return env


def _image_rows(meta: AtlasMeta) -> List[Dict[str, Any]]:
    rows = []
    for key in sorted(meta.images):
        image = meta.images[key]
        u0, v0, u1, v1 = image.uv(meta.size)
        rows.append({"path": key, "image": image, "uv": (u0, v0, u1, v1)})
    return rows


def render_actionscript(meta: AtlasMeta, name: str) -> Tuple[str, str]:
    """Render the atlas class and the image meta class sources."""

    package, class_name = split_class_name(name)
    env = _environment()
    atlas_source = env.get_template("atlas.as.j2").render(
        package=package,
        name=class_name,
        meta_class=META_CLASS_NAME,
        meta=meta,
        images=_image_rows(meta),
    )
    meta_source = env.get_template("atlas_image_meta.as.j2").render(
        package=package,
        meta_class=META_CLASS_NAME,
    )
    return atlas_source, meta_source


def save_actionscript(path: Path, meta: AtlasMeta, name: str) -> Path:
    """Write the atlas class to ``path`` and the meta class beside it.

    Returns the path of the meta class file.
    """

    atlas_source, meta_source = render_actionscript(meta, name)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(atlas_source)
    meta_path = path.parent / f"{META_CLASS_NAME}.as"
    meta_path.write_text(meta_source)
    return meta_path
