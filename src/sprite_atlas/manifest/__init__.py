"""Atlas manifest building and export."""

from sprite_atlas.manifest.codegen import (
    clean_path,
    path_as_var_name,
    render_actionscript,
    save_actionscript,
)
from sprite_atlas.manifest.meta import (
    AtlasMeta,
    ImageMeta,
    build_atlas_meta,
    load_atlas_meta,
    save_atlas_meta,
    strip_path,
)

__all__ = [
    "AtlasMeta",
    "ImageMeta",
    "build_atlas_meta",
    "clean_path",
    "load_atlas_meta",
    "path_as_var_name",
    "render_actionscript",
    "save_actionscript",
    "save_atlas_meta",
    "strip_path",
]
