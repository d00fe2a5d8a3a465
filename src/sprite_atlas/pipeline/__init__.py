"""Atlas build pipeline."""

from sprite_atlas.packing.control import RunControl
from sprite_atlas.pipeline.build import run_build

__all__ = ["RunControl", "run_build"]
