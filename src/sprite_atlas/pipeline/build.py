"""Atlas build pipeline: load, trim, search, assemble and export."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Optional

from sprite_atlas.compositor import assemble_atlas
from sprite_atlas.config.schema import Config
from sprite_atlas.diagnostics import DiagnosticsTracker, Timer
from sprite_atlas.io import load_sprite_images, save_image
from sprite_atlas.manifest import build_atlas_meta, save_actionscript, save_atlas_meta
from sprite_atlas.packing import RunControl, build_tree, pack_sprites
from sprite_atlas.sprites import prepare_sprites

StatusCallback = Callable[[Dict[str, object]], None]


def run_build(
    config: Config,
    control: Optional[RunControl] = None,
    status_callback: Optional[StatusCallback] = None,
    verbose: bool = True,
) -> Dict[str, object]:
    """Build the atlas image and manifests described by ``config``.

    Nothing is written until a layout has been found and the manifest built,
    so a failed build leaves no partial output.
    """

    config.validate()
    if config.enable_profiling and config.profile_output is None:
        config = replace(config, profile_output=config.output.parent / "profile.json")
    tracker = DiagnosticsTracker(
        enable_profiling=config.enable_profiling,
        enable_diagnostics=config.debug_output_dir is not None,
        profile_output=config.profile_output,
        debug_output_dir=config.debug_output_dir,
    )

    def _status(message: str, **extra: object) -> None:
        if status_callback:
            status_callback({"message": message, **extra})

    with Timer() as load_timer:
        collection = prepare_sprites(load_sprite_images(config), verbose=verbose)
    _status(f"Loaded {len(collection)} sprites", stage="load", sprites=len(collection))

    with Timer() as search_timer:
        layout = pack_sprites(
            collection,
            config.canvas_size,
            config.trials,
            workers=config.workers,
            timeout=config.timeout,
            control=control,
            tracker=tracker,
            status_callback=status_callback,
            verbose=verbose,
        )
    if verbose:
        print(f"Best seed {layout.seed} | Score {layout.score} | Sprites {len(collection)}")
    _status(
        f"Packed with seed {layout.seed}",
        stage="pack",
        best_seed=layout.seed,
        best_score=layout.score,
    )

    meta = build_atlas_meta(collection, config.canvas_size, config.strip)
    atlas = assemble_atlas(collection, config.canvas_size, draw_padding=config.draw_padding)

    save_image(config.output, atlas)
    outputs: Dict[str, object] = {"output_image": str(config.output)}
    if config.json_output:
        save_atlas_meta(config.json_output, meta)
        outputs["output_json"] = str(config.json_output)
    if config.as3_output:
        meta_class_path = save_actionscript(config.as3_output, meta, config.as3_name)
        outputs["output_as3"] = [str(config.as3_output), str(meta_class_path)]

    if config.debug_output_dir:
        items = [(sprite.identifier, sprite.size) for sprite in collection.packing_order()]
        tree, _ = build_tree(items, config.canvas_size, layout.seed)
        free = [rect for rect, used in tree.leaves() if not used]
        overlay = tracker.save_layout_overlay(atlas, collection.placed_rects(), free)
        outputs["debug_overlay"] = str(overlay)

    tracker.export()
    if config.enable_profiling and verbose:
        print(tracker.summary())
        print(
            f"Load {load_timer.elapsed*1000:.2f} ms | "
            f"Search {search_timer.elapsed*1000:.2f} ms"
        )
    _status("Completed", stage="done", best_seed=layout.seed, best_score=layout.score)

    return {
        "atlas": atlas,
        "layout": layout,
        "meta": meta,
        **outputs,
    }
