import json
from dataclasses import replace

import numpy as np
import pytest
from PIL import Image

from sprite_atlas.config import load_config
from sprite_atlas.errors import InfeasibleLayoutError
from sprite_atlas.pipeline import run_build


def _config(sprite_dir, out_dir, **overrides):
    config = replace(
        load_config(None, "fast"),
        sprite_patterns=[str(sprite_dir / "*.png")],
        width=128,
        height=128,
        output=out_dir / "atlas.png",
        json_output=out_dir / "atlas.json",
    )
    return replace(config, **overrides)


def test_build_writes_atlas_and_manifest(sprite_dir, tmp_path):
    out_dir = tmp_path / "out"
    result = run_build(_config(sprite_dir, out_dir, strip=0), verbose=False)

    atlas = np.asarray(Image.open(out_dir / "atlas.png"))
    assert atlas.shape == (128, 128, 4)
    meta = json.loads((out_dir / "atlas.json").read_text())
    assert meta["size"] == {"width": 128, "height": 128}
    assert len(meta["images"]) == 3

    big = meta["images"][str(sprite_dir / "big.png")]
    assert big["size"] == {"width": 64, "height": 64}
    assert big["originalSize"] == {"width": 70, "height": 70}
    assert big["offset"] == {"x": 3, "y": 3}
    x, y = big["position"]["x"], big["position"]["y"]
    assert (atlas[y:y + 64, x:x + 64, 3] == 255).all()

    medium = meta["images"][str(sprite_dir / "medium.png")]
    assert medium["size"] == {"width": 32, "height": 32}
    assert medium["offset"] == {"x": 0, "y": 8}
    assert result["layout"].feasible


def test_profiling_and_debug_outputs(sprite_dir, tmp_path):
    out_dir = tmp_path / "out"
    config = _config(
        sprite_dir,
        out_dir,
        trial_count=10,
        enable_profiling=True,
        debug_output_dir=tmp_path / "debug",
    )
    result = run_build(config, verbose=False)
    records = json.loads((out_dir / "profile.json").read_text())
    assert [record["seed"] for record in records] == list(range(10))
    assert (out_dir / "profile.csv").exists()
    assert (tmp_path / "debug" / "layout.png").exists()
    assert result["debug_overlay"] == str(tmp_path / "debug" / "layout.png")


def test_actionscript_output(sprite_dir, tmp_path):
    out_dir = tmp_path / "out"
    config = _config(sprite_dir, out_dir, as3_output=out_dir / "as3" / "Atlas.as", as3_name="game.Atlas")
    run_build(config, verbose=False)
    assert "package game" in (out_dir / "as3" / "Atlas.as").read_text()
    assert (out_dir / "as3" / "AtlasImageMeta.as").exists()


def test_infeasible_build_writes_nothing(sprite_dir, tmp_path):
    out_dir = tmp_path / "out"
    with pytest.raises(InfeasibleLayoutError):
        run_build(_config(sprite_dir, out_dir, width=48, height=48), verbose=False)
    assert not (out_dir / "atlas.png").exists()
    assert not (out_dir / "atlas.json").exists()


def test_invalid_size_rejected_before_loading(tmp_path):
    config = _config(tmp_path, tmp_path, width=1)
    with pytest.raises(ValueError):
        run_build(config, verbose=False)


def test_status_messages(sprite_dir, tmp_path):
    messages = []
    run_build(_config(sprite_dir, tmp_path / "out"), status_callback=messages.append, verbose=False)
    stages = [payload.get("stage") for payload in messages if "stage" in payload]
    assert stages == ["load", "pack", "done"]
