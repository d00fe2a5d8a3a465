import json

import pytest

from sprite_atlas.main import main


def test_cli_builds_atlas(sprite_dir, tmp_path, capsys):
    out = tmp_path / "atlas.png"
    manifest = tmp_path / "atlas.json"
    main(
        [
            str(sprite_dir / "*.png"),
            "--width", "128",
            "--height", "128",
            "--out", str(out),
            "--json", str(manifest),
            "--trials", "20",
            "--strip", str(len(sprite_dir.parts) - 1),
        ]
    )
    assert out.exists()
    meta = json.loads(manifest.read_text())
    assert sorted(meta["images"]) == ["sprites/big.png", "sprites/medium.png", "sprites/small.png"]
    captured = capsys.readouterr().out
    assert "70x70 -> 64x64" in captured
    assert "Atlas written to" in captured


def test_cli_reports_infeasible_layout(sprite_dir, tmp_path):
    with pytest.raises(SystemExit) as info:
        main([str(sprite_dir / "*.png"), "--width", "40", "--height", "40", "--trials", "5", "--out", str(tmp_path / "a.png")])
    assert str(info.value.code).startswith("Error: Failed to fit all")
    assert not (tmp_path / "a.png").exists()


def test_cli_rejects_invalid_size(sprite_dir):
    with pytest.raises(SystemExit) as info:
        main([str(sprite_dir / "*.png"), "--width", "1"])
    assert info.value.code == "Error: Invalid width or height"


def test_cli_requires_sprites(tmp_path):
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / "*.png"), "--out", str(tmp_path / "a.png")])
    assert "No sprite images found" in str(info.value.code)
