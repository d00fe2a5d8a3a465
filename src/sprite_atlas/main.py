"""Command-line entry point for building a texture atlas."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from sprite_atlas.config import Config, load_config
from sprite_atlas.errors import AtlasError
from sprite_atlas.pipeline import run_build


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pack sprite images into a texture atlas")
    parser.add_argument("patterns", nargs="*", help="Glob patterns of sprite images")
    parser.add_argument("--sprites-dir", type=Path, help="Directory of sprite images")
    parser.add_argument("--config", type=Path, help="Optional JSON config path")
    parser.add_argument(
        "--preset",
        type=str,
        default="balanced",
        choices=["fast", "balanced", "high_quality"],
        help="Search effort preset",
    )
    parser.add_argument("--width", type=int, help="Width of the generated atlas (default 1024)")
    parser.add_argument("--height", type=int, help="Height of the generated atlas (default 1024)")
    parser.add_argument("--out", type=Path, help="Path of the generated atlas (default atlas.png)")
    parser.add_argument("--json", type=Path, help="Save atlas meta as JSON")
    parser.add_argument("--as3", type=Path, help="Save atlas meta as ActionScript")
    parser.add_argument("--as3name", type=str, help="Package and class name of the ActionScript object")
    parser.add_argument("--strip", type=int, help="Number of leading path elements to strip")
    parser.add_argument("--drawpadding", action="store_true", help="Draw padding around images (debug)")
    parser.add_argument("--trials", type=int, help="Override the number of packing seeds to try")
    parser.add_argument("--workers", type=int, help="Number of search threads")
    parser.add_argument("--timeout", type=float, help="Stop searching after this many seconds")
    parser.add_argument("--enable-profiling", action="store_true", help="Enable per-trial timing output")
    parser.add_argument("--profile-output", type=Path, help="Write profiling data to JSON/CSV")
    parser.add_argument("--debug-output-dir", type=Path, help="Write a layout overlay image here")
    return parser.parse_args(argv)


def _apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides on top of the loaded config."""

    overrides = {
        "width": args.width,
        "height": args.height,
        "output": args.out,
        "json_output": args.json,
        "as3_output": args.as3,
        "as3_name": args.as3name,
        "strip": args.strip,
        "trial_count": args.trials,
        "workers": args.workers,
        "timeout": args.timeout,
        "profile_output": args.profile_output,
        "debug_output_dir": args.debug_output_dir,
        "sprite_dir": args.sprites_dir,
    }
    config = replace(config, **{key: value for key, value in overrides.items() if value is not None})
    if args.patterns:
        config = replace(config, sprite_patterns=[*config.sprite_patterns, *args.patterns])
    if args.drawpadding:
        config = replace(config, draw_padding=True)
    if args.enable_profiling or args.profile_output:
        config = replace(config, enable_profiling=True)
    return config


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    try:
        config = _apply_args(load_config(args.config, args.preset), args)
        result = run_build(config)
    except (AtlasError, OSError, ValueError) as exc:
        raise SystemExit(f"Error: {exc}") from exc
    print(f"Atlas written to {result['output_image']}")


if __name__ == "__main__":
    main()
