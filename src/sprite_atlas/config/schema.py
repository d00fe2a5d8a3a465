"""Configuration schema and loading utilities."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PresetConfig:
    """Search-effort preset."""

    name: str
    trial_count: int


@dataclass(frozen=True)
class Config:
    """Top-level configuration for an atlas build."""

    preset: PresetConfig
    sprite_patterns: List[str] = field(default_factory=list)
    sprite_dir: Optional[Path] = None
    sprite_extensions: List[str] = field(default_factory=lambda: [".png", ".jpg", ".jpeg", ".gif"])
    width: int = 1024
    height: int = 1024
    output: Path = Path("atlas.png")
    json_output: Optional[Path] = None
    as3_output: Optional[Path] = None
    as3_name: str = "Atlas"
    strip: int = 0
    draw_padding: bool = False
    trial_count: Optional[int] = None
    workers: int = 1
    timeout: Optional[float] = None
    enable_profiling: bool = False
    profile_output: Optional[Path] = None
    debug_output_dir: Optional[Path] = None

    @property
    def canvas_size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def trials(self) -> int:
        """Trial count, falling back to the preset's."""

        return self.trial_count if self.trial_count is not None else self.preset.trial_count

    def validate(self) -> None:
        """Raise ValueError for settings the build cannot run with."""

        if self.width <= 1 or self.height <= 1:
            raise ValueError("Invalid width or height")
        if self.trials < 1:
            raise ValueError("Trial count must be at least 1.")
        if self.workers < 1:
            raise ValueError("Worker count must be at least 1.")
        if self.strip < 0:
            raise ValueError("Strip count must not be negative.")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("Timeout must be positive.")
        if not self.as3_name or self.as3_name.split(".")[-1] == "":
            raise ValueError("ActionScript name must end with a class name.")


_PRESET_TRIALS: Dict[str, int] = {
    "fast": 100,
    "balanced": 1000,
    "high_quality": 25000,
}


def preset_config(name: str) -> PresetConfig:
    """Return a preset configuration by name."""

    key = name.lower()
    if key not in _PRESET_TRIALS:
        raise ValueError(f"Unknown preset '{name}'. Available: {', '.join(_PRESET_TRIALS)}")
    return PresetConfig(name=key, trial_count=_PRESET_TRIALS[key])


def _merge_dict(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge overrides into base without mutating either input."""

    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dict(merged[key], value)
        else:
            merged[key] = value
    return merged


def _optional_path(value: Any) -> Optional[Path]:
    return Path(value) if value else None


def load_config(path: Optional[Path], preset_name: str) -> Config:
    """Load configuration from JSON and apply preset defaults."""

    base: Dict[str, Any] = {
        "preset": preset_name,
        "sprite_patterns": [],
        "sprite_dir": None,
        "sprite_extensions": [".png", ".jpg", ".jpeg", ".gif"],
        "width": 1024,
        "height": 1024,
        "output": "atlas.png",
        "json_output": None,
        "as3_output": None,
        "as3_name": "Atlas",
        "strip": 0,
        "draw_padding": False,
        "trial_count": None,
        "workers": 1,
        "timeout": None,
        "enable_profiling": False,
        "profile_output": None,
        "debug_output_dir": None,
    }

    if path:
        raw = json.loads(Path(path).read_text())
        if not isinstance(raw, dict):
            raise ValueError(f"Config file '{path}' must contain a JSON object.")
        merged = _merge_dict(base, raw)
    else:
        merged = base

    trial_count = merged.get("trial_count")
    timeout = merged.get("timeout")

    return Config(
        preset=preset_config(merged["preset"]),
        sprite_patterns=[str(pattern) for pattern in merged.get("sprite_patterns", [])],
        sprite_dir=_optional_path(merged.get("sprite_dir")),
        sprite_extensions=[ext.lower() for ext in merged.get("sprite_extensions", base["sprite_extensions"])],
        width=int(merged.get("width", base["width"])),
        height=int(merged.get("height", base["height"])),
        output=Path(merged.get("output") or base["output"]),
        json_output=_optional_path(merged.get("json_output")),
        as3_output=_optional_path(merged.get("as3_output")),
        as3_name=str(merged.get("as3_name", base["as3_name"])),
        strip=int(merged.get("strip", base["strip"])),
        draw_padding=bool(merged.get("draw_padding", base["draw_padding"])),
        trial_count=int(trial_count) if trial_count is not None else None,
        workers=int(merged.get("workers", base["workers"])),
        timeout=float(timeout) if timeout is not None else None,
        enable_profiling=bool(merged.get("enable_profiling", base["enable_profiling"])),
        profile_output=_optional_path(merged.get("profile_output")),
        debug_output_dir=_optional_path(merged.get("debug_output_dir")),
    )
