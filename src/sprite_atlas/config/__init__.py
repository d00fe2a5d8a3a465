"""Configuration loading and presets."""

from sprite_atlas.config.schema import (
    Config,
    PresetConfig,
    load_config,
    preset_config,
)

__all__ = [
    "Config",
    "PresetConfig",
    "load_config",
    "preset_config",
]
