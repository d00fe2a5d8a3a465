"""Texture atlas builder: sprite trimming, BSP packing and manifest export."""

__version__ = "0.1.0"
