"""Exceptions raised by the atlas build."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class AtlasError(Exception):
    """Base class for fatal atlas build failures."""


class DecodeError(AtlasError):
    """A source image could not be decoded."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Failed to decode '{path}': {reason}")
        self.path = Path(path)
        self.reason = reason


class InfeasibleLayoutError(AtlasError):
    """No trial seed fit every sprite into the canvas."""


class NonDeterministicPackingError(AtlasError):
    """Re-running the winning seed produced a different layout."""
