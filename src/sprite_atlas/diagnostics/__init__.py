"""Diagnostics and profiling helpers."""

from sprite_atlas.diagnostics.tracker import DiagnosticsTracker, Timer, TrialRecord

__all__ = ["DiagnosticsTracker", "Timer", "TrialRecord"]
