"""Profiling and diagnostics tracking for the layout search."""

from __future__ import annotations

import csv
import json
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

Rect = Tuple[int, int, int, int]


@dataclass
class TrialRecord:
    """Timing and outcome of a single packing trial."""

    seed: int
    feasible: bool
    score: int
    elapsed_ms: float


@dataclass
class DiagnosticsTracker:
    """Collects per-trial timings and writes debug outputs."""

    enable_profiling: bool = False
    enable_diagnostics: bool = False
    profile_output: Optional[Path] = None
    debug_output_dir: Optional[Path] = None
    records: List[TrialRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def track_trial(self, seed: int, score: int, elapsed_s: float) -> None:
        if not (self.enable_profiling or self.enable_diagnostics):
            return
        record = TrialRecord(seed=seed, feasible=score >= 0, score=score, elapsed_ms=elapsed_s * 1000.0)
        with self._lock:
            self.records.append(record)

    def summary(self) -> str:
        """One-line summary of the recorded trials."""

        if not self.records:
            return "No trials recorded"
        feasible = sum(1 for record in self.records if record.feasible)
        total_ms = sum(record.elapsed_ms for record in self.records)
        return (
            f"Trials {len(self.records)} | Feasible {feasible} | "
            f"Total {total_ms:.2f} ms | Mean {total_ms / len(self.records):.3f} ms"
        )

    def export(self) -> None:
        """Export trial records to JSON and a sibling CSV if configured."""

        if not self.records or not self.profile_output:
            return

        records = sorted(self.records, key=lambda record: record.seed)
        self.profile_output.parent.mkdir(parents=True, exist_ok=True)
        payload = [record.__dict__ for record in records]
        self.profile_output.write_text(json.dumps(payload, indent=2))

        csv_path = self.profile_output.with_suffix(".csv")
        with csv_path.open("w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(records[0].__dict__.keys()))
            writer.writeheader()
            for record in records:
                writer.writerow(record.__dict__)

    def save_layout_overlay(
        self,
        atlas: np.ndarray,
        placed: Iterable[Rect],
        free: Iterable[Rect],
        name: str = "layout.png",
    ) -> Optional[Path]:
        """Save the atlas with placed sprites outlined red and free leaves blue."""

        if not self.debug_output_dir:
            return None
        self.debug_output_dir.mkdir(parents=True, exist_ok=True)
        image = Image.fromarray(np.ascontiguousarray(atlas))
        draw = ImageDraw.Draw(image)
        for x0, y0, x1, y1 in free:
            if x1 - x0 > 1 and y1 - y0 > 1:
                draw.rectangle((x0, y0, x1 - 1, y1 - 1), outline=(0, 0, 255, 255), width=1)
        for x0, y0, x1, y1 in placed:
            draw.rectangle((x0, y0, x1 - 1, y1 - 1), outline=(255, 0, 0, 255), width=1)
        path = self.debug_output_dir / name
        image.save(path)
        return path


class Timer:
    """Simple context timer for profiling blocks."""

    def __init__(self) -> None:
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> "Timer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.elapsed = time.perf_counter() - self.start
