"""Multi-seed layout search over the BSP packer."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from sprite_atlas.data import INFEASIBLE_SCORE, LayoutResult, SpriteCollection
from sprite_atlas.diagnostics.tracker import DiagnosticsTracker, Timer
from sprite_atlas.errors import InfeasibleLayoutError, NonDeterministicPackingError
from sprite_atlas.packing.control import RunControl
from sprite_atlas.packing.tree import PackingTree

PackItem = Tuple[str, Tuple[int, int]]
StatusCallback = Callable[[Dict[str, object]], None]


def build_tree(
    items: Sequence[PackItem],
    canvas_size: Tuple[int, int],
    seed: int,
) -> Tuple[PackingTree, LayoutResult]:
    """Pack ``items`` in order with the given seed and return the tree too."""

    tree = PackingTree(*canvas_size)
    state = seed
    placements: Dict[str, Tuple[int, int]] = {}
    for identifier, (width, height) in items:
        # 1px gutter on the right and bottom of every sprite.
        rect, state = tree.insert((width + 1, height + 1), state)
        if rect is None:
            return tree, LayoutResult(seed=seed, score=INFEASIBLE_SCORE)
        placements[identifier] = (rect[0], rect[1])
    return tree, LayoutResult(seed=seed, score=tree.score(), placements=placements)


def pack_trial(items: Sequence[PackItem], canvas_size: Tuple[int, int], seed: int) -> LayoutResult:
    """Run a single packing trial; infeasible trials score -1."""

    _, result = build_tree(items, canvas_size, seed)
    return result


@dataclass(frozen=True)
class SearchBest:
    """Running best of a search, with an explicit found flag.

    Seed 0 and score 0 are both legitimate winners, so neither doubles as
    a "nothing found" marker.
    """

    found: bool = False
    layout: Optional[LayoutResult] = None

    def improved_by(self, candidate: LayoutResult) -> bool:
        if not candidate.feasible:
            return False
        if not self.found or self.layout is None:
            return True
        if candidate.score != self.layout.score:
            return candidate.score > self.layout.score
        return candidate.seed < self.layout.seed

    def combine(self, candidate: LayoutResult) -> "SearchBest":
        if self.improved_by(candidate):
            return SearchBest(found=True, layout=candidate)
        return self

    def merge(self, other: "SearchBest") -> "SearchBest":
        if other.found and other.layout is not None:
            return self.combine(other.layout)
        return self


@dataclass
class _SharedBest:
    """Best layout shared between worker threads."""

    verbose: bool = True
    status_callback: Optional[StatusCallback] = None
    best: SearchBest = field(default_factory=SearchBest)
    trials: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)

    def report(self, candidate: LayoutResult) -> None:
        with self.lock:
            if not self.best.improved_by(candidate):
                return
            self.best = self.best.combine(candidate)
        if self.verbose:
            print(f"{candidate.seed}: {candidate.score}")
        if self.status_callback:
            self.status_callback(
                {
                    "best_seed": candidate.seed,
                    "best_score": candidate.score,
                    "message": f"Seed {candidate.seed} | Score {candidate.score}",
                }
            )

    def count(self, trials: int) -> None:
        with self.lock:
            self.trials += trials


def _run_seeds(
    items: Sequence[PackItem],
    canvas_size: Tuple[int, int],
    seeds: Sequence[int],
    shared: _SharedBest,
    control: RunControl,
    tracker: Optional[DiagnosticsTracker],
) -> None:
    local = SearchBest()
    trials = 0
    try:
        for seed in seeds:
            control.wait_if_paused()
            if control.should_stop():
                break
            with Timer() as timer:
                result = pack_trial(items, canvas_size, seed)
            trials += 1
            if tracker is not None:
                tracker.track_trial(seed=seed, score=result.score, elapsed_s=timer.elapsed)
            if local.improved_by(result):
                local = local.combine(result)
                shared.report(result)
    finally:
        shared.count(trials)


def search_layout(
    items: Sequence[PackItem],
    canvas_size: Tuple[int, int],
    trial_count: int,
    workers: int = 1,
    timeout: Optional[float] = None,
    control: Optional[RunControl] = None,
    tracker: Optional[DiagnosticsTracker] = None,
    status_callback: Optional[StatusCallback] = None,
    verbose: bool = True,
) -> LayoutResult:
    """Try seeds ``0 .. trial_count - 1`` and return the best verified layout.

    ``items`` must already be in packing order. The best layout has the
    highest score; equal scores keep the lowest seed, so the winner is the
    same whatever the number of workers. The winning seed is packed a second
    time and must reproduce the same layout.

    The search ends early when ``timeout`` seconds pass or ``control`` is
    stopped; the best layout found by then is used.

    Raises:
        InfeasibleLayoutError: no trial placed every sprite.
        NonDeterministicPackingError: the re-run of the winner differed.
    """

    if trial_count < 1:
        raise ValueError("trial_count must be at least 1.")
    if workers < 1:
        raise ValueError("workers must be at least 1.")

    shared = _SharedBest(verbose=verbose, status_callback=status_callback)
    control = control if control is not None else RunControl()
    control.set_timeout(timeout)
    seeds = range(trial_count)

    if workers == 1:
        _run_seeds(items, canvas_size, seeds, shared, control, tracker)
    else:
        errors: List[BaseException] = []

        def _worker(worker_seeds: Sequence[int]) -> None:
            try:
                _run_seeds(items, canvas_size, worker_seeds, shared, control, tracker)
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [
            threading.Thread(target=_worker, args=(seeds[index::workers],), daemon=True)
            for index in range(workers)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        if errors:
            raise errors[0]

    best = shared.best
    if not best.found or best.layout is None:
        raise InfeasibleLayoutError(
            f"Failed to fit all {len(items)} images into {canvas_size[0]}x{canvas_size[1]} "
            f"after {shared.trials} trials."
        )

    check = pack_trial(items, canvas_size, best.layout.seed)
    if check.score != best.layout.score or check.placements != best.layout.placements:
        raise NonDeterministicPackingError(
            f"Packing was not deterministic: seed {best.layout.seed} scored "
            f"{best.layout.score}, re-run scored {check.score}."
        )
    return best.layout


def pack_sprites(
    collection: SpriteCollection,
    canvas_size: Tuple[int, int],
    trial_count: int,
    **kwargs: object,
) -> LayoutResult:
    """Search a layout for a sprite collection and commit it."""

    items = [(sprite.identifier, sprite.size) for sprite in collection.packing_order()]
    layout = search_layout(items, canvas_size, trial_count, **kwargs)  # type: ignore[arg-type]
    collection.commit(layout)
    return layout
