import random

import pytest

from sprite_atlas.data import LayoutResult, SpriteCollection
from sprite_atlas.diagnostics import DiagnosticsTracker
from sprite_atlas.errors import InfeasibleLayoutError, NonDeterministicPackingError
from sprite_atlas.packing import RunControl, SearchBest, pack_sprites, pack_trial, search_layout
from sprite_atlas.packing import search as search_module

from conftest import make_sprite


def _overlaps(a, b):
    return not (a[2] <= b[0] or b[2] <= a[0] or a[3] <= b[1] or b[3] <= a[1])


def _collection(sizes):
    return SpriteCollection([make_sprite(f"s{index}.png", w, h) for index, (w, h) in enumerate(sizes)])


def test_three_squares_fit_in_128():
    collection = _collection([(16, 16), (64, 64), (32, 32)])
    layout = pack_sprites(collection, (128, 128), 100, verbose=False)

    assert layout.feasible
    assert layout.score >= 0
    rects = collection.placed_rects()
    assert len(rects) == 3
    for rect in rects:
        assert rect[0] >= 1 and rect[1] >= 1
        assert rect[2] <= 128 and rect[3] <= 128
    for index, first in enumerate(rects):
        for second in rects[index + 1:]:
            assert not _overlaps(first, second)


def test_packing_order_longest_first_then_identifier():
    collection = _collection([(4, 4), (10, 2), (2, 10), (20, 1)])
    order = [sprite.identifier for sprite in collection.packing_order()]
    assert order == ["s3.png", "s1.png", "s2.png", "s0.png"]


def test_same_result_for_any_input_order():
    sizes = [(30, 10), (10, 30), (20, 20), (15, 5), (5, 15), (12, 12), (8, 8), (8, 8)]
    sprites = [make_sprite(f"s{index}.png", w, h) for index, (w, h) in enumerate(sizes)]
    results = []
    for shuffle_seed in range(3):
        shuffled = sprites[:]
        random.Random(shuffle_seed).shuffle(shuffled)
        collection = SpriteCollection(shuffled)
        items = [(sprite.identifier, sprite.size) for sprite in collection.packing_order()]
        results.append(search_layout(items, (64, 64), 50, verbose=False))
    assert results[0] == results[1] == results[2]


def test_pack_trial_is_reproducible():
    items = [("a", (20, 10)), ("b", (10, 20)), ("c", (5, 5))]
    assert pack_trial(items, (40, 40), 17) == pack_trial(items, (40, 40), 17)


def test_failed_trial_scores_minus_one():
    result = pack_trial([("a", (50, 50))], (32, 32), 0)
    assert result.score == -1
    assert not result.feasible
    assert result.placements == {}


def test_over_capacity_is_infeasible():
    items = [(f"s{index}", (20, 20)) for index in range(5)]
    with pytest.raises(InfeasibleLayoutError):
        search_layout(items, (32, 32), 20, verbose=False)


def test_zero_waste_layout_with_seed_zero_is_accepted():
    # 9x9 plus gutter fills the 10x10 packing area exactly
    layout = search_layout([("a", (9, 9))], (11, 11), 10, verbose=False)
    assert layout.seed == 0
    assert layout.score == 0
    assert layout.placements == {"a": (1, 1)}


def test_ties_keep_lowest_seed():
    layout = search_layout([("a", (5, 5))], (64, 64), 25, verbose=False)
    assert layout.seed == 0


def test_best_is_highest_score():
    items = [(f"s{index}", (7 + index % 3, 5 + index % 4)) for index in range(12)]
    layout = search_layout(items, (48, 48), 60, verbose=False)
    scores = [pack_trial(items, (48, 48), seed).score for seed in range(60)]
    assert layout.score == max(scores)
    assert layout.seed == scores.index(max(scores))


def test_threaded_search_matches_sequential():
    items = [(f"s{index}", (6 + index % 5, 4 + index % 7)) for index in range(15)]
    sequential = search_layout(items, (64, 64), 80, verbose=False)
    threaded = search_layout(items, (64, 64), 80, workers=4, verbose=False)
    assert threaded == sequential


def test_non_deterministic_rerun_is_detected(monkeypatch):
    real_pack_trial = search_module.pack_trial
    calls = []

    def flaky(items, canvas_size, seed):
        result = real_pack_trial(items, canvas_size, seed)
        calls.append(seed)
        if len(calls) > 1:
            return LayoutResult(seed=seed, score=result.score + 1, placements=result.placements)
        return result

    monkeypatch.setattr(search_module, "pack_trial", flaky)
    with pytest.raises(NonDeterministicPackingError):
        search_layout([("a", (5, 5))], (32, 32), 1, verbose=False)


def test_stopped_search_without_result_is_infeasible():
    control = RunControl()
    control.stop()
    with pytest.raises(InfeasibleLayoutError):
        search_layout([("a", (5, 5))], (32, 32), 10, control=control, verbose=False)


def test_status_callback_reports_improvements():
    payloads = []
    search_layout([("a", (5, 5))], (32, 32), 5, status_callback=payloads.append, verbose=False)
    assert payloads[0]["best_seed"] == 0
    assert payloads[0]["best_score"] >= 0


def test_tracker_records_every_trial():
    tracker = DiagnosticsTracker(enable_profiling=True)
    search_layout([("a", (5, 5))], (32, 32), 12, tracker=tracker, verbose=False)
    assert sorted(record.seed for record in tracker.records) == list(range(12))
    assert all(record.feasible for record in tracker.records)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        search_layout([("a", (5, 5))], (32, 32), 0, verbose=False)
    with pytest.raises(ValueError):
        search_layout([("a", (5, 5))], (32, 32), 1, workers=0, verbose=False)


def test_search_best_merge_prefers_lower_seed_on_tie():
    low = SearchBest().combine(LayoutResult(seed=3, score=10, placements={}))
    high = SearchBest().combine(LayoutResult(seed=9, score=10, placements={}))
    assert low.merge(high).layout.seed == 3
    assert high.merge(low).layout.seed == 3
    assert SearchBest().merge(SearchBest()).found is False


def test_commit_rejects_infeasible_layout():
    collection = _collection([(4, 4)])
    with pytest.raises(ValueError):
        collection.commit(LayoutResult(seed=0, score=-1))


def test_duplicate_identifier_rejected():
    collection = _collection([(4, 4)])
    with pytest.raises(ValueError):
        collection.add(make_sprite("s0.png", 2, 2))


def test_expired_timeout_without_result_is_infeasible():
    with pytest.raises(InfeasibleLayoutError):
        search_layout([("a", (5, 5))], (32, 32), 10, timeout=0, verbose=False)
