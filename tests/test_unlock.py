"""Tests for sempoa.core.unlock – completion and unlock decisions."""

from __future__ import annotations

import random

import pytest

from sempoa.core.levels import LevelRepository
from sempoa.core.policy import MasteryPolicy
from sempoa.core.progress import LevelStats, ProgressStore
from sempoa.core.unlock import (
    UnlockEngine,
    compute_completed,
    compute_status,
    compute_unlocked,
    meets_mastery,
)

ENTRY = "addition-none-single"
SECOND = "addition-none-double"
POLICY = MasteryPolicy()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def levels() -> LevelRepository:
    return LevelRepository()


@pytest.fixture()
def store(levels: LevelRepository) -> ProgressStore:
    return ProgressStore(levels)


def _master(store: ProgressStore, *keys: str) -> None:
    for key in keys:
        store.restore_level(key, 10, 10)


def _random_store(levels: LevelRepository, seed: int) -> ProgressStore:
    """Store where roughly half the levels meet the mastery threshold."""
    rng = random.Random(seed)
    store = ProgressStore(levels)
    for key in levels.keys():
        attempts = rng.choice([0, 5, 10, 12, 20])
        correct = rng.randint(int(attempts * 0.6), attempts)
        store.restore_level(key, attempts, correct)
    return store


# ---------------------------------------------------------------------------
# meets_mastery
# ---------------------------------------------------------------------------

class TestMeetsMastery:
    def test_no_attempts(self):
        assert not meets_mastery(LevelStats(), POLICY)

    def test_ten_of_ten(self):
        assert meets_mastery(LevelStats(10, 10), POLICY)

    def test_exactly_at_ratio(self):
        assert meets_mastery(LevelStats(10, 8), POLICY)

    def test_below_ratio(self):
        assert not meets_mastery(LevelStats(10, 7), POLICY)

    def test_below_min_attempts(self):
        assert not meets_mastery(LevelStats(9, 9), POLICY)

    def test_custom_policy(self):
        policy = MasteryPolicy(min_attempts=5, mastery_ratio=0.7)
        assert meets_mastery(LevelStats(10, 7), policy)
        assert meets_mastery(LevelStats(5, 4), policy)
        assert not meets_mastery(LevelStats(4, 4), policy)


# ---------------------------------------------------------------------------
# compute_unlocked
# ---------------------------------------------------------------------------

class TestComputeUnlocked:
    def test_fresh_progress_unlocks_only_entry_points(self, levels: LevelRepository, store: ProgressStore):
        unlocked = compute_unlocked(levels, store.snapshot(), POLICY)
        assert {key for key, value in unlocked.items() if value} == {lv.key for lv in levels.entry_points()}

    def test_covers_every_level(self, levels: LevelRepository, store: ProgressStore):
        assert set(compute_unlocked(levels, store.snapshot(), POLICY)) == set(levels.keys())

    def test_completing_entry_unlocks_next(self, levels: LevelRepository, store: ProgressStore):
        _master(store, ENTRY)
        unlocked = compute_unlocked(levels, store.snapshot(), POLICY)
        assert unlocked[SECOND] is True
        assert unlocked["addition-none-triple"] is False

    def test_operations_are_independent(self, levels: LevelRepository, store: ProgressStore):
        _master(store, ENTRY)
        unlocked = compute_unlocked(levels, store.snapshot(), POLICY)
        assert unlocked["subtraction-none-double"] is False

    def test_complement_boundary(self, levels: LevelRepository, store: ProgressStore):
        _master(store, *[f"addition-none-{d}" for d in ("single", "double", "triple", "four", "five")])
        unlocked = compute_unlocked(levels, store.snapshot(), POLICY)
        assert unlocked["addition-smallFriend-single"] is True
        assert unlocked["addition-smallFriend-double"] is False

    def test_mastery_on_locked_level_does_not_count(self, levels: LevelRepository, store: ProgressStore):
        _master(store, SECOND)
        unlocked, completed = compute_status(levels, store.snapshot(), POLICY)
        assert unlocked[SECOND] is False
        assert completed[SECOND] is False
        assert unlocked["addition-none-triple"] is False

    def test_entry_points_unlocked_regardless_of_stats(self, levels: LevelRepository, store: ProgressStore):
        store.restore_level(ENTRY, 50, 0)
        unlocked = compute_unlocked(levels, store.snapshot(), POLICY)
        assert all(unlocked[lv.key] for lv in levels.entry_points())

    def test_maps_are_read_only(self, levels: LevelRepository, store: ProgressStore):
        unlocked = compute_unlocked(levels, store.snapshot(), POLICY)
        with pytest.raises(TypeError):
            unlocked[SECOND] = True  # type: ignore[index]

    def test_idempotent(self, levels: LevelRepository):
        snapshot = _random_store(levels, 7).snapshot()
        first = compute_unlocked(levels, snapshot, POLICY)
        second = compute_unlocked(levels, snapshot, POLICY)
        assert dict(first) == dict(second)

    @pytest.mark.parametrize("seed", range(5))
    def test_unlocked_equals_prerequisite_completed(self, levels: LevelRepository, seed: int):
        snapshot = _random_store(levels, seed).snapshot()
        unlocked, completed = compute_status(levels, snapshot, POLICY)
        for level in levels.all():
            prereq = levels.prerequisite_of(level)
            if prereq is None:
                assert unlocked[level.key]
            else:
                assert unlocked[level.key] == completed[prereq.key]

    @pytest.mark.parametrize("seed", range(5))
    def test_completed_implies_unlocked(self, levels: LevelRepository, seed: int):
        snapshot = _random_store(levels, seed).snapshot()
        unlocked, completed = compute_status(levels, snapshot, POLICY)
        for key in levels.keys():
            if completed[key]:
                assert unlocked[key]

    def test_compute_completed(self, levels: LevelRepository, store: ProgressStore):
        _master(store, ENTRY)
        completed = compute_completed(levels, store.snapshot(), POLICY)
        assert [key for key, value in completed.items() if value] == [ENTRY]


# ---------------------------------------------------------------------------
# Completion over a stream of answers
# ---------------------------------------------------------------------------

class TestCompletionMonotonic:
    def test_crossing_threshold_flips_once(self, levels: LevelRepository, store: ProgressStore):
        history = []
        for _ in range(15):
            store.record_answer(ENTRY, True)
            history.append(compute_completed(levels, store.snapshot(), POLICY)[ENTRY])
        assert history == [False] * 9 + [True] * 6

    def test_stays_completed_above_ratio(self, levels: LevelRepository, store: ProgressStore):
        for _ in range(10):
            store.record_answer(ENTRY, True)
        store.record_answer(ENTRY, False)
        store.record_answer(ENTRY, False)
        assert compute_completed(levels, store.snapshot(), POLICY)[ENTRY] is True

    def test_drops_below_ratio_after_mastery(self, levels: LevelRepository, store: ProgressStore):
        for _ in range(10):
            store.record_answer(ENTRY, True)
        for _ in range(3):
            store.record_answer(ENTRY, False)
        unlocked, completed = compute_status(levels, store.snapshot(), POLICY)
        assert completed[ENTRY] is False
        assert unlocked[SECOND] is False


# ---------------------------------------------------------------------------
# Policy switches
# ---------------------------------------------------------------------------

class TestPolicySwitches:
    def test_unlock_all(self, levels: LevelRepository, store: ProgressStore):
        unlocked = compute_unlocked(levels, store.snapshot(), MasteryPolicy(unlock_all=True))
        assert all(unlocked.values())

    def test_unlock_all_still_needs_mastery_to_complete(self, levels: LevelRepository, store: ProgressStore):
        completed = compute_completed(levels, store.snapshot(), MasteryPolicy(unlock_all=True))
        assert not any(completed.values())

    def test_mixed_gate_locks_mixed_entry(self):
        levels = LevelRepository(gate_mixed_operation=True)
        store = ProgressStore(levels)
        policy = MasteryPolicy(gate_mixed_operation=True)
        unlocked = compute_unlocked(levels, store.snapshot(), policy)
        assert unlocked["mixed-none-single"] is False
        assert unlocked[ENTRY] is True
        assert unlocked["subtraction-none-single"] is True

    def test_mixed_gate_opens_after_both_chains(self):
        levels = LevelRepository(gate_mixed_operation=True)
        store = ProgressStore(levels)
        policy = MasteryPolicy(gate_mixed_operation=True)
        addition = [lv.key for lv in levels.all() if lv.operation.value == "addition"]
        subtraction = [lv.key for lv in levels.all() if lv.operation.value == "subtraction"]

        _master(store, *addition)
        assert compute_unlocked(levels, store.snapshot(), policy)["mixed-none-single"] is False

        _master(store, *subtraction)
        unlocked = compute_unlocked(levels, store.snapshot(), policy)
        assert unlocked["mixed-none-single"] is True
        assert unlocked["mixed-none-double"] is False


# ---------------------------------------------------------------------------
# UnlockEngine cache
# ---------------------------------------------------------------------------

class TestUnlockEngine:
    def test_same_revision_reuses_result(self, levels: LevelRepository, store: ProgressStore):
        engine = UnlockEngine(levels, POLICY)
        first = engine.unlocked(store.snapshot())
        second = engine.unlocked(store.snapshot())
        assert first is second

    def test_new_revision_recomputes(self, levels: LevelRepository, store: ProgressStore):
        engine = UnlockEngine(levels, POLICY)
        before = engine.unlocked(store.snapshot())
        _master(store, ENTRY)
        after = engine.unlocked(store.snapshot())
        assert before[SECOND] is False
        assert after[SECOND] is True

    def test_matches_pure_function(self, levels: LevelRepository):
        store = _random_store(levels, 3)
        engine = UnlockEngine(levels, POLICY)
        snapshot = store.snapshot()
        assert dict(engine.unlocked(snapshot)) == dict(compute_unlocked(levels, snapshot, POLICY))
        assert dict(engine.completed(snapshot)) == dict(compute_completed(levels, snapshot, POLICY))

    def test_policy(self, levels: LevelRepository):
        assert UnlockEngine(levels, POLICY).policy is POLICY
