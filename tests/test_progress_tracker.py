"""Tests for day unlocking, best-score retention and content unlocking."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from fastfood_trainer.core.models import Grade
from fastfood_trainer.core.progress_store import InMemoryProgressStore
from fastfood_trainer.core.services.progress_tracker import ProgressTracker, day_id_for

from conftest import FIXED_NOW


def test_day_one_is_always_unlocked(tracker):
    assert tracker.is_day_unlocked(1)


def test_day_two_locked_until_day_one_completed(tracker):
    assert not tracker.is_day_unlocked(2)
    tracker.record_result("day1", 55, Grade.D)
    assert not tracker.is_day_unlocked(2)
    tracker.record_result("day1", 80, Grade.B)
    assert tracker.is_day_unlocked(2)
    assert not tracker.is_day_unlocked(3)


def test_first_result_creates_record(tracker):
    record = tracker.record_result("day1", 75, Grade.B)
    assert record.best_score == 75
    assert record.best_grade is Grade.B
    assert record.attempt_count == 1
    assert record.is_completed
    assert record.last_played_at == FIXED_NOW


def test_higher_retry_raises_best_score(tracker):
    tracker.record_result("day1", 70, Grade.B)
    record = tracker.record_result("day1", 85, Grade.A)
    assert record.best_score == 85
    assert record.best_grade is Grade.A
    assert record.attempt_count == 2


def test_lower_retry_keeps_best_score(tracker):
    tracker.record_result("day1", 85, Grade.A)
    record = tracker.record_result("day1", 70, Grade.B)
    assert record.best_score == 85
    assert record.best_grade is Grade.A
    assert record.attempt_count == 2


def test_failing_retry_marks_day_incomplete_again(tracker):
    tracker.record_result("day1", 90, Grade.A)
    record = tracker.record_result("day1", 40, Grade.D)
    assert record.best_score == 90
    assert not record.is_completed
    assert not tracker.is_day_unlocked(2)


def test_last_played_updates_on_every_attempt(store):
    moments = iter([FIXED_NOW, FIXED_NOW + timedelta(days=1)])
    tracker = ProgressTracker(store, now=lambda: next(moments))
    tracker.record_result("day1", 90, Grade.A)
    record = tracker.record_result("day1", 10, Grade.D)
    assert record.last_played_at == FIXED_NOW + timedelta(days=1)


def test_returned_record_is_a_copy(tracker):
    record = tracker.record_result("day1", 70, Grade.B)
    record.best_score = 0
    assert tracker.get_progress("day1").best_score == 70


def test_unlock_is_idempotent(tracker):
    assert tracker.unlock("tip_greeting")
    assert not tracker.unlock("tip_greeting")
    assert tracker.unlocked_content == frozenset({"tip_greeting"})
    assert tracker.is_unlocked("tip_greeting")


def test_overall_progress_uses_seven_days(tracker):
    assert tracker.overall_progress() == 0.0
    tracker.record_result("day1", 80, Grade.B)
    assert tracker.overall_progress() == pytest.approx(1 / 7)
    for day_number in range(2, 8):
        tracker.record_result(day_id_for(day_number), 80, Grade.B)
    assert tracker.overall_progress() == pytest.approx(1.0)


def test_reset_clears_records_and_content(tracker, store):
    tracker.record_result("day1", 80, Grade.B)
    tracker.unlock("tip_greeting")
    tracker.reset()
    assert tracker.all_progress() == {}
    assert tracker.unlocked_content == frozenset()
    assert store.load().day_progress == {}
    assert store.load().unlocked_content == set()


def test_every_mutation_is_persisted(store):
    tracker = ProgressTracker(store, now=lambda: FIXED_NOW)
    tracker.record_result("day1", 80, Grade.B)
    tracker.unlock("tip_greeting")
    assert store.save_count == 2

    reloaded = ProgressTracker(store)
    assert reloaded.get_progress("day1").best_score == 80
    assert reloaded.is_unlocked("tip_greeting")
    assert reloaded.is_day_unlocked(2)


class _FailingStore(InMemoryProgressStore):
    def save(self, snapshot) -> None:
        raise OSError("disk full")


def test_persistence_failure_keeps_in_memory_state():
    tracker = ProgressTracker(_FailingStore(), now=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))
    tracker.record_result("day1", 80, Grade.B)
    assert tracker.get_progress("day1").best_score == 80


class _FailingClearStore(InMemoryProgressStore):
    def clear(self) -> None:
        raise OSError("read-only file system")


def test_failed_reset_leaves_progress_untouched():
    store = _FailingClearStore()
    tracker = ProgressTracker(store, now=lambda: FIXED_NOW)
    tracker.record_result("day1", 80, Grade.B)
    tracker.unlock("tip_greeting")

    with pytest.raises(OSError):
        tracker.reset()

    assert tracker.get_progress("day1").best_score == 80
    assert tracker.is_unlocked("tip_greeting")
    reloaded = ProgressTracker(store)
    assert reloaded.get_progress("day1").best_score == 80
    assert reloaded.is_unlocked("tip_greeting")
