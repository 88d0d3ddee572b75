"""Tests for the JSON-backed progress store."""

from __future__ import annotations

import json

import pytest

from fastfood_trainer.core.models import DayProgress, Grade
from fastfood_trainer.core.progress_store import JsonProgressStore, ProgressSnapshot, ProgressStoreError
from fastfood_trainer.core.services.progress_tracker import ProgressTracker

from conftest import FIXED_NOW


def test_missing_file_loads_empty(tmp_path):
    snapshot = JsonProgressStore(tmp_path / "progress.json").load()
    assert snapshot.day_progress == {}
    assert snapshot.unlocked_content == set()


def test_save_then_load(tmp_path):
    store = JsonProgressStore(tmp_path / "nested" / "progress.json")
    store.save(
        ProgressSnapshot(
            day_progress={
                "day1": DayProgress(
                    day_id="day1",
                    is_completed=True,
                    best_score=88,
                    best_grade=Grade.A,
                    attempt_count=3,
                    last_played_at=FIXED_NOW,
                )
            },
            unlocked_content={"tip_b", "tip_a"},
        )
    )

    loaded = store.load()
    record = loaded.day_progress["day1"]
    assert record.best_score == 88
    assert record.best_grade is Grade.A
    assert record.attempt_count == 3
    assert record.last_played_at == FIXED_NOW
    assert loaded.unlocked_content == {"tip_a", "tip_b"}

    document = json.loads(store.file_path.read_text(encoding="utf-8"))
    assert document["unlocked_content"] == ["tip_a", "tip_b"]
    assert not store.file_path.with_name("progress.json.tmp").exists()


def test_clear_empties_document(tmp_path):
    store = JsonProgressStore(tmp_path / "progress.json")
    tracker = ProgressTracker(store, now=lambda: FIXED_NOW)
    tracker.record_result("day1", 70, Grade.B)
    tracker.reset()
    assert store.load().day_progress == {}


def test_malformed_file_raises(tmp_path):
    path = tmp_path / "progress.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ProgressStoreError):
        JsonProgressStore(path).load()


def test_undecodable_file_raises(tmp_path):
    path = tmp_path / "progress.json"
    path.write_bytes(b"\xff\xfe\x00")
    with pytest.raises(ProgressStoreError):
        JsonProgressStore(path).load()


def test_unreadable_path_raises(tmp_path):
    path = tmp_path / "progress.json"
    path.mkdir()
    with pytest.raises(ProgressStoreError):
        JsonProgressStore(path).load()


def test_tracker_survives_restart(tmp_path):
    path = tmp_path / "progress.json"
    first = ProgressTracker(JsonProgressStore(path), now=lambda: FIXED_NOW)
    first.record_result("day1", 92, Grade.A)
    first.unlock("tip_greeting")

    second = ProgressTracker(JsonProgressStore(path))
    assert second.get_progress("day1").best_score == 92
    assert second.is_day_unlocked(2)
    assert second.is_unlocked("tip_greeting")
