"""Service for tracking per-day progress, day unlocking and unlocked content."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
import logging

from fastfood_trainer.constants.path_constants import DAY_ID_TEMPLATE
from fastfood_trainer.constants.scoring_constants import PASSING_SCORE, TOTAL_DAY_COUNT
from fastfood_trainer.core.models import DayProgress, Grade
from fastfood_trainer.core.progress_store import ProgressSnapshot, ProgressStore

logger = logging.getLogger(__name__)


def day_id_for(day_number: int) -> str:
    return DAY_ID_TEMPLATE.format(number=day_number)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProgressTracker:
    """Owns DayProgress records and the unlocked-content set.

    State is loaded from the store once. Each mutation first updates memory,
    then hands the full snapshot to the store, so a read right after a write
    always sees the write.
    """

    def __init__(self, store: ProgressStore, now: Callable[[], datetime] = _utc_now) -> None:
        self._store = store
        self._now = now
        snapshot = store.load()
        self._records: dict[str, DayProgress] = dict(snapshot.day_progress)
        self._unlocked: set[str] = set(snapshot.unlocked_content)

    def record_result(self, day_id: str, score: int, grade: Grade) -> DayProgress:
        """Record one attempt and return a copy of the updated record."""
        record = self._records.get(day_id)
        played_at = self._now()
        if record is None:
            record = DayProgress(
                day_id=day_id,
                is_completed=score >= PASSING_SCORE,
                best_score=score,
                best_grade=grade,
                attempt_count=1,
                last_played_at=played_at,
            )
            self._records[day_id] = record
        else:
            if score > record.best_score:
                record.best_score = score
                record.best_grade = grade
            # Completion follows the latest attempt, not the best one.
            record.is_completed = score >= PASSING_SCORE
            record.attempt_count += 1
            record.last_played_at = played_at

        logger.info(
            "Recorded %s: score=%d grade=%s best=%d attempts=%d completed=%s",
            day_id,
            score,
            grade.value,
            record.best_score,
            record.attempt_count,
            record.is_completed,
        )
        self._persist()
        return replace(record)

    def unlock(self, content_id: str) -> bool:
        """Add a content id. Returns False when it was already unlocked."""
        if content_id in self._unlocked:
            return False
        self._unlocked.add(content_id)
        logger.info("Unlocked content %s", content_id)
        self._persist()
        return True

    def is_unlocked(self, content_id: str) -> bool:
        return content_id in self._unlocked

    @property
    def unlocked_content(self) -> frozenset[str]:
        return frozenset(self._unlocked)

    def is_day_unlocked(self, day_number: int) -> bool:
        if day_number <= 1:
            return True
        previous = self._records.get(day_id_for(day_number - 1))
        return previous is not None and previous.is_completed

    def get_progress(self, day_id: str) -> DayProgress | None:
        record = self._records.get(day_id)
        return replace(record) if record is not None else None

    def all_progress(self) -> dict[str, DayProgress]:
        return {day_id: replace(record) for day_id, record in self._records.items()}

    def completed_day_count(self) -> int:
        return sum(1 for record in self._records.values() if record.is_completed)

    def overall_progress(self) -> float:
        return self.completed_day_count() / TOTAL_DAY_COUNT

    def reset(self) -> None:
        """Drop every record and unlocked id in one step.

        The store is cleared first; if that raises, nothing in memory changes.
        """
        self._store.clear()
        self._records = {}
        self._unlocked = set()
        logger.info("Progress reset")

    def _persist(self) -> None:
        snapshot = ProgressSnapshot(day_progress=self.all_progress(), unlocked_content=set(self._unlocked))
        try:
            self._store.save(snapshot)
        except OSError:
            logger.exception("Failed to persist progress")
