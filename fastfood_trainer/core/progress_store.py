"""Durable storage for day progress and unlocked content.

The tracker hands a complete ``ProgressSnapshot`` to the store on every
mutation. ``JsonProgressStore`` keeps it in a single JSON document; the
in-memory store backs tests and throwaway sessions.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
import os
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from fastfood_trainer.core.models import DayProgress, Grade


class ProgressStoreError(Exception):
    """Raised when persisted progress cannot be read back."""


@dataclass(slots=True)
class ProgressSnapshot:
    """Everything the tracker persists."""

    day_progress: dict[str, DayProgress] = field(default_factory=dict)
    unlocked_content: set[str] = field(default_factory=set)


class ProgressStore(Protocol):
    def load(self) -> ProgressSnapshot: ...

    def save(self, snapshot: ProgressSnapshot) -> None: ...

    def clear(self) -> None: ...


def _copy_snapshot(snapshot: ProgressSnapshot) -> ProgressSnapshot:
    return ProgressSnapshot(
        day_progress={day_id: replace(record) for day_id, record in snapshot.day_progress.items()},
        unlocked_content=set(snapshot.unlocked_content),
    )


class InMemoryProgressStore:
    """Keeps the last saved snapshot in memory."""

    def __init__(self, initial: ProgressSnapshot | None = None) -> None:
        self._snapshot = _copy_snapshot(initial) if initial else ProgressSnapshot()
        self.save_count: int = 0

    def load(self) -> ProgressSnapshot:
        return _copy_snapshot(self._snapshot)

    def save(self, snapshot: ProgressSnapshot) -> None:
        self._snapshot = _copy_snapshot(snapshot)
        self.save_count += 1

    def clear(self) -> None:
        self._snapshot = ProgressSnapshot()
        self.save_count += 1


class _DayProgressRecord(BaseModel):
    day_id: str
    is_completed: bool
    best_score: int
    best_grade: Grade
    attempt_count: int
    last_played_at: datetime | None = None


class _ProgressDocument(BaseModel):
    day_progress: dict[str, _DayProgressRecord] = {}
    unlocked_content: list[str] = []


class JsonProgressStore:
    """Persists progress as one JSON document, replaced atomically on save."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> ProgressSnapshot:
        if not self._file_path.exists():
            return ProgressSnapshot()
        try:
            document = _ProgressDocument.model_validate_json(self._file_path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError) as exc:
            raise ProgressStoreError(f"Progress file {self._file_path} is malformed.") from exc
        except OSError as exc:
            raise ProgressStoreError(f"Progress file {self._file_path} could not be read.") from exc
        return ProgressSnapshot(
            day_progress={
                day_id: DayProgress(
                    day_id=record.day_id,
                    is_completed=record.is_completed,
                    best_score=record.best_score,
                    best_grade=record.best_grade,
                    attempt_count=record.attempt_count,
                    last_played_at=record.last_played_at,
                )
                for day_id, record in document.day_progress.items()
            },
            unlocked_content=set(document.unlocked_content),
        )

    def save(self, snapshot: ProgressSnapshot) -> None:
        document = _ProgressDocument(
            day_progress={
                day_id: _DayProgressRecord(
                    day_id=record.day_id,
                    is_completed=record.is_completed,
                    best_score=record.best_score,
                    best_grade=record.best_grade,
                    attempt_count=record.attempt_count,
                    last_played_at=record.last_played_at,
                )
                for day_id, record in snapshot.day_progress.items()
            },
            unlocked_content=sorted(snapshot.unlocked_content),
        )
        self._write(document.model_dump_json(indent=2))

    def clear(self) -> None:
        self._write(_ProgressDocument().model_dump_json(indent=2))

    def _write(self, payload: str) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        temp_path.write_text(payload + "\n", encoding="utf-8")
        os.replace(temp_path, self._file_path)
