"""Business logic shared by the API server and the tick scheduler."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from threading import Lock
import time

from fastfood_trainer.core.models import DayProgress, GameResult, Mistake, Scenario, SessionSnapshot, Tip
from fastfood_trainer.core.services.game_session import GameSession, InvalidSessionStateError
from fastfood_trainer.core.services.progress_tracker import ProgressTracker
from fastfood_trainer.core.services.scenario_repository import ScenarioRepository

logger = logging.getLogger(__name__)


class DayLockedError(RuntimeError):
    """Raised when a day is started before the previous one is completed."""


@dataclass(frozen=True, slots=True)
class DaySummary:
    """Hub entry for one loaded day."""

    day_number: int
    scenario_id: str
    title: str
    is_unlocked: bool
    progress: DayProgress | None


class TrainerManager:
    """Facade for trainer services: Repository, ProgressTracker and the active GameSession.

    Every public method takes the lock, so scheduler ticks and API calls are
    strictly serialized.
    """

    def __init__(
        self,
        progress_tracker: ProgressTracker,
        repository: ScenarioRepository | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = Lock()
        self._repository = repository or ScenarioRepository()
        self._progress = progress_tracker
        self._clock = clock
        self._session: GameSession | None = None
        self._last_result: GameResult | None = None

    # --- Scenario Repository Delegation ---

    def load_scenarios(self, scenarios: list[Scenario], tips: list[Tip] | None = None) -> None:
        with self._lock:
            self._repository.load_scenarios(scenarios)
            if tips is not None:
                self._repository.load_tips(tips)
            logger.info("Loaded %d scenario(s)", len(scenarios))

    def list_days(self) -> list[DaySummary]:
        with self._lock:
            return [
                DaySummary(
                    day_number=scenario.day_number,
                    scenario_id=scenario.id,
                    title=scenario.title,
                    is_unlocked=self._progress.is_day_unlocked(scenario.day_number),
                    progress=self._progress.get_progress(scenario.id),
                )
                for scenario in self._repository.get_scenarios()
            ]

    # --- Game Session Delegation ---

    def start_day(self, day_number: int) -> SessionSnapshot:
        with self._lock:
            scenario = self._repository.get_by_day_number(day_number)
            if not self._progress.is_day_unlocked(day_number):
                raise DayLockedError(f"Day {day_number} is locked until day {day_number - 1} is completed.")
            if self._session is not None and not self._session.is_finished():
                raise InvalidSessionStateError("Finish or quit the running session before starting another day.")
            self._session = GameSession(scenario, self._progress, clock=self._clock)
            self._session.start()
            return self._session.snapshot()

    def submit_order_outcome(self, is_correct: bool, satisfaction_score: float) -> SessionSnapshot:
        with self._lock:
            session = self._require_session()
            session.submit_order_outcome(is_correct, satisfaction_score)
            self._capture_result(session)
            return session.snapshot()

    def record_mistake(self, description: str, points: int | None = None) -> Mistake:
        with self._lock:
            session = self._require_session()
            if points is None:
                return session.record_mistake(description)
            return session.record_mistake(description, points)

    def record_compliance_violation(self) -> None:
        with self._lock:
            self._require_session().record_compliance_violation()

    def tick(self) -> bool:
        """Forward one scheduler tick to the running session, if any."""
        with self._lock:
            if self._session is None:
                return False
            handled = self._session.tick()
            self._capture_result(self._session)
            return handled

    def quit_session(self) -> GameResult | None:
        with self._lock:
            session = self._require_session()
            result = session.quit()
            self._capture_result(session)
            return result

    def has_active_session(self) -> bool:
        with self._lock:
            return self._session is not None and self._session.is_active()

    def get_session_snapshot(self) -> SessionSnapshot | None:
        with self._lock:
            return self._session.snapshot() if self._session is not None else None

    def get_last_result(self) -> GameResult | None:
        with self._lock:
            return self._last_result

    # --- Progress Delegation ---

    def get_progress(self) -> dict[str, DayProgress]:
        with self._lock:
            return self._progress.all_progress()

    def get_overall_progress(self) -> float:
        with self._lock:
            return self._progress.overall_progress()

    def get_unlocked_tips(self) -> list[Tip]:
        with self._lock:
            return [tip for tip in self._repository.get_tips() if self._progress.is_unlocked(tip.id)]

    def reset_progress(self) -> None:
        with self._lock:
            if self._session is not None and not self._session.is_finished():
                raise InvalidSessionStateError("Finish or quit the running session before resetting progress.")
            self._progress.reset()
            self._session = None
            self._last_result = None

    def _require_session(self) -> GameSession:
        if self._session is None:
            raise InvalidSessionStateError("No session has been started.")
        return self._session

    def _capture_result(self, session: GameSession) -> None:
        result = session.get_result()
        if result is not None:
            self._last_result = result
