"""State machine for one play-through of a training day.

The session walks the scenario's stages in order and each stage's orders in
order. Time pressure comes from ``tick()``, which the host scheduler calls
once per elapsed second; the session never owns a timer. Order durations are
measured with an injectable monotonic clock.

Every path that ends a session (all stages done, countdown expiry, quit)
goes through ``_finalize``, which scores the session and reports it to the
progress tracker exactly once.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import time

from fastfood_trainer.constants.scoring_constants import (
    DEFAULT_AVERAGE_ORDER_SECONDS,
    DEFAULT_MISTAKE_DEDUCTION,
    TIMEOUT_DEDUCTION,
    WRONG_ORDER_DEDUCTION,
)
from fastfood_trainer.core.models import (
    CurrentOrder,
    CurrentOrderState,
    GameResult,
    Mistake,
    NoCurrentOrder,
    Scenario,
    SessionSnapshot,
    SessionState,
    Stage,
)
from fastfood_trainer.core.services.progress_tracker import ProgressTracker
from fastfood_trainer.core.services.score_calculator import calculate_final_score

logger = logging.getLogger(__name__)


class InvalidSessionStateError(RuntimeError):
    """Raised when an operation is not allowed in the session's current state."""


class GameSession:
    """Drives stage and order progression for a single scenario."""

    def __init__(
        self,
        scenario: Scenario,
        progress_tracker: ProgressTracker,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._scenario = scenario
        self._progress_tracker = progress_tracker
        self._clock = clock

        self._state: SessionState = SessionState.IDLE
        self._stage_index: int = 0
        self._next_order_index: int = 0
        self._current_order: CurrentOrderState = NoCurrentOrder()
        self._remaining_time: int = scenario.stages[0].time_limit_seconds if scenario.stages else 0

        # Metrics accumulate across every stage of the session.
        self._mistakes: list[Mistake] = []
        self._satisfaction_scores: list[float] = []
        self._order_durations: list[float] = []
        self._compliance_violations: int = 0
        self._completed_orders: int = 0

        self._result: GameResult | None = None

    # --- Lifecycle ---

    def start(self) -> None:
        if self._state is not SessionState.IDLE:
            raise InvalidSessionStateError("Session has already been started.")
        if not self._scenario.stages:
            logger.warning("Scenario %s has no stages; nothing to start", self._scenario.id)
            return
        logger.info("Starting session for %s", self._scenario.id)
        self._begin_stage()

    def submit_order_outcome(self, is_correct: bool, satisfaction_score: float) -> None:
        """Close the current order and move on to the next one."""
        current = self._require_current_order()
        if not 0 <= satisfaction_score <= 100:
            raise ValueError("Satisfaction score must be between 0 and 100.")

        self._order_durations.append(max(0.0, self._clock() - current.started_at))
        self._satisfaction_scores.append(float(satisfaction_score))
        if not is_correct:
            self._mistakes.append(
                Mistake(
                    order_number=current.number,
                    description=f"{current.order.customer_name}: order handled incorrectly",
                    deducted_points=WRONG_ORDER_DEDUCTION,
                )
            )
        self._completed_orders += 1
        self._load_next_order()

    def record_mistake(self, description: str, points: int = DEFAULT_MISTAKE_DEDUCTION) -> Mistake:
        """Record a violation spotted outside the order submit path."""
        self._require_active()
        if not description.strip():
            raise ValueError("Mistake description must not be empty.")
        if points < 0:
            raise ValueError("Deducted points must not be negative.")
        mistake = Mistake(
            order_number=self._current_order_number(),
            description=description.strip(),
            deducted_points=points,
        )
        self._mistakes.append(mistake)
        return mistake

    def record_compliance_violation(self) -> None:
        self._require_active()
        self._compliance_violations += 1

    def tick(self) -> bool:
        """Advance the countdown by one second.

        Returns False when the tick was ignored because no stage is running.
        Reaching zero ends the whole session, not only the current stage.
        """
        if self._state is not SessionState.STAGE_ACTIVE:
            return False
        self._remaining_time = max(0, self._remaining_time - 1)
        logger.debug("Tick for %s: %ds left", self._scenario.id, self._remaining_time)
        if self._remaining_time == 0:
            self._mistakes.append(
                Mistake(
                    order_number=self._current_order_number(),
                    description="Time ran out before the order was finished",
                    deducted_points=TIMEOUT_DEDUCTION,
                )
            )
            self._finalize("timeout")
        return True

    def quit(self) -> GameResult | None:
        """End the session now with whatever has been accumulated.

        Quitting a finished session is a no-op that returns the existing result.
        """
        if self._state is not SessionState.FINISHED:
            self._finalize("quit")
        return self._result

    # --- Observables ---

    def get_state(self) -> SessionState:
        return self._state

    def is_active(self) -> bool:
        return self._state is SessionState.STAGE_ACTIVE

    def is_finished(self) -> bool:
        return self._state is SessionState.FINISHED

    def get_scenario(self) -> Scenario:
        return self._scenario

    def get_stage_index(self) -> int:
        return self._stage_index

    def get_current_stage(self) -> Stage | None:
        if self._stage_index < len(self._scenario.stages):
            return self._scenario.stages[self._stage_index]
        return None

    def get_current_order(self) -> CurrentOrderState:
        return self._current_order

    def get_remaining_time(self) -> int:
        return self._remaining_time

    def get_formatted_time(self) -> str:
        minutes, seconds = divmod(self._remaining_time, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def get_progress(self) -> float:
        """Fraction of the current stage's orders presented so far."""
        stage = self.get_current_stage()
        if stage is None or not stage.orders:
            return 0.0
        return self._next_order_index / len(stage.orders)

    def get_completed_order_count(self) -> int:
        return self._completed_orders

    def get_mistakes(self) -> list[Mistake]:
        return list(self._mistakes)

    def get_satisfaction_scores(self) -> list[float]:
        return list(self._satisfaction_scores)

    def get_order_durations(self) -> list[float]:
        return list(self._order_durations)

    def get_compliance_violation_count(self) -> int:
        return self._compliance_violations

    def get_result(self) -> GameResult | None:
        return self._result

    def snapshot(self) -> SessionSnapshot:
        current = self._current_order
        return SessionSnapshot(
            day_id=self._scenario.id,
            state=self._state,
            stage_index=self._stage_index,
            stage=self.get_current_stage(),
            current_order=current.order if isinstance(current, CurrentOrder) else None,
            current_order_number=current.number if isinstance(current, CurrentOrder) else None,
            remaining_time=self._remaining_time,
            formatted_time=self.get_formatted_time(),
            completed_orders=self._completed_orders,
            mistake_count=len(self._mistakes),
            progress=self.get_progress(),
            is_finished=self.is_finished(),
            result=self._result,
        )

    # --- Transitions ---

    def _begin_stage(self) -> None:
        stage = self._scenario.stages[self._stage_index]
        self._state = SessionState.STAGE_ACTIVE
        self._remaining_time = stage.time_limit_seconds
        self._next_order_index = 0
        logger.info(
            "Stage %d/%d (%s, %s) started with %ds",
            self._stage_index + 1,
            len(self._scenario.stages),
            stage.id,
            stage.kind.value,
            stage.time_limit_seconds,
        )
        self._load_next_order()

    def _load_next_order(self) -> None:
        stage = self._scenario.stages[self._stage_index]
        if self._next_order_index < len(stage.orders):
            self._current_order = CurrentOrder(
                order=stage.orders[self._next_order_index],
                number=self._next_order_index + 1,
                started_at=self._clock(),
            )
            self._next_order_index += 1
            return
        self._current_order = NoCurrentOrder()
        self._complete_stage()

    def _complete_stage(self) -> None:
        self._state = SessionState.STAGE_COMPLETE
        logger.info("Stage %d of %s complete", self._stage_index + 1, self._scenario.id)
        if self._stage_index < len(self._scenario.stages) - 1:
            self._stage_index += 1
            self._begin_stage()
        else:
            self._finalize("completed")

    def _finalize(self, reason: str) -> None:
        if self._result is not None:
            return
        self._state = SessionState.FINISHED
        self._current_order = NoCurrentOrder()

        average_time = (
            sum(self._order_durations) / len(self._order_durations)
            if self._order_durations
            else DEFAULT_AVERAGE_ORDER_SECONDS
        )
        stage = self.get_current_stage()
        total_orders = len(stage.orders) if stage is not None else 0
        components = calculate_final_score(
            total_orders=total_orders,
            mistakes=self._mistakes,
            average_time=average_time,
            satisfaction_scores=self._satisfaction_scores,
            compliance_violations=self._compliance_violations,
        )
        passed = components.total_score >= self._scenario.required_score
        self._result = GameResult(
            day_id=self._scenario.id,
            score_components=components,
            mistakes=tuple(self._mistakes),
            total_orders=total_orders,
            completed_orders=self._completed_orders,
            average_time_per_order=average_time,
            satisfaction_scores=tuple(self._satisfaction_scores),
            passed=passed,
        )
        logger.info(
            "Session %s finished (%s): total=%d grade=%s",
            self._scenario.id,
            reason,
            components.total_score,
            components.grade.value,
        )

        if passed:
            for content_id in sorted(self._scenario.unlock_content):
                self._progress_tracker.unlock(content_id)
        self._progress_tracker.record_result(self._scenario.id, components.total_score, components.grade)

    # --- Guards ---

    def _require_active(self) -> None:
        if self._state is SessionState.FINISHED:
            raise InvalidSessionStateError("Session has already finished.")
        if self._state is not SessionState.STAGE_ACTIVE:
            raise InvalidSessionStateError("No stage is currently running.")

    def _require_current_order(self) -> CurrentOrder:
        self._require_active()
        current = self._current_order
        if not isinstance(current, CurrentOrder):
            raise InvalidSessionStateError("There is no current order to submit.")
        return current

    def _current_order_number(self) -> int:
        current = self._current_order
        if isinstance(current, CurrentOrder):
            return current.number
        return self._next_order_index
