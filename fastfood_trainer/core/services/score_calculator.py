"""Pure scoring functions that turn session telemetry into ScoreComponents."""

from __future__ import annotations

from collections.abc import Sequence

from fastfood_trainer.constants.scoring_constants import (
    ACCURACY_MAX_POINTS,
    COMPLIANCE_MAX_POINTS,
    COMPLIANCE_PENALTY_PER_VIOLATION,
    SATISFACTION_MAX_POINTS,
    SATISFACTION_SCALE,
    SPEED_ACCEPTABLE_SECONDS,
    SPEED_MAX_POINTS,
    SPEED_SLOW_POINTS,
    SPEED_TARGET_SECONDS,
)
from fastfood_trainer.core.models import Mistake, ScoreComponents


def calculate_accuracy(total_orders: int, mistakes: Sequence[Mistake]) -> float:
    """Share of orders without a mistake, scaled to 40 points.

    Only the number of mistakes counts here; their deducted points are
    descriptive and do not feed the formula.
    """
    if total_orders <= 0:
        return 0.0
    error_free = max(0, total_orders - len(mistakes))
    return error_free / total_orders * ACCURACY_MAX_POINTS


def calculate_speed(average_time: float) -> float:
    """Full marks up to 90 s, linear down to 15 at 120 s, flat 15 beyond."""
    if average_time <= SPEED_TARGET_SECONDS:
        return SPEED_MAX_POINTS
    if average_time <= SPEED_ACCEPTABLE_SECONDS:
        ratio = (SPEED_ACCEPTABLE_SECONDS - average_time) / (SPEED_ACCEPTABLE_SECONDS - SPEED_TARGET_SECONDS)
        return SPEED_SLOW_POINTS + ratio * (SPEED_MAX_POINTS - SPEED_SLOW_POINTS)
    return SPEED_SLOW_POINTS


def calculate_satisfaction(satisfaction_scores: Sequence[float]) -> float:
    if not satisfaction_scores:
        return 0.0
    average = sum(satisfaction_scores) / len(satisfaction_scores)
    return average / SATISFACTION_SCALE * SATISFACTION_MAX_POINTS


def calculate_compliance(violations: int) -> float:
    return max(0.0, COMPLIANCE_MAX_POINTS - violations * COMPLIANCE_PENALTY_PER_VIOLATION)


def calculate_final_score(
    total_orders: int,
    mistakes: Sequence[Mistake],
    average_time: float,
    satisfaction_scores: Sequence[float],
    compliance_violations: int,
) -> ScoreComponents:
    """Combine all four components for a finished session."""
    return ScoreComponents(
        accuracy=calculate_accuracy(total_orders, mistakes),
        speed=calculate_speed(average_time),
        satisfaction=calculate_satisfaction(satisfaction_scores),
        compliance=calculate_compliance(compliance_violations),
    )
