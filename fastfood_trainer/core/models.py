"""Domain models for the trainer: scenario content, session telemetry and progress."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import math

from fastfood_trainer.constants.scoring_constants import (
    GRADE_A_MIN,
    GRADE_B_MIN,
    GRADE_C_MIN,
    GRADE_S_MIN,
)


class StageKind(str, Enum):
    """Gameplay flavour of a stage."""

    COUNTER = "counter"
    KITCHEN = "kitchen"
    CLEANING = "cleaning"
    COMPLAINT = "complaint"
    MIXED = "mixed"


class CustomerMood(str, Enum):
    FRIENDLY = "friendly"
    NEUTRAL = "neutral"
    HURRIED = "hurried"
    CAREFUL = "careful"
    ANGRY = "angry"


class Grade(str, Enum):
    """Letter classification derived solely from a total score."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    INCOMPLETE = "Incomplete"

    @classmethod
    def from_score(cls, score: int) -> Grade:
        if score >= GRADE_S_MIN:
            return cls.S
        if score >= GRADE_A_MIN:
            return cls.A
        if score >= GRADE_B_MIN:
            return cls.B
        if score >= GRADE_C_MIN:
            return cls.C
        return cls.D


@dataclass(frozen=True, slots=True)
class OrderOption:
    """Customisation requested on a menu item (e.g. no lettuce)."""

    key: str
    label: str
    is_required: bool = False


@dataclass(frozen=True, slots=True)
class OrderItem:
    menu_id: str
    menu_name: str
    is_set_menu: bool = False
    options: tuple[OrderOption, ...] = ()
    expected_steps: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Order:
    """One customer's request. Display fields are opaque to scoring."""

    id: str
    customer_name: str
    items: tuple[OrderItem, ...]
    payment_amount: int
    customer_mood: CustomerMood = CustomerMood.NEUTRAL
    request_text: str = ""
    correct_response: str = ""


@dataclass(frozen=True, slots=True)
class Stage:
    id: str
    kind: StageKind
    time_limit_seconds: int
    orders: tuple[Order, ...]
    title: str = ""
    max_simultaneous_orders: int = 1


@dataclass(frozen=True, slots=True)
class Scenario:
    """A full training day as supplied by the scenario provider."""

    id: str
    day_number: int
    stages: tuple[Stage, ...]
    required_score: int
    unlock_content: frozenset[str] = frozenset()
    title: str = ""
    description: str = ""
    learning_goals: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Tip:
    """Veteran advice card revealed once its id is unlocked."""

    id: str
    title: str
    body: str
    category: str = ""
    unlock_condition: str = ""
    author: str = ""


@dataclass(frozen=True, slots=True)
class Mistake:
    """A scoring deduction tied to an order position or event."""

    order_number: int
    description: str
    deducted_points: int


@dataclass(frozen=True, slots=True)
class ScoreComponents:
    """Four bounded sub-scores; total and grade are derived."""

    accuracy: float
    speed: float
    satisfaction: float
    compliance: float

    @property
    def total_score(self) -> int:
        # Half-up rounding; every component is non-negative.
        return int(math.floor(self.accuracy + self.speed + self.satisfaction + self.compliance + 0.5))

    @property
    def grade(self) -> Grade:
        return Grade.from_score(self.total_score)


@dataclass(frozen=True, slots=True)
class GameResult:
    """Outcome of one finished session. Created exactly once per session."""

    day_id: str
    score_components: ScoreComponents
    mistakes: tuple[Mistake, ...]
    total_orders: int
    completed_orders: int
    average_time_per_order: float
    satisfaction_scores: tuple[float, ...]
    passed: bool = False

    @property
    def total_score(self) -> int:
        return self.score_components.total_score

    @property
    def grade(self) -> Grade:
        return self.score_components.grade


@dataclass(slots=True)
class DayProgress:
    """Per-day record owned by the progress tracker."""

    day_id: str
    is_completed: bool
    best_score: int
    best_grade: Grade
    attempt_count: int
    last_played_at: datetime | None = None


class SessionState(str, Enum):
    IDLE = "idle"
    STAGE_ACTIVE = "stage_active"
    STAGE_COMPLETE = "stage_complete"
    FINISHED = "finished"


@dataclass(frozen=True, slots=True)
class NoCurrentOrder:
    """Placeholder while no order is being worked on."""


@dataclass(frozen=True, slots=True)
class CurrentOrder:
    order: Order
    number: int  # 1-based position within the stage
    started_at: float


CurrentOrderState = NoCurrentOrder | CurrentOrder


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of a session handed to drivers."""

    day_id: str
    state: SessionState
    stage_index: int
    stage: Stage | None
    current_order: Order | None
    current_order_number: int | None
    remaining_time: int
    formatted_time: str
    completed_orders: int
    mistake_count: int
    progress: float
    is_finished: bool
    result: GameResult | None = None
