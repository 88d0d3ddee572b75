"""Shared fixtures: synthetic clock, scenario builders and an in-memory tracker."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fastfood_trainer.core.models import Order, OrderItem, Scenario, Stage, StageKind
from fastfood_trainer.core.progress_store import InMemoryProgressStore
from fastfood_trainer.core.services.progress_tracker import ProgressTracker


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_order(order_id: str, customer_name: str = "Customer") -> Order:
    return Order(
        id=order_id,
        customer_name=customer_name,
        items=(OrderItem(menu_id="burger_classic", menu_name="Classic Burger"),),
        payment_amount=5500,
    )


def make_stage(stage_id: str, order_count: int, time_limit: int = 300, kind: StageKind = StageKind.COUNTER) -> Stage:
    return Stage(
        id=stage_id,
        kind=kind,
        time_limit_seconds=time_limit,
        orders=tuple(make_order(f"{stage_id}_o{index + 1}", f"Guest {index + 1}") for index in range(order_count)),
    )


def make_scenario(
    day_number: int = 1,
    stage_orders: tuple[int, ...] = (3,),
    time_limit: int = 300,
    required_score: int = 60,
    unlock_content: frozenset[str] = frozenset({"tip_greeting"}),
) -> Scenario:
    return Scenario(
        id=f"day{day_number}",
        day_number=day_number,
        stages=tuple(
            make_stage(f"day{day_number}_s{index + 1}", count, time_limit)
            for index, count in enumerate(stage_orders)
        ),
        required_score=required_score,
        unlock_content=unlock_content,
        title=f"Day {day_number}",
    )


FIXED_NOW = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def tracker(store: InMemoryProgressStore) -> ProgressTracker:
    return ProgressTracker(store, now=lambda: FIXED_NOW)
