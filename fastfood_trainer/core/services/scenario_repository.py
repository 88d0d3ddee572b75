"""Service for holding the loaded day scenarios."""

from __future__ import annotations

from fastfood_trainer.core.models import Scenario, Tip


class ScenarioRepository:
    """Keeps scenarios ordered by day number, plus the tips catalog."""

    def __init__(self) -> None:
        self._scenarios: list[Scenario] = []
        self._tips: list[Tip] = []

    def load_scenarios(self, scenarios: list[Scenario]) -> None:
        """Replace the loaded scenarios."""
        if not scenarios:
            raise ValueError("At least one scenario is required.")
        day_numbers = [scenario.day_number for scenario in scenarios]
        if len(set(day_numbers)) != len(day_numbers):
            raise ValueError("Scenario day numbers must be unique.")
        self._scenarios = sorted(scenarios, key=lambda scenario: scenario.day_number)

    def load_tips(self, tips: list[Tip]) -> None:
        self._tips = list(tips)

    def get_scenarios(self) -> list[Scenario]:
        return list(self._scenarios)

    def get_by_day_number(self, day_number: int) -> Scenario:
        for scenario in self._scenarios:
            if scenario.day_number == day_number:
                return scenario
        raise KeyError(f"No scenario loaded for day {day_number}")

    def get_tips(self) -> list[Tip]:
        return list(self._tips)
