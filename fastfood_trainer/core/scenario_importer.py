"""Utilities for importing day scenarios and tips from JSON files.

Scenario files use camelCase keys, one file per day (``day1.json`` ...)::

    {
      "id": "day1",
      "dayNumber": 1,
      "title": "First shift",
      "requiredScore": 60,
      "unlockTips": ["tip_greeting"],
      "stages": [
        {
          "id": "day1_counter",
          "type": "counter",
          "timeLimitSeconds": 300,
          "orders": [
            {"id": "o1", "customerName": "Mina", "paymentAmount": 5500,
             "items": [{"menuId": "burger_classic", "menuName": "Classic Burger"}]}
          ]
        }
      ]
    }

The pydantic schema does the validation; the rest of the trainer only sees
the immutable dataclasses from ``fastfood_trainer.core.models``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fastfood_trainer.constants.path_constants import MAX_DAY_NUMBER, SCENARIO_FILE_TEMPLATE
from fastfood_trainer.core.models import (
    CustomerMood,
    Order,
    OrderItem,
    OrderOption,
    Scenario,
    Stage,
    StageKind,
    Tip,
)

logger = logging.getLogger(__name__)


class ScenarioImportError(Exception):
    """Raised when a scenario or tips file cannot be parsed."""


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _OrderOptionSchema(_CamelModel):
    key: str
    label: str
    is_required: bool = Field(default=False, alias="isRequired")


class _OrderItemSchema(_CamelModel):
    menu_id: str = Field(alias="menuId")
    menu_name: str = Field(alias="menuName")
    is_set_menu: bool = Field(default=False, alias="isSetMenu")
    options: list[_OrderOptionSchema] = []
    expected_steps: list[str] = Field(default_factory=list, alias="expectedSteps")


class _OrderSchema(_CamelModel):
    id: str
    customer_name: str = Field(alias="customerName")
    customer_mood: CustomerMood = Field(default=CustomerMood.NEUTRAL, alias="customerMood")
    request_text: str = Field(default="", alias="requestText")
    items: list[_OrderItemSchema] = []
    correct_response: str = Field(default="", alias="correctResponse")
    payment_amount: int = Field(default=0, ge=0, alias="paymentAmount")


class _StageSchema(_CamelModel):
    id: str
    kind: StageKind = Field(alias="type")
    title: str = ""
    time_limit_seconds: int = Field(gt=0, alias="timeLimitSeconds")
    max_simultaneous_orders: int = Field(default=1, ge=1, alias="maxSimultaneousOrders")
    orders: list[_OrderSchema]

    @field_validator("orders")
    @classmethod
    def _orders_not_empty(cls, value: list[_OrderSchema]) -> list[_OrderSchema]:
        if not value:
            raise ValueError("Each stage must contain at least one order.")
        return value


class _ScenarioSchema(_CamelModel):
    id: str
    day_number: int = Field(ge=1, alias="dayNumber")
    title: str = ""
    description: str = ""
    learning_goals: list[str] = Field(default_factory=list, alias="learningGoals")
    required_score: int = Field(ge=0, le=100, alias="requiredScore")
    stages: list[_StageSchema]
    unlock_tips: list[str] = Field(default_factory=list, alias="unlockTips")

    @field_validator("stages")
    @classmethod
    def _stages_not_empty(cls, value: list[_StageSchema]) -> list[_StageSchema]:
        if not value:
            raise ValueError("Scenario must contain at least one stage.")
        return value


class _TipSchema(_CamelModel):
    id: str
    title: str
    body: str
    category: str = ""
    unlock_condition: str = Field(default="", alias="unlockCondition")
    author: str = ""


class _TipsDocument(_CamelModel):
    tips: list[_TipSchema]


def load_scenario_from_file(file_path: Path) -> Scenario:
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScenarioImportError(f"Could not read scenario file {file_path.name}.") from exc
    return parse_scenario_json(text)


def parse_scenario_json(text: str) -> Scenario:
    try:
        schema = _ScenarioSchema.model_validate_json(text)
    except ValidationError as exc:
        raise ScenarioImportError(f"Scenario definition is invalid: {exc}") from exc
    return _to_scenario(schema)


def load_all_scenarios(directory: Path) -> list[Scenario]:
    """Load ``day1.json`` through ``day7.json``, skipping files that fail.

    Raises ScenarioImportError when not a single day could be loaded.
    """
    scenarios: list[Scenario] = []
    for day_number in range(1, MAX_DAY_NUMBER + 1):
        file_path = directory / SCENARIO_FILE_TEMPLATE.format(number=day_number)
        if not file_path.exists():
            logger.warning("Scenario file %s not found; skipping", file_path.name)
            continue
        try:
            scenarios.append(load_scenario_from_file(file_path))
        except ScenarioImportError as exc:
            logger.warning("Skipping %s: %s", file_path.name, exc)

    if not scenarios:
        raise ScenarioImportError(f"No scenarios could be loaded from {directory}.")
    return sorted(scenarios, key=lambda scenario: scenario.day_number)


def load_tips(file_path: Path) -> list[Tip]:
    try:
        document = _TipsDocument.model_validate_json(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ScenarioImportError(f"Could not read tips file {file_path.name}.") from exc
    except ValidationError as exc:
        raise ScenarioImportError(f"Tips file is invalid: {exc}") from exc
    return [
        Tip(
            id=tip.id,
            title=tip.title,
            body=tip.body,
            category=tip.category,
            unlock_condition=tip.unlock_condition,
            author=tip.author,
        )
        for tip in document.tips
    ]


def _to_scenario(schema: _ScenarioSchema) -> Scenario:
    return Scenario(
        id=schema.id,
        day_number=schema.day_number,
        stages=tuple(_to_stage(stage) for stage in schema.stages),
        required_score=schema.required_score,
        unlock_content=frozenset(schema.unlock_tips),
        title=schema.title,
        description=schema.description,
        learning_goals=tuple(schema.learning_goals),
    )


def _to_stage(schema: _StageSchema) -> Stage:
    return Stage(
        id=schema.id,
        kind=schema.kind,
        time_limit_seconds=schema.time_limit_seconds,
        orders=tuple(_to_order(order) for order in schema.orders),
        title=schema.title,
        max_simultaneous_orders=schema.max_simultaneous_orders,
    )


def _to_order(schema: _OrderSchema) -> Order:
    return Order(
        id=schema.id,
        customer_name=schema.customer_name,
        items=tuple(
            OrderItem(
                menu_id=item.menu_id,
                menu_name=item.menu_name,
                is_set_menu=item.is_set_menu,
                options=tuple(
                    OrderOption(key=option.key, label=option.label, is_required=option.is_required)
                    for option in item.options
                ),
                expected_steps=tuple(item.expected_steps),
            )
            for item in schema.items
        ),
        payment_amount=schema.payment_amount,
        customer_mood=schema.customer_mood,
        request_text=schema.request_text,
        correct_response=schema.correct_response,
    )
