"""FastAPI server that exposes the trainer's session lifecycle to a local driver."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field
import uvicorn

from fastfood_trainer.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from fastfood_trainer.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from fastfood_trainer.core.models import DayProgress, GameResult, Mistake, Order, SessionSnapshot
from fastfood_trainer.core.trainer_manager import TrainerManager


class OrderOutcomePayload(BaseModel):
    """Payload schema for a finished order."""

    is_correct: bool
    satisfaction_score: float = Field(ge=0, le=100)


class MistakePayload(BaseModel):
    """Payload schema for a mistake spotted outside order submission."""

    description: str
    points: int | None = Field(default=None, ge=0)


@contextmanager
def _http_errors() -> Iterator[None]:
    try:
        yield
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except OSError as exc:
        raise HTTPException(status_code=503, detail="Stored progress could not be updated.") from exc


def _serialize_order(order: Order) -> dict[str, object]:
    return {
        "id": order.id,
        "customer_name": order.customer_name,
        "customer_mood": order.customer_mood.value,
        "request_text": order.request_text,
        "payment_amount": order.payment_amount,
        "items": [
            {
                "menu_id": item.menu_id,
                "menu_name": item.menu_name,
                "is_set_menu": item.is_set_menu,
                "options": [
                    {"key": option.key, "label": option.label, "is_required": option.is_required}
                    for option in item.options
                ],
            }
            for item in order.items
        ],
    }


def _serialize_mistake(mistake: Mistake) -> dict[str, object]:
    return {
        "order_number": mistake.order_number,
        "description": mistake.description,
        "deducted_points": mistake.deducted_points,
    }


def _serialize_result(result: GameResult) -> dict[str, object]:
    components = result.score_components
    return {
        "day_id": result.day_id,
        "accuracy": components.accuracy,
        "speed": components.speed,
        "satisfaction": components.satisfaction,
        "compliance": components.compliance,
        "total_score": result.total_score,
        "grade": result.grade.value,
        "passed": result.passed,
        "total_orders": result.total_orders,
        "completed_orders": result.completed_orders,
        "average_time_per_order": result.average_time_per_order,
        "satisfaction_scores": list(result.satisfaction_scores),
        "mistakes": [_serialize_mistake(mistake) for mistake in result.mistakes],
    }


def _serialize_snapshot(snapshot: SessionSnapshot) -> dict[str, object]:
    stage = snapshot.stage
    return {
        "day_id": snapshot.day_id,
        "state": snapshot.state.value,
        "stage_index": snapshot.stage_index,
        "stage": None
        if stage is None
        else {
            "id": stage.id,
            "kind": stage.kind.value,
            "title": stage.title,
            "time_limit_seconds": stage.time_limit_seconds,
            "order_count": len(stage.orders),
        },
        "current_order": None if snapshot.current_order is None else _serialize_order(snapshot.current_order),
        "current_order_number": snapshot.current_order_number,
        "remaining_time": snapshot.remaining_time,
        "formatted_time": snapshot.formatted_time,
        "completed_orders": snapshot.completed_orders,
        "mistake_count": snapshot.mistake_count,
        "progress": snapshot.progress,
        "is_finished": snapshot.is_finished,
        "result": None if snapshot.result is None else _serialize_result(snapshot.result),
    }


def _serialize_progress(progress: DayProgress | None) -> dict[str, object] | None:
    if progress is None:
        return None
    return {
        "day_id": progress.day_id,
        "is_completed": progress.is_completed,
        "best_score": progress.best_score,
        "best_grade": progress.best_grade.value,
        "attempt_count": progress.attempt_count,
        "last_played_at": progress.last_played_at.isoformat() if progress.last_played_at else None,
    }


def _get_trainer_manager_dependency(trainer_manager: TrainerManager):
    def dependency() -> TrainerManager:
        return trainer_manager

    return dependency


def create_api_app(trainer_manager: TrainerManager) -> FastAPI:
    """Create a FastAPI application wired to the provided trainer manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_ABOUT_TEXT)
    manager_dep = _get_trainer_manager_dependency(trainer_manager)

    @app.get("/days")
    def list_days(manager: TrainerManager = Depends(manager_dep)) -> dict[str, object]:
        return {
            "overall_progress": manager.get_overall_progress(),
            "days": [
                {
                    "day_number": day.day_number,
                    "scenario_id": day.scenario_id,
                    "title": day.title,
                    "is_unlocked": day.is_unlocked,
                    "progress": _serialize_progress(day.progress),
                }
                for day in manager.list_days()
            ],
        }

    @app.post("/days/{day_number}/session", status_code=201)
    def start_day(day_number: int, manager: TrainerManager = Depends(manager_dep)) -> dict[str, object]:
        with _http_errors():
            snapshot = manager.start_day(day_number)
        return _serialize_snapshot(snapshot)

    @app.get("/session")
    def get_session(manager: TrainerManager = Depends(manager_dep)) -> dict[str, object]:
        snapshot = manager.get_session_snapshot()
        if snapshot is None:
            raise HTTPException(status_code=404, detail="No session has been started.")
        return _serialize_snapshot(snapshot)

    @app.post("/session/orders")
    def submit_order(
        payload: OrderOutcomePayload,
        manager: TrainerManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            snapshot = manager.submit_order_outcome(payload.is_correct, payload.satisfaction_score)
        return _serialize_snapshot(snapshot)

    @app.post("/session/mistakes", status_code=201)
    def record_mistake(
        payload: MistakePayload,
        manager: TrainerManager = Depends(manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            mistake = manager.record_mistake(payload.description, payload.points)
        return _serialize_mistake(mistake)

    @app.post("/session/violations", status_code=204)
    def record_violation(manager: TrainerManager = Depends(manager_dep)) -> None:
        with _http_errors():
            manager.record_compliance_violation()

    @app.post("/session/quit")
    def quit_session(manager: TrainerManager = Depends(manager_dep)) -> dict[str, object]:
        with _http_errors():
            result = manager.quit_session()
        if result is None:
            raise HTTPException(status_code=409, detail="Session produced no result.")
        return _serialize_result(result)

    @app.get("/result")
    def get_result(manager: TrainerManager = Depends(manager_dep)) -> dict[str, object]:
        result = manager.get_last_result()
        if result is None:
            raise HTTPException(status_code=404, detail="No session has finished yet.")
        return _serialize_result(result)

    @app.get("/progress")
    def get_progress(manager: TrainerManager = Depends(manager_dep)) -> dict[str, object]:
        return {
            "overall_progress": manager.get_overall_progress(),
            "days": {day_id: _serialize_progress(record) for day_id, record in manager.get_progress().items()},
        }

    @app.delete("/progress", status_code=204)
    def reset_progress(manager: TrainerManager = Depends(manager_dep)) -> None:
        with _http_errors():
            manager.reset_progress()

    @app.get("/tips")
    def get_tips(manager: TrainerManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [
            {
                "id": tip.id,
                "title": tip.title,
                "body": tip.body,
                "category": tip.category,
                "author": tip.author,
            }
            for tip in manager.get_unlocked_tips()
        ]

    return app


def start_api_server(
    trainer_manager: TrainerManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(trainer_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="TrainerApiServer", daemon=True)
    thread.start()
    return thread
