"""Application entry point for FastFood Trainer."""

from __future__ import annotations

import os
from pathlib import Path
import sys

from PySide6.QtCore import QCoreApplication

from fastfood_trainer.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from fastfood_trainer.constants.path_constants import (
    BUNDLED_DATA_DIR,
    DATA_DIR_ENV_VAR,
    DEFAULT_PROGRESS_PATH,
    PROGRESS_PATH_ENV_VAR,
    TIPS_FILE_NAME,
)
from fastfood_trainer.core.progress_store import JsonProgressStore
from fastfood_trainer.core.scenario_importer import load_all_scenarios, load_tips
from fastfood_trainer.core.services.progress_tracker import ProgressTracker
from fastfood_trainer.core.trainer_manager import TrainerManager
from fastfood_trainer.host.session_clock import QtSessionClock
from fastfood_trainer.server.api_server import start_api_server
from fastfood_trainer.utils.logging_config import configure_logging


def _resolve_path(env_var: str, default: Path) -> Path:
    override = os.environ.get(env_var)
    return Path(override).expanduser() if override else default


def main() -> None:
    """Load content and progress, start the API server, and run the tick loop."""
    logger = configure_logging()
    logger.info("Starting FastFood Trainer…")

    data_dir = _resolve_path(DATA_DIR_ENV_VAR, BUNDLED_DATA_DIR)
    progress_path = _resolve_path(PROGRESS_PATH_ENV_VAR, DEFAULT_PROGRESS_PATH)

    scenarios = load_all_scenarios(data_dir)
    tips_path = data_dir / TIPS_FILE_NAME
    tips = load_tips(tips_path) if tips_path.exists() else []

    tracker = ProgressTracker(JsonProgressStore(progress_path))
    trainer_manager = TrainerManager(progress_tracker=tracker)
    trainer_manager.load_scenarios(scenarios, tips)
    logger.info("Progress stored at %s", progress_path)

    app = QCoreApplication(sys.argv)
    clock = QtSessionClock(on_tick=trainer_manager.tick)
    clock.start()

    start_api_server(trainer_manager=trainer_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Trainer API available at http://%s:%d/", DEFAULT_HOST, DEFAULT_PORT)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
