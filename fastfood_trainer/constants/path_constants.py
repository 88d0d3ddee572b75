"""Filesystem locations and naming conventions for scenario and progress data."""

from pathlib import Path

BUNDLED_DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
DEFAULT_PROGRESS_PATH: Path = Path.home() / ".fastfood_trainer" / "progress.json"

SCENARIO_FILE_TEMPLATE: str = "day{number}.json"
DAY_ID_TEMPLATE: str = "day{number}"
TIPS_FILE_NAME: str = "tips.json"
MAX_DAY_NUMBER: int = 7

DATA_DIR_ENV_VAR: str = "FASTFOOD_TRAINER_DATA_DIR"
PROGRESS_PATH_ENV_VAR: str = "FASTFOOD_TRAINER_PROGRESS_PATH"
