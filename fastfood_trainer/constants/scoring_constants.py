"""Scoring and progression constants shared by the session and calculator."""

ACCURACY_MAX_POINTS: float = 40.0
SPEED_MAX_POINTS: float = 30.0
SATISFACTION_MAX_POINTS: float = 20.0
COMPLIANCE_MAX_POINTS: float = 10.0

SPEED_TARGET_SECONDS: float = 90.0
SPEED_ACCEPTABLE_SECONDS: float = 120.0
SPEED_SLOW_POINTS: float = 15.0
DEFAULT_AVERAGE_ORDER_SECONDS: float = 120.0

COMPLIANCE_PENALTY_PER_VIOLATION: float = 2.0
SATISFACTION_SCALE: float = 100.0

PASSING_SCORE: int = 60
GRADE_S_MIN: int = 95
GRADE_A_MIN: int = 85
GRADE_B_MIN: int = 70
GRADE_C_MIN: int = 60

WRONG_ORDER_DEDUCTION: int = 5
TIMEOUT_DEDUCTION: int = 10
DEFAULT_MISTAKE_DEDUCTION: int = 5

TOTAL_DAY_COUNT: int = 7
