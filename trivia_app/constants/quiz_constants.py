"""Quiz-related constants shared across the session and server layers."""

TOTAL_TIME_SECONDS: float = 10.0
TICK_INTERVAL_SECONDS: float = 0.1
TRANSITION_DELAY_SECONDS: float = 2.0
DEFAULT_QUESTION_COUNT: int = 6

NO_QUESTIONS_MESSAGE: str = "No questions returned"
NO_DATA_MESSAGE: str = "No data received"
UNEXPECTED_FETCH_ERROR_MESSAGE: str = "Unexpected error while fetching questions"
