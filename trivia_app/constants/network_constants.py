"""Network configuration constants for the trivia application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000

TRIVIA_API_URL: str = "https://the-trivia-api.com/v2/questions"
TRIVIA_API_KEY_ENV: str = "TRIVIA_API_KEY"
TRIVIA_API_KEY_HEADER: str = "X-API-Key"
FETCH_TIMEOUT_SECONDS: float = 10.0
