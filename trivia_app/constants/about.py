"""Static metadata describing TriviaQt."""

APP_NAME = "TriviaQt"
APP_VERSION = "0.1"
