"""Session settings with defaults taken from the quiz constants."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os

from trivia_app.constants.quiz_constants import (
    DEFAULT_QUESTION_COUNT,
    TICK_INTERVAL_SECONDS,
    TOTAL_TIME_SECONDS,
    TRANSITION_DELAY_SECONDS,
)

_ENV_QUESTION_COUNT = "TRIVIAQT_QUESTION_COUNT"
_ENV_TOTAL_TIME = "TRIVIAQT_TOTAL_TIME"
_ENV_TRANSITION_DELAY = "TRIVIAQT_TRANSITION_DELAY"
_ENV_SHUFFLE_SEED = "TRIVIAQT_SHUFFLE_SEED"


@dataclass(slots=True, frozen=True)
class SessionSettings:
    """Timing and sizing knobs for a quiz session."""

    total_time_seconds: float = TOTAL_TIME_SECONDS
    tick_interval_seconds: float = TICK_INTERVAL_SECONDS
    transition_delay_seconds: float = TRANSITION_DELAY_SECONDS
    question_count: int = DEFAULT_QUESTION_COUNT
    shuffle_seed: int | None = None

    def __post_init__(self) -> None:
        if self.total_time_seconds <= 0:
            raise ValueError("Total time must be positive.")
        if self.tick_interval_seconds <= 0:
            raise ValueError("Tick interval must be positive.")
        if self.tick_interval_seconds > self.total_time_seconds:
            raise ValueError("Tick interval cannot exceed the total time.")
        ticks = self.total_time_seconds / self.tick_interval_seconds
        if abs(ticks - round(ticks)) > 1e-9:
            raise ValueError("Total time must be a whole number of tick intervals.")
        if self.transition_delay_seconds < 0:
            raise ValueError("Transition delay cannot be negative.")
        if self.question_count <= 0:
            raise ValueError("Question count must be a positive integer.")

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> SessionSettings:
        """Build settings from TRIVIAQT_* environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        seed = env.get(_ENV_SHUFFLE_SEED)
        return cls(
            total_time_seconds=_read_float(env, _ENV_TOTAL_TIME, TOTAL_TIME_SECONDS),
            transition_delay_seconds=_read_float(env, _ENV_TRANSITION_DELAY, TRANSITION_DELAY_SECONDS),
            question_count=_read_int(env, _ENV_QUESTION_COUNT, DEFAULT_QUESTION_COUNT),
            shuffle_seed=int(seed) if seed else None,
        )


def _read_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}.") from None


def _read_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}.") from None
