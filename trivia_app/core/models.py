"""Domain models for the trivia application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Difficulty(str, Enum):
    """Difficulty levels understood by the question source."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Difficulty | str) -> Difficulty:
        """Return the matching difficulty, accepting enum members or case-insensitive names."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown difficulty '{value}'. Expected one of: {allowed}.") from None


class SessionPhase(Enum):
    """Observable phases of a quiz session."""

    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
    # Covers the post-answer pause as well; the advance is scheduled on entry.
    ANSWERED = "answered"
    GAME_OVER = "game_over"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TriviaQuestion:
    """Multiple-choice question with one correct and at least one incorrect answer."""

    id: str
    category: str
    question_text: str
    correct_answer: str
    incorrect_answers: tuple[str, ...]
    difficulty: Difficulty

    def __post_init__(self) -> None:
        if not self.question_text.strip():
            raise ValueError("Question text must not be empty.")
        if not self.incorrect_answers:
            raise ValueError("A question needs at least one incorrect answer.")
        if self.correct_answer in self.incorrect_answers:
            raise ValueError("Correct answer must not appear among the incorrect answers.")


@dataclass(slots=True, frozen=True)
class PresentedAnswerSet:
    """Shuffled display order of the answers for exactly one question."""

    question: TriviaQuestion
    answers: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.answers)

    def __contains__(self, answer: object) -> bool:
        return answer in self.answers

    def hinted_out_answers(self) -> tuple[str, ...]:
        """Answers a hint greys out: wrong ones outside the first two positions."""
        top_two = self.answers[:2]
        return tuple(
            answer
            for answer in self.answers
            if answer != self.question.correct_answer and answer not in top_two
        )


@dataclass(slots=True)
class AnswerRecord:
    """Outcome of a single question once it has been answered or timed out."""

    question_id: str
    question_index: int
    selected_answer: str | None
    correct_answer: str
    is_correct: bool
    timed_out: bool
    time_remaining: float
    answered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True, frozen=True)
class ScoreSummary:
    """Final result of a finished session."""

    score: int
    question_count: int
    percentage: int
    answers: tuple[AnswerRecord, ...] = ()


@dataclass(slots=True, frozen=True)
class SessionSnapshot:
    """Read-only view of the session state handed to observers."""

    phase: SessionPhase
    question_index: int
    question_count: int
    category: str | None
    question_text: str | None
    answers: tuple[str, ...]
    selected_answer: str | None
    is_answered: bool
    hint_shown: bool
    hinted_out_answers: tuple[str, ...]
    time_remaining: float
    total_time: float
    score: int
    is_game_over: bool
    is_loading: bool
    error_message: str | None
    score_percentage: int | None = None
