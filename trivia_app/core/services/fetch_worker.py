"""Runs a question fetch off the event loop and reports back through Qt signals."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from trivia_app.constants.quiz_constants import UNEXPECTED_FETCH_ERROR_MESSAGE
from trivia_app.core.models import Difficulty, TriviaQuestion
from trivia_app.core.question_provider import FetchError, QuestionProvider

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchOutcome:
    """Result of one fetch attempt: either questions or an error message."""

    generation: int
    questions: list[TriviaQuestion] | None = None
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error_message is None


def run_fetch(provider: QuestionProvider, difficulty: Difficulty, count: int, generation: int) -> FetchOutcome:
    """Call the provider once and fold every failure into an outcome message."""
    try:
        questions = provider.fetch(difficulty, count)
    except FetchError as exc:
        logger.warning("Fetching questions failed: %s", exc)
        return FetchOutcome(generation, error_message=str(exc))
    except Exception:
        logger.exception("Question provider crashed")
        return FetchOutcome(generation, error_message=UNEXPECTED_FETCH_ERROR_MESSAGE)
    return FetchOutcome(generation, questions=list(questions))


class FetchSignals(QObject):
    """Signals emitted from the worker thread; receivers get them queued."""

    finished = Signal(object)


class FetchTask(QRunnable):
    """Thread-pool task wrapping ``run_fetch``."""

    def __init__(self, provider: QuestionProvider, difficulty: Difficulty, count: int, generation: int) -> None:
        super().__init__()
        self.signals = FetchSignals()
        self._provider = provider
        self._difficulty = difficulty
        self._count = count
        self._generation = generation

    def run(self) -> None:
        outcome = run_fetch(self._provider, self._difficulty, self._count, self._generation)
        self.signals.finished.emit(outcome)
