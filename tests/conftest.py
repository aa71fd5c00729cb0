from __future__ import annotations

import time

import pytest
from PySide6.QtCore import QCoreApplication

from trivia_app.core.models import Difficulty, TriviaQuestion
from trivia_app.core.services.quiz_session import QuizSession
from trivia_app.core.settings import SessionSettings


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def drain_events() -> None:
    """Deliver every queued Qt event (queued signals, deferred deletes)."""
    QCoreApplication.sendPostedEvents()
    QCoreApplication.processEvents()


def wait_until(predicate, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("Condition not met before timeout")
        drain_events()
        time.sleep(0.01)


def make_question(index: int = 1, correct: str | None = None, incorrect: tuple[str, ...] | None = None) -> TriviaQuestion:
    return TriviaQuestion(
        id=f"q{index}",
        category="science",
        question_text=f"Question number {index}?",
        correct_answer=correct or f"right-{index}",
        incorrect_answers=incorrect or (f"wrong-{index}-a", f"wrong-{index}-b", f"wrong-{index}-c"),
        difficulty=Difficulty.EASY,
    )


class FakeProvider:
    """Provider returning canned questions or raising a canned error."""

    def __init__(self, questions: list[TriviaQuestion] | None = None, error: Exception | None = None) -> None:
        self.questions = list(questions or [])
        self.error = error
        self.calls: list[tuple[Difficulty, int]] = []

    def fetch(self, difficulty: Difficulty, count: int) -> list[TriviaQuestion]:
        self.calls.append((difficulty, count))
        if self.error is not None:
            raise self.error
        return list(self.questions)


@pytest.fixture
def questions() -> list[TriviaQuestion]:
    return [make_question(i) for i in range(1, 4)]


@pytest.fixture
def provider(questions) -> FakeProvider:
    return FakeProvider(questions)


@pytest.fixture
def session(provider):
    quiz = QuizSession(provider, SessionSettings(shuffle_seed=7), background_fetch=False)
    yield quiz
    quiz.reset()


def run_out_clock(quiz: QuizSession) -> None:
    countdown = quiz.countdown_timer
    for _ in range(100):
        countdown.tick()
