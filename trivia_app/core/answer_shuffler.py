"""Randomized presentation order for a question's answers."""

from __future__ import annotations

import random

from trivia_app.core.models import PresentedAnswerSet, TriviaQuestion


def shuffle_answers(question: TriviaQuestion, rng: random.Random | None = None) -> PresentedAnswerSet:
    """Return the correct and incorrect answers of *question* in a fresh random order.

    Every call shuffles anew; pass a seeded ``random.Random`` for a reproducible order.
    """
    answers = list(question.incorrect_answers)
    answers.append(question.correct_answer)
    (rng or random).shuffle(answers)
    return PresentedAnswerSet(question=question, answers=tuple(answers))
