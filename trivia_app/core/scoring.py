"""Helpers for turning answer records into a final score."""

from __future__ import annotations

from collections.abc import Iterable

from trivia_app.core.models import AnswerRecord, ScoreSummary


def score_percentage(score: int, question_count: int) -> int:
    """Return the score as a whole percentage, rounding halves up. Empty quizzes score 0."""
    if question_count <= 0:
        return 0
    return int(score * 100 / question_count + 0.5)


def summarize(score: int, question_count: int, answers: Iterable[AnswerRecord] = ()) -> ScoreSummary:
    return ScoreSummary(
        score=score,
        question_count=question_count,
        percentage=score_percentage(score, question_count),
        answers=tuple(answers),
    )
