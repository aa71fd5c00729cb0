from __future__ import annotations

import random

import pytest

from conftest import make_question
from trivia_app.core.answer_shuffler import shuffle_answers
from trivia_app.core.models import Difficulty, PresentedAnswerSet, TriviaQuestion
from trivia_app.core.scoring import score_percentage, summarize


def test_shuffle_keeps_every_answer_once():
    question = make_question(1)
    answer_set = shuffle_answers(question, random.Random(3))
    assert answer_set.question is question
    assert len(answer_set) == 4
    assert sorted(answer_set.answers) == sorted([question.correct_answer, *question.incorrect_answers])


def test_same_seed_gives_same_order():
    question = make_question(1)
    assert shuffle_answers(question, random.Random(11)).answers == shuffle_answers(question, random.Random(11)).answers


def test_repeated_calls_produce_fresh_orders():
    question = make_question(1, incorrect=tuple(f"wrong-{i}" for i in range(7)))
    rng = random.Random(5)
    orders = {shuffle_answers(question, rng).answers for _ in range(20)}
    assert len(orders) > 1


def test_hinted_out_answers_skip_top_two_and_correct():
    question = make_question(1, correct="C", incorrect=("A", "B", "D"))
    answer_set = PresentedAnswerSet(question=question, answers=("A", "C", "B", "D"))
    assert answer_set.hinted_out_answers() == ("B", "D")

    answer_set = PresentedAnswerSet(question=question, answers=("A", "B", "C", "D"))
    assert answer_set.hinted_out_answers() == ("D",)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"incorrect_answers": ()},
        {"incorrect_answers": ("Paris", "Rome")},
        {"question_text": "   "},
    ],
)
def test_question_invariants(kwargs):
    fields = dict(
        id="q",
        category="geography",
        question_text="Capital of France?",
        correct_answer="Paris",
        incorrect_answers=("Rome", "Berlin"),
        difficulty=Difficulty.EASY,
    )
    fields.update(kwargs)
    with pytest.raises(ValueError):
        TriviaQuestion(**fields)


def test_difficulty_parse_is_case_insensitive():
    assert Difficulty.parse(" Hard ") is Difficulty.HARD
    assert Difficulty.parse(Difficulty.EASY) is Difficulty.EASY
    with pytest.raises(ValueError):
        Difficulty.parse("legendary")


@pytest.mark.parametrize(
    "score, count, expected",
    [(1, 3, 33), (2, 3, 67), (3, 3, 100), (0, 6, 0), (1, 8, 13), (0, 0, 0), (5, 0, 0)],
)
def test_score_percentage(score, count, expected):
    assert score_percentage(score, count) == expected


def test_summarize_collects_records():
    summary = summarize(2, 4)
    assert summary.percentage == 50
    assert summary.answers == ()
