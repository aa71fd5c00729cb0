"""Question sources for a quiz session.

A provider makes a single best-effort attempt to fetch a batch of questions.
Anything that goes wrong is reported as a ``FetchError`` whose message is fit
to show to the player; the session does not look any deeper than that.

The concrete ``TriviaApiProvider`` talks to The Trivia API (v2), which answers
``GET /v2/questions?limit=N&difficulty=D`` with a JSON array such as::

    [{"id": "622a1c357cc59eab6f94fb34",
      "category": "science",
      "correctAnswer": "Mercury",
      "incorrectAnswers": ["Venus", "Mars", "Pluto"],
      "question": {"text": "Which planet is closest to the sun?"},
      "difficulty": "easy"}]
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from trivia_app.constants.network_constants import (
    FETCH_TIMEOUT_SECONDS,
    TRIVIA_API_KEY_ENV,
    TRIVIA_API_KEY_HEADER,
    TRIVIA_API_URL,
)
from trivia_app.constants.quiz_constants import NO_DATA_MESSAGE, NO_QUESTIONS_MESSAGE
from trivia_app.core.models import Difficulty, TriviaQuestion

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a batch of questions could not be obtained."""


class InvalidRequestError(FetchError):
    """Raised for malformed fetch parameters."""


class TransportError(FetchError):
    """Raised when the request could not be completed."""


class DecodeError(FetchError):
    """Raised when the response does not have the expected shape."""


class EmptyResultError(FetchError):
    """Raised when the source answered successfully but without questions."""

    def __init__(self, message: str = NO_QUESTIONS_MESSAGE) -> None:
        super().__init__(message)


class QuestionProvider(Protocol):
    """Anything able to hand out an ordered batch of questions."""

    def fetch(self, difficulty: Difficulty, count: int) -> list[TriviaQuestion]:
        ...


class _QuestionTextPayload(BaseModel):
    text: str


class TriviaQuestionPayload(BaseModel):
    """Wire schema of one question returned by The Trivia API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    category: str
    correct_answer: str = Field(alias="correctAnswer")
    incorrect_answers: list[str] = Field(alias="incorrectAnswers", min_length=1)
    question: _QuestionTextPayload
    difficulty: Difficulty

    def to_question(self) -> TriviaQuestion:
        return TriviaQuestion(
            id=self.id,
            category=self.category,
            question_text=self.question.text,
            correct_answer=self.correct_answer,
            incorrect_answers=tuple(self.incorrect_answers),
            difficulty=self.difficulty,
        )


_PAYLOAD_ADAPTER = TypeAdapter(list[TriviaQuestionPayload])


class TriviaApiProvider:
    """Fetches questions from The Trivia API with one HTTP request per batch."""

    def __init__(
        self,
        base_url: str = TRIVIA_API_URL,
        api_key: str | None = None,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key if api_key is not None else os.environ.get(TRIVIA_API_KEY_ENV)
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def fetch(self, difficulty: Difficulty, count: int) -> list[TriviaQuestion]:
        if count <= 0:
            raise InvalidRequestError(f"Question count must be positive, got {count}.")
        try:
            difficulty = Difficulty.parse(difficulty)
        except ValueError as exc:
            raise InvalidRequestError(str(exc)) from exc

        headers = {TRIVIA_API_KEY_HEADER: self._api_key} if self._api_key else {}
        params = {"limit": count, "difficulty": difficulty.value}
        logger.info("Requesting %d %s questions from %s", count, difficulty.value, self._base_url)
        try:
            response = self._client.get(self._base_url, params=params, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"Network error: server responded with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error: {exc}") from exc

        if not response.content:
            raise DecodeError(NO_DATA_MESSAGE)
        logger.debug("Trivia API response: %s", response.text)
        questions = decode_questions(response.content)
        if not questions:
            raise EmptyResultError()
        return questions

    def close(self) -> None:
        self._client.close()


def decode_questions(raw: bytes | str) -> list[TriviaQuestion]:
    """Decode a Trivia API JSON body into questions, raising DecodeError on bad shapes."""
    try:
        payloads = _PAYLOAD_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise DecodeError(f"Could not decode response: {exc.error_count()} validation error(s)") from exc
    try:
        return [payload.to_question() for payload in payloads]
    except ValueError as exc:
        raise DecodeError(f"Could not decode response: {exc}") from exc
