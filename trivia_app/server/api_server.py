"""FastAPI server that exposes the quiz session to remote players."""

from __future__ import annotations

from threading import Thread

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field
import uvicorn

from trivia_app.constants.about import APP_NAME, APP_VERSION
from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.core.models import AnswerRecord, Difficulty, SessionSnapshot
from trivia_app.core.quiz_manager import QuizManager


class LoadPayload(BaseModel):
    """Payload schema for starting a new round."""

    difficulty: Difficulty = Difficulty.MEDIUM
    count: int | None = Field(default=None, gt=0)


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    answer: str


class SessionState(BaseModel):
    """Response schema mirroring SessionSnapshot."""

    phase: str
    question_index: int
    question_count: int
    category: str | None
    question_text: str | None
    answers: list[str]
    selected_answer: str | None
    is_answered: bool
    hint_shown: bool
    hinted_out_answers: list[str]
    time_remaining: float
    total_time: float
    score: int
    is_game_over: bool
    is_loading: bool
    error_message: str | None
    score_percentage: int | None

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionState":
        return cls(
            phase=snapshot.phase.value,
            question_index=snapshot.question_index,
            question_count=snapshot.question_count,
            category=snapshot.category,
            question_text=snapshot.question_text,
            answers=list(snapshot.answers),
            selected_answer=snapshot.selected_answer,
            is_answered=snapshot.is_answered,
            hint_shown=snapshot.hint_shown,
            hinted_out_answers=list(snapshot.hinted_out_answers),
            time_remaining=snapshot.time_remaining,
            total_time=snapshot.total_time,
            score=snapshot.score,
            is_game_over=snapshot.is_game_over,
            is_loading=snapshot.is_loading,
            error_message=snapshot.error_message,
            score_percentage=snapshot.score_percentage,
        )


class AnswerResult(BaseModel):
    question_id: str
    question_index: int
    selected_answer: str | None
    correct_answer: str
    is_correct: bool
    timed_out: bool
    answered_at: str

    @classmethod
    def from_record(cls, record: AnswerRecord) -> "AnswerResult":
        return cls(
            question_id=record.question_id,
            question_index=record.question_index,
            selected_answer=record.selected_answer,
            correct_answer=record.correct_answer,
            is_correct=record.is_correct,
            timed_out=record.timed_out,
            answered_at=record.answered_at.isoformat(),
        )


class SummaryResponse(BaseModel):
    score: int
    question_count: int
    percentage: int
    answers: list[AnswerResult]


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/session", response_model=SessionState)
    def get_session(manager: QuizManager = Depends(quiz_manager_dep)) -> SessionState:
        return SessionState.from_snapshot(manager.get_snapshot())

    @app.get("/summary", response_model=SummaryResponse)
    def get_summary(manager: QuizManager = Depends(quiz_manager_dep)) -> SummaryResponse:
        try:
            summary = manager.get_summary()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return SummaryResponse(
            score=summary.score,
            question_count=summary.question_count,
            percentage=summary.percentage,
            answers=[AnswerResult.from_record(record) for record in summary.answers],
        )

    @app.post("/load", status_code=202)
    def load_questions(
        payload: LoadPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            difficulty = manager.request_load(payload.difficulty, payload.count)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"accepted": True, "difficulty": difficulty.value, "count": payload.count}

    @app.post("/answer", status_code=202)
    def submit_answer(
        payload: AnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        manager.request_answer(payload.answer)
        return {"accepted": True}

    @app.post("/hint", status_code=202)
    def show_hint(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        manager.request_hint()
        return {"accepted": True}

    @app.post("/reset", status_code=202)
    def reset_session(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        manager.request_reset()
        return {"accepted": True}

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="TriviaApiServer", daemon=True)
    thread.start()
    return thread
