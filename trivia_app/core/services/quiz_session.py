"""Service that drives one timed trivia round from load to game over."""

from __future__ import annotations

import logging
import random

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from trivia_app.constants.quiz_constants import NO_QUESTIONS_MESSAGE
from trivia_app.core.answer_shuffler import shuffle_answers
from trivia_app.core.models import (
    AnswerRecord,
    Difficulty,
    PresentedAnswerSet,
    ScoreSummary,
    SessionPhase,
    SessionSnapshot,
    TriviaQuestion,
)
from trivia_app.core.question_provider import QuestionProvider
from trivia_app.core.scoring import score_percentage, summarize
from trivia_app.core.services.countdown_timer import CountdownTimer, TransitionDelay
from trivia_app.core.services.fetch_worker import FetchOutcome, FetchTask, run_fetch
from trivia_app.core.settings import SessionSettings

logger = logging.getLogger(__name__)


class QuizSession(QObject):
    """State machine for a quiz round.

    Every mutation happens on the thread that owns this object (the Qt event
    loop), so countdown ticks, answers, delay completions and fetch results are
    handled strictly one after another. The answered flag decides which of an
    answer and a countdown expiry wins; the later one finds it already set and
    does nothing.

    Observers connect to ``state_changed`` for a fresh ``SessionSnapshot`` after
    every change and to ``finished`` for the ``ScoreSummary`` at game over.
    """

    state_changed = Signal(object)
    finished = Signal(object)

    def __init__(
        self,
        provider: QuestionProvider,
        settings: SessionSettings | None = None,
        *,
        background_fetch: bool = True,
        thread_pool: QThreadPool | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._provider = provider
        self._settings = settings or SessionSettings()
        self._background_fetch = background_fetch
        self._thread_pool = thread_pool
        self._rng = random.Random(self._settings.shuffle_seed)

        self._phase = SessionPhase.IDLE
        self._questions: tuple[TriviaQuestion, ...] = ()
        self._index = 0
        self._score = 0
        self._answer_set: PresentedAnswerSet | None = None
        self._selected_answer: str | None = None
        self._answered = False
        self._hint_shown = False
        self._time_remaining = self._settings.total_time_seconds
        self._error_message: str | None = None
        self._answer_log: list[AnswerRecord] = []

        self._load_generation = 0
        self._pending_fetch: FetchTask | None = None

        # Timer slots; a new occupant always cancels the previous one first.
        self._countdown: CountdownTimer | None = None
        self._transition: TransitionDelay | None = None

    # --- Commands ---

    def load(self, difficulty: Difficulty | str, count: int | None = None) -> None:
        """Discard any running round and fetch a fresh batch of questions."""
        self._cancel_timers()
        self._clear_round()
        self._load_generation += 1
        self._pending_fetch = None
        self._error_message = None

        try:
            parsed_difficulty = Difficulty.parse(difficulty)
        except ValueError as exc:
            self._fail(str(exc))
            return
        question_count = self._settings.question_count if count is None else count
        if question_count <= 0:
            self._fail(f"Question count must be positive, got {question_count}.")
            return

        self._phase = SessionPhase.LOADING
        logger.info("Loading %d %s questions", question_count, parsed_difficulty.value)
        self._publish()

        if not self._background_fetch:
            self._apply_fetch_outcome(
                run_fetch(self._provider, parsed_difficulty, question_count, self._load_generation)
            )
            return

        task = FetchTask(self._provider, parsed_difficulty, question_count, self._load_generation)
        task.signals.finished.connect(self._apply_fetch_outcome)
        self._pending_fetch = task
        (self._thread_pool or QThreadPool.globalInstance()).start(task)

    def select_answer(self, answer: str) -> bool:
        """Lock in *answer* for the current question. Returns False when ignored."""
        if self._phase is not SessionPhase.ACTIVE or self._answered:
            logger.debug("Ignoring answer %r in phase %s", answer, self._phase.value)
            return False

        question = self._questions[self._index]
        self._selected_answer = answer
        self._answered = True
        self._cancel_countdown()
        is_correct = answer == question.correct_answer
        if is_correct:
            self._score += 1
        self._record_answer(question, answer, is_correct=is_correct, timed_out=False)
        logger.info(
            "Question %d answered %s",
            self._index + 1,
            "correctly" if is_correct else "incorrectly",
        )
        self._enter_answered()
        return True

    def show_hint(self) -> bool:
        """Reveal the hint for the current question. Returns False when ignored."""
        if self._phase is not SessionPhase.ACTIVE or self._answered or self._hint_shown:
            logger.debug("Ignoring hint request in phase %s", self._phase.value)
            return False
        self._hint_shown = True
        self._publish()
        return True

    def reset(self) -> None:
        """Stop everything and return to the idle state."""
        self._cancel_timers()
        self._load_generation += 1
        self._pending_fetch = None
        self._clear_round()
        self._error_message = None
        self._phase = SessionPhase.IDLE
        logger.info("Session reset")
        self._publish()

    def set_shuffle_seed(self, seed: int | None) -> None:
        self._rng.seed(seed)

    # --- Observable state ---

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def countdown_timer(self) -> CountdownTimer | None:
        return self._countdown

    @property
    def transition_delay(self) -> TransitionDelay | None:
        return self._transition

    def current_question(self) -> TriviaQuestion | None:
        if self._phase in (SessionPhase.ACTIVE, SessionPhase.ANSWERED):
            return self._questions[self._index]
        return None

    def current_answer_set(self) -> PresentedAnswerSet | None:
        return self._answer_set

    def snapshot(self) -> SessionSnapshot:
        question = self.current_question()
        answer_set = self._answer_set if question is not None else None
        answers = answer_set.answers if answer_set is not None else ()
        hinted_out: tuple[str, ...] = ()
        if self._hint_shown and answer_set is not None:
            hinted_out = answer_set.hinted_out_answers()
        is_game_over = self._phase is SessionPhase.GAME_OVER
        return SessionSnapshot(
            phase=self._phase,
            question_index=self._index,
            question_count=len(self._questions),
            category=question.category if question else None,
            question_text=question.question_text if question else None,
            answers=answers,
            selected_answer=self._selected_answer,
            is_answered=self._answered,
            hint_shown=self._hint_shown,
            hinted_out_answers=hinted_out,
            time_remaining=self._time_remaining,
            total_time=self._settings.total_time_seconds,
            score=self._score,
            is_game_over=is_game_over,
            is_loading=self._phase is SessionPhase.LOADING,
            error_message=self._error_message,
            score_percentage=score_percentage(self._score, len(self._questions)) if is_game_over else None,
        )

    def summary(self) -> ScoreSummary:
        if self._phase is not SessionPhase.GAME_OVER:
            raise RuntimeError("The quiz is not over yet.")
        return summarize(self._score, len(self._questions), self._answer_log)

    # --- Event handlers ---

    @Slot(object)
    def _apply_fetch_outcome(self, outcome: FetchOutcome) -> None:
        if outcome.generation != self._load_generation or self._phase is not SessionPhase.LOADING:
            logger.debug("Dropping stale fetch result for load #%d", outcome.generation)
            return
        self._pending_fetch = None
        if not outcome.succeeded:
            self._fail(outcome.error_message or NO_QUESTIONS_MESSAGE)
            return
        if not outcome.questions:
            self._fail(NO_QUESTIONS_MESSAGE)
            return

        self._questions = tuple(outcome.questions)
        self._index = 0
        self._score = 0
        self._answer_log = []
        logger.info("Loaded %d questions", len(self._questions))
        self._prepare_question()

    @Slot(float)
    def _on_countdown_ticked(self, remaining: float) -> None:
        if self._answered:
            return
        self._time_remaining = min(max(remaining, 0.0), self._settings.total_time_seconds)
        self._publish()

    @Slot()
    def _on_countdown_expired(self) -> None:
        if self._phase is not SessionPhase.ACTIVE or self._answered:
            return
        self._answered = True
        self._time_remaining = 0.0
        question = self._questions[self._index]
        self._record_answer(question, None, is_correct=False, timed_out=True)
        logger.info("Question %d timed out", self._index + 1)
        self._enter_answered()

    @Slot()
    def _on_transition_elapsed(self) -> None:
        if self._phase is not SessionPhase.ANSWERED:
            return
        self._index += 1
        if self._index < len(self._questions):
            self._prepare_question()
            return

        self._phase = SessionPhase.GAME_OVER
        summary = self.summary()
        logger.info(
            "Game over: %d/%d correct (%d%%)",
            summary.score,
            summary.question_count,
            summary.percentage,
        )
        self._publish()
        self.finished.emit(summary)

    # --- Internals ---

    def _prepare_question(self) -> None:
        question = self._questions[self._index]
        self._answer_set = shuffle_answers(question, self._rng)
        self._selected_answer = None
        self._answered = False
        self._hint_shown = False
        self._time_remaining = self._settings.total_time_seconds
        self._phase = SessionPhase.ACTIVE
        self._start_countdown()
        logger.debug("Question %d/%d is live", self._index + 1, len(self._questions))
        self._publish()

    def _enter_answered(self) -> None:
        self._phase = SessionPhase.ANSWERED
        self._schedule_transition()
        self._publish()

    def _start_countdown(self) -> None:
        self._cancel_countdown()
        if self._countdown is not None:
            self._countdown.deleteLater()
        countdown = CountdownTimer(
            total_seconds=self._settings.total_time_seconds,
            tick_seconds=self._settings.tick_interval_seconds,
            is_halted=lambda: self._answered,
            parent=self,
        )
        countdown.ticked.connect(self._on_countdown_ticked)
        countdown.expired.connect(self._on_countdown_expired)
        self._countdown = countdown
        countdown.start()

    def _schedule_transition(self) -> None:
        self._cancel_transition()
        if self._transition is not None:
            self._transition.deleteLater()
        transition = TransitionDelay(self._settings.transition_delay_seconds, parent=self)
        transition.elapsed.connect(self._on_transition_elapsed)
        self._transition = transition
        transition.schedule()

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()

    def _cancel_transition(self) -> None:
        if self._transition is not None:
            self._transition.cancel()

    def _cancel_timers(self) -> None:
        self._cancel_countdown()
        self._cancel_transition()

    def _clear_round(self) -> None:
        self._questions = ()
        self._index = 0
        self._score = 0
        self._answer_set = None
        self._selected_answer = None
        self._answered = False
        self._hint_shown = False
        self._time_remaining = self._settings.total_time_seconds
        self._answer_log = []

    def _record_answer(
        self,
        question: TriviaQuestion,
        selected: str | None,
        *,
        is_correct: bool,
        timed_out: bool,
    ) -> None:
        self._answer_log.append(
            AnswerRecord(
                question_id=question.id,
                question_index=self._index,
                selected_answer=selected,
                correct_answer=question.correct_answer,
                is_correct=is_correct,
                timed_out=timed_out,
                time_remaining=self._time_remaining,
            )
        )

    def _fail(self, message: str) -> None:
        self._phase = SessionPhase.FAILED
        self._error_message = message
        logger.warning("Session failed to load: %s", message)
        self._publish()

    def _publish(self) -> None:
        self.state_changed.emit(self.snapshot())
