"""Thread-safe facade over the quiz session shared between the event loop and the API."""

from __future__ import annotations

from threading import Lock

from PySide6.QtCore import QObject, Qt, Signal, Slot

from trivia_app.core.models import Difficulty, ScoreSummary, SessionPhase, SessionSnapshot
from trivia_app.core.services.quiz_session import QuizSession


class QuizManager(QObject):
    """Facade for the QuizSession usable from any thread.

    Reads are served from the latest published snapshot. Commands are posted
    to the session's event loop through queued signals, so they are applied in
    order with countdown ticks and never concurrently with them.
    """

    _load_requested = Signal(str, int)
    _answer_requested = Signal(str)
    _hint_requested = Signal()
    _reset_requested = Signal()

    def __init__(self, session: QuizSession, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._lock = Lock()
        self._session = session
        self._snapshot: SessionSnapshot = session.snapshot()
        self._summary: ScoreSummary | None = None

        session.state_changed.connect(self._store_snapshot)
        session.finished.connect(self._store_summary)

        self._load_requested.connect(self._dispatch_load, Qt.QueuedConnection)
        self._answer_requested.connect(self._dispatch_answer, Qt.QueuedConnection)
        self._hint_requested.connect(self._dispatch_hint, Qt.QueuedConnection)
        self._reset_requested.connect(self._dispatch_reset, Qt.QueuedConnection)

    # --- Commands (any thread) ---

    def request_load(self, difficulty: Difficulty | str, count: int | None = None) -> Difficulty:
        parsed = Difficulty.parse(difficulty)
        if count is not None and count <= 0:
            raise ValueError("Question count must be a positive integer.")
        self._load_requested.emit(parsed.value, count or 0)
        return parsed

    def request_answer(self, answer: str) -> None:
        self._answer_requested.emit(answer)

    def request_hint(self) -> None:
        self._hint_requested.emit()

    def request_reset(self) -> None:
        self._reset_requested.emit()

    # --- Queries (any thread) ---

    def get_snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot

    def get_summary(self) -> ScoreSummary:
        with self._lock:
            if self._snapshot.phase is not SessionPhase.GAME_OVER or self._summary is None:
                raise RuntimeError("The quiz is not over yet.")
            return self._summary

    # --- Session thread ---

    @Slot(object)
    def _store_snapshot(self, snapshot: SessionSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
            if snapshot.phase is not SessionPhase.GAME_OVER:
                self._summary = None

    @Slot(object)
    def _store_summary(self, summary: ScoreSummary) -> None:
        with self._lock:
            self._summary = summary

    @Slot(str, int)
    def _dispatch_load(self, difficulty: str, count: int) -> None:
        self._session.load(difficulty, count or None)

    @Slot(str)
    def _dispatch_answer(self, answer: str) -> None:
        self._session.select_answer(answer)

    @Slot()
    def _dispatch_hint(self) -> None:
        self._session.show_hint()

    @Slot()
    def _dispatch_reset(self) -> None:
        self._session.reset()
