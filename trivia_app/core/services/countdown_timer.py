"""Qt timers used by the quiz session: the per-question countdown and the advance delay."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from trivia_app.constants.quiz_constants import (
    TICK_INTERVAL_SECONDS,
    TOTAL_TIME_SECONDS,
    TRANSITION_DELAY_SECONDS,
)


class CountdownTimer(QObject):
    """Counts down from a fixed duration in fixed steps and signals expiry once.

    Remaining time is kept as a whole number of ticks so the last tick lands on
    exactly 0.0. ``is_halted`` is consulted before every decrement; while it
    returns True the tick is ignored.
    """

    ticked = Signal(float)
    expired = Signal()

    def __init__(
        self,
        total_seconds: float = TOTAL_TIME_SECONDS,
        tick_seconds: float = TICK_INTERVAL_SECONDS,
        is_halted: Callable[[], bool] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if total_seconds <= 0 or tick_seconds <= 0:
            raise ValueError("Countdown durations must be positive.")
        ticks = total_seconds / tick_seconds
        if ticks < 1 or abs(ticks - round(ticks)) > 1e-9:
            raise ValueError("Total time must be a whole number of tick intervals.")
        self._total_seconds = total_seconds
        self._tick_seconds = tick_seconds
        self._total_ticks = round(ticks)
        self._remaining_ticks = self._total_ticks
        self._is_halted = is_halted or (lambda: False)
        self._running = False
        self._has_expired = False

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, round(tick_seconds * 1000)))
        self._timer.timeout.connect(self.tick)

    @property
    def total_seconds(self) -> float:
        return self._total_seconds

    @property
    def remaining_seconds(self) -> float:
        if self._remaining_ticks <= 0:
            return 0.0
        if self._remaining_ticks == self._total_ticks:
            return self._total_seconds
        return round(self._remaining_ticks * self._tick_seconds, 6)

    def is_running(self) -> bool:
        return self._running

    def has_expired(self) -> bool:
        return self._has_expired

    def start(self) -> None:
        """(Re)start the countdown from the full duration."""
        self._timer.stop()
        self._remaining_ticks = self._total_ticks
        self._has_expired = False
        self._running = True
        self._timer.start()

    def cancel(self) -> None:
        self._running = False
        self._timer.stop()

    @Slot()
    def tick(self) -> None:
        if not self._running or self._is_halted():
            return
        self._remaining_ticks -= 1
        if self._remaining_ticks > 0:
            self.ticked.emit(self.remaining_seconds)
            return

        self._remaining_ticks = 0
        self.cancel()
        self.ticked.emit(0.0)
        if not self._has_expired:
            self._has_expired = True
            self.expired.emit()


class TransitionDelay(QObject):
    """Single-shot delay that fires ``elapsed`` once per ``schedule()`` unless cancelled."""

    elapsed = Signal()

    def __init__(self, delay_seconds: float = TRANSITION_DELAY_SECONDS, parent: QObject | None = None) -> None:
        super().__init__(parent)
        if delay_seconds < 0:
            raise ValueError("Transition delay cannot be negative.")
        self._pending = False
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(round(delay_seconds * 1000))
        self._timer.timeout.connect(self.elapse)

    def is_pending(self) -> bool:
        return self._pending

    def schedule(self) -> None:
        self._pending = True
        self._timer.start()

    def cancel(self) -> None:
        self._pending = False
        self._timer.stop()

    @Slot()
    def elapse(self) -> None:
        if not self._pending:
            return
        self._pending = False
        self._timer.stop()
        self.elapsed.emit()
