from __future__ import annotations

import time

import pytest

from conftest import drain_events, wait_until
from trivia_app.core.services.countdown_timer import CountdownTimer, TransitionDelay


def _collect(signal) -> list:
    received: list = []
    signal.connect(lambda *args: received.append(args))
    return received


def test_hundred_ticks_reach_exactly_zero_and_expire_once():
    countdown = CountdownTimer()
    expiries = _collect(countdown.expired)
    countdown.start()

    for _ in range(99):
        countdown.tick()
    assert countdown.remaining_seconds == pytest.approx(0.1)
    assert expiries == []

    countdown.tick()
    assert countdown.remaining_seconds == 0.0
    assert len(expiries) == 1
    assert not countdown.is_running()

    for _ in range(5):
        countdown.tick()
    assert countdown.remaining_seconds == 0.0
    assert len(expiries) == 1


def test_ticks_report_decreasing_time():
    countdown = CountdownTimer()
    ticks = _collect(countdown.ticked)
    countdown.start()
    countdown.tick()
    countdown.tick()
    assert [value for (value,) in ticks] == [pytest.approx(9.9), pytest.approx(9.8)]


def test_cancel_stops_decrements_and_is_idempotent():
    countdown = CountdownTimer()
    expiries = _collect(countdown.expired)
    countdown.start()
    countdown.tick()
    countdown.cancel()
    countdown.cancel()

    for _ in range(200):
        countdown.tick()
    assert countdown.remaining_seconds == pytest.approx(9.9)
    assert expiries == []


def test_halted_countdown_does_not_decrement():
    halted = {"value": False}
    countdown = CountdownTimer(is_halted=lambda: halted["value"])
    countdown.start()
    countdown.tick()
    halted["value"] = True
    for _ in range(150):
        countdown.tick()
    assert countdown.remaining_seconds == pytest.approx(9.9)
    assert not countdown.has_expired()


def test_restart_resets_remaining_time():
    countdown = CountdownTimer(total_seconds=1.0, tick_seconds=0.5)
    countdown.start()
    countdown.tick()
    countdown.tick()
    assert countdown.has_expired()

    countdown.start()
    assert countdown.remaining_seconds == 1.0
    assert not countdown.has_expired()
    assert countdown.is_running()


def test_rejects_non_positive_durations():
    with pytest.raises(ValueError):
        CountdownTimer(total_seconds=0)
    with pytest.raises(ValueError):
        CountdownTimer(tick_seconds=-0.1)


@pytest.mark.parametrize("total, tick", [(0.25, 0.1), (1.0, 0.3), (0.1, 0.5)])
def test_rejects_totals_that_are_not_whole_ticks(total, tick):
    with pytest.raises(ValueError, match="whole number"):
        CountdownTimer(total_seconds=total, tick_seconds=tick)


def test_transition_delay_fires_once_per_schedule():
    delay = TransitionDelay()
    fired = _collect(delay.elapsed)

    delay.elapse()
    assert fired == []

    delay.schedule()
    assert delay.is_pending()
    delay.elapse()
    delay.elapse()
    assert len(fired) == 1
    assert not delay.is_pending()


def test_cancelled_transition_delay_never_fires():
    delay = TransitionDelay()
    fired = _collect(delay.elapsed)
    delay.schedule()
    delay.cancel()
    delay.elapse()
    assert fired == []


def _pump(seconds: float) -> None:
    deadline = time.monotonic() + seconds
    while time.monotonic() < deadline:
        drain_events()
        time.sleep(0.01)


def test_countdown_runs_on_the_event_loop_clock():
    countdown = CountdownTimer(total_seconds=0.3, tick_seconds=0.1)
    ticks = _collect(countdown.ticked)
    expiries = _collect(countdown.expired)
    countdown.start()

    wait_until(countdown.has_expired)
    _pump(0.3)

    assert [value for (value,) in ticks] == [pytest.approx(0.2), pytest.approx(0.1), 0.0]
    assert countdown.remaining_seconds == 0.0
    assert len(expiries) == 1
    assert not countdown.is_running()


def test_transition_delay_fires_on_the_event_loop_clock():
    delay = TransitionDelay(0.05)
    fired = _collect(delay.elapsed)
    delay.schedule()

    wait_until(lambda: bool(fired))
    _pump(0.1)
    assert len(fired) == 1
    assert not delay.is_pending()


def test_cancelled_delay_stays_silent_past_its_deadline():
    delay = TransitionDelay(0.05)
    fired = _collect(delay.elapsed)
    delay.schedule()
    delay.cancel()

    _pump(0.2)
    assert fired == []
