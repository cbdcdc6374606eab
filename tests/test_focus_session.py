# tests/test_focus_session.py

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator

import pytest

from planner_companion.focus.focus_session import FocusSession
from planner_companion.focus.pomodoro import PomodoroConfig, PomodoroMode


def _wait_for(cond: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if cond():
            return True
        time.sleep(0.01)
    return cond()


@pytest.fixture()
def messages() -> list[str]:
    return []


@pytest.fixture()
def session(messages: list[str]) -> Iterator[FocusSession]:
    s = FocusSession(PomodoroConfig(), notify=messages.append, tick_seconds=0.005)
    yield s
    s.close()


def test_session_stops_after_a_mode_change() -> None:
    seen = threading.Event()
    texts: list[str] = []

    def notify(text: str) -> None:
        texts.append(text)
        seen.set()

    s = FocusSession(PomodoroConfig(focus_seconds=1, short_break_seconds=1), notify=notify, tick_seconds=0.001)
    try:
        assert s.start() is True
        assert seen.wait(timeout=5.0)
        assert _wait_for(lambda: not s.is_running)

        assert s.timer.mode is PomodoroMode.SHORT_BREAK
        assert s.timer.completed_focus_sessions == 1
        assert "Short Break" in texts[0]
    finally:
        s.close()


def test_pause_keeps_the_time_left(session: FocusSession) -> None:
    assert session.start() is True
    assert session.start() is False
    assert _wait_for(lambda: session.timer.remaining_seconds < 25 * 60)

    assert session.pause() is True
    left = session.timer.remaining_seconds
    time.sleep(0.05)

    assert session.timer.remaining_seconds == left
    assert "(paused)" in session.status()
    assert session.pause() is False


def test_reset_restores_full_focus(session: FocusSession) -> None:
    session.start()
    assert _wait_for(lambda: session.timer.remaining_seconds < 25 * 60)

    session.reset()

    assert not session.is_running
    assert session.timer.remaining_seconds == 25 * 60
    assert session.status() == "Focus 25:00 - Session 0/4 (paused)"


def test_close_without_start_is_harmless(session: FocusSession) -> None:
    session.close()
    session.close()
    assert not session.is_running
