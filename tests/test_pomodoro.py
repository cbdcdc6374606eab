# tests/test_pomodoro.py

from __future__ import annotations

import asyncio

import pytest

from planner_companion.focus.pomodoro import (
    PomodoroConfig,
    PomodoroMode,
    PomodoroTimer,
    run_focus_timer,
)


def _run_to_transition(timer: PomodoroTimer) -> PomodoroMode:
    timer.start()
    while True:
        mode = timer.tick(60)
        if mode is not None:
            return mode


def test_config_clamps_minutes() -> None:
    cfg = PomodoroConfig.from_minutes(5, 90, 0)

    assert cfg.focus_seconds == 15 * 60
    assert cfg.short_break_seconds == 30 * 60
    assert cfg.long_break_seconds == 90 * 60
    assert cfg.sessions_per_round == 1


def test_tick_does_nothing_while_paused() -> None:
    timer = PomodoroTimer()

    assert timer.tick() is None
    assert timer.remaining_seconds == 25 * 60

    timer.start()
    timer.tick(10)
    timer.pause()
    timer.tick(10)
    assert timer.remaining_seconds == 25 * 60 - 10
    assert timer.clock == "24:50"


def test_long_break_after_every_fourth_focus_session() -> None:
    timer = PomodoroTimer()
    modes = [_run_to_transition(timer) for _ in range(8)]

    assert modes == [
        PomodoroMode.SHORT_BREAK,
        PomodoroMode.FOCUS,
        PomodoroMode.SHORT_BREAK,
        PomodoroMode.FOCUS,
        PomodoroMode.SHORT_BREAK,
        PomodoroMode.FOCUS,
        PomodoroMode.LONG_BREAK,
        PomodoroMode.FOCUS,
    ]
    assert timer.completed_focus_sessions == 4
    assert timer.remaining_seconds == 25 * 60
    assert not timer.is_running


def test_reset_restores_current_mode_duration() -> None:
    timer = PomodoroTimer()
    _run_to_transition(timer)
    timer.start()
    timer.tick(100)

    timer.reset()

    assert timer.mode is PomodoroMode.SHORT_BREAK
    assert timer.remaining_seconds == 5 * 60
    assert not timer.is_running


def test_plan_round_shape() -> None:
    plan = PomodoroTimer(PomodoroConfig(focus_seconds=60, short_break_seconds=10, sessions_per_round=2)).plan_round()

    assert plan == [
        (PomodoroMode.FOCUS, 60),
        (PomodoroMode.SHORT_BREAK, 10),
        (PomodoroMode.FOCUS, 60),
        (PomodoroMode.LONG_BREAK, 30),
    ]


@pytest.mark.asyncio
async def test_focus_timer_loop_reports_transitions() -> None:
    timer = PomodoroTimer(PomodoroConfig(focus_seconds=2, short_break_seconds=1, sessions_per_round=4))
    seen: list[PomodoroMode] = []

    async def on_transition(t: PomodoroTimer, mode: PomodoroMode) -> None:
        seen.append(mode)

    await asyncio.wait_for(
        run_focus_timer(timer, on_transition, tick_seconds=0, max_transitions=3),
        timeout=5.0,
    )

    assert seen == [PomodoroMode.SHORT_BREAK, PomodoroMode.FOCUS, PomodoroMode.SHORT_BREAK]


@pytest.mark.asyncio
async def test_focus_timer_survives_callback_errors_and_can_be_cancelled() -> None:
    timer = PomodoroTimer(PomodoroConfig(focus_seconds=1, short_break_seconds=1))
    calls = {"n": 0}

    def on_transition(t: PomodoroTimer, mode: PomodoroMode) -> None:
        calls["n"] += 1
        raise RuntimeError("boom")

    runner = asyncio.create_task(run_focus_timer(timer, on_transition, tick_seconds=0.001))
    await asyncio.sleep(0.1)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert calls["n"] >= 2
