# src/planner_companion/focus/pomodoro.py

from __future__ import annotations

"""
Pomodoro focus timer.

PomodoroTimer is a tick-driven state machine (no clock inside):
- focus -> short break, or long break after every Nth completed focus session
- any break -> focus
run_focus_timer drives it from an asyncio loop; cancel the coroutine to stop it.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)

MIN_FOCUS_SECONDS = 15 * 60
MAX_FOCUS_SECONDS = 60 * 60
MIN_BREAK_SECONDS = 3 * 60
MAX_BREAK_SECONDS = 30 * 60


class PomodoroMode(StrEnum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(slots=True, frozen=True)
class PomodoroConfig:
    focus_seconds: int = 25 * 60
    short_break_seconds: int = 5 * 60
    sessions_per_round: int = 4

    @classmethod
    def from_minutes(cls, focus: int, short_break: int, sessions_per_round: int = 4) -> PomodoroConfig:
        """Clamp to the ranges the focus screen allows (15-60 / 3-30 minutes)."""
        return cls(
            focus_seconds=max(MIN_FOCUS_SECONDS, min(MAX_FOCUS_SECONDS, int(focus) * 60)),
            short_break_seconds=max(MIN_BREAK_SECONDS, min(MAX_BREAK_SECONDS, int(short_break) * 60)),
            sessions_per_round=max(1, int(sessions_per_round)),
        )

    @property
    def long_break_seconds(self) -> int:
        return self.short_break_seconds * 3

    def duration(self, mode: PomodoroMode) -> int:
        if mode is PomodoroMode.FOCUS:
            return self.focus_seconds
        if mode is PomodoroMode.SHORT_BREAK:
            return self.short_break_seconds
        return self.long_break_seconds


class PomodoroTimer:
    def __init__(self, config: PomodoroConfig | None = None) -> None:
        self.config = config or PomodoroConfig()
        self.mode = PomodoroMode.FOCUS
        self.remaining_seconds = self.config.focus_seconds
        self.is_running = False
        self.completed_focus_sessions = 0

    @property
    def progress_label(self) -> str:
        n = self.config.sessions_per_round
        done = self.completed_focus_sessions % n
        if done == 0 and self.completed_focus_sessions:
            done = n
        return f"Session {done}/{n}"

    @property
    def clock(self) -> str:
        m, s = divmod(max(0, self.remaining_seconds), 60)
        return f"{m:02d}:{s:02d}"

    def start(self) -> None:
        self.is_running = True

    def pause(self) -> None:
        self.is_running = False

    def reset(self) -> None:
        """Stop and restore the full duration of the current mode."""
        self.pause()
        self.remaining_seconds = self.config.duration(self.mode)

    def _next_mode(self) -> PomodoroMode:
        if self.mode is PomodoroMode.FOCUS:
            self.completed_focus_sessions += 1
            if self.completed_focus_sessions % self.config.sessions_per_round == 0:
                return PomodoroMode.LONG_BREAK
            return PomodoroMode.SHORT_BREAK
        return PomodoroMode.FOCUS

    def tick(self, seconds: int = 1) -> PomodoroMode | None:
        """
        Advance a running timer. When the countdown is over, the timer stops and
        switches to the next mode; the new mode is returned. Otherwise None.
        """
        if not self.is_running:
            return None

        if self.remaining_seconds > 0:
            self.remaining_seconds = max(0, self.remaining_seconds - int(seconds))
            return None

        self.is_running = False
        self.mode = self._next_mode()
        self.remaining_seconds = self.config.duration(self.mode)
        logger.info("Pomodoro -> %s (%s)", self.mode.value, self.progress_label)
        return self.mode

    def plan_round(self) -> list[tuple[PomodoroMode, int]]:
        """(mode, seconds) for one full round starting from focus."""
        out: list[tuple[PomodoroMode, int]] = []
        for i in range(1, self.config.sessions_per_round + 1):
            out.append((PomodoroMode.FOCUS, self.config.focus_seconds))
            brk = PomodoroMode.LONG_BREAK if i == self.config.sessions_per_round else PomodoroMode.SHORT_BREAK
            out.append((brk, self.config.duration(brk)))
        return out


TransitionCallback = Callable[[PomodoroTimer, PomodoroMode], Awaitable[None] | None]


async def run_focus_timer(
        timer: PomodoroTimer,
        on_transition: TransitionCallback,
        *,
        tick_seconds: float = 1.0,
        auto_continue: bool = True,
        max_transitions: int | None = None,
) -> None:
    """
    Drive `timer` once per tick_seconds.

    On each mode change on_transition(timer, new_mode) is called (sync or async);
    callback errors are logged and never stop the loop. With auto_continue the
    next session starts right away, otherwise the loop returns after the first
    transition. To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.0, float(tick_seconds))
    transitions = 0
    timer.start()

    while True:
        await asyncio.sleep(sleep_s)

        new_mode = timer.tick()
        if new_mode is None:
            continue

        transitions += 1
        try:
            res = on_transition(timer, new_mode)
            if asyncio.iscoroutine(res):
                await res
        except Exception:
            logger.exception("focus timer transition callback failed mode=%s", new_mode.value)

        if not auto_continue:
            return
        if max_transitions is not None and transitions >= max_transitions:
            return
        timer.start()
