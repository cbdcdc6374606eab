# src/planner_companion/focus/focus_session.py

"""
Interactive Pomodoro session for the console.

The console REPL blocks on input(), so the timer runs on its own asyncio
loop in a daemon thread. start() schedules run_focus_timer on that loop,
pause() cancels it (the remaining time stays on the timer), reset() cancels
and restores the full duration of the current mode.

A session stops after each mode change; the next one starts with /focus start.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import contextlib
import logging
import threading
from collections.abc import Callable

from .pomodoro import PomodoroConfig, PomodoroMode, PomodoroTimer, run_focus_timer

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


async def _cancel_pending_tasks() -> None:
    tasks = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
    for t in tasks:
        t.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


class FocusSession:
    def __init__(
        self,
        config: PomodoroConfig | None = None,
        *,
        notify: Notifier | None = None,
        tick_seconds: float = 1.0,
    ) -> None:
        self.timer = PomodoroTimer(config)
        self.notify = notify
        self._tick_seconds = tick_seconds
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._future: concurrent.futures.Future[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._future is not None and not self._future.done()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop

        loop = asyncio.new_event_loop()
        thread = threading.Thread(target=loop.run_forever, name="focus-timer", daemon=True)
        thread.start()
        self._loop, self._thread = loop, thread
        logger.debug("Focus timer thread started.")
        return loop

    def _on_transition(self, timer: PomodoroTimer, mode: PomodoroMode) -> None:
        text = f"Time is up. Next: {mode.label} ({timer.clock}, {timer.progress_label}). Use /focus start."
        logger.info("Focus session transition -> %s", mode.value)
        if self.notify is not None:
            self.notify(text)

    def start(self) -> bool:
        """Returns False if the timer is already running."""
        if self.is_running:
            return False
        loop = self._ensure_loop()
        self._future = asyncio.run_coroutine_threadsafe(
            run_focus_timer(
                self.timer,
                self._on_transition,
                tick_seconds=self._tick_seconds,
                auto_continue=False,
            ),
            loop,
        )
        logger.info("Focus session started mode=%s remaining=%s", self.timer.mode.value, self.timer.clock)
        return True

    def _cancel(self) -> None:
        # Pause first so a tick racing the cancellation is a no-op.
        self.timer.pause()
        if self._future is not None:
            self._future.cancel()
            self._future = None

    def pause(self) -> bool:
        """Returns False if there was nothing to pause."""
        was_running = self.is_running
        self._cancel()
        return was_running

    def reset(self) -> None:
        self._cancel()
        self.timer.reset()

    def status(self) -> str:
        state = "running" if self.is_running else "paused"
        return f"{self.timer.mode.label} {self.timer.clock} - {self.timer.progress_label} ({state})"

    def close(self) -> None:
        self._cancel()
        loop, thread = self._loop, self._thread
        self._loop = self._thread = None
        if loop is None:
            return
        with contextlib.suppress(concurrent.futures.TimeoutError):
            asyncio.run_coroutine_threadsafe(_cancel_pending_tasks(), loop).result(timeout=5.0)
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=5.0)
        with contextlib.suppress(RuntimeError):
            loop.close()
        logger.debug("Focus timer thread stopped.")
