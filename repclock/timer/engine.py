"""Workout session timer.

Three counters run off the same 1-second clock:

total_time      Whole-session duration.  Ticks whenever the session runs.
exercise_time   Time spent exercising.  Frozen while resting.
rest_time       Rest countdown.  Zero when not resting.

Two flags, ``is_running`` and ``is_resting``, give four configurations.
Resting-while-paused only happens when the user pauses during a rest.

Every counter owns at most one live tick handle.  Anything that starts a
tick for a counter cancels that counter's previous handle first, so two
callbacks can never bump the same counter in one second.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from .clock import QtTickSource, TickSource


log = logging.getLogger(__name__)


REST_WARNING_SECONDS = 3


class Counter(Enum):
    TOTAL = "total"
    EXERCISE = "exercise"
    REST = "rest"


@dataclass
class TimerState:
    """Counters and flags for one workout session."""

    total_time: int = 0
    exercise_time: int = 0
    rest_time: int = 0
    is_running: bool = False
    is_resting: bool = False


def format_time(seconds: int) -> str:
    """Render *seconds* as ``MM:SS``.  Minutes are not capped at 59."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class WorkoutTimer(QObject):
    """Session clock with exercise and rest tracking.

    Signals
    -------
    total_tick(total_time: int)
    exercise_tick(exercise_time: int)
    rest_tick(rest_time: int)
        Emitted after the matching counter moves.
    state_changed(snapshot: TimerState)
        Emitted on start, pause, reset and every rest transition.
    rest_started(duration: int)
    rest_finished(skipped: bool)
    rest_ending_soon(rest_time: int)
        Fires once per rest when the countdown reaches the warning mark.
    """

    total_tick = pyqtSignal(int)
    exercise_tick = pyqtSignal(int)
    rest_tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    rest_started = pyqtSignal(int)
    rest_finished = pyqtSignal(bool)
    rest_ending_soon = pyqtSignal(int)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: TickSource | None = None,
        rest_warning_seconds: int = REST_WARNING_SECONDS,
    ) -> None:
        super().__init__(parent)
        self._clock: TickSource = clock if clock is not None else QtTickSource(self)
        self._state = TimerState()
        self._handles: dict[Counter, object | None] = {c: None for c in Counter}
        self._rest_warning_seconds = rest_warning_seconds
        self._rest_warning_armed = False

    # ── read side ─────────────────────────────────────────────────────────

    @property
    def total_time(self) -> int:
        return self._state.total_time

    @property
    def exercise_time(self) -> int:
        return self._state.exercise_time

    @property
    def rest_time(self) -> int:
        return self._state.rest_time

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def is_resting(self) -> bool:
        return self._state.is_resting

    @property
    def total_time_formatted(self) -> str:
        return format_time(self._state.total_time)

    @property
    def exercise_time_formatted(self) -> str:
        return format_time(self._state.exercise_time)

    @property
    def rest_time_formatted(self) -> str:
        return format_time(self._state.rest_time)

    def snapshot(self) -> TimerState:
        return replace(self._state)

    def has_tick(self, counter: Counter) -> bool:
        """True when *counter* currently owns a live tick handle."""
        return self._handles[counter] is not None

    # ── controls ──────────────────────────────────────────────────────────

    def start(self) -> None:
        if self._state.is_running:
            return
        self._state.is_running = True
        self._subscribe(Counter.TOTAL, self._on_total_tick)
        if not self._state.is_resting:
            self._subscribe(Counter.EXERCISE, self._on_exercise_tick)
        elif self._state.rest_time > 0 and not self.has_tick(Counter.REST):
            # paused mid-rest; pick the countdown back up
            self._subscribe(Counter.REST, self._on_rest_tick)
        log.debug("timer started at %s", self.total_time_formatted)
        self._emit_state()

    def pause(self) -> None:
        self._state.is_running = False
        for counter in Counter:
            self._cancel(counter)
        log.debug("timer paused at %s", self.total_time_formatted)
        self._emit_state()

    def reset(self) -> None:
        self.pause()
        self._state.total_time = 0
        self._state.exercise_time = 0
        self._state.rest_time = 0
        self._state.is_resting = False
        self._rest_warning_armed = False
        self._emit_state()

    def start_rest(self, duration: int) -> None:
        """Begin (or restart) a rest countdown of *duration* seconds."""
        if duration <= 0:
            self.skip_rest()
            return
        self._state.is_resting = True
        self._state.rest_time = duration
        self._rest_warning_armed = duration > self._rest_warning_seconds
        self._cancel(Counter.EXERCISE)
        self._subscribe(Counter.REST, self._on_rest_tick)
        log.debug("rest started: %ds", duration)
        self.rest_started.emit(duration)
        self._emit_state()

    def skip_rest(self) -> None:
        if not self._state.is_resting:
            return
        self._end_rest(skipped=True)

    def reset_exercise_timer(self) -> None:
        """Zero the exercise counter, e.g. when moving to the next exercise."""
        self._state.exercise_time = 0
        self._cancel(Counter.EXERCISE)
        if self._state.is_running and not self._state.is_resting:
            self._subscribe(Counter.EXERCISE, self._on_exercise_tick)
        self.exercise_tick.emit(0)

    def close(self) -> None:
        """Cancel every outstanding tick.  Call when the session view goes away."""
        for counter in Counter:
            self._cancel(counter)
        self._state.is_running = False

    # ── tick handlers ─────────────────────────────────────────────────────

    def _on_total_tick(self) -> None:
        self._state.total_time += 1
        self.total_tick.emit(self._state.total_time)

    def _on_exercise_tick(self) -> None:
        if self._state.is_resting:
            return
        self._state.exercise_time += 1
        self.exercise_tick.emit(self._state.exercise_time)

    def _on_rest_tick(self) -> None:
        if self._state.rest_time <= 1:
            self._end_rest(skipped=False)
            return
        self._state.rest_time -= 1
        self.rest_tick.emit(self._state.rest_time)
        if (
            self._rest_warning_armed
            and self._state.rest_time <= self._rest_warning_seconds
        ):
            self._rest_warning_armed = False
            self.rest_ending_soon.emit(self._state.rest_time)

    def _end_rest(self, *, skipped: bool) -> None:
        self._cancel(Counter.REST)
        self._state.is_resting = False
        self._state.rest_time = 0
        self._rest_warning_armed = False
        self.rest_tick.emit(0)
        if self._state.is_running:
            self._subscribe(Counter.EXERCISE, self._on_exercise_tick)
        log.debug("rest %s", "skipped" if skipped else "finished")
        self.rest_finished.emit(skipped)
        self._emit_state()

    # ── handle bookkeeping ────────────────────────────────────────────────

    def _subscribe(self, counter: Counter, callback) -> None:
        self._cancel(counter)
        self._handles[counter] = self._clock.schedule(callback)

    def _cancel(self, counter: Counter) -> None:
        handle = self._handles[counter]
        if handle is None:
            return
        self._handles[counter] = None
        self._clock.cancel(handle)

    def _emit_state(self) -> None:
        self.state_changed.emit(self.snapshot())
