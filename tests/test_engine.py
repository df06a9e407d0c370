"""Tests for the workout session timer.

Covers: start/pause/reset transitions, counter accumulation, rest
countdown and skipping, exercise-timer reset, tick-handle ownership
(never two live ticks per counter), signals, and time formatting.
"""

import pytest

from repclock.timer.clock import ManualTickSource
from repclock.timer.engine import (
    WorkoutTimer, TimerState, Counter, format_time,
)

from helpers import SignalCollector


def _live(timer: WorkoutTimer) -> set[Counter]:
    return {c for c in Counter if timer.has_tick(c)}


# ═══════════════════════════════════════════════════════════════════════════
#  FORMATTING
# ═══════════════════════════════════════════════════════════════════════════


class TestFormatTime:

    @pytest.mark.parametrize("seconds, expected", [
        (0, "00:00"),
        (5, "00:05"),
        (59, "00:59"),
        (60, "01:00"),
        (65, "01:05"),
        (3599, "59:59"),
        (3661, "61:01"),
        (7500, "125:00"),
    ])
    def test_format(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_formatted_properties(self, timer, clock):
        timer.start()
        clock.advance(65)
        assert timer.total_time_formatted == "01:05"
        assert timer.exercise_time_formatted == "01:05"
        assert timer.rest_time_formatted == "00:00"


# ═══════════════════════════════════════════════════════════════════════════
#  START / PAUSE / RESET
# ═══════════════════════════════════════════════════════════════════════════


class TestStartPause:

    def test_initial_state(self, timer):
        assert timer.snapshot() == TimerState()
        assert timer.is_running is False
        assert timer.is_resting is False
        assert _live(timer) == set()

    def test_start_runs_total_and_exercise(self, timer, clock):
        timer.start()
        assert timer.is_running
        assert _live(timer) == {Counter.TOTAL, Counter.EXERCISE}
        clock.advance(3)
        assert timer.total_time == 3
        assert timer.exercise_time == 3

    def test_start_twice_is_same_as_once(self, timer, clock):
        timer.start()
        timer.start()
        assert clock.live_count == 2
        clock.advance(4)
        assert timer.total_time == 4
        assert timer.exercise_time == 4

    def test_no_increments_after_pause(self, timer, clock):
        timer.start()
        clock.advance(3)
        timer.pause()
        clock.advance(3)
        assert timer.total_time == 3
        assert timer.exercise_time == 3
        assert clock.live_count == 0

    def test_pause_when_idle_is_harmless(self, timer, clock):
        timer.pause()
        assert timer.is_running is False
        assert clock.live_count == 0

    def test_resume_after_pause_continues_counting(self, timer, clock):
        timer.start()
        clock.advance(2)
        timer.pause()
        timer.start()
        clock.advance(2)
        assert timer.total_time == 4
        assert timer.exercise_time == 4

    @pytest.mark.parametrize("ops", [
        ["start"],
        ["start", "start"],
        ["start", "pause", "start"],
        ["start", "pause", "pause", "start", "start"],
        ["pause", "start", "pause", "start"],
    ])
    def test_at_most_one_tick_per_counter(self, timer, clock, ops):
        for op in ops:
            getattr(timer, op)()
            assert clock.live_count == len(_live(timer))
        before = timer.total_time
        clock.advance(1)
        if timer.is_running:
            assert timer.total_time == before + 1

    def test_reset_zeroes_everything(self, timer, clock):
        timer.start()
        clock.advance(5)
        timer.start_rest(10)
        clock.advance(2)
        timer.reset()
        snap = timer.snapshot()
        assert snap.total_time == 0
        assert snap.exercise_time == 0
        assert snap.rest_time == 0
        assert snap.is_resting is False
        assert snap.is_running is False
        assert clock.live_count == 0

    def test_reset_from_fresh_state(self, timer):
        timer.reset()
        assert timer.snapshot() == TimerState()

    def test_close_cancels_all_ticks(self, timer, clock):
        timer.start()
        timer.start_rest(30)
        timer.close()
        assert clock.live_count == 0
        total = timer.total_time
        clock.advance(5)
        assert timer.total_time == total


# ═══════════════════════════════════════════════════════════════════════════
#  REST
# ═══════════════════════════════════════════════════════════════════════════


class TestRest:

    def test_start_rest_suspends_exercise(self, timer, clock):
        timer.start()
        clock.advance(2)
        timer.start_rest(2)
        assert timer.is_resting
        assert timer.rest_time == 2
        assert _live(timer) == {Counter.TOTAL, Counter.REST}

        clock.advance(1)
        assert timer.rest_time == 1
        assert timer.exercise_time == 2
        assert timer.total_time == 3

        clock.advance(1)
        assert timer.rest_time == 0
        assert timer.is_resting is False
        assert timer.exercise_time == 2

        clock.advance(1)
        assert timer.exercise_time == 3
        assert timer.total_time == 5

    def test_rest_runs_out_after_duration_ticks(self, timer, clock):
        timer.start_rest(5)
        clock.advance(4)
        assert timer.is_resting
        assert timer.rest_time == 1
        clock.advance(1)
        assert timer.rest_time == 0
        assert timer.is_resting is False
        assert clock.live_count == 0

    def test_rest_end_without_running_does_not_start_exercise(self, timer, clock):
        timer.start_rest(1)
        clock.advance(1)
        assert timer.is_resting is False
        assert not timer.has_tick(Counter.EXERCISE)
        clock.advance(3)
        assert timer.exercise_time == 0

    def test_restart_rest_does_not_leak(self, timer, clock):
        timer.start()
        timer.start_rest(10)
        clock.advance(3)
        timer.start_rest(4)
        assert timer.rest_time == 4
        assert clock.live_count == 2
        clock.advance(1)
        assert timer.rest_time == 3

    def test_skip_rest_resumes_exercise(self, timer, clock):
        timer.start()
        clock.advance(1)
        timer.start_rest(30)
        clock.advance(2)
        timer.skip_rest()
        assert timer.is_resting is False
        assert timer.rest_time == 0
        assert _live(timer) == {Counter.TOTAL, Counter.EXERCISE}
        clock.advance(1)
        assert timer.exercise_time == 2

    def test_skip_rest_when_not_resting_is_noop(self, timer, clock):
        timer.start()
        c = SignalCollector()
        timer.rest_finished.connect(c)
        timer.skip_rest()
        assert len(c) == 0
        assert _live(timer) == {Counter.TOTAL, Counter.EXERCISE}

    def test_skip_rest_while_paused_keeps_exercise_stopped(self, timer, clock):
        timer.start()
        timer.start_rest(10)
        timer.pause()
        timer.skip_rest()
        assert timer.is_resting is False
        assert clock.live_count == 0

    def test_pause_during_rest_freezes_countdown(self, timer, clock):
        timer.start()
        timer.start_rest(10)
        clock.advance(2)
        timer.pause()
        clock.advance(5)
        assert timer.rest_time == 8
        assert timer.is_resting
        assert clock.live_count == 0

    def test_start_after_pause_during_rest_resumes_countdown(self, timer, clock):
        timer.start()
        timer.start_rest(10)
        clock.advance(2)
        timer.pause()
        timer.start()
        assert _live(timer) == {Counter.TOTAL, Counter.REST}
        clock.advance(1)
        assert timer.rest_time == 7
        assert timer.exercise_time == 0

    def test_start_while_resting_before_running_does_not_double_rest(self, timer, clock):
        timer.start_rest(6)
        timer.start()
        assert clock.live_count == 2
        clock.advance(1)
        assert timer.rest_time == 5

    def test_non_positive_rest_ends_current_rest(self, timer, clock):
        timer.start()
        timer.start_rest(10)
        timer.start_rest(0)
        assert timer.is_resting is False
        assert _live(timer) == {Counter.TOTAL, Counter.EXERCISE}

    def test_start_rest_while_not_running(self, timer, clock):
        timer.start_rest(3)
        assert timer.is_resting
        assert _live(timer) == {Counter.REST}


# ═══════════════════════════════════════════════════════════════════════════
#  EXERCISE TIMER RESET
# ═══════════════════════════════════════════════════════════════════════════


class TestResetExerciseTimer:

    def test_zeroes_exercise_only(self, timer, clock):
        timer.start()
        clock.advance(7)
        timer.reset_exercise_timer()
        assert timer.exercise_time == 0
        assert timer.total_time == 7
        clock.advance(2)
        assert timer.exercise_time == 2
        assert timer.total_time == 9

    def test_resubscribes_without_duplicate(self, timer, clock):
        timer.start()
        timer.reset_exercise_timer()
        timer.reset_exercise_timer()
        assert clock.live_count == 2
        clock.advance(1)
        assert timer.exercise_time == 1

    def test_during_rest_stays_suspended(self, timer, clock):
        timer.start()
        clock.advance(3)
        timer.start_rest(5)
        timer.reset_exercise_timer()
        assert timer.exercise_time == 0
        assert timer.is_resting
        assert not timer.has_tick(Counter.EXERCISE)
        clock.advance(2)
        assert timer.exercise_time == 0
        assert timer.rest_time == 3

    def test_when_paused_does_not_start_ticking(self, timer, clock):
        timer.start()
        clock.advance(3)
        timer.pause()
        timer.reset_exercise_timer()
        assert clock.live_count == 0
        assert timer.exercise_time == 0


# ═══════════════════════════════════════════════════════════════════════════
#  SIGNALS
# ═══════════════════════════════════════════════════════════════════════════


class TestSignals:

    def test_tick_signals(self, timer, clock):
        total, exercise = SignalCollector(), SignalCollector()
        timer.total_tick.connect(total)
        timer.exercise_tick.connect(exercise)
        timer.start()
        clock.advance(2)
        assert total.items == [1, 2]
        assert exercise.items == [1, 2]

    def test_state_changed_carries_snapshot(self, timer):
        c = SignalCollector()
        timer.state_changed.connect(c)
        timer.start()
        assert c.last.is_running is True
        timer.pause()
        assert c.last.is_running is False

    def test_rest_started_and_finished(self, timer, clock):
        started, finished = SignalCollector(), SignalCollector()
        timer.rest_started.connect(started)
        timer.rest_finished.connect(finished)
        timer.start()
        timer.start_rest(2)
        clock.advance(2)
        assert started.items == [2]
        assert finished.items == [False]

        timer.start_rest(5)
        timer.skip_rest()
        assert finished.last is True

    def test_rest_ending_soon_fires_once(self, timer, clock):
        c = SignalCollector()
        timer.rest_ending_soon.connect(c)
        timer.start()
        timer.start_rest(6)
        clock.advance(6)
        assert c.items == [3]

    def test_rest_ending_soon_skipped_for_short_rests(self, timer, clock):
        c = SignalCollector()
        timer.rest_ending_soon.connect(c)
        timer.start()
        timer.start_rest(3)
        clock.advance(3)
        assert len(c) == 0

    def test_custom_warning_threshold(self, qapp):
        clock = ManualTickSource()
        t = WorkoutTimer(clock=clock, rest_warning_seconds=10)
        c = SignalCollector()
        t.rest_ending_soon.connect(c)
        t.start_rest(15)
        clock.advance(5)
        assert c.items == [10]
        t.close()


# ═══════════════════════════════════════════════════════════════════════════
#  TICK SOURCES
# ═══════════════════════════════════════════════════════════════════════════


class TestTickSources:

    def test_manual_cancel_mid_tick_skips_handle(self):
        clock = ManualTickSource()
        fired = []
        second = None

        def first():
            fired.append("first")
            clock.cancel(second)

        clock.schedule(first)
        second = clock.schedule(lambda: fired.append("second"))
        clock.advance(1)
        assert fired == ["first"]
        assert clock.live_count == 1

    def test_manual_schedule_mid_tick_waits_for_next(self):
        clock = ManualTickSource()
        fired = []
        spawned = []

        def spawner():
            if not spawned:
                spawned.append(clock.schedule(lambda: fired.append("late")))

        clock.schedule(spawner)
        clock.advance(1)
        assert fired == []
        clock.advance(1)
        assert fired == ["late"]

    def test_qt_source_tracks_timers(self, qapp):
        from repclock.timer.clock import QtTickSource, TICK_INTERVAL_MS

        source = QtTickSource()
        handle = source.schedule(lambda: None)
        assert handle.isActive()
        assert handle.interval() == TICK_INTERVAL_MS
        assert source.live_count == 1
        source.cancel(handle)
        assert source.live_count == 0
        source.cancel(handle)  # second cancel is harmless

    def test_timer_uses_qt_source_by_default(self, qapp):
        t = WorkoutTimer()
        t.start()
        assert t.has_tick(Counter.TOTAL)
        assert t.has_tick(Counter.EXERCISE)
        t.close()
        assert not t.has_tick(Counter.TOTAL)
