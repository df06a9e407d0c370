"""Terminal session view.

Renders a running ``WorkoutSessionController`` as one status line per
second and plays the part of the user: a set is marked done once its
work time has elapsed (the exercise's ``duration`` for timed work, a
fixed allowance for rep-based work).  Quits the Qt event loop when the
session ends.
"""

from __future__ import annotations

import sys
from typing import TextIO

from PyQt6.QtCore import QCoreApplication, QObject, QTimer

from .session.controller import SessionStatus, WorkoutSessionController
from .timer.engine import format_time


REP_SET_SECONDS = 40


class TerminalSessionView(QObject):
    """Prints timer state and auto-completes sets."""

    def __init__(
        self,
        controller: WorkoutSessionController,
        parent: QObject | None = None,
        *,
        stream: TextIO | None = None,
        rep_set_seconds: int = REP_SET_SECONDS,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._timer = controller.timer
        self._out = stream or sys.stdout
        self._rep_set_seconds = rep_set_seconds
        self._set_mark = 0  # exercise_time when the current set began

        self._timer.total_tick.connect(self._on_total_tick)
        self._timer.exercise_tick.connect(self._on_exercise_tick)
        self._timer.rest_started.connect(self._on_rest_started)
        self._timer.rest_finished.connect(self._on_rest_finished)
        controller.exercise_changed.connect(self._on_exercise_changed)
        controller.set_completed.connect(self._on_set_completed)
        controller.status_changed.connect(self._on_status_changed)
        controller.session_completed.connect(self._on_session_completed)

    # ── rendering ─────────────────────────────────────────────────────

    def status_line(self) -> str:
        c, t = self._controller, self._timer
        ex = c.current_exercise
        parts = [
            f"[{t.total_time_formatted}]",
            f"{c.current_index + 1}/{len(c.plan)} {ex.name}",
            f"set {min(c.sets_done() + 1, ex.sets)}/{ex.sets}",
        ]
        if t.is_resting:
            parts.append(f"REST {t.rest_time_formatted}")
        else:
            parts.append(f"work {t.exercise_time_formatted}")
        if not t.is_running:
            parts.append("(paused)")
        return "  ".join(parts)

    def _print(self, text: str) -> None:
        print(text, file=self._out, flush=True)

    # ── slots ─────────────────────────────────────────────────────────

    def _on_total_tick(self, _total: int) -> None:
        self._print(self.status_line())

    def _on_exercise_tick(self, exercise_time: int) -> None:
        c = self._controller
        if c.status != SessionStatus.ACTIVE or exercise_time == 0:
            return
        ex = c.current_exercise
        needed = ex.duration if ex.is_timed else self._rep_set_seconds
        if exercise_time - self._set_mark >= needed:
            c.complete_set()

    def _on_set_completed(self, index: int, sets_done: int) -> None:
        self._set_mark = self._timer.exercise_time
        ex = self._controller.plan.exercises[index]
        self._print(f"  ✓ {ex.name}: set {sets_done}/{ex.sets}")

    def _on_exercise_changed(self, index: int) -> None:
        self._set_mark = 0
        self._print(f"→ {self._controller.plan.exercises[index].name}")

    def _on_rest_started(self, duration: int) -> None:
        self._print(f"  rest {format_time(duration)}")

    def _on_rest_finished(self, skipped: bool) -> None:
        self._print("  rest skipped" if skipped else "  go!")

    def _on_status_changed(self, status: SessionStatus) -> None:
        if status == SessionStatus.STOPPED:
            self._print("Workout stopped.")
            self._quit()

    def _on_session_completed(self, summary: dict) -> None:
        self._print(
            f"Done: {summary['plan_name']} in {format_time(summary['total_seconds'])} "
            f"({format_time(summary['active_seconds'])} active, "
            f"{summary['sets_completed']} sets)"
        )
        self._quit()

    def _quit(self) -> None:
        app = QCoreApplication.instance()
        if app is not None:
            QTimer.singleShot(0, app.quit)
