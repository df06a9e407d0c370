"""Session controller: walks a WorkoutPlan and drives the WorkoutTimer.

States
------
IDLE        Plan loaded, clock not started.
ACTIVE      Clock running.
PAUSED      Clock frozen (rest countdown frozen too).
COMPLETED   Finished normally; record saved as completed.
STOPPED     Abandoned; record saved as stopped.

Gestures that make no sense in the current state are ignored, the same
way the timer ignores ``start()`` while already running.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from ..timer.clock import TickSource
from ..timer.engine import WorkoutTimer, REST_WARNING_SECONDS
from .plan import ExercisePlan, WorkoutPlan


log = logging.getLogger(__name__)


class SessionStatus(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    STOPPED = "stopped"


_IN_PROGRESS = (SessionStatus.ACTIVE, SessionStatus.PAUSED)


class WorkoutSessionController(QObject):
    """One workout, start to finish.

    Signals
    -------
    status_changed(status: SessionStatus)
    exercise_changed(index: int)
    set_completed(exercise_index: int, sets_done: int)
    session_completed(summary: dict)
        Emitted by ``finish()``.  Keys: ``plan_name``, ``status``,
        ``start_time``, ``end_time``, ``total_seconds``,
        ``active_seconds``, ``exercises_completed``, ``total_exercises``,
        ``sets_completed``, ``db_workout_id``.
    """

    status_changed = pyqtSignal(object)
    exercise_changed = pyqtSignal(int)
    set_completed = pyqtSignal(int, int)
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        plan: WorkoutPlan,
        parent: QObject | None = None,
        *,
        clock: TickSource | None = None,
        sounds=None,
        db_enabled: bool = True,
        rest_warning_seconds: int = REST_WARNING_SECONDS,
    ) -> None:
        super().__init__(parent)
        self._plan = plan
        self._timer = WorkoutTimer(
            self, clock=clock, rest_warning_seconds=rest_warning_seconds,
        )
        self._sounds = sounds
        self._db_enabled = db_enabled

        self._status = SessionStatus.IDLE
        self._index = 0
        self._sets_done: list[int] = [0] * len(plan)
        self._exercise_seconds: list[int] = [0] * len(plan)
        self._completed: set[int] = set()
        self._start_time: datetime | None = None
        self._end_time: datetime | None = None
        self._db_workout_id: int | None = None

        self._timer.rest_started.connect(lambda _duration: self._play("rest"))
        self._timer.rest_ending_soon.connect(lambda _left: self._play("warning"))

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def plan(self) -> WorkoutPlan:
        return self._plan

    @property
    def timer(self) -> WorkoutTimer:
        return self._timer

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_exercise(self) -> ExercisePlan:
        return self._plan.exercises[self._index]

    @property
    def is_last_exercise(self) -> bool:
        return self._index == len(self._plan) - 1

    def sets_done(self, index: int | None = None) -> int:
        return self._sets_done[self._index if index is None else index]

    def exercise_seconds(self, index: int) -> int:
        """Banked exercise time for *index* (excludes the live counter)."""
        return self._exercise_seconds[index]

    @property
    def exercises_completed(self) -> int:
        return len(self._completed)

    @property
    def progress_percent(self) -> float:
        if self._status == SessionStatus.COMPLETED:
            return 100.0
        return (self._index + 1) / len(self._plan) * 100.0

    @property
    def db_workout_id(self) -> int | None:
        return self._db_workout_id

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def begin(self) -> None:
        if self._status != SessionStatus.IDLE:
            return
        self._start_time = datetime.now()
        if self._db_enabled:
            self._persist_start()
        self._set_status(SessionStatus.ACTIVE)
        self._timer.start()
        self._play("start")

    def pause(self) -> None:
        if self._status != SessionStatus.ACTIVE:
            return
        self._timer.pause()
        self._set_status(SessionStatus.PAUSED)

    def resume(self) -> None:
        if self._status != SessionStatus.PAUSED:
            return
        self._set_status(SessionStatus.ACTIVE)
        self._timer.start()

    def toggle_pause(self) -> None:
        if self._status == SessionStatus.ACTIVE:
            self.pause()
        elif self._status == SessionStatus.PAUSED:
            self.resume()

    def complete_set(self) -> None:
        """Log one set of the current exercise.

        Rests for the exercise's rest time between sets; the last set
        moves straight on to the next exercise (with its rest).
        """
        if self._status != SessionStatus.ACTIVE:
            return
        exercise = self.current_exercise
        self._sets_done[self._index] += 1
        done = self._sets_done[self._index]
        self.set_completed.emit(self._index, done)

        if done >= exercise.sets:
            self.next_exercise()
        elif exercise.rest_time > 0:
            self._timer.start_rest(exercise.rest_time)

    def next_exercise(self, rest: bool = True) -> None:
        if self._status not in _IN_PROGRESS:
            return
        self._completed.add(self._index)
        if self.is_last_exercise:
            self.finish()
            return

        exercise = self.current_exercise
        if rest and self._status == SessionStatus.ACTIVE and exercise.rest_time > 0:
            self._timer.start_rest(exercise.rest_time)
        self._bank_exercise_time()
        self._index += 1
        log.info("exercise %d/%d: %s", self._index + 1, len(self._plan),
                 self.current_exercise.name)
        self.exercise_changed.emit(self._index)

    def previous_exercise(self) -> None:
        if self._status not in _IN_PROGRESS or self._index == 0:
            return
        self._bank_exercise_time()
        self._index -= 1
        self.exercise_changed.emit(self._index)

    def skip_rest(self) -> None:
        self._timer.skip_rest()

    def finish(self) -> None:
        if self._status not in _IN_PROGRESS:
            return
        self._timer.pause()
        self._bank_exercise_time()
        self._end(SessionStatus.COMPLETED)
        self.session_completed.emit(self.summary())
        self._play("complete")

    def stop(self) -> None:
        """Abandon the workout.  Progress so far is still recorded."""
        if self._status not in _IN_PROGRESS:
            return
        self._timer.pause()
        self._bank_exercise_time()
        self._end(SessionStatus.STOPPED)

    def close(self) -> None:
        """Release the timer's tick handles."""
        self._timer.close()

    def summary(self) -> dict:
        return {
            "plan_name": self._plan.name,
            "status": self._status.value,
            "start_time": self._start_time,
            "end_time": self._end_time,
            "total_seconds": self._timer.total_time,
            "active_seconds": sum(self._exercise_seconds) + self._timer.exercise_time,
            "exercises_completed": self.exercises_completed,
            "total_exercises": len(self._plan),
            "sets_completed": sum(self._sets_done),
            "db_workout_id": self._db_workout_id,
        }

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _bank_exercise_time(self) -> None:
        self._exercise_seconds[self._index] += self._timer.exercise_time
        self._timer.reset_exercise_timer()

    def _end(self, status: SessionStatus) -> None:
        self._end_time = datetime.now()
        self._set_status(status)
        if self._db_enabled:
            self._persist_end()

    def _set_status(self, status: SessionStatus) -> None:
        self._status = status
        log.info("session %r: %s", self._plan.name, status.value)
        self.status_changed.emit(status)

    def _play(self, cue: str) -> None:
        if self._sounds is not None:
            self._sounds.play(cue)

    # ── persistence ───────────────────────────────────────────────────

    def _persist_start(self) -> None:
        from ..database.db import get_session
        from ..database.models import WorkoutRecord

        with get_session() as db:
            record = WorkoutRecord(
                plan_name=self._plan.name,
                start_time=self._start_time,
                status=SessionStatus.ACTIVE.value,
                total_exercises=len(self._plan),
            )
            db.add(record)
            db.flush()
            self._db_workout_id = record.id

    def _persist_end(self) -> None:
        if self._db_workout_id is None:
            return
        from ..database.db import get_session
        from ..database.models import ExerciseRecord, WorkoutRecord

        with get_session() as db:
            record = db.get(WorkoutRecord, self._db_workout_id)
            if record is None:
                log.warning("workout record %s vanished", self._db_workout_id)
                return
            record.end_time = self._end_time
            record.status = self._status.value
            record.total_seconds = self._timer.total_time
            record.active_seconds = sum(self._exercise_seconds)
            record.exercises_completed = self.exercises_completed
            for i, exercise in enumerate(self._plan.exercises):
                if not self._sets_done[i] and not self._exercise_seconds[i]:
                    continue
                record.exercises.append(ExerciseRecord(
                    exercise_index=i,
                    name=exercise.name,
                    sets_completed=self._sets_done[i],
                    duration_seconds=self._exercise_seconds[i],
                ))
