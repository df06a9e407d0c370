"""Workout plans: what the session walks through.

A plan is an ordered list of exercises.  Each exercise has a set count
and either reps (strength work) or a duration in seconds (timed work),
plus the rest taken between sets.

JSON format::

    {
      "name": "Push day",
      "exercises": [
        {"name": "Bench press", "sets": 4, "reps": 8, "weight": 60, "restTime": 90},
        {"name": "Plank", "sets": 3, "duration": 45, "restTime": 30}
      ]
    }

``rest_time`` is accepted as well as ``restTime``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path


MAX_SETS = 20
MAX_REPS = 1000
MAX_DURATION = 2 * 60 * 60
MAX_WEIGHT = 1000
MAX_REST = 10 * 60
DEFAULT_REST = 60

# rough per-set time for rep-based work when estimating session length
_SECONDS_PER_REP_SET = 40


class PlanError(ValueError):
    """Raised for a workout plan that cannot be used."""


@dataclass
class ExercisePlan:
    name: str
    sets: int = 3
    reps: int | None = None
    duration: int | None = None  # seconds, timed exercises
    weight: float | None = None  # kg
    rest_time: int = DEFAULT_REST

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise PlanError("exercise name is required")
        _check_range(self.name, "sets", self.sets, 1, MAX_SETS, integer=True)
        if self.reps is not None:
            _check_range(self.name, "reps", self.reps, 1, MAX_REPS, integer=True)
        if self.duration is not None:
            _check_range(self.name, "duration", self.duration, 1, MAX_DURATION, integer=True)
        if self.weight is not None:
            _check_range(self.name, "weight", self.weight, 0, MAX_WEIGHT)
        _check_range(self.name, "rest_time", self.rest_time, 0, MAX_REST, integer=True)

    @property
    def is_timed(self) -> bool:
        return self.duration is not None

    def estimated_seconds(self) -> int:
        """Work plus rest between sets (no rest after the last set)."""
        per_set = self.duration if self.duration is not None else _SECONDS_PER_REP_SET
        return self.sets * per_set + (self.sets - 1) * self.rest_time


@dataclass
class WorkoutPlan:
    name: str
    exercises: list[ExercisePlan] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.exercises:
            raise PlanError(f"workout {self.name!r} has no exercises")

    def __len__(self) -> int:
        return len(self.exercises)

    @property
    def total_sets(self) -> int:
        return sum(ex.sets for ex in self.exercises)

    @property
    def estimated_duration(self) -> int:
        """Seconds, including the rest taken between exercises."""
        work = sum(ex.estimated_seconds() for ex in self.exercises)
        between = sum(ex.rest_time for ex in self.exercises[:-1])
        return work + between


def _check_range(
    owner: str, field_name: str, value, low, high, *, integer: bool = False,
) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PlanError(f"{owner}: {field_name} must be a number, got {value!r}")
    if integer and not isinstance(value, int):
        raise PlanError(f"{owner}: {field_name} must be a whole number, got {value!r}")
    if not low <= value <= high:
        raise PlanError(f"{owner}: {field_name} must be between {low} and {high}, got {value}")


# ── loading ───────────────────────────────────────────────────────────────


def plan_from_dict(data: dict) -> WorkoutPlan:
    if not isinstance(data, dict):
        raise PlanError("workout plan must be a JSON object")
    raw_exercises = data.get("exercises")
    if not isinstance(raw_exercises, list):
        raise PlanError("workout plan needs an 'exercises' list")

    exercises: list[ExercisePlan] = []
    for i, raw in enumerate(raw_exercises):
        if not isinstance(raw, dict):
            raise PlanError(f"exercise #{i + 1} must be an object")
        rest = raw.get("restTime", raw.get("rest_time", DEFAULT_REST))
        exercises.append(ExercisePlan(
            name=str(raw.get("name") or ""),
            sets=raw.get("sets", 3),
            reps=raw.get("reps"),
            duration=raw.get("duration"),
            weight=raw.get("weight"),
            rest_time=rest,
        ))
    return WorkoutPlan(name=str(data.get("name") or "Workout"), exercises=exercises)


def load_plan(path: Path | str) -> WorkoutPlan:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PlanError(f"cannot read {path}: {exc}") from exc
    except ValueError as exc:
        raise PlanError(f"{path} is not valid JSON: {exc}") from exc
    return plan_from_dict(data)


def demo_plan(rest_seconds: int = DEFAULT_REST) -> WorkoutPlan:
    """Small bodyweight circuit used when no plan file is given."""
    return WorkoutPlan(
        name="Quick circuit",
        exercises=[
            ExercisePlan("Jumping jacks", sets=2, duration=30, rest_time=rest_seconds),
            ExercisePlan("Push-ups", sets=3, reps=10, rest_time=rest_seconds),
            ExercisePlan("Plank", sets=2, duration=45, rest_time=rest_seconds),
        ],
    )
