"""Workout session package."""

from .controller import WorkoutSessionController, SessionStatus
from .plan import (
    WorkoutPlan,
    ExercisePlan,
    PlanError,
    load_plan,
    plan_from_dict,
    demo_plan,
)

__all__ = [
    "WorkoutSessionController",
    "SessionStatus",
    "WorkoutPlan",
    "ExercisePlan",
    "PlanError",
    "load_plan",
    "plan_from_dict",
    "demo_plan",
]
