"""Database package."""

from .db import configure_engine, get_session, init_db, recent_workouts
from .models import WorkoutRecord, ExerciseRecord

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "recent_workouts",
    "WorkoutRecord",
    "ExerciseRecord",
]
