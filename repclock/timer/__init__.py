"""Timer package."""

from .clock import ManualTickSource, QtTickSource, TickSource, TICK_INTERVAL_MS
from .engine import (
    WorkoutTimer,
    TimerState,
    Counter,
    format_time,
    REST_WARNING_SECONDS,
)

__all__ = [
    "WorkoutTimer",
    "TimerState",
    "Counter",
    "format_time",
    "REST_WARNING_SECONDS",
    "TickSource",
    "QtTickSource",
    "ManualTickSource",
    "TICK_INTERVAL_MS",
]
