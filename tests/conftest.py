"""Shared pytest fixtures for RepClock tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QCoreApplication

from repclock.database.db import configure_engine, init_db
from repclock.session.controller import WorkoutSessionController
from repclock.session.plan import ExercisePlan, WorkoutPlan
from repclock.timer.clock import ManualTickSource
from repclock.timer.engine import WorkoutTimer


@pytest.fixture(scope="session")
def qapp():
    """A single Qt application instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return ManualTickSource()


@pytest.fixture
def timer(qapp, clock):
    """WorkoutTimer driven by the manual clock."""
    t = WorkoutTimer(parent=None, clock=clock)
    yield t
    t.close()


@pytest.fixture
def plan():
    return WorkoutPlan(
        name="Test day",
        exercises=[
            ExercisePlan("Squat", sets=2, reps=5, rest_time=3),
            ExercisePlan("Plank", sets=1, duration=20, rest_time=2),
            ExercisePlan("Row", sets=2, reps=8, rest_time=0),
        ],
    )


@pytest.fixture
def session(qapp, clock, plan):
    """Session controller with DB enabled and no sound."""
    c = WorkoutSessionController(plan, clock=clock, db_enabled=True)
    yield c
    c.close()


@pytest.fixture
def session_no_db(qapp, clock, plan):
    c = WorkoutSessionController(plan, clock=clock, db_enabled=False)
    yield c
    c.close()
