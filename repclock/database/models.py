"""SQLAlchemy ORM models for RepClock."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class WorkoutRecord(Base):
    """One workout session, finished or abandoned."""

    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_name = Column(String(120), nullable=False)
    start_time = Column(DateTime, nullable=False, default=datetime.now)
    end_time = Column(DateTime, nullable=True)
    total_seconds = Column(Integer, nullable=False, default=0)
    active_seconds = Column(Integer, nullable=False, default=0)  # excludes rest
    status = Column(String(20), nullable=False, default="active")  # active | completed | stopped
    exercises_completed = Column(Integer, nullable=False, default=0)
    total_exercises = Column(Integer, nullable=False, default=0)

    exercises = relationship(
        "ExerciseRecord",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="ExerciseRecord.exercise_index",
    )

    @property
    def completion_percent(self) -> float:
        if not self.total_exercises:
            return 0.0
        return 100.0 * self.exercises_completed / self.total_exercises

    def __repr__(self) -> str:
        return (
            f"<WorkoutRecord id={self.id} plan={self.plan_name!r} "
            f"status={self.status}>"
        )


class ExerciseRecord(Base):
    """Time and sets logged against one exercise of a workout."""

    __tablename__ = "workout_exercises"

    id = Column(Integer, primary_key=True, autoincrement=True)
    workout_id = Column(Integer, ForeignKey("workouts.id"), nullable=False)
    exercise_index = Column(Integer, nullable=False)
    name = Column(String(120), nullable=False)
    sets_completed = Column(Integer, nullable=False, default=0)
    duration_seconds = Column(Integer, nullable=False, default=0)

    workout = relationship("WorkoutRecord", back_populates="exercises")

    def __repr__(self) -> str:
        return (
            f"<ExerciseRecord #{self.exercise_index} {self.name!r} "
            f"sets={self.sets_completed}>"
        )
