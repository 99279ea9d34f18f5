from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Identity, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from liftlog.db.session import Base


class Exercise(Base):
    __tablename__ = "exercises"
    __table_args__ = (
        Index("exercises_workout_order", "workoutId", "exerciseOrder"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(always=True), primary_key=True)
    workout_id: Mapped[int] = mapped_column(
        "workoutId",
        ForeignKey("workouts.id", ondelete="CASCADE", name="exercises_workoutId_workouts_id_fk"),
        nullable=False,
    )
    exercise_name: Mapped[str] = mapped_column("exerciseName", String(255), nullable=False)
    exercise_order: Mapped[int] = mapped_column("exerciseOrder", Integer, nullable=False, server_default="0")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
