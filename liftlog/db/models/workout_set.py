from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Identity, Index, Integer, Numeric, String, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column

from liftlog.db.session import Base


class WorkoutSet(Base):
    __tablename__ = "sets"
    __table_args__ = (
        Index("sets_exercise_order", "exerciseId", "setNumber"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(always=True), primary_key=True)
    exercise_id: Mapped[int] = mapped_column(
        "exerciseId",
        ForeignKey("exercises.id", ondelete="CASCADE", name="sets_exerciseId_exercises_id_fk"),
        nullable=False,
    )
    set_number: Mapped[int] = mapped_column("setNumber", Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    weight_unit: Mapped[str] = mapped_column("weightUnit", String(10), nullable=False, server_default="lbs")
    rpe: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rir: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_warmup: Mapped[bool] = mapped_column("isWarmup", Boolean, nullable=False, server_default=false())
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(), server_default=func.now(), nullable=False)
