from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Identity, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from liftlog.db.session import Base


class Workout(Base):
    __tablename__ = "workouts"
    __table_args__ = (
        Index("workouts_user_started", "userId", "startedAt"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(always=True), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        "userId",
        ForeignKey("users.id", ondelete="CASCADE", name="workouts_userId_users_id_fk"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column("startedAt", DateTime(), server_default=func.now(), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column("completedAt", DateTime(), nullable=True)
    # Minutes; optional and never derived from the timestamps.
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
