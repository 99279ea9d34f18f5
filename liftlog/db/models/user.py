from datetime import datetime

from sqlalchemy import DateTime, Identity, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from liftlog.db.session import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("clerkId", name="users_clerkId_unique"),
        UniqueConstraint("email", name="users_email_unique"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(always=True), primary_key=True)
    # Identifier issued by the external identity provider.
    external_id: Mapped[str] = mapped_column("clerkId", String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
