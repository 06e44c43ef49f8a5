"""Attendance (pointage) model: one row per participant per session."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from formaflow.core.db import Base
from formaflow.models.enums import AttendanceMode
from formaflow.utils.datetime import now_utc


class Attendance(Base):
    """Check-in/check-out record of a participant for a training session."""

    __tablename__ = "attendances"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_attendance_session_user"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("training_sessions.id"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    mode: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AttendanceMode.MANUAL.value,
    )

    checkin_at: Mapped[datetime | None] = mapped_column(nullable=True)
    checkout_at: Mapped[datetime | None] = mapped_column(nullable=True)

    absent: Mapped[bool] = mapped_column(default=False, nullable=False)
    late: Mapped[bool] = mapped_column(default=False, nullable=False)

    hours_attended: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    marked_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    def __repr__(self) -> str:
        return (
            f"<Attendance(session_id={self.session_id}, user_id={self.user_id}, "
            f"absent={self.absent}, late={self.late})>"
        )
