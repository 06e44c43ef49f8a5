"""TrainingSession model: one scheduled training event and its validation state."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text, Uuid, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formaflow.core.db import Base
from formaflow.models.enums import SessionStatus, TrainingType
from formaflow.utils.datetime import now_utc

if TYPE_CHECKING:
    from formaflow.models.site import Site


class TrainingSession(Base):
    """Training session with its HR/HSE validation stamps."""

    __tablename__ = "training_sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('planned', 'awaiting_hse', 'validated_hr', 'validated_hse', "
            "'ongoing', 'completed', 'cancelled')",
            name="ck_training_sessions_status",
        ),
        CheckConstraint(
            "type = 'HSE' OR validated_hse_at IS NULL",
            name="ck_training_sessions_hse_stamp_only_for_hse",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TrainingType.METIER.value,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=SessionStatus.PLANNED.value,
        index=True,
    )

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id"),
        nullable=False,
        index=True,
    )

    site: Mapped["Site"] = relationship("Site", lazy="selectin")

    # Scheduling / capacity (descriptive only)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    start_datetime: Mapped[datetime] = mapped_column(nullable=False, index=True)
    end_datetime: Mapped[datetime] = mapped_column(nullable=False)
    duration_hours: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    urgent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # HR gate
    validated_hr_at: Mapped[datetime | None] = mapped_column(nullable=True)
    validated_hr_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    # HSE gate (HSE trainings only)
    validated_hse_at: Mapped[datetime | None] = mapped_column(nullable=True)
    validated_hse_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    # Row version for optimistic concurrency, bumped on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def site_name(self) -> str | None:
        return self.site.name if self.site else None

    @property
    def requires_hse(self) -> bool:
        return self.type == TrainingType.HSE.value

    @staticmethod
    async def get_by_id(db: AsyncSession, session_id: uuid.UUID) -> "TrainingSession | None":
        """Fetch a single session by primary key."""
        stmt = select(TrainingSession).where(TrainingSession.id == session_id)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_status(
        db: AsyncSession,
        statuses: Iterable[SessionStatus | str],
    ) -> list["TrainingSession"]:
        """List sessions whose status is in ``statuses``, earliest start first.

        Args:
            db: Database session
            statuses: Status values to include

        Returns:
            A snapshot list; callers re-query after any mutation.
        """
        values = [SessionStatus(s).value for s in statuses]
        stmt = (
            select(TrainingSession)
            .where(TrainingSession.status.in_(values))
            .order_by(TrainingSession.start_datetime.asc(), TrainingSession.created_at.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    def __repr__(self) -> str:
        return (
            f"<TrainingSession(id={self.id}, type={self.type}, "
            f"status={self.status}, version={self.version})>"
        )
