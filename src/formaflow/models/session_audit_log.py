"""Audit logging model for TrainingSession changes."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formaflow.core.db import Base
from formaflow.utils.datetime import now_utc

if TYPE_CHECKING:
    from formaflow.models.training_session import TrainingSession


class SessionAuditLog(Base):
    """Immutable audit trail for creation and every validation decision."""

    __tablename__ = "session_audit_logs"

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

    session: Mapped["TrainingSession"] = relationship(
        "TrainingSession",
        foreign_keys=[session_id],
    )

    # WHO
    changed_by: Mapped[str] = mapped_column(String(255), nullable=False)

    # WHEN
    changed_at: Mapped[datetime] = mapped_column(default=now_utc)

    # WHAT: CREATE, APPROVE_HR, REJECT_HR, APPROVE_HSE, REJECT_HSE
    action: Mapped[str] = mapped_column(String(20), nullable=False)

    changed_fields: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    old_values: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    new_values: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SessionAuditLog(session_id={self.session_id}, "
            f"action={self.action}, changed_by={self.changed_by})>"
        )
