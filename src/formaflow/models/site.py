"""Site model for training locations."""

import uuid
from datetime import datetime

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from formaflow.core.db import Base
from formaflow.utils.datetime import now_utc


class Site(Base):
    """
    A physical site (plant, office, training centre) hosting sessions.

    Sessions are always attached to one site; inactive sites are kept for
    history but cannot receive new sessions.
    """

    __tablename__ = "sites"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    code: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )

    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    region: Mapped[str | None] = mapped_column(String(100), nullable=True)

    active: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
    )

    def __repr__(self) -> str:
        return f"<Site(code={self.code}, name={self.name}, active={self.active})>"
