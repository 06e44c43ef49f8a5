"""Accounts. Every user has exactly one ``AppRole``."""

import uuid
from datetime import datetime

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from formaflow.core.db import Base
from formaflow.models.enums import AppRole
from formaflow.utils.datetime import now_utc


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String)
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    role: Mapped[str] = mapped_column(String(20), default=AppRole.APPRENANT.value, index=True)
    department: Mapped[str | None] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(default=now_utc)

    def has_role(self, *roles: AppRole | str) -> bool:
        return self.role in {AppRole(role).value for role in roles}

    @property
    def display_name(self) -> str:
        """Full name, or the email when neither name is filled in."""
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role}>"
