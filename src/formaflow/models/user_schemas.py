"""Pydantic schemas for User API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Public view of an actor."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    display_name: str
    role: str
    department: str | None = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
