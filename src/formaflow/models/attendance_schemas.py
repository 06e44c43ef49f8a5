"""Pydantic schemas for attendance (pointage) API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from formaflow.core.validators import sanitize_html
from formaflow.models.enums import AttendanceMode


class AttendanceMark(BaseModel):
    """Mark a participant present, late or absent."""

    user_id: UUID
    present: bool = True
    late: bool = False
    mode: AttendanceMode = AttendanceMode.MANUAL
    notes: str | None = Field(None, max_length=1000)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return sanitize_html(v)

    @model_validator(mode="after")
    def check_late_implies_present(self) -> "AttendanceMark":
        if self.late and not self.present:
            raise ValueError("An absent participant cannot be marked late")
        return self


class AttendanceRead(BaseModel):
    """Schema for reading an attendance row."""

    id: UUID
    session_id: UUID
    user_id: UUID
    mode: str
    checkin_at: datetime | None
    checkout_at: datetime | None
    absent: bool
    late: bool
    hours_attended: Decimal | None
    marked_by: UUID | None
    notes: str | None

    model_config = ConfigDict(from_attributes=True)
