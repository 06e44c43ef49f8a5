"""Pydantic schemas for TrainingSession API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from formaflow.core.validators import sanitize_html, validate_text
from formaflow.models.enums import TrainingType, ValidationGate
from formaflow.utils.datetime import to_utc_naive


class TrainingSessionCreate(BaseModel):
    """Schema for scheduling a new training session (always created planned)."""

    title: str = Field(..., max_length=200)
    description: str | None = Field(None, max_length=2000)
    type: TrainingType
    site_id: UUID
    location: str = Field(..., max_length=200)
    start_datetime: datetime
    end_datetime: datetime
    duration_hours: int = Field(..., ge=1, le=40)
    capacity: int = Field(20, ge=1, le=100)
    urgent: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return validate_text(v, field_name="Title", min_length=3, max_length=200)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v: str) -> str:
        return validate_text(v, field_name="Location", min_length=2, max_length=200)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return sanitize_html(v)

    @field_validator("start_datetime", "end_datetime")
    @classmethod
    def normalize_datetime(cls, v: datetime) -> datetime:
        """Store naive UTC."""
        return to_utc_naive(v)

    @model_validator(mode="after")
    def check_schedule(self) -> "TrainingSessionCreate":
        """End must come after start."""
        if self.end_datetime <= self.start_datetime:
            raise ValueError("end_datetime must be after start_datetime")
        return self


class TrainingSessionRead(BaseModel):
    """Schema for reading a training session from the database."""

    id: UUID
    title: str
    description: str | None
    type: str
    status: str

    site_id: UUID
    site_name: str | None = None
    requires_hse: bool
    location: str
    start_datetime: datetime
    end_datetime: datetime
    duration_hours: int
    capacity: int
    urgent: bool

    created_by: UUID
    validated_hr_at: datetime | None
    validated_hr_by: UUID | None
    validated_hse_at: datetime | None
    validated_hse_by: UUID | None

    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PendingSessionRead(TrainingSessionRead):
    """Validation queue entry: a session plus the gates the caller may act on."""

    available_gates: list[ValidationGate] = Field(default_factory=list)


class SessionValidationRequest(BaseModel):
    """Decision on one validation gate."""

    gate: ValidationGate
    approve: bool
    expected_version: int | None = Field(
        None, ge=1, description="Reject the decision if the session changed since it was read"
    )
    reason: str | None = Field(None, max_length=500)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class SessionAuditLogRead(BaseModel):
    """One audit trail entry."""

    id: UUID
    session_id: UUID
    action: str
    changed_by: str
    changed_at: datetime
    changed_fields: list[str]
    old_values: dict
    new_values: dict
    reason: str | None

    model_config = ConfigDict(from_attributes=True)
