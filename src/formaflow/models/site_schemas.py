"""Pydantic schemas for Site API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formaflow.core.validators import sanitize_html, validate_site_code, validate_text


class SiteCreate(BaseModel):
    """Schema for registering a site."""

    code: str = Field(..., min_length=2, max_length=20)
    name: str = Field(..., min_length=1, max_length=200)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    region: str | None = Field(None, max_length=100)

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        return validate_site_code(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_text(v, field_name="Site name", min_length=1, max_length=200)

    @field_validator("address", "city", "region")
    @classmethod
    def sanitize_optional(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class SiteRead(BaseModel):
    """Schema for reading a site."""

    id: UUID
    code: str
    name: str
    address: str | None
    city: str | None
    region: str | None
    active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
