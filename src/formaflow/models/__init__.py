"""Domain models package."""

from formaflow.models.attendance import Attendance
from formaflow.models.attendance_schemas import AttendanceMark, AttendanceRead
from formaflow.models.enums import (
    AppRole,
    AttendanceMode,
    SessionStatus,
    TrainingType,
    ValidationGate,
)
from formaflow.models.session_audit_log import SessionAuditLog
from formaflow.models.site import Site
from formaflow.models.site_schemas import SiteCreate, SiteRead
from formaflow.models.training_session import TrainingSession
from formaflow.models.training_session_schemas import (
    PendingSessionRead,
    SessionAuditLogRead,
    SessionValidationRequest,
    TrainingSessionCreate,
    TrainingSessionRead,
)
from formaflow.models.user import User
from formaflow.models.user_schemas import UserResponse

__all__ = [
    "AppRole",
    "Attendance",
    "AttendanceMark",
    "AttendanceMode",
    "AttendanceRead",
    "PendingSessionRead",
    "SessionAuditLog",
    "SessionAuditLogRead",
    "SessionStatus",
    "SessionValidationRequest",
    "Site",
    "SiteCreate",
    "SiteRead",
    "TrainingSession",
    "TrainingSessionCreate",
    "TrainingSessionRead",
    "TrainingType",
    "User",
    "UserResponse",
    "ValidationGate",
]
