"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class SessionStatus(str, enum.Enum):
    """Training session lifecycle states."""

    PLANNED = "planned"
    AWAITING_HSE = "awaiting_hse"
    VALIDATED_HR = "validated_hr"
    VALIDATED_HSE = "validated_hse"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TrainingType(str, enum.Enum):
    """Training category; HSE trainings need a second validation gate."""

    HSE = "HSE"
    METIER = "Métier"


class AppRole(str, enum.Enum):
    """Actor roles."""

    SUPER_ADMIN = "super_admin"
    DRH = "drh"
    HR = "hr"
    HSE = "hse"
    MANAGER = "manager"
    FORMATEUR = "formateur"
    APPRENANT = "apprenant"


class AttendanceMode(str, enum.Enum):
    """How an attendance was recorded."""

    QR_CODE = "qr_code"
    MANUAL = "manual"
    MOBILE_OFFLINE = "mobile_offline"


class ValidationGate(str, enum.Enum):
    """Approval steps a session passes through."""

    HR = "hr"
    HSE = "hse"
