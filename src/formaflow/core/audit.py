"""Audit logging utilities for tracking TrainingSession changes."""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.models.session_audit_log import SessionAuditLog
from formaflow.models.training_session import TrainingSession
from formaflow.utils.datetime import now_utc


def serialize_value(value: Any) -> Any:
    """Make a column value JSON-serializable."""
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def log_session_change(
    db: AsyncSession,
    session: TrainingSession,
    changed_by: str,
    action: str,
    old_values: dict[str, Any],
    new_values: dict[str, Any],
    reason: str | None = None,
) -> SessionAuditLog:
    """Add an audit entry for a TrainingSession change to the unit of work.

    The entry is flushed together with the change it describes.

    Args:
        db: Database session
        session: The TrainingSession being modified
        changed_by: Email of the acting user
        action: CREATE, APPROVE_HR, REJECT_HR, APPROVE_HSE or REJECT_HSE
        old_values: Dict of {field_name: old_value}
        new_values: Dict of {field_name: new_value}
        reason: Optional free-text justification

    Returns:
        The pending SessionAuditLog record
    """
    changed_fields = [k for k in new_values.keys() if old_values.get(k) != new_values[k]]

    audit_log = SessionAuditLog(
        session_id=session.id,
        changed_by=changed_by,
        action=action,
        changed_fields=changed_fields,
        old_values={k: serialize_value(old_values.get(k)) for k in changed_fields},
        new_values={k: serialize_value(new_values[k]) for k in changed_fields},
        reason=reason,
        changed_at=now_utc(),
    )

    db.add(audit_log)
    return audit_log
