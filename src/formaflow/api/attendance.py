"""Attendance (pointage) endpoints for validated sessions."""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.api.auth import get_current_user
from formaflow.api.auth_helpers import ATTENDANCE_MARKER_ROLES, get_training_session, require_roles
from formaflow.core.db import get_db
from formaflow.core.errors import InvalidStateError, NotFoundError
from formaflow.core.logging import get_logger
from formaflow.core.workflow import VALIDATED_STATUSES
from formaflow.models import Attendance, AttendanceMark, AttendanceRead, TrainingSession, User
from formaflow.models.enums import SessionStatus
from formaflow.utils.datetime import now_utc

logger = get_logger(__name__)

router = APIRouter(prefix="/training-sessions", tags=["attendance"])

# Attendance can only be taken once a session passed all its gates
ATTENDANCE_OPEN_STATUSES = frozenset(
    status.value for status in VALIDATED_STATUSES | {SessionStatus.ONGOING}
)


def _ensure_attendance_open(session: TrainingSession) -> None:
    if session.status not in ATTENDANCE_OPEN_STATUSES:
        raise InvalidStateError(
            f"Attendance cannot be recorded for a {session.status} session",
            details={"session_id": str(session.id), "status": session.status},
        )


def compute_hours(checkin_at, checkout_at) -> Decimal:
    """Hours between check-in and check-out, rounded to two decimals."""
    seconds = Decimal(str((checkout_at - checkin_at).total_seconds()))
    return (seconds / Decimal("3600")).quantize(Decimal("0.01"))


@router.get("/{session_id}/attendance", response_model=list[AttendanceRead])
async def list_attendance(
    session: TrainingSession = Depends(get_training_session),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All attendance rows of a session."""
    stmt = (
        select(Attendance)
        .where(Attendance.session_id == session.id)
        .order_by(Attendance.created_at.asc())
    )
    result = await db.execute(stmt)
    return result.scalars().all()


@router.post("/{session_id}/attendance", response_model=AttendanceRead)
async def mark_attendance(
    payload: AttendanceMark,
    session: TrainingSession = Depends(get_training_session),
    current_user: User = Depends(require_roles(*ATTENDANCE_MARKER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Record a participant as present, late or absent (creates or updates)."""
    _ensure_attendance_open(session)

    participant = await db.get(User, payload.user_id)
    if not participant:
        raise NotFoundError("User", str(payload.user_id))

    stmt = select(Attendance).where(
        (Attendance.session_id == session.id) & (Attendance.user_id == payload.user_id)
    )
    result = await db.execute(stmt)
    attendance = result.scalar_one_or_none()

    if attendance is None:
        attendance = Attendance(session_id=session.id, user_id=payload.user_id)
        db.add(attendance)

    attendance.mode = payload.mode.value
    attendance.absent = not payload.present
    attendance.late = payload.late
    attendance.marked_by = current_user.id
    attendance.notes = payload.notes

    if payload.present:
        attendance.checkin_at = attendance.checkin_at or now_utc()
    else:
        attendance.checkin_at = None
        attendance.checkout_at = None
        attendance.hours_attended = None

    await db.commit()
    await db.refresh(attendance)

    logger.info(
        "attendance.marked",
        session_id=str(session.id),
        user_id=str(payload.user_id),
        absent=attendance.absent,
        late=attendance.late,
        marked_by=str(current_user.id),
    )
    return attendance


@router.post(
    "/{session_id}/attendance/{attendance_id}/checkout",
    response_model=AttendanceRead,
)
async def checkout_attendance(
    attendance_id: UUID,
    session: TrainingSession = Depends(get_training_session),
    current_user: User = Depends(require_roles(*ATTENDANCE_MARKER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Close a check-in and compute the hours attended."""
    attendance = await db.get(Attendance, attendance_id)
    if not attendance or attendance.session_id != session.id:
        raise NotFoundError("Attendance", str(attendance_id))

    if attendance.absent or attendance.checkin_at is None:
        raise InvalidStateError("Participant has not checked in")
    if attendance.checkout_at is not None:
        raise InvalidStateError("Participant already checked out")

    attendance.checkout_at = now_utc()
    attendance.hours_attended = compute_hours(attendance.checkin_at, attendance.checkout_at)

    await db.commit()
    await db.refresh(attendance)

    logger.info(
        "attendance.checked_out",
        session_id=str(session.id),
        attendance_id=str(attendance.id),
        hours_attended=str(attendance.hours_attended),
    )
    return attendance
