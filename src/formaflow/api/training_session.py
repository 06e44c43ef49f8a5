"""TrainingSession endpoints (schedule, list, get, audit trail)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.api.auth import get_current_user
from formaflow.api.auth_helpers import (
    SESSION_MANAGER_ROLES,
    get_training_session,
    require_roles,
)
from formaflow.core.audit import log_session_change
from formaflow.core.db import get_db
from formaflow.core.errors import InvalidStateError, NotFoundError
from formaflow.core.logging import get_logger
from formaflow.models import (
    SessionAuditLog,
    SessionAuditLogRead,
    Site,
    TrainingSession,
    TrainingSessionCreate,
    TrainingSessionRead,
    User,
)
from formaflow.models.enums import SessionStatus, TrainingType

logger = get_logger(__name__)

router = APIRouter(prefix="/training-sessions", tags=["training-sessions"])


@router.post("", response_model=TrainingSessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: TrainingSessionCreate,
    current_user: User = Depends(require_roles(*SESSION_MANAGER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Schedule a training session. New sessions always start planned."""
    site = await db.get(Site, payload.site_id)
    if not site:
        raise NotFoundError("Site", str(payload.site_id))
    if not site.active:
        raise InvalidStateError(
            f"Site {site.code} is inactive",
            details={"site_id": str(site.id)},
        )

    data = payload.model_dump()
    data["type"] = payload.type.value
    new_session = TrainingSession(
        **data,
        status=SessionStatus.PLANNED.value,
        created_by=current_user.id,
    )
    new_session.site = site
    db.add(new_session)
    await db.flush()

    log_session_change(
        db,
        new_session,
        changed_by=current_user.email,
        action="CREATE",
        old_values={},
        new_values={"status": new_session.status, "type": new_session.type},
    )
    await db.commit()
    await db.refresh(new_session)

    logger.info(
        "session.created",
        session_id=str(new_session.id),
        site_id=str(site.id),
        type=new_session.type,
        created_by=str(current_user.id),
    )
    return new_session


@router.get("", response_model=list[TrainingSessionRead])
async def list_sessions(
    status_filter: SessionStatus | None = Query(None, alias="status"),
    type_filter: TrainingType | None = Query(None, alias="type"),
    site_id: UUID | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List sessions by start time with optional status, type and site filters."""
    stmt = select(TrainingSession)

    if status_filter:
        stmt = stmt.where(TrainingSession.status == status_filter.value)
    if type_filter:
        stmt = stmt.where(TrainingSession.type == type_filter.value)
    if site_id:
        stmt = stmt.where(TrainingSession.site_id == site_id)

    stmt = stmt.order_by(TrainingSession.start_datetime.asc()).offset(skip).limit(limit)

    result = await db.execute(stmt)
    return result.scalars().all()


@router.get("/{session_id}", response_model=TrainingSessionRead)
async def get_session(
    session: TrainingSession = Depends(get_training_session),
    current_user: User = Depends(get_current_user),
):
    """Get training session details."""
    return session


@router.get("/{session_id}/audit-logs", response_model=list[SessionAuditLogRead])
async def get_session_audit_logs(
    session: TrainingSession = Depends(get_training_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=250),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Audit history of a session, most recent first."""
    stmt = (
        select(SessionAuditLog)
        .where(SessionAuditLog.session_id == session.id)
        .order_by(SessionAuditLog.changed_at.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return result.scalars().all()
