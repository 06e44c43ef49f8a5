"""Validation workflow endpoints: pending queue and gate decisions."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.api.auth import get_current_user
from formaflow.api.auth_helpers import get_training_session
from formaflow.core.db import get_db
from formaflow.core.workflow import available_gates, list_pending, validate_session
from formaflow.models import (
    PendingSessionRead,
    SessionValidationRequest,
    TrainingSession,
    TrainingSessionRead,
    User,
)

router = APIRouter(prefix="/training-sessions", tags=["session-validation"])


@router.get("/pending", response_model=list[PendingSessionRead])
async def get_validation_queue(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Sessions awaiting HR or HSE validation, earliest start first.

    Each entry lists the gates the caller may approve, so clients only
    offer legal actions. Re-fetch after any decision.
    """
    sessions = await list_pending(db)
    return [
        PendingSessionRead(
            **TrainingSessionRead.model_validate(s).model_dump(),
            available_gates=available_gates(s, current_user),
        )
        for s in sessions
    ]


@router.post("/{session_id}/validate", response_model=TrainingSessionRead)
async def validate(
    payload: SessionValidationRequest,
    session: TrainingSession = Depends(get_training_session),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a session at the HR or HSE gate."""
    return await validate_session(
        db,
        session,
        gate=payload.gate,
        approve=payload.approve,
        actor=current_user,
        expected_version=payload.expected_version,
        reason=payload.reason,
    )
