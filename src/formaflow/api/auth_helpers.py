"""Role-based authorization helpers."""

from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.api.auth import get_current_user
from formaflow.core.db import get_db
from formaflow.core.errors import NotFoundError
from formaflow.core.logging import get_logger
from formaflow.models import TrainingSession, User
from formaflow.models.enums import AppRole

logger = get_logger(__name__)

# Roles allowed to schedule sessions and export them
SESSION_MANAGER_ROLES = (AppRole.HR, AppRole.DRH, AppRole.SUPER_ADMIN)

# Roles allowed to record attendance
ATTENDANCE_MARKER_ROLES = (
    AppRole.FORMATEUR,
    AppRole.HR,
    AppRole.DRH,
    AppRole.MANAGER,
    AppRole.SUPER_ADMIN,
)

SITE_ADMIN_ROLES = (AppRole.DRH, AppRole.SUPER_ADMIN)


def require_roles(*roles: AppRole):
    """Build a dependency that admits only users holding one of ``roles``."""

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.has_role(*roles):
            logger.warning(
                "auth.permission_denied",
                user_id=str(current_user.id),
                required_roles=[r.value for r in roles],
                user_role=current_user.role,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You don't have permission to access this resource",
            )
        return current_user

    return dependency


def parse_session_uuid(session_id: str) -> UUID:
    try:
        return UUID(session_id)
    except ValueError:
        raise NotFoundError("TrainingSession", session_id) from None


async def get_training_session(
    session_id: str,
    db: AsyncSession = Depends(get_db),
) -> TrainingSession:
    """Load the session named in the path or raise 404."""
    session = await TrainingSession.get_by_id(db, parse_session_uuid(session_id))
    if not session:
        raise NotFoundError("TrainingSession", session_id)
    return session
