"""Cookie-session login, logout and the ``get_current_user`` dependency.

The session cookie only carries the user id, the role it was opened with and
the last activity timestamp. Inactivity timeouts depend on that role.
"""

from datetime import datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from formaflow.core.db import get_db
from formaflow.core.logging import get_logger
from formaflow.core.security import verify_and_rehash
from formaflow.models import User, UserResponse
from formaflow.models.enums import AppRole
from formaflow.utils.datetime import now_utc

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])

USER_ID_KEY = "user_id"
USER_ROLE_KEY = "user_role"
LAST_ACTIVITY_KEY = "last_activity"

ROLE_TIMEOUTS = {
    AppRole.APPRENANT.value: timedelta(minutes=30),
    AppRole.FORMATEUR.value: timedelta(hours=1),
}
DEFAULT_TIMEOUT = 2 * 60 * 60  # seconds


def _not_authenticated(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _last_activity(request: Request) -> datetime | None:
    raw = request.session.get(LAST_ACTIVITY_KEY)
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except (TypeError, ValueError):
        return None


def _session_expired(request: Request, user_role: str | None) -> bool:
    last_activity = _last_activity(request)
    if last_activity is None:
        return False
    timeout = ROLE_TIMEOUTS.get(user_role, timedelta(seconds=DEFAULT_TIMEOUT))
    return now_utc() - last_activity > timeout


def _touch(request: Request) -> None:
    request.session[LAST_ACTIVITY_KEY] = now_utc().isoformat()


async def _active_user(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id, User.is_active.is_(True)))
    return result.scalar_one_or_none()


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the session cookie to an active user, or fail with 401."""
    raw_user_id = request.session.get(USER_ID_KEY)
    if not raw_user_id:
        raise _not_authenticated("Not authenticated")

    role = request.session.get(USER_ROLE_KEY)
    if _session_expired(request, role):
        request.session.clear()
        logger.info("auth.session_expired", user_id=raw_user_id, role=role)
        raise _not_authenticated("Session expired")

    try:
        user_id = UUID(raw_user_id)
    except ValueError:
        raise _not_authenticated("Invalid user session")

    user = await _active_user(db, user_id)
    if user is None:
        raise _not_authenticated("User not found or inactive")

    _touch(request)
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    email = form_data.username.strip().lower()
    user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()

    valid, new_hash = (
        verify_and_rehash(form_data.password, user.hashed_password) if user else (False, None)
    )
    if not valid:
        logger.warning("auth.login_failed", email=email)
        raise _not_authenticated("Invalid email or password")

    if not user.is_active:
        logger.warning("auth.login_disabled_account", user_id=str(user.id))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    # Argon2 parameters changed since this hash was made
    if new_hash:
        user.hashed_password = new_hash

    request.session.update({USER_ID_KEY: str(user.id), USER_ROLE_KEY: user.role})
    _touch(request)

    logger.info("auth.login_success", user_id=str(user.id), role=user.role)
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: Request):
    user_id = request.session.get(USER_ID_KEY)
    request.session.clear()
    if user_id:
        logger.info("auth.logout", user_id=user_id)


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
