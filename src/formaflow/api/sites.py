"""Site endpoints (list, create)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.api.auth import get_current_user
from formaflow.api.auth_helpers import SITE_ADMIN_ROLES, require_roles
from formaflow.core.db import get_db
from formaflow.core.errors import ConflictError
from formaflow.core.logging import get_logger
from formaflow.models import Site, SiteCreate, SiteRead, User

logger = get_logger(__name__)

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("", response_model=list[SiteRead])
async def list_sites(
    include_inactive: bool = False,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List sites, active ones only unless asked otherwise."""
    stmt = select(Site).order_by(Site.name)
    if not include_inactive:
        stmt = stmt.where(Site.active)

    result = await db.execute(stmt)
    return result.scalars().all()


@router.post("", response_model=SiteRead, status_code=status.HTTP_201_CREATED)
async def create_site(
    site: SiteCreate,
    current_user: User = Depends(require_roles(*SITE_ADMIN_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Register a site. Codes are unique."""
    existing = await db.execute(select(Site).where(Site.code == site.code))
    if existing.scalar_one_or_none():
        raise ConflictError(f"Site code {site.code} already exists", details={"code": site.code})

    new_site = Site(**site.model_dump())
    db.add(new_site)
    await db.commit()
    await db.refresh(new_site)

    logger.info("site.created", site_id=str(new_site.id), code=new_site.code)
    return new_site
