"""Liveness endpoint for container probes: uptime plus a database round-trip."""

import time
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.core.db import get_db
from formaflow.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

_app_start_time: datetime | None = None


class DependencyCheck(BaseModel):
    status: Literal["ok", "down"]
    response_time_ms: int
    error: str | None = None


class HealthReport(BaseModel):
    status: Literal["ok", "degraded"]
    uptime_seconds: int
    checks: dict[str, DependencyCheck]


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict:
    """Run ``SELECT 1``; report ``down`` with the exception class name on failure."""
    started = time.perf_counter()
    error = None
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        error = type(exc).__name__
        logger.warning("health.database_down", error=error)

    result = {
        "status": "down" if error else "ok",
        "response_time_ms": int((time.perf_counter() - started) * 1000),
    }
    if error:
        result["error"] = error
    return result


@router.get("/health", response_model=HealthReport, response_model_exclude_none=True)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Always 200 so probes can tell a degraded app from a dead one."""
    database = await check_database(db)
    return {
        "status": "ok" if database["status"] == "ok" else "degraded",
        "uptime_seconds": get_uptime_seconds(),
        "checks": {"database": database},
    }
