"""Training session exports for HR reporting.

Both formats share one column table so CSV and Excel never drift apart.
CSV uses ``;`` because the French locale of Excel expects it.
"""

import csv
import io
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Literal, NamedTuple
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, NamedStyle, PatternFill
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from formaflow.api.auth_helpers import SESSION_MANAGER_ROLES, require_roles
from formaflow.core.db import get_db
from formaflow.core.logging import get_logger
from formaflow.models import TrainingSession, User
from formaflow.models.enums import SessionStatus
from formaflow.utils.datetime import now_local

logger = get_logger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])

ExportFormat = Literal["csv", "xlsx"]

MAX_COLUMN_WIDTH = 50


def _stamp(value: datetime | None) -> str:
    return f"{value:%Y-%m-%d %H:%M}" if value else ""


class Column(NamedTuple):
    header: str
    value: Callable[[TrainingSession], Any]


COLUMNS: tuple[Column, ...] = (
    Column("Session ID", lambda s: str(s.id)),
    Column("Title", lambda s: s.title),
    Column("Type", lambda s: s.type),
    Column("Status", lambda s: s.status),
    Column("Site", lambda s: s.site_name or ""),
    Column("Location", lambda s: s.location),
    Column("Start", lambda s: _stamp(s.start_datetime)),
    Column("End", lambda s: _stamp(s.end_datetime)),
    Column("Duration (h)", lambda s: s.duration_hours),
    Column("Capacity", lambda s: s.capacity),
    Column("Urgent", lambda s: "Oui" if s.urgent else "Non"),
    Column("HR Validated At", lambda s: _stamp(s.validated_hr_at)),
    Column("HSE Validated At", lambda s: _stamp(s.validated_hse_at)),
)

EXPORT_HEADERS = [column.header for column in COLUMNS]


def export_rows(sessions: list[TrainingSession]):
    for session in sessions:
        yield [column.value(session) for column in COLUMNS]


def build_export_query(
    from_date: date | None,
    to_date: date | None,
    site_id: UUID | None,
    status: SessionStatus | None,
) -> Select:
    """Sessions ordered by start; the date range is inclusive on both days."""
    conditions = []
    if from_date:
        conditions.append(TrainingSession.start_datetime >= datetime.combine(from_date, time.min))
    if to_date:
        next_day = datetime.combine(to_date + timedelta(days=1), time.min)
        conditions.append(TrainingSession.start_datetime < next_day)
    if site_id:
        conditions.append(TrainingSession.site_id == site_id)
    if status:
        conditions.append(TrainingSession.status == status.value)

    return select(TrainingSession).where(*conditions).order_by(TrainingSession.start_datetime)


def render_csv(sessions: list[TrainingSession]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";")
    writer.writerow(EXPORT_HEADERS)
    writer.writerows(export_rows(sessions))
    return buffer.getvalue().encode("utf-8")


def render_xlsx(sessions: list[TrainingSession]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Sessions"

    sheet.append(EXPORT_HEADERS)
    for row in export_rows(sessions):
        sheet.append(row)

    header_style = NamedStyle(
        name="export_header",
        font=Font(bold=True, color="FFFFFF"),
        fill=PatternFill(fill_type="solid", fgColor="1F4E78"),
        alignment=Alignment(horizontal="center", vertical="center"),
    )
    for cell in sheet[1]:
        cell.style = header_style

    # Longest value wins, capped
    for cells in sheet.columns:
        longest = max(len(str(cell.value)) for cell in cells if cell.value is not None)
        sheet.column_dimensions[cells[0].column_letter].width = min(longest + 2, MAX_COLUMN_WIDTH)

    sheet.freeze_panes = "A2"

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class Renderer(NamedTuple):
    render: Callable[[list[TrainingSession]], bytes]
    media_type: str


RENDERERS: dict[str, Renderer] = {
    "csv": Renderer(render_csv, "text/csv; charset=utf-8"),
    "xlsx": Renderer(
        render_xlsx,
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ),
}


def export_filename(extension: str) -> str:
    return f"training_sessions_{now_local():%Y%m%d_%H%M%S}.{extension}"


@router.get("/sessions")
async def export_sessions(
    format: ExportFormat = Query("csv", description="csv or xlsx"),
    from_date: date | None = Query(None, description="First start date, YYYY-MM-DD"),
    to_date: date | None = Query(None, description="Last start date, YYYY-MM-DD"),
    site_id: UUID | None = Query(None),
    status: SessionStatus | None = Query(None),
    current_user: User = Depends(require_roles(*SESSION_MANAGER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(build_export_query(from_date, to_date, site_id, status))
    sessions = list(result.scalars().all())

    renderer = RENDERERS[format]
    body = renderer.render(sessions)

    logger.info(
        "export.sessions",
        format=format,
        count=len(sessions),
        bytes=len(body),
        user_id=str(current_user.id),
    )

    return Response(
        content=body,
        media_type=renderer.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(format)}"',
            "Cache-Control": "no-store",
        },
    )
