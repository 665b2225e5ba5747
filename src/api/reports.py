"""Listing report routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import CurrentUser, get_current_user, require_admin
from src.api.errors import raise_for_status
from src.api.schemas import ReportCreate
from src.db.repositories import ReportInsert
from src.db.session import get_db_session
from src.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def file_report(
    payload: ReportCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    row = ReportInsert(
        property_id=payload.property_id,
        reporter_name=payload.reporter_name or current_user.name or current_user.email,
        reporter_email=current_user.email,
        description=payload.description,
    )
    return raise_for_status(await ReportService(session).file_report(row))


@router.get("", dependencies=[Depends(require_admin)])
async def list_reports(
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await ReportService(session).list_reports()


@router.delete("/{report_id}", dependencies=[Depends(require_admin)])
async def delete_report(
    report_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await ReportService(session).delete_report(report_id))
