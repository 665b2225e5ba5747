"""Business logic for listing reports."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    ReportInsert,
    delete_report,
    fetch_listing,
    fetch_reports,
    insert_report,
)
from src.services.serializers import report_to_dict

logger = logging.getLogger(__name__)


class ReportService:
    """Service layer for buyer reports against listings."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def file_report(self, row: ReportInsert) -> dict[str, object]:
        listing = await fetch_listing(self._session, row.property_id)
        if listing is None:
            return {
                "property_id": row.property_id,
                "status": "not_found",
                "message": "Property not found",
            }

        row.property_title = row.property_title or listing.title
        row.agent_name = row.agent_name or listing.agent_name
        row.agent_email = row.agent_email or listing.agent_email
        report = await insert_report(self._session, row)
        await self._session.commit()
        logger.info(
            "Report filed id=%s property_id=%s", report.id, report.property_id
        )
        return {
            "status": "created",
            "message": "Report submitted",
            "inserted_id": report.id,
        }

    async def list_reports(self, limit: int = 200) -> list[dict[str, object]]:
        rows = await fetch_reports(self._session, limit=limit)
        return [report_to_dict(row) for row in rows]

    async def delete_report(self, report_id: str) -> dict[str, object]:
        deleted = await delete_report(self._session, report_id)
        await self._session.commit()
        if deleted == 0:
            return {
                "report_id": report_id,
                "status": "not_found",
                "message": "Report not found",
            }
        return {
            "report_id": report_id,
            "status": "deleted",
            "message": "Report deleted",
            "deleted_count": deleted,
        }
