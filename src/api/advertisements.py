"""Advertised (featured) listing routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import require_admin
from src.api.errors import raise_for_status
from src.db.session import get_db_session
from src.services.advertisement_service import AdvertisementService

router = APIRouter(prefix="/properties", tags=["advertisements"])


@router.get("/advertised")
async def list_advertised(
    limit: int = Query(default=200, ge=1, le=500),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await AdvertisementService(session).list_advertised(limit=limit)


@router.get("/advertisable", dependencies=[Depends(require_admin)])
async def list_advertisable(
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    """Verified installment-eligible listings that are not advertised yet."""

    return await AdvertisementService(session).list_advertisable()


@router.post(
    "/advertise/{listing_id}",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def advertise_property(
    listing_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await AdvertisementService(session).advertise(listing_id))


@router.delete("/advertise/{listing_id}", dependencies=[Depends(require_admin)])
async def unadvertise_property(
    listing_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await AdvertisementService(session).unadvertise(listing_id))
