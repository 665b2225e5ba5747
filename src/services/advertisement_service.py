"""Business logic for advertised listings."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    AdvertisementInsert,
    delete_advertisement,
    fetch_advertisable_listings,
    fetch_advertisement,
    fetch_advertisements,
    fetch_listing,
    insert_advertisement,
)
from src.models.listing import STATUS_VERIFIED
from src.services.serializers import advertisement_to_dict, listing_to_dict

logger = logging.getLogger(__name__)


class AdvertisementService:
    """Service layer for promoting verified listings."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def advertise(self, listing_id: str) -> dict[str, object]:
        listing = await fetch_listing(self._session, listing_id)
        if listing is None or listing.status != STATUS_VERIFIED:
            return {
                "listing_id": listing_id,
                "status": "not_found",
                "message": "Property not found or not verified",
            }

        if await fetch_advertisement(self._session, listing_id) is not None:
            return {
                "listing_id": listing_id,
                "status": "conflict",
                "message": "Property already advertised",
            }

        inserted = await insert_advertisement(
            self._session,
            AdvertisementInsert(
                property_id=listing.id,
                title=listing.title,
                image=listing.image,
                location=listing.location,
                min_price=listing.min_price,
                max_price=listing.max_price,
                status=listing.status,
                installment_plan=listing.installment_plan,
                agent_email=listing.agent_email,
            ),
        )
        await self._session.commit()

        if inserted == 0:
            return {
                "listing_id": listing_id,
                "status": "conflict",
                "message": "Property already advertised",
            }

        logger.info("Listing advertised id=%s", listing_id)
        return {
            "listing_id": listing_id,
            "status": "created",
            "message": "Property advertised",
        }

    async def unadvertise(self, listing_id: str) -> dict[str, object]:
        deleted = await delete_advertisement(self._session, listing_id)
        await self._session.commit()
        if deleted == 0:
            return {
                "listing_id": listing_id,
                "status": "not_found",
                "message": "Advertisement not found",
            }
        return {
            "listing_id": listing_id,
            "status": "deleted",
            "message": "Advertisement removed",
            "deleted_count": deleted,
        }

    async def list_advertised(self, *, limit: int = 200) -> list[dict[str, object]]:
        rows = await fetch_advertisements(self._session, limit=limit)
        return [advertisement_to_dict(row) for row in rows]

    async def list_advertisable(self, *, limit: int = 200) -> list[dict[str, object]]:
        rows = await fetch_advertisable_listings(self._session, limit=limit)
        return [listing_to_dict(row) for row in rows]
