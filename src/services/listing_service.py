"""Business logic for property listings."""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    ListingInsert,
    delete_advertisement,
    delete_listing_dependents,
    delete_listings,
    fetch_listing,
    fetch_listing_ids_by_agent,
    fetch_listings,
    fetch_user_by_email,
    insert_listing,
    update_listing,
)
from src.models.listing import STATUS_REJECTED, STATUS_VERIFIED
from src.services.serializers import listing_to_dict

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "location",
        "image",
        "description",
        "min_price",
        "max_price",
        "installment_plan",
    }
)
# Columns that cannot be cleared with an explicit null.
REQUIRED_FIELDS = frozenset({"title", "location", "min_price", "max_price"})


class ListingService:
    """Service layer for listing lifecycle operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_listing(self, row: ListingInsert) -> dict[str, object]:
        """Create an ``available`` listing owned by ``row.agent_email``."""

        agent = await fetch_user_by_email(self._session, row.agent_email)
        if agent is not None and agent.is_fraud:
            return {
                "status": "forbidden",
                "message": "Account flagged as fraudulent",
            }

        listing = await insert_listing(self._session, row)
        await self._session.commit()
        logger.info(
            "Listing created id=%s agent_email=%s", listing.id, listing.agent_email
        )
        return {
            "status": "created",
            "message": "Property added",
            "inserted_id": listing.id,
            "listing": listing_to_dict(listing),
        }

    async def search_listings(
        self,
        *,
        status: str | None = None,
        agent_email: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        sort: str | None = None,
        limit: int = 200,
    ) -> list[dict[str, object]]:
        rows = await fetch_listings(
            self._session,
            status=status,
            agent_email=agent_email,
            search=search,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            limit=limit,
        )
        return [listing_to_dict(row) for row in rows]

    async def get_listing(self, listing_id: str) -> dict[str, object] | None:
        listing = await fetch_listing(self._session, listing_id)
        return listing_to_dict(listing) if listing is not None else None

    async def update_listing(
        self,
        listing_id: str,
        values: dict[str, object],
        *,
        actor_email: str,
        is_admin: bool = False,
    ) -> dict[str, object]:
        listing = await fetch_listing(self._session, listing_id)
        if listing is None:
            return {
                "listing_id": listing_id,
                "status": "not_found",
                "message": "Property not found",
            }
        if not is_admin and listing.agent_email != actor_email:
            return {
                "listing_id": listing_id,
                "status": "forbidden",
                "message": "Only the listing agent can update this property",
            }

        changes = {key: value for key, value in values.items() if key in UPDATABLE_FIELDS}
        cleared = sorted(
            key for key in REQUIRED_FIELDS if key in changes and changes[key] is None
        )
        if cleared:
            return {
                "listing_id": listing_id,
                "status": "invalid",
                "message": f"{', '.join(cleared)} cannot be null",
            }

        min_price = changes.get("min_price", listing.min_price)
        max_price = changes.get("max_price", listing.max_price)
        if Decimal(str(min_price)) > Decimal(str(max_price)):
            return {
                "listing_id": listing_id,
                "status": "invalid",
                "message": "min_price cannot exceed max_price",
            }

        modified = await update_listing(self._session, listing_id, **changes)
        await self._session.commit()
        await self._session.refresh(listing)
        return {
            "listing_id": listing_id,
            "status": "updated",
            "message": "Property updated",
            "modified_count": modified,
            "listing": listing_to_dict(listing),
        }

    async def verify_listing(self, listing_id: str) -> dict[str, object]:
        modified = await update_listing(
            self._session, listing_id, status=STATUS_VERIFIED
        )
        await self._session.commit()
        if modified == 0:
            return {
                "listing_id": listing_id,
                "status": "not_found",
                "message": "Property not found",
            }

        logger.info("Listing verified id=%s", listing_id)
        return {
            "listing_id": listing_id,
            "status": "updated",
            "message": "Property verified",
            "modified_count": modified,
        }

    async def reject_listing(self, listing_id: str) -> dict[str, object]:
        """Reject a listing and withdraw any advertisement for it."""

        try:
            modified = await update_listing(
                self._session, listing_id, status=STATUS_REJECTED
            )
            if modified == 0:
                await self._session.rollback()
                return {
                    "listing_id": listing_id,
                    "status": "not_found",
                    "message": "Property not found",
                }
            withdrawn = await delete_advertisement(self._session, listing_id)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        logger.info("Listing rejected id=%s ads_withdrawn=%s", listing_id, withdrawn)
        return {
            "listing_id": listing_id,
            "status": "updated",
            "message": "Property rejected",
            "modified_count": modified,
            "advertisements_deleted": withdrawn,
        }

    async def delete_listing(
        self,
        listing_id: str,
        *,
        actor_email: str,
        is_admin: bool = False,
    ) -> dict[str, object]:
        """Delete a listing together with its reviews, reports, wishlist and ads."""

        listing = await fetch_listing(self._session, listing_id)
        if listing is None:
            return {
                "listing_id": listing_id,
                "status": "not_found",
                "message": "Property not found",
            }
        if not is_admin and listing.agent_email != actor_email:
            return {
                "listing_id": listing_id,
                "status": "forbidden",
                "message": "Only the listing agent can delete this property",
            }

        try:
            cleanup = await delete_listing_dependents(self._session, [listing_id])
            deleted = await delete_listings(self._session, [listing_id])
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        logger.info("Listing deleted id=%s", listing_id)
        return {
            "listing_id": listing_id,
            "status": "deleted",
            "message": "Property deleted",
            "deleted_count": deleted,
            **cleanup.as_dict(),
        }

    async def delete_agent_listings(self, agent_email: str) -> dict[str, object]:
        """Remove every listing owned by ``agent_email`` and its dependents."""

        listing_ids = await fetch_listing_ids_by_agent(self._session, agent_email)
        try:
            cleanup = await delete_listing_dependents(self._session, listing_ids)
            deleted = await delete_listings(self._session, listing_ids)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        logger.info(
            "Deleted %s listings for agent_email=%s", deleted, agent_email
        )
        return {
            "agent_email": agent_email,
            "status": "deleted",
            "message": f"Deleted {deleted} properties",
            "deleted_count": deleted,
            **cleanup.as_dict(),
        }
