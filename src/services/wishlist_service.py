"""Business logic for user wishlist management."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    WishlistInsert,
    delete_wishlist_item,
    fetch_listing,
    fetch_wishlist,
    insert_wishlist_item,
)
from src.services.serializers import wishlist_to_dict


class WishlistService:
    """Service layer for wishlist routes."""

    _session: AsyncSession

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_item(self, user_email: str, property_id: str) -> dict[str, object]:
        """Add a listing to the user's wishlist with a display snapshot."""

        listing = await fetch_listing(self._session, property_id)
        if listing is None:
            return {
                "user_email": user_email,
                "property_id": property_id,
                "status": "not_found",
                "message": "Property not found",
            }

        inserted = await insert_wishlist_item(
            self._session,
            WishlistInsert(
                property_id=listing.id,
                user_email=user_email,
                title=listing.title,
                location=listing.location,
                image=listing.image,
                agent_name=listing.agent_name,
                agent_email=listing.agent_email,
                agent_image=listing.agent_image,
                min_price=listing.min_price,
                max_price=listing.max_price,
                status=listing.status,
            ),
        )
        await self._session.commit()

        if inserted == 0:
            return {
                "user_email": user_email,
                "property_id": property_id,
                "status": "already_exists",
                "message": "Property already in wishlist",
            }

        return {
            "user_email": user_email,
            "property_id": property_id,
            "status": "added",
            "message": "Property added to wishlist",
        }

    async def list_items(
        self, user_email: str, limit: int = 200
    ) -> list[dict[str, object]]:
        rows = await fetch_wishlist(self._session, user_email, limit=limit)
        return [wishlist_to_dict(row) for row in rows]

    async def remove_item(self, user_email: str, item_id: str) -> dict[str, object]:
        deleted = await delete_wishlist_item(
            self._session, item_id, user_email=user_email
        )
        await self._session.commit()

        if not deleted:
            return {
                "user_email": user_email,
                "item_id": item_id,
                "status": "not_found",
                "message": "Wishlist item not found",
            }

        return {
            "user_email": user_email,
            "item_id": item_id,
            "status": "removed",
            "message": "Property removed from wishlist",
            "deleted_count": deleted,
        }
