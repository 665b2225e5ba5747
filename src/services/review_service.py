"""Business logic for property reviews."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    ReviewInsert,
    delete_review,
    fetch_listing,
    fetch_reviews,
    insert_review,
)
from src.services.serializers import review_to_dict


class ReviewService:
    """Service layer for property reviews."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_review(self, row: ReviewInsert) -> dict[str, object]:
        listing = await fetch_listing(self._session, row.property_id)
        if listing is None:
            return {
                "property_id": row.property_id,
                "status": "not_found",
                "message": "Property not found",
            }

        row.property_title = row.property_title or listing.title
        row.agent_name = row.agent_name or listing.agent_name
        review = await insert_review(self._session, row)
        await self._session.commit()
        return {
            "status": "created",
            "message": "Review added",
            "inserted_id": review.id,
            "review": review_to_dict(review),
        }

    async def reviews_for_property(self, property_id: str) -> list[dict[str, object]]:
        rows = await fetch_reviews(self._session, property_id=property_id)
        return [review_to_dict(row) for row in rows]

    async def latest_reviews(self, limit: int = 10) -> list[dict[str, object]]:
        rows = await fetch_reviews(self._session, limit=limit)
        return [review_to_dict(row) for row in rows]

    async def reviews_by_user(self, reviewer_email: str) -> list[dict[str, object]]:
        rows = await fetch_reviews(self._session, reviewer_email=reviewer_email)
        return [review_to_dict(row) for row in rows]

    async def delete_review(
        self, review_id: str, *, reviewer_email: str | None = None
    ) -> dict[str, object]:
        """Delete a review; when ``reviewer_email`` is set it must own the review."""

        deleted = await delete_review(
            self._session, review_id, reviewer_email=reviewer_email
        )
        await self._session.commit()
        if deleted == 0:
            return {
                "review_id": review_id,
                "status": "not_found",
                "message": "Review not found",
            }
        return {
            "review_id": review_id,
            "status": "deleted",
            "message": "Review deleted",
            "deleted_count": deleted,
        }
