"""Review routes, including the reviewer's own ``/myReviews`` view."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import CurrentUser, get_current_user, require_admin
from src.api.errors import raise_for_status
from src.api.schemas import ReviewCreate
from src.db.repositories import ReviewInsert
from src.db.session import get_db_session
from src.services.review_service import ReviewService

router = APIRouter(tags=["reviews"])


@router.post("/reviews", status_code=status.HTTP_201_CREATED)
async def add_review(
    payload: ReviewCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    row = ReviewInsert(
        property_id=payload.property_id,
        reviewer_name=payload.reviewer_name or current_user.name or current_user.email,
        reviewer_email=current_user.email,
        reviewer_image=payload.reviewer_image,
        rating=payload.rating,
        comment=payload.comment,
        property_title=payload.property_title,
        agent_name=payload.agent_name,
    )
    return raise_for_status(await ReviewService(session).add_review(row))


@router.get("/reviews")
async def latest_reviews(
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await ReviewService(session).latest_reviews(limit=limit)


@router.get("/reviews/{property_id}")
async def property_reviews(
    property_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await ReviewService(session).reviews_for_property(property_id)


@router.delete("/reviews/{review_id}", dependencies=[Depends(require_admin)])
async def delete_any_review(
    review_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await ReviewService(session).delete_review(review_id))


@router.get("/myReviews")
async def my_reviews(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await ReviewService(session).reviews_by_user(current_user.email)


@router.delete("/myReviews/{review_id}")
async def delete_my_review(
    review_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    result = await ReviewService(session).delete_review(
        review_id, reviewer_email=current_user.email
    )
    return raise_for_status(result)
