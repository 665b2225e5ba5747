"""Property listing routes."""

from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import (
    CurrentUser,
    get_current_user,
    require_admin,
    require_agent,
    require_agent_or_admin,
)
from src.api.errors import not_found, raise_for_status
from src.api.schemas import ListingCreate, ListingUpdate
from src.db.repositories import ListingInsert
from src.db.session import get_db_session
from src.services.listing_service import ListingService

router = APIRouter(tags=["properties"])

ListingStatus = Literal["available", "verified", "rejected"]


@router.post(
    "/addProperties",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_agent)],
)
async def add_property(
    payload: ListingCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    row = ListingInsert(
        title=payload.title,
        location=payload.location,
        image=payload.image,
        description=payload.description,
        agent_name=payload.agent_name or current_user.name or current_user.email,
        agent_email=current_user.email,
        agent_image=payload.agent_image,
        min_price=payload.min_price,
        max_price=payload.max_price,
        installment_plan=payload.installment_plan,
    )
    return raise_for_status(await ListingService(session).create_listing(row))


@router.get("/properties")
async def list_properties(
    status_filter: ListingStatus | None = Query(default=None, alias="status"),
    agent_email: str | None = None,
    search: str | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    sort: Literal["price_asc", "price_desc", "newest"] | None = None,
    limit: int = Query(default=200, ge=1, le=500),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await ListingService(session).search_listings(
        status=status_filter,
        agent_email=agent_email,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        limit=limit,
    )


@router.get("/properties/agent", dependencies=[Depends(require_agent)])
async def list_my_properties(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await ListingService(session).search_listings(
        agent_email=current_user.email
    )


@router.get("/properties/{listing_id}")
async def get_property(
    listing_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    listing = await ListingService(session).get_listing(listing_id)
    if listing is None:
        raise not_found("Property not found")
    return listing


@router.patch("/properties/verify/{listing_id}", dependencies=[Depends(require_admin)])
async def verify_property(
    listing_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await ListingService(session).verify_listing(listing_id))


@router.patch("/properties/reject/{listing_id}", dependencies=[Depends(require_admin)])
async def reject_property(
    listing_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await ListingService(session).reject_listing(listing_id))


@router.patch(
    "/properties/{listing_id}", dependencies=[Depends(require_agent_or_admin)]
)
async def update_property(
    listing_id: str,
    payload: ListingUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    result = await ListingService(session).update_listing(
        listing_id,
        payload.model_dump(exclude_unset=True),
        actor_email=current_user.email,
        is_admin=current_user.is_admin,
    )
    return raise_for_status(result)


@router.delete(
    "/properties/agent/{agent_email}", dependencies=[Depends(require_admin)]
)
async def delete_agent_properties(
    agent_email: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    """Remove all listings of an agent, typically after a fraud flag."""

    return await ListingService(session).delete_agent_listings(
        agent_email.strip().lower()
    )


@router.delete(
    "/properties/{listing_id}", dependencies=[Depends(require_agent_or_admin)]
)
async def delete_property(
    listing_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    result = await ListingService(session).delete_listing(
        listing_id,
        actor_email=current_user.email,
        is_admin=current_user.is_admin,
    )
    return raise_for_status(result)
