"""Offer and settlement routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import (
    CurrentUser,
    get_current_user,
    require_agent,
    require_agent_or_admin,
)
from src.api.errors import not_found, raise_for_status
from src.api.schemas import OfferCreate
from src.db.repositories import OfferInsert
from src.db.session import get_db_session
from src.services.offer_service import OfferService

router = APIRouter(prefix="/offers", tags=["offers"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_offer(
    payload: OfferCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    if payload.buyer_email != current_user.email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Offers can only be made on your own behalf",
        )

    row = OfferInsert(
        property_id=payload.property_id,
        title=payload.title,
        location=payload.location,
        image=payload.image,
        agent_name=payload.agent_name,
        buyer_name=payload.buyer_name,
        buyer_email=payload.buyer_email,
        offer_amount=payload.offer_amount,
        buying_date=payload.buying_date,
    )
    return raise_for_status(await OfferService(session).create_offer(row))


@router.get("")
async def list_my_offers(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await OfferService(session).list_buyer_offers(current_user.email)


@router.get("/agent", dependencies=[Depends(require_agent)])
async def list_agent_offers(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await OfferService(session).list_agent_offers(current_user.email)


@router.get("/sold", dependencies=[Depends(require_agent)])
async def list_sold_properties(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await OfferService(session).sold_properties(current_user.email)


@router.get("/by-property/{property_id}", dependencies=[Depends(require_agent)])
async def list_offers_for_property(
    property_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await OfferService(session).list_offers_for_property(property_id)


@router.get("/accepted/{property_id}", dependencies=[Depends(get_current_user)])
async def get_accepted_offer(
    property_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    offer = await OfferService(session).get_accepted_offer(property_id)
    if offer is None:
        raise not_found("No accepted offer found for this property")
    return offer


@router.get("/{offer_id}", dependencies=[Depends(get_current_user)])
async def get_offer(
    offer_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    offer = await OfferService(session).get_offer(offer_id)
    if offer is None:
        raise not_found("Offer not found")
    return offer


@router.patch("/{offer_id}/accept", dependencies=[Depends(require_agent_or_admin)])
async def accept_offer(
    offer_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    result = await OfferService(session).accept_offer(
        offer_id,
        actor_email=current_user.email,
        is_admin=current_user.is_admin,
    )
    return raise_for_status(result)


@router.patch("/{offer_id}/reject", dependencies=[Depends(require_agent_or_admin)])
async def reject_offer(
    offer_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    result = await OfferService(session).reject_offer(
        offer_id,
        actor_email=current_user.email,
        is_admin=current_user.is_admin,
    )
    return raise_for_status(result)
