"""Wishlist routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import CurrentUser, get_current_user
from src.api.errors import raise_for_status
from src.api.schemas import WishlistCreate
from src.db.session import get_db_session
from src.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    payload: WishlistCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    service = WishlistService(session)
    return raise_for_status(
        await service.add_item(current_user.email, payload.property_id)
    )


@router.get("")
async def list_wishlist(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await WishlistService(session).list_items(current_user.email)


@router.delete("/{item_id}")
async def remove_from_wishlist(
    item_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    service = WishlistService(session)
    return raise_for_status(await service.remove_item(current_user.email, item_id))
