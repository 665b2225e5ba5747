"""User registration, role lookup and role management routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import CurrentUser, get_current_user, require_admin
from src.api.errors import not_found, raise_for_status
from src.api.schemas import SocialLinksUpdate, UserCreate
from src.db.session import get_db_session
from src.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("")
async def register_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    """Insert the user on first sign-in; existing users are left as-is."""

    service = UserService(session)
    return await service.register_user(
        payload.email, name=payload.name, photo_url=payload.photo_url
    )


@router.get("", dependencies=[Depends(require_admin)])
async def list_users(
    role: str | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await UserService(session).list_users(role=role)


@router.get("/role/{email}", dependencies=[Depends(get_current_user)])
async def get_user_role(
    email: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, str]:
    role = await UserService(session).get_role(email)
    if role is None:
        raise not_found("User not found")
    return {"role": role}


@router.get("/socials")
async def get_social_links(
    email: str = Query(..., min_length=3),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    socials = await UserService(session).get_socials(email)
    if socials is None:
        raise not_found("User not found")
    return {"email": email.strip().lower(), "socials": socials}


@router.patch("")
async def update_social_links(
    payload: SocialLinksUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    result = await UserService(session).update_socials(
        current_user.email, payload.model_dump(exclude_unset=True)
    )
    return raise_for_status(result)


@router.patch("/{user_id}/make-admin", dependencies=[Depends(require_admin)])
async def make_admin(
    user_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await UserService(session).make_admin(user_id))


@router.patch("/{user_id}/make-agent", dependencies=[Depends(require_admin)])
async def make_agent(
    user_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await UserService(session).make_agent(user_id))


@router.patch("/{user_id}/mark-fraud", dependencies=[Depends(require_admin)])
async def mark_fraud(
    user_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await UserService(session).mark_fraud(user_id))


@router.delete("/{user_id}", dependencies=[Depends(require_admin)])
async def delete_user(
    user_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return raise_for_status(await UserService(session).delete_user(user_id))
