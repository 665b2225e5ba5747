"""Business logic for user accounts and roles."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    UserInsert,
    delete_user,
    fetch_user_by_email,
    fetch_user_by_id,
    fetch_users,
    insert_user,
    update_user,
    update_user_by_email,
)
from src.models.base import utcnow
from src.models.user import ROLE_ADMIN, ROLE_AGENT, ROLE_USER, User
from src.services.serializers import user_to_dict

logger = logging.getLogger(__name__)

SOCIAL_KEYS = ("facebook", "twitter", "linkedin", "instagram", "website")


class UserService:
    """Service layer for identity and role management."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def register_user(
        self,
        email: str,
        *,
        name: str | None = None,
        photo_url: str | None = None,
    ) -> dict[str, object]:
        """Insert a user on first sign-in; refresh last login otherwise."""

        email = email.strip().lower()
        existing = await fetch_user_by_email(self._session, email)
        if existing is not None:
            await update_user(self._session, existing.id, last_login_at=utcnow())
            await self._session.commit()
            return {
                "status": "already_registered",
                "message": "User already exists",
                "inserted": False,
            }

        user = await insert_user(
            self._session,
            UserInsert(
                email=email,
                name=name,
                photo_url=photo_url,
                last_login_at=utcnow(),
            ),
        )
        await self._session.commit()
        logger.info("Registered user email=%s", email)
        return {
            "status": "created",
            "message": "User created",
            "inserted": True,
            "inserted_id": user.id,
        }

    async def get_user(self, email: str) -> User | None:
        return await fetch_user_by_email(self._session, email.strip().lower())

    async def get_role(self, email: str) -> str | None:
        """Return the stored role, ``"user"`` when unset, None for unknown email."""

        user = await self.get_user(email)
        if user is None:
            return None
        return user.role or ROLE_USER

    async def list_users(
        self, *, role: str | None = None, limit: int = 500
    ) -> list[dict[str, object]]:
        rows = await fetch_users(self._session, role=role, limit=limit)
        return [user_to_dict(row) for row in rows]

    async def make_admin(self, user_id: str) -> dict[str, object]:
        return await self._set_role(user_id, ROLE_ADMIN)

    async def make_agent(self, user_id: str) -> dict[str, object]:
        return await self._set_role(user_id, ROLE_AGENT)

    async def _set_role(self, user_id: str, role: str) -> dict[str, object]:
        matched = await update_user(self._session, user_id, role=role)
        await self._session.commit()
        if matched == 0:
            return {
                "user_id": user_id,
                "status": "not_found",
                "message": "User not found",
                "modified_count": 0,
            }

        logger.info("Set role=%s for user_id=%s", role, user_id)
        return {
            "user_id": user_id,
            "status": "updated",
            "message": f"User is now {role}",
            "modified_count": matched,
        }

    async def mark_fraud(self, user_id: str) -> dict[str, object]:
        """Flag a user as fraudulent. Their listings are removed separately."""

        matched = await update_user(self._session, user_id, is_fraud=True)
        await self._session.commit()
        if matched == 0:
            return {
                "user_id": user_id,
                "status": "not_found",
                "message": "User not found",
                "modified_count": 0,
            }

        logger.info("Marked user_id=%s as fraud", user_id)
        return {
            "user_id": user_id,
            "status": "updated",
            "message": "User marked as fraud",
            "modified_count": matched,
        }

    async def delete_user(self, user_id: str) -> dict[str, object]:
        deleted = await delete_user(self._session, user_id)
        await self._session.commit()
        if deleted == 0:
            return {
                "user_id": user_id,
                "status": "not_found",
                "message": "User not found",
                "deleted_count": 0,
            }
        return {
            "user_id": user_id,
            "status": "deleted",
            "message": "User deleted",
            "deleted_count": deleted,
        }

    async def get_socials(self, email: str) -> dict[str, str] | None:
        user = await self.get_user(email)
        if user is None:
            return None
        return dict(user.socials or {})

    async def update_socials(
        self, email: str, socials: dict[str, str | None]
    ) -> dict[str, object]:
        """Merge social links into the user's record.

        Keys outside ``SOCIAL_KEYS`` are ignored; a None or blank value clears
        the link.
        """

        user = await self.get_user(email)
        if user is None:
            return {
                "email": email,
                "status": "not_found",
                "message": "User not found",
            }

        merged = dict(user.socials or {})
        for key in SOCIAL_KEYS:
            if key not in socials:
                continue
            value = (socials[key] or "").strip()
            if value:
                merged[key] = value
            else:
                merged.pop(key, None)

        await update_user_by_email(self._session, user.email, socials=merged)
        await self._session.commit()
        return {
            "email": user.email,
            "status": "updated",
            "message": "Social links updated",
            "socials": merged,
        }
