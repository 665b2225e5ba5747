"""Shared FastAPI dependencies: providers, caller identity and role policies."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import fetch_user_by_email
from src.db.session import get_db_session
from src.integrations.base import (
    PaymentGateway,
    TokenVerificationError,
    TokenVerifier,
    VerifiedIdentity,
)
from src.integrations.identity import IdentityToolkitVerifier
from src.integrations.payments import StripePaymentGateway
from src.models.user import ROLE_ADMIN, ROLE_AGENT, ROLE_USER

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_token_verifier() -> TokenVerifier:
    """Return the process-wide token verifier."""

    return IdentityToolkitVerifier()


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGateway:
    """Return the process-wide payment gateway."""

    return StripePaymentGateway()


@dataclass(slots=True, frozen=True)
class CurrentUser:
    """Authenticated caller resolved against the users table."""

    email: str
    role: str
    name: str | None = None
    user_id: str | None = None
    is_fraud: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


async def get_verified_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> VerifiedIdentity:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access",
        )

    try:
        return await verifier.verify(credentials.credentials)
    except TokenVerificationError as e:
        logger.info("Token rejected: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden access",
        ) from e


async def get_current_user(
    identity: VerifiedIdentity = Depends(get_verified_identity),
    session: AsyncSession = Depends(get_db_session),
) -> CurrentUser:
    """Resolve the caller's stored role; unregistered callers act as users."""

    user = await fetch_user_by_email(session, identity.email)
    if user is None:
        return CurrentUser(email=identity.email, role=ROLE_USER, name=identity.name)

    return CurrentUser(
        email=user.email,
        role=user.role or ROLE_USER,
        name=user.name or identity.name,
        user_id=user.id,
        is_fraud=user.is_fraud,
    )


def require_role(*roles: str) -> Callable[..., Awaitable[CurrentUser]]:
    """Build a dependency that admits only callers holding one of ``roles``."""

    allowed = frozenset(roles)

    async def _check_role(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden access",
            )
        return current_user

    _check_role.__name__ = f"require_{'_or_'.join(sorted(allowed))}"
    return _check_role


require_admin = require_role(ROLE_ADMIN)
require_agent = require_role(ROLE_AGENT)
require_agent_or_admin = require_role(ROLE_AGENT, ROLE_ADMIN)
