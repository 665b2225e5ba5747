"""Identity Toolkit (Firebase Auth) ID token verification."""

import logging

import httpx

from src.config import Settings, get_settings
from src.integrations.base import (
    TokenVerificationError,
    TokenVerifier,
    VerifiedIdentity,
)

logger = logging.getLogger(__name__)


class IdentityToolkitVerifier(TokenVerifier):
    """Verify Firebase ID tokens with the Identity Toolkit lookup endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self._lookup_url = (
            f"{self._settings.identity_api_base_url.rstrip('/')}/accounts:lookup"
        )
        self._timeout = httpx.Timeout(self._settings.identity_request_timeout_seconds)

    async def verify(self, token: str) -> VerifiedIdentity:
        if not token:
            raise TokenVerificationError("Empty token")

        if not self._settings.identity_api_key:
            logger.error("Identity API key not configured, rejecting token")
            raise TokenVerificationError("Identity provider not configured")

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._lookup_url,
                    params={"key": self._settings.identity_api_key},
                    json={"idToken": token},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Identity lookup rejected token: %s", e.response.status_code)
            raise TokenVerificationError("Invalid or expired token") from e
        except httpx.HTTPError as e:
            logger.error("Identity lookup failed: %s", str(e))
            raise TokenVerificationError("Identity provider unavailable") from e

        users = payload.get("users") if isinstance(payload, dict) else None
        if not isinstance(users, list) or not users:
            raise TokenVerificationError("Token does not match any account")

        account = users[0]
        email = str(account.get("email") or "").strip().lower()
        if not email:
            raise TokenVerificationError("Account has no email")

        return VerifiedIdentity(
            uid=str(account.get("localId") or ""),
            email=email,
            name=account.get("displayName"),
        )
