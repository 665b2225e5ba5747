"""Provider interfaces for token verification and payment intents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


class TokenVerificationError(Exception):
    """Raised when a bearer token cannot be verified."""


class PaymentIntentError(Exception):
    """Raised when the payment provider rejects or fails a request."""


@dataclass(slots=True, frozen=True)
class VerifiedIdentity:
    """Identity asserted by a verified bearer token."""

    uid: str
    email: str
    name: str | None = None


@dataclass(slots=True, frozen=True)
class PaymentIntent:
    """Payment intent created with the provider."""

    intent_id: str
    client_secret: str
    amount_minor: int
    currency: str


class TokenVerifier(ABC):
    """Base protocol for bearer token verification."""

    @abstractmethod
    async def verify(self, token: str) -> VerifiedIdentity:
        """Verify ``token`` and return the identity it belongs to.

        Raises:
            TokenVerificationError: the token is malformed, expired or revoked.
        """
        ...


class PaymentGateway(ABC):
    """Base protocol for payment intent creation."""

    @abstractmethod
    async def create_intent(
        self, amount: Decimal, *, metadata: dict[str, str] | None = None
    ) -> PaymentIntent:
        """Create a card payment intent for ``amount`` in major units.

        Raises:
            PaymentIntentError: the provider refused or could not be reached.
        """
        ...
