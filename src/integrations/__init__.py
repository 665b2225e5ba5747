"""Clients for external identity and payment providers."""

from src.integrations.base import (
    PaymentGateway,
    PaymentIntent,
    PaymentIntentError,
    TokenVerificationError,
    TokenVerifier,
    VerifiedIdentity,
)
from src.integrations.identity import IdentityToolkitVerifier
from src.integrations.payments import StripePaymentGateway

__all__ = [
    "IdentityToolkitVerifier",
    "PaymentGateway",
    "PaymentIntent",
    "PaymentIntentError",
    "StripePaymentGateway",
    "TokenVerificationError",
    "TokenVerifier",
    "VerifiedIdentity",
]
