"""Stripe payment intent client."""

import logging
from decimal import ROUND_HALF_UP, Decimal

import httpx

from src.config import Settings, get_settings
from src.integrations.base import PaymentGateway, PaymentIntent, PaymentIntentError

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to integer cents."""

    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripePaymentGateway(PaymentGateway):
    """Create payment intents through the Stripe REST API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self._intents_url = (
            f"{self._settings.payment_api_base_url.rstrip('/')}/payment_intents"
        )
        self._timeout = httpx.Timeout(self._settings.payment_request_timeout_seconds)

    async def create_intent(
        self, amount: Decimal, *, metadata: dict[str, str] | None = None
    ) -> PaymentIntent:
        if not self._settings.payment_api_key:
            logger.error("Payment API key not configured")
            raise PaymentIntentError("Payment provider not configured")

        amount_minor = to_minor_units(amount)
        if amount_minor <= 0:
            raise PaymentIntentError("Amount must be positive")

        form: dict[str, str | int] = {
            "amount": amount_minor,
            "currency": self._settings.payment_currency,
            "payment_method_types[]": "card",
        }
        for key, value in (metadata or {}).items():
            form[f"metadata[{key}]"] = value

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                auth=(self._settings.payment_api_key, ""),
            ) as client:
                response = await client.post(self._intents_url, data=form)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Payment intent HTTP error: %s", e.response.status_code)
            raise PaymentIntentError("Payment provider rejected the request") from e
        except httpx.HTTPError as e:
            logger.error("Payment intent request failed: %s", str(e))
            raise PaymentIntentError("Payment provider unavailable") from e

        client_secret = payload.get("client_secret") if isinstance(payload, dict) else None
        if not client_secret:
            raise PaymentIntentError("Payment provider returned no client secret")

        logger.info("Payment intent created: %s", payload.get("id"))
        return PaymentIntent(
            intent_id=str(payload.get("id") or ""),
            client_secret=str(client_secret),
            amount_minor=amount_minor,
            currency=self._settings.payment_currency,
        )
