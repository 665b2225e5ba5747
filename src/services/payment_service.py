"""Business logic for recording payments against accepted offers."""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    PaymentInsert,
    fetch_accepted_offer,
    fetch_payments,
    insert_payment,
    transition_offer,
)
from src.integrations.base import PaymentGateway
from src.models.base import utcnow
from src.models.offer import OFFER_ACCEPTED, OFFER_PAID
from src.services.serializers import payment_to_dict

logger = logging.getLogger(__name__)

PAID_AT_DISPLAY_FORMAT = "%b %d, %Y, %I:%M %p UTC"


def format_paid_at(value: datetime) -> str:
    return value.strftime(PAID_AT_DISPLAY_FORMAT)


class PaymentService:
    """Service layer for payments and payment intents."""

    def __init__(
        self, session: AsyncSession, gateway: PaymentGateway | None = None
    ) -> None:
        self._session = session
        self._gateway = gateway

    async def record_payment(
        self,
        *,
        property_id: str,
        email: str,
        amount: Decimal,
        transaction_id: str,
        payment_method: str,
    ) -> dict[str, object]:
        """Mark the accepted offer for ``property_id`` paid and store the payment.

        No payment row is written unless the offer transition succeeds; both
        writes commit together.
        """

        offer = await fetch_accepted_offer(self._session, property_id)
        if offer is None:
            return {
                "property_id": property_id,
                "status": "not_found",
                "message": "No accepted offer found for this property",
            }
        if offer.buyer_email != email:
            return {
                "property_id": property_id,
                "status": "forbidden",
                "message": "Only the buyer of the accepted offer can pay",
            }

        paid_at = utcnow()
        try:
            modified = await transition_offer(
                self._session,
                offer.id,
                from_status=OFFER_ACCEPTED,
                to_status=OFFER_PAID,
                paid_at=paid_at,
            )
            if modified == 0:
                await self._session.rollback()
                return {
                    "property_id": property_id,
                    "status": "not_found",
                    "message": "No accepted offer found for this property",
                }

            payment = await insert_payment(
                self._session,
                PaymentInsert(
                    property_id=property_id,
                    offer_id=offer.id,
                    email=email,
                    amount=amount,
                    transaction_id=transaction_id,
                    payment_method=payment_method,
                    paid_at=paid_at,
                    paid_at_display=format_paid_at(paid_at),
                ),
            )
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            logger.exception("Payment rolled back for property_id=%s", property_id)
            raise

        logger.info(
            "Payment recorded property_id=%s offer_id=%s transaction_id=%s",
            property_id,
            offer.id,
            transaction_id,
        )
        return {
            "property_id": property_id,
            "status": "paid",
            "message": "Payment recorded",
            "offer_id": offer.id,
            "inserted_id": payment.id,
            "payment": payment_to_dict(payment),
        }

    async def list_payments(
        self, *, email: str | None = None, limit: int = 200
    ) -> list[dict[str, object]]:
        rows = await fetch_payments(self._session, email=email, limit=limit)
        return [payment_to_dict(row) for row in rows]

    async def create_payment_intent(
        self, amount: Decimal, *, email: str, property_id: str | None = None
    ) -> dict[str, object]:
        """Create a provider payment intent and return its client secret."""

        if self._gateway is None:
            raise RuntimeError("PaymentService has no payment gateway configured")

        metadata = {"email": email}
        if property_id:
            metadata["property_id"] = property_id

        intent = await self._gateway.create_intent(amount, metadata=metadata)
        return {
            "client_secret": intent.client_secret,
            "intent_id": intent.intent_id,
            "amount": intent.amount_minor,
            "currency": intent.currency,
        }
