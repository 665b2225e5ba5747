"""Business logic for buyer offers and offer settlement."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    OfferInsert,
    delete_listing_dependents,
    delete_listings,
    fetch_accepted_offer,
    fetch_listing,
    fetch_offer,
    fetch_offers,
    insert_offer,
    reject_sibling_offers,
    transition_offer,
)
from src.locks import LockUnavailableError, settlement_lock
from src.models.listing import STATUS_REJECTED
from src.models.offer import OFFER_ACCEPTED, OFFER_PAID, OFFER_PENDING, OFFER_REJECTED
from src.services.serializers import iso, money, offer_to_dict

logger = logging.getLogger(__name__)


def _settled(offer_id: str) -> dict[str, object]:
    return {
        "offer_id": offer_id,
        "status": "not_found",
        "message": "Offer not found or already settled",
    }


class OfferService:
    """Service layer for offers, acceptance and the sold report."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_offer(self, row: OfferInsert) -> dict[str, object]:
        """Record a pending offer against a live, non-rejected listing.

        The listing check and the insert run under the listing's settlement
        lock so an offer cannot land on a listing that is being settled.
        """

        try:
            async with settlement_lock(row.property_id):
                listing = await fetch_listing(self._session, row.property_id)
                if listing is None or listing.status == STATUS_REJECTED:
                    return {
                        "property_id": row.property_id,
                        "status": "not_found",
                        "message": "Property not found or not accepting offers",
                    }

                row.agent_email = listing.agent_email
                offer = await insert_offer(self._session, row)
                await self._session.commit()
        except LockUnavailableError:
            await self._session.rollback()
            return {
                "property_id": row.property_id,
                "status": "conflict",
                "message": "A settlement for this property is in progress",
            }
        except Exception:
            await self._session.rollback()
            logger.exception(
                "Offer creation rolled back for property_id=%s", row.property_id
            )
            raise

        logger.info(
            "Offer created id=%s property_id=%s buyer_email=%s",
            offer.id,
            offer.property_id,
            offer.buyer_email,
        )
        return {
            "status": "created",
            "message": "Offer submitted",
            "inserted_id": offer.id,
            "offer": offer_to_dict(offer),
        }

    async def get_offer(self, offer_id: str) -> dict[str, object] | None:
        offer = await fetch_offer(self._session, offer_id)
        return offer_to_dict(offer) if offer is not None else None

    async def list_buyer_offers(
        self, buyer_email: str, *, limit: int = 200
    ) -> list[dict[str, object]]:
        rows = await fetch_offers(self._session, buyer_email=buyer_email, limit=limit)
        return [offer_to_dict(row) for row in rows]

    async def list_agent_offers(
        self, agent_email: str, *, status: str | None = None, limit: int = 200
    ) -> list[dict[str, object]]:
        rows = await fetch_offers(
            self._session, agent_email=agent_email, status=status, limit=limit
        )
        return [offer_to_dict(row) for row in rows]

    async def list_offers_for_property(
        self, property_id: str
    ) -> list[dict[str, object]]:
        """Narrow "who offered" view for the listing agent."""

        rows = await fetch_offers(self._session, property_id=property_id)
        return [
            {
                "id": row.id,
                "buyer_email": row.buyer_email,
                "buyer_name": row.buyer_name,
                "offer_amount": money(row.offer_amount),
                "status": row.status,
            }
            for row in rows
        ]

    async def get_accepted_offer(self, property_id: str) -> dict[str, object] | None:
        offer = await fetch_accepted_offer(self._session, property_id)
        return offer_to_dict(offer) if offer is not None else None

    async def sold_properties(self, agent_email: str) -> list[dict[str, object]]:
        rows = await fetch_offers(
            self._session, agent_email=agent_email, status=OFFER_PAID
        )
        return [
            {
                "property_id": row.property_id,
                "title": row.title,
                "location": row.location,
                "sold_price": money(row.offer_amount),
                "buyer_name": row.buyer_name,
                "buyer_email": row.buyer_email,
                "sold_at": iso(row.paid_at),
                "status": row.status,
            }
            for row in rows
        ]

    async def reject_offer(
        self, offer_id: str, *, actor_email: str, is_admin: bool = False
    ) -> dict[str, object]:
        """Reject a pending offer. Settled offers are left untouched."""

        offer = await fetch_offer(self._session, offer_id)
        if offer is None or offer.status != OFFER_PENDING:
            return _settled(offer_id)
        if not is_admin and offer.agent_email != actor_email:
            return {
                "offer_id": offer_id,
                "status": "forbidden",
                "message": "Only the listing agent can reject this offer",
            }

        modified = await transition_offer(
            self._session,
            offer_id,
            from_status=OFFER_PENDING,
            to_status=OFFER_REJECTED,
        )
        await self._session.commit()
        if modified == 0:
            return _settled(offer_id)

        logger.info("Offer rejected id=%s", offer_id)
        return {
            "offer_id": offer_id,
            "status": "rejected",
            "message": "Offer rejected",
            "modified_count": modified,
        }

    async def accept_offer(
        self, offer_id: str, *, actor_email: str, is_admin: bool = False
    ) -> dict[str, object]:
        """Accept one offer and settle its listing.

        In a single transaction, under the listing's settlement lock: the
        offer becomes ``accepted``, sibling offers become ``rejected``, the
        listing is deleted, and its reviews, reports, wishlist entries and
        advertisements are deleted. Nothing is committed if any step fails.
        """

        offer = await fetch_offer(self._session, offer_id)
        if offer is None or offer.status != OFFER_PENDING:
            return _settled(offer_id)
        if not is_admin and offer.agent_email != actor_email:
            return {
                "offer_id": offer_id,
                "status": "forbidden",
                "message": "Only the listing agent can accept this offer",
            }

        property_id = offer.property_id
        try:
            async with settlement_lock(property_id):
                accepted = await transition_offer(
                    self._session,
                    offer_id,
                    from_status=OFFER_PENDING,
                    to_status=OFFER_ACCEPTED,
                )
                if accepted == 0:
                    await self._session.rollback()
                    return _settled(offer_id)

                rejected = await reject_sibling_offers(
                    self._session, property_id, offer_id
                )
                listing_deleted = await delete_listings(self._session, [property_id])
                cleanup = await delete_listing_dependents(
                    self._session, [property_id]
                )
                await self._session.commit()
        except LockUnavailableError:
            await self._session.rollback()
            return {
                "offer_id": offer_id,
                "status": "conflict",
                "message": "Another settlement for this property is in progress",
            }
        except Exception:
            await self._session.rollback()
            logger.exception("Offer acceptance rolled back for offer_id=%s", offer_id)
            raise

        logger.info(
            "Offer accepted id=%s property_id=%s siblings_rejected=%s",
            offer_id,
            property_id,
            rejected,
        )
        return {
            "offer_id": offer_id,
            "property_id": property_id,
            "status": "accepted",
            "message": "Offer accepted",
            "success": True,
            "rejected_offers": rejected,
            "listing_deleted": listing_deleted,
            **cleanup.as_dict(),
        }
