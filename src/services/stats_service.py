"""Dashboard statistics for admins, agents and users."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import count_by_status, count_rows, sum_column
from src.models.advertisement import Advertisement
from src.models.listing import LISTING_STATUSES, Listing
from src.models.offer import OFFER_PAID, OFFER_STATUSES, Offer
from src.models.payment import Payment
from src.models.report import Report
from src.models.review import Review
from src.models.user import ROLE_ADMIN, ROLE_AGENT, User
from src.models.wishlist import WishlistItem


def _fill(by_status: dict[str, int], statuses: tuple[str, ...]) -> dict[str, int]:
    return {status: by_status.get(status, 0) for status in statuses}


class StatsService:
    """Service layer for role dashboard counts and totals."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def admin_stats(self) -> dict[str, object]:
        listings = await count_by_status(self._session, Listing.status)
        offers = await count_by_status(self._session, Offer.status)

        return {
            "users": {
                "total": await count_rows(self._session, User),
                "agents": await count_rows(self._session, User, User.role == ROLE_AGENT),
                "admins": await count_rows(self._session, User, User.role == ROLE_ADMIN),
                "fraud": await count_rows(self._session, User, User.is_fraud.is_(True)),
            },
            "properties": {
                "total": listings.total,
                **_fill(listings.by_status, LISTING_STATUSES),
            },
            "offers": {
                "total": offers.total,
                **_fill(offers.by_status, OFFER_STATUSES),
            },
            "reviews": await count_rows(self._session, Review),
            "reports": await count_rows(self._session, Report),
            "advertisements": await count_rows(self._session, Advertisement),
            "payments": {
                "count": await count_rows(self._session, Payment),
                "revenue": await sum_column(self._session, Payment.amount),
            },
        }

    async def agent_stats(self, agent_email: str) -> dict[str, object]:
        listings = await count_by_status(
            self._session, Listing.status, Listing.agent_email == agent_email
        )
        offers = await count_by_status(
            self._session, Offer.status, Offer.agent_email == agent_email
        )

        return {
            "agent_email": agent_email,
            "properties": {
                "total": listings.total,
                **_fill(listings.by_status, LISTING_STATUSES),
            },
            "offers": {
                "total": offers.total,
                **_fill(offers.by_status, OFFER_STATUSES),
            },
            "sold": offers.by_status.get(OFFER_PAID, 0),
            "sold_amount": await sum_column(
                self._session,
                Offer.offer_amount,
                Offer.agent_email == agent_email,
                Offer.status == OFFER_PAID,
            ),
            "advertised": await count_rows(
                self._session,
                Advertisement,
                Advertisement.agent_email == agent_email,
            ),
        }

    async def user_stats(self, email: str) -> dict[str, object]:
        offers = await count_by_status(
            self._session, Offer.status, Offer.buyer_email == email
        )

        return {
            "email": email,
            "wishlist": await count_rows(
                self._session, WishlistItem, WishlistItem.user_email == email
            ),
            "offers": {
                "total": offers.total,
                **_fill(offers.by_status, OFFER_STATUSES),
            },
            "reviews": await count_rows(
                self._session, Review, Review.reviewer_email == email
            ),
            "payments": {
                "count": await count_rows(
                    self._session, Payment, Payment.email == email
                ),
                "total_paid": await sum_column(
                    self._session, Payment.amount, Payment.email == email
                ),
            },
        }
