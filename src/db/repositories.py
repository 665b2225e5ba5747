"""Repository helpers for marketplace queries and persistence.

Write helpers only flush. The calling service owns the transaction and
decides when to commit, so multi-step workflows stay atomic.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, TypeVar

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from src.models.advertisement import Advertisement
from src.models.base import Base, new_id
from src.models.listing import STATUS_VERIFIED, Listing
from src.models.offer import OFFER_ACCEPTED, OFFER_REJECTED, Offer
from src.models.payment import Payment
from src.models.report import Report
from src.models.review import Review
from src.models.user import User
from src.models.wishlist import WishlistItem

ModelT = TypeVar("ModelT", bound=Base)


@dataclass(slots=True)
class UserInsert:
    """Payload used to register a user."""

    email: str
    name: str | None = None
    photo_url: str | None = None
    role: str | None = None
    last_login_at: datetime | None = None


@dataclass(slots=True)
class ListingInsert:
    """Payload used to insert a property listing."""

    title: str
    location: str
    agent_name: str
    agent_email: str
    min_price: Decimal
    max_price: Decimal
    image: str | None = None
    description: str | None = None
    agent_image: str | None = None
    installment_plan: Decimal | None = None


@dataclass(slots=True)
class OfferInsert:
    """Payload used to insert a buyer offer."""

    property_id: str
    title: str
    location: str
    image: str
    agent_name: str
    buyer_name: str
    buyer_email: str
    offer_amount: Decimal
    buying_date: str
    agent_email: str | None = None


@dataclass(slots=True)
class PaymentInsert:
    """Payload used to record a payment."""

    property_id: str
    email: str
    amount: Decimal
    transaction_id: str
    payment_method: str
    paid_at: datetime
    paid_at_display: str
    offer_id: str | None = None


@dataclass(slots=True)
class ReviewInsert:
    """Payload used to insert a review."""

    property_id: str
    reviewer_name: str
    reviewer_email: str
    rating: int
    comment: str
    property_title: str | None = None
    agent_name: str | None = None
    reviewer_image: str | None = None


@dataclass(slots=True)
class WishlistInsert:
    """Payload used to insert a wishlist entry."""

    property_id: str
    user_email: str
    title: str | None = None
    location: str | None = None
    image: str | None = None
    agent_name: str | None = None
    agent_email: str | None = None
    agent_image: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    status: str | None = None


@dataclass(slots=True)
class ReportInsert:
    """Payload used to insert a listing report."""

    property_id: str
    reporter_name: str
    reporter_email: str
    description: str
    property_title: str | None = None
    agent_name: str | None = None
    agent_email: str | None = None


@dataclass(slots=True)
class AdvertisementInsert:
    """Payload used to insert an advertisement snapshot."""

    property_id: str
    title: str
    location: str
    min_price: Decimal
    max_price: Decimal
    status: str
    image: str | None = None
    installment_plan: Decimal | None = None
    agent_email: str | None = None


@dataclass(slots=True)
class DependentCleanup:
    """Rows removed alongside one or more listings."""

    reviews: int = 0
    reports: int = 0
    wishlist: int = 0
    advertisements: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "reviews_deleted": self.reviews,
            "reports_deleted": self.reports,
            "wishlist_deleted": self.wishlist,
            "advertisements_deleted": self.advertisements,
        }


@dataclass(slots=True)
class StatusCounts:
    """Row counts grouped by a status column."""

    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)


def _rowcount(result: Any) -> int:
    return int(getattr(result, "rowcount", 0) or 0)


async def _add(session: AsyncSession, row: ModelT) -> ModelT:
    session.add(row)
    await session.flush()
    return row


async def _scalars(session: AsyncSession, stmt: Select[Any]) -> list[Any]:
    result = await session.execute(stmt)
    return list(result.scalars().all())


# Users


async def fetch_user_by_email(session: AsyncSession, email: str) -> User | None:
    stmt = select(User).where(User.email == email)
    return (await session.execute(stmt)).scalar_one_or_none()


async def fetch_user_by_id(session: AsyncSession, user_id: str) -> User | None:
    return await session.get(User, user_id)


async def insert_user(session: AsyncSession, row: UserInsert) -> User:
    return await _add(session, User(**asdict(row)))


async def fetch_users(
    session: AsyncSession,
    *,
    role: str | None = None,
    limit: int = 500,
) -> list[User]:
    """Fetch users newest first, optionally restricted to one role."""

    stmt = select(User).order_by(User.created_at.desc())
    if role == "user":
        stmt = stmt.where(or_(User.role.is_(None), User.role == "user"))
    elif role:
        stmt = stmt.where(User.role == role)
    return await _scalars(session, stmt.limit(limit))


async def update_user(session: AsyncSession, user_id: str, **values: object) -> int:
    """Apply column updates to one user and return the match count."""

    stmt = update(User).where(User.id == user_id).values(**values)
    return _rowcount(await session.execute(stmt))


async def update_user_by_email(
    session: AsyncSession, email: str, **values: object
) -> int:
    stmt = update(User).where(User.email == email).values(**values)
    return _rowcount(await session.execute(stmt))


async def delete_user(session: AsyncSession, user_id: str) -> int:
    return _rowcount(await session.execute(delete(User).where(User.id == user_id)))


# Listings


async def insert_listing(session: AsyncSession, row: ListingInsert) -> Listing:
    return await _add(session, Listing(**asdict(row)))


async def fetch_listing(session: AsyncSession, listing_id: str) -> Listing | None:
    return await session.get(Listing, listing_id)


async def fetch_listings(
    session: AsyncSession,
    *,
    status: str | None = None,
    agent_email: str | None = None,
    search: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    sort: str | None = None,
    limit: int = 200,
) -> list[Listing]:
    """Fetch listings with optional filters.

    ``sort`` accepts ``price_asc`` or ``price_desc``; anything else orders
    newest first.
    """

    stmt = select(Listing)

    if status:
        stmt = stmt.where(Listing.status == status)

    if agent_email:
        stmt = stmt.where(Listing.agent_email == agent_email)

    if search:
        stmt = stmt.where(Listing.location.ilike(f"%{search}%"))

    if min_price is not None:
        stmt = stmt.where(Listing.max_price >= min_price)

    if max_price is not None:
        stmt = stmt.where(Listing.min_price <= max_price)

    if sort == "price_asc":
        stmt = stmt.order_by(Listing.min_price.asc(), Listing.created_at.desc())
    elif sort == "price_desc":
        stmt = stmt.order_by(Listing.min_price.desc(), Listing.created_at.desc())
    else:
        stmt = stmt.order_by(Listing.created_at.desc())

    return await _scalars(session, stmt.limit(limit))


async def fetch_listing_ids_by_agent(
    session: AsyncSession, agent_email: str
) -> list[str]:
    stmt = select(Listing.id).where(Listing.agent_email == agent_email)
    return await _scalars(session, stmt)


async def update_listing(
    session: AsyncSession, listing_id: str, **values: object
) -> int:
    """Apply column updates to one listing and return the match count."""

    if not values:
        return 0
    stmt = update(Listing).where(Listing.id == listing_id).values(**values)
    return _rowcount(await session.execute(stmt))


async def delete_listings(session: AsyncSession, listing_ids: Sequence[str]) -> int:
    if not listing_ids:
        return 0
    stmt = delete(Listing).where(Listing.id.in_(list(listing_ids)))
    return _rowcount(await session.execute(stmt))


async def delete_listing_dependents(
    session: AsyncSession, listing_ids: Sequence[str]
) -> DependentCleanup:
    """Delete reviews, reports, wishlist entries and ads for listings."""

    ids = list(listing_ids)
    if not ids:
        return DependentCleanup()

    reviews = await session.execute(delete(Review).where(Review.property_id.in_(ids)))
    reports = await session.execute(delete(Report).where(Report.property_id.in_(ids)))
    wishlist = await session.execute(
        delete(WishlistItem).where(WishlistItem.property_id.in_(ids))
    )
    ads = await session.execute(
        delete(Advertisement).where(Advertisement.property_id.in_(ids))
    )

    return DependentCleanup(
        reviews=_rowcount(reviews),
        reports=_rowcount(reports),
        wishlist=_rowcount(wishlist),
        advertisements=_rowcount(ads),
    )


async def fetch_advertisable_listings(
    session: AsyncSession, *, limit: int = 200
) -> list[Listing]:
    """Verified listings with an installment plan that are not advertised."""

    advertised_ids = select(Advertisement.property_id)
    stmt = (
        select(Listing)
        .where(Listing.status == STATUS_VERIFIED)
        .where(Listing.installment_plan.is_not(None))
        .where(Listing.installment_plan != 0)
        .where(Listing.id.not_in(advertised_ids))
        .order_by(Listing.created_at.desc())
        .limit(limit)
    )
    return await _scalars(session, stmt)


# Offers


async def insert_offer(session: AsyncSession, row: OfferInsert) -> Offer:
    return await _add(session, Offer(**asdict(row)))


async def fetch_offer(session: AsyncSession, offer_id: str) -> Offer | None:
    return await session.get(Offer, offer_id)


async def fetch_offers(
    session: AsyncSession,
    *,
    buyer_email: str | None = None,
    agent_email: str | None = None,
    property_id: str | None = None,
    status: str | None = None,
    limit: int = 200,
) -> list[Offer]:
    """Fetch offers newest first with optional filters."""

    stmt = select(Offer).order_by(Offer.created_at.desc())

    if buyer_email:
        stmt = stmt.where(Offer.buyer_email == buyer_email)

    if agent_email:
        stmt = stmt.where(Offer.agent_email == agent_email)

    if property_id:
        stmt = stmt.where(Offer.property_id == property_id)

    if status:
        stmt = stmt.where(Offer.status == status)

    return await _scalars(session, stmt.limit(limit))


async def transition_offer(
    session: AsyncSession,
    offer_id: str,
    *,
    from_status: str,
    to_status: str,
    **values: object,
) -> int:
    """Move one offer between statuses; zero when it was not in ``from_status``."""

    stmt = (
        update(Offer)
        .where(Offer.id == offer_id)
        .where(Offer.status == from_status)
        .values(status=to_status, **values)
    )
    return _rowcount(await session.execute(stmt))


async def reject_sibling_offers(
    session: AsyncSession, property_id: str, accepted_offer_id: str
) -> int:
    stmt = (
        update(Offer)
        .where(Offer.property_id == property_id)
        .where(Offer.id != accepted_offer_id)
        .values(status=OFFER_REJECTED)
    )
    return _rowcount(await session.execute(stmt))


async def fetch_accepted_offer(
    session: AsyncSession, property_id: str
) -> Offer | None:
    stmt = (
        select(Offer)
        .where(Offer.property_id == property_id)
        .where(Offer.status == OFFER_ACCEPTED)
        .order_by(Offer.created_at.desc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


# Payments


async def insert_payment(session: AsyncSession, row: PaymentInsert) -> Payment:
    return await _add(session, Payment(**asdict(row)))


async def fetch_payments(
    session: AsyncSession,
    *,
    email: str | None = None,
    limit: int = 200,
) -> list[Payment]:
    stmt = select(Payment).order_by(Payment.paid_at.desc())
    if email:
        stmt = stmt.where(Payment.email == email)
    return await _scalars(session, stmt.limit(limit))


# Reviews


async def insert_review(session: AsyncSession, row: ReviewInsert) -> Review:
    return await _add(session, Review(**asdict(row)))


async def fetch_reviews(
    session: AsyncSession,
    *,
    property_id: str | None = None,
    reviewer_email: str | None = None,
    limit: int = 200,
) -> list[Review]:
    stmt = select(Review).order_by(Review.created_at.desc())
    if property_id:
        stmt = stmt.where(Review.property_id == property_id)
    if reviewer_email:
        stmt = stmt.where(Review.reviewer_email == reviewer_email)
    return await _scalars(session, stmt.limit(limit))


async def delete_review(
    session: AsyncSession, review_id: str, *, reviewer_email: str | None = None
) -> int:
    stmt = delete(Review).where(Review.id == review_id)
    if reviewer_email:
        stmt = stmt.where(Review.reviewer_email == reviewer_email)
    return _rowcount(await session.execute(stmt))


# Wishlist


async def insert_wishlist_item(session: AsyncSession, row: WishlistInsert) -> int:
    """Insert a wishlist entry, ignoring duplicates. Returns rows inserted."""

    dialect_name = session.get_bind().dialect.name

    if dialect_name == "postgresql":
        stmt = (
            pg_insert(WishlistItem)
            .values(id=new_id(), **asdict(row))
            .on_conflict_do_nothing(constraint="uq_wishlist_user_property")
            .returning(WishlistItem.id)
        )
        result = await session.execute(stmt)
        return len(result.scalars().all())

    exists_stmt = (
        select(WishlistItem.id)
        .where(WishlistItem.user_email == row.user_email)
        .where(WishlistItem.property_id == row.property_id)
    )
    if (await session.execute(exists_stmt)).scalar_one_or_none() is not None:
        return 0
    await _add(session, WishlistItem(**asdict(row)))
    return 1


async def fetch_wishlist(
    session: AsyncSession, user_email: str, *, limit: int = 200
) -> list[WishlistItem]:
    stmt = (
        select(WishlistItem)
        .where(WishlistItem.user_email == user_email)
        .order_by(WishlistItem.created_at.desc())
        .limit(limit)
    )
    return await _scalars(session, stmt)


async def delete_wishlist_item(
    session: AsyncSession, item_id: str, *, user_email: str
) -> int:
    stmt = (
        delete(WishlistItem)
        .where(WishlistItem.id == item_id)
        .where(WishlistItem.user_email == user_email)
    )
    return _rowcount(await session.execute(stmt))


# Reports


async def insert_report(session: AsyncSession, row: ReportInsert) -> Report:
    return await _add(session, Report(**asdict(row)))


async def fetch_reports(session: AsyncSession, *, limit: int = 200) -> list[Report]:
    stmt = select(Report).order_by(Report.created_at.desc()).limit(limit)
    return await _scalars(session, stmt)


async def delete_report(session: AsyncSession, report_id: str) -> int:
    return _rowcount(await session.execute(delete(Report).where(Report.id == report_id)))


# Advertisements


async def fetch_advertisement(
    session: AsyncSession, property_id: str
) -> Advertisement | None:
    stmt = select(Advertisement).where(Advertisement.property_id == property_id)
    return (await session.execute(stmt)).scalar_one_or_none()


async def insert_advertisement(
    session: AsyncSession, row: AdvertisementInsert
) -> int:
    """Insert an advertisement, ignoring duplicates. Returns rows inserted."""

    dialect_name = session.get_bind().dialect.name

    if dialect_name == "postgresql":
        stmt = (
            pg_insert(Advertisement)
            .values(id=new_id(), **asdict(row))
            .on_conflict_do_nothing(constraint="uq_advertisements_property")
            .returning(Advertisement.id)
        )
        result = await session.execute(stmt)
        return len(result.scalars().all())

    if await fetch_advertisement(session, row.property_id) is not None:
        return 0
    await _add(session, Advertisement(**asdict(row)))
    return 1


async def fetch_advertisements(
    session: AsyncSession, *, limit: int = 200
) -> list[Advertisement]:
    stmt = select(Advertisement).order_by(Advertisement.created_at.desc()).limit(limit)
    return await _scalars(session, stmt)


async def delete_advertisement(session: AsyncSession, property_id: str) -> int:
    stmt = delete(Advertisement).where(Advertisement.property_id == property_id)
    return _rowcount(await session.execute(stmt))


# Aggregates


async def count_rows(
    session: AsyncSession, model: type[Base], *criteria: Any
) -> int:
    """Count rows of ``model`` matching optional where criteria."""

    stmt = select(func.count()).select_from(model)
    for criterion in criteria:
        stmt = stmt.where(criterion)
    return int((await session.execute(stmt)).scalar_one_or_none() or 0)


async def count_by_status(
    session: AsyncSession,
    status_column: InstrumentedAttribute[Any],
    *criteria: Any,
) -> StatusCounts:
    """Count rows grouped by ``status_column``."""

    stmt = select(status_column, func.count()).group_by(status_column)
    for criterion in criteria:
        stmt = stmt.where(criterion)

    rows = (await session.execute(stmt)).all()
    by_status = {str(row[0]): int(row[1]) for row in rows}
    return StatusCounts(total=sum(by_status.values()), by_status=by_status)


async def sum_column(
    session: AsyncSession,
    column: InstrumentedAttribute[Any],
    *criteria: Any,
) -> float:
    stmt = select(func.coalesce(func.sum(column), 0))
    for criterion in criteria:
        stmt = stmt.where(criterion)
    return float((await session.execute(stmt)).scalar_one_or_none() or 0)
