"""Workflow tests for offer acceptance, rejection and payment."""

import importlib
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import (
    ListingInsert,
    OfferInsert,
    ReportInsert,
    ReviewInsert,
    count_rows,
)
from src.locks import acquire_lock, build_lock_key
from src.models.advertisement import Advertisement
from src.models.listing import Listing
from src.models.offer import Offer
from src.models.payment import Payment
from src.models.report import Report
from src.models.review import Review
from src.models.wishlist import WishlistItem
from src.services.advertisement_service import AdvertisementService
from src.services.listing_service import ListingService
from src.services.offer_service import OfferService
from src.services.payment_service import PaymentService
from src.services.report_service import ReportService
from src.services.review_service import ReviewService
from src.services.wishlist_service import WishlistService

offer_service_module = importlib.import_module("src.services.offer_service")

AGENT = "agent@example.com"
BUYER = "buyer@example.com"
OTHER_BUYER = "second@example.com"


async def _create_listing(session: AsyncSession, *, verified: bool = True) -> str:
    result = await ListingService(session).create_listing(
        ListingInsert(
            title="Lake House",
            location="Dhaka",
            agent_name="Agent A",
            agent_email=AGENT,
            min_price=Decimal("100000"),
            max_price=Decimal("150000"),
            image="https://img.example.com/lake.jpg",
            installment_plan=Decimal("2500"),
        )
    )
    listing_id = str(result["inserted_id"])
    if verified:
        await ListingService(session).verify_listing(listing_id)
    return listing_id


async def _create_offer(
    session: AsyncSession, listing_id: str, buyer_email: str, amount: str
) -> str:
    result = await OfferService(session).create_offer(
        OfferInsert(
            property_id=listing_id,
            title="Lake House",
            location="Dhaka",
            image="https://img.example.com/lake.jpg",
            agent_name="Agent A",
            buyer_name=buyer_email.split("@")[0],
            buyer_email=buyer_email,
            offer_amount=Decimal(amount),
            buying_date="2026-11-01",
        )
    )
    assert result["status"] == "created"
    return str(result["inserted_id"])


async def _offer_status(session: AsyncSession, offer_id: str) -> str:
    stmt = select(Offer.status).where(Offer.id == offer_id)
    return (await session.execute(stmt)).scalar_one()


async def _attach_dependents(session: AsyncSession, listing_id: str) -> None:
    await ReviewService(session).add_review(
        ReviewInsert(
            property_id=listing_id,
            reviewer_name="Buyer",
            reviewer_email=BUYER,
            rating=5,
            comment="Great view",
        )
    )
    await ReportService(session).file_report(
        ReportInsert(
            property_id=listing_id,
            reporter_name="Buyer",
            reporter_email=BUYER,
            description="Photos look edited",
        )
    )
    await WishlistService(session).add_item(OTHER_BUYER, listing_id)
    await AdvertisementService(session).advertise(listing_id)


@pytest.mark.anyio
async def test_offer_created_with_agent_email_from_listing(
    db_session: AsyncSession,
) -> None:
    listing_id = await _create_listing(db_session)
    offer_id = await _create_offer(db_session, listing_id, BUYER, "120000")

    offer = await OfferService(db_session).get_offer(offer_id)

    assert offer is not None
    assert offer["status"] == "pending"
    assert offer["agent_email"] == AGENT


@pytest.mark.anyio
async def test_offer_on_missing_listing_is_not_found(db_session: AsyncSession) -> None:
    result = await OfferService(db_session).create_offer(
        OfferInsert(
            property_id="missing",
            title="Ghost",
            location="Nowhere",
            image="x",
            agent_name="Nobody",
            buyer_name="Buyer",
            buyer_email=BUYER,
            offer_amount=Decimal("10"),
            buying_date="2026-11-01",
        )
    )

    assert result["status"] == "not_found"
    assert await count_rows(db_session, Offer) == 0


@pytest.mark.anyio
async def test_accept_offer_settles_listing_and_clears_dependents(
    db_session: AsyncSession,
) -> None:
    listing_id = await _create_listing(db_session)
    await _attach_dependents(db_session, listing_id)
    winning = await _create_offer(db_session, listing_id, BUYER, "140000")
    losing = await _create_offer(db_session, listing_id, OTHER_BUYER, "130000")

    result = await OfferService(db_session).accept_offer(winning, actor_email=AGENT)

    assert result["status"] == "accepted"
    assert result["rejected_offers"] == 1
    assert result["listing_deleted"] == 1
    assert result["reviews_deleted"] == 1
    assert result["reports_deleted"] == 1
    assert result["wishlist_deleted"] == 1
    assert result["advertisements_deleted"] == 1

    assert await _offer_status(db_session, winning) == "accepted"
    assert await _offer_status(db_session, losing) == "rejected"
    assert await count_rows(db_session, Listing, Listing.id == listing_id) == 0
    for model in (Review, Report, WishlistItem, Advertisement):
        assert await count_rows(db_session, model, model.property_id == listing_id) == 0


@pytest.mark.anyio
async def test_accepting_second_offer_after_settlement_is_not_found(
    db_session: AsyncSession,
) -> None:
    listing_id = await _create_listing(db_session)
    first = await _create_offer(db_session, listing_id, BUYER, "140000")
    second = await _create_offer(db_session, listing_id, OTHER_BUYER, "130000")
    service = OfferService(db_session)

    await service.accept_offer(first, actor_email=AGENT)
    result = await service.accept_offer(second, actor_email=AGENT)

    assert result["status"] == "not_found"
    assert await _offer_status(db_session, second) == "rejected"
    accepted = await service.get_accepted_offer(listing_id)
    assert accepted is not None
    assert accepted["id"] == first


@pytest.mark.anyio
async def test_accept_offer_by_other_agent_is_forbidden(
    db_session: AsyncSession,
) -> None:
    listing_id = await _create_listing(db_session)
    offer_id = await _create_offer(db_session, listing_id, BUYER, "140000")

    result = await OfferService(db_session).accept_offer(
        offer_id, actor_email="intruder@example.com"
    )

    assert result["status"] == "forbidden"
    assert await _offer_status(db_session, offer_id) == "pending"


@pytest.mark.anyio
async def test_admin_can_accept_any_offer(db_session: AsyncSession) -> None:
    listing_id = await _create_listing(db_session)
    offer_id = await _create_offer(db_session, listing_id, BUYER, "140000")

    result = await OfferService(db_session).accept_offer(
        offer_id, actor_email="admin@example.com", is_admin=True
    )

    assert result["status"] == "accepted"


@pytest.mark.anyio
async def test_accept_offer_returns_conflict_while_settlement_lock_held(
    db_session: AsyncSession,
) -> None:
    listing_id = await _create_listing(db_session)
    offer_id = await _create_offer(db_session, listing_id, BUYER, "140000")
    key = build_lock_key(scope="settlement", resource_id=listing_id)
    assert await acquire_lock(key, "someone-else", 30)

    result = await OfferService(db_session).accept_offer(offer_id, actor_email=AGENT)

    assert result["status"] == "conflict"
    assert await _offer_status(db_session, offer_id) == "pending"
    assert await count_rows(db_session, Listing, Listing.id == listing_id) == 1


@pytest.mark.anyio
async def test_create_offer_returns_conflict_while_settlement_lock_held(
    db_session: AsyncSession,
) -> None:
    listing_id = await _create_listing(db_session)
    key = build_lock_key(scope="settlement", resource_id=listing_id)
    assert await acquire_lock(key, "someone-else", 30)

    result = await OfferService(db_session).create_offer(
        OfferInsert(
            property_id=listing_id,
            title="Lake House",
            location="Dhaka",
            image="https://img.example.com/lake.jpg",
            agent_name="Agent A",
            buyer_name="buyer",
            buyer_email=BUYER,
            offer_amount=Decimal("140000"),
            buying_date="2026-11-01",
        )
    )

    assert result["status"] == "conflict"
    assert await count_rows(db_session, Offer) == 0


@pytest.mark.anyio
async def test_accept_offer_rolls_back_when_cascade_fails(
    monkeypatch: pytest.MonkeyPatch, db_session: AsyncSession
) -> None:
    listing_id = await _create_listing(db_session)
    winning = await _create_offer(db_session, listing_id, BUYER, "140000")
    losing = await _create_offer(db_session, listing_id, OTHER_BUYER, "130000")

    async def _boom(*_args: object, **_kwargs: object) -> int:
        raise RuntimeError("database went away")

    monkeypatch.setattr(offer_service_module, "delete_listings", _boom)

    with pytest.raises(RuntimeError):
        await OfferService(db_session).accept_offer(winning, actor_email=AGENT)

    assert await _offer_status(db_session, winning) == "pending"
    assert await _offer_status(db_session, losing) == "pending"
    assert await count_rows(db_session, Listing, Listing.id == listing_id) == 1


@pytest.mark.anyio
async def test_reject_offer_only_moves_pending_offers(db_session: AsyncSession) -> None:
    listing_id = await _create_listing(db_session)
    offer_id = await _create_offer(db_session, listing_id, BUYER, "140000")
    service = OfferService(db_session)

    first = await service.reject_offer(offer_id, actor_email=AGENT)
    second = await service.reject_offer(offer_id, actor_email=AGENT)
    accept = await service.accept_offer(offer_id, actor_email=AGENT)

    assert first["status"] == "rejected"
    assert second["status"] == "not_found"
    assert accept["status"] == "not_found"
    assert await _offer_status(db_session, offer_id) == "rejected"


@pytest.mark.anyio
async def test_payment_without_accepted_offer_is_not_found(
    db_session: AsyncSession,
) -> None:
    listing_id = await _create_listing(db_session)
    await _create_offer(db_session, listing_id, BUYER, "140000")

    result = await PaymentService(db_session).record_payment(
        property_id=listing_id,
        email=BUYER,
        amount=Decimal("140000"),
        transaction_id="pi_123",
        payment_method="card",
    )

    assert result["status"] == "not_found"
    assert await count_rows(db_session, Payment) == 0


@pytest.mark.anyio
async def test_payment_marks_accepted_offer_paid(db_session: AsyncSession) -> None:
    listing_id = await _create_listing(db_session)
    offer_id = await _create_offer(db_session, listing_id, BUYER, "140000")
    await OfferService(db_session).accept_offer(offer_id, actor_email=AGENT)
    service = PaymentService(db_session)

    result = await service.record_payment(
        property_id=listing_id,
        email=BUYER,
        amount=Decimal("140000"),
        transaction_id="pi_123",
        payment_method="card",
    )

    assert result["status"] == "paid"
    assert result["offer_id"] == offer_id
    assert await _offer_status(db_session, offer_id) == "paid"
    paid_at = await db_session.scalar(
        select(Offer.paid_at).where(Offer.id == offer_id)
    )
    assert paid_at is not None
    payments = await service.list_payments(email=BUYER)
    assert len(payments) == 1
    assert payments[0]["transaction_id"] == "pi_123"
    assert payments[0]["property_id"] == listing_id
    assert payments[0]["offer_id"] == offer_id
    assert payments[0]["paid_at_display"]

    sold = await OfferService(db_session).sold_properties(AGENT)
    assert [row["property_id"] for row in sold] == [listing_id]
    assert sold[0]["sold_at"] is not None
    assert sold[0]["sold_price"] == 140000.0

    again = await service.record_payment(
        property_id=listing_id,
        email=BUYER,
        amount=Decimal("140000"),
        transaction_id="pi_456",
        payment_method="card",
    )
    assert again["status"] == "not_found"
    assert await count_rows(db_session, Payment) == 1


@pytest.mark.anyio
async def test_payment_by_someone_else_is_forbidden(db_session: AsyncSession) -> None:
    listing_id = await _create_listing(db_session)
    offer_id = await _create_offer(db_session, listing_id, BUYER, "140000")
    await OfferService(db_session).accept_offer(offer_id, actor_email=AGENT)

    result = await PaymentService(db_session).record_payment(
        property_id=listing_id,
        email=OTHER_BUYER,
        amount=Decimal("140000"),
        transaction_id="pi_999",
        payment_method="card",
    )

    assert result["status"] == "forbidden"
    assert await _offer_status(db_session, offer_id) == "accepted"
