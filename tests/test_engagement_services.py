"""Tests for wishlist, reviews, reports and dashboard statistics."""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import ListingInsert, OfferInsert, ReportInsert, ReviewInsert
from src.services.listing_service import ListingService
from src.services.offer_service import OfferService
from src.services.report_service import ReportService
from src.services.review_service import ReviewService
from src.services.stats_service import StatsService
from src.services.user_service import UserService
from src.services.wishlist_service import WishlistService

AGENT = "agent@example.com"
BUYER = "buyer@example.com"


async def _listing_id(session: AsyncSession) -> str:
    result = await ListingService(session).create_listing(
        ListingInsert(
            title="Corner Plot",
            location="Chittagong",
            agent_name="Agent A",
            agent_email=AGENT,
            min_price=Decimal("20000"),
            max_price=Decimal("30000"),
        )
    )
    return str(result["inserted_id"])


def _review(property_id: str, *, email: str = BUYER, rating: int = 4) -> ReviewInsert:
    return ReviewInsert(
        property_id=property_id,
        reviewer_name="Buyer",
        reviewer_email=email,
        rating=rating,
        comment="Solid build",
    )


@pytest.mark.anyio
async def test_wishlist_add_is_unique_per_user(db_session: AsyncSession) -> None:
    listing_id = await _listing_id(db_session)
    service = WishlistService(db_session)

    first = await service.add_item(BUYER, listing_id)
    second = await service.add_item(BUYER, listing_id)
    other = await service.add_item("friend@example.com", listing_id)
    missing = await service.add_item(BUYER, "missing")

    assert first["status"] == "added"
    assert second["status"] == "already_exists"
    assert other["status"] == "added"
    assert missing["status"] == "not_found"

    items = await service.list_items(BUYER)
    assert len(items) == 1
    assert items[0]["title"] == "Corner Plot"
    assert items[0]["agent_email"] == AGENT


@pytest.mark.anyio
async def test_wishlist_remove_is_scoped_to_owner(db_session: AsyncSession) -> None:
    listing_id = await _listing_id(db_session)
    service = WishlistService(db_session)
    await service.add_item(BUYER, listing_id)
    item_id = str((await service.list_items(BUYER))[0]["id"])

    stranger = await service.remove_item("friend@example.com", item_id)
    owner = await service.remove_item(BUYER, item_id)

    assert stranger["status"] == "not_found"
    assert owner["status"] == "removed"
    assert await service.list_items(BUYER) == []


@pytest.mark.anyio
async def test_reviews_snapshot_listing_and_filter(db_session: AsyncSession) -> None:
    listing_id = await _listing_id(db_session)
    service = ReviewService(db_session)

    created = await service.add_review(_review(listing_id))
    await service.add_review(_review(listing_id, email="second@example.com", rating=2))
    missing = await service.add_review(_review("missing"))

    assert created["status"] == "created"
    assert created["review"]["property_title"] == "Corner Plot"
    assert created["review"]["agent_name"] == "Agent A"
    assert missing["status"] == "not_found"
    assert len(await service.reviews_for_property(listing_id)) == 2
    assert len(await service.latest_reviews(limit=1)) == 1
    mine = await service.reviews_by_user(BUYER)
    assert [row["reviewer_email"] for row in mine] == [BUYER]


@pytest.mark.anyio
async def test_review_delete_respects_reviewer(db_session: AsyncSession) -> None:
    listing_id = await _listing_id(db_session)
    service = ReviewService(db_session)
    review_id = str((await service.add_review(_review(listing_id)))["inserted_id"])

    stranger = await service.delete_review(
        review_id, reviewer_email="friend@example.com"
    )
    owner = await service.delete_review(review_id, reviewer_email=BUYER)

    assert stranger["status"] == "not_found"
    assert owner["status"] == "deleted"


@pytest.mark.anyio
async def test_report_lifecycle(db_session: AsyncSession) -> None:
    listing_id = await _listing_id(db_session)
    service = ReportService(db_session)

    filed = await service.file_report(
        ReportInsert(
            property_id=listing_id,
            reporter_name="Buyer",
            reporter_email=BUYER,
            description="Listing price looks fake",
        )
    )
    reports = await service.list_reports()

    assert filed["status"] == "created"
    assert reports[0]["agent_email"] == AGENT
    assert reports[0]["property_title"] == "Corner Plot"

    deleted = await service.delete_report(str(filed["inserted_id"]))
    again = await service.delete_report(str(filed["inserted_id"]))
    assert deleted["status"] == "deleted"
    assert again["status"] == "not_found"


@pytest.mark.anyio
async def test_stats_count_by_role_and_status(db_session: AsyncSession) -> None:
    users = UserService(db_session)
    agent_id = str((await users.register_user(AGENT))["inserted_id"])
    await users.make_agent(agent_id)
    await users.register_user(BUYER)
    listing_id = await _listing_id(db_session)
    await WishlistService(db_session).add_item(BUYER, listing_id)
    await OfferService(db_session).create_offer(
        OfferInsert(
            property_id=listing_id,
            title="Corner Plot",
            location="Chittagong",
            image="https://img.example.com/plot.jpg",
            agent_name="Agent A",
            buyer_name="Buyer",
            buyer_email=BUYER,
            offer_amount=Decimal("25000"),
            buying_date="2026-12-01",
        )
    )
    stats = StatsService(db_session)

    admin = await stats.admin_stats()
    agent = await stats.agent_stats(AGENT)
    user = await stats.user_stats(BUYER)

    assert admin["users"] == {"total": 2, "agents": 1, "admins": 0, "fraud": 0}
    assert admin["properties"] == {
        "total": 1,
        "available": 1,
        "verified": 0,
        "rejected": 0,
    }
    assert admin["offers"]["pending"] == 1
    assert agent["properties"]["total"] == 1
    assert agent["offers"]["pending"] == 1
    assert agent["sold"] == 0
    assert user["wishlist"] == 1
    assert user["offers"]["total"] == 1
    assert user["payments"] == {"count": 0, "total_paid": 0.0}
