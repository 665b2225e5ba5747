from __future__ import annotations

# ruff: noqa: E402

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import cast

from sqlalchemy.ext.asyncio import AsyncSession

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.db.repositories import ListingInsert, fetch_user_by_email
from src.db.session import dispose_engine, session_context
from src.services.advertisement_service import AdvertisementService
from src.services.listing_service import ListingService
from src.services.user_service import UserService

SEED_ADMIN = "admin@demo.brickbase.test"
SEED_AGENT = "agent@demo.brickbase.test"
SEED_BUYER = "buyer@demo.brickbase.test"


@dataclass(frozen=True)
class CliArgs:
    cleanup: bool
    advertise: bool


def _parse_args() -> CliArgs:
    parser = argparse.ArgumentParser(
        description="Seed demo users and listings for local development."
    )
    _ = parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Delete every listing of the demo agent before reseeding.",
    )
    parser.set_defaults(advertise=True)
    _ = parser.add_argument(
        "--no-advertise",
        dest="advertise",
        action="store_false",
        help="Do not advertise the verified demo listings.",
    )
    namespace = parser.parse_args()
    return CliArgs(
        cleanup=cast(bool, namespace.cleanup),
        advertise=cast(bool, namespace.advertise),
    )


def _build_seed_listings() -> list[ListingInsert]:
    return [
        ListingInsert(
            title="Lakeside Duplex",
            location="Gulshan 2, Dhaka",
            agent_name="Demo Agent",
            agent_email=SEED_AGENT,
            min_price=Decimal("180000"),
            max_price=Decimal("220000"),
            image="https://images.demo.brickbase.test/lakeside.jpg",
            description="Four bedrooms facing the lake.",
            installment_plan=Decimal("3500"),
        ),
        ListingInsert(
            title="Hillview Cottage",
            location="Sreemangal, Sylhet",
            agent_name="Demo Agent",
            agent_email=SEED_AGENT,
            min_price=Decimal("75000"),
            max_price=Decimal("90000"),
            image="https://images.demo.brickbase.test/hillview.jpg",
            description="Tea garden views, two bedrooms.",
        ),
        ListingInsert(
            title="Harbor Studio",
            location="Agrabad, Chittagong",
            agent_name="Demo Agent",
            agent_email=SEED_AGENT,
            min_price=Decimal("40000"),
            max_price=Decimal("52000"),
            image="https://images.demo.brickbase.test/harbor.jpg",
            installment_plan=Decimal("900"),
        ),
    ]


async def _ensure_user(session: AsyncSession, email: str, name: str, role: str) -> str:
    users = UserService(session)
    _ = await users.register_user(email, name=name)
    user = await fetch_user_by_email(session, email)
    if user is None:
        raise RuntimeError(f"user {email} missing after registration")

    if role == "admin":
        _ = await users.make_admin(user.id)
    elif role == "agent":
        _ = await users.make_agent(user.id)
    return user.id


async def _run(args: CliArgs) -> dict[str, object]:
    cleanup: dict[str, object] | None = None

    async with session_context() as session:
        user_ids = {
            "admin": await _ensure_user(session, SEED_ADMIN, "Demo Admin", "admin"),
            "agent": await _ensure_user(session, SEED_AGENT, "Demo Agent", "agent"),
            "buyer": await _ensure_user(session, SEED_BUYER, "Demo Buyer", "user"),
        }

    if args.cleanup:
        async with session_context() as session:
            cleanup = await ListingService(session).delete_agent_listings(SEED_AGENT)

    listing_ids: list[str] = []
    advertised: list[str] = []
    async with session_context() as session:
        listings = ListingService(session)
        ads = AdvertisementService(session)
        for row in _build_seed_listings():
            created = await listings.create_listing(row)
            listing_id = str(created["inserted_id"])
            listing_ids.append(listing_id)
            _ = await listings.verify_listing(listing_id)

            if args.advertise and row.installment_plan:
                result = await ads.advertise(listing_id)
                if result["status"] == "created":
                    advertised.append(listing_id)

    await dispose_engine()
    return {
        "users": user_ids,
        "cleanup": cleanup,
        "listing_ids": listing_ids,
        "advertised": advertised,
    }


def main() -> int:
    args = _parse_args()
    result = asyncio.run(_run(args))
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
