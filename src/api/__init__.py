"""HTTP routers for the marketplace API."""

from fastapi import APIRouter

from src.api import (
    advertisements,
    offers,
    payments,
    properties,
    reports,
    reviews,
    stats,
    users,
    wishlist,
)

api_router = APIRouter()
api_router.include_router(users.router)
# Static /properties/* paths must register before /properties/{listing_id}.
api_router.include_router(advertisements.router)
api_router.include_router(properties.router)
api_router.include_router(offers.router)
api_router.include_router(payments.router)
api_router.include_router(wishlist.router)
api_router.include_router(reviews.router)
api_router.include_router(reports.router)
api_router.include_router(stats.router)

__all__ = ["api_router"]
