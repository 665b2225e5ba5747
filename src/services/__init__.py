"""Service layer for marketplace routes."""

from src.services.advertisement_service import AdvertisementService
from src.services.listing_service import ListingService
from src.services.offer_service import OfferService
from src.services.payment_service import PaymentService
from src.services.report_service import ReportService
from src.services.review_service import ReviewService
from src.services.stats_service import StatsService
from src.services.user_service import UserService
from src.services.wishlist_service import WishlistService

__all__ = [
    "AdvertisementService",
    "ListingService",
    "OfferService",
    "PaymentService",
    "ReportService",
    "ReviewService",
    "StatsService",
    "UserService",
    "WishlistService",
]
