"""SQLAlchemy ORM models."""

from src.models.advertisement import Advertisement
from src.models.listing import Listing
from src.models.offer import Offer
from src.models.payment import Payment
from src.models.report import Report
from src.models.review import Review
from src.models.user import User
from src.models.wishlist import WishlistItem

__all__ = [
    "Advertisement",
    "Listing",
    "Offer",
    "Payment",
    "Report",
    "Review",
    "User",
    "WishlistItem",
]
