"""Row-to-JSON helpers shared by services."""

from datetime import datetime
from decimal import Decimal

from src.models.advertisement import Advertisement
from src.models.listing import Listing
from src.models.offer import Offer
from src.models.payment import Payment
from src.models.report import Report
from src.models.review import Review
from src.models.user import ROLE_USER, User
from src.models.wishlist import WishlistItem


def money(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_to_dict(row: User) -> dict[str, object]:
    return {
        "id": row.id,
        "email": row.email,
        "name": row.name,
        "photo_url": row.photo_url,
        "role": row.role or ROLE_USER,
        "is_fraud": row.is_fraud,
        "socials": dict(row.socials or {}),
        "created_at": iso(row.created_at),
        "last_login_at": iso(row.last_login_at),
    }


def listing_to_dict(row: Listing) -> dict[str, object]:
    return {
        "id": row.id,
        "title": row.title,
        "location": row.location,
        "image": row.image,
        "description": row.description,
        "agent_name": row.agent_name,
        "agent_email": row.agent_email,
        "agent_image": row.agent_image,
        "min_price": money(row.min_price),
        "max_price": money(row.max_price),
        "installment_plan": money(row.installment_plan),
        "status": row.status,
        "created_at": iso(row.created_at),
        "updated_at": iso(row.updated_at),
    }


def offer_to_dict(row: Offer) -> dict[str, object]:
    return {
        "id": row.id,
        "property_id": row.property_id,
        "title": row.title,
        "location": row.location,
        "image": row.image,
        "agent_name": row.agent_name,
        "agent_email": row.agent_email,
        "buyer_name": row.buyer_name,
        "buyer_email": row.buyer_email,
        "offer_amount": money(row.offer_amount),
        "buying_date": row.buying_date,
        "status": row.status,
        "created_at": iso(row.created_at),
        "paid_at": iso(row.paid_at),
    }


def payment_to_dict(row: Payment) -> dict[str, object]:
    return {
        "id": row.id,
        "property_id": row.property_id,
        "offer_id": row.offer_id,
        "email": row.email,
        "amount": money(row.amount),
        "transaction_id": row.transaction_id,
        "payment_method": row.payment_method,
        "paid_at": iso(row.paid_at),
        "paid_at_display": row.paid_at_display,
    }


def review_to_dict(row: Review) -> dict[str, object]:
    return {
        "id": row.id,
        "property_id": row.property_id,
        "property_title": row.property_title,
        "agent_name": row.agent_name,
        "reviewer_name": row.reviewer_name,
        "reviewer_email": row.reviewer_email,
        "reviewer_image": row.reviewer_image,
        "rating": row.rating,
        "comment": row.comment,
        "created_at": iso(row.created_at),
    }


def wishlist_to_dict(row: WishlistItem) -> dict[str, object]:
    return {
        "id": row.id,
        "property_id": row.property_id,
        "user_email": row.user_email,
        "title": row.title,
        "location": row.location,
        "image": row.image,
        "agent_name": row.agent_name,
        "agent_email": row.agent_email,
        "agent_image": row.agent_image,
        "min_price": money(row.min_price),
        "max_price": money(row.max_price),
        "status": row.status,
        "created_at": iso(row.created_at),
    }


def report_to_dict(row: Report) -> dict[str, object]:
    return {
        "id": row.id,
        "property_id": row.property_id,
        "property_title": row.property_title,
        "agent_name": row.agent_name,
        "agent_email": row.agent_email,
        "reporter_name": row.reporter_name,
        "reporter_email": row.reporter_email,
        "description": row.description,
        "created_at": iso(row.created_at),
    }


def advertisement_to_dict(row: Advertisement) -> dict[str, object]:
    return {
        "id": row.id,
        "property_id": row.property_id,
        "title": row.title,
        "image": row.image,
        "location": row.location,
        "min_price": money(row.min_price),
        "max_price": money(row.max_price),
        "status": row.status,
        "installment_plan": money(row.installment_plan),
        "agent_email": row.agent_email,
        "created_at": iso(row.created_at),
    }
