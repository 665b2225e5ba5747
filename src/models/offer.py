"""Buyer offer table model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, new_id, utcnow

OFFER_PENDING = "pending"
OFFER_ACCEPTED = "accepted"
OFFER_REJECTED = "rejected"
OFFER_PAID = "paid"
OFFER_STATUSES = (OFFER_PENDING, OFFER_ACCEPTED, OFFER_REJECTED, OFFER_PAID)


class Offer(Base):
    """Offer made by a buyer against a listing.

    Listing display fields are copied at offer time so the offer stays
    readable after the listing is removed on acceptance.
    """

    __tablename__ = "offers"
    __table_args__ = (
        Index("idx_offers_property", "property_id"),
        Index("idx_offers_buyer_email", "buyer_email"),
        Index("idx_offers_agent_email", "agent_email"),
        Index("idx_offers_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    image: Mapped[str] = mapped_column(String(1000), nullable=False)
    agent_name: Mapped[str] = mapped_column(String(200), nullable=False)
    agent_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    buyer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    buyer_email: Mapped[str] = mapped_column(String(320), nullable=False)
    offer_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    buying_date: Mapped[str] = mapped_column(String(40), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OFFER_PENDING,
        server_default=OFFER_PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
