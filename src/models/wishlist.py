"""User wishlist table model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, new_id, utcnow


class WishlistItem(Base):
    """Listing saved by a user, with a display snapshot."""

    __tablename__ = "wishlist"
    __table_args__ = (
        UniqueConstraint(
            "user_email", "property_id", name="uq_wishlist_user_property"
        ),
        Index("idx_wishlist_user", "user_email"),
        Index("idx_wishlist_property", "property_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(String(32), nullable=False)
    user_email: Mapped[str] = mapped_column(String(320), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    agent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    agent_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    agent_image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    min_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    max_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
