"""Property listing table model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, new_id, utcnow

STATUS_AVAILABLE = "available"
STATUS_VERIFIED = "verified"
STATUS_REJECTED = "rejected"
LISTING_STATUSES = (STATUS_AVAILABLE, STATUS_VERIFIED, STATUS_REJECTED)


class Listing(Base):
    """Property offered for sale by an agent."""

    __tablename__ = "properties"
    __table_args__ = (
        Index("idx_properties_agent_email", "agent_email"),
        Index("idx_properties_status", "status"),
        Index("idx_properties_created", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    agent_name: Mapped[str] = mapped_column(String(200), nullable=False)
    agent_email: Mapped[str] = mapped_column(String(320), nullable=False)
    agent_image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    min_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    max_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    installment_plan: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=STATUS_AVAILABLE,
        server_default=STATUS_AVAILABLE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
