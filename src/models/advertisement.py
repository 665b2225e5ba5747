"""Advertised listing table model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, new_id, utcnow


class Advertisement(Base):
    """Featured snapshot of a verified listing."""

    __tablename__ = "advertisements"
    __table_args__ = (
        UniqueConstraint("property_id", name="uq_advertisements_property"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    min_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    max_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    installment_plan: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2), nullable=True
    )
    agent_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
