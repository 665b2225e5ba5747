"""Property review table model."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, new_id, utcnow


class Review(Base):
    """Review left by a user on a listing."""

    __tablename__ = "reviews"
    __table_args__ = (
        Index("idx_reviews_property", "property_id"),
        Index("idx_reviews_reviewer_email", "reviewer_email"),
        Index("idx_reviews_created", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(String(32), nullable=False)
    property_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    agent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    reviewer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    reviewer_email: Mapped[str] = mapped_column(String(320), nullable=False)
    reviewer_image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
