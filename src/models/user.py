"""User account table model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, new_id, utcnow

ROLE_USER = "user"
ROLE_AGENT = "agent"
ROLE_ADMIN = "admin"
VALID_ROLES = (ROLE_USER, ROLE_AGENT, ROLE_ADMIN)


class User(Base):
    """Registered marketplace user.

    ``role`` is left NULL for plain users; readers treat NULL as ``"user"``.
    """

    __tablename__ = "users"
    __table_args__ = (Index("idx_users_role", "role"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    role: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_fraud: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    socials: Mapped[dict[str, str]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
