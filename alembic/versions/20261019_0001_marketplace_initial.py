"""Marketplace initial tables.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("photo_url", sa.String(length=1000), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=True),
        sa.Column(
            "is_fraud", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("socials", sa.JSON(), nullable=False),
        _created_at(),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_role", "users", ["role"], unique=False)

    op.create_table(
        "properties",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=False),
        sa.Column("image", sa.String(length=1000), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("agent_name", sa.String(length=200), nullable=False),
        sa.Column("agent_email", sa.String(length=320), nullable=False),
        sa.Column("agent_image", sa.String(length=1000), nullable=True),
        sa.Column("min_price", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("max_price", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column(
            "installment_plan", sa.Numeric(precision=14, scale=2), nullable=True
        ),
        sa.Column(
            "status", sa.String(length=20), server_default="available", nullable=False
        ),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_properties_agent_email", "properties", ["agent_email"], unique=False
    )
    op.create_index("idx_properties_status", "properties", ["status"], unique=False)
    op.create_index(
        "idx_properties_created", "properties", ["created_at"], unique=False
    )

    op.create_table(
        "offers",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("property_id", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=False),
        sa.Column("image", sa.String(length=1000), nullable=False),
        sa.Column("agent_name", sa.String(length=200), nullable=False),
        sa.Column("agent_email", sa.String(length=320), nullable=True),
        sa.Column("buyer_name", sa.String(length=200), nullable=False),
        sa.Column("buyer_email", sa.String(length=320), nullable=False),
        sa.Column("offer_amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("buying_date", sa.String(length=40), nullable=False),
        sa.Column(
            "status", sa.String(length=20), server_default="pending", nullable=False
        ),
        _created_at(),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_offers_property", "offers", ["property_id"], unique=False)
    op.create_index("idx_offers_buyer_email", "offers", ["buyer_email"], unique=False)
    op.create_index("idx_offers_agent_email", "offers", ["agent_email"], unique=False)
    op.create_index("idx_offers_status", "offers", ["status"], unique=False)

    op.create_table(
        "payments",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("property_id", sa.String(length=32), nullable=False),
        sa.Column("offer_id", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("transaction_id", sa.String(length=255), nullable=False),
        sa.Column("payment_method", sa.String(length=100), nullable=False),
        sa.Column(
            "paid_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("paid_at_display", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_payments_property", "payments", ["property_id"], unique=False)
    op.create_index("idx_payments_email", "payments", ["email"], unique=False)

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("property_id", sa.String(length=32), nullable=False),
        sa.Column("property_title", sa.String(length=255), nullable=True),
        sa.Column("agent_name", sa.String(length=200), nullable=True),
        sa.Column("reviewer_name", sa.String(length=200), nullable=False),
        sa.Column("reviewer_email", sa.String(length=320), nullable=False),
        sa.Column("reviewer_image", sa.String(length=1000), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_reviews_property", "reviews", ["property_id"], unique=False)
    op.create_index(
        "idx_reviews_reviewer_email", "reviews", ["reviewer_email"], unique=False
    )
    op.create_index("idx_reviews_created", "reviews", ["created_at"], unique=False)

    op.create_table(
        "wishlist",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("property_id", sa.String(length=32), nullable=False),
        sa.Column("user_email", sa.String(length=320), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("location", sa.String(length=500), nullable=True),
        sa.Column("image", sa.String(length=1000), nullable=True),
        sa.Column("agent_name", sa.String(length=200), nullable=True),
        sa.Column("agent_email", sa.String(length=320), nullable=True),
        sa.Column("agent_image", sa.String(length=1000), nullable=True),
        sa.Column("min_price", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("max_price", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_email", "property_id", name="uq_wishlist_user_property"
        ),
    )
    op.create_index("idx_wishlist_user", "wishlist", ["user_email"], unique=False)
    op.create_index(
        "idx_wishlist_property", "wishlist", ["property_id"], unique=False
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("property_id", sa.String(length=32), nullable=False),
        sa.Column("property_title", sa.String(length=255), nullable=True),
        sa.Column("agent_name", sa.String(length=200), nullable=True),
        sa.Column("agent_email", sa.String(length=320), nullable=True),
        sa.Column("reporter_name", sa.String(length=200), nullable=False),
        sa.Column("reporter_email", sa.String(length=320), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_reports_property", "reports", ["property_id"], unique=False)
    op.create_index("idx_reports_created", "reports", ["created_at"], unique=False)

    op.create_table(
        "advertisements",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("property_id", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("image", sa.String(length=1000), nullable=True),
        sa.Column("location", sa.String(length=500), nullable=False),
        sa.Column("min_price", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("max_price", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "installment_plan", sa.Numeric(precision=14, scale=2), nullable=True
        ),
        sa.Column("agent_email", sa.String(length=320), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("property_id", name="uq_advertisements_property"),
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("advertisements")
    op.drop_index("idx_reports_created", table_name="reports")
    op.drop_index("idx_reports_property", table_name="reports")
    op.drop_table("reports")
    op.drop_index("idx_wishlist_property", table_name="wishlist")
    op.drop_index("idx_wishlist_user", table_name="wishlist")
    op.drop_table("wishlist")
    op.drop_index("idx_reviews_created", table_name="reviews")
    op.drop_index("idx_reviews_reviewer_email", table_name="reviews")
    op.drop_index("idx_reviews_property", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("idx_payments_email", table_name="payments")
    op.drop_index("idx_payments_property", table_name="payments")
    op.drop_table("payments")
    op.drop_index("idx_offers_status", table_name="offers")
    op.drop_index("idx_offers_agent_email", table_name="offers")
    op.drop_index("idx_offers_buyer_email", table_name="offers")
    op.drop_index("idx_offers_property", table_name="offers")
    op.drop_table("offers")
    op.drop_index("idx_properties_created", table_name="properties")
    op.drop_index("idx_properties_status", table_name="properties")
    op.drop_index("idx_properties_agent_email", table_name="properties")
    op.drop_table("properties")
    op.drop_index("idx_users_role", table_name="users")
    op.drop_table("users")
