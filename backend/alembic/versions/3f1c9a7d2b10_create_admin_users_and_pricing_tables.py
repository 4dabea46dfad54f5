"""create admin users and pricing tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3f1c9a7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "admin_users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("property_id", sa.String(length=100), nullable=False),
        sa.Column("display_name", sa.String(length=200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_admin_users_username", "admin_users", ["username"], unique=True)
    op.create_index("ix_admin_users_property_id", "admin_users", ["property_id"])

    op.create_table(
        "standard_price",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("property_id", sa.String(length=120), nullable=False),
        sa.Column("value", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("property_id", name="uq_standard_price_property_id"),
    )

    op.create_table(
        "date_prices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("property_id", sa.String(length=100), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("property_id", "date", name="uq_date_prices_property_date"),
    )
    op.create_index("ix_date_prices_property_id", "date_prices", ["property_id"])


def downgrade() -> None:
    op.drop_index("ix_date_prices_property_id", table_name="date_prices")
    op.drop_table("date_prices")
    op.drop_table("standard_price")
    op.drop_index("ix_admin_users_property_id", table_name="admin_users")
    op.drop_index("ix_admin_users_username", table_name="admin_users")
    op.drop_table("admin_users")
