"""initial catering schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-01-15 10:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("user_type", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("item_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("price_per_serving", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_menu_items_id", "menu_items", ["id"])
    op.create_index("ix_menu_items_category", "menu_items", ["category"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_code", sa.String(50), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("event_venue", sa.String(500), nullable=False),
        sa.Column("num_guests", sa.Integer(), nullable=False),
        sa.Column("special_instructions", sa.Text(), nullable=False),
        sa.Column("booking_status", sa.String(20), nullable=False),
        sa.Column("total_amount", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_booking_code", "bookings", ["booking_code"], unique=True)
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])
    op.create_index("idx_bookings_status", "bookings", ["booking_status"])
    op.create_index(
        "uq_bookings_active_event_date",
        "bookings",
        ["event_date"],
        unique=True,
        sqlite_where=sa.text("booking_status != 'cancelled'"),
        postgresql_where=sa.text("booking_status != 'cancelled'"),
    )

    op.create_table(
        "booking_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Integer(), nullable=False),
    )
    op.create_index("ix_booking_items_id", "booking_items", ["id"])
    op.create_index("ix_booking_items_booking_id", "booking_items", ["booking_id"])
    op.create_index("ix_booking_items_item_id", "booking_items", ["item_id"])

    op.create_table(
        "receipts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("receipt_code", sa.String(50), nullable=False, unique=True),
        sa.Column("receipt_number", sa.Integer(), nullable=False, unique=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("subtotal", sa.Integer(), nullable=False),
        sa.Column("tax_rate", sa.Float(), nullable=False),
        sa.Column("tax_amount", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(100), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False),
        sa.Column("issued_date", sa.Date(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_receipts_id", "receipts", ["id"])
    op.create_index("ix_receipts_booking_id", "receipts", ["booking_id"], unique=True)
    op.create_index("ix_receipts_created_at", "receipts", ["created_at"])
    op.create_index("idx_receipts_payment_status", "receipts", ["payment_status"])

    op.create_table(
        "admin_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("message_code", sa.String(50), nullable=False, unique=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("message_content", sa.Text(), nullable=False),
        sa.Column("admin_response", sa.Text(), nullable=True),
        sa.Column("message_status", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_admin_messages_id", "admin_messages", ["id"])
    op.create_index("ix_admin_messages_user_id", "admin_messages", ["user_id"])
    op.create_index("ix_admin_messages_created_at", "admin_messages", ["created_at"])
    op.create_index("idx_admin_messages_status", "admin_messages", ["message_status"])

    op.create_table(
        "offers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("start_at", sa.DateTime(), nullable=True),
        sa.Column("end_at", sa.DateTime(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_offers_id", "offers", ["id"])


def downgrade() -> None:
    op.drop_table("offers")
    op.drop_table("admin_messages")
    op.drop_table("receipts")
    op.drop_table("booking_items")
    op.drop_table("bookings")
    op.drop_table("menu_items")
    op.drop_table("users")
