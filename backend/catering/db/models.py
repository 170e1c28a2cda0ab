"""
Canonical relational database models for the catering backend.

These models represent the full relational schema and are used by Alembic
for migration generation. Money columns hold centavos (int).
"""

from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Float, ForeignKey, Index, Text, text,
)
from sqlalchemy.orm import declarative_base, relationship

from catering.utils.time_utils import now_local_naive

Base = declarative_base()


USER_TYPES = ("customer", "admin")
BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")
MESSAGE_STATUSES = ("unread", "read", "replied")


class User(Base):
    """Accounts: customers and admins."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(50), nullable=True)
    user_type = Column(String(20), default="customer", nullable=False)  # customer | admin
    is_active = Column(Boolean, default=True, nullable=False)  # Soft-disable flag
    created_at = Column(DateTime, default=now_local_naive, nullable=False)
    updated_at = Column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)

    # Relationships
    bookings = relationship("Booking", back_populates="user")
    messages = relationship("Message", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, type={self.user_type})>"


class MenuItem(Base):
    """Purchasable catering dishes."""

    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    item_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False, index=True)  # Main Course, Dessert, ...
    price_per_serving = Column(Integer, nullable=False)  # Stored as centavos
    image_url = Column(String(500), nullable=False, default="")
    is_available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=now_local_naive, nullable=False)
    updated_at = Column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)

    # Relationships
    booking_items = relationship("BookingItem", back_populates="menu_item")

    def __repr__(self):
        return f"<MenuItem(id={self.id}, name={self.item_name}, price={self.price_per_serving})>"


class Booking(Base):
    """A reserved catering event."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_code = Column(String(50), unique=True, nullable=False, index=True)  # BK-...
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_type = Column(String(100), nullable=False)
    event_date = Column(Date, nullable=False)
    event_venue = Column(String(500), nullable=False)
    num_guests = Column(Integer, nullable=False)
    special_instructions = Column(Text, nullable=False, default="")
    booking_status = Column(String(20), default="pending", nullable=False)
    total_amount = Column(Integer, nullable=False, default=0)  # Centavos
    created_at = Column(DateTime, default=now_local_naive, nullable=False, index=True)
    updated_at = Column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)

    # One non-cancelled booking per calendar date
    __table_args__ = (
        Index(
            "uq_bookings_active_event_date",
            "event_date",
            unique=True,
            sqlite_where=text("booking_status != 'cancelled'"),
            postgresql_where=text("booking_status != 'cancelled'"),
        ),
        Index("idx_bookings_status", "booking_status"),
    )

    # Relationships
    user = relationship("User", back_populates="bookings")
    items = relationship("BookingItem", back_populates="booking", order_by="BookingItem.id")
    receipt = relationship("Receipt", back_populates="booking", uselist=False)

    def __repr__(self):
        return f"<Booking(id={self.id}, code={self.booking_code}, date={self.event_date}, status={self.booking_status})>"


class BookingItem(Base):
    """One menu selection attached to a booking. Prices are snapshots."""

    __tablename__ = "booking_items"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Integer, nullable=False)  # Centavos at time of booking
    total_price = Column(Integer, nullable=False)  # quantity * unit_price

    # Relationships
    booking = relationship("Booking", back_populates="items")
    menu_item = relationship("MenuItem", back_populates="booking_items")

    def __repr__(self):
        return f"<BookingItem(id={self.id}, item_id={self.item_id}, qty={self.quantity})>"


class Receipt(Base):
    """Financial document derived from a booking."""

    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True, index=True)
    receipt_code = Column(String(50), unique=True, nullable=False)  # RCP-...
    receipt_number = Column(Integer, unique=True, nullable=False)  # Printed as R000001
    booking_id = Column(Integer, ForeignKey("bookings.id"), unique=True, nullable=False, index=True)
    subtotal = Column(Integer, nullable=False)  # Centavos
    tax_rate = Column(Float, nullable=False)
    tax_amount = Column(Integer, nullable=False)
    total_amount = Column(Integer, nullable=False)
    payment_method = Column(String(100), nullable=False, default="Cash/Card")
    payment_status = Column(String(20), nullable=False, default="pending")
    issued_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=now_local_naive, nullable=False, index=True)
    updated_at = Column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)

    __table_args__ = (
        Index("idx_receipts_payment_status", "payment_status"),
    )

    # Relationships
    booking = relationship("Booking", back_populates="receipt")

    def __repr__(self):
        return f"<Receipt(id={self.id}, number={self.receipt_number}, booking_id={self.booking_id})>"


class Message(Base):
    """Customer-to-admin inbox message."""

    __tablename__ = "admin_messages"

    id = Column(Integer, primary_key=True, index=True)
    message_code = Column(String(50), unique=True, nullable=False)  # MSG-...
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    message_content = Column(Text, nullable=False)
    admin_response = Column(Text, nullable=True)
    message_status = Column(String(20), default="unread", nullable=False)
    created_at = Column(DateTime, default=now_local_naive, nullable=False, index=True)
    updated_at = Column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)

    __table_args__ = (
        Index("idx_admin_messages_status", "message_status"),
    )

    # Relationships
    user = relationship("User", back_populates="messages")

    def __repr__(self):
        return f"<Message(id={self.id}, subject={self.subject[:30]}, status={self.message_status})>"


class Offer(Base):
    """Promotional offer shown on the landing page."""

    __tablename__ = "offers"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=False, default="")
    start_at = Column(DateTime, nullable=True)
    end_at = Column(DateTime, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=now_local_naive, nullable=False)
    updated_at = Column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)

    def __repr__(self):
        return f"<Offer(id={self.id}, title={self.title}, active={self.active})>"
