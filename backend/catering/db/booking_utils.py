"""Booking workflow helpers.

Validates requested menu lines against the catalog, snapshots prices,
computes totals, enforces one active booking per event date and persists
Booking + BookingItem rows in a single transaction.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from catering.db.models import Booking, BookingItem, MenuItem, Receipt, User, BOOKING_STATUSES
from catering.db.dependencies import is_admin
from catering.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from catering.utils.money import from_cents, generate_code
from catering.utils.time_utils import isoformat_or_none

logger = logging.getLogger(__name__)

DATE_TAKEN_MESSAGE = "Sorry, this date is already booked. Please choose another date."


def booking_item_to_dict(line: BookingItem) -> Dict[str, Any]:
    menu_item = line.menu_item
    return {
        "id": line.id,
        "itemId": line.item_id,
        "itemName": menu_item.item_name if menu_item else None,
        "description": menu_item.description if menu_item else None,
        "category": menu_item.category if menu_item else None,
        "quantity": line.quantity,
        "unitPrice": from_cents(line.unit_price),
        "totalPrice": from_cents(line.total_price),
    }


def booking_to_dict(booking: Booking, include_items: bool = True) -> Dict[str, Any]:
    """Serialize a booking with owner contact fields and (optionally) its lines."""
    user = booking.user
    data = {
        "id": booking.id,
        "bookingId": booking.booking_code,
        "userId": booking.user_id,
        "eventType": booking.event_type,
        "eventDate": isoformat_or_none(booking.event_date),
        "eventVenue": booking.event_venue,
        "numGuests": booking.num_guests,
        "specialInstructions": booking.special_instructions,
        "bookingStatus": booking.booking_status,
        "totalAmount": from_cents(booking.total_amount),
        "firstName": user.first_name if user else None,
        "lastName": user.last_name if user else None,
        "email": user.email if user else None,
        "phoneNumber": user.phone_number if user else None,
        "createdAt": isoformat_or_none(booking.created_at),
        "updatedAt": isoformat_or_none(booking.updated_at),
    }
    if include_items:
        data["items"] = [booking_item_to_dict(line) for line in booking.items]
    return data


def is_date_booked(session: Session, event_date: date, exclude_booking_id: Optional[int] = None) -> bool:
    """True when a non-cancelled booking already holds the date."""
    stmt = (
        select(func.count())
        .select_from(Booking)
        .where(Booking.event_date == event_date)
        .where(Booking.booking_status != "cancelled")
    )
    if exclude_booking_id is not None:
        stmt = stmt.where(Booking.id != exclude_booking_id)
    return session.execute(stmt).scalar_one() > 0


def _resolve_lines(session: Session, lines: List[Dict[str, int]]) -> Tuple[List[BookingItem], int]:
    """Validate each requested line and build BookingItem rows with price snapshots."""
    booking_items = []
    total_cents = 0
    for line in lines:
        item_id = line.get("item_id")
        quantity = line.get("quantity")
        if quantity is None or quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        menu_item = session.get(MenuItem, item_id) if item_id is not None else None
        if menu_item is None or not menu_item.is_available:
            raise ValidationError(f"Menu item with ID {item_id} not found or unavailable")

        unit_price = menu_item.price_per_serving
        line_total = unit_price * quantity
        total_cents += line_total
        booking_items.append(BookingItem(
            item_id=menu_item.id,
            quantity=quantity,
            unit_price=unit_price,
            total_price=line_total,
        ))
    return booking_items, total_cents


def create_booking(
    session: Session,
    owner: User,
    event_type: str,
    event_date: date,
    event_venue: str,
    num_guests: int,
    lines: List[Dict[str, int]],
    special_instructions: Optional[str] = None,
) -> Booking:
    """
    Create a pending booking with its lines.

    Args:
        session: SQLAlchemy session (caller commits)
        owner: Booking owner
        lines: [{"item_id": int, "quantity": int}, ...]

    Raises:
        ValidationError: no lines, bad quantity/guest count, unknown or unavailable item
        ConflictError: the date is held by another non-cancelled booking
    """
    if not lines:
        raise ValidationError("At least one menu item is required")
    if num_guests is None or num_guests < 1:
        raise ValidationError("Number of guests must be at least 1")

    booking_items, total_cents = _resolve_lines(session, lines)

    if is_date_booked(session, event_date):
        raise ConflictError(DATE_TAKEN_MESSAGE)

    booking = Booking(
        booking_code=generate_code("BK"),
        user_id=owner.id,
        event_type=event_type,
        event_date=event_date,
        event_venue=event_venue,
        num_guests=num_guests,
        special_instructions=special_instructions or "",
        booking_status="pending",
        total_amount=total_cents,
    )
    booking.items = booking_items
    session.add(booking)
    try:
        session.flush()
    except IntegrityError:
        # Lost the race for the date against a concurrent booking
        session.rollback()
        raise ConflictError(DATE_TAKEN_MESSAGE)

    logger.info(
        "[bookings] Created %s for user %s on %s (%d lines, total=%d)",
        booking.booking_code, owner.id, event_date, len(booking_items), total_cents,
    )
    return booking


def _load_booking(session: Session, booking_id: int) -> Optional[Booking]:
    stmt = (
        select(Booking)
        .options(selectinload(Booking.items).selectinload(BookingItem.menu_item), selectinload(Booking.user))
        .where(Booking.id == booking_id)
    )
    return session.execute(stmt).scalar_one_or_none()


def get_visible_booking(session: Session, booking_id: int, user: User) -> Booking:
    """Fetch a booking the caller may read; other customers' bookings look missing."""
    booking = _load_booking(session, booking_id)
    if booking is None or (not is_admin(user) and booking.user_id != user.id):
        raise NotFoundError("Booking not found")
    return booking


def get_owned_booking(session: Session, booking_id: int, user: User) -> Booking:
    """Fetch a booking the caller may mutate: 404 when missing, 403 when not owner/admin."""
    booking = _load_booking(session, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    if not is_admin(user) and booking.user_id != user.id:
        raise AuthorizationError("Access denied")
    return booking


def list_bookings_for(session: Session, user: User) -> List[Booking]:
    """Admins see every booking, customers their own; newest first."""
    stmt = select(Booking).options(selectinload(Booking.user))
    if not is_admin(user):
        stmt = stmt.where(Booking.user_id == user.id)
    stmt = stmt.order_by(Booking.created_at.desc(), Booking.id.desc())
    return list(session.execute(stmt).scalars().all())


def search_bookings(
    session: Session,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    event_type: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Tuple[List[Booking], int]:
    """Filtered, paginated booking search for the admin console."""
    stmt = select(Booking)
    if status:
        stmt = stmt.where(Booking.booking_status == status)
    if event_type:
        stmt = stmt.where(Booking.event_type.ilike(f"%{event_type}%"))
    if date_from:
        stmt = stmt.where(Booking.event_date >= date_from)
    if date_to:
        stmt = stmt.where(Booking.event_date <= date_to)

    total = session.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    stmt = (
        stmt.options(selectinload(Booking.user))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(session.execute(stmt).scalars().all()), total


def set_booking_status(booking: Booking, status: str, session: Session) -> Booking:
    """
    Overwrite the booking status (no transition graph).

    Re-activating a cancelled booking onto an occupied date raises ConflictError.
    """
    if status not in BOOKING_STATUSES:
        raise ValidationError(f"Invalid status: {status}")
    if status != "cancelled" and booking.booking_status == "cancelled":
        if is_date_booked(session, booking.event_date, exclude_booking_id=booking.id):
            raise ConflictError(DATE_TAKEN_MESSAGE)

    booking.booking_status = status
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise ConflictError(DATE_TAKEN_MESSAGE)
    return booking


def update_booking_status(session: Session, booking_id: int, status: str, user: User) -> Booking:
    """Owner or admin status update."""
    booking = get_owned_booking(session, booking_id, user)
    return set_booking_status(booking, status, session)


def delete_booking(session: Session, booking_id: int, user: User) -> None:
    """
    Delete a booking and its lines.

    A booking that already has a receipt is kept (409); cancel it instead so
    the receipt stays in the revenue figures.
    """
    booking = get_owned_booking(session, booking_id, user)
    has_receipt = session.execute(
        select(Receipt.id).where(Receipt.booking_id == booking.id)
    ).first()
    if has_receipt is not None:
        raise ConflictError("Booking has a receipt and cannot be deleted; cancel it instead")
    session.execute(delete(BookingItem).where(BookingItem.booking_id == booking.id))
    session.execute(delete(Booking).where(Booking.id == booking.id))
    session.flush()
    logger.info("[bookings] Deleted booking %s by user %s", booking_id, user.id)
