"""Receipt generation and queries."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from catering.db.booking_utils import booking_item_to_dict, get_owned_booking
from catering.db.dependencies import is_admin
from catering.db.models import Booking, BookingItem, Receipt, User, PAYMENT_STATUSES
from catering.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from catering.utils.money import compute_totals, format_receipt_number, from_cents, generate_code
from catering.utils.time_utils import isoformat_or_none, today_local

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHOD = "Cash/Card"
MAX_NUMBER_ATTEMPTS = 5


def receipt_to_dict(receipt: Receipt, include_items: bool = True) -> Dict[str, Any]:
    """
    Serialize a receipt with denormalized customer and event fields so it can
    be rendered without further lookups.
    """
    booking = receipt.booking
    user = booking.user
    data = {
        "id": receipt.id,
        "receiptId": receipt.receipt_code,
        "receiptNumber": format_receipt_number(receipt.receipt_number),
        "sequence": receipt.receipt_number,
        "bookingDbId": booking.id,
        "bookingId": booking.booking_code,
        "customerName": user.full_name,
        "customerEmail": user.email,
        "customerPhone": user.phone_number or "",
        "eventType": booking.event_type,
        "eventDate": isoformat_or_none(booking.event_date),
        "eventVenue": booking.event_venue,
        "numGuests": booking.num_guests,
        "subtotal": from_cents(receipt.subtotal),
        "taxRate": receipt.tax_rate,
        "taxAmount": from_cents(receipt.tax_amount),
        "totalAmount": from_cents(receipt.total_amount),
        "paymentMethod": receipt.payment_method,
        "paymentStatus": receipt.payment_status,
        "issuedDate": isoformat_or_none(receipt.issued_date),
        "createdAt": isoformat_or_none(receipt.created_at),
    }
    if include_items:
        data["items"] = [booking_item_to_dict(line) for line in booking.items]
    return data


def next_receipt_number(session: Session) -> int:
    """Largest issued receipt number plus one."""
    current = session.execute(select(func.max(Receipt.receipt_number))).scalar_one()
    return (current or 0) + 1


def generate_receipt(
    session: Session,
    booking_id: int,
    user: User,
    payment_method: Optional[str] = None,
    payment_status: Optional[str] = None,
) -> Receipt:
    """
    Derive and persist the receipt for a booking.

    subtotal = booking total, tax = 12% of subtotal, total = subtotal + tax.
    The receipt number is allocated inside the inserting transaction; the
    unique constraint on receipt_number turns a concurrent duplicate into a
    retry with the next number.

    Raises:
        NotFoundError: booking does not exist
        AuthorizationError: caller is neither admin nor the booking owner
        ConflictError: the booking already has a receipt
    """
    payment_status = payment_status or "pending"
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid payment status: {payment_status}")

    booking = get_owned_booking(session, booking_id, user)
    if _receipt_for_booking(session, booking.id) is not None:
        raise ConflictError("A receipt already exists for this booking")

    totals = compute_totals(booking.total_amount or 0)

    for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
        receipt = Receipt(
            receipt_code=generate_code("RCP"),
            receipt_number=next_receipt_number(session),
            booking_id=booking.id,
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            payment_status=payment_status,
            issued_date=today_local(),
            **totals,
        )
        session.add(receipt)
        try:
            session.flush()
        except IntegrityError:
            # Nothing else is pending in this unit of work, so a full rollback is safe
            session.rollback()
            if _receipt_for_booking(session, booking.id) is not None:
                raise ConflictError("A receipt already exists for this booking")
            logger.warning("[receipts] Receipt number collision (attempt %d), retrying", attempt)
            continue
        receipt.booking = booking
        logger.info(
            "[receipts] Issued %s for booking %s (total=%d)",
            format_receipt_number(receipt.receipt_number), booking.booking_code, receipt.total_amount,
        )
        return receipt

    raise ConflictError("Could not allocate a receipt number, please retry")


def _receipt_for_booking(session: Session, booking_id: int) -> Optional[Receipt]:
    return session.execute(select(Receipt).where(Receipt.booking_id == booking_id)).scalar_one_or_none()


def _receipt_query():
    return select(Receipt).options(
        selectinload(Receipt.booking).selectinload(Booking.user),
        selectinload(Receipt.booking).selectinload(Booking.items).selectinload(BookingItem.menu_item),
    )


def list_receipts_for(session: Session, user: User) -> List[Receipt]:
    """Admins see all receipts, customers the receipts of their own bookings."""
    stmt = _receipt_query()
    if not is_admin(user):
        stmt = stmt.join(Receipt.booking).where(Booking.user_id == user.id)
    stmt = stmt.order_by(Receipt.created_at.desc(), Receipt.id.desc())
    return list(session.execute(stmt).scalars().all())


def get_visible_receipt(session: Session, receipt_id: int, user: User) -> Receipt:
    receipt = session.execute(_receipt_query().where(Receipt.id == receipt_id)).scalar_one_or_none()
    if receipt is None or (not is_admin(user) and receipt.booking.user_id != user.id):
        raise NotFoundError("Receipt not found")
    return receipt


def get_receipt_for_booking(session: Session, booking_id: int, user: User) -> Receipt:
    receipt = session.execute(
        _receipt_query().where(Receipt.booking_id == booking_id)
    ).scalar_one_or_none()
    if receipt is None or (not is_admin(user) and receipt.booking.user_id != user.id):
        raise NotFoundError("Receipt not found for this booking")
    return receipt


def update_payment_status(session: Session, receipt_id: int, status: str, user: User) -> Receipt:
    """Overwrite the payment status; admin or booking owner only."""
    if status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid payment status: {status}")
    receipt = session.execute(_receipt_query().where(Receipt.id == receipt_id)).scalar_one_or_none()
    if receipt is None:
        raise NotFoundError("Receipt not found")
    if not is_admin(user) and receipt.booking.user_id != user.id:
        raise AuthorizationError("Access denied")
    receipt.payment_status = status
    session.flush()
    return receipt
