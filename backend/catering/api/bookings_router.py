"""Bookings API router: create, read, status updates and deletion."""

from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.orm import Session

from catering.api.common import CamelModel, ShortText, Venue
from catering.db import booking_utils
from catering.db.booking_utils import booking_to_dict
from catering.db.dependencies import get_sqlalchemy_session, require_customer_or_admin
from catering.db.models import User


router = APIRouter(prefix="/api/bookings", tags=["bookings"])

BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class BookingLineRequest(CamelModel):
    item_id: int
    quantity: int = Field(ge=1)


class CreateBookingRequest(CamelModel):
    event_type: ShortText
    event_date: date
    event_venue: Venue
    num_guests: int = Field(ge=1)
    special_instructions: Optional[str] = None
    menu_items: List[BookingLineRequest] = Field(min_length=1)


class BookingStatusRequest(CamelModel):
    status: BookingStatus


@router.get("", summary="List bookings")
async def list_bookings(
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    """Admins get every booking; customers get their own. Newest first."""
    bookings = booking_utils.list_bookings_for(session, current_user)
    return {"bookings": [booking_to_dict(b, include_items=False) for b in bookings]}


@router.get("/availability", summary="Check whether an event date is free")
async def check_availability(
    date_: date = Query(..., alias="date", description="Event date (YYYY-MM-DD)"),
    session: Session = Depends(get_sqlalchemy_session),
):
    return {"date": date_.isoformat(), "available": not booking_utils.is_date_booked(session, date_)}


@router.get("/{booking_id}", summary="Get a booking with its lines")
async def get_booking(
    booking_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    booking = booking_utils.get_visible_booking(session, booking_id, current_user)
    return {"booking": booking_to_dict(booking)}


@router.post("", status_code=201, summary="Create a booking")
async def create_booking(
    request: CreateBookingRequest,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    """
    Create a pending booking owned by the caller.

    - Every line must reference an available menu item (400 otherwise)
    - Unit prices are snapshotted; totalAmount = sum(unitPrice * quantity)
    - 409 when another non-cancelled booking holds eventDate
    """
    booking = booking_utils.create_booking(
        session,
        owner=current_user,
        event_type=request.event_type,
        event_date=request.event_date,
        event_venue=request.event_venue,
        num_guests=request.num_guests,
        special_instructions=request.special_instructions,
        lines=[{"item_id": line.item_id, "quantity": line.quantity} for line in request.menu_items],
    )
    session.commit()
    return {"message": "Booking created successfully", "booking": booking_to_dict(booking)}


@router.patch("/{booking_id}/status", summary="Update booking status")
async def update_booking_status(
    booking_id: int,
    request: BookingStatusRequest,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    """Owner or admin may set any status."""
    booking = booking_utils.update_booking_status(session, booking_id, request.status, current_user)
    session.commit()
    return {"message": "Booking status updated successfully", "booking": booking_to_dict(booking, include_items=False)}


@router.delete("/{booking_id}", summary="Delete a booking")
async def delete_booking(
    booking_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    """Owner or admin; 409 once a receipt has been issued for the booking."""
    booking_utils.delete_booking(session, booking_id, current_user)
    session.commit()
    return {"message": "Booking deleted successfully"}
