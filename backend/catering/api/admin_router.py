"""Admin console API: dashboard, revenue analytics, user and booking management."""

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from catering.api.bookings_router import BookingStatusRequest
from catering.api.common import CamelModel, pagination
from catering.db import booking_utils, dashboard_utils, user_utils
from catering.db.booking_utils import booking_to_dict
from catering.db.dependencies import get_sqlalchemy_session, require_admin
from catering.db.models import User
from catering.db.user_utils import user_to_dict


router = APIRouter(prefix="/api/admin", tags=["admin"])

Period = Literal["day", "week", "month", "year"]


class UserStatusRequest(CamelModel):
    is_active: bool


@router.get("/dashboard", summary="Dashboard statistics")
async def get_dashboard(
    request: Request,
    period: Period = Query("month", description="Grouping of the revenue breakdown"),
    admin: User = Depends(require_admin),
):
    """
    Aggregate statistics for the admin dashboard.

    Sub-queries run concurrently; one that fails reports 0 / [] instead of
    failing the response.
    """
    storage = request.app.state.storage
    return await dashboard_utils.build_dashboard(storage._get_session, period=period)


@router.get("/analytics/revenue", summary="Revenue analytics")
async def revenue_analytics(
    period: Period = Query("month"),
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    return {"analytics": dashboard_utils.revenue_analytics(session, period)}


@router.get("/users", summary="List users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    users, total = user_utils.search_users(session, page, limit, search)
    return {"users": [user_to_dict(u) for u in users], "pagination": pagination(page, limit, total)}


@router.patch("/users/{user_id}/status", summary="Enable or disable a user")
async def update_user_status(
    user_id: int,
    request: UserStatusRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    user = user_utils.set_active(session, user_id, request.is_active)
    session.commit()
    return {"message": "User status updated successfully", "user": user_to_dict(user)}


@router.get("/bookings", summary="Search bookings")
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[Literal["pending", "confirmed", "cancelled", "completed"]] = Query(None),
    event_type: Optional[str] = Query(None, alias="eventType"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    bookings, total = booking_utils.search_bookings(
        session, page, limit, status=status, event_type=event_type, date_from=date_from, date_to=date_to,
    )
    return {
        "bookings": [booking_to_dict(b, include_items=False) for b in bookings],
        "pagination": pagination(page, limit, total),
    }


@router.get("/bookings/{booking_id}", summary="Booking details")
async def get_booking(
    booking_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    return {"booking": booking_to_dict(booking_utils.get_visible_booking(session, booking_id, admin))}


@router.patch("/bookings/{booking_id}/status", summary="Set booking status")
async def update_booking_status(
    booking_id: int,
    request: BookingStatusRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    booking = booking_utils.update_booking_status(session, booking_id, request.status, admin)
    session.commit()
    return {"message": "Booking status updated successfully", "booking": booking_to_dict(booking, include_items=False)}
