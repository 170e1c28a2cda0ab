"""
Receipts API router.

Handles receipt generation from bookings, receipt queries, payment status
updates and printable HTML.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import Field
from sqlalchemy.orm import Session

from catering.api.common import CamelModel
from catering.db import receipt_utils
from catering.db.dependencies import get_sqlalchemy_session, require_customer_or_admin
from catering.db.models import User
from catering.db.receipt_utils import receipt_to_dict
from catering.receipt_render import render_receipt_html


router = APIRouter(prefix="/api/receipts", tags=["receipts"])

PaymentStatus = Literal["pending", "paid", "failed", "refunded"]


# ---------- Request Models ----------

class GenerateReceiptRequest(CamelModel):
    """Request to generate the receipt of a booking."""
    booking_id: int
    payment_method: Optional[str] = Field(default=None, max_length=100)
    payment_status: PaymentStatus = "pending"


class PaymentStatusRequest(CamelModel):
    payment_status: PaymentStatus


# ---------- Endpoints ----------

@router.post("/generate", status_code=201, summary="Generate a receipt for a booking")
async def generate_receipt(
    request: GenerateReceiptRequest,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    """
    Generate the receipt for a booking.

    - subtotal = booking total, taxAmount = 12% of subtotal, totalAmount = subtotal + tax
    - Allocates the next sequential receipt number
    - 404 unknown booking, 403 not owner/admin, 409 receipt already issued
    """
    receipt = receipt_utils.generate_receipt(
        session,
        booking_id=request.booking_id,
        user=current_user,
        payment_method=request.payment_method.strip() if request.payment_method else None,
        payment_status=request.payment_status,
    )
    session.commit()
    return {"message": "Receipt generated successfully", "receipt": receipt_to_dict(receipt)}


@router.get("", summary="List receipts")
async def list_receipts(
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    receipts = receipt_utils.list_receipts_for(session, current_user)
    return {"receipts": [receipt_to_dict(r, include_items=False) for r in receipts]}


@router.get("/booking/{booking_id}", summary="Get the receipt of a booking")
async def get_receipt_by_booking(
    booking_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    receipt = receipt_utils.get_receipt_for_booking(session, booking_id, current_user)
    return {"receipt": receipt_to_dict(receipt)}


@router.get("/{receipt_id}", summary="Get receipt details")
async def get_receipt(
    receipt_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    receipt = receipt_utils.get_visible_receipt(session, receipt_id, current_user)
    return {"receipt": receipt_to_dict(receipt)}


@router.get("/{receipt_id}/html", response_class=HTMLResponse, summary="Printable receipt")
async def get_receipt_html(
    receipt_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    receipt = receipt_utils.get_visible_receipt(session, receipt_id, current_user)
    return HTMLResponse(render_receipt_html(receipt_to_dict(receipt)))


@router.patch("/{receipt_id}/payment-status", summary="Update payment status")
async def update_payment_status(
    receipt_id: int,
    request: PaymentStatusRequest,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(require_customer_or_admin),
):
    receipt = receipt_utils.update_payment_status(session, receipt_id, request.payment_status, current_user)
    session.commit()
    return {"message": "Payment status updated successfully", "receipt": receipt_to_dict(receipt, include_items=False)}
