"""Promotional offers shown on the customer landing page."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from catering.api.common import CamelModel, Title
from catering.db import offer_utils
from catering.db.dependencies import get_sqlalchemy_session, require_admin
from catering.db.models import Offer, User
from catering.db.offer_utils import offer_to_dict
from catering.db.patch import apply_patch
from catering.errors import ValidationError


router = APIRouter(prefix="/api/offers", tags=["offers"])


class CreateOfferRequest(CamelModel):
    title: Title
    description: Optional[str] = ""
    image_url: Optional[str] = ""
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    active: bool = True


class UpdateOfferRequest(CamelModel):
    title: Optional[Title] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    active: Optional[bool] = None


def _check_window(offer: Offer) -> None:
    if offer.start_at and offer.end_at and offer.end_at < offer.start_at:
        raise ValidationError("endAt must not be before startAt")


def _naive(value: datetime) -> datetime:
    # Stored as naive local wall-clock time.
    return value.replace(tzinfo=None)


@router.get("/active", summary="Offers currently running")
async def active_offers(session: Session = Depends(get_sqlalchemy_session)):
    return {"offers": [offer_to_dict(o) for o in offer_utils.list_active_offers(session)]}


@router.get("", summary="List all offers (admin)")
async def list_offers(
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    return {"offers": [offer_to_dict(o) for o in offer_utils.list_offers(session)]}


@router.post("", status_code=201, summary="Create an offer (admin)")
async def create_offer(
    request: CreateOfferRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    offer = Offer(
        title=request.title,
        description=request.description or "",
        image_url=request.image_url or "",
        start_at=_naive(request.start_at) if request.start_at else None,
        end_at=_naive(request.end_at) if request.end_at else None,
        active=request.active,
    )
    _check_window(offer)
    session.add(offer)
    session.commit()
    return {"message": "Offer created successfully", "offer": offer_to_dict(offer)}


@router.put("/{offer_id}", summary="Update an offer (admin)")
async def update_offer(
    offer_id: int,
    request: UpdateOfferRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    offer = offer_utils.get_offer(session, offer_id)
    apply_patch(
        offer,
        request,
        converters={"start_at": _naive, "end_at": _naive},
        allow_none=("start_at", "end_at"),
    )
    _check_window(offer)
    session.commit()
    return {"message": "Offer updated successfully", "offer": offer_to_dict(offer)}


@router.delete("/{offer_id}", summary="Delete an offer (admin)")
async def delete_offer(
    offer_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    session.delete(offer_utils.get_offer(session, offer_id))
    session.commit()
    return {"message": "Offer deleted successfully", "offerId": offer_id}
