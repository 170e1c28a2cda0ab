"""Promotional offers."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from catering.db.models import Offer
from catering.errors import NotFoundError
from catering.utils.time_utils import isoformat_or_none, now_local_naive


def offer_to_dict(offer: Offer) -> Dict[str, Any]:
    return {
        "id": offer.id,
        "title": offer.title,
        "description": offer.description,
        "imageUrl": offer.image_url,
        "startAt": isoformat_or_none(offer.start_at),
        "endAt": isoformat_or_none(offer.end_at),
        "active": offer.active,
        "createdAt": isoformat_or_none(offer.created_at),
        "updatedAt": isoformat_or_none(offer.updated_at),
    }


def is_running(offer: Offer, now: datetime) -> bool:
    """Active flag set and `now` inside the optional [start_at, end_at] window."""
    if not offer.active:
        return False
    if offer.start_at and now < offer.start_at:
        return False
    if offer.end_at and now > offer.end_at:
        return False
    return True


def list_offers(session: Session) -> List[Offer]:
    return list(session.execute(select(Offer).order_by(Offer.id)).scalars().all())


def list_active_offers(session: Session, now: Optional[datetime] = None) -> List[Offer]:
    now = now or now_local_naive()
    return [offer for offer in list_offers(session) if is_running(offer, now)]


def get_offer(session: Session, offer_id: int) -> Offer:
    offer = session.get(Offer, offer_id)
    if offer is None:
        raise NotFoundError("Offer not found")
    return offer
