"""
Admin dashboard aggregation.

Every statistic is an independent read query. The dashboard fans them out
concurrently (one session per query, run in the thread pool) and assembles
the response once all of them have finished. A failing sub-query is logged
and contributes its empty default instead of failing the whole response.
"""

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from catering.db.booking_utils import booking_to_dict
from catering.db.models import Booking, MenuItem, Receipt, User
from catering.utils.money import from_cents
from catering.utils.time_utils import now_local_naive

logger = logging.getLogger(__name__)

RECENT_BOOKINGS_LIMIT = 10
REVENUE_WINDOW_DAYS = 365

PERIOD_FORMATS = {
    "day": "%Y-%m-%d",
    "week": "%Y-%W",
    "month": "%Y-%m",
    "year": "%Y",
}


def period_key(moment: datetime, period: str) -> str:
    """Bucket label for a timestamp, e.g. 2026-10 for period='month'."""
    fmt = PERIOD_FORMATS.get(period, PERIOD_FORMATS["month"])
    return moment.strftime(fmt)


# ---------- Individual statistics ----------

def _count(session: Session, model, *conditions) -> int:
    stmt = select(func.count()).select_from(model)
    for condition in conditions:
        stmt = stmt.where(condition)
    return session.execute(stmt).scalar_one()


def total_users(session: Session) -> int:
    return _count(session, User, User.is_active.is_(True))


def total_bookings(session: Session) -> int:
    return _count(session, Booking)


def pending_bookings(session: Session) -> int:
    return _count(session, Booking, Booking.booking_status == "pending")


def total_menu_items(session: Session) -> int:
    return _count(session, MenuItem)


def available_menu_items(session: Session) -> int:
    return _count(session, MenuItem, MenuItem.is_available.is_(True))


def total_revenue(session: Session) -> float:
    """Grand totals of paid receipts only."""
    stmt = select(func.coalesce(func.sum(Receipt.total_amount), 0)).where(Receipt.payment_status == "paid")
    return from_cents(session.execute(stmt).scalar_one())


def recent_bookings(session: Session, limit: int = RECENT_BOOKINGS_LIMIT) -> List[Dict[str, Any]]:
    stmt = (
        select(Booking)
        .options(selectinload(Booking.user))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(limit)
    )
    return [booking_to_dict(b, include_items=False) for b in session.execute(stmt).scalars().all()]


def _receipts_in_window(session: Session, now: Optional[datetime] = None) -> List[Receipt]:
    since = (now or now_local_naive()) - timedelta(days=REVENUE_WINDOW_DAYS)
    stmt = select(Receipt).where(Receipt.created_at >= since)
    return list(session.execute(stmt).scalars().all())


def revenue_by_period(session: Session, period: str = "month", now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Paid revenue grouped by period over the last 12 months, newest bucket first."""
    buckets: Dict[str, int] = {}
    for receipt in _receipts_in_window(session, now):
        if receipt.payment_status != "paid":
            continue
        key = period_key(receipt.created_at, period)
        buckets[key] = buckets.get(key, 0) + receipt.total_amount
    return [
        {"period": key, "revenue": from_cents(buckets[key])}
        for key in sorted(buckets, reverse=True)
    ]


def revenue_analytics(session: Session, period: str = "month", now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Receipt count plus paid / pending / total revenue per period."""
    buckets: "OrderedDict[str, Dict[str, int]]" = OrderedDict()
    for receipt in _receipts_in_window(session, now):
        key = period_key(receipt.created_at, period)
        bucket = buckets.setdefault(key, {"count": 0, "paid": 0, "pending": 0, "total": 0})
        bucket["count"] += 1
        bucket["total"] += receipt.total_amount
        if receipt.payment_status == "paid":
            bucket["paid"] += receipt.total_amount
        elif receipt.payment_status == "pending":
            bucket["pending"] += receipt.total_amount
    return [
        {
            "period": key,
            "totalReceipts": buckets[key]["count"],
            "paidRevenue": from_cents(buckets[key]["paid"]),
            "pendingRevenue": from_cents(buckets[key]["pending"]),
            "totalRevenue": from_cents(buckets[key]["total"]),
        }
        for key in sorted(buckets, reverse=True)
    ]


# ---------- Fan-out / fan-in ----------

def _run_isolated(session_factory: Callable[[], Session], name: str, query: Callable[[Session], Any], default: Any) -> Any:
    session = session_factory()
    try:
        return query(session)
    except Exception as e:
        logger.error("[dashboard] Error in query %s: %s", name, e)
        return default
    finally:
        session.close()


async def build_dashboard(session_factory: Callable[[], Session], period: str = "month") -> Dict[str, Any]:
    """
    Run every dashboard statistic concurrently and assemble the response.

    Args:
        session_factory: callable returning a new Session (one per sub-query)
        period: grouping for the revenue breakdown (day/week/month/year)
    """
    loop = asyncio.get_running_loop()
    queries = {
        "totalUsers": (total_users, 0),
        "totalBookings": (total_bookings, 0),
        "totalRevenue": (total_revenue, 0),
        "pendingBookings": (pending_bookings, 0),
        "totalMenuItems": (total_menu_items, 0),
        "availableMenuItems": (available_menu_items, 0),
        "recentBookings": (recent_bookings, []),
        "monthlyRevenue": (lambda s: revenue_by_period(s, period), []),
    }
    tasks = [
        loop.run_in_executor(None, _run_isolated, session_factory, name, query, default)
        for name, (query, default) in queries.items()
    ]
    values = await asyncio.gather(*tasks)
    results = dict(zip(queries.keys(), values))

    return {
        "statistics": {
            "totalUsers": results["totalUsers"],
            "totalBookings": results["totalBookings"],
            "totalRevenue": results["totalRevenue"],
            "pendingBookings": results["pendingBookings"],
            "totalMenuItems": results["totalMenuItems"],
            "availableMenuItems": results["availableMenuItems"],
        },
        "recentBookings": results["recentBookings"],
        "monthlyRevenue": results["monthlyRevenue"],
    }
