"""Tests for the admin dashboard, revenue analytics and admin booking/user management."""

from datetime import datetime

import pytest

from catering.db import dashboard_utils
from catering.db.models import Receipt
from catering.utils.time_utils import now_local_naive

from conftest import auth, booking_payload


async def _book_and_bill(client, menu, token, event_date, payment_status="pending"):
    booking = (await client.post(
        "/api/bookings", json=booking_payload(menu, event_date=event_date), headers=auth(token)
    )).json()["booking"]
    receipt = (await client.post(
        "/api/receipts/generate",
        json={"bookingId": booking["id"], "paymentStatus": payment_status},
        headers=auth(token),
    )).json()["receipt"]
    return booking, receipt


@pytest.mark.asyncio
async def test_dashboard_requires_admin(client, register_customer):
    token, _ = await register_customer()
    response = await client.get("/api/admin/dashboard", headers=auth(token))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_on_empty_store(client, admin_token):
    data = (await client.get("/api/admin/dashboard", headers=auth(admin_token))).json()
    assert data["statistics"] == {
        "totalUsers": 1,
        "totalBookings": 0,
        "totalRevenue": 0,
        "pendingBookings": 0,
        "totalMenuItems": 0,
        "availableMenuItems": 0,
    }
    assert data["recentBookings"] == []
    assert data["monthlyRevenue"] == []


@pytest.mark.asyncio
async def test_dashboard_counts_and_paid_only_revenue(client, menu, register_customer, admin_token):
    token, _ = await register_customer()
    booking, _ = await _book_and_bill(client, menu, token, "2030-01-01", payment_status="paid")
    await _book_and_bill(client, menu, token, "2030-01-02", payment_status="pending")
    await client.patch(
        f"/api/admin/bookings/{booking['id']}/status", json={"status": "confirmed"}, headers=auth(admin_token)
    )

    data = (await client.get("/api/admin/dashboard", headers=auth(admin_token))).json()
    stats = data["statistics"]
    assert stats["totalUsers"] == 2
    assert stats["totalBookings"] == 2
    assert stats["pendingBookings"] == 1
    assert stats["totalMenuItems"] == 4
    assert stats["availableMenuItems"] == 3
    # Only the paid receipt counts: 350 + 12% = 392
    assert stats["totalRevenue"] == 392.0

    assert len(data["recentBookings"]) == 2
    assert data["monthlyRevenue"] == [{"period": now_local_naive().strftime("%Y-%m"), "revenue": 392.0}]


@pytest.mark.asyncio
async def test_failing_subquery_degrades_to_default(client, admin_token, monkeypatch):
    def boom(session):
        raise RuntimeError("stats table unavailable")

    monkeypatch.setattr(dashboard_utils, "total_bookings", boom)
    response = await client.get("/api/admin/dashboard", headers=auth(admin_token))
    assert response.status_code == 200
    assert response.json()["statistics"]["totalBookings"] == 0
    assert response.json()["statistics"]["totalUsers"] == 1


@pytest.mark.asyncio
async def test_revenue_analytics_groups_by_period(client, menu, register_customer, admin_token, db_session):
    token, _ = await register_customer()
    _, paid = await _book_and_bill(client, menu, token, "2030-01-01", payment_status="paid")
    await _book_and_bill(client, menu, token, "2030-01-02", payment_status="pending")

    # Move the paid receipt into an earlier month
    receipt = db_session.get(Receipt, paid["id"])
    now = now_local_naive()
    earlier = datetime(now.year - 1 if now.month == 1 else now.year, 12 if now.month == 1 else now.month - 1, 1, 12, 0)
    receipt.created_at = earlier
    db_session.commit()

    analytics = (await client.get(
        "/api/admin/analytics/revenue", params={"period": "month"}, headers=auth(admin_token)
    )).json()["analytics"]

    assert analytics == [
        {
            "period": now.strftime("%Y-%m"),
            "totalReceipts": 1,
            "paidRevenue": 0.0,
            "pendingRevenue": 392.0,
            "totalRevenue": 392.0,
        },
        {
            "period": earlier.strftime("%Y-%m"),
            "totalReceipts": 1,
            "paidRevenue": 392.0,
            "pendingRevenue": 0.0,
            "totalRevenue": 392.0,
        },
    ]


def test_period_key_formats():
    moment = datetime(2026, 10, 18, 9, 30)
    assert dashboard_utils.period_key(moment, "day") == "2026-10-18"
    assert dashboard_utils.period_key(moment, "month") == "2026-10"
    assert dashboard_utils.period_key(moment, "year") == "2026"
    assert dashboard_utils.period_key(moment, "bogus") == "2026-10"


@pytest.mark.asyncio
async def test_admin_user_listing_and_search(client, register_customer, admin_token):
    await register_customer()
    await register_customer(username="maria", email="maria@mail.com", firstName="Maria")

    data = (await client.get("/api/admin/users", params={"limit": 2}, headers=auth(admin_token))).json()
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    found = (await client.get("/api/admin/users", params={"search": "mari"}, headers=auth(admin_token))).json()
    assert [u["email"] for u in found["users"]] == ["maria@mail.com"]


@pytest.mark.asyncio
async def test_admin_booking_search_and_detail(client, menu, register_customer, admin_token):
    token, _ = await register_customer()
    first = (await client.post(
        "/api/bookings", json=booking_payload(menu, event_date="2030-03-01", eventType="Wedding"), headers=auth(token)
    )).json()["booking"]
    await client.post(
        "/api/bookings", json=booking_payload(menu, event_date="2030-05-01", eventType="Birthday"), headers=auth(token)
    )

    weddings = (await client.get(
        "/api/admin/bookings", params={"eventType": "wed"}, headers=auth(admin_token)
    )).json()
    assert [b["id"] for b in weddings["bookings"]] == [first["id"]]

    ranged = (await client.get(
        "/api/admin/bookings", params={"dateFrom": "2030-04-01", "dateTo": "2030-12-31"}, headers=auth(admin_token)
    )).json()
    assert ranged["pagination"]["total"] == 1
    assert ranged["bookings"][0]["eventType"] == "Birthday"

    detail = (await client.get(f"/api/admin/bookings/{first['id']}", headers=auth(admin_token))).json()["booking"]
    assert len(detail["items"]) == 2

    cancelled = await client.patch(
        f"/api/admin/bookings/{first['id']}/status", json={"status": "cancelled"}, headers=auth(admin_token)
    )
    assert cancelled.json()["booking"]["bookingStatus"] == "cancelled"

    pending = (await client.get(
        "/api/admin/bookings", params={"status": "pending"}, headers=auth(admin_token)
    )).json()
    assert pending["pagination"]["total"] == 1
