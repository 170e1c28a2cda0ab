"""Tests for promotional offers."""

from datetime import datetime, timedelta

import pytest

from catering.db.models import Offer
from catering.db.offer_utils import is_running

from conftest import auth


def test_is_running_window():
    now = datetime(2026, 10, 18, 12, 0)
    assert is_running(Offer(title="a", active=True), now)
    assert not is_running(Offer(title="b", active=False), now)
    assert not is_running(Offer(title="c", active=True, start_at=now + timedelta(days=1)), now)
    assert not is_running(Offer(title="d", active=True, end_at=now - timedelta(days=1)), now)
    assert is_running(
        Offer(title="e", active=True, start_at=now - timedelta(days=1), end_at=now + timedelta(days=1)), now
    )


@pytest.mark.asyncio
async def test_active_offers_are_public(client, admin_token):
    now = datetime.now()
    await client.post("/api/offers", json={"title": "Holiday Lechon Promo"}, headers=auth(admin_token))
    await client.post("/api/offers", json={"title": "Paused", "active": False}, headers=auth(admin_token))
    await client.post(
        "/api/offers",
        json={"title": "Expired", "endAt": (now - timedelta(days=30)).isoformat()},
        headers=auth(admin_token),
    )

    active = (await client.get("/api/offers/active")).json()["offers"]
    assert [o["title"] for o in active] == ["Holiday Lechon Promo"]

    everything = (await client.get("/api/offers", headers=auth(admin_token))).json()["offers"]
    assert len(everything) == 3


@pytest.mark.asyncio
async def test_offer_admin_crud(client, admin_token, register_customer):
    token, _ = await register_customer()
    denied = await client.post("/api/offers", json={"title": "Nope"}, headers=auth(token))
    assert denied.status_code == 403

    missing_title = await client.post("/api/offers", json={"description": "x"}, headers=auth(admin_token))
    assert missing_title.status_code == 400

    created = (await client.post(
        "/api/offers", json={"title": "Wedding Package", "description": "10% off"}, headers=auth(admin_token)
    )).json()["offer"]

    updated = await client.put(
        f"/api/offers/{created['id']}", json={"active": False}, headers=auth(admin_token)
    )
    assert updated.status_code == 200
    assert updated.json()["offer"]["active"] is False
    assert updated.json()["offer"]["description"] == "10% off"

    deleted = await client.delete(f"/api/offers/{created['id']}", headers=auth(admin_token))
    assert deleted.status_code == 200
    assert (await client.delete(f"/api/offers/{created['id']}", headers=auth(admin_token))).status_code == 404


@pytest.mark.asyncio
async def test_offer_window_must_be_ordered(client, admin_token):
    response = await client.post(
        "/api/offers",
        json={"title": "Backwards", "startAt": "2030-02-01T00:00:00", "endAt": "2030-01-01T00:00:00"},
        headers=auth(admin_token),
    )
    assert response.status_code == 400
