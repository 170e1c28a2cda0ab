"""Tests for the Python API client and its persistent session cache."""

import json
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport

from catering.client import ApiError, CateringClient, SessionCache, TOKEN_KEY, USER_KEY
from catering.main import app

from conftest import CUSTOMER


def test_session_cache_round_trip(tmp_path):
    cache = SessionCache(tmp_path / "session.json")
    assert cache.token is None
    assert cache.current_user is None
    assert not cache.is_logged_in()

    cache.store_login("tok-123", {"id": 1, "email": "juan@mail.com"})
    stored = json.loads((tmp_path / "session.json").read_text(encoding="utf-8"))
    assert stored[TOKEN_KEY] == "tok-123"
    assert stored[USER_KEY]["email"] == "juan@mail.com"

    reopened = SessionCache(tmp_path / "session.json")
    assert reopened.token == "tok-123"
    assert reopened.is_logged_in()

    reopened.set(TOKEN_KEY, None)
    assert reopened.token is None
    assert reopened.current_user == {"id": 1, "email": "juan@mail.com"}

    reopened.clear()
    assert reopened.current_user is None


def test_session_cache_ignores_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    cache = SessionCache(path)
    assert cache.token is None
    cache.set(TOKEN_KEY, "fresh")
    assert cache.token == "fresh"


@pytest_asyncio.fixture
async def api(client, tmp_path):
    """CateringClient talking to the in-process app (storage already swapped by `client`)."""
    cache = SessionCache(tmp_path / "client-session.json")
    async with CateringClient("http://test", session_cache=cache, transport=ASGITransport(app=app)) as api:
        yield api


@pytest.mark.asyncio
async def test_register_login_and_logout_update_cache(api):
    await api.register(**CUSTOMER)
    assert api.session_cache.current_user["email"] == "juan@mail.com"

    me = await api.get_current_user()
    assert me["username"] == "juan"

    await api.logout()
    assert api.session_cache.token is None
    assert api.session_cache.current_user is None

    await api.login("juan@mail.com", "secret123")
    assert api.session_cache.token


@pytest.mark.asyncio
async def test_api_error_carries_server_message(api):
    with pytest.raises(ApiError) as excinfo:
        await api.login("nobody@mail.com", "secret123")
    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid email or password"


@pytest.mark.asyncio
async def test_booking_with_receipt_workflow(api, menu):
    await api.register(**CUSTOMER)

    items = await api.get_menu_items(available=True)
    assert "Halo-Halo" not in {i["itemName"] for i in items}
    assert await api.check_availability(date(2030, 6, 15)) is True

    receipt = await api.create_booking_with_receipt(
        menu_items=[{"itemId": menu["Pancit"], "quantity": 3}, {"itemId": menu["Rice"], "quantity": 1}],
        event_type="Birthday",
        event_date=date(2030, 6, 15),
        event_venue="Clubhouse",
        num_guests=30,
    )
    assert receipt["paymentMethod"] == "Cash/Card"
    assert receipt["paymentStatus"] == "pending"
    assert receipt["subtotal"] == 350.0
    assert receipt["totalAmount"] == 392.0

    assert await api.check_availability(date(2030, 6, 15)) is False
    assert len(await api.get_bookings()) == 1
    assert len(await api.get_receipts()) == 1

    with pytest.raises(ApiError) as excinfo:
        await api.create_booking(
            event_type="Wedding",
            event_date=date(2030, 6, 15),
            event_venue="Church",
            num_guests=100,
            menu_items=[{"itemId": menu["Rice"], "quantity": 1}],
        )
    assert excinfo.value.status_code == 409


@pytest.mark.asyncio
async def test_messages_through_client(api):
    await api.register(**CUSTOMER)
    sent = await api.send_message("Tasting", "Can we schedule a food tasting?")
    assert sent["messageStatus"] == "unread"

    mine = await api.get_my_messages()
    assert mine["pagination"]["total"] == 1

    with pytest.raises(ApiError) as excinfo:
        await api.get_admin_dashboard()
    assert excinfo.value.status_code == 403
