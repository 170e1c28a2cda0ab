"""Tests for the booking workflow: validation, price snapshots, date exclusivity, access."""

import pytest

from catering.db.models import Booking, BookingItem, Receipt

from conftest import auth, booking_payload


@pytest.mark.asyncio
async def test_create_booking_snapshots_prices_and_totals(client, menu, register_customer):
    token, user = await register_customer()
    response = await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token))
    assert response.status_code == 201

    booking = response.json()["booking"]
    assert booking["bookingStatus"] == "pending"
    assert booking["totalAmount"] == 350.0
    assert booking["userId"] == user["id"]
    assert booking["bookingId"].startswith("BK-")
    assert booking["eventDate"] == "2030-06-15"
    assert booking["email"] == "juan@mail.com"

    lines = {line["itemName"]: line for line in booking["items"]}
    assert lines["Pancit"]["unitPrice"] == 100.0
    assert lines["Pancit"]["quantity"] == 3
    assert lines["Pancit"]["totalPrice"] == 300.0
    assert lines["Rice"]["totalPrice"] == 50.0


@pytest.mark.asyncio
async def test_later_price_change_does_not_touch_booking(client, menu, register_customer, admin_token):
    token, _ = await register_customer()
    created = (await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token))).json()["booking"]

    await client.put(f"/api/menu/{menu['Pancit']}", json={"pricePerServing": 999}, headers=auth(admin_token))

    booking = (await client.get(f"/api/bookings/{created['id']}", headers=auth(token))).json()["booking"]
    assert booking["totalAmount"] == 350.0
    pancit = next(line for line in booking["items"] if line["itemName"] == "Pancit")
    assert pancit["unitPrice"] == 100.0


@pytest.mark.asyncio
async def test_empty_menu_items_rejected(client, menu, register_customer):
    token, _ = await register_customer()
    response = await client.post("/api/bookings", json=booking_payload(menu, lines=[]), headers=auth(token))
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_unavailable_item_rejected_and_nothing_persisted(client, menu, register_customer, db_session):
    token, _ = await register_customer()
    lines = [{"itemId": menu["Pancit"], "quantity": 1}, {"itemId": menu["Halo-Halo"], "quantity": 2}]
    response = await client.post("/api/bookings", json=booking_payload(menu, lines=lines), headers=auth(token))
    assert response.status_code == 400
    assert response.json() == {"error": f"Menu item with ID {menu['Halo-Halo']} not found or unavailable"}

    assert db_session.query(Booking).count() == 0
    assert db_session.query(BookingItem).count() == 0


@pytest.mark.asyncio
async def test_unknown_item_rejected(client, menu, register_customer):
    token, _ = await register_customer()
    lines = [{"itemId": 4242, "quantity": 1}]
    response = await client.post("/api/bookings", json=booking_payload(menu, lines=lines), headers=auth(token))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_zero_quantity_and_guests_rejected(client, menu, register_customer):
    token, _ = await register_customer()
    lines = [{"itemId": menu["Pancit"], "quantity": 0}]
    response = await client.post("/api/bookings", json=booking_payload(menu, lines=lines), headers=auth(token))
    assert response.status_code == 400

    response = await client.post("/api/bookings", json=booking_payload(menu, numGuests=0), headers=auth(token))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_blank_event_fields_rejected(client, menu, register_customer, db_session):
    token, _ = await register_customer()
    for field in ("eventType", "eventVenue"):
        response = await client.post("/api/bookings", json=booking_payload(menu, **{field: "   "}), headers=auth(token))
        assert response.status_code == 400
        assert response.json()["error"].startswith(field)
    assert db_session.query(Booking).count() == 0

    response = await client.post(
        "/api/bookings", json=booking_payload(menu, eventType="  Wedding ", eventVenue=" Clark "), headers=auth(token)
    )
    assert response.status_code == 201
    assert response.json()["booking"]["eventType"] == "Wedding"
    assert response.json()["booking"]["eventVenue"] == "Clark"


@pytest.mark.asyncio
async def test_booking_requires_login(client, menu):
    response = await client.post("/api/bookings", json=booking_payload(menu))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_same_date_conflicts(client, menu, register_customer):
    token_a, _ = await register_customer()
    token_b, _ = await register_customer(username="maria", email="maria@mail.com")

    first = await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token_a))
    assert first.status_code == 201

    second = await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token_b))
    assert second.status_code == 409
    assert second.json() == {"error": "Sorry, this date is already booked. Please choose another date."}

    other_day = await client.post(
        "/api/bookings", json=booking_payload(menu, event_date="2030-06-16"), headers=auth(token_b)
    )
    assert other_day.status_code == 201


@pytest.mark.asyncio
async def test_cancelled_booking_frees_the_date(client, menu, register_customer):
    token, _ = await register_customer()
    first = (await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token))).json()["booking"]

    availability = await client.get("/api/bookings/availability", params={"date": "2030-06-15"})
    assert availability.json() == {"date": "2030-06-15", "available": False}

    cancelled = await client.patch(
        f"/api/bookings/{first['id']}/status", json={"status": "cancelled"}, headers=auth(token)
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["booking"]["bookingStatus"] == "cancelled"

    availability = await client.get("/api/bookings/availability", params={"date": "2030-06-15"})
    assert availability.json()["available"] is True

    again = await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token))
    assert again.status_code == 201

    # The cancelled booking cannot be revived onto the now-taken date
    revived = await client.patch(
        f"/api/bookings/{first['id']}/status", json={"status": "pending"}, headers=auth(token)
    )
    assert revived.status_code == 409


@pytest.mark.asyncio
async def test_invalid_status_rejected(client, menu, register_customer):
    token, _ = await register_customer()
    booking = (await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token))).json()["booking"]
    response = await client.patch(
        f"/api/bookings/{booking['id']}/status", json={"status": "archived"}, headers=auth(token)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_customers_only_see_their_own_bookings(client, menu, register_customer, admin_token):
    token_a, _ = await register_customer()
    token_b, _ = await register_customer(username="maria", email="maria@mail.com")
    booking = (await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token_a))).json()["booking"]

    assert (await client.get(f"/api/bookings/{booking['id']}", headers=auth(token_b))).status_code == 404
    assert (await client.get("/api/bookings", headers=auth(token_b))).json()["bookings"] == []

    own = (await client.get("/api/bookings", headers=auth(token_a))).json()["bookings"]
    assert [b["id"] for b in own] == [booking["id"]]

    as_admin = await client.get(f"/api/bookings/{booking['id']}", headers=auth(admin_token))
    assert as_admin.status_code == 200
    assert len((await client.get("/api/bookings", headers=auth(admin_token))).json()["bookings"]) == 1


@pytest.mark.asyncio
async def test_non_owner_cannot_change_status(client, menu, register_customer):
    token_a, _ = await register_customer()
    token_b, _ = await register_customer(username="maria", email="maria@mail.com")
    booking = (await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token_a))).json()["booking"]

    response = await client.patch(
        f"/api/bookings/{booking['id']}/status", json={"status": "cancelled"}, headers=auth(token_b)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_is_newest_first(client, menu, register_customer):
    token, _ = await register_customer()
    first = (await client.post("/api/bookings", json=booking_payload(menu, event_date="2030-01-01"), headers=auth(token))).json()
    second = (await client.post("/api/bookings", json=booking_payload(menu, event_date="2030-01-02"), headers=auth(token))).json()
    ids = [b["id"] for b in (await client.get("/api/bookings", headers=auth(token))).json()["bookings"]]
    assert ids == [second["booking"]["id"], first["booking"]["id"]]


@pytest.mark.asyncio
async def test_delete_booking_removes_lines(client, menu, register_customer, db_session):
    token, _ = await register_customer()
    booking = (await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token))).json()["booking"]

    response = await client.delete(f"/api/bookings/{booking['id']}", headers=auth(token))
    assert response.status_code == 200

    assert db_session.query(Booking).count() == 0
    assert db_session.query(BookingItem).count() == 0
    assert (await client.get(f"/api/bookings/{booking['id']}", headers=auth(token))).status_code == 404


@pytest.mark.asyncio
async def test_delete_booking_with_receipt_is_refused(client, menu, register_customer, admin_token, db_session):
    token, _ = await register_customer()
    booking = (await client.post("/api/bookings", json=booking_payload(menu), headers=auth(token))).json()["booking"]
    receipt = await client.post(
        "/api/receipts/generate", json={"bookingId": booking["id"], "paymentStatus": "paid"}, headers=auth(token)
    )
    assert receipt.status_code == 201

    response = await client.delete(f"/api/bookings/{booking['id']}", headers=auth(token))
    assert response.status_code == 409
    assert "cancel" in response.json()["error"]

    assert db_session.query(Booking).count() == 1
    assert db_session.query(BookingItem).count() == 2
    assert db_session.query(Receipt).count() == 1
    stats = (await client.get("/api/admin/dashboard", headers=auth(admin_token))).json()["statistics"]
    assert stats["totalRevenue"] == 392.0

    cancelled = await client.patch(
        f"/api/bookings/{booking['id']}/status", json={"status": "cancelled"}, headers=auth(token)
    )
    assert cancelled.status_code == 200
