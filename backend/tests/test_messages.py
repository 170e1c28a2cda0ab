"""Tests for the customer-to-admin messaging inbox."""

import pytest

from conftest import auth


async def _send(client, token, subject="Menu question", content="Do you serve vegetarian dishes?"):
    response = await client.post(
        "/api/messages", json={"subject": subject, "messageContent": content}, headers=auth(token)
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_send_message_starts_unread(client, register_customer):
    token, user = await register_customer()
    message = await _send(client, token)
    assert message["messageStatus"] == "unread"
    assert message["userId"] == user["id"]
    assert message["adminResponse"] is None
    assert message["messageId"].startswith("MSG-")


@pytest.mark.asyncio
async def test_blank_subject_rejected(client, register_customer):
    token, _ = await register_customer()
    response = await client.post(
        "/api/messages", json={"subject": "   ", "messageContent": "hello"}, headers=auth(token)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_my_messages_only_lists_own(client, register_customer):
    token_a, _ = await register_customer()
    token_b, _ = await register_customer(username="maria", email="maria@mail.com")
    await _send(client, token_a, subject="First")
    await _send(client, token_a, subject="Second")
    await _send(client, token_b, subject="Other")

    data = (await client.get("/api/messages/my-messages", headers=auth(token_a))).json()
    assert [m["subject"] for m in data["messages"]] == ["Second", "First"]
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}


@pytest.mark.asyncio
async def test_customer_cannot_read_other_message(client, register_customer):
    token_a, _ = await register_customer()
    token_b, _ = await register_customer(username="maria", email="maria@mail.com")
    message = await _send(client, token_a)

    assert (await client.get(f"/api/messages/{message['id']}", headers=auth(token_a))).status_code == 200
    assert (await client.get(f"/api/messages/{message['id']}", headers=auth(token_b))).status_code == 404


@pytest.mark.asyncio
async def test_admin_routes_require_admin(client, register_customer):
    token, _ = await register_customer()
    assert (await client.get("/api/messages/admin/all", headers=auth(token))).status_code == 403
    assert (await client.get("/api/messages/admin/statistics", headers=auth(token))).status_code == 403


@pytest.mark.asyncio
async def test_admin_opening_marks_read_then_respond(client, register_customer, admin_token):
    token, _ = await register_customer()
    message = await _send(client, token)

    opened = await client.get(f"/api/messages/admin/{message['id']}", headers=auth(admin_token))
    assert opened.status_code == 200
    assert opened.json()["message"]["messageStatus"] == "read"
    assert opened.json()["message"]["email"] == "juan@mail.com"

    replied = await client.post(
        f"/api/messages/admin/{message['id']}/respond",
        json={"adminResponse": "Yes, we have a vegetarian menu."},
        headers=auth(admin_token),
    )
    assert replied.status_code == 200
    assert replied.json()["data"]["messageStatus"] == "replied"

    own = (await client.get(f"/api/messages/{message['id']}", headers=auth(token))).json()["message"]
    assert own["adminResponse"] == "Yes, we have a vegetarian menu."
    assert own["messageStatus"] == "replied"


@pytest.mark.asyncio
async def test_respond_to_missing_message_404(client, admin_token):
    response = await client.post(
        "/api/messages/admin/999/respond", json={"adminResponse": "hi"}, headers=auth(admin_token)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_status_override_and_filter(client, register_customer, admin_token):
    token, _ = await register_customer()
    first = await _send(client, token, subject="First")
    await _send(client, token, subject="Second")

    response = await client.patch(
        f"/api/messages/admin/{first['id']}/status", json={"status": "replied"}, headers=auth(admin_token)
    )
    assert response.status_code == 200

    # The short path is accepted too
    response = await client.patch(
        f"/api/messages/{first['id']}/status", json={"status": "unread"}, headers=auth(admin_token)
    )
    assert response.json()["data"]["messageStatus"] == "unread"

    invalid = await client.patch(
        f"/api/messages/{first['id']}/status", json={"status": "archived"}, headers=auth(admin_token)
    )
    assert invalid.status_code == 400

    unread = (await client.get(
        "/api/messages/admin/all", params={"status": "unread"}, headers=auth(admin_token)
    )).json()
    assert unread["pagination"]["total"] == 2
    assert unread["messages"][0]["firstName"] == "Juan"


@pytest.mark.asyncio
async def test_statistics(client, register_customer, admin_token):
    token, _ = await register_customer()
    first = await _send(client, token, subject="First")
    await _send(client, token, subject="Second")
    await _send(client, token, subject="Third")
    await client.post(
        f"/api/messages/admin/{first['id']}/respond", json={"adminResponse": "Done"}, headers=auth(admin_token)
    )

    data = (await client.get("/api/messages/admin/statistics", headers=auth(admin_token))).json()
    assert data["statistics"] == {"totalMessages": 3, "unreadMessages": 2, "repliedMessages": 1}
    assert len(data["recentMessages"]) == 3
