"""
Async HTTP client for the catering API.

Mirrors what the customer and admin pages do: log in, browse the menu,
book an event, issue the receipt, message the admins and read the
dashboard. Pass `transport` to talk to an in-process app (tests).
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional

import httpx

from catering.client.session_cache import SessionCache, USER_KEY

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    """Non-2xx response; `message` carries the server's {"error": ...} text."""

    def __init__(self, status_code: int, message: str, data: Optional[dict] = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.data = data or {}


class CateringClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session_cache: Optional[SessionCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.session_cache = session_cache
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "CateringClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---------- Plumbing ----------

    def _headers(self) -> Dict[str, str]:
        token = self.session_cache.token if self.session_cache else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        response = await self._http.request(method, path, headers=self._headers(), **kwargs)
        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {"message": response.text}

        if response.is_error:
            message = data.get("error") or data.get("message") or f"HTTP {response.status_code}"
            logger.debug("[client] %s %s -> %s %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message, data)
        return data

    # ---------- Auth ----------

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.request("POST", "/api/auth/login", json={"email": email, "password": password})
        if self.session_cache:
            self.session_cache.store_login(data["token"], data["user"])
        return data

    async def register(self, **user_data) -> Dict[str, Any]:
        data = await self.request("POST", "/api/auth/register", json=user_data)
        if self.session_cache:
            self.session_cache.store_login(data["token"], data["user"])
        return data

    async def get_current_user(self) -> Dict[str, Any]:
        return (await self.request("GET", "/api/auth/me"))["user"]

    async def update_profile(self, **profile_data) -> Dict[str, Any]:
        data = await self.request("PUT", "/api/auth/profile", json=profile_data)
        if self.session_cache:
            self.session_cache.set(USER_KEY, data["user"])
        return data

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return await self.request(
            "POST",
            "/api/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    async def logout(self) -> None:
        """Tell the server, then forget the local session even if the call fails."""
        try:
            await self.request("POST", "/api/auth/logout")
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("[client] Logout request failed: %s", e)
        finally:
            if self.session_cache:
                self.session_cache.clear()

    # ---------- Menu ----------

    async def get_menu_items(self, category: Optional[str] = None, available: Optional[bool] = None):
        params = {}
        if category:
            params["category"] = category
        if available is not None:
            params["available"] = str(available).lower()
        return (await self.request("GET", "/api/menu", params=params))["items"]

    async def get_menu_categories(self):
        return (await self.request("GET", "/api/menu/categories/list"))["categories"]

    # ---------- Bookings ----------

    async def create_booking(
        self,
        event_type: str,
        event_date: date,
        event_venue: str,
        num_guests: int,
        menu_items: Iterable[Dict[str, int]],
        special_instructions: str = "",
    ) -> Dict[str, Any]:
        payload = {
            "eventType": event_type,
            "eventDate": event_date.isoformat() if isinstance(event_date, date) else event_date,
            "eventVenue": event_venue,
            "numGuests": num_guests,
            "specialInstructions": special_instructions,
            "menuItems": [{"itemId": line["itemId"], "quantity": line["quantity"]} for line in menu_items],
        }
        return (await self.request("POST", "/api/bookings", json=payload))["booking"]

    async def get_bookings(self):
        return (await self.request("GET", "/api/bookings"))["bookings"]

    async def get_booking(self, booking_id: int):
        return (await self.request("GET", f"/api/bookings/{booking_id}"))["booking"]

    async def update_booking_status(self, booking_id: int, status: str):
        return (await self.request("PATCH", f"/api/bookings/{booking_id}/status", json={"status": status}))["booking"]

    async def check_availability(self, event_date: date) -> bool:
        data = await self.request("GET", "/api/bookings/availability", params={"date": event_date.isoformat()})
        return data["available"]

    # ---------- Receipts ----------

    async def generate_receipt(
        self, booking_id: int, payment_method: str = "Cash/Card", payment_status: str = "pending",
    ) -> Dict[str, Any]:
        payload = {"bookingId": booking_id, "paymentMethod": payment_method, "paymentStatus": payment_status}
        return (await self.request("POST", "/api/receipts/generate", json=payload))["receipt"]

    async def get_receipts(self):
        return (await self.request("GET", "/api/receipts"))["receipts"]

    async def get_receipt(self, receipt_id: int):
        return (await self.request("GET", f"/api/receipts/{receipt_id}"))["receipt"]

    async def create_booking_with_receipt(self, menu_items: Iterable[Dict[str, int]], **booking) -> Dict[str, Any]:
        """Book the event, then issue its receipt (Cash/Card, pending). Returns the receipt."""
        created = await self.create_booking(menu_items=menu_items, **booking)
        return await self.generate_receipt(created["id"])

    # ---------- Messages ----------

    async def send_message(self, subject: str, message_content: str):
        payload = {"subject": subject, "messageContent": message_content}
        return (await self.request("POST", "/api/messages", json=payload))["data"]

    async def get_my_messages(self, page: int = 1, limit: int = 10):
        return await self.request("GET", "/api/messages/my-messages", params={"page": page, "limit": limit})

    async def admin_get_all_messages(self, status: Optional[str] = None, page: int = 1, limit: int = 10):
        params = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return await self.request("GET", "/api/messages/admin/all", params=params)

    async def admin_respond_to_message(self, message_id: int, admin_response: str):
        return (await self.request(
            "POST", f"/api/messages/admin/{message_id}/respond", json={"adminResponse": admin_response},
        ))["data"]

    async def admin_update_message_status(self, message_id: int, status: str):
        return (await self.request(
            "PATCH", f"/api/messages/admin/{message_id}/status", json={"status": status},
        ))["data"]

    # ---------- Admin ----------

    async def get_admin_dashboard(self, period: str = "month"):
        return await self.request("GET", "/api/admin/dashboard", params={"period": period})
