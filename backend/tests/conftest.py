import os
import sys
import tempfile
from typing import Dict

import pytest
import pytest_asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# The app binds a default storage at import time; keep it out of the working tree
os.environ.setdefault(
    "APP_DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.gettempdir(), 'catering-import.db')}",
)

import httpx
from httpx import ASGITransport

from catering.main import app
from catering.db import user_utils
from catering.db.dependencies import create_token_for_user
from catering.db.menu_utils import create_menu_item
from catering.storage.sqlalchemy_adapter import SQLAlchemyStorage


CUSTOMER = {
    "username": "juan",
    "email": "juan@mail.com",
    "password": "secret123",
    "firstName": "Juan",
    "lastName": "Dela Cruz",
    "phoneNumber": "09171234567",
}


@pytest.fixture
def storage(tmp_path):
    """Create SQLAlchemyStorage with a file-backed database per test."""
    db_path = tmp_path / "catering.db"
    storage = SQLAlchemyStorage(f"sqlite:///{db_path}", use_alembic=False)
    yield storage
    storage.close()


@pytest.fixture
def db_session(storage):
    session = storage._get_session()
    try:
        yield session
    finally:
        session.close()


@pytest_asyncio.fixture
async def client(storage):
    """Async HTTP client bound to the app with isolated storage."""
    original_storage = app.state.storage
    app.state.storage = storage
    try:
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.state.storage = original_storage


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_customer(client):
    """Register a customer through the API; returns (token, user)."""
    async def _register(**overrides):
        payload = {**CUSTOMER, **overrides}
        response = await client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        data = response.json()
        return data["token"], data["user"]
    return _register


@pytest.fixture
def admin_token(storage):
    """Create an admin directly in storage and mint its token."""
    session = storage._get_session()
    try:
        admin = user_utils.create_user(
            session,
            username="admin",
            email="admin@dsis.com",
            password="admin123",
            first_name="Admin",
            last_name="User",
            user_type="admin",
        )
        session.commit()
        return create_token_for_user(admin)
    finally:
        session.close()


@pytest.fixture
def menu(storage) -> Dict[str, int]:
    """Seed a small catalog; returns item name -> id."""
    session = storage._get_session()
    try:
        items = [
            create_menu_item(session, "Pancit", "Main Course", 100, description="Stir-fried noodles"),
            create_menu_item(session, "Rice", "Side Dish", 50),
            create_menu_item(session, "Leche Flan", "Dessert", 80),
            create_menu_item(session, "Halo-Halo", "Dessert", 120, is_available=False),
        ]
        session.commit()
        return {item.item_name: item.id for item in items}
    finally:
        session.close()


def booking_payload(menu_ids: Dict[str, int], event_date: str = "2030-06-15", lines=None, **overrides):
    payload = {
        "eventType": "Birthday",
        "eventDate": event_date,
        "eventVenue": "San Fernando, Pampanga",
        "numGuests": 50,
        "specialInstructions": "No peanuts",
        "menuItems": lines if lines is not None else [
            {"itemId": menu_ids["Pancit"], "quantity": 3},
            {"itemId": menu_ids["Rice"], "quantity": 1},
        ],
    }
    payload.update(overrides)
    return payload
