"""Menu catalog helpers: queries, mutations and serialization."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from catering.db.models import MenuItem, BookingItem
from catering.errors import ConflictError, NotFoundError
from catering.utils.money import from_cents, to_cents
from catering.utils.time_utils import isoformat_or_none

logger = logging.getLogger(__name__)


# Default catalog used by scripts/seed_menu.py (prices in pesos)
DEFAULT_MENU: List[Dict[str, Any]] = [
    {"item_name": "Lechon", "description": "Traditional Filipino roasted pig",
     "category": "Main Course", "price": 500, "image_url": "/img/lechon.jpg"},
    {"item_name": "Chicken Cordon Bleu", "description": "Breaded chicken with ham and cheese",
     "category": "Main Course", "price": 350, "image_url": "/img/cordonblue.jpg"},
    {"item_name": "Lasagna", "description": "Layered pasta with meat and cheese",
     "category": "Main Course", "price": 300, "image_url": "/img/lasagna.jpg"},
    {"item_name": "Shanghai Rolls", "description": "Crispy spring rolls with meat filling",
     "category": "Appetizer", "price": 200, "image_url": "/img/shanghai.jpg"},
    {"item_name": "Fruit Salad", "description": "Fresh mixed fruits with cream",
     "category": "Dessert", "price": 150, "image_url": "/img/fruitsalad.jpg"},
    {"item_name": "Rice", "description": "Steamed white rice",
     "category": "Side Dish", "price": 50, "image_url": "/img/rice.jpg"},
    {"item_name": "Soft Drinks", "description": "Assorted soft drinks",
     "category": "Beverage", "price": 30, "image_url": "/img/drinks.png"},
    {"item_name": "Cucumber Juice", "description": "Fresh cucumber juice",
     "category": "Beverage", "price": 80, "image_url": "/img/cucumberjuice.jpg"},
]


def menu_item_to_dict(item: MenuItem) -> Dict[str, Any]:
    """Serialize a MenuItem for API responses (price as decimal pesos)."""
    return {
        "id": item.id,
        "itemName": item.item_name,
        "description": item.description,
        "category": item.category,
        "pricePerServing": from_cents(item.price_per_serving),
        "imageUrl": item.image_url,
        "isAvailable": item.is_available,
        "createdAt": isoformat_or_none(item.created_at),
        "updatedAt": isoformat_or_none(item.updated_at),
    }


def list_menu_items(
    session: Session,
    category: Optional[str] = None,
    available: Optional[bool] = None,
) -> List[MenuItem]:
    """List menu items, optionally filtered, ordered by category then name."""
    stmt = select(MenuItem)
    if category:
        stmt = stmt.where(MenuItem.category == category)
    if available is not None:
        stmt = stmt.where(MenuItem.is_available == available)
    stmt = stmt.order_by(MenuItem.category, MenuItem.item_name)
    return list(session.execute(stmt).scalars().all())


def list_categories(session: Session) -> List[str]:
    stmt = select(MenuItem.category).distinct().order_by(MenuItem.category)
    return list(session.execute(stmt).scalars().all())


def get_menu_item(session: Session, item_id: int) -> MenuItem:
    item = session.get(MenuItem, item_id)
    if item is None:
        raise NotFoundError("Menu item not found")
    return item


def create_menu_item(
    session: Session,
    item_name: str,
    category: str,
    price: float,
    description: str = "",
    image_url: str = "",
    is_available: bool = True,
) -> MenuItem:
    """Create a menu item. Price is given in pesos."""
    item = MenuItem(
        item_name=item_name,
        description=description or "",
        category=category,
        price_per_serving=to_cents(price),
        image_url=image_url or "",
        is_available=is_available,
    )
    session.add(item)
    session.flush()
    logger.info("[menu] Created item %s (%s)", item.id, item.item_name)
    return item


def toggle_availability(session: Session, item_id: int) -> MenuItem:
    item = get_menu_item(session, item_id)
    item.is_available = not item.is_available
    session.flush()
    return item


def count_references(session: Session, item_id: int) -> int:
    """Number of booking lines that reference a menu item."""
    stmt = select(func.count()).select_from(BookingItem).where(BookingItem.item_id == item_id)
    return session.execute(stmt).scalar_one()


def delete_menu_item(session: Session, item_id: int) -> None:
    """
    Hard-delete a menu item.

    Raises ConflictError when any booking line references the item.
    """
    item = get_menu_item(session, item_id)
    if count_references(session, item_id) > 0:
        raise ConflictError("Cannot delete menu item that is used in existing bookings")
    session.delete(item)
    session.flush()
    logger.info("[menu] Deleted item %s", item_id)
