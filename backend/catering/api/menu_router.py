"""Menu catalog API router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.orm import Session

from catering.api.common import CamelModel, ShortText, Title
from catering.db import menu_utils
from catering.db.dependencies import get_sqlalchemy_session, require_admin
from catering.db.menu_utils import menu_item_to_dict
from catering.db.models import User
from catering.db.patch import apply_patch
from catering.utils.money import to_cents


router = APIRouter(prefix="/api/menu", tags=["menu"])


class CreateMenuItemRequest(CamelModel):
    """Request body for creating a menu item."""
    item_name: Title
    description: Optional[str] = ""
    category: ShortText
    price_per_serving: float = Field(ge=0)
    image_url: Optional[str] = ""
    is_available: bool = True


class UpdateMenuItemRequest(CamelModel):
    """Request body for updating a menu item. Unset fields are unchanged."""
    item_name: Optional[Title] = None
    description: Optional[str] = None
    category: Optional[ShortText] = None
    price_per_serving: Optional[float] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    is_available: Optional[bool] = None


@router.get("", summary="List menu items")
async def list_menu(
    category: Optional[str] = Query(None, description="Exact category match"),
    available: Optional[bool] = Query(None, description="Filter by availability"),
    session: Session = Depends(get_sqlalchemy_session),
):
    """
    List menu items ordered by category and name.

    - **category**: only items in this category
    - **available**: true/false availability filter
    """
    items = menu_utils.list_menu_items(session, category=category, available=available)
    return {"items": [menu_item_to_dict(item) for item in items]}


@router.get("/categories/list", summary="List menu categories")
async def list_categories(session: Session = Depends(get_sqlalchemy_session)):
    return {"categories": menu_utils.list_categories(session)}


@router.get("/{item_id}", summary="Get a menu item")
async def get_menu_item(item_id: int, session: Session = Depends(get_sqlalchemy_session)):
    return {"item": menu_item_to_dict(menu_utils.get_menu_item(session, item_id))}


@router.post("", status_code=201, summary="Create a menu item")
async def create_menu_item(
    request: CreateMenuItemRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    """
    Create a new menu item.

    **Admin only**
    """
    item = menu_utils.create_menu_item(
        session,
        item_name=request.item_name,
        category=request.category,
        price=request.price_per_serving,
        description=request.description,
        image_url=request.image_url,
        is_available=request.is_available,
    )
    session.commit()
    return {"message": "Menu item created successfully", "item": menu_item_to_dict(item)}


@router.put("/{item_id}", summary="Update a menu item")
async def update_menu_item(
    item_id: int,
    request: UpdateMenuItemRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    """
    Update specified fields of a menu item. Other fields unchanged.

    **Admin only**
    """
    item = menu_utils.get_menu_item(session, item_id)
    apply_patch(
        item,
        request,
        converters={"price_per_serving": to_cents},
    )
    session.commit()
    return {"message": "Menu item updated successfully", "item": menu_item_to_dict(item)}


@router.patch("/{item_id}/availability", summary="Toggle availability")
async def toggle_availability(
    item_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    item = menu_utils.toggle_availability(session, item_id)
    session.commit()
    return {"message": "Menu item availability updated successfully", "item": menu_item_to_dict(item)}


@router.delete("/{item_id}", summary="Delete a menu item")
async def delete_menu_item(
    item_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin),
):
    """
    Delete a menu item that no booking references.

    **Admin only**. Returns 409 when the item is used by any booking line.
    """
    menu_utils.delete_menu_item(session, item_id)
    session.commit()
    return {"message": "Menu item deleted successfully", "itemId": item_id}
