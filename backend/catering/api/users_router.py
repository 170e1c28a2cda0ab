"""Admin user management API."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import EmailStr, Field
from sqlalchemy.orm import Session

from catering.api.common import CamelModel, PersonName, Username
from catering.db import user_utils
from catering.db.dependencies import get_sqlalchemy_session, require_admin, hash_password
from catering.db.models import User
from catering.db.user_utils import user_to_dict
from catering.errors import AuthorizationError


router = APIRouter(prefix="/api/users", tags=["users"])

UserType = Literal["customer", "admin"]


class CreateUserRequest(CamelModel):
    username: Username
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: PersonName
    last_name: PersonName
    phone_number: Optional[str] = Field(default=None, max_length=50)
    user_type: UserType = "customer"


class UpdateUserRequest(CamelModel):
    user_type: Optional[UserType] = None
    password: Optional[str] = Field(default=None, min_length=6)
    is_active: Optional[bool] = None


@router.get("", summary="List users (admin-only)")
async def list_users(
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin)
):
    users, _ = user_utils.search_users(session, page=1, limit=10_000)
    return {"users": [user_to_dict(u) for u in users]}


@router.post("", status_code=201, summary="Create user (admin-only)")
async def create_user(
    request: CreateUserRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin)
):
    user = user_utils.create_user(
        session,
        username=request.username,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        phone_number=request.phone_number,
        user_type=request.user_type,
    )
    session.commit()
    return {"message": "User created successfully", "user": user_to_dict(user)}


@router.put("/{user_id}", summary="Update user (admin-only)")
async def update_user(
    user_id: int,
    request: UpdateUserRequest,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin)
):
    user = user_utils.get_user(session, user_id)

    if request.user_type is not None:
        user.user_type = request.user_type
    if request.password is not None:
        user.password_hash = hash_password(request.password)
    if request.is_active is not None:
        user.is_active = request.is_active

    session.commit()
    return {"message": "User updated successfully", "user": user_to_dict(user)}


@router.delete("/{user_id}", summary="Disable user (admin-only)")
async def delete_user(
    user_id: int,
    session: Session = Depends(get_sqlalchemy_session),
    admin: User = Depends(require_admin)
):
    """Accounts are disabled rather than removed so their bookings and receipts stay intact."""
    user = user_utils.get_user(session, user_id)
    if user.user_type == "admin":
        raise AuthorizationError("Cannot delete admin user")

    user_utils.set_active(session, user_id, False)
    session.commit()
    return {"status": "ok"}
