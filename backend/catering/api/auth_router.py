"""Auth endpoints: register, login, profile and password management."""

import os
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import EmailStr, Field
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from catering.api.common import CamelModel, PersonName, Username
from catering.db.dependencies import get_sqlalchemy_session, get_current_user, create_token_for_user
from catering.db.models import User
from catering.db.patch import apply_patch
from catering.db import user_utils
from catering.db.user_utils import user_to_dict, normalize_email


router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(CamelModel):
    username: Username
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: PersonName
    last_name: PersonName
    phone_number: Optional[str] = Field(default=None, max_length=50)


class SignupRequest(RegisterRequest):
    """Bootstrap admin account."""


class ProfilePatch(CamelModel):
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, max_length=50)
    username: Optional[Username] = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=6)
    new_password: str = Field(min_length=6)


@router.post("/login", summary="Login and get JWT token")
async def login_user(request: LoginRequest, session: Session = Depends(get_sqlalchemy_session)):
    """Authenticate by email and password; returns the user and a bearer token."""
    user = user_utils.authenticate(session, request.email, request.password)
    return {
        "message": "Login successful",
        "token": create_token_for_user(user),
        "user": user_to_dict(user),
    }


@router.post("/register", status_code=201, summary="Register a customer account")
async def register_user(request: RegisterRequest, session: Session = Depends(get_sqlalchemy_session)):
    """Create a customer account and log it in."""
    user = user_utils.create_user(
        session,
        username=request.username,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        phone_number=request.phone_number,
        user_type="customer",
    )
    session.commit()
    return {
        "message": "User created successfully",
        "token": create_token_for_user(user),
        "user": user_to_dict(user),
    }


@router.post("/signup", status_code=201, summary="Create an admin (dev/bootstrap)")
async def signup_admin(request: SignupRequest, session: Session = Depends(get_sqlalchemy_session)):
    """
    Create an admin account for dev/bootstrap.

    Allowed when ENVIRONMENT=dev (opt-in; unset means production) or when
    no admin exists yet.
    """
    allow_dev = os.getenv("ENVIRONMENT", "production").lower() == "dev"
    existing_admins = session.execute(
        select(func.count()).select_from(User).where(User.user_type == "admin")
    ).scalar_one()
    if not allow_dev and existing_admins > 0:
        raise HTTPException(status_code=403, detail="Signup disabled")

    user = user_utils.create_user(
        session,
        username=request.username,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        phone_number=request.phone_number,
        user_type="admin",
    )
    session.commit()
    return {
        "message": "Admin created successfully",
        "token": create_token_for_user(user),
        "user": user_to_dict(user),
    }


@router.get("/me", summary="Current user info")
async def get_me(current_user: User = Depends(get_current_user)):
    return {"user": user_to_dict(current_user)}


@router.post("/logout", summary="Logout (client-side token removal)")
async def logout_user(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy
    return {"message": "Logout successful"}


@router.put("/profile", summary="Update own profile")
async def update_profile(
    patch: ProfilePatch,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(get_current_user),
):
    """Apply a partial profile update; email and username must stay unique."""
    user_utils.check_profile_conflicts(session, current_user, patch.email, patch.username)
    apply_patch(
        current_user,
        patch,
        converters={"email": normalize_email, "username": str.strip},
        allow_none=("phone_number",),
    )
    session.commit()
    return {"message": "Profile updated successfully", "user": user_to_dict(current_user)}


@router.post("/change-password", summary="Change own password")
async def change_password(
    request: ChangePasswordRequest,
    session: Session = Depends(get_sqlalchemy_session),
    current_user: User = Depends(get_current_user),
):
    user_utils.change_password(session, current_user, request.current_password, request.new_password)
    session.commit()
    return {"message": "Password updated successfully"}
