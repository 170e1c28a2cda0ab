"""User directory helpers: registration, credential checks, profile updates."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catering.db.dependencies import hash_password, verify_password
from catering.db.models import User, USER_TYPES
from catering.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from catering.utils.time_utils import isoformat_or_none

logger = logging.getLogger(__name__)


def user_to_dict(user: User) -> Dict[str, Any]:
    """Public view of a user (never includes the password hash)."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "phoneNumber": user.phone_number,
        "userType": user.user_type,
        "isActive": user.is_active,
        "createdAt": isoformat_or_none(user.created_at),
        "updatedAt": isoformat_or_none(user.updated_at),
    }


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_by_email(session: Session, email: str) -> Optional[User]:
    return session.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()


def _ensure_unique(session: Session, email: Optional[str], username: Optional[str], exclude_id: Optional[int] = None):
    if email:
        stmt = select(User.id).where(User.email == normalize_email(email))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if session.execute(stmt).first():
            raise ConflictError("Email already in use" if exclude_id else "User already exists")
    if username:
        stmt = select(User.id).where(User.username == username)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if session.execute(stmt).first():
            raise ConflictError("Username already in use" if exclude_id else "User already exists")


def create_user(
    session: Session,
    username: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    phone_number: Optional[str] = None,
    user_type: str = "customer",
) -> User:
    """
    Create an account.

    Raises:
        ValidationError: unknown user type
        ConflictError: email or username already registered
    """
    if user_type not in USER_TYPES:
        raise ValidationError(f"Invalid user type: {user_type}")
    _ensure_unique(session, email, username)

    user = User(
        username=username,
        email=normalize_email(email),
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number or None,
        user_type=user_type,
        is_active=True,
    )
    session.add(user)
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise ConflictError("User already exists")
    logger.info("[users] Registered %s user %s", user_type, user.id)
    return user


def authenticate(session: Session, email: str, password: str) -> User:
    """Return the active user matching the credentials or raise AuthenticationError."""
    user = find_by_email(session, email)
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    return user


def check_profile_conflicts(session: Session, user: User, email: Optional[str], username: Optional[str]) -> None:
    _ensure_unique(session, email, username, exclude_id=user.id)


def change_password(session: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    session.flush()


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def search_users(session: Session, page: int = 1, limit: int = 10, search: str = "") -> Tuple[List[User], int]:
    """Paginated user listing with a free-text filter over names, email and username."""
    stmt = select(User)
    if search:
        term = f"%{search}%"
        stmt = stmt.where(or_(
            User.first_name.ilike(term),
            User.last_name.ilike(term),
            User.email.ilike(term),
            User.username.ilike(term),
        ))
    total = session.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    users = session.execute(
        stmt.order_by(User.created_at.desc(), User.id.desc()).offset((page - 1) * limit).limit(limit)
    ).scalars().all()
    return list(users), total


def set_active(session: Session, user_id: int, is_active: bool) -> User:
    """Soft-enable/disable an account (users are never hard-deleted)."""
    user = get_user(session, user_id)
    user.is_active = is_active
    session.flush()
    return user
