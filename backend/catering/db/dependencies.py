"""FastAPI dependencies for database session injection and auth."""

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from catering.db.models import User
from catering.storage import SQLAlchemyStorage


def get_sqlalchemy_session(request: Request):
    """
    FastAPI dependency yielding a SQLAlchemy session bound to app.state.storage.

    The session is rolled back if the handler raises and always closed.
    """
    storage = request.app.state.storage
    if not isinstance(storage, SQLAlchemyStorage):
        raise HTTPException(status_code=501, detail="SQLAlchemy storage required")

    session = storage._get_session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------- Auth helpers ----------

SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def hash_password(password: str) -> str:
    """Hash a plain text password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_token_for_user(user: User) -> str:
    """Issue the session credential for a user (sub = user id, role = user_type)."""
    return create_access_token(data={"sub": str(user.id), "role": user.user_type})


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_sqlalchemy_session),
) -> User:
    """Get the current user from JWT token."""
    credentials_exception = HTTPException(
        status_code=401,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"}
    )

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise credentials_exception

    user = session.get(User, user_id)
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def is_admin(user: User) -> bool:
    return user.user_type == "admin"


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require an admin user."""
    if not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return current_user


def require_customer_or_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require a customer or admin account."""
    if current_user.user_type not in ("customer", "admin"):
        raise HTTPException(status_code=403, detail="Access denied")
    return current_user
