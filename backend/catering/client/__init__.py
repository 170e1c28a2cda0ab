"""Python client for the catering API."""

from .api_client import ApiError, CateringClient
from .session_cache import SessionCache, TOKEN_KEY, USER_KEY

__all__ = ["ApiError", "CateringClient", "SessionCache", "TOKEN_KEY", "USER_KEY"]
