"""Storage layer for the catering backend."""

from .sqlalchemy_adapter import SQLAlchemyStorage, storage_from_env

__all__ = ["SQLAlchemyStorage", "storage_from_env"]
