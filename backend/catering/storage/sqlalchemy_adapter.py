"""
SQLAlchemy storage for the catering domain models.

Owns the engine and session factory; the FastAPI app keeps one instance on
app.state.storage and routers open short-lived sessions from it.
"""

import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from catering.db.models import Base
from catering.db import init_db

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///catering.db"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SQLAlchemyStorage:
    """
    SQLAlchemy-backed storage for users, menu, bookings, receipts, messages and offers.
    """

    def __init__(self, database_url: str = DEFAULT_DATABASE_URL, use_alembic: bool = None):
        """
        Initialize SQLAlchemy storage with canonical models.

        Args:
            database_url: SQLAlchemy database URL
            use_alembic: Run Alembic migrations instead of create_all.
                         Defaults to the USE_ALEMBIC environment variable.
        """
        self.database_url = database_url
        is_sqlite = database_url.startswith("sqlite")

        self.engine = create_engine(
            self.database_url,
            connect_args={"check_same_thread": False} if is_sqlite else {},
            echo=False,
            future=True,
            pool_pre_ping=True,
        )
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        if use_alembic is None:
            use_alembic = os.getenv("USE_ALEMBIC", "false").lower() == "true"
        init_db(self.engine, use_alembic=use_alembic, base=Base)
        logger.info("[SQLAlchemyStorage] Database initialized at %s", self.database_url)

    def _get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionLocal()

    def close(self) -> None:
        """Dispose of the connection pool."""
        self.engine.dispose()

    def clear(self) -> None:
        """Delete all rows from every table (children first)."""
        with self.engine.begin() as connection:
            for table in reversed(Base.metadata.sorted_tables):
                connection.execute(table.delete())


def storage_from_env() -> SQLAlchemyStorage:
    """Build storage from APP_DATABASE_URL."""
    return SQLAlchemyStorage(os.getenv("APP_DATABASE_URL", DEFAULT_DATABASE_URL))
