"""Alembic environment configuration for the catering database migrations.

This script runs whenever Alembic command-line tools are run.
It targets the canonical models in catering.db.models.Base.metadata.
"""

from logging.config import fileConfig
import os
import sys
from sqlalchemy import engine_from_config, pool

# Add the backend directory to path so we can import catering modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from alembic import context
from catering.db.models import Base

# Load Alembic config
config = context.config

# Alembic logging configuration (skipped when invoked from init_db, which
# already configured logging for the app)
if config.config_file_name is not None and "connection" not in config.attributes:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# Set target metadata for autogenerate
target_metadata = Base.metadata


def get_database_url() -> str:
    """Get database URL from environment or use default."""
    return os.getenv("APP_DATABASE_URL") or "sqlite:///./catering.db"


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    In offline mode, the engine is created from a URL string without
    actually making a database connection. This is useful for generating
    SQL without a running database.
    """
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode.

    Uses the connection handed over by init_db when present, otherwise
    opens one from APP_DATABASE_URL.
    """
    connection = config.attributes.get("connection")
    if connection is not None:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()
        return

    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
