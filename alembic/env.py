"""
Alembic environment for the availability matching tables

The database URL comes from application settings (DATABASE_URL), never from
an ini file. Running without one is only useful for offline SQL generation.
"""

from logging.config import fileConfig
import os
import sys

from sqlalchemy import engine_from_config, pool
from alembic import context

sys.path.insert(0, os.path.realpath(os.path.join(os.path.dirname(__file__), '..')))

from app.config import settings
from app.database import Base, sqlalchemy_url
# Registers every table on Base.metadata
from app.models import User, Intervention, InterventionAssignment, UserAvailability, AvailabilityMatch  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

if settings.database_url:
    config.set_main_option("sqlalchemy.url", sqlalchemy_url(settings.database_url))


def _configure(**kwargs) -> None:
    # Time columns and JSON/JSONB participants must be diffed by type
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit SQL for the configured URL without connecting."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
