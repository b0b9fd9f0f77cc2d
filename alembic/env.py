"""
Alembic Environment Configuration

Runs schema migrations for the catalog tables.

- The database URL comes from catalog.config.Settings, not alembic.ini
- catalog.models is imported so every table is registered on Base.metadata
  before autogenerate compares it with the database

COMMANDS:
- alembic upgrade head                           # Apply all migrations
- alembic revision --autogenerate -m "message"  # Create migration
- alembic downgrade -1                           # Rollback one migration

The application also creates missing tables on startup
(CREATE_TABLES_ON_STARTUP); set it to false once migrations manage the schema.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from catalog.config import get_settings
from catalog.database import Base
from catalog import models  # noqa: F401 - registers tables for autogenerate

settings = get_settings()

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite can't ALTER most constraints in place; batch mode rebuilds the table
render_as_batch = settings.is_sqlite


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode (emit SQL instead of executing it).

    Usage:
        alembic upgrade head --sql > migration.sql
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=render_as_batch,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
