"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the catalog.

Explicit Store Configuration
============================
Nothing here is configured at import time. The application factory builds a
StoreConfig from Settings and passes it to build_engine(), so tests and
scripts can create as many independent engines as they need:

    config = StoreConfig.from_settings(get_settings())
    engine = build_engine(config)
    session_factory = build_session_factory(engine)

Session Management Pattern
==========================
We use a "session per operation" pattern instead of "session per request":
every EntityStore call opens its own short-lived session. Reads fanned out
by the aggregation step run concurrently in worker threads, and a SQLAlchemy
Session must never be shared between threads.
"""

import uuid
from dataclasses import dataclass

from sqlalchemy import Engine, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from catalog.config import Settings


# =============================================================================
# Store Configuration
# =============================================================================
@dataclass(frozen=True)
class StoreConfig:
    """
    Connection settings for the entity store.

    Attributes:
        url: SQLAlchemy connection URL
        pool_size: Permanent connections kept by the pool
        max_overflow: Extra connections allowed under load
        echo: Log every SQL statement
        read_timeout: Seconds an aggregated read may take
    """

    url: str
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False
    read_timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreConfig":
        return cls(
            url=settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            echo=settings.debug,
            read_timeout=settings.aggregation_timeout,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


# =============================================================================
# Database Engine
# =============================================================================
def build_engine(config: StoreConfig) -> Engine:
    """
    Create the SQLAlchemy engine described by a StoreConfig.

    SQLite connections are handed to worker threads by the aggregation step,
    so check_same_thread must be disabled. The pool sizing arguments only
    apply to server databases.
    """
    if config.is_sqlite:
        return create_engine(
            config.url,
            connect_args={"check_same_thread": False},
            echo=config.echo,
        )

    return create_engine(
        config.url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_pre_ping=True,  # Verify connections are alive before using
        echo=config.echo,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """
    Create a session factory bound to the engine.

    expire_on_commit=False keeps loaded attributes readable after the
    session closes; records leave the store detached and are rendered later.
    """
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


# =============================================================================
# Base Model Class
# =============================================================================
def new_id() -> str:
    """Generate an opaque identifier for a new record."""
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """
    Base class for all catalog models.

    Every entity gets an opaque string primary key generated on the Python
    side, so the canonical URL is known as soon as the record is created.
    """

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(engine: Engine) -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead!
    """
    # Models must be imported so they are registered on Base.metadata
    import catalog.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only use in development and tests.
    """
    import catalog.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
