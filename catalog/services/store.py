"""
Entity Store

A small CRUD facade over SQLAlchemy used by every controller.

Operations:
- find_by_id(model, id)            -> record or None
- find(model, where, order_by)     -> list of records
- find_one(model, where)           -> first match or None
- count(model, where)              -> int
- create(model, values)            -> new record (id assigned here)
- replace(model, id, values)       -> updated record or None if absent
- delete(model, id)                -> True if a record was removed

Each call opens its own session and commits (or rolls back) before
returning, so every operation is atomic on its own and calls can run
concurrently from worker threads. Records come back detached: anything a
template needs from a relationship must be requested with `load` options,
e.g. load=[joinedload(Book.author), selectinload(Book.genres)].

Any SQLAlchemy error is re-raised as StoreFailure.

Usage:
    store = EntityStore.from_config(StoreConfig(url="sqlite:///catalog.db"))
    author = store.create(Author, {"first_name": "Jane", "family_name": "Austen"})
    store.find(Book, where=[Book.author_id == author.id])
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy import Engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from catalog.database import (
    Base,
    StoreConfig,
    build_engine,
    build_session_factory,
    new_id,
)
from catalog.exceptions import StoreFailure

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class EntityStore:
    """
    CRUD operations for catalog entities.

    The store owns the engine it was built from; close() disposes the
    connection pool.
    """

    def __init__(self, engine: Engine, config: StoreConfig) -> None:
        self.engine = engine
        self.config = config
        self._session_factory: sessionmaker = build_session_factory(engine)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "EntityStore":
        return cls(build_engine(config), config)

    @property
    def read_timeout(self) -> float:
        return self.config.read_timeout

    def close(self) -> None:
        self.engine.dispose()

    # -------------------------------------------------------------------------
    # Session Handling
    # -------------------------------------------------------------------------
    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """
        Provide a session for a single store operation.

        Leaving the block closes the session, which rolls back anything
        that wasn't committed.
        """
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error(f"Store {operation} failed: {exc}")
            raise StoreFailure(
                "Store operation failed",
                {"operation": operation, "error": type(exc).__name__},
            ) from exc

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def find_by_id(
        self,
        model: type[ModelT],
        entity_id: str,
        load: Iterable[Any] = (),
    ) -> ModelT | None:
        with self._session(f"find_by_id({model.__name__})") as session:
            return session.get(model, entity_id, options=list(load))

    def find(
        self,
        model: type[ModelT],
        where: Iterable[Any] = (),
        order_by: Iterable[Any] = (),
        load: Iterable[Any] = (),
    ) -> list[ModelT]:
        stmt = (
            select(model)
            .where(*where)
            .order_by(*order_by)
            .options(*load)
        )
        with self._session(f"find({model.__name__})") as session:
            return list(session.scalars(stmt).unique().all())

    def find_one(
        self,
        model: type[ModelT],
        where: Iterable[Any] = (),
        load: Iterable[Any] = (),
    ) -> ModelT | None:
        stmt = select(model).where(*where).options(*load).limit(1)
        with self._session(f"find_one({model.__name__})") as session:
            return session.scalars(stmt).first()

    def count(self, model: type[Base], where: Iterable[Any] = ()) -> int:
        stmt = select(func.count()).select_from(model).where(*where)
        with self._session(f"count({model.__name__})") as session:
            return session.execute(stmt).scalar() or 0

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def create(self, model: type[ModelT], values: Mapping[str, Any]) -> ModelT:
        """Insert a new record built from validated values."""
        instance = model(id=new_id())
        with self._session(f"create({model.__name__})") as session:
            instance.apply(session, dict(values))
            session.add(instance)
            session.commit()
        logger.info(f"Created {model.__name__} {instance.id}")
        return instance

    def replace(
        self,
        model: type[ModelT],
        entity_id: str,
        values: Mapping[str, Any],
    ) -> ModelT | None:
        """
        Replace every mutable field of an existing record.

        The identifier never changes. Returns None when no record has the id.
        """
        with self._session(f"replace({model.__name__})") as session:
            instance = session.get(model, entity_id)
            if instance is None:
                return None
            instance.apply(session, dict(values))
            session.commit()
        logger.info(f"Replaced {model.__name__} {entity_id}")
        return instance

    def delete(self, model: type[Base], entity_id: str) -> bool:
        with self._session(f"delete({model.__name__})") as session:
            instance = session.get(model, entity_id)
            if instance is None:
                return False
            session.delete(instance)
            session.commit()
        logger.info(f"Deleted {model.__name__} {entity_id}")
        return True
