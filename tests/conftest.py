"""
pytest Fixtures for Catalog Tests

Shared fixtures used across all test files.

DATABASE FIXTURES
=================
Every test gets its own SQLite database FILE under tmp_path. An in-memory
database with StaticPool would share one connection between the worker
threads the aggregation step reads from, so a file is used instead.

The app is built with create_app(settings); entering the TestClient context
runs the lifespan, which creates the tables.

SAMPLE DATA
===========
Sample records are stored directly with EntityStore.create() (no form
validation) and get real generated ids. Their text has nothing that escaping
would change.
"""

from collections.abc import Generator
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog.config import Settings
from catalog.database import StoreConfig, create_tables
from catalog.main import create_app
from catalog.models import Author, Book, BookInstance, BookStatus, Genre
from catalog.services.store import EntityStore


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================
@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fresh SQLite file."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'catalog-test.db'}",
        create_tables_on_startup=True,
        aggregation_timeout=5.0,
        debug=False,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Test client bound to the per-test app.

    Redirects are not followed so tests can assert on 303 + Location.
    """
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def store(app: FastAPI, client: TestClient) -> EntityStore:
    """The store the app under test uses (tables already created)."""
    return app.state.store


@pytest.fixture
def standalone_store(settings: Settings) -> Generator[EntityStore, None, None]:
    """A store without an app, for store-level tests."""
    store = EntityStore.from_config(StoreConfig.from_settings(settings))
    create_tables(store.engine)
    yield store
    store.close()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_author(store: EntityStore) -> Author:
    """Create a sample author for testing."""
    return store.create(
        Author,
        {
            "first_name": "Jane",
            "family_name": "Austen",
            "date_of_birth": date(1775, 12, 16),
            "date_of_death": date(1817, 7, 18),
        },
    )


@pytest.fixture
def sample_genre(store: EntityStore) -> Genre:
    """Create a sample genre for testing."""
    return store.create(Genre, {"name": "Fiction"})


@pytest.fixture
def sample_book(store: EntityStore, sample_author: Author, sample_genre: Genre) -> Book:
    """
    Create a sample book by sample_author in sample_genre.

    This fixture depends on sample_author and sample_genre fixtures.
    """
    return store.create(
        Book,
        {
            "title": "Emma",
            "summary": "A young woman meddles in the romantic lives of her friends.",
            "isbn": "9780141439587",
            "author": sample_author.id,
            "genre": [sample_genre.id],
        },
    )


@pytest.fixture
def sample_book_instance(store: EntityStore, sample_book: Book) -> BookInstance:
    """Create an available copy of sample_book."""
    return store.create(
        BookInstance,
        {
            "book": sample_book.id,
            "imprint": "Penguin Classics, 2003",
            "status": BookStatus.AVAILABLE.value,
            "due_back": None,
        },
    )
