"""
Tests for the home page, health check, logging setup and error pages.
"""

import logging

import pytest
from fastapi import status

from catalog.config import Settings
from catalog.controllers.dashboard import index
from catalog.exceptions import NotFound, StoreFailure
from catalog.main import create_app
from catalog.models import BookInstance, BookStatus


class TestHome:
    """Tests for / and /catalog."""

    def test_root_redirects_to_catalog(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/catalog"

    def test_index_empty_catalog(self, client):
        response = client.get("/catalog")

        assert response.status_code == status.HTTP_200_OK
        assert "Local Library Home" in response.text
        assert "<strong>Books:</strong> 0" in response.text

    def test_index_counts(self, client, store, sample_book, sample_book_instance):
        store.create(
            BookInstance,
            {"book": sample_book.id, "imprint": "Penguin, 2010", "status": BookStatus.LOANED.value},
        )

        response = client.get("/catalog/")

        assert response.status_code == status.HTTP_200_OK
        assert "<strong>Books:</strong> 1" in response.text
        assert "<strong>Copies:</strong> 2" in response.text
        assert "<strong>Copies available:</strong> 1" in response.text
        assert "<strong>Authors:</strong> 1" in response.text
        assert "<strong>Genres:</strong> 1" in response.text

    def test_index_renders_store_errors(self, client, store, monkeypatch):
        def broken_count(*args, **kwargs):
            raise StoreFailure("Store operation failed")

        monkeypatch.setattr(store, "count", broken_count)

        response = client.get("/catalog")

        assert response.status_code == status.HTTP_200_OK
        assert "Error: Store operation failed" in response.text


class TestIndexController:
    """The dashboard controller without HTTP."""

    @pytest.mark.asyncio
    async def test_index_data(self, standalone_store):
        outcome = await index(standalone_store)

        assert outcome.template == "index.html"
        assert outcome.context["error"] is None
        assert outcome.context["data"] == {
            "book_count": 0,
            "book_instance_count": 0,
            "book_instance_available_count": 0,
            "author_count": 0,
            "genre_count": 0,
        }


class TestHealth:
    """Tests for /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"
        assert response.json()["app"] == "Local Library"


class TestLogging:
    """create_app() applies the log level of the settings it is given."""

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    @pytest.mark.parametrize("level", ["DEBUG", "WARNING", "ERROR"])
    def test_log_level_from_settings(self, tmp_path, level):
        app = create_app(
            Settings(database_url=f"sqlite:///{tmp_path / 'log.db'}", log_level=level)
        )
        app.state.store.close()

        assert logging.getLogger().level == getattr(logging, level)

    def test_log_level_is_case_insensitive(self, tmp_path):
        app = create_app(
            Settings(database_url=f"sqlite:///{tmp_path / 'log.db'}", log_level="debug")
        )
        app.state.store.close()

        assert logging.getLogger().level == logging.DEBUG


class TestErrorPages:
    """Tests for the exception handlers."""

    def test_unknown_route_renders_error_page(self, client):
        response = client.get("/catalog/nowhere/at/all")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "Not Found" in response.text

    def test_store_failure_renders_500(self, client, store, monkeypatch):
        def broken_find(*args, **kwargs):
            raise StoreFailure("Store operation failed", {"operation": "find(Author)"})

        monkeypatch.setattr(store, "find", broken_find)

        response = client.get("/catalog/authors")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "A database error occurred" in response.text
        # Details are hidden outside debug mode
        assert "find(Author)" not in response.text


class TestExceptions:
    """Tests for the exception classes."""

    def test_not_found_message(self):
        error = NotFound("Author", "abc")

        assert error.message == "Author Not Found"
        assert error.status_code == 404
        assert str(error) == "Author Not Found (id=abc)"

    def test_store_failure_is_500(self):
        assert StoreFailure("Store operation failed").status_code == 500
