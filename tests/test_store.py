"""Tests for EntityStore CRUD operations."""

from datetime import date

import pytest
from sqlalchemy.orm import joinedload, selectinload

from catalog.exceptions import StoreFailure
from catalog.models import Author, Book, BookInstance, Genre


@pytest.fixture
def austen(standalone_store) -> Author:
    return standalone_store.create(
        Author, {"first_name": "Jane", "family_name": "Austen"}
    )


class TestCreate:
    """Tests for EntityStore.create()."""

    def test_create_assigns_id(self, standalone_store):
        genre = standalone_store.create(Genre, {"name": "Fiction"})

        assert len(genre.id) == 32
        assert genre.url == f"/catalog/genre/{genre.id}"

    def test_ids_are_unique(self, standalone_store):
        first = standalone_store.create(Genre, {"name": "Fiction"})
        second = standalone_store.create(Genre, {"name": "Poetry"})

        assert first.id != second.id

    def test_book_links_genres(self, standalone_store, austen):
        poetry = standalone_store.create(Genre, {"name": "Poetry"})
        fiction = standalone_store.create(Genre, {"name": "Fiction"})

        book = standalone_store.create(
            Book,
            {
                "title": "Emma",
                "summary": "Matchmaking.",
                "isbn": "1",
                "author": austen.id,
                "genre": [fiction.id, poetry.id],
            },
        )
        stored = standalone_store.find_by_id(
            Book, book.id, load=[selectinload(Book.genres)]
        )

        assert set(stored.genre_ids) == {fiction.id, poetry.id}

    def test_constraint_violation_raises_store_failure(self, standalone_store):
        with pytest.raises(StoreFailure):
            standalone_store.create(
                BookInstance,
                {"book": "missing", "imprint": "x", "status": "Lost", "due_back": None},
            )


class TestReads:
    """Tests for find_by_id / find / find_one / count."""

    def test_find_by_id_missing_returns_none(self, standalone_store):
        assert standalone_store.find_by_id(Author, "0" * 32) is None

    def test_find_sorted(self, standalone_store):
        standalone_store.create(Author, {"first_name": "Leo", "family_name": "Tolstoy"})
        standalone_store.create(Author, {"first_name": "Jane", "family_name": "Austen"})

        authors = standalone_store.find(Author, order_by=[Author.family_name])

        assert [author.family_name for author in authors] == ["Austen", "Tolstoy"]

    def test_find_with_filter_and_eager_load(self, standalone_store, austen):
        standalone_store.create(
            Book,
            {"title": "Emma", "summary": "s", "isbn": "1", "author": austen.id, "genre": []},
        )

        books = standalone_store.find(
            Book, where=[Book.author_id == austen.id], load=[joinedload(Book.author)]
        )

        # The relationship was loaded before the session closed
        assert books[0].author.name == "Jane Austen"

    def test_find_one(self, standalone_store):
        standalone_store.create(Genre, {"name": "Fiction"})

        assert standalone_store.find_one(Genre, where=[Genre.name == "Fiction"]) is not None
        assert standalone_store.find_one(Genre, where=[Genre.name == "Poetry"]) is None

    def test_count(self, standalone_store, austen):
        standalone_store.create(Genre, {"name": "Fiction"})

        assert standalone_store.count(Author) == 1
        assert standalone_store.count(Genre) == 1
        assert standalone_store.count(Book) == 0


class TestReplace:
    """Tests for EntityStore.replace()."""

    def test_replace_keeps_id(self, standalone_store, austen):
        updated = standalone_store.replace(
            Author,
            austen.id,
            {
                "first_name": "Jane",
                "family_name": "Austen",
                "date_of_birth": date(1775, 12, 16),
                "date_of_death": None,
            },
        )

        assert updated.id == austen.id
        stored = standalone_store.find_by_id(Author, austen.id)
        assert stored.date_of_birth == date(1775, 12, 16)

    def test_replace_clears_omitted_optional_fields(self, standalone_store):
        author = standalone_store.create(
            Author,
            {"first_name": "Jane", "family_name": "Austen", "date_of_birth": date(1775, 12, 16)},
        )

        standalone_store.replace(
            Author, author.id, {"first_name": "Jane", "family_name": "Austen"}
        )

        assert standalone_store.find_by_id(Author, author.id).date_of_birth is None

    def test_replace_missing_returns_none(self, standalone_store):
        assert standalone_store.replace(Genre, "0" * 32, {"name": "Fiction"}) is None


class TestDelete:
    """Tests for EntityStore.delete()."""

    def test_delete(self, standalone_store, austen):
        assert standalone_store.delete(Author, austen.id) is True
        assert standalone_store.find_by_id(Author, austen.id) is None

    def test_delete_missing(self, standalone_store):
        assert standalone_store.delete(Author, "0" * 32) is False
