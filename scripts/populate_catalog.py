#!/usr/bin/env python3
"""
Catalog Seed Script

Populates the catalog with sample authors, genres, books and copies for
development.

USAGE:
    # From the project root, with the package installed (pip install -e .)
    python scripts/populate_catalog.py

    # Drop and recreate every table first
    python scripts/populate_catalog.py --clear

    # Seed another database
    python scripts/populate_catalog.py --database-url sqlite:///./other.db

Every record is first run through its form's rule table (trimmed and
HTML-escaped exactly as a form submission would be), then stored with
EntityStore.create(), so it gets a generated id like one created in the
browser. A seed value the form would reject stops the script with ValueError.
"""

import argparse
from datetime import date
from typing import Any

from catalog.config import get_settings
from catalog.controllers.authors import AUTHOR_RULES
from catalog.controllers.book_instances import BOOK_INSTANCE_RULES
from catalog.controllers.books import BOOK_RULES
from catalog.controllers.genres import GENRE_RULES
from catalog.database import StoreConfig, create_tables, drop_tables
from catalog.models import Author, Book, BookInstance, BookStatus, Genre
from catalog.services.store import EntityStore
from catalog.services.validation import Rule, escape, validate

AUTHORS = [
    ("Patrick", "Rothfuss", date(1973, 6, 6), None),
    ("Ben", "Bova", date(1932, 11, 8), None),
    ("Isaac", "Asimov", date(1920, 1, 2), date(1992, 4, 6)),
    ("Bob", "Billings", None, None),
    ("Jim", "Jones", date(1971, 12, 16), None),
]

GENRES = ["Fantasy", "Science Fiction", "French Poetry"]

# (title, summary, isbn, author family name, genre names)
BOOKS = [
    (
        "The Name of the Wind (The Kingkiller Chronicle, #1)",
        "I have stolen princesses back from sleeping barrow kings. I burned "
        "down the town of Trebon. I have spent the night with Felurian and "
        "left with both my sanity and my life.",
        "9781473211896",
        "Rothfuss",
        ["Fantasy"],
    ),
    (
        "The Wise Man's Fear (The Kingkiller Chronicle, #2)",
        "Picking up the tale of Kvothe Kingkiller once again, we follow him "
        "into exile, into political intrigue, courtship, adventure, love and "
        "magic.",
        "9788401352836",
        "Rothfuss",
        ["Fantasy"],
    ),
    (
        "The Slow Regard of Silent Things (Kingkiller Chronicle)",
        "Deep below the University, there is a dark place. Few people know "
        "of it: a broken web of ancient passageways and abandoned rooms.",
        "9780756411336",
        "Rothfuss",
        ["Fantasy"],
    ),
    (
        "Apes and Angels",
        "Humankind headed out to the stars not for conquest, nor exploration, "
        "nor even for curiosity. Humans went to the stars in a desperate "
        "crusade to save intelligent life wherever they found it.",
        "9780765379528",
        "Bova",
        ["Science Fiction"],
    ),
    (
        "Death Wave",
        "In Ben Bova's previous novel New Earth, Jordan Kell led the first "
        "human mission beyond the solar system.",
        "9780765379504",
        "Bova",
        ["Science Fiction"],
    ),
    ("Test Book 1", "Summary of test book 1", "ISBN111111", "Billings", ["Fantasy", "Science Fiction"]),
    ("Test Book 2", "Summary of test book 2", "ISBN222222", "Billings", []),
]

# (book title prefix, imprint, status, due back)
COPIES = [
    ("The Name of the Wind", "London Gollancz, 2014.", BookStatus.AVAILABLE, None),
    ("The Wise Man's Fear", "Gollancz, 2011.", BookStatus.LOANED, date(2026, 11, 1)),
    ("The Slow Regard", "Gollancz, 2015.", BookStatus.AVAILABLE, None),
    ("Apes and Angels", "New York Tom Doherty Associates, 2016.", BookStatus.AVAILABLE, None),
    ("Apes and Angels", "New York Tom Doherty Associates, 2016.", BookStatus.MAINTENANCE, None),
    ("Death Wave", "New York, NY Tom Doherty Associates, LLC, 2015.", BookStatus.LOANED, None),
    ("Test Book 1", "Imprint XXX2", BookStatus.AVAILABLE, None),
    ("Test Book 2", "Imprint XXX3", BookStatus.RESERVED, None),
]


def sanitize(values: dict[str, Any], rules: tuple[Rule, ...]) -> dict[str, Any]:
    """Validate one seed record with a form's rule table and return the stored values."""
    result = validate(values, rules)
    if not result.ok:
        problems = "; ".join(f"{error.field}: {error.message}" for error in result.errors)
        raise ValueError(f"Invalid seed record {values!r}: {problems}")
    return result.values


def create_authors(store: EntityStore) -> dict[str, Author]:
    """Create sample authors, keyed by family name."""
    print("Creating authors...")
    authors = {}
    for first_name, family_name, born, died in AUTHORS:
        values = sanitize(
            {
                "first_name": first_name,
                "family_name": family_name,
                "date_of_birth": born,
                "date_of_death": died,
            },
            AUTHOR_RULES,
        )
        authors[family_name] = store.create(Author, values)
    print(f"Created {len(authors)} authors.")
    return authors


def create_genres(store: EntityStore) -> dict[str, Genre]:
    """Create sample genres, keyed by name."""
    print("Creating genres...")
    genres = {
        name: store.create(Genre, sanitize({"name": name}, GENRE_RULES)) for name in GENRES
    }
    print(f"Created {len(genres)} genres.")
    return genres


def create_books(
    store: EntityStore,
    authors: dict[str, Author],
    genres: dict[str, Genre],
) -> list[Book]:
    """Create sample books with author and genre references."""
    print("Creating books...")
    books = []
    for title, summary, isbn, family_name, genre_names in BOOKS:
        values = sanitize(
            {
                "title": title,
                "summary": summary,
                "isbn": isbn,
                "author": authors[family_name].id,
                "genre": [genres[name].id for name in genre_names],
            },
            BOOK_RULES,
        )
        books.append(store.create(Book, values))
    print(f"Created {len(books)} books.")
    return books


def create_copies(store: EntityStore, books: list[Book]) -> list[BookInstance]:
    """Create copies of the sample books."""
    print("Creating book copies...")
    copies = []
    for prefix, imprint, status, due_back in COPIES:
        # Stored titles are escaped, so the prefix has to be too
        book = next(book for book in books if book.title.startswith(escape(prefix)))
        values = sanitize(
            {
                "book": book.id,
                "imprint": imprint,
                "status": status.value,
                "due_back": due_back,
            },
            BOOK_INSTANCE_RULES,
        )
        copies.append(store.create(BookInstance, values))
    print(f"Created {len(copies)} copies.")
    return copies


def populate(database_url: str, clear_existing: bool = False) -> None:
    """
    Seed the catalog database.

    Args:
        database_url: SQLAlchemy URL of the database to fill
        clear_existing: Drop and recreate all tables before seeding
    """
    print("=" * 60)
    print("Starting catalog seed...")
    print("=" * 60)

    settings = get_settings()
    store = EntityStore.from_config(
        StoreConfig(
            url=database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
    )
    try:
        if clear_existing:
            print("Clearing existing data...")
            drop_tables(store.engine)
        create_tables(store.engine)

        authors = create_authors(store)
        genres = create_genres(store)
        books = create_books(store, authors, genres)
        copies = create_copies(store, books)
    finally:
        store.close()

    print("=" * 60)
    print("Catalog seeding completed successfully!")
    print("=" * 60)
    print("\nSummary:")
    print(f"  - Authors: {len(authors)}")
    print(f"  - Genres: {len(genres)}")
    print(f"  - Books: {len(books)}")
    print(f"  - Copies: {len(copies)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Populate the library catalog with sample data.")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: DATABASE_URL from settings)",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Drop and recreate all tables before seeding",
    )
    args = parser.parse_args()
    populate(args.database_url or get_settings().database_url, clear_existing=args.clear)


if __name__ == "__main__":
    main()
