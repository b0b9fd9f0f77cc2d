"""
Home page counts.

Unlike the entity pages, a store failure here doesn't abort the request:
the page renders with the error in place of the numbers.
"""

import logging

from catalog.exceptions import StoreFailure
from catalog.models import Author, Book, BookInstance, BookStatus, Genre
from catalog.services.aggregation import gather_named
from catalog.services.forms import Render
from catalog.services.store import EntityStore

logger = logging.getLogger(__name__)


async def index(store: EntityStore, title: str = "Local Library Home") -> Render:
    try:
        data = await gather_named(
            {
                "book_count": lambda: store.count(Book),
                "book_instance_count": lambda: store.count(BookInstance),
                "book_instance_available_count": lambda: store.count(
                    BookInstance, where=[BookInstance.status == BookStatus.AVAILABLE.value]
                ),
                "author_count": lambda: store.count(Author),
                "genre_count": lambda: store.count(Genre),
            },
            timeout=store.read_timeout,
        )
        error = None
    except StoreFailure as exc:
        logger.error(f"Could not load catalog counts: {exc}")
        data, error = {}, exc.message

    return Render("index.html", {"title": title, "data": data, "error": error})
