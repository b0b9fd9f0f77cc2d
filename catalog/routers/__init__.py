"""
HTML Routers Package

- home.py: site root redirect and the /catalog dashboard
- entities.py: router factory shared by all four entities

Each router is imported and registered in main.py.
"""

from catalog.dependencies import (
    get_author_controller,
    get_book_controller,
    get_book_instance_controller,
    get_genre_controller,
)
from catalog.routers.entities import build_entity_router
from catalog.routers.home import router as home_router

authors_router = build_entity_router("author", "authors", get_author_controller, "Authors")
books_router = build_entity_router("book", "books", get_book_controller, "Books")
genres_router = build_entity_router("genre", "genres", get_genre_controller, "Genres")
book_instances_router = build_entity_router(
    "bookinstance", "bookinstances", get_book_instance_controller, "Book Instances"
)

__all__ = [
    "home_router",
    "authors_router",
    "books_router",
    "genres_router",
    "book_instances_router",
]
