"""
Entity Controllers

One FormController subclass per entity, each declaring its validation rule
table and the lookups its pages need:
- authors.py: AuthorController (delete blocked by the author's books)
- books.py: BookController (delete blocked by copies of the book)
- genres.py: GenreController (delete blocked by books in the genre)
- book_instances.py: BookInstanceController
- dashboard.py: home page counts
"""

from catalog.controllers.authors import AuthorController
from catalog.controllers.book_instances import BookInstanceController
from catalog.controllers.books import BookController
from catalog.controllers.genres import GenreController

__all__ = [
    "AuthorController",
    "BookController",
    "BookInstanceController",
    "GenreController",
]
