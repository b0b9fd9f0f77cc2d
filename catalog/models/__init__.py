"""
SQLAlchemy Models Package

Model Relationships:
- Author <- Book: Many-to-One (a book has exactly one author)
- Genre <-> Book: Many-to-Many (a book can belong to multiple genres)
- Book <- BookInstance: Many-to-One (a copy belongs to exactly one book)

Import all models here to:
1. Make them available as: from catalog.models import Book, Author, Genre
2. Ensure Alembic discovers them for migrations
"""

# The order matters for SQLAlchemy to resolve relationships
from catalog.models.author import Author
from catalog.models.genre import Genre
from catalog.models.book import Book, book_genres
from catalog.models.bookinstance import BookInstance, BookStatus

__all__ = [
    "Author",
    "Genre",
    "Book",
    "book_genres",
    "BookInstance",
    "BookStatus",
]
