"""
Book Model

The central model of the catalog.

This file also contains the association table for the Book <-> Genre
many-to-many relationship.

WHY an Association Table?
=========================
In relational databases, many-to-many relationships require a "junction"
table holding a foreign key to each side. SQLAlchemy can create these as
Table objects (not full models) when the relationship carries no extra data.

Referential integrity on delete is a policy of the form controllers (an
author or genre with books cannot be deleted), not of the schema, so the
foreign keys declare no ON DELETE behaviour.
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy import Column, ForeignKey, String, Table, Text, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from catalog.database import Base
from catalog.models.genre import Genre

if TYPE_CHECKING:
    from catalog.models.author import Author
    from catalog.models.bookinstance import BookInstance

TITLE_MAX_LENGTH = 500
ISBN_MAX_LENGTH = 20

# =============================================================================
# Association Tables
# =============================================================================
book_genres = Table(
    "book_genres",
    Base.metadata,
    Column(
        "book_id",
        String(32),
        ForeignKey("books.id"),
        primary_key=True,
    ),
    Column(
        "genre_id",
        String(32),
        ForeignKey("genres.id"),
        primary_key=True,
    ),
    comment="Association table linking books to their genres",
)


class Book(Base):
    """
    Book model representing titles in the library.

    Table: books

    Fields:
    - title: Book title (required)
    - summary: Short description (required)
    - isbn: International Standard Book Number (required)

    Relationships:
    - author: Many-to-One (exactly one author)
    - genres: Many-to-Many (zero or more genres, no duplicates)
    - instances: One-to-Many (physical copies)
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        index=True,
        nullable=False,
        comment="Book title"
    )

    summary: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book summary"
    )

    isbn: Mapped[str] = mapped_column(
        String(ISBN_MAX_LENGTH),
        nullable=False,
        comment="International Standard Book Number"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    author_id: Mapped[str] = mapped_column(
        ForeignKey("authors.id"),
        index=True,
        nullable=False,
    )

    author: Mapped["Author"] = relationship(
        "Author",
        back_populates="books",
    )

    genres: Mapped[list[Genre]] = relationship(
        Genre,
        secondary=book_genres,
        back_populates="books",
    )

    instances: Mapped[list["BookInstance"]] = relationship(
        "BookInstance",
        back_populates="book",
    )

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"

    @property
    def genre_ids(self) -> list[str]:
        return [genre.id for genre in self.genres]

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------
    def apply(self, session: Session, values: dict[str, Any]) -> None:
        """
        Copy validated form values onto the record.

        Genre ids are resolved to Genre rows inside the caller's session and
        kept in submission order.
        """
        self.title = values["title"]
        self.summary = values["summary"]
        self.isbn = values["isbn"]
        self.author_id = values["author"]

        genre_ids = values.get("genre") or []
        found = {}
        if genre_ids:
            found = {
                genre.id: genre
                for genre in session.scalars(
                    select(Genre).where(Genre.id.in_(genre_ids))
                )
            }
        self.genres = [found[genre_id] for genre_id in genre_ids if genre_id in found]

    def form_values(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "summary": self.summary,
            "isbn": self.isbn,
            "author": self.author_id,
            "genre": self.genre_ids,
        }

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
