"""
Genre Model

Represents a book genre/category in the catalog.

A book can belong to multiple genres (e.g., "Science Fiction" and "Dystopian").
Genre names are not unique at the database level: the create form looks the
name up before inserting and redirects to the existing genre instead.
"""

from typing import TYPE_CHECKING, Any, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from catalog.database import Base

if TYPE_CHECKING:
    from catalog.models.book import Book

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100


class Genre(Base):
    """
    Genre model representing book categories.

    Table: genres

    Relationships:
    - books: Many-to-Many relationship through book_genres table
    """

    __tablename__ = "genres"

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        index=True,
        nullable=False,
        comment="Genre name (e.g., 'Science Fiction', 'Mystery')"
    )

    # Many-to-many relationship with Book through book_genres table
    books: Mapped[List["Book"]] = relationship(
        "Book",
        secondary="book_genres",
        back_populates="genres",
    )

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    def apply(self, session: Session, values: dict[str, Any]) -> None:
        self.name = values["name"]

    def form_values(self) -> dict[str, Any]:
        return {"name": self.name}

    def __repr__(self) -> str:
        return f"Genre(id={self.id}, name='{self.name}')"
