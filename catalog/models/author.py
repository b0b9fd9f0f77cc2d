"""
Author Model

Represents an author in the catalog.

Computed Fields
===============
Display values (full name, formatted dates, lifespan, canonical URL) are
plain properties computed from the stored columns on every read. They are
never persisted, so they can't drift from the data they're derived from.
"""

from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from catalog.database import Base
from catalog.utils.dates import format_form, format_long

# TYPE_CHECKING is True only during type checking (mypy, IDE)
if TYPE_CHECKING:
    from catalog.models.book import Book


class Author(Base):
    """
    Author model representing writers in the catalog.

    Table: authors

    Relationships:
    - books: One-to-Many (Book.author_id points here)

    Example:
        author = Author(first_name="Jane", family_name="Austen")
        author.name                     # "Jane Austen"
        author.date_of_birth_formatted  # "unknown"
    """

    __tablename__ = "authors"

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Author's first name"
    )

    # Lists are sorted by family name, so it's indexed
    family_name: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Author's family name"
    )

    date_of_birth: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    date_of_death: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # Records are rendered after their session closes, so queries that need
    # this collection must load it eagerly (see EntityStore load options).
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
    )

    # -------------------------------------------------------------------------
    # Computed Fields
    # -------------------------------------------------------------------------
    @property
    def name(self) -> str:
        """Full name, empty unless both parts are set."""
        if self.first_name and self.family_name:
            return f"{self.first_name} {self.family_name}"
        return ""

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    @property
    def date_of_birth_formatted(self) -> str:
        return format_long(self.date_of_birth)

    @property
    def date_of_death_formatted(self) -> str:
        return format_long(self.date_of_death)

    @property
    def lifespan(self) -> str:
        return f"{self.date_of_birth_formatted} - {self.date_of_death_formatted}"

    @property
    def date_of_birth_ffmt(self) -> str:
        return format_form(self.date_of_birth)

    @property
    def date_of_death_ffmt(self) -> str:
        return format_form(self.date_of_death)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------
    def apply(self, session: Session, values: dict[str, Any]) -> None:
        """Copy validated form values onto the record (full replacement)."""
        self.first_name = values["first_name"]
        self.family_name = values["family_name"]
        self.date_of_birth = values.get("date_of_birth")
        self.date_of_death = values.get("date_of_death")

    def form_values(self) -> dict[str, Any]:
        return {
            "first_name": self.first_name,
            "family_name": self.family_name,
            "date_of_birth": self.date_of_birth_ffmt,
            "date_of_death": self.date_of_death_ffmt,
        }

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}')"
