"""
BookInstance Model

A physical copy of a book that can be borrowed.

Status is stored as a plain string but constrained to the BookStatus values:
the form rules reject anything else and a CHECK constraint backs that up in
the database.
"""

from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import CheckConstraint, Date, ForeignKey, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from catalog.database import Base
from catalog.utils.dates import format_form, format_long

if TYPE_CHECKING:
    from catalog.models.book import Book


class BookStatus(StrEnum):
    """Lending status of a copy."""

    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


DEFAULT_STATUS = BookStatus.MAINTENANCE
IMPRINT_MAX_LENGTH = 255


class BookInstance(Base):
    """
    BookInstance model representing one copy of a Book.

    Table: book_instances

    Fields:
    - imprint: Publisher and edition details (required)
    - status: One of BookStatus (default Maintenance)
    - due_back: When the copy is expected back (default: creation date)
    """

    __tablename__ = "book_instances"
    __table_args__ = (
        CheckConstraint(
            "status IN ('Available', 'Maintenance', 'Loaned', 'Reserved')",
            name="ck_book_instances_status",
        ),
    )

    book_id: Mapped[str] = mapped_column(
        ForeignKey("books.id"),
        index=True,
        nullable=False,
    )

    imprint: Mapped[str] = mapped_column(
        String(IMPRINT_MAX_LENGTH),
        nullable=False,
        comment="Publisher and edition"
    )

    status: Mapped[str] = mapped_column(
        String(20),
        index=True,
        nullable=False,
        default=DEFAULT_STATUS.value,
    )

    due_back: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=date.today,
    )

    book: Mapped["Book"] = relationship(
        "Book",
        back_populates="instances",
    )

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self) -> str:
        return format_long(self.due_back, missing="")

    @property
    def due_back_ffmt(self) -> str:
        return format_form(self.due_back)

    def apply(self, session: Session, values: dict[str, Any]) -> None:
        """Copy validated form values onto the record, filling in defaults."""
        self.book_id = values["book"]
        self.imprint = values["imprint"]
        self.status = values.get("status") or DEFAULT_STATUS.value
        self.due_back = values.get("due_back") or date.today()

    def form_values(self) -> dict[str, Any]:
        return {
            "book": self.book_id,
            "imprint": self.imprint,
            "status": self.status,
            "due_back": self.due_back_ffmt,
        }

    def __repr__(self) -> str:
        return f"BookInstance(id={self.id}, imprint='{self.imprint}', status='{self.status}')"
