"""Book copy (BookInstance) form controller."""

from typing import Any

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import joinedload

from catalog.models import Book, BookInstance, BookStatus
from catalog.models.bookinstance import IMPRINT_MAX_LENGTH
from catalog.services.aggregation import Lookup
from catalog.services.forms import FormController
from catalog.services.validation import (
    Rule,
    ValidationResult,
    escape,
    is_iso8601,
    is_one_of,
    max_length,
    not_empty,
    to_date,
    trim,
)

BOOK_INSTANCE_RULES = (
    Rule("book", transforms=(trim,), predicate=not_empty, message="Specify Book"),
    Rule("book", transforms=(escape,)),
    Rule("imprint", transforms=(trim,), predicate=not_empty, message="Specify Imprint"),
    Rule("imprint", transforms=(escape,), predicate=max_length(IMPRINT_MAX_LENGTH),
         message=f"Imprint must be at most {IMPRINT_MAX_LENGTH} characters"),
    Rule("due_back", predicate=is_iso8601, message="Invalid Date", optional=True),
    Rule("due_back", transforms=(to_date,), optional=True),
    Rule("status", transforms=(trim,)),
    Rule("status", predicate=is_one_of(status.value for status in BookStatus),
         message="Invalid Status", optional=True),
)


class BookInstanceController(FormController):
    """Copies have no dependents; deleting one is never refused."""

    model = BookInstance
    label = "Book Instance"
    key = "bookinstance"
    list_url = "/catalog/bookinstances"
    rules = BOOK_INSTANCE_RULES
    order_by = (BookInstance.imprint,)
    list_load = (joinedload(BookInstance.book),)
    detail_load = (joinedload(BookInstance.book),)

    def reference_lookups(self) -> dict[str, Lookup]:
        return {"book_list": lambda: self.store.find(Book, order_by=[Book.title])}

    def detail_title(self, entity: BookInstance) -> str:
        return f"Copy: {entity.book.title}"

    async def check_references(self, result: ValidationResult) -> None:
        book = await run_in_threadpool(self.store.find_by_id, Book, result.values["book"])
        if book is None:
            result.add_error("book", "Book Not Found")

    def decorate_form(self, context: dict[str, Any], form: dict[str, Any]) -> None:
        context["selected_book"] = form.get("book")
        context["statuses"] = [status.value for status in BookStatus]
