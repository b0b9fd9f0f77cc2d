"""
Book form controller.

The genre checkboxes share one field name, so the browser submits zero, one
or many "genre" values. normalize() always turns them into a de-duplicated
list before the rules run.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import joinedload, selectinload

from catalog.models import Author, Book, BookInstance, Genre
from catalog.models.book import ISBN_MAX_LENGTH, TITLE_MAX_LENGTH
from catalog.services.aggregation import Lookup
from catalog.services.forms import FormController
from catalog.services.validation import (
    Rule,
    ValidationResult,
    as_list,
    escape,
    max_length,
    not_empty,
    trim,
)

BOOK_RULES = (
    Rule("title", transforms=(trim,), predicate=not_empty, message="Specify Book Title"),
    Rule("title", transforms=(escape,), predicate=max_length(TITLE_MAX_LENGTH),
         message=f"Title must be at most {TITLE_MAX_LENGTH} characters"),
    Rule("author", transforms=(trim,), predicate=not_empty, message="Specify Author Name"),
    Rule("author", transforms=(escape,)),
    Rule("summary", transforms=(trim,), predicate=not_empty, message="Specify Book Summary"),
    Rule("summary", transforms=(escape,)),
    Rule("isbn", transforms=(trim,), predicate=not_empty, message="Specify Book ISBN"),
    Rule("isbn", transforms=(escape,), predicate=max_length(ISBN_MAX_LENGTH),
         message=f"ISBN must be at most {ISBN_MAX_LENGTH} characters"),
    Rule("genre", transforms=(trim, escape), many=True),
)


class BookController(FormController):
    """A book can't be deleted while any copy of it exists."""

    model = Book
    label = "Book"
    key = "book"
    list_url = "/catalog/books"
    rules = BOOK_RULES
    dependents_key = "book_instances"
    order_by = (Book.title,)
    list_load = (joinedload(Book.author),)
    detail_load = (joinedload(Book.author), selectinload(Book.genres))
    form_load = (selectinload(Book.genres),)

    def normalize(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        data = dict(raw)
        data["genre"] = list(dict.fromkeys(as_list(raw, "genre")))
        return data

    def reference_lookups(self) -> dict[str, Lookup]:
        return {
            "authors": lambda: self.store.find(
                Author, order_by=[Author.family_name, Author.first_name]
            ),
            "genres": lambda: self.store.find(Genre, order_by=[Genre.name]),
        }

    def dependents_lookup(self, entity_id: str) -> Lookup:
        return lambda: self.store.find(
            BookInstance,
            where=[BookInstance.book_id == entity_id],
            order_by=[BookInstance.imprint],
        )

    def detail_title(self, entity: Book) -> str:
        return entity.title

    async def check_references(self, result: ValidationResult) -> None:
        author_id = result.values["author"]
        genre_ids = result.values["genre"]
        found = await self._gather(
            {
                "author": lambda: self.store.find_by_id(Author, author_id),
                "genres": lambda: self.store.find(Genre, where=[Genre.id.in_(genre_ids)]),
            }
        )
        if found["author"] is None:
            result.add_error("author", "Author Not Found")
        if len(found["genres"]) != len(genre_ids):
            result.add_error("genre", "Genre Not Found")

    def decorate_form(self, context: dict[str, Any], form: dict[str, Any]) -> None:
        context["checked_genres"] = set(form.get("genre") or [])
