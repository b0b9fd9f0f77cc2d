"""
Genre form controller.

Genre names are unique by convention only: creating a genre whose name is
already taken redirects to the existing genre instead of inserting a copy.
Renaming through the update form is not checked.
"""

from collections.abc import Mapping
from typing import Any

from fastapi.concurrency import run_in_threadpool

from catalog.models import Book, Genre
from catalog.models.genre import NAME_MAX_LENGTH, NAME_MIN_LENGTH
from catalog.services.aggregation import Lookup
from catalog.services.forms import FormController
from catalog.services.validation import (
    Rule,
    escape,
    length_between,
    max_length,
    not_empty,
    trim,
)

GENRE_RULES = (
    Rule("name", transforms=(trim,), predicate=not_empty,
         message="Genre Name Required"),
    Rule("name", predicate=length_between(NAME_MIN_LENGTH, NAME_MAX_LENGTH),
         message=f"Genre Name must be {NAME_MIN_LENGTH} to {NAME_MAX_LENGTH} characters"),
    Rule("name", transforms=(escape,), predicate=max_length(NAME_MAX_LENGTH),
         message=f"Genre Name must be at most {NAME_MAX_LENGTH} characters once escaped"),
)


class GenreController(FormController):
    model = Genre
    label = "Genre"
    key = "genre"
    list_url = "/catalog/genres"
    rules = GENRE_RULES
    dependents_key = "genre_books"
    order_by = (Genre.name,)

    def dependents_lookup(self, entity_id: str) -> Lookup:
        return lambda: self.store.find(
            Book, where=[Book.genres.any(Genre.id == entity_id)], order_by=[Book.title]
        )

    async def find_existing(self, values: Mapping[str, Any]) -> Genre | None:
        return await run_in_threadpool(
            self.store.find_one, Genre, where=[Genre.name == values["name"]]
        )
