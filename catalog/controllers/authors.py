"""Author form controller."""

from catalog.models import Author, Book
from catalog.services.aggregation import Lookup
from catalog.services.forms import FormController
from catalog.services.validation import (
    Rule,
    escape,
    is_alphanumeric,
    is_iso8601,
    length_between,
    not_empty,
    to_date,
    trim,
)

AUTHOR_RULES = (
    Rule("first_name", transforms=(trim,), predicate=not_empty,
         message="First Name Must Be Specified"),
    Rule("first_name", predicate=is_alphanumeric,
         message="First Name has non-alphanumeric characters"),
    Rule("first_name", predicate=length_between(1, 100),
         message="First Name must be at most 100 characters"),
    Rule("first_name", transforms=(escape,)),
    Rule("family_name", transforms=(trim,), predicate=not_empty,
         message="Family Name Must Be Specified"),
    Rule("family_name", predicate=is_alphanumeric,
         message="Family Name has non-alphanumeric characters"),
    Rule("family_name", predicate=length_between(1, 100),
         message="Family Name must be at most 100 characters"),
    Rule("family_name", transforms=(escape,)),
    Rule("date_of_birth", predicate=is_iso8601, message="Invalid Date Of Birth",
         optional=True),
    Rule("date_of_birth", transforms=(to_date,), optional=True),
    Rule("date_of_death", predicate=is_iso8601, message="Invalid Date Of Death",
         optional=True),
    Rule("date_of_death", transforms=(to_date,), optional=True),
)


class AuthorController(FormController):
    """An author can't be deleted while any book references it."""

    model = Author
    label = "Author"
    key = "author"
    list_url = "/catalog/authors"
    rules = AUTHOR_RULES
    dependents_key = "author_books"
    order_by = (Author.family_name, Author.first_name)

    def dependents_lookup(self, entity_id: str) -> Lookup:
        return lambda: self.store.find(
            Book, where=[Book.author_id == entity_id], order_by=[Book.title]
        )
