"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.

- get_store: the EntityStore built by create_app() (app.state.store)
- get_form_input: the submitted form as a plain dict; a field sent several
  times (checkbox groups) becomes a list
- *_controller: per-request controller instances bound to the store

Tests swap the store by building the app with their own Settings, or by
overriding get_store through app.dependency_overrides.
"""

from typing import Annotated, Any

from fastapi import Depends, Request

from catalog.controllers import (
    AuthorController,
    BookController,
    BookInstanceController,
    GenreController,
)
from catalog.services.store import EntityStore


def get_store(request: Request) -> EntityStore:
    return request.app.state.store


Store = Annotated[EntityStore, Depends(get_store)]


async def get_form_input(request: Request) -> dict[str, Any]:
    """
    Read a form-encoded body.

    Returns:
        Field name -> value, or list of values when the field repeats
    """
    form = await request.form()
    data: dict[str, Any] = {}
    for name in form.keys():
        values = form.getlist(name)
        data[name] = values if len(values) > 1 else values[0]
    return data


FormInput = Annotated[dict[str, Any], Depends(get_form_input)]


def get_author_controller(store: Store) -> AuthorController:
    return AuthorController(store)


def get_book_controller(store: Store) -> BookController:
    return BookController(store)


def get_genre_controller(store: Store) -> GenreController:
    return GenreController(store)


def get_book_instance_controller(store: Store) -> BookInstanceController:
    return BookInstanceController(store)
