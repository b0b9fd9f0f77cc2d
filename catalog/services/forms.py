"""
Form Controller Pipeline

Every entity (Author, Book, Genre, BookInstance) goes through the same
request flows. FormController implements them once; each entity subclasses
it and fills in a few class attributes and hooks.

Flows:
=====
    list_all      all records, sorted
    detail        record + related records          (missing -> NotFound)
    create_get    empty form + reference data
    create_post   validate -> Render(form, errors) | persist -> Redirect(url)
    update_get    pre-filled form + reference data  (missing -> NotFound)
    update_post   like create_post, but keeps the id and replaces the record
    delete_get    record + blocking dependents      (missing -> Redirect(list))
    delete_post   dependents? Render(confirm) : delete -> Redirect(list)

Controllers never build HTTP responses. They return an outcome, either
Render(template, context) or Redirect(location), and routers hand it to the
view renderer. Validation failures and blocked deletes are ordinary Render
outcomes; only NotFound and StoreFailure are raised.

Entity hooks:
============
    normalize(raw)            reshape raw form input before validation
    reference_lookups()       choices the form needs (e.g. all authors)
    dependents_lookup(id)     records that block deleting the entity
    detail_lookups(id)        extra records shown on the detail page
    check_references(result)  add errors for ids that don't resolve
    find_existing(values)     an equivalent record to redirect to instead
    decorate_form(ctx, form)  mark selected choices for re-rendering
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar

from fastapi.concurrency import run_in_threadpool

from catalog.database import Base
from catalog.exceptions import NotFound
from catalog.services.aggregation import Lookup, gather_named
from catalog.services.store import EntityStore
from catalog.services.validation import FieldError, Rule, ValidationResult, validate
from catalog.utils.dates import format_form

logger = logging.getLogger(__name__)


# =============================================================================
# Outcomes
# =============================================================================
@dataclass
class Render:
    """Render `template` with `context` (a plain mapping)."""

    template: str
    context: dict[str, Any] = field(default_factory=dict)
    status_code: int = 200


@dataclass
class Redirect:
    """Send the browser to `location`."""

    location: str


Outcome = Render | Redirect


# =============================================================================
# Form Controller
# =============================================================================
class FormController:
    """
    Generic create/read/update/delete flows for one entity type.

    Subclasses set:
        model: SQLAlchemy model class
        label: Human-readable name used in titles ("Author")
        key: Context key and template prefix ("author" -> author_form.html)
        list_url: Where deletes redirect to
        rules: Validation rule table
        dependents_key: Context key of the records blocking a delete
        order_by / list_load / detail_load / form_load: store query options
    """

    model: ClassVar[type[Base]]
    label: ClassVar[str]
    key: ClassVar[str]
    list_url: ClassVar[str]
    rules: ClassVar[tuple[Rule, ...]] = ()
    dependents_key: ClassVar[str | None] = None
    order_by: ClassVar[tuple[Any, ...]] = ()
    list_load: ClassVar[tuple[Any, ...]] = ()
    detail_load: ClassVar[tuple[Any, ...]] = ()
    form_load: ClassVar[tuple[Any, ...]] = ()

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------
    def normalize(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        return dict(raw)

    def reference_lookups(self) -> dict[str, Lookup]:
        return {}

    def dependents_lookup(self, entity_id: str) -> Lookup | None:
        return None

    def detail_lookups(self, entity_id: str) -> dict[str, Lookup]:
        lookups = {}
        dependents = self.dependents_lookup(entity_id)
        if dependents is not None:
            lookups[self.dependents_key] = dependents
        return lookups

    def detail_title(self, entity: Any) -> str:
        return f"{self.label} Detail"

    async def check_references(self, result: ValidationResult) -> None:
        return None

    async def find_existing(self, values: Mapping[str, Any]) -> Any | None:
        return None

    def decorate_form(self, context: dict[str, Any], form: dict[str, Any]) -> None:
        return None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    @property
    def timeout(self) -> float:
        return self.store.read_timeout

    def _find(self, entity_id: str, load: tuple[Any, ...] = ()) -> Lookup:
        return lambda: self.store.find_by_id(self.model, entity_id, load=load)

    async def _gather(self, lookups: Mapping[str, Lookup]) -> dict[str, Any]:
        return await gather_named(lookups, timeout=self.timeout)

    @staticmethod
    def _form(values: Mapping[str, Any], entity_id: str | None = None) -> dict[str, Any]:
        """Turn normalized values into what form inputs display."""
        form: dict[str, Any] = {"id": entity_id}
        for name, value in values.items():
            if value is None or isinstance(value, date):
                value = format_form(value)
            form[name] = value
        return form

    async def _render_form(
        self,
        title: str,
        form: dict[str, Any] | None,
        errors: list[FieldError] | None = None,
        references: dict[str, Any] | None = None,
    ) -> Render:
        if references is None:
            references = await self._gather(self.reference_lookups())
        context: dict[str, Any] = {
            "title": title,
            self.key: form,
            "errors": errors or [],
            **references,
        }
        self.decorate_form(context, form or {})
        return Render(f"{self.key}_form.html", context)

    # -------------------------------------------------------------------------
    # Read Flows
    # -------------------------------------------------------------------------
    async def list_all(self) -> Render:
        records = await run_in_threadpool(
            self.store.find, self.model, order_by=self.order_by, load=self.list_load
        )
        return Render(
            f"{self.key}_list.html",
            {"title": f"{self.label} List", f"{self.key}_list": records},
        )

    async def detail(self, entity_id: str) -> Render:
        results = await self._gather(
            {
                self.key: self._find(entity_id, self.detail_load),
                **self.detail_lookups(entity_id),
            }
        )
        entity = results[self.key]
        if entity is None:
            raise NotFound(self.label, entity_id)
        return Render(
            f"{self.key}_detail.html",
            {"title": self.detail_title(entity), **results},
        )

    # -------------------------------------------------------------------------
    # Create Flows
    # -------------------------------------------------------------------------
    async def create_get(self) -> Render:
        return await self._render_form(f"Create {self.label}", None)

    async def create_post(self, raw: Mapping[str, Any]) -> Outcome:
        result = await self._validate(raw)
        if not result.ok:
            return await self._render_form(
                f"Create {self.label}", self._form(result.values), result.errors
            )

        existing = await self.find_existing(result.values)
        if existing is not None:
            logger.info(f"{self.label} already exists as {existing.id}")
            return Redirect(existing.url)

        entity = await run_in_threadpool(self.store.create, self.model, result.values)
        return Redirect(entity.url)

    # -------------------------------------------------------------------------
    # Update Flows
    # -------------------------------------------------------------------------
    async def update_get(self, entity_id: str) -> Render:
        results = await self._gather(
            {self.key: self._find(entity_id, self.form_load), **self.reference_lookups()}
        )
        entity = results.pop(self.key)
        if entity is None:
            raise NotFound(self.label, entity_id)
        return await self._render_form(
            f"Update {self.label}",
            self._form(entity.form_values(), entity.id),
            references=results,
        )

    async def update_post(self, entity_id: str, raw: Mapping[str, Any]) -> Outcome:
        result = await self._validate(raw)
        if not result.ok:
            # Re-rendered from the submission, the stored record isn't re-read
            return await self._render_form(
                f"Update {self.label}", self._form(result.values, entity_id), result.errors
            )

        entity = await run_in_threadpool(
            self.store.replace, self.model, entity_id, result.values
        )
        if entity is None:
            raise NotFound(self.label, entity_id)
        return Redirect(entity.url)

    async def _validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        result = validate(self.normalize(raw), self.rules)
        if result.ok:
            await self.check_references(result)
        if not result.ok:
            logger.debug(
                f"{self.label} form rejected: "
                + ", ".join(f"{error.field}: {error.message}" for error in result.errors)
            )
        return result

    # -------------------------------------------------------------------------
    # Delete Flows
    # -------------------------------------------------------------------------
    async def _load_for_delete(self, entity_id: str) -> dict[str, Any]:
        lookups = {self.key: self._find(entity_id, self.detail_load)}
        dependents = self.dependents_lookup(entity_id)
        if dependents is not None:
            lookups[self.dependents_key] = dependents
        return await self._gather(lookups)

    def _confirm(self, results: dict[str, Any]) -> Render:
        return Render(
            f"{self.key}_delete.html",
            {"title": f"Delete {self.label}", **results},
        )

    async def delete_get(self, entity_id: str) -> Outcome:
        results = await self._load_for_delete(entity_id)
        if results[self.key] is None:
            return Redirect(self.list_url)
        return self._confirm(results)

    async def delete_post(self, entity_id: str) -> Outcome:
        results = await self._load_for_delete(entity_id)
        if self.dependents_key and results.get(self.dependents_key):
            logger.info(
                f"Refused to delete {self.label} {entity_id}: "
                f"{len(results[self.dependents_key])} dependent record(s)"
            )
            return self._confirm(results)

        await run_in_threadpool(self.store.delete, self.model, entity_id)
        return Redirect(self.list_url)
