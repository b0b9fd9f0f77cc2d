"""
Form Validation Rules

Form fields are validated by an ordered table of Rule records, evaluated by
validate(). Each entity controller declares its own table, for example:

    AUTHOR_RULES = (
        Rule("first_name", transforms=(trim,), predicate=not_empty,
             message="First Name Must Be Specified"),
        Rule("first_name", predicate=is_alphanumeric,
             message="First Name has non-alphanumeric characters"),
        Rule("first_name", transforms=(escape,)),
        Rule("date_of_birth", predicate=is_iso8601,
             message="Invalid Date Of Birth", optional=True),
        Rule("date_of_birth", transforms=(to_date,), optional=True),
    )

Evaluation Semantics
====================
1. Each field's raw value is read once. List values (multi-select inputs)
   are transformed element by element.
2. Rules run in table order. Transforms run first, then the predicate.
3. Once a predicate fails for a field, later predicates for that field are
   skipped, but later transforms still run so the value shown back to the
   user is sanitized.
4. Every field is checked: errors from all fields are collected.
5. An optional rule skips falsy values (missing or ""), which normalize
   to None.
6. Only fields with a `many` rule may hold a list. Any other field sent
   several times fails with "Invalid value" and keeps its first value.
"""

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

Transform = Callable[[Any], Any]
Predicate = Callable[[Any], bool]

MULTIPLE_VALUES_MESSAGE = "Invalid value"


# =============================================================================
# Rule Records
# =============================================================================
@dataclass(frozen=True)
class Rule:
    """
    One step of a field's validation chain.

    Attributes:
        field: Form field the rule applies to
        transforms: Sanitizers applied to the value, in order
        predicate: Check run after the transforms (None: sanitize only)
        message: Error message reported when the predicate fails
        optional: Skip the rule when the value is falsy
        many: The field may carry several values (checkbox groups)
    """

    field: str
    transforms: tuple[Transform, ...] = ()
    predicate: Predicate | None = None
    message: str = "Invalid value"
    optional: bool = False
    many: bool = False


@dataclass(frozen=True)
class FieldError:
    """A failed rule: which field, what to tell the user, what was submitted."""

    field: str
    message: str
    value: Any = None

    # Templates read errors as mappings ({{ error.msg }})
    @property
    def msg(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    """Normalized values plus the errors collected while producing them."""

    values: dict[str, Any] = field(default_factory=dict)
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_for(self, name: str) -> list[FieldError]:
        return [error for error in self.errors if error.field == name]

    def add_error(self, name: str, message: str) -> None:
        self.errors.append(FieldError(name, message, self.values.get(name)))


# =============================================================================
# Transforms
# =============================================================================
# Same entity table as the common validator.js escape()
_ESCAPES = {
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
}
_ESCAPE_RE = re.compile("|".join(re.escape(char) for char in _ESCAPES))


def trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def escape(value: Any) -> Any:
    """Replace HTML-significant characters with entities."""
    if not isinstance(value, str):
        return value
    return _ESCAPE_RE.sub(lambda match: _ESCAPES[match.group(0)], value)


def parse_iso8601(value: str) -> date | None:
    """Parse an ISO 8601 date or datetime string, None if it isn't one."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def to_date(value: Any) -> Any:
    """Convert an ISO 8601 string to a date; leave anything else untouched."""
    if isinstance(value, str):
        parsed = parse_iso8601(value.strip())
        if parsed is not None:
            return parsed
    return value


# =============================================================================
# Predicates
# =============================================================================
_ALPHANUMERIC_RE = re.compile(r"^[0-9A-Za-z]+$")


def not_empty(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None and value != []


def is_alphanumeric(value: Any) -> bool:
    return isinstance(value, str) and bool(_ALPHANUMERIC_RE.match(value))


def is_iso8601(value: Any) -> bool:
    if isinstance(value, date):
        return True
    return isinstance(value, str) and parse_iso8601(value.strip()) is not None


def length_between(minimum: int, maximum: int) -> Predicate:
    def check(value: Any) -> bool:
        return isinstance(value, str) and minimum <= len(value) <= maximum

    return check


def max_length(maximum: int) -> Predicate:
    """At most `maximum` characters; checked after escape() it bounds the stored text."""

    def check(value: Any) -> bool:
        return isinstance(value, str) and len(value) <= maximum

    return check


def is_one_of(choices: Iterable[str]) -> Predicate:
    allowed = frozenset(choices)

    def check(value: Any) -> bool:
        return value in allowed

    return check


# =============================================================================
# Input Normalization
# =============================================================================
def as_list(raw: Mapping[str, Any], name: str) -> list[Any]:
    """
    Read a multi-valued field as a list.

    Browsers send zero, one or many values under the same name:
    absent -> [], scalar -> [value], list -> list.
    """
    value = raw.get(name)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _is_falsy(value: Any) -> bool:
    return value is None or value == "" or value == []


def _apply(transform: Transform, value: Any) -> Any:
    if isinstance(value, list):
        return [transform(item) for item in value]
    return transform(value)


# =============================================================================
# Interpreter
# =============================================================================
def validate(raw: Mapping[str, Any], rules: Iterable[Rule]) -> ValidationResult:
    """
    Run a rule table against raw form input.

    Args:
        raw: Field name -> submitted string (or list of strings)
        rules: Ordered rule table

    Returns:
        ValidationResult with normalized values for every field named in the
        table and the errors in the order they were found
    """
    rules = tuple(rules)
    many = {rule.field for rule in rules if rule.many}
    result = ValidationResult()
    failed: set[str] = set()

    for rule in rules:
        name = rule.field
        if name not in result.values:
            value = raw.get(name)
            if isinstance(value, (list, tuple)) and name not in many:
                # A single-valued field submitted several times
                failed.add(name)
                result.errors.append(FieldError(name, MULTIPLE_VALUES_MESSAGE, value))
                value = value[0] if value else None
            result.values[name] = value
        value = result.values[name]

        if rule.optional and _is_falsy(value):
            result.values[name] = None
            continue

        for transform in rule.transforms:
            value = _apply(transform, value)
        result.values[name] = value

        if rule.predicate is None or name in failed:
            continue
        if not rule.predicate(value):
            failed.add(name)
            result.errors.append(FieldError(name, rule.message, value))

    return result
